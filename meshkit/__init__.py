"""Halfedge polygon meshes, procedural primitives and keyframe tracks."""

__version__ = "0.1.0"