"""Conversion between halfedge meshes and indexed triangle meshes."""

from __future__ import annotations

from .build import from_poly
from .checks import validate
from .halfedge import Face, HalfedgeMesh, Vertex
from .primitives import MeshData, MeshVertex
from .vecmath import Vec3


def _face_vertices(face: Face) -> list[Vertex]:
    verts: list[Vertex] = []
    h = face.halfedge
    while True:
        verts.append(h.vertex)
        h = h.next
        if h is face.halfedge:
            return verts


def _fan(count: int) -> list[tuple[int, int, int]]:
    """Triangle fan over a polygon of ``count`` corners, anchored at corner 0."""
    return [(0, j, j + 1) for j in range(1, count - 1)]


def to_mesh(mesh: HalfedgeMesh, split_faces: bool) -> MeshData:
    """Triangulate the mesh's non-boundary faces into a renderable mesh.

    With ``split_faces`` every triangle gets its own three vertices carrying a
    flat normal and the face id; otherwise vertices are shared, carry smooth
    vertex normals and the vertex id.
    """
    sign = -1.0 if mesh.flip_orientation else 1.0
    verts: list[MeshVertex] = []
    elems: list[int] = []

    if split_faces:
        for face in mesh.faces:
            if face.boundary:
                continue
            corners = [v.pos for v in _face_vertices(face)]
            for a, b, c in _fan(len(corners)):
                v0, v1, v2 = corners[a], corners[b], corners[c]
                n = (v1 - v0).cross(v2 - v0).unit() * sign
                base = len(verts)
                verts.extend(MeshVertex(p, n, face.id) for p in (v0, v1, v2))
                elems.extend((base, base + 1, base + 2))
    else:
        index_of: dict[Vertex, int] = {}
        for i, v in enumerate(mesh.vertices):
            index_of[v] = i
            verts.append(MeshVertex(v.pos, v.normal() * sign, v.id))
        for face in mesh.faces:
            if face.boundary:
                continue
            corners = [index_of[v] for v in _face_vertices(face)]
            for a, b, c in _fan(len(corners)):
                elems.extend((corners[a], corners[b], corners[c]))

    return MeshData(verts, elems)


def from_mesh(data: MeshData) -> HalfedgeMesh:
    """Build a halfedge mesh from a triangle mesh, dropping degenerate triangles.

    Vertices are not de-duplicated, so shared corners must already share an
    index.  Raises :class:`~meshkit.halfedge.MeshError` on bad connectivity.
    """
    idx = data.elems
    polygons = [
        [idx[i], idx[i + 1], idx[i + 2]]
        for i in range(0, len(idx) - 2, 3)
        if idx[i] != idx[i + 1] and idx[i] != idx[i + 2] and idx[i + 1] != idx[i + 2]
    ]
    positions: list[Vec3] = [v.pos for v in data.verts]
    mesh = from_poly(polygons, positions)
    validate(mesh)
    return mesh