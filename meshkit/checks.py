"""Consistency checks for halfedge meshes."""

from __future__ import annotations

from typing import Optional

from .halfedge import Element, HalfedgeMesh, MeshError
from .vecmath import Vec3


class ValidationError(MeshError):
    """A mesh failed validation; ``element`` is where the problem was found."""

    def __init__(self, element: Element, message: str) -> None:
        super().__init__(message)
        self.element = element
        self.message = message


def _check_positions(mesh: HalfedgeMesh) -> None:
    for v in mesh.vertices:
        if not v.pos.is_finite():
            raise ValidationError(v, "A vertex position was set to a non-finite value.")


def _check_halfedges(mesh: HalfedgeMesh) -> None:
    erased = mesh.erased
    live = [h for h in mesh.halfedges if h not in erased]
    referenced: set = set()

    for h in live:
        for ref, name in (
            (h.next, "next"),
            (h.twin, "twin"),
            (h.vertex, "vertex"),
            (h.face, "face"),
            (h.edge, "edge"),
        ):
            if ref in erased:
                raise ValidationError(h, f"A live halfedge's {name} was erased!")
        if h.next in referenced:
            raise ValidationError(h.next, "A halfedge is the next of multiple halfedges!")
        referenced.add(h.next)

    for h in live:
        if h not in referenced:
            raise ValidationError(h, "A halfedge is the next of zero halfedges!")
        if h.twin is h:
            raise ValidationError(h, "A halfedge's twin is itself!")
        if h.twin.twin is not h:
            raise ValidationError(h, "A halfedge's twin's twin is not itself!")


def _check_vertices(mesh: HalfedgeMesh) -> None:
    erased = mesh.erased
    for v in mesh.vertices:
        if v in erased:
            continue
        start = v.halfedge
        if start in erased:
            raise ValidationError(v, "A vertex's halfedge is erased!")
        h = start
        while True:
            if h.vertex is not v:
                raise ValidationError(h, "A vertex's halfedge does not point to that vertex!")
            h = h.twin.next
            if h is start:
                break


def _check_edges(mesh: HalfedgeMesh) -> None:
    erased = mesh.erased
    for e in mesh.edges:
        if e in erased:
            continue
        start = e.halfedge
        if start in erased:
            raise ValidationError(e, "An edge's halfedge is erased!")
        for h in (start, start.twin):
            if h.edge is not e:
                raise ValidationError(h, "An edge's halfedge does not point to that edge!")


def _check_faces(mesh: HalfedgeMesh) -> None:
    erased = mesh.erased
    for f in mesh.faces:
        if f in erased:
            continue
        start = f.halfedge
        if start in erased:
            raise ValidationError(f, "A face's halfedge is erased!")
        h = start
        while True:
            if h.face is not f:
                raise ValidationError(h, "A face's halfedge does not point to that face!")
            h = h.next
            if h is start:
                break


def validate(mesh: HalfedgeMesh) -> None:
    """Check the mesh's connectivity, raising :class:`ValidationError` on failure.

    Elements marked for erasure are ignored during the checks; when every
    check passes they are removed from the mesh.
    """
    _check_positions(mesh)
    _check_halfedges(mesh)
    _check_vertices(mesh)
    _check_edges(mesh)
    _check_faces(mesh)
    mesh.do_erase()


def warnings(mesh: HalfedgeMesh) -> Optional[tuple[Element, str]]:
    """Return the first suspicious element and a description, or None."""
    seen_positions: set[Vec3] = set()
    for v in mesh.vertices:
        if v.pos in seen_positions:
            return v, "Vertices with identical positions."
        seen_positions.add(v.pos)

    seen_pairs: set[tuple[int, int]] = set()
    for e in mesh.edges:
        left = e.halfedge.vertex.id
        right = e.halfedge.twin.vertex.id
        if left == right:
            return e, "Edge wrapping single vertex."
        if (left, right) in seen_pairs:
            return e, "Multiple edges across same vertices."
        seen_pairs.add((left, right))
        seen_pairs.add((right, left))

    return None