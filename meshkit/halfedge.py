"""Halfedge data structure for manifold, oriented polygon meshes.

Every edge owns two halfedges pointing in opposite directions.  Each halfedge
knows its twin, the next halfedge around its face, the vertex it leaves from,
its edge and its face.  Boundary loops are stored as faces flagged as
``boundary``.
"""

from __future__ import annotations

import copy as _copy
from itertools import chain
from typing import Callable, Iterator, Optional, Union

from .vecmath import Vec3

FIRST_ID = 0


class MeshError(Exception):
    """Raised when a mesh's connectivity is inconsistent."""


def _orbit(start: "Halfedge", step: Callable[["Halfedge"], "Halfedge"]) -> Iterator["Halfedge"]:
    """Yield ``start`` and its successors under ``step`` until the loop closes."""
    h = start
    while True:
        yield h
        h = step(h)
        if h is start:
            return


def _around_face(start: "Halfedge") -> Iterator["Halfedge"]:
    return _orbit(start, lambda h: h.next)


def _around_vertex(start: "Halfedge") -> Iterator["Halfedge"]:
    return _orbit(start, lambda h: h.twin.next)


class Vertex:
    """A mesh vertex; ``halfedge`` is one of the halfedges leaving it."""

    __slots__ = ("id", "pos", "halfedge", "new_pos", "is_new")

    def __init__(self, id: int) -> None:
        self.id = id
        self.pos = Vec3()
        self.halfedge: Optional[Halfedge] = None
        self.new_pos = Vec3()
        self.is_new = False

    def on_boundary(self) -> bool:
        """Whether any halfedge around the vertex lies in a boundary loop."""
        return any(h.is_boundary() for h in _around_vertex(self.halfedge))

    def degree(self) -> int:
        """Number of non-boundary faces around the vertex."""
        return sum(1 for h in _around_vertex(self.halfedge) if not h.face.boundary)

    def normal(self) -> Vec3:
        """Area-weighted normal at the vertex."""
        pi = self.pos
        if self.on_boundary():
            loop = _orbit(self.halfedge, lambda h: h.next.twin)
        else:
            loop = _around_vertex(self.halfedge)
        n = Vec3()
        for h in loop:
            pj = h.next.vertex.pos
            pk = h.next.next.vertex.pos
            n = n + (pj - pi).cross(pk - pi)
        return n.unit()

    def center(self) -> Vec3:
        return self.pos

    def neighborhood_center(self) -> Vec3:
        """Average position of the vertex's neighbours."""
        total = Vec3()
        count = 0
        for h in _around_vertex(self.halfedge):
            total = total + h.next.vertex.pos
            count += 1
        return total / count


class Edge:
    """A mesh edge; ``halfedge`` is one of its two halfedges."""

    __slots__ = ("id", "halfedge", "new_pos", "is_new")

    def __init__(self, id: int) -> None:
        self.id = id
        self.halfedge: Optional[Halfedge] = None
        self.new_pos = Vec3()
        self.is_new = False

    def on_boundary(self) -> bool:
        return self.halfedge.is_boundary() or self.halfedge.twin.is_boundary()

    def center(self) -> Vec3:
        return 0.5 * (self.halfedge.vertex.pos + self.halfedge.twin.vertex.pos)

    def normal(self) -> Vec3:
        """Average of the normals of the faces on either side."""
        return (self.halfedge.face.normal() + self.halfedge.twin.face.normal()).unit()

    def length(self) -> float:
        return (self.halfedge.vertex.pos - self.halfedge.twin.vertex.pos).norm()


class Face:
    """A polygon or, when ``boundary`` is set, a boundary loop."""

    __slots__ = ("id", "halfedge", "boundary", "new_pos")

    def __init__(self, id: int, boundary: bool = False) -> None:
        self.id = id
        self.halfedge: Optional[Halfedge] = None
        self.boundary = boundary
        self.new_pos = Vec3()

    def center(self) -> Vec3:
        """Centroid of the face's vertices."""
        total = Vec3()
        count = 0
        for h in _around_face(self.halfedge):
            total = total + h.vertex.pos
            count += 1
        return total / count

    def normal(self) -> Vec3:
        """Unit normal following the face's orientation."""
        n = Vec3()
        for h in _around_face(self.halfedge):
            n = n + h.vertex.pos.cross(h.next.vertex.pos)
        return n.unit()

    def degree(self) -> int:
        return sum(1 for _ in _around_face(self.halfedge))


class Halfedge:
    """One side of an edge, oriented along its face."""

    __slots__ = ("id", "twin", "next", "vertex", "edge", "face")

    def __init__(self, id: int) -> None:
        self.id = id
        self.twin: Optional[Halfedge] = None
        self.next: Optional[Halfedge] = None
        self.vertex: Optional[Vertex] = None
        self.edge: Optional[Edge] = None
        self.face: Optional[Face] = None

    def is_boundary(self) -> bool:
        """Whether this halfedge lies inside a boundary loop."""
        return self.face.boundary

    def set_neighbors(self, next: "Halfedge", twin: "Halfedge", vertex: Vertex,
                      edge: Edge, face: Face) -> None:
        self.next = next
        self.twin = twin
        self.vertex = vertex
        self.edge = edge
        self.face = face


Element = Union[Vertex, Edge, Face, Halfedge]


class HalfedgeMesh:
    """Owns the element lists of a halfedge mesh.

    Erased elements stay in their lists until :meth:`do_erase` is called, so
    dangling references can still be detected.
    """

    def __init__(self) -> None:
        self.vertices: list[Vertex] = []
        self.edges: list[Edge] = []
        self.faces: list[Face] = []
        self.halfedges: list[Halfedge] = []
        self.erased: set[Element] = set()
        self.render_dirty = False
        self.flip_orientation = False
        self._next_id = FIRST_ID

    def _take_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    def clear(self) -> None:
        """Remove every element and restart id allocation."""
        self.vertices.clear()
        self.edges.clear()
        self.faces.clear()
        self.halfedges.clear()
        self.erased.clear()
        self.render_dirty = True
        self._next_id = FIRST_ID

    def new_vertex(self) -> Vertex:
        v = Vertex(self._take_id())
        self.vertices.append(v)
        return v

    def new_edge(self) -> Edge:
        e = Edge(self._take_id())
        self.edges.append(e)
        return e

    def new_face(self, boundary: bool = False) -> Face:
        f = Face(self._take_id(), boundary)
        self.faces.append(f)
        return f

    def new_halfedge(self) -> Halfedge:
        h = Halfedge(self._take_id())
        self.halfedges.append(h)
        return h

    def erase(self, element: Element) -> None:
        """Mark an element for removal at the next :meth:`do_erase`."""
        if not isinstance(element, (Vertex, Edge, Face, Halfedge)):
            raise TypeError(f"cannot erase {type(element).__name__}")
        self.erased.add(element)

    def do_erase(self) -> None:
        """Remove all elements marked by :meth:`erase` from the element lists."""
        if not self.erased:
            return
        gone = self.erased
        self.vertices = [v for v in self.vertices if v not in gone]
        self.edges = [e for e in self.edges if e not in gone]
        self.faces = [f for f in self.faces if f not in gone]
        self.halfedges = [h for h in self.halfedges if h not in gone]
        self.erased = set()

    def has_boundary(self) -> bool:
        return any(f.boundary for f in self.faces)

    def n_boundaries(self) -> int:
        return sum(1 for f in self.faces if f.boundary)

    def copy(self, eid: Optional[int] = None) -> tuple["HalfedgeMesh", Optional[Element]]:
        """Deep-copy the mesh after applying pending erasures.

        Returns the copy and the copied element whose id is ``eid`` (or None).
        """
        self.do_erase()
        clone = HalfedgeMesh()
        mapping: dict[Element, Element] = {}
        found: Optional[Element] = None

        groups = (
            (self.halfedges, clone.halfedges),
            (self.vertices, clone.vertices),
            (self.edges, clone.edges),
            (self.faces, clone.faces),
        )
        for source, target in groups:
            for old in source:
                new = _copy.copy(old)
                target.append(new)
                mapping[old] = new
                if eid is not None and old.id == eid:
                    found = new

        def remap(ref):
            if ref is None:
                return None
            try:
                return mapping[ref]
            except KeyError:
                raise MeshError(
                    f"element {ref.id} is referenced but not part of the mesh"
                ) from None

        for h in clone.halfedges:
            h.next = remap(h.next)
            h.twin = remap(h.twin)
            h.vertex = remap(h.vertex)
            h.edge = remap(h.edge)
            h.face = remap(h.face)
        for owner in chain(clone.vertices, clone.edges, clone.faces):
            owner.halfedge = remap(owner.halfedge)

        clone.render_dirty = True
        clone._next_id = self._next_id
        return clone, found

    def normal_of(self, element: Element) -> Vec3:
        """Normal of any element, negated when the mesh orientation is flipped."""
        if isinstance(element, (Vertex, Edge, Face)):
            n = element.normal()
        elif isinstance(element, Halfedge):
            n = element.edge.normal()
        else:
            raise TypeError(f"no normal for {type(element).__name__}")
        return -n if self.flip_orientation else n

    def center_of(self, element: Element) -> Vec3:
        """Center of any element; a halfedge reports its edge's center."""
        if isinstance(element, (Vertex, Edge, Face)):
            return element.center()
        if isinstance(element, Halfedge):
            return element.edge.center()
        raise TypeError(f"no center for {type(element).__name__}")

    def flip(self) -> None:
        self.flip_orientation = not self.flip_orientation

    def mark_dirty(self) -> None:
        self.render_dirty = True