"""Construction of halfedge meshes from indexed polygon lists."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .halfedge import Halfedge, HalfedgeMesh, MeshError, Vertex
from .vecmath import Vec3

_NONMANIFOLD = "At least one of the vertices is nonmanifold."


def _as_vec3(value) -> Vec3:
    return value if isinstance(value, Vec3) else Vec3(*value)


def _check_polygons(
    mesh: HalfedgeMesh, polygons: Sequence[Sequence[int]]
) -> tuple[dict[int, Vertex], dict[Vertex, int]]:
    """Allocate one vertex per distinct index and count the polygons using each."""
    index_to_vertex: dict[int, Vertex] = {}
    vertex_degree: dict[Vertex, int] = {}

    for polygon in polygons:
        if len(polygon) < 3:
            raise MeshError("Each polygon must have at least three vertices.")

        for index in polygon:
            vertex = index_to_vertex.get(index)
            if vertex is None:
                vertex = mesh.new_vertex()
                index_to_vertex[index] = vertex
                vertex_degree[vertex] = 1
            else:
                vertex_degree[vertex] += 1

        if len(set(polygon)) < len(polygon):
            listed = " ".join(str(i) for i in polygon)
            raise MeshError(
                "One of the input polygons does not have distinct vertices!\n"
                f"(vertex indices: {listed})"
            )

    return index_to_vertex, vertex_degree


def _link_polygons(
    mesh: HalfedgeMesh,
    polygons: Sequence[Sequence[int]],
    index_to_vertex: dict[int, Vertex],
) -> None:
    """Create the interior halfedges, pairing twins and allocating shared edges."""
    faces = [mesh.new_face() for _ in polygons]
    pair_to_halfedge: dict[tuple[int, int], Halfedge] = {}

    for polygon, face in zip(polygons, faces):
        face_halfedges: list[Halfedge] = []
        for a, b in zip(polygon, list(polygon[1:]) + [polygon[0]]):
            if (a, b) in pair_to_halfedge:
                raise MeshError(
                    f"Found multiple oriented edges with indices ({a}, {b}).\n"
                    "This means that either (i) more than two faces contain this "
                    "edge (hence the surface is nonmanifold), or\n"
                    "(ii) there are exactly two faces containing this edge, but "
                    "they have the same orientation (hence the surface is\n"
                    "not consistently oriented."
                )
            hab = mesh.new_halfedge()
            pair_to_halfedge[(a, b)] = hab
            hab.face = face
            face.halfedge = hab
            hab.vertex = index_to_vertex[a]
            hab.vertex.halfedge = hab
            face_halfedges.append(hab)

            hba = pair_to_halfedge.get((b, a))
            if hba is not None:
                hab.twin = hba
                hba.twin = hab
                edge = mesh.new_edge()
                hab.edge = edge
                hba.edge = edge
                edge.halfedge = hab
            else:
                hab.twin = None

        for h, nxt in zip(face_halfedges, face_halfedges[1:] + face_halfedges[:1]):
            h.next = nxt


def _point_boundary_vertices_at_boundary(mesh: HalfedgeMesh) -> None:
    """Move each boundary vertex's halfedge to one that has no twin yet."""
    for vertex in mesh.vertices:
        start = vertex.halfedge
        if start is None:
            continue
        h = start
        while True:
            if h.twin is None:
                vertex.halfedge = h
                break
            h = h.twin.next
            if h is start:
                break


def _close_boundaries(mesh: HalfedgeMesh) -> None:
    """Create a boundary face, with twins and edges, for every boundary loop."""
    limit = len(mesh.halfedges) + 1
    for h in list(mesh.halfedges):
        if h.twin is not None:
            continue

        boundary = mesh.new_face(True)
        loop: list[Halfedge] = []
        i: Optional[Halfedge] = h
        while True:
            t = mesh.new_halfedge()
            loop.append(t)
            i.twin = t
            t.twin = i
            t.face = boundary
            t.vertex = i.next.vertex

            edge = mesh.new_edge()
            edge.halfedge = i
            i.edge = edge
            t.edge = edge

            i = i.next
            steps = 0
            while i is not h and i.twin is not None:
                i = i.twin.next
                steps += 1
                if i is None or steps > limit:
                    raise MeshError(_NONMANIFOLD)
            if i is h:
                break
            if len(loop) > limit:
                raise MeshError(_NONMANIFOLD)

        boundary.halfedge = loop[0]
        count = len(loop)
        for k, t in enumerate(loop):
            t.next = loop[(k - 1) % count]


def _check_manifold(mesh: HalfedgeMesh, vertex_degree: dict[Vertex, int]) -> None:
    for vertex in mesh.vertices:
        start = vertex.halfedge
        if start is None:
            raise MeshError("Some vertices are not referenced by any polygon.")
        count = 0
        h = start
        while True:
            if not h.face.boundary:
                count += 1
            h = h.twin.next
            if h is start:
                break
        if count != vertex_degree[vertex]:
            raise MeshError(_NONMANIFOLD)


def rebuild(
    mesh: HalfedgeMesh,
    polygons: Iterable[Sequence[int]],
    verts: Sequence[Vec3],
) -> HalfedgeMesh:
    """Replace the contents of ``mesh`` with the surface described by ``polygons``.

    Each polygon lists vertex indices in its orientation.  Indices need not be
    contiguous; the positions in ``verts`` are assigned to the distinct indices
    in ascending order.  Raises :class:`MeshError` when the input is not a
    manifold, consistently oriented surface.
    """
    polygons = [list(p) for p in polygons]
    positions = [_as_vec3(p) for p in verts]

    mesh.clear()
    index_to_vertex, vertex_degree = _check_polygons(mesh, polygons)
    _link_polygons(mesh, polygons, index_to_vertex)
    _point_boundary_vertices_at_boundary(mesh)
    _close_boundaries(mesh)

    for vertex in mesh.vertices:
        vertex.halfedge = vertex.halfedge.twin.next

    _check_manifold(mesh, vertex_degree)

    if len(positions) < len(mesh.vertices):
        raise MeshError(
            "The number of vertex positions is different from the number of "
            "distinct vertices!\n"
            f"(number of positions in input: {len(positions)})\n"
            f"(number of vertices in mesh: {len(mesh.vertices)})"
        )

    for position, index in zip(positions, sorted(index_to_vertex)):
        index_to_vertex[index].pos = position

    return mesh


def from_poly(polygons: Iterable[Sequence[int]], verts: Sequence[Vec3]) -> HalfedgeMesh:
    """Build a new halfedge mesh from a polygon list; see :func:`rebuild`."""
    return rebuild(HalfedgeMesh(), polygons, verts)