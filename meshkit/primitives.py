"""Procedural generation of simple triangle and line meshes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

from .vecmath import Vec3, rotate_about_y

TAU = 2.0 * math.pi


@dataclass(frozen=True)
class MeshVertex:
    """A renderable vertex: position, normal and an element id."""

    pos: Vec3
    norm: Vec3
    id: int = 0


@dataclass
class MeshData:
    """Indexed triangle mesh: every three entries of ``elems`` form a triangle."""

    verts: list[MeshVertex] = field(default_factory=list)
    elems: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class LineVertex:
    pos: Vec3
    color: Vec3


@dataclass
class LineData:
    """Line list: every two vertices form a segment."""

    verts: list[LineVertex] = field(default_factory=list)


def _build(positions: list[Vec3], normals: list[Vec3], elems: list[int]) -> MeshData:
    return MeshData([MeshVertex(p, n, 0) for p, n in zip(positions, normals)], elems)


def _shift_y(data: MeshData, dy: float) -> MeshData:
    verts = [replace(v, pos=replace(v.pos, y=v.pos.y + dy)) for v in data.verts]
    return MeshData(verts, list(data.elems))


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def merge(left: MeshData, right: MeshData) -> MeshData:
    """Concatenate two meshes, offsetting the right mesh's indices."""
    offset = len(left.verts)
    return MeshData(
        list(left.verts) + list(right.verts),
        list(left.elems) + [i + offset for i in right.elems],
    )


def merge_lines(left: LineData, right: LineData) -> LineData:
    return LineData(list(left.verts) + list(right.verts))


def circle(color: Vec3, r: float, sides: int) -> LineData:
    """A closed ring of ``sides`` segments of radius ``r`` in the XZ plane."""
    step = TAU / (sides + 1)
    points = [r * Vec3(math.sin(k * step), 0.0, math.cos(k * step)) for k in range(sides)]
    verts: list[LineVertex] = []
    for a, b in zip(points, points[1:] + points[:1]):
        verts.append(LineVertex(a, color))
        verts.append(LineVertex(b, color))
    return LineData(verts)


def dedup(data: MeshData) -> MeshData:
    """Merge vertices sharing a position; the first vertex seen wins."""
    verts: list[MeshVertex] = []
    elems: list[int] = []
    index_of: dict[Vec3, int] = {}
    for idx in data.elems:
        v = data.verts[idx]
        new_idx = index_of.get(v.pos)
        if new_idx is None:
            new_idx = len(verts)
            index_of[v.pos] = new_idx
            verts.append(v)
        elems.append(new_idx)
    return MeshData(verts, elems)


def quad(x: float, y: float) -> MeshData:
    up = Vec3(0.0, 1.0, 0.0)
    positions = [Vec3(-x, 0.0, -y), Vec3(-x, 0.0, y), Vec3(x, 0.0, -y), Vec3(x, 0.0, y)]
    return _build(positions, [up] * 4, [0, 1, 2, 2, 1, 3])


def cube(r: float) -> MeshData:
    positions = [
        Vec3(-r, -r, -r),
        Vec3(r, -r, -r),
        Vec3(r, r, -r),
        Vec3(-r, r, -r),
        Vec3(-r, -r, r),
        Vec3(r, -r, r),
        Vec3(r, r, r),
        Vec3(-r, r, r),
    ]
    elems = [0, 1, 3, 3, 1, 2, 1, 5, 2, 2, 5, 6, 5, 4, 6, 6, 4, 7,
             4, 0, 7, 7, 0, 3, 3, 2, 7, 7, 2, 6, 4, 5, 0, 0, 5, 1]
    return _build(positions, [p.unit() for p in positions], elems)


def cone(bradius: float, tradius: float, height: float, sides: int, caps: bool) -> MeshData:
    """A (truncated) cone along +Y; without caps the cap triangles collapse to index 0."""
    if sides < 1:
        raise ValueError("a cone needs at least one side")
    n = sides
    n_cap = n + 1

    def ring(k: int, radius: float, y: float) -> Vec3:
        rad = k / n * TAU
        return Vec3(math.cos(rad) * radius, y, math.sin(rad) * radius)

    positions = [Vec3()]
    positions += [ring(k, bradius, 0.0) for k in range(1, n + 1)]
    positions.append(Vec3(0.0, height, 0.0))
    positions += [ring(k, tradius, height) for k in range(1, n + 1)]
    for k in range(n):
        positions += [ring(k, tradius, height), ring(k, bradius, 0.0)]
    positions += positions[2 * n + 2: 2 * n + 4]

    normals = [Vec3(0.0, -1.0, 0.0)] * (n + 1) + [Vec3(0.0, 1.0, 0.0)] * (n + 1)
    for k in range(n):
        rad = k / n * TAU
        side = Vec3(math.cos(rad), 0.0, math.sin(rad))
        normals += [side, side]
    normals += normals[2 * n + 2: 2 * n + 4]

    def cap(tri: tuple[int, int, int]) -> tuple[int, int, int]:
        return tri if caps else (0, 0, 0)

    tris = [cap((0, t + 1, t + 2)) for t in range(n - 1)]
    tris.append(cap((0, n, 1)))
    tris += [cap((t + 2, t + 1, n_cap)) for t in range(n, 2 * n)]
    tris.append(cap((n_cap + 1, 2 * n + 1, n_cap)))
    for t in range(2 * n + 2, 4 * n + 1, 2):
        tris.append((t + 2, t + 1, t))
        tris.append((t + 2, t + 3, t + 1))

    return _build(positions, normals, [i for tri in tris for i in tri])


def torus(iradius: float, oradius: float, segments: int, sides: int) -> MeshData:
    """A torus around +Y with ring radius ``oradius`` and tube radius ``oradius - iradius``."""
    if segments < 1 or sides < 1:
        raise ValueError("a torus needs at least one segment and one side")
    tube = oradius - iradius

    def ring_center(seg: int) -> tuple[float, Vec3]:
        t1 = (seg % segments) / segments * TAU
        return t1, Vec3(math.cos(t1) * oradius, 0.0, math.sin(t1) * oradius)

    positions: list[Vec3] = []
    normals: list[Vec3] = []
    for seg in range(segments + 1):
        t1, r1 = ring_center(seg)
        for side in range(sides + 1):
            t2 = (side % sides) / sides * TAU
            offset = Vec3(math.sin(t2) * tube, math.cos(t2) * tube, 0.0)
            p = r1 + rotate_about_y(offset, math.degrees(-t1))
            positions.append(p)
            normals.append((p - r1).unit())

    triangles = [0] * (6 * len(positions))
    i = 0
    stride = sides + 1
    for seg in range(segments + 1):
        for side in range(sides):
            current = side + seg * stride
            nxt = side + ((seg + 1) * stride if seg < segments else 0)
            if i < len(triangles) - 6:
                triangles[i:i + 6] = [current, nxt, nxt + 1, current, nxt + 1, current + 1]
                i += 6

    return _build(positions, normals, triangles)


def uv_hemisphere(radius: float) -> MeshData:
    """The lower half of a latitude/longitude sphere, closed by a pole fan."""
    n_long, n_lat = 64, 16
    positions = [Vec3(0.0, radius, 0.0)]
    for lat in range(n_lat):
        a1 = math.pi * (lat + 1) / (n_lat + 1)
        sin1, cos1 = math.sin(a1), math.cos(a1)
        for lon in range(n_long + 1):
            a2 = TAU * (0 if lon == n_long else lon) / n_long
            positions.append(Vec3(sin1 * math.cos(a2), cos1, sin1 * math.sin(a2)) * radius)
    positions.append(Vec3(0.0, -radius, 0.0))
    normals = [p.unit() for p in positions]

    triangles: list[int] = []
    for lat in range((n_lat - 1) // 2, n_lat - 1):
        for lon in range(n_long):
            current = lon + lat * (n_long + 1) + 1
            nxt = current + n_long + 1
            triangles += [current, current + 1, nxt + 1, current, nxt + 1, nxt]

    count = len(positions)
    for lon in range(n_long):
        triangles += [count - 1, count - (lon + 2) - 1, count - (lon + 1) - 1]

    return _build(positions, normals, triangles)


def ico_sphere(radius: float, level: int) -> MeshData:
    """An icosahedron subdivided ``level`` times and projected onto the sphere."""
    t = (1.0 + math.sqrt(5.0)) / 2.0
    directions = [
        Vec3(-1.0, t, 0.0), Vec3(1.0, t, 0.0), Vec3(-1.0, -t, 0.0), Vec3(1.0, -t, 0.0),
        Vec3(0.0, -1.0, t), Vec3(0.0, 1.0, t), Vec3(0.0, -1.0, -t), Vec3(0.0, 1.0, -t),
        Vec3(t, 0.0, -1.0), Vec3(t, 0.0, 1.0), Vec3(-t, 0.0, -1.0), Vec3(-t, 0.0, 1.0),
    ]
    vertices = [d.unit() * radius for d in directions]
    faces = [
        (0, 11, 5), (0, 5, 1), (0, 1, 7), (0, 7, 10), (0, 10, 11),
        (1, 5, 9), (5, 11, 4), (11, 10, 2), (10, 7, 6), (7, 1, 8),
        (3, 9, 4), (3, 4, 2), (3, 2, 6), (3, 6, 8), (3, 8, 9),
        (4, 9, 5), (2, 4, 11), (6, 2, 10), (8, 6, 7), (9, 8, 1),
    ]
    cache: dict[tuple[int, int], int] = {}

    def middle(p1: int, p2: int) -> int:
        key = (min(p1, p2), max(p1, p2))
        if key not in cache:
            mid = (vertices[p1] + vertices[p2]) / 2.0
            cache[key] = len(vertices)
            vertices.append(mid.unit() * radius)
        return cache[key]

    for _ in range(level):
        refined = []
        for v1, v2, v3 in faces:
            a = middle(v1, v2)
            b = middle(v2, v3)
            c = middle(v3, v1)
            refined += [(v1, a, c), (v2, b, a), (v3, c, b), (a, b, c)]
        faces = refined

    triangles = [i for face in faces for i in face]
    return _build(vertices, [v.unit() for v in vertices], triangles)


def cube_mesh(r: float) -> MeshData:
    return cube(r)


def square_mesh(r: float) -> MeshData:
    return quad(r, r)


def quad_mesh(x: float, y: float) -> MeshData:
    return quad(x, y)


def cone_mesh(bradius: float, tradius: float, height: float, sides: int = 12,
              cap: bool = True) -> MeshData:
    return dedup(cone(bradius, tradius, height, sides, cap))


def cyl_mesh(radius: float, height: float, sides: int = 12, cap: bool = True) -> MeshData:
    return cone_mesh(radius, radius, height, sides, cap)


def torus_mesh(iradius: float, oradius: float, segments: int = 48, sides: int = 24) -> MeshData:
    return dedup(torus(iradius, oradius, segments, sides))


def sphere_mesh(r: float, subdivisions: int) -> MeshData:
    return ico_sphere(r, subdivisions)


def hemi_mesh(r: float) -> MeshData:
    return uv_hemisphere(r)


def capsule_mesh(h: float, r: float) -> MeshData:
    """A cylinder of height ``h`` with hemispherical ends of radius ``r``."""
    bottom = uv_hemisphere(r)
    top = uv_hemisphere(r)
    top = MeshData(
        [replace(v, pos=replace(v.pos, y=-v.pos.y + h)) for v in top.verts], top.elems
    )
    cyl = cone(r, r, h, 64, False)
    return merge(merge(bottom, cyl), top)


def arrow_mesh(rbase: float, rtip: float, height: float) -> MeshData:
    base = cone(rbase, rbase, 0.75 * height, 10, True)
    tip = _shift_y(cone(rtip, 0.001, 0.25 * height, 10, True), 0.7)
    return merge(base, tip)


def scale_mesh() -> MeshData:
    base = cone(0.03, 0.03, 0.7, 10, True)
    tip = _shift_y(cube(0.1), 0.7)
    return merge(base, tip)


def spotlight_mesh(color: Vec3, inner: float, outer: float) -> LineData:
    """Two cone-angle rings five units along +Y, with four spokes to the outer ring."""
    steps = 72
    step = TAU / (steps + 1)
    dist = 5.0

    inner = _clamp(inner / 2.0, 0.0, 90.0)
    outer = _clamp(outer / 2.0, 0.0, 90.0)
    ri = dist * math.tan(math.radians(inner))
    ro = dist * math.tan(math.radians(outer))
    rings = merge_lines(circle(color, ri, steps), circle(color, ro, steps))
    verts = [replace(v, pos=replace(v.pos, y=v.pos.y + 5.0)) for v in rings.verts]

    t = 0.0
    for _ in range(0, steps, steps // 4):
        point = ro * Vec3(math.sin(t), 0.0, math.cos(t))
        verts.append(LineVertex(Vec3(), color))
        verts.append(LineVertex(Vec3(point.x, 5.0, point.z), color))
        t += step * (steps // 4)
    return LineData(verts)