import pytest

from meshkit.build import from_poly
from meshkit.convert import from_mesh, to_mesh
from meshkit.halfedge import MeshError
from meshkit.primitives import MeshData, MeshVertex, cube
from meshkit.vecmath import Vec3

TETRA_POS = [Vec3(0, 0, 0), Vec3(1, 0, 0), Vec3(0, 1, 0), Vec3(0, 0, 1)]
TETRA_POLYS = [[0, 2, 1], [0, 1, 3], [0, 3, 2], [1, 2, 3]]


def tetra():
    return from_poly(TETRA_POLYS, TETRA_POS)


def test_shared_vertices_layout():
    mesh = tetra()
    data = to_mesh(mesh, False)
    assert len(data.verts) == 4
    assert len(data.elems) == 12
    assert [v.id for v in data.verts] == [v.id for v in mesh.vertices]
    assert [v.pos for v in data.verts] == [v.pos for v in mesh.vertices]


def test_shared_triangles_match_faces():
    mesh = tetra()
    data = to_mesh(mesh, False)
    tris = {
        frozenset(data.verts[i].pos for i in data.elems[k:k + 3])
        for k in range(0, len(data.elems), 3)
    }
    expected = {frozenset(TETRA_POS[i] for i in p) for p in TETRA_POLYS}
    assert tris == expected


def test_split_faces_flat_normals_and_ids():
    mesh = tetra()
    data = to_mesh(mesh, True)
    assert len(data.verts) == 12
    assert data.elems == list(range(12))
    faces = {f.id: f for f in mesh.faces if not f.boundary}
    for k in range(0, 12, 3):
        tri = data.verts[k:k + 3]
        fid = tri[0].id
        assert all(v.id == fid for v in tri)
        assert list(tri[0].norm) == pytest.approx(list(faces[fid].normal()), abs=1e-9)
        assert tri[0].norm == tri[1].norm == tri[2].norm


def test_quads_are_fanned():
    positions = [Vec3(x, y, z) for x in (0, 1) for y in (0, 1) for z in (0, 1)]
    data = cube(1.0)
    mesh = from_mesh(data)
    out = to_mesh(mesh, False)
    assert len(out.verts) == 8
    assert len(out.elems) == 36
    assert len(positions) == len(out.verts)


def test_flip_negates_normals():
    mesh = tetra()
    plain = to_mesh(mesh, False)
    mesh.flip()
    flipped = to_mesh(mesh, False)
    assert len(plain.verts) == len(flipped.verts) == 4
    for a, b in zip(plain.verts, flipped.verts):
        assert list(a.norm) == pytest.approx(list(-b.norm), abs=1e-9)


def test_from_mesh_closed_cube():
    mesh = from_mesh(cube(1.0))
    assert len(mesh.vertices) == 8
    assert len(mesh.edges) == 18
    assert len(mesh.faces) == 12
    assert not mesh.has_boundary()


def test_round_trip_preserves_positions():
    original = tetra()
    data = to_mesh(original, False)
    rebuilt = from_mesh(data)
    assert len(rebuilt.vertices) == len(original.vertices)
    assert len(rebuilt.faces) == len(original.faces)
    assert sorted(tuple(v.pos) for v in rebuilt.vertices) == sorted(
        tuple(p) for p in TETRA_POS
    )


def test_degenerate_triangles_dropped():
    verts = [MeshVertex(p, Vec3(0, 1, 0)) for p in TETRA_POS]
    mesh = from_mesh(MeshData(verts, [0, 0, 1]))
    assert mesh.faces == []
    assert mesh.vertices == []


def test_inconsistent_orientation_raises():
    verts = [MeshVertex(p, Vec3(0, 1, 0)) for p in TETRA_POS]
    with pytest.raises(MeshError):
        from_mesh(MeshData(verts, [0, 1, 2, 0, 1, 3]))