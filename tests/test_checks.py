import math

import pytest

from meshkit.build import from_poly
from meshkit.checks import ValidationError, validate, warnings
from meshkit.halfedge import MeshError
from meshkit.vecmath import Vec3

TETRA_POLYS = [[0, 1, 2], [0, 2, 3], [0, 3, 1], [1, 3, 2]]
TETRA_VERTS = [Vec3(0, 0, 0), Vec3(1, 0, 0), Vec3(0, 1, 0), Vec3(0, 0, 1)]


@pytest.fixture
def tetra():
    return from_poly(TETRA_POLYS, TETRA_VERTS)


def test_valid_tetrahedron_passes(tetra):
    assert validate(tetra) is None
    assert len(tetra.vertices) == 4
    assert len(tetra.faces) == 4
    assert len(tetra.halfedges) == 12


def test_valid_open_triangle_passes():
    mesh = from_poly([[0, 1, 2]], [Vec3(0, 0, 0), Vec3(1, 0, 0), Vec3(0, 1, 0)])
    assert validate(mesh) is None
    assert mesh.n_boundaries() == 1


def test_validate_applies_pending_erasures(tetra):
    extra = tetra.new_vertex()
    tetra.erase(extra)
    assert len(tetra.vertices) == 5
    validate(tetra)
    assert len(tetra.vertices) == 4
    assert extra not in tetra.vertices
    assert not tetra.erased


def test_validation_error_is_mesh_error(tetra):
    tetra.vertices[2].pos = Vec3(math.inf, 0.0, 0.0)
    with pytest.raises(MeshError):
        validate(tetra)


def test_non_finite_position(tetra):
    v = tetra.vertices[1]
    v.pos = Vec3(math.nan, 0.0, 0.0)
    with pytest.raises(ValidationError) as info:
        validate(tetra)
    assert info.value.element is v
    assert info.value.message == "A vertex position was set to a non-finite value."


def test_erased_face_still_referenced(tetra):
    face = tetra.faces[0]
    tetra.erase(face)
    with pytest.raises(ValidationError) as info:
        validate(tetra)
    assert info.value.message == "A live halfedge's face was erased!"
    assert info.value.element.face is face
    assert face in tetra.faces


def test_erased_vertex_still_referenced(tetra):
    vertex = tetra.vertices[0]
    tetra.erase(vertex)
    with pytest.raises(ValidationError) as info:
        validate(tetra)
    assert info.value.message == "A live halfedge's vertex was erased!"
    assert info.value.element.vertex is vertex


def test_erased_edge_still_referenced(tetra):
    edge = tetra.edges[0]
    tetra.erase(edge)
    with pytest.raises(ValidationError) as info:
        validate(tetra)
    assert info.value.message == "A live halfedge's edge was erased!"
    assert info.value.element.edge is edge


def test_next_of_multiple_halfedges(tetra):
    h0 = tetra.halfedges[0]
    target = h0.next.next
    h0.next = target
    with pytest.raises(ValidationError) as info:
        validate(tetra)
    assert info.value.message == "A halfedge is the next of multiple halfedges!"
    assert info.value.element is target


def test_twin_is_itself(tetra):
    h0 = tetra.halfedges[0]
    h0.twin = h0
    with pytest.raises(ValidationError) as info:
        validate(tetra)
    assert info.value.message == "A halfedge's twin is itself!"
    assert info.value.element is h0


def test_twins_twin_is_not_itself(tetra):
    h0 = tetra.halfedges[0]
    h0.twin = tetra.halfedges[1]
    with pytest.raises(ValidationError) as info:
        validate(tetra)
    assert info.value.message == "A halfedge's twin's twin is not itself!"
    assert info.value.element is h0


def test_vertex_halfedge_points_elsewhere(tetra):
    v = tetra.vertices[0]
    wrong = next(h for h in tetra.halfedges if h.vertex is not v)
    v.halfedge = wrong
    with pytest.raises(ValidationError) as info:
        validate(tetra)
    assert info.value.message == "A vertex's halfedge does not point to that vertex!"
    assert info.value.element is wrong


def test_edge_halfedge_points_elsewhere(tetra):
    e = tetra.edges[0]
    wrong = next(h for h in tetra.halfedges if h.edge is not e)
    e.halfedge = wrong
    with pytest.raises(ValidationError) as info:
        validate(tetra)
    assert info.value.message == "An edge's halfedge does not point to that edge!"
    assert info.value.element is wrong


def test_face_halfedge_points_elsewhere(tetra):
    f = tetra.faces[0]
    wrong = next(h for h in tetra.halfedges if h.face is not f)
    f.halfedge = wrong
    with pytest.raises(ValidationError) as info:
        validate(tetra)
    assert info.value.message == "A face's halfedge does not point to that face!"
    assert info.value.element is wrong


def test_failed_validation_keeps_erased_elements(tetra):
    edge = tetra.edges[0]
    tetra.erase(edge)
    with pytest.raises(ValidationError):
        validate(tetra)
    assert edge in tetra.edges
    assert edge in tetra.erased


def test_no_warnings_on_clean_mesh(tetra):
    assert warnings(tetra) is None
    assert len(tetra.vertices) == 4


def test_warning_identical_positions(tetra):
    tetra.vertices[1].pos = tetra.vertices[0].pos
    element, message = warnings(tetra)
    assert element is tetra.vertices[1]
    assert message == "Vertices with identical positions."


def test_warning_edge_wrapping_single_vertex(tetra):
    e = tetra.edges[0]
    e.halfedge.twin.vertex = e.halfedge.vertex
    element, message = warnings(tetra)
    assert element is e
    assert message == "Edge wrapping single vertex."


def test_warning_multiple_edges(tetra):
    e0, e1 = tetra.edges[0], tetra.edges[1]
    e1.halfedge.vertex = e0.halfedge.vertex
    e1.halfedge.twin.vertex = e0.halfedge.twin.vertex
    element, message = warnings(tetra)
    assert element is e1
    assert message == "Multiple edges across same vertices."


def test_warning_multiple_edges_reversed(tetra):
    e0, e1 = tetra.edges[0], tetra.edges[1]
    e1.halfedge.vertex = e0.halfedge.twin.vertex
    e1.halfedge.twin.vertex = e0.halfedge.vertex
    element, message = warnings(tetra)
    assert element is e1
    assert message == "Multiple edges across same vertices."