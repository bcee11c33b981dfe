import math

import pytest

from meshkit.vecmath import Vec3, rotate_about_y


@pytest.mark.parametrize(
    "v", [Vec3(3.0, 4.0, 0.0), Vec3(-1.0, 2.0, 7.5), Vec3(0.0, 0.0, -0.25)]
)
def test_unit_has_length_one(v):
    assert math.isclose(v.unit().norm(), 1.0)
    assert list(v.unit() * v.norm()) == pytest.approx(list(v), abs=1e-9)


def test_unit_of_zero_is_not_finite():
    assert not Vec3().unit().is_finite()


def test_cross_of_axes():
    assert Vec3(1.0, 0.0, 0.0).cross(Vec3(0.0, 1.0, 0.0)) == Vec3(0.0, 0.0, 1.0)


def test_cross_is_orthogonal_and_anticommutes():
    a = Vec3(1.5, -2.0, 0.5)
    b = Vec3(0.3, 4.0, -1.0)
    c = a.cross(b)
    assert math.isclose(c.dot(a), 0.0, abs_tol=1e-12)
    assert math.isclose(c.dot(b), 0.0, abs_tol=1e-12)
    assert b.cross(a) == -c


def test_dot_with_self_is_norm_squared():
    v = Vec3(2.0, -3.0, 6.0)
    assert math.isclose(v.dot(v), v.norm() ** 2)


@pytest.mark.parametrize(
    "v, finite",
    [
        (Vec3(1.0, 2.0, 3.0), True),
        (Vec3(math.inf, 0.0, 0.0), False),
        (Vec3(0.0, math.nan, 0.0), False),
        (Vec3(0.0, 0.0, -math.inf), False),
    ],
)
def test_is_finite(v, finite):
    assert v.is_finite() is finite


def test_arithmetic_round_trips():
    a = Vec3(1.25, -3.5, 2.0)
    b = Vec3(0.5, 0.75, -4.0)
    assert a + b - b == a
    assert 2 * a == a + a
    assert a * 2 == 2 * a
    assert (a / 2) * 2 == a
    assert -a + a == Vec3()
    assert list(a) == [a.x, a.y, a.z]


def test_equal_vectors_hash_together():
    assert len({Vec3(1.0, 2.0, 3.0), Vec3(1.0, 2.0, 3.0)}) == len({Vec3(1.0, 2.0, 3.0)})
    assert {Vec3(0.0, 0.0, 0.0): "a"}[Vec3(-0.0, 0.0, -0.0)] == "a"


def test_rotation_preserves_length_and_height():
    v = Vec3(1.0, 2.0, -3.0)
    for deg in (15.0, 90.0, 200.0, -45.0):
        r = rotate_about_y(v, deg)
        assert math.isclose(r.norm(), v.norm())
        assert r.y == v.y


def test_rotation_round_trip_and_full_turn():
    v = Vec3(0.3, -1.0, 2.5)
    back = rotate_about_y(rotate_about_y(v, 37.0), -37.0)
    assert list(back) == pytest.approx(list(v), abs=1e-9)
    full = rotate_about_y(v, 360.0)
    assert list(full) == pytest.approx(list(v), abs=1e-9)


def test_quarter_turn_of_x_axis():
    r = rotate_about_y(Vec3(1.0, 0.0, 0.0), 90.0)
    assert list(r) == pytest.approx([0.0, 0.0, -1.0], abs=1e-9)