import math

import pytest

from simul8.vector import Vec2


def test_length_of_3_4():
    assert Vec2(3.0, 4.0).length() == pytest.approx(5.0)


def test_length_squared_matches_dot():
    v = Vec2(1.5, -2.25)
    assert v.length_squared() == pytest.approx(v.dot(v))
    assert v.length_squared() == pytest.approx(v.length() ** 2)


def test_arithmetic():
    a = Vec2(1.0, 2.0)
    b = Vec2(3.0, 5.0)
    assert a + b - b == a
    assert a * 2.0 == 2.0 * a
    assert (a * 4.0) / 4.0 == a
    assert -a + a == Vec2.ZERO


def test_unpacking():
    x, y = Vec2(7.0, 8.0)
    assert (x, y) == (7.0, 8.0)


def test_normalize_has_unit_length():
    n = Vec2(-3.0, 9.5).normalize()
    assert n.length() == pytest.approx(1.0)


def test_normalize_zero_is_nan():
    n = Vec2.ZERO.normalize()
    assert [math.isnan(n.x), math.isnan(n.y)] == [True, True]


def test_reflect_off_horizontal_surface():
    assert Vec2(1.0, -1.0).reflect(Vec2(0.0, 1.0)) == Vec2(1.0, 1.0)


def test_reflect_preserves_length_and_is_involution():
    v = Vec2(0.3, -1.7)
    n = Vec2(2.0, 1.0).normalize()
    r = v.reflect(n)
    assert r.length() == pytest.approx(v.length())
    back = r.reflect(n)
    assert back.x == pytest.approx(v.x)
    assert back.y == pytest.approx(v.y)


def test_perp_dot_antisymmetric_and_zero_for_parallel():
    a = Vec2(1.0, 2.0)
    b = Vec2(-4.0, 0.5)
    assert a.perp_dot(b) == pytest.approx(-b.perp_dot(a))
    assert a.perp_dot(a * 3.0) == pytest.approx(0.0)


def test_perp_dot_of_axes():
    assert Vec2(1.0, 0.0).perp_dot(Vec2(0.0, 1.0)) == pytest.approx(1.0)


def test_dot_of_perpendicular_is_zero():
    assert Vec2(2.0, 3.0).dot(Vec2(-3.0, 2.0)) == pytest.approx(0.0)