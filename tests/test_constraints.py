import math

import pytest

from simul8.constraints import CircleConstraint, HoleCircleConstraint
from simul8.particle import Particle
from simul8.util import Color32
from simul8.vector import Vec2


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def circle(self, center, radius, thickness, color, surface, render_state):
        self.calls.append(("circle", center, radius, thickness, color))

    def line_segment(self, a, b, thickness, color, surface, render_state):
        self.calls.append(("line", a, b, thickness, color))


def make(pos, last, radius=0.05):
    return Particle(pos, last, radius, Color32.RED)


def test_defaults():
    c = CircleConstraint()
    assert (c.radius, c.elasticity) == (1.0, 1.0)
    h = HoleCircleConstraint()
    assert (h.radius, h.open_angle_start, h.open_angle_end, h.elasticity) == (1.0, 0.2, 0.4, 1.0)


def test_circle_leaves_inside_particle_alone():
    p = make(Vec2(0.5, 0.0), Vec2(0.45, 0.0))
    before = p.copy()
    CircleConstraint().constrain(p)
    assert p == before


def test_circle_pushes_back_and_bounces():
    p = make(Vec2(1.0, 0.0), Vec2(0.9, 0.0), radius=0.1)
    speed = p.velocity().length()
    CircleConstraint(radius=1.0).constrain(p)
    assert p.position.length() + p.radius == pytest.approx(1.0)
    v = p.velocity()
    assert v.x < 0.0
    assert v.length() == pytest.approx(speed)


def test_circle_elasticity_scales_bounce():
    p = make(Vec2(1.0, 0.0), Vec2(0.9, 0.0), radius=0.1)
    speed = p.velocity().length()
    CircleConstraint(radius=1.0, elasticity=0.5).constrain(p)
    assert p.velocity().length() == pytest.approx(speed * 0.5)


def test_hole_bounces_from_inside_outside_open_arc():
    p = make(Vec2(-0.98, 0.0), Vec2(-0.9, 0.0))
    speed = p.velocity().length()
    HoleCircleConstraint().constrain(p)
    assert p.position.x == pytest.approx(-0.9375)
    assert p.position.y == pytest.approx(0.0)
    v = p.velocity()
    assert v.x > 0.0
    assert v.length() == pytest.approx(speed)


def test_hole_bounces_from_outside():
    p = make(Vec2(1.0, 0.0), Vec2(1.2, 0.0))
    HoleCircleConstraint().constrain(p)
    assert p.position.x == pytest.approx(1.0625)
    assert p.velocity().x > 0.0


def test_hole_lets_particle_through_open_arc():
    direction = Vec2(math.cos(0.3), math.sin(0.3))
    p = make(direction * 0.98, direction * 0.9)
    before = p.copy()
    HoleCircleConstraint().constrain(p)
    assert p == before


def test_hole_wrapped_open_arc():
    p = make(Vec2(0.98, 0.0), Vec2(0.9, 0.0))
    before = p.copy()
    HoleCircleConstraint(open_angle_start=6.0, open_angle_end=0.5).constrain(p)
    assert p == before


def test_hole_ignores_particle_not_crossing():
    p = make(Vec2(0.5, 0.1), Vec2(0.4, 0.1))
    before = p.copy()
    HoleCircleConstraint().constrain(p)
    assert p == before


def test_copy_is_independent():
    c = HoleCircleConstraint()
    d = c.copy()
    d.radius = 2.0
    assert c.radius == 1.0
    assert d.open_angle_end == c.open_angle_end


def test_arc_points_lie_on_circle():
    h = HoleCircleConstraint(radius=2.0)
    segments = h.arc_points(32)
    assert len(segments) == 32
    for a, b in segments:
        assert a.length() == pytest.approx(2.0)
        assert b.length() == pytest.approx(2.0)
    first = segments[0][0]
    assert first.x == pytest.approx(2.0 * math.cos(0.4))
    assert first.y == pytest.approx(2.0 * math.sin(0.4))


def test_circle_draw_sim_draws_circle():
    r = RecordingRenderer()
    CircleConstraint(radius=1.5).draw_sim(r, None, None)
    assert r.calls == [("circle", Vec2.ZERO, 1.5, 0.025, Color32.WHITE)]


def test_hole_draw_sim_draws_segments():
    r = RecordingRenderer()
    h = HoleCircleConstraint()
    h.draw_sim(r, None, None)
    assert [(c[1], c[2]) for c in r.calls] == h.arc_points(32)
    assert all(c[0] == "line" and c[4] == Color32.WHITE for c in r.calls)