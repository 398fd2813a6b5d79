"""Constraints that keep particles inside (or bounce them off) shapes."""

from __future__ import annotations

import copy
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, List, Tuple

from simul8.particle import Particle
from simul8.util import Color32
from simul8.vector import Vec2

__all__ = ["Constraint", "CircleConstraint", "HoleCircleConstraint"]

_LINE_THICKNESS = 0.025


class Constraint(ABC):
    """Something that corrects a particle's position and velocity each step."""

    @abstractmethod
    def constrain(self, particle: Particle) -> None:
        """Adjust ``particle`` in place."""

    def draw_sim(self, renderer: Any, surface: Any, render_state: Any) -> None:
        """Draw the constraint in the simulation view; nothing by default."""

    def copy(self) -> "Constraint":
        return copy.copy(self)


@dataclass
class CircleConstraint(Constraint):
    """Keeps particles inside a circle centred on the origin."""

    radius: float = 1.0
    elasticity: float = 1.0

    def constrain(self, particle: Particle) -> None:
        step = particle.velocity()
        dist = particle.position.length() + particle.radius
        dist_over = max(dist - self.radius, 0.0)

        particle.position = particle.position - particle.position * dist_over

        if dist > self.radius:
            bounced = step.reflect(particle.position.normalize()) * self.elasticity
            particle.set_velocity(bounced)

    def draw_sim(self, renderer: Any, surface: Any, render_state: Any) -> None:
        renderer.circle(
            Vec2.ZERO, self.radius, _LINE_THICKNESS, Color32.WHITE, surface, render_state
        )


@dataclass
class HoleCircleConstraint(Constraint):
    """A thin circular wall with an open arc that particles may pass through."""

    THICKNESS: ClassVar[float] = 0.025

    radius: float = 1.0
    open_angle_start: float = 0.2
    open_angle_end: float = 0.4
    elasticity: float = 1.0

    def _in_open_arc(self, direction: Vec2) -> bool:
        start_dir = Vec2(math.cos(self.open_angle_start), math.sin(self.open_angle_start))
        end_dir = Vec2(math.cos(self.open_angle_end), math.sin(self.open_angle_end))
        after_start = start_dir.perp_dot(direction) >= 0.0
        before_end = direction.perp_dot(end_dir) >= 0.0
        if self.open_angle_start < self.open_angle_end:
            return after_start and before_end
        return after_start or before_end

    def constrain(self, particle: Particle) -> None:
        half = 0.5 * self.THICKNESS
        pos_len_sq = particle.position.length_squared()
        last_len_sq = particle.last_position.length_squared()
        inner = self.radius - particle.radius - half
        outer = self.radius + particle.radius + half
        inner_sq = inner * inner
        outer_sq = outer * outer

        hit_inside = pos_len_sq >= inner_sq and last_len_sq < inner_sq
        hit_outside = pos_len_sq <= outer_sq and last_len_sq > outer_sq
        if not (hit_inside or hit_outside):
            return

        direction = particle.position.normalize()
        if self._in_open_arc(direction):
            return

        bounced = particle.velocity().reflect(direction) * self.elasticity
        particle.position = direction * math.sqrt(inner_sq if hit_inside else outer_sq)
        particle.set_velocity(bounced)

    def arc_points(self, segments: int = 32) -> List[Tuple[Vec2, Vec2]]:
        """Line segments tracing the closed part of the wall."""
        start_angle = self.open_angle_end % math.tau
        end_angle = self.open_angle_start % math.tau
        if end_angle < start_angle:
            end_angle += math.tau

        step = (end_angle - start_angle) / segments
        theta = start_angle
        result = []
        for _ in range(segments):
            last_pos = Vec2(math.cos(theta), math.sin(theta)) * self.radius
            theta += step
            this_pos = Vec2(math.cos(theta + 0.01), math.sin(theta + 0.01)) * self.radius
            result.append((last_pos, this_pos))
        return result

    def draw_sim(self, renderer: Any, surface: Any, render_state: Any) -> None:
        for a, b in self.arc_points():
            renderer.line_segment(a, b, _LINE_THICKNESS, Color32.WHITE, surface, render_state)