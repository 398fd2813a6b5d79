"""A simulated particle integrated with position-based (Verlet) dynamics."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from simul8.util import Color32
from simul8.vector import Vec2

__all__ = ["Particle"]


@dataclass
class Particle:
    """Velocity is implied by the step from ``last_position`` to ``position``."""

    position: Vec2
    last_position: Vec2
    radius: float
    color: Color32

    @classmethod
    def create(cls, position: Vec2, radius: float, color: Color32) -> "Particle":
        """A particle at rest at ``position``."""
        return cls(position, position, radius, color)

    def velocity(self, fps: float = 1.0) -> Vec2:
        """Velocity in units per second at ``fps`` steps per second."""
        return (self.position - self.last_position) * fps

    def set_velocity(self, velocity: Vec2, fps: float = 1.0) -> None:
        """Set the implied velocity by moving ``last_position``."""
        self.last_position = self.position - velocity / fps

    def copy(self) -> "Particle":
        return dataclasses.replace(self)