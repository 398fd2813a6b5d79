"""The complete state of a simulation and its time stepping."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List

from simul8.constraints import Constraint
from simul8.events import TriggerManager
from simul8.particle import Particle
from simul8.vector import Vec2

__all__ = ["SimulationState"]


@dataclass
class SimulationState:
    """Particles, the constraints and triggers acting on them, and gravity."""

    particles: List[Particle] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)
    trigger_managers: List[TriggerManager] = field(default_factory=list)
    gravity_accel: Vec2 = Vec2.ZERO
    particle_collisions: bool = False

    def add_particle(self, particle: Particle) -> None:
        self.particles.append(particle)

    def add_constraint(self, constraint: Constraint) -> None:
        self.constraints.append(constraint)

    def add_trigger_manager(self, manager: TriggerManager) -> None:
        self.trigger_managers.append(manager)

    def copy(self) -> "SimulationState":
        """An independent deep copy."""
        return SimulationState(
            particles=[p.copy() for p in self.particles],
            constraints=[c.copy() for c in self.constraints],
            trigger_managers=[m.copy() for m in self.trigger_managers],
            gravity_accel=self.gravity_accel,
            particle_collisions=self.particle_collisions,
        )

    def _solve_particle_collisions(self) -> None:
        particles = self.particles
        for i, left in enumerate(particles):
            for right in particles[i + 1:]:
                diff = left.position - right.position
                dist_sq = diff.length_squared()
                sum_radii = left.radius + right.radius
                if dist_sq < sum_radii * sum_radii:
                    dist = math.sqrt(dist_sq)
                    push = max(sum_radii - dist, 0.0)
                    # Coincident centres have no direction to push along.
                    direction = diff / dist if dist > 0.0 else Vec2(math.nan, math.nan)
                    push_vec = direction * push
                    left.position = left.position + push_vec * 0.5
                    right.position = right.position - push_vec * 0.5

    def _solve_constraints(self, steps: int) -> None:
        for _ in range(steps):
            for constraint in self.constraints:
                for particle in self.particles:
                    constraint.constrain(particle)

    def _solve_pbd(self, dt: float) -> None:
        for particle in self.particles:
            v = (particle.position - particle.last_position) / dt + self.gravity_accel * dt
            particle.last_position = particle.position
            particle.position = particle.position + v * dt

        self._solve_constraints(1)
        if self.particle_collisions:
            self._solve_particle_collisions()

    def _update_triggers(self) -> None:
        managers, self.trigger_managers = self.trigger_managers, []
        try:
            for manager in managers:
                manager.process(self)
        finally:
            self.trigger_managers = managers

    def _step(self, dt: float) -> None:
        self._update_triggers()
        self._solve_pbd(dt)

    def single_step(self, dt: float) -> None:
        """Advance the simulation by ``dt`` seconds."""
        self._step(dt)

    def multi_step(self, steps: int, dt: float) -> None:
        """Advance by ``dt`` seconds split into ``steps`` equal substeps."""
        for _ in range(steps):
            self._step(dt / steps)