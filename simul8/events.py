"""Triggers that watch the simulation and events they set off."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from simul8.particle import Particle
from simul8.util import Color32
from simul8.vector import Vec2

if TYPE_CHECKING:
    from simul8.state import SimulationState

__all__ = [
    "SimEvent",
    "SimTrigger",
    "TriggerManager",
    "SpawnEvent",
    "AnyLeftCircleTrigger",
]


class SimEvent(ABC):
    """An action applied to the simulation when a trigger fires."""

    @abstractmethod
    def trigger(self, sim: "SimulationState") -> None:
        """Apply the event to ``sim``."""

    def copy(self) -> "SimEvent":
        return copy.copy(self)


class SimTrigger(ABC):
    """A condition on the simulation state."""

    @abstractmethod
    def is_triggered(self, sim: "SimulationState") -> bool:
        """Whether the condition holds for ``sim``."""

    def copy(self) -> "SimTrigger":
        return copy.copy(self)


@dataclass
class TriggerManager:
    """A trigger together with the events it fires."""

    trigger: SimTrigger
    events: List[SimEvent] = field(default_factory=list)

    def process(self, sim: "SimulationState") -> None:
        """Fire every event, in order, if the trigger holds for ``sim``."""
        if self.trigger.is_triggered(sim):
            for event in self.events:
                event.trigger(sim)

    def add_event(self, event: SimEvent) -> None:
        self.events.append(event)

    def remove_event(self, index: int) -> SimEvent:
        """Remove and return the event at ``index``; IndexError if absent."""
        return self.events.pop(index)

    def copy(self) -> "TriggerManager":
        return TriggerManager(self.trigger.copy(), [event.copy() for event in self.events])


def _default_spawn_particle() -> Particle:
    return Particle.create(Vec2.ZERO, 0.05, Color32.RED)


@dataclass
class SpawnEvent(SimEvent):
    """Adds a copy of ``particle`` to the simulation."""

    particle: Particle = field(default_factory=_default_spawn_particle)

    def trigger(self, sim: "SimulationState") -> None:
        sim.add_particle(self.particle.copy())

    def copy(self) -> "SpawnEvent":
        return SpawnEvent(self.particle.copy())


@dataclass
class AnyLeftCircleTrigger(SimTrigger):
    """Holds when some particle has just crossed out of a circle at the origin."""

    radius: float = 1.0

    def is_triggered(self, sim: "SimulationState") -> bool:
        return any(
            p.position.length() > self.radius and p.last_position.length() <= self.radius
            for p in sim.particles
        )


def default_spawn_event(particle: Optional[Particle] = None) -> SpawnEvent:
    """A spawn event for ``particle`` or for the standard red particle."""
    return SpawnEvent(particle if particle is not None else _default_spawn_particle())