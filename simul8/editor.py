"""Editing of the initial simulation state: triggers, constraints, settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from simul8.constraints import CircleConstraint, Constraint, HoleCircleConstraint
from simul8.events import AnyLeftCircleTrigger, TriggerManager
from simul8.state import SimulationState
from simul8.vector import Vec2

__all__ = ["TRIGGER_CHOICES", "CONSTRAINT_CHOICES", "Editor"]

TRIGGER_CHOICES: Dict[str, Callable[[], TriggerManager]] = {
    "Any particle left circular bound": lambda: TriggerManager(AnyLeftCircleTrigger(1.0), []),
}

CONSTRAINT_CHOICES: Dict[str, Callable[[], Constraint]] = {
    "Circle": CircleConstraint,
    "Circle With Hole": HoleCircleConstraint,
}


@dataclass
class Editor:
    """Selection state of the editing panel.

    Every editing method returns True when it changed the simulation state,
    so the caller knows to recompute the frames.
    """

    selected_trigger: str = ""
    new_trigger: Optional[TriggerManager] = None
    selected_constraint: str = ""
    new_constraint: Optional[Constraint] = None

    def select_trigger(self, name: str) -> None:
        """Choose the kind of trigger that the next add creates."""
        try:
            factory = TRIGGER_CHOICES[name]
        except KeyError:
            raise ValueError(f"unknown trigger {name!r}") from None
        self.selected_trigger = name
        self.new_trigger = factory()

    def add_selected_trigger(self, state: SimulationState) -> bool:
        """Add a copy of the selected trigger to ``state``."""
        if self.new_trigger is None:
            return False
        state.add_trigger_manager(self.new_trigger.copy())
        return True

    def remove_trigger(self, state: SimulationState, index: int) -> bool:
        """Remove the trigger at ``index``; IndexError if there is none."""
        state.trigger_managers.pop(index)
        return True

    def select_constraint(self, name: str) -> None:
        """Choose the kind of constraint that the next add creates."""
        try:
            factory = CONSTRAINT_CHOICES[name]
        except KeyError:
            raise ValueError(f"unknown constraint {name!r}") from None
        self.selected_constraint = name
        self.new_constraint = factory()

    def add_selected_constraint(self, state: SimulationState) -> bool:
        """Add a copy of the selected constraint to ``state``."""
        if self.new_constraint is None:
            return False
        state.add_constraint(self.new_constraint.copy())
        return True

    def remove_constraint(self, state: SimulationState, index: int) -> bool:
        """Remove the constraint at ``index``; IndexError if there is none."""
        state.constraints.pop(index)
        return True

    def set_gravity(self, state: SimulationState, x: float, y: float) -> bool:
        """Set the gravitational acceleration."""
        gravity = Vec2(x, y)
        if gravity == state.gravity_accel:
            return False
        state.gravity_accel = gravity
        return True

    def set_particle_collisions(self, state: SimulationState, enabled: bool) -> bool:
        """Turn particle-particle collisions on or off."""
        if state.particle_collisions == enabled:
            return False
        state.particle_collisions = enabled
        return True