"""Drawing a simulation state onto a pygame surface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

import pygame

from simul8.util import Color32
from simul8.vector import Vec2

if TYPE_CHECKING:
    from simul8.state import SimulationState

__all__ = ["Viewport", "RenderState", "SimRenderer", "CpuSimRenderer"]


@dataclass
class Viewport:
    """How many simulation units span the width of the view."""

    sim_units_per_vw: float = 2.0

    def sim_units_to_logical_points(self, sim_units: float, vw_points: float) -> float:
        """Convert a length in simulation units to points for a view ``vw_points`` wide."""
        return sim_units * (vw_points / self.sim_units_per_vw)


@dataclass(frozen=True)
class RenderState:
    """Where the simulation origin lies on screen and how wide the view is."""

    center: Tuple[float, float]
    vw: float

    def to_screen(self, viewport: Viewport, point: Vec2) -> Tuple[float, float]:
        """Screen coordinates of a point given in simulation units."""
        return (
            viewport.sim_units_to_logical_points(point.x, self.vw) + self.center[0],
            viewport.sim_units_to_logical_points(point.y, self.vw) + self.center[1],
        )


class SimRenderer(ABC):
    """Draws simulation states and the primitives constraints are made of."""

    @abstractmethod
    def render(self, sim: "SimulationState", surface: pygame.Surface) -> None:
        """Draw ``sim`` to fill ``surface``."""

    @abstractmethod
    def line_segment(
        self,
        a: Vec2,
        b: Vec2,
        thickness: float,
        color: Color32,
        surface: pygame.Surface,
        render_state: RenderState,
    ) -> None:
        """Draw a line between two points in simulation units."""

    @abstractmethod
    def circle(
        self,
        center: Vec2,
        radius: float,
        thickness: float,
        color: Color32,
        surface: pygame.Surface,
        render_state: RenderState,
    ) -> None:
        """Draw a circle outline in simulation units."""

    @abstractmethod
    def circle_filled(
        self,
        center: Vec2,
        radius: float,
        color: Color32,
        surface: pygame.Surface,
        render_state: RenderState,
    ) -> None:
        """Draw a filled circle in simulation units."""


def _stroke_width(points: float) -> int:
    # pygame treats width 0 as "fill", so an outline is at least one pixel.
    return max(1, round(points))


class CpuSimRenderer(SimRenderer):
    """Renders with pygame's software drawing functions."""

    def __init__(self, viewport: Viewport | None = None) -> None:
        self.viewport = viewport if viewport is not None else Viewport(2.0)

    def _points(self, sim_units: float, render_state: RenderState) -> float:
        return self.viewport.sim_units_to_logical_points(sim_units, render_state.vw)

    def render(self, sim: "SimulationState", surface: pygame.Surface) -> None:
        rect = surface.get_rect()
        render_state = RenderState(center=rect.center, vw=float(rect.width))

        for particle in sim.particles:
            self.circle_filled(
                particle.position, particle.radius, particle.color, surface, render_state
            )

        for constraint in sim.constraints:
            constraint.draw_sim(self, surface, render_state)

    def line_segment(
        self,
        a: Vec2,
        b: Vec2,
        thickness: float,
        color: Color32,
        surface: pygame.Surface,
        render_state: RenderState,
    ) -> None:
        pygame.draw.line(
            surface,
            color.to_srgba_unmultiplied(),
            render_state.to_screen(self.viewport, a),
            render_state.to_screen(self.viewport, b),
            _stroke_width(self._points(thickness, render_state)),
        )

    def circle(
        self,
        center: Vec2,
        radius: float,
        thickness: float,
        color: Color32,
        surface: pygame.Surface,
        render_state: RenderState,
    ) -> None:
        pygame.draw.circle(
            surface,
            color.to_srgba_unmultiplied(),
            render_state.to_screen(self.viewport, center),
            self._points(radius, render_state),
            _stroke_width(self._points(thickness, render_state)),
        )

    def circle_filled(
        self,
        center: Vec2,
        radius: float,
        color: Color32,
        surface: pygame.Surface,
        render_state: RenderState,
    ) -> None:
        pygame.draw.circle(
            surface,
            color.to_srgba_unmultiplied(),
            render_state.to_screen(self.viewport, center),
            self._points(radius, render_state),
        )