"""The playback timeline: a time range, a playhead and the slider geometry."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

__all__ = ["FPS", "MIN_SPAN", "TICK_STEP", "Tick", "Timeline"]

FPS = 60.0
"""Simulation frames per second of timeline time."""

MIN_SPAN = 1.0 / 120.0
"""Smallest allowed distance between the start and the end of the range."""

TICK_STEP = 0.25
"""Seconds between neighbouring ticks; every fourth tick is a major one."""


def _remap(x: float, src_lo: float, src_hi: float, dst_lo: float, dst_hi: float) -> float:
    t = (x - src_lo) / (src_hi - src_lo)
    return dst_lo + t * (dst_hi - dst_lo)


def _remap_clamp(
    x: float, src_lo: float, src_hi: float, dst_lo: float, dst_hi: float
) -> float:
    if src_hi < src_lo:
        return _remap_clamp(x, src_hi, src_lo, dst_hi, dst_lo)
    if x <= src_lo:
        return dst_lo
    if x >= src_hi:
        return dst_hi
    return _remap(x, src_lo, src_hi, dst_lo, dst_hi)


@dataclass(frozen=True)
class Tick:
    """A tick mark on the timeline at ``value`` seconds."""

    value: float
    major: bool

    @property
    def label(self) -> str:
        """Text shown under a major tick; empty for minor ticks."""
        return f"{self.value:g}" if self.major else ""


@dataclass
class Timeline:
    """The visible time range in seconds and the playhead within it."""

    position: float = 0.0
    start: float = 0.0
    end: float = 3.5
    playing: bool = False

    def frame_index(self) -> int:
        """The simulation frame shown at the playhead."""
        return max(0, math.floor(self.position * FPS))

    def set_range(self, start: float, end: float) -> None:
        """Set the range, keeping it non-negative and at least MIN_SPAN long."""
        start = max(0.0, min(start, end - MIN_SPAN))
        end = max(end, start + MIN_SPAN)
        self.start, self.end = start, end
        self.clamp()

    def clamp(self) -> None:
        """Move the playhead back inside the range."""
        self.position = min(max(self.position, self.start), self.end)

    def advance(self, dt: float) -> float:
        """Move the playhead forward by ``dt`` seconds while playing."""
        if self.playing:
            self.position += dt
        return self.position

    def position_from_x(self, x: float, left: float, right: float) -> float:
        """The time under screen coordinate ``x`` on a slider from ``left`` to ``right``."""
        return _remap_clamp(x, left, right, self.start, self.end)

    def x_from_position(self, value: float, left: float, right: float) -> float:
        """The screen coordinate of time ``value`` on the slider (not clamped)."""
        return _remap(value, self.start, self.end, left, right)

    def cached_x(self, frames_cached: int, left: float, right: float) -> float:
        """How far along the slider the computed frames reach."""
        return _remap_clamp(frames_cached / FPS, self.start, self.end, left, right)

    def ticks(self) -> List[Tick]:
        """Tick marks from the start of the range up to its end."""
        count = math.floor(self.end / TICK_STEP)
        return [
            Tick(i * TICK_STEP, i % 4 == 0)
            for i in range(count + 1)
            if i * TICK_STEP >= self.start
        ]