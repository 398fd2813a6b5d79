"""Background frame computation and the front end's view of it.

A :class:`SimulationManager` owns the authoritative list of computed frames
and extends it on request. A :class:`SimulationInterface` talks to it over a
pair of queues and keeps a local cache of the frames it has received.
"""

from __future__ import annotations

import logging
import queue
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from simul8.state import SimulationState

__all__ = [
    "RequestFrame",
    "StoreFrame",
    "GetCached",
    "ClearCache",
    "FrameResponse",
    "CachedResponse",
    "SimulationCommand",
    "SimulationResponse",
    "SimulationInterface",
    "SimulationManager",
    "connect",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestFrame:
    """Ask the manager to compute and send back frame ``frame``."""

    frame: int


@dataclass(frozen=True)
class StoreFrame:
    """Replace frame ``frame`` with ``state``, dropping every later frame."""

    frame: int
    state: SimulationState


@dataclass(frozen=True)
class GetCached:
    """Ask how many frames the manager has computed."""


@dataclass(frozen=True)
class ClearCache:
    """Drop every frame the manager has computed."""


@dataclass(frozen=True)
class FrameResponse:
    """A computed frame sent back to the interface."""

    frame: int
    state: SimulationState


@dataclass(frozen=True)
class CachedResponse:
    """The number of frames the manager currently holds."""

    count: int


SimulationCommand = Union[RequestFrame, StoreFrame, GetCached, ClearCache]
SimulationResponse = Union[FrameResponse, CachedResponse]


def _check_frame(frame: int) -> None:
    if frame < 0:
        raise ValueError(f"frame index must not be negative, got {frame}")


def _drain(source: "queue.Queue"):
    while True:
        try:
            yield source.get_nowait()
        except queue.Empty:
            return


class SimulationInterface:
    """The front end's handle on a :class:`SimulationManager`."""

    def __init__(
        self,
        manager_tx: "queue.Queue[SimulationCommand]",
        manager_rx: "queue.Queue[SimulationResponse]",
    ) -> None:
        self._manager_tx = manager_tx
        self._manager_rx = manager_rx
        self._frame_cache: Dict[int, SimulationState] = {}
        self._manager_cached = 0

    def _drop_after(self, frame: int) -> None:
        for key in [k for k in self._frame_cache if k > frame]:
            del self._frame_cache[key]

    def load_frame(self, frame: int) -> None:
        """Ask the manager for ``frame``; it arrives via :meth:`process_requests`."""
        _check_frame(frame)
        self._manager_tx.put(RequestFrame(frame))

    def load_cached(self) -> None:
        """Ask the manager how many frames it holds."""
        self._manager_tx.put(GetCached())

    def store_frame(self, frame: int, state: SimulationState) -> None:
        """Make ``state`` frame ``frame``; later frames are recomputed."""
        _check_frame(frame)
        self._drop_after(frame)
        self._manager_tx.put(StoreFrame(frame, state.copy()))

    def clear_frame_cache(self) -> None:
        """Drop all frames, both here and in the manager."""
        self._manager_tx.put(ClearCache())
        self._frame_cache = {}

    def clear_local_cache(self) -> None:
        """Drop the frames held here only."""
        self._frame_cache = {}

    def process_requests(self) -> None:
        """Take in every response the manager has sent so far."""
        for response in _drain(self._manager_rx):
            match response:
                case FrameResponse(frame=idx, state=state):
                    self._frame_cache[idx] = state
                case CachedResponse(count=count):
                    self._manager_cached = count
                    self._drop_after(count)
                case _:
                    _log.warning("Unhandled response: %r", response)

    def try_get_frame(self, frame: int) -> Optional[SimulationState]:
        """The locally cached frame, or None if it has not arrived."""
        return self._frame_cache.get(frame)

    def get_cached(self) -> int:
        """The manager's frame count as last reported."""
        return self._manager_cached


class SimulationManager:
    """Computes frames one fixed time step after another."""

    def __init__(
        self,
        interface_tx: "queue.Queue[SimulationResponse]",
        interface_rx: "queue.Queue[SimulationCommand]",
        fps: float = 60.0,
        time_budget: float = 0.1,
    ) -> None:
        self._interface_tx = interface_tx
        self._interface_rx = interface_rx
        self.fps = fps
        self.time_budget = time_budget
        self.frame_cache: List[SimulationState] = []
        self.requested_frame: Optional[int] = None

    def run_frame(self) -> None:
        """Compute the frame after the last one (from an empty state if none)."""
        last = self.frame_cache[-1].copy() if self.frame_cache else SimulationState()
        last.single_step(1.0 / self.fps)
        self.frame_cache.append(last)

    def _extend_to(self, frame: int) -> None:
        while len(self.frame_cache) <= frame:
            self.run_frame()

    def get_frame(self, frame: int) -> SimulationState:
        """Frame ``frame``, computing any frames missing before it."""
        _check_frame(frame)
        self._extend_to(frame)
        return self.frame_cache[frame]

    def replace_frame(self, frame: int, state: SimulationState) -> None:
        """Put ``state`` at ``frame`` and forget every later frame."""
        _check_frame(frame)
        del self.frame_cache[frame + 1:]
        self._extend_to(frame)
        self.frame_cache[frame] = state

    def process_requests(self) -> None:
        """Handle pending commands, then work towards any requested frame.

        A requested frame that is not yet computed is worked on for at most
        ``time_budget`` seconds; it is sent once it is available.
        """
        for command in _drain(self._interface_rx):
            match command:
                case RequestFrame(frame=idx):
                    self.requested_frame = idx
                case StoreFrame(frame=idx, state=state):
                    self.replace_frame(idx, state)
                case ClearCache():
                    self.frame_cache = []
                case GetCached():
                    self._interface_tx.put(CachedResponse(len(self.frame_cache)))
                case _:
                    _log.warning("Unhandled simulation command: %r", command)

        target = self.requested_frame
        if target is None:
            return

        if len(self.frame_cache) <= target:
            start = time.monotonic()
            while (
                time.monotonic() - start < self.time_budget
                and len(self.frame_cache) <= target
            ):
                self.run_frame()
        else:
            state = self.get_frame(target).copy()
            self.requested_frame = None
            self._interface_tx.put(FrameResponse(target, state))


def connect() -> Tuple[SimulationInterface, SimulationManager]:
    """An interface and a manager wired to each other, at 60 frames a second."""
    commands: "queue.Queue[SimulationCommand]" = queue.Queue()
    responses: "queue.Queue[SimulationResponse]" = queue.Queue()
    return (
        SimulationInterface(commands, responses),
        SimulationManager(responses, commands),
    )