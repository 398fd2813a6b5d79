"""The application window: timeline, simulation preview and editing keys."""

from __future__ import annotations

import argparse
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import pygame

from simul8.constraints import CircleConstraint
from simul8.editor import CONSTRAINT_CHOICES, TRIGGER_CHOICES, Editor
from simul8.events import AnyLeftCircleTrigger, SpawnEvent, TriggerManager
from simul8.manager import connect
from simul8.particle import Particle
from simul8.rendering import CpuSimRenderer
from simul8.state import SimulationState
from simul8.timeline import Timeline
from simul8.util import Color32, show_error_dialog, spawn
from simul8.vector import Vec2

__all__ = [
    "BACKGROUND",
    "TIMELINE_HEIGHT",
    "CONTROLS_WIDTH",
    "PREVIEW_ASPECT",
    "Layout",
    "AppState",
    "default_initial_state",
    "run",
    "main",
]

_log = logging.getLogger(__name__)

BACKGROUND = (int(0.1 * 255), int(0.2 * 255), int(0.3 * 255))
TIMELINE_HEIGHT = 100
CONTROLS_WIDTH = 220
PREVIEW_ASPECT = 9.0 / 16.0
WINDOW_SIZE = (800, 600)
GRAVITY_STEP = 0.01

_GRAY = Color32.GRAY.to_srgba_unmultiplied()
_YELLOW = Color32.YELLOW.to_srgba_unmultiplied()
_WHITE = Color32.WHITE.to_srgba_unmultiplied()


@dataclass(frozen=True)
class Layout:
    """Where the parts of the window were drawn in the last frame."""

    timeline_rect: pygame.Rect
    slider_rect: pygame.Rect
    slider_left: float
    slider_right: float
    slider_cy: float
    preview_rect: pygame.Rect
    editor_rect: pygame.Rect


def default_initial_state() -> SimulationState:
    """The state a new session starts from."""
    state = SimulationState()
    state.gravity_accel = Vec2(0.0, 0.25)
    state.add_trigger_manager(
        TriggerManager(
            AnyLeftCircleTrigger(1.0),
            [SpawnEvent(Particle.create(Vec2.ZERO, 0.05, Color32.RED))],
        )
    )
    state.add_constraint(CircleConstraint())
    state.add_particle(Particle.create(Vec2.ZERO, 0.05, Color32.RED))
    state.particle_collisions = True
    return state


def _describe(item: Any) -> str:
    return repr(item)


class AppState:
    """Everything the running application holds between frames."""

    def __init__(
        self,
        initial_state: Optional[SimulationState] = None,
        size: Sequence[int] = WINDOW_SIZE,
    ) -> None:
        self.window_size = (int(size[0]), int(size[1]))
        self.needs_reconfigure = True

        self.timeline = Timeline()
        self.editor = Editor()

        self.sim_interface, self.sim_manager = connect()
        self.sim_renderer = CpuSimRenderer()

        self.sim_initial_state = (
            initial_state if initial_state is not None else default_initial_state()
        )
        self.sim_render_state = self.sim_initial_state.copy()
        self.sim_interface.store_frame(0, self.sim_initial_state.copy())

        self._layout: Optional[Layout] = None
        self._font: Optional[pygame.font.Font] = None

    @property
    def playing(self) -> bool:
        return self.timeline.playing

    def resize(self, width: int, height: int) -> None:
        """Record a new window size; zero-sized requests are ignored."""
        if width > 0 and height > 0:
            _log.info("Resize to %dx%d requested.", width, height)
            self.window_size = (width, height)
            self.needs_reconfigure = True

    def reconfigure(self) -> None:
        """Recreate the window surface before the next frame."""
        self.needs_reconfigure = True

    def toggle_play(self) -> bool:
        """Start or pause playback; returns whether it is now playing."""
        self.timeline.playing = not self.timeline.playing
        return self.timeline.playing

    def clear_simulation_cache(self) -> None:
        """Forget every computed frame and start again from the initial state."""
        self.sim_interface.clear_frame_cache()
        self.sim_interface.store_frame(0, self.sim_initial_state.copy())

    def update_initial_state(self) -> None:
        """Show the edited initial state and recompute from it."""
        self.sim_render_state = self.sim_initial_state.copy()
        self.sim_interface.store_frame(0, self.sim_initial_state.copy())

    def sync_frame(self) -> bool:
        """Take in the manager's responses and show the frame at the playhead.

        Returns True if that frame was available.
        """
        self.sim_interface.process_requests()
        frame = self.sim_interface.try_get_frame(self.timeline.frame_index())
        if frame is None:
            return False
        self.sim_render_state = frame
        return True

    def tick(self, dt: float) -> None:
        """Advance playback by ``dt`` seconds and request the frame to show."""
        self.timeline.advance(dt)
        self.timeline.clamp()
        self.sim_interface.load_frame(self.timeline.frame_index())
        self.sim_interface.load_cached()

    # Drawing

    def _text_font(self) -> Optional[pygame.font.Font]:
        if not pygame.font.get_init():
            return None
        if self._font is None:
            self._font = pygame.font.Font(None, 20)
        return self._font

    def _blit_lines(
        self, surface: pygame.Surface, lines: List[str], left: int, top: int
    ) -> None:
        font = self._text_font()
        if font is None:
            return
        y = top
        for line in lines:
            image = font.render(line, True, _WHITE)
            surface.blit(image, (left, y))
            y += font.get_linesize()

    def _draw_timeline(self, surface: pygame.Surface, rect: pygame.Rect) -> tuple:
        slider_left = rect.left + rect.width * 0.05
        slider_right = rect.right - rect.width * 0.05
        playhead_width = rect.width * 0.01
        playhead_height = rect.height * 0.9
        slider_cy = rect.top + rect.height * 0.5
        tick_major_height = playhead_height / 2.0
        tick_minor_height = tick_major_height / 2.0

        if slider_right <= slider_left:
            return slider_left, slider_right, slider_cy

        timeline = self.timeline
        cached_x = timeline.cached_x(
            self.sim_interface.get_cached(), slider_left, slider_right
        )
        pygame.draw.line(
            surface, _GRAY, (slider_left, slider_cy), (slider_right, slider_cy), 1
        )
        pygame.draw.line(
            surface, _YELLOW, (slider_left, slider_cy + 1.0), (cached_x, slider_cy + 1.0), 1
        )

        font = self._text_font()
        for tick in timeline.ticks():
            x = timeline.x_from_position(tick.value, slider_left, slider_right)
            if x < slider_left:
                continue
            h = (tick_major_height if tick.major else tick_minor_height) / 2.0
            if tick.major and font is not None:
                label = font.render(tick.label, True, _GRAY)
                surface.blit(label, label.get_rect(center=(x, slider_cy + h * 1.5)))
            pygame.draw.line(surface, _GRAY, (x, slider_cy + h), (x, slider_cy - h), 1)

        timeline.clamp()
        playhead_x = timeline.x_from_position(timeline.position, slider_left, slider_right)
        playhead = pygame.Rect(0, 0, max(1, round(playhead_width)), max(1, round(playhead_height)))
        playhead.center = (round(playhead_x), round(slider_cy))
        pygame.draw.rect(
            surface, _WHITE, playhead, border_radius=int(playhead_width / 3.0)
        )
        return slider_left, slider_right, slider_cy

    def _controls_lines(self) -> List[str]:
        t = self.timeline
        return [
            "Time range",
            f"Start: {t.start:.2f}s",
            f"End: {t.end:.2f}s",
            f"Position: {t.position:.2f}s",
            "[space] Pause" if t.playing else "[space] Play",
            "[c] Clear simulation cache",
        ]

    def _editor_lines(self) -> List[str]:
        state = self.sim_initial_state
        lines = ["Triggers  ([t] add, [delete] remove last)"]
        lines += [f"  {_describe(m)}" for m in state.trigger_managers]
        lines.append("Constraints  ([1] circle, [2] circle with hole, [backspace] remove last)")
        lines += [f"  {_describe(c)}" for c in state.constraints]
        lines.append("Simulation Properties")
        gx, gy = state.gravity_accel
        lines.append(f"  Gravity X:{gx:.2f} Y:{gy:.2f}  (arrow keys)")
        on = "on" if state.particle_collisions else "off"
        lines.append(f"  Particle-particle collisions: {on}  ([p] toggle)")
        return lines

    def draw(self, surface: pygame.Surface) -> Layout:
        """Draw the whole window onto ``surface`` and return its layout."""
        surface.fill(BACKGROUND)
        width, height = surface.get_size()

        timeline_h = min(TIMELINE_HEIGHT, height)
        timeline_rect = pygame.Rect(0, height - timeline_h, width, timeline_h)
        controls_w = min(CONTROLS_WIDTH, width)
        slider_rect = pygame.Rect(controls_w, timeline_rect.top, width - controls_w, timeline_h)

        upper_h = height - timeline_h
        preview_w = min(width, int(upper_h * PREVIEW_ASPECT))
        preview_rect = pygame.Rect(width - preview_w, 0, preview_w, upper_h)
        editor_rect = pygame.Rect(0, 0, width - preview_w, upper_h)

        if preview_rect.width > 0 and preview_rect.height > 0:
            self.sim_renderer.render(self.sim_render_state, surface.subsurface(preview_rect))

        slider_left, slider_right, slider_cy = self._draw_timeline(surface, slider_rect)

        self._blit_lines(surface, self._controls_lines(), 8, timeline_rect.top + 4)
        self._blit_lines(surface, self._editor_lines(), editor_rect.left + 8, editor_rect.top + 8)

        layout = Layout(
            timeline_rect=timeline_rect,
            slider_rect=slider_rect,
            slider_left=slider_left,
            slider_right=slider_right,
            slider_cy=slider_cy,
            preview_rect=preview_rect,
            editor_rect=editor_rect,
        )
        self._layout = layout
        return layout

    # Input

    def _scrub(self, x: float) -> None:
        layout = self._layout
        if layout is None or layout.slider_right <= layout.slider_left:
            return
        self.timeline.position = self.timeline.position_from_x(
            x, layout.slider_left, layout.slider_right
        )

    def _handle_key(self, key: int) -> None:
        state = self.sim_initial_state
        editor = self.editor
        changed = False
        if key == pygame.K_SPACE:
            self.toggle_play()
        elif key == pygame.K_c:
            self.clear_simulation_cache()
        elif key == pygame.K_t:
            editor.select_trigger(next(iter(TRIGGER_CHOICES)))
            changed = editor.add_selected_trigger(state)
        elif key in (pygame.K_1, pygame.K_2):
            names = list(CONSTRAINT_CHOICES)
            editor.select_constraint(names[0 if key == pygame.K_1 else 1])
            changed = editor.add_selected_constraint(state)
        elif key == pygame.K_BACKSPACE and state.constraints:
            changed = editor.remove_constraint(state, len(state.constraints) - 1)
        elif key == pygame.K_DELETE and state.trigger_managers:
            changed = editor.remove_trigger(state, len(state.trigger_managers) - 1)
        elif key == pygame.K_p:
            changed = editor.set_particle_collisions(state, not state.particle_collisions)
        elif key in (pygame.K_LEFT, pygame.K_RIGHT, pygame.K_UP, pygame.K_DOWN):
            gx, gy = state.gravity_accel
            dx = {pygame.K_LEFT: -GRAVITY_STEP, pygame.K_RIGHT: GRAVITY_STEP}.get(key, 0.0)
            dy = {pygame.K_UP: -GRAVITY_STEP, pygame.K_DOWN: GRAVITY_STEP}.get(key, 0.0)
            changed = editor.set_gravity(state, gx + dx, gy + dy)
        if changed:
            self.update_initial_state()

    def _manager_loop(self, stop: threading.Event) -> None:
        while not stop.is_set():
            self.sim_manager.process_requests()
            time.sleep(0.001)

    def run(self) -> None:
        """Open the window and run until it is closed."""
        pygame.init()
        window = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
        pygame.display.set_caption("simul8")
        self.needs_reconfigure = False

        stop = threading.Event()
        spawn(self._manager_loop, stop)

        clock = pygame.time.Clock()
        last_frame_time = time.monotonic()
        dragging = False
        try:
            while True:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        return
                    if event.type == pygame.VIDEORESIZE:
                        self.resize(event.w, event.h)
                    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                        layout = self._layout
                        dragging = layout is not None and layout.slider_rect.collidepoint(event.pos)
                        if dragging:
                            self._scrub(event.pos[0])
                    elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                        dragging = False
                    elif event.type == pygame.MOUSEMOTION and dragging:
                        self._scrub(event.pos[0])
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key(event.key)

                if self.needs_reconfigure:
                    self.needs_reconfigure = False
                    window = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
                    _log.info(
                        "Reconfigured window surface (size %dx%d)", *self.window_size
                    )

                self.sync_frame()
                self.draw(window)
                pygame.display.flip()

                now = time.monotonic()
                dt = now - last_frame_time
                last_frame_time = now
                self.tick(dt)
                clock.tick(120)
        finally:
            stop.set()
            pygame.quit()


def run() -> None:
    """Set up logging and run the application."""
    logging.basicConfig(level=logging.INFO)
    AppState().run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="simul8", description="Interactive particle simulation with a timeline."
    )
    parser.parse_args(argv)
    try:
        run()
    except Exception as exc:  # noqa: BLE001 - any failure is fatal here
        show_error_dialog(f'Fatal error while running simul8: "{exc!r}"')
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())