import queue

import pytest

from simul8.manager import (
    CachedResponse,
    FrameResponse,
    GetCached,
    RequestFrame,
    SimulationInterface,
    SimulationManager,
    StoreFrame,
    connect,
)
from simul8.particle import Particle
from simul8.state import SimulationState
from simul8.util import Color32
from simul8.vector import Vec2


def _state():
    state = SimulationState(gravity_accel=Vec2(0.0, 0.25))
    state.add_particle(Particle.create(Vec2(0.1, 0.0), 0.05, Color32.RED))
    return state


def _pump(interface, manager, frame, rounds=100):
    for _ in range(rounds):
        manager.process_requests()
        interface.process_requests()
        result = interface.try_get_frame(frame)
        if result is not None:
            return result
    raise AssertionError("frame never arrived")


def test_get_frame_computes_missing_frames():
    _, manager = connect()
    manager.get_frame(3)
    assert len(manager.frame_cache) == 4


def test_frames_follow_single_steps():
    _, manager = connect()
    manager.replace_frame(0, _state())
    expected = _state()
    for _ in range(5):
        expected.single_step(1.0 / 60.0)
    assert manager.get_frame(5) == expected


def test_run_frame_from_empty_starts_with_empty_state():
    _, manager = connect()
    manager.run_frame()
    assert manager.frame_cache == [SimulationState()]


def test_replace_frame_truncates_later_frames():
    _, manager = connect()
    manager.get_frame(10)
    new = _state()
    manager.replace_frame(2, new)
    assert len(manager.frame_cache) == 3
    assert manager.frame_cache[2] is new


def test_replace_frame_beyond_cache_extends():
    _, manager = connect()
    manager.replace_frame(4, _state())
    assert len(manager.frame_cache) == 5
    assert manager.frame_cache[4] == _state()


def test_requested_frame_round_trip():
    interface, manager = connect()
    interface.store_frame(0, _state())
    interface.load_frame(5)
    received = _pump(interface, manager, 5)
    assert received == manager.get_frame(5)
    assert received is not manager.get_frame(5)
    assert manager.requested_frame is None


def test_store_frame_sends_a_copy():
    interface, manager = connect()
    state = _state()
    interface.store_frame(0, state)
    manager.process_requests()
    state.particles.clear()
    assert len(manager.get_frame(0).particles) == 1


def test_load_cached_reports_manager_count():
    interface, manager = connect()
    manager.get_frame(6)
    interface.load_cached()
    manager.process_requests()
    interface.process_requests()
    assert interface.get_cached() == len(manager.frame_cache)


def test_clear_frame_cache_clears_both_sides():
    interface, manager = connect()
    interface.load_frame(3)
    _pump(interface, manager, 3)
    interface.clear_frame_cache()
    assert interface.try_get_frame(3) is None
    manager.process_requests()
    assert manager.frame_cache == []


def test_clear_local_cache_leaves_manager():
    interface, manager = connect()
    interface.load_frame(2)
    _pump(interface, manager, 2)
    interface.clear_local_cache()
    assert interface.try_get_frame(2) is None
    assert len(manager.frame_cache) == 3


def test_store_frame_drops_later_local_frames():
    commands = queue.Queue()
    responses = queue.Queue()
    interface = SimulationInterface(commands, responses)
    for idx in range(6):
        responses.put(FrameResponse(idx, _state()))
    interface.process_requests()
    interface.store_frame(2, _state())
    assert interface.try_get_frame(2) == _state()
    assert interface.try_get_frame(3) is None
    assert interface.try_get_frame(5) is None
    sent = commands.get_nowait()
    assert isinstance(sent, StoreFrame)
    assert sent.frame == 2


def test_cached_response_trims_local_cache():
    commands = queue.Queue()
    responses = queue.Queue()
    interface = SimulationInterface(commands, responses)
    for idx in range(6):
        responses.put(FrameResponse(idx, _state()))
    responses.put(CachedResponse(3))
    interface.process_requests()
    assert interface.get_cached() == 3
    assert interface.try_get_frame(3) is not None
    assert interface.try_get_frame(4) is None


def test_interface_sends_commands():
    commands = queue.Queue()
    interface = SimulationInterface(commands, queue.Queue())
    interface.load_frame(7)
    interface.load_cached()
    assert commands.get_nowait() == RequestFrame(7)
    assert commands.get_nowait() == GetCached()


def test_manager_answers_get_cached():
    commands = queue.Queue()
    responses = queue.Queue()
    manager = SimulationManager(responses, commands)
    manager.get_frame(1)
    commands.put(GetCached())
    manager.process_requests()
    assert responses.get_nowait() == CachedResponse(2)


def test_get_cached_starts_at_zero():
    interface, _ = connect()
    assert interface.get_cached() == 0


def test_negative_frame_rejected():
    interface, manager = connect()
    with pytest.raises(ValueError):
        interface.load_frame(-1)
    with pytest.raises(ValueError):
        manager.get_frame(-1)