import pytest

from simul8.timeline import FPS, MIN_SPAN, TICK_STEP, Tick, Timeline


def test_default_range():
    tl = Timeline()
    assert (tl.start, tl.end, tl.position) == (0.0, 3.5, 0.0)
    assert tl.playing is False


def test_frame_index_at_one_second_is_fps():
    tl = Timeline(position=1.0)
    assert tl.frame_index() == int(FPS)


def test_frame_index_floors():
    tl = Timeline(position=(10 + 0.9) / FPS)
    assert tl.frame_index() == 10


def test_advance_only_while_playing():
    tl = Timeline(position=0.5)
    assert tl.advance(0.25) == 0.5
    tl.playing = True
    assert tl.advance(0.25) == pytest.approx(0.75)
    assert tl.position == pytest.approx(0.75)


def test_clamp_keeps_position_in_range():
    tl = Timeline(position=10.0)
    tl.clamp()
    assert tl.position == tl.end
    tl.position = -1.0
    tl.clamp()
    assert tl.position == tl.start


def test_set_range_accepts_valid_range():
    tl = Timeline(position=2.0)
    tl.set_range(1.0, 2.5)
    assert (tl.start, tl.end) == (1.0, 2.5)
    assert tl.position == 2.0


def test_set_range_clamps_negative_start():
    tl = Timeline()
    tl.set_range(-2.0, 3.0)
    assert tl.start == 0.0
    assert tl.end == 3.0


def test_set_range_keeps_minimum_span():
    tl = Timeline()
    tl.set_range(2.0, 1.0)
    assert tl.end - tl.start >= MIN_SPAN - 1e-12
    assert tl.start >= 0.0


def test_set_range_clamps_position():
    tl = Timeline(position=3.0)
    tl.set_range(0.5, 1.5)
    assert tl.position == 1.5


def test_position_from_x_endpoints_and_clamp():
    tl = Timeline()
    assert tl.position_from_x(10.0, 10.0, 110.0) == tl.start
    assert tl.position_from_x(110.0, 10.0, 110.0) == tl.end
    assert tl.position_from_x(-50.0, 10.0, 110.0) == tl.start
    assert tl.position_from_x(500.0, 10.0, 110.0) == tl.end


@pytest.mark.parametrize("value", [0.0, 0.3, 1.75, 3.5])
def test_position_x_round_trip(value):
    tl = Timeline()
    x = tl.x_from_position(value, 20.0, 220.0)
    assert tl.position_from_x(x, 20.0, 220.0) == pytest.approx(value)


def test_x_from_position_is_not_clamped():
    tl = Timeline()
    assert tl.x_from_position(tl.end * 2, 0.0, 100.0) > 100.0


def test_cached_x_bounds():
    tl = Timeline()
    assert tl.cached_x(0, 5.0, 105.0) == 5.0
    assert tl.cached_x(100000, 5.0, 105.0) == 105.0
    mid = tl.cached_x(int(FPS), 5.0, 105.0)
    assert 5.0 < mid < 105.0


def test_ticks_cover_range_and_spacing():
    tl = Timeline()
    ticks = tl.ticks()
    assert ticks[0] == Tick(0.0, True)
    assert all(tl.start <= t.value <= tl.end for t in ticks)
    gaps = [b.value - a.value for a, b in zip(ticks, ticks[1:])]
    assert all(g == pytest.approx(TICK_STEP) for g in gaps)


def test_major_ticks_fall_on_whole_seconds():
    tl = Timeline()
    majors = [t for t in tl.ticks() if t.major]
    assert all(t.value == int(t.value) for t in majors)
    assert majors[1].label == "1"
    minors = [t for t in tl.ticks() if not t.major]
    assert all(t.label == "" for t in minors)


def test_ticks_skip_values_before_start():
    tl = Timeline()
    tl.set_range(1.1, 3.0)
    ticks = tl.ticks()
    assert min(t.value for t in ticks) >= 1.1
    assert ticks[-1].value <= 3.0