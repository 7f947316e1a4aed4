import pytest

from simmer import events
from simmer.game.clock import seconds_to_ticks
from simmer.game.energy import EnergyRegenerator
from simmer.game.saving import DirtySaveCoordinator
from simmer.persistence.models import PersistedState


@pytest.fixture()
def saver(store, clock):
    return DirtySaveCoordinator(store, clock)


@pytest.fixture()
def regen(bus, saver):
    return EnergyRegenerator(bus, saver, regen_interval_seconds=5.0, energy_per_tick=1)


def drained(current=20, accumulator=0.0):
    s = PersistedState.fresh()
    s.current_energy = current
    s.regen_accumulator = accumulator
    return s


@pytest.mark.parametrize("slices", [
    [17.0],
    [0.5] * 34,
    [4.75, 0.25, 5.0, 7.0],
    [0.125] * 8 + [16.0],
])
def test_tick_running_total_is_independent_of_slicing(regen, slices):
    state = drained(current=20, accumulator=1.5)
    for dt in slices:
        regen.tick_running(state, dt)

    total = sum(slices) + 1.5
    assert state.current_energy == 20 + int(total // 5.0)
    assert state.regen_accumulator == pytest.approx(total % 5.0)


def test_tick_running_emits_and_marks_dirty_per_unit(regen, saver, recorder):
    state = drained(current=50)
    granted = regen.tick_running(state, 10.0)

    assert granted == 2
    assert state.current_energy == 52
    assert [e.current for e in recorder.of(events.RESOURCE_CHANGED)] == [51, 52]
    assert recorder.of(events.RESOURCE_CHANGED)[0].maximum == 100
    assert saver.is_dirty


def test_accumulator_drains_while_capped(regen, saver, recorder):
    state = drained(current=100)
    granted = regen.tick_running(state, 12.0)

    assert granted == 0
    assert state.current_energy == 100
    assert state.regen_accumulator == pytest.approx(2.0)
    assert recorder.of(events.RESOURCE_CHANGED) == []
    assert not saver.is_dirty


def test_energy_stops_at_cap_mid_step(regen):
    state = drained(current=99)
    regen.tick_running(state, 15.0)
    assert state.current_energy == 100
    assert state.regen_accumulator == pytest.approx(0.0)


def test_catch_up_offline_example(regen, saver, clock):
    state = drained(current=20, accumulator=2.0)
    t0 = clock.now_ticks()
    state.last_shutdown_ticks = t0

    units = regen.catch_up_offline(state, t0 + seconds_to_ticks(37))

    assert units == 7
    assert state.current_energy == 27
    assert state.regen_accumulator == pytest.approx(4.0)
    assert saver.is_dirty


def test_catch_up_offline_caps_and_discards_surplus(regen, clock):
    state = drained(current=98, accumulator=0.0)
    state.last_shutdown_ticks = clock.now_ticks()

    units = regen.catch_up_offline(state, clock.now_ticks() + seconds_to_ticks(3600))

    assert units == 720
    assert state.current_energy == 100


def test_catch_up_offline_noop_for_fresh_state(regen, saver, clock):
    state = drained(current=20, accumulator=3.0)
    assert state.last_shutdown_ticks == 0

    assert regen.catch_up_offline(state, clock.now_ticks()) == 0
    assert state.current_energy == 20
    assert state.regen_accumulator == 3.0
    assert not saver.is_dirty


def test_catch_up_offline_ignores_clock_going_backwards(regen, saver, clock):
    state = drained(current=20, accumulator=3.0)
    state.last_shutdown_ticks = clock.now_ticks()

    units = regen.catch_up_offline(state, clock.now_ticks() - seconds_to_ticks(60))

    assert units == 0
    assert state.current_energy == 20
    assert state.regen_accumulator == pytest.approx(3.0)
    assert not saver.is_dirty


def test_consume_clamps_at_zero(regen, saver, recorder):
    state = drained(current=4)
    assert regen.consume(state, 10) == 0
    assert recorder.of(events.RESOURCE_CHANGED)[-1].current == 0
    assert saver.is_dirty
    with pytest.raises(ValueError):
        regen.consume(state, -1)
