import logging

from simmer.game.clock import (
    TICKS_PER_SECOND,
    ManualClock,
    PauseController,
    SystemClock,
    seconds_to_ticks,
    ticks_to_seconds,
)


def test_tick_conversions():
    assert TICKS_PER_SECOND == 10_000_000
    assert seconds_to_ticks(1.5) == 15_000_000
    assert ticks_to_seconds(25_000_000) == 2.5


def test_system_clock_is_unix_based():
    # 2020-01-01 in ticks; any sane wall clock is past it.
    assert SystemClock().now_ticks() > seconds_to_ticks(1_577_836_800)


def test_manual_clock_moves_only_when_told():
    clock = ManualClock(100)
    assert clock.now_ticks() == 100
    assert clock.advance(2) == 100 + 2 * TICKS_PER_SECOND
    clock.set(5)
    assert clock.now_ticks() == 5


def test_pause_controller_toggle(caplog):
    pc = PauseController()
    assert pc.is_advancing and not pc.is_paused

    with caplog.at_level(logging.INFO, logger="simmer.game.clock"):
        assert pc.toggle() is True
        assert not pc.is_advancing
        # Pausing twice is a no-op.
        pc.pause()
        assert pc.toggle() is False

    assert [r.getMessage() for r in caplog.records] == ["Game paused", "Game resumed"]
