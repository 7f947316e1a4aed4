from __future__ import annotations

import logging
import time
from typing import Protocol

logger = logging.getLogger(__name__)

# Timestamps are stored as 100 ns ticks since the Unix epoch.
TICKS_PER_SECOND = 10_000_000


def ticks_to_seconds(ticks: int) -> float:
    return ticks / TICKS_PER_SECOND


def seconds_to_ticks(seconds: float) -> int:
    return int(round(seconds * TICKS_PER_SECOND))


class Clock(Protocol):
    def now_ticks(self) -> int: ...


class SystemClock:
    """Wall clock backed by ``time.time_ns``."""

    def now_ticks(self) -> int:
        return time.time_ns() // 100


class ManualClock:
    """Deterministic clock for tests and replay tools; only moves when told to."""

    def __init__(self, start_ticks: int = 0) -> None:
        self._ticks = int(start_ticks)

    def now_ticks(self) -> int:
        return self._ticks

    def advance(self, seconds: float) -> int:
        self._ticks += seconds_to_ticks(seconds)
        return self._ticks

    def set(self, ticks: int) -> None:
        self._ticks = int(ticks)


class PauseController:
    """Tracks whether the simulation is advancing.

    Pausing is a gate checked before each step, not a cancellation: resuming
    simply continues from the stored accumulator and timer values.
    """

    def __init__(self) -> None:
        self._paused = False

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_advancing(self) -> bool:
        return not self._paused

    def pause(self) -> None:
        if self._paused:
            return
        self._paused = True
        logger.info("Game paused")

    def resume(self) -> None:
        if not self._paused:
            return
        self._paused = False
        logger.info("Game resumed")

    def toggle(self) -> bool:
        """Flip the paused state and return the new value of ``is_paused``."""
        if self._paused:
            self.resume()
        else:
            self.pause()
        return self._paused
