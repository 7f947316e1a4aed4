from __future__ import annotations

import logging
import math

from .. import events
from ..events import EventBus
from ..persistence.models import PersistedState
from .clock import ticks_to_seconds
from .saving import DirtySaveCoordinator

logger = logging.getLogger(__name__)

DEFAULT_REGEN_INTERVAL_SECONDS = 5.0
DEFAULT_ENERGY_PER_TICK = 1


class EnergyRegenerator:
    """Regenerates energy from elapsed time, live and after a restart.

    The accumulator drains by one interval per elapsed interval even while
    energy sits at the cap, so time spent full is never banked into a burst
    once energy is spent.
    """

    def __init__(
        self,
        bus: EventBus,
        saver: DirtySaveCoordinator,
        regen_interval_seconds: float = DEFAULT_REGEN_INTERVAL_SECONDS,
        energy_per_tick: int = DEFAULT_ENERGY_PER_TICK,
    ) -> None:
        if regen_interval_seconds <= 0:
            raise ValueError("regen_interval_seconds must be positive")
        self.bus = bus
        self.saver = saver
        self.regen_interval_seconds = float(regen_interval_seconds)
        self.energy_per_tick = int(energy_per_tick)

    def tick_running(self, state: PersistedState, delta_seconds: float) -> int:
        """Advance regeneration by one simulation step; returns energy granted."""
        if delta_seconds <= 0:
            return 0
        state.regen_accumulator += delta_seconds
        granted = 0
        while state.regen_accumulator >= self.regen_interval_seconds:
            state.regen_accumulator -= self.regen_interval_seconds
            if state.current_energy < state.max_energy:
                before = state.current_energy
                state.current_energy = min(state.max_energy, state.current_energy + self.energy_per_tick)
                granted += state.current_energy - before
                self._notify(state)
                self.saver.mark_dirty()
        return granted

    def catch_up_offline(self, state: PersistedState, now_ticks: int) -> int:
        """Award energy for the time the app was closed; returns units earned.

        Units earned beyond the cap are discarded rather than banked.
        """
        if state.last_shutdown_ticks == 0:
            logger.debug("No previous shutdown recorded; skipping offline catch-up")
            return 0

        elapsed = max(0.0, ticks_to_seconds(now_ticks - state.last_shutdown_ticks))
        total = elapsed + state.regen_accumulator
        units = int(math.floor(total / self.regen_interval_seconds))
        state.regen_accumulator = total % self.regen_interval_seconds
        logger.info("Player was offline for %.1f minutes", elapsed / 60.0)

        if units > 0:
            before = state.current_energy
            state.current_energy = min(state.max_energy, state.current_energy + units * self.energy_per_tick)
            logger.info(
                "Awarded %d offline energy (%d -> %d)", units, before, state.current_energy
            )
            self.saver.mark_dirty()
        return units

    def consume(self, state: PersistedState, amount: int) -> int:
        """Spend energy, clamping at zero; returns the new energy value."""
        if amount < 0:
            raise ValueError("Amount to consume cannot be negative")
        state.current_energy = max(0, state.current_energy - amount)
        logger.debug("Consumed %d energy (remaining: %d)", amount, state.current_energy)
        self._notify(state)
        self.saver.mark_dirty()
        return state.current_energy

    def _notify(self, state: PersistedState) -> None:
        self.bus.publish(
            events.RESOURCE_CHANGED,
            events.ResourceChanged(current=state.current_energy, maximum=state.max_energy),
        )
