from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from . import events
from .engine.loop import GameConfig, GameEngine
from .events import EventBus
from .game.catalog import RecipeCatalog
from .game.clock import Clock, PauseController, SystemClock
from .game.cooking import CookingScheduler, StartResult
from .game.energy import EnergyRegenerator
from .game.inventory import Pantry
from .game.saving import DirtySaveCoordinator
from .persistence.models import PersistedState
from .persistence.paths import resolve_save_path
from .persistence.store import SaveResult, StateStore
from .settings import Settings

logger = logging.getLogger(__name__)


def build_store(settings: Settings, save_dir: Optional[Path] = None) -> StateStore:
    """StateStore whose defaults come from the given settings."""
    path = resolve_save_path(settings.storage.save_filename, save_dir)
    return StateStore(
        path,
        default_factory=lambda: PersistedState.fresh(
            max_energy=settings.energy.max_energy,
            starter_inventory=settings.starter_inventory,
        ),
        keep_backup=settings.storage.keep_backup,
    )


class CookingGame:
    """Composition root: one instance of every service, wired together.

    Use :meth:`boot` to build a game from disk. Hosts drive it with
    :meth:`step` and forward lifecycle signals to :meth:`suspend` and
    :meth:`shutdown`.
    """

    def __init__(
        self,
        settings: Settings,
        state: PersistedState,
        store: StateStore,
        catalog: RecipeCatalog,
        clock: Clock,
        bus: EventBus,
    ) -> None:
        self.settings = settings
        self.state = state
        self.store = store
        self.catalog = catalog
        self.clock = clock
        self.bus = bus
        self.pause_control = PauseController()
        self.saver = DirtySaveCoordinator(store, clock)
        self.energy = EnergyRegenerator(
            bus,
            self.saver,
            regen_interval_seconds=settings.energy.regen_interval_seconds,
            energy_per_tick=settings.energy.energy_per_tick,
        )
        self.pantry = Pantry(state, bus, self.saver)
        self.cooking = CookingScheduler(
            state,
            store,
            self.pantry,
            self.energy,
            bus,
            self.saver,
            energy_cost=settings.cooking.energy_cost,
            checkpoint_interval_seconds=settings.cooking.checkpoint_interval_seconds,
        )
        # Regeneration always runs before the cooking timer within a step.
        self.engine = GameEngine(
            GameConfig(tick_rate=settings.loop.tick_rate, max_steps=settings.loop.max_steps),
            systems=[self._tick_energy, self.cooking.tick],
            is_advancing=lambda: self.pause_control.is_advancing,
        )

    @classmethod
    def boot(
        cls,
        settings: Optional[Settings] = None,
        store: Optional[StateStore] = None,
        catalog: Optional[RecipeCatalog] = None,
        clock: Optional[Clock] = None,
        bus: Optional[EventBus] = None,
    ) -> "CookingGame":
        """Load the save, apply offline progress and resume any cook in flight."""
        settings = settings or Settings.load()
        store = store or build_store(settings)
        catalog = catalog if catalog is not None else RecipeCatalog.load()
        clock = clock or SystemClock()
        bus = bus or EventBus()

        state = store.load()
        game = cls(settings, state, store, catalog, clock, bus)
        game.energy.catch_up_offline(state, clock.now_ticks())
        game.cooking.restore(catalog)
        game.publish_snapshot()
        return game

    def publish_snapshot(self) -> None:
        """Send current energy and inventory to listeners, e.g. for a first frame."""
        self.bus.publish(
            events.RESOURCE_CHANGED,
            events.ResourceChanged(current=self.state.current_energy, maximum=self.state.max_energy),
        )
        self.bus.publish(events.INVENTORY_CHANGED, events.InventoryChanged())

    # Simulation

    def step(self, dt: float) -> None:
        if not self.engine.running:
            self.engine.start()
        self.engine.update(dt)

    def run(self, max_steps: Optional[int] = None, fixed_dt: Optional[float] = None) -> None:
        if max_steps is not None:
            self.engine.config.max_steps = max_steps
        self.engine.run(fixed_dt=fixed_dt)

    def _tick_energy(self, dt: float) -> None:
        self.energy.tick_running(self.state, dt)

    # Player actions and queries

    def start_cooking(self, recipe_id: str) -> StartResult:
        return self.cooking.start(self.catalog.require(recipe_id))

    def get_item_count(self, item_id: str) -> int:
        return self.pantry.get_item_count(item_id)

    @property
    def is_cooking(self) -> bool:
        return self.cooking.is_running

    def status(self) -> Dict[str, Any]:
        return {
            "energy": self.state.current_energy,
            "max_energy": self.state.max_energy,
            "regen_accumulator": round(self.state.regen_accumulator, 3),
            "inventory": dict(self.state.inventory),
            "cooking": self.cooking.current_recipe.id if self.cooking.current_recipe else None,
            "cooking_remaining_seconds": self.cooking.remaining_seconds,
            "paused": self.pause_control.is_paused,
        }

    # Host lifecycle

    def pause(self) -> None:
        self.pause_control.pause()

    def resume(self) -> None:
        self.pause_control.resume()

    def toggle_pause(self) -> bool:
        return self.pause_control.toggle()

    def suspend(self) -> Optional[SaveResult]:
        """Host moved the app to the background."""
        return self.saver.flush_if_dirty(self.state)

    def shutdown(self) -> Optional[SaveResult]:
        """Host is about to terminate the process."""
        self.engine.stop()
        return self.saver.flush_if_dirty(self.state)
