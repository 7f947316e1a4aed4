from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .. import events
from ..events import EventBus
from ..persistence.models import PersistedState
from ..persistence.store import SaveResult, StateStore
from .catalog import RecipeCatalog, RecipeDefinition
from .energy import EnergyRegenerator
from .inventory import Pantry
from .saving import DirtySaveCoordinator

logger = logging.getLogger(__name__)

DEFAULT_ENERGY_COST = 10
DEFAULT_CHECKPOINT_INTERVAL_SECONDS = 1.0


class StartFailure(str, Enum):
    BUSY = "busy"
    MISSING_INGREDIENTS = "missing_ingredients"
    NOT_ENOUGH_ENERGY = "not_enough_energy"


@dataclass(frozen=True)
class StartResult:
    started: bool
    reason: Optional[StartFailure] = None

    def __bool__(self) -> bool:
        return self.started


class CookingScheduler:
    """Owns the single cooking slot: Idle, or Running(recipe, remaining).

    Starting and finishing a cook, as well as every whole-second checkpoint,
    are written straight to the store instead of going through the dirty flag,
    so a crash loses at most one checkpoint interval of cooking progress.
    """

    def __init__(
        self,
        state: PersistedState,
        store: StateStore,
        pantry: Pantry,
        energy: EnergyRegenerator,
        bus: EventBus,
        saver: DirtySaveCoordinator,
        energy_cost: int = DEFAULT_ENERGY_COST,
        checkpoint_interval_seconds: float = DEFAULT_CHECKPOINT_INTERVAL_SECONDS,
    ) -> None:
        if checkpoint_interval_seconds <= 0:
            raise ValueError("checkpoint_interval_seconds must be positive")
        self.state = state
        self.store = store
        self.pantry = pantry
        self.energy = energy
        self.bus = bus
        self.saver = saver
        self.energy_cost = energy_cost
        self.checkpoint_interval_seconds = float(checkpoint_interval_seconds)
        self._recipe: Optional[RecipeDefinition] = None
        self._remaining = 0.0
        self._tick_timer = 0.0
        # Set once the session has started or ticked; resume is refused after that.
        self._live = False

    @property
    def is_running(self) -> bool:
        return self._recipe is not None

    @property
    def current_recipe(self) -> Optional[RecipeDefinition]:
        return self._recipe

    @property
    def remaining_seconds(self) -> float:
        return self._remaining

    def can_start(self, recipe: RecipeDefinition) -> StartResult:
        if self.is_running:
            return StartResult(False, StartFailure.BUSY)
        if not self.pantry.has_ingredients(recipe.ingredient_costs):
            return StartResult(False, StartFailure.MISSING_INGREDIENTS)
        if self.state.current_energy < self.energy_cost:
            return StartResult(False, StartFailure.NOT_ENOUGH_ENERGY)
        return StartResult(True)

    def start(self, recipe: RecipeDefinition) -> StartResult:
        """Spend ingredients and energy and begin cooking.

        The new slot is saved before returning. On a failed precondition
        nothing is changed.
        """
        check = self.can_start(recipe)
        if not check:
            logger.info("Cannot start %s: %s", recipe.id, check.reason.value)
            return check

        self.pantry.use_ingredients(recipe.ingredient_costs)
        self.energy.consume(self.state, self.energy_cost)

        self._live = True
        self._enter_running(recipe, recipe.required_time)
        self.state.active_recipe_id = recipe.id
        self.state.cooking_remaining_seconds = recipe.required_time
        self._persist("start")

        logger.info("Started cooking %s (%.0fs)", recipe.id, recipe.required_time)
        self.bus.publish(events.ACTIVITY_STARTED, events.ActivityStarted(recipe.id))
        return check

    def resume(self, recipe: RecipeDefinition, remaining: float) -> bool:
        """Continue a cook restored from disk without charging for it again.

        Only valid while booting, before the first ``start`` or ``tick``; hosts
        normally go through :meth:`restore`. Later calls return False.
        """
        if self._live:
            logger.warning("Ignoring resume of %s: only allowed at startup", recipe.id)
            return False
        if self.is_running:
            logger.warning("Ignoring resume of %s: %s is already cooking", recipe.id, self._recipe.id)
            return False
        if remaining <= 0:
            return False
        self._enter_running(recipe, remaining)
        logger.info("Resuming cooking %s with %.0fs left", recipe.id, remaining)
        self.bus.publish(events.ACTIVITY_STARTED, events.ActivityStarted(recipe.id))
        return True

    def restore(self, catalog: RecipeCatalog) -> bool:
        """Resume whatever the loaded record says was cooking; returns True if resumed.

        A recipe that no longer exists in the catalog cannot be resumed: the
        slot is reset to Idle and the ingredients and energy already spent on
        it are not refunded.
        """
        recipe_id = self.state.active_recipe_id
        if recipe_id is None:
            return False
        remaining = self.state.cooking_remaining_seconds
        if remaining <= 0:
            logger.info("Saved cook %s had no time left; clearing slot", recipe_id)
            self._abandon()
            return False
        recipe = catalog.get(recipe_id)
        if recipe is None:
            logger.warning("Recipe %r not found in catalog; abandoning saved cook", recipe_id)
            self._abandon()
            return False
        return self.resume(recipe, remaining)

    def tick(self, delta_seconds: float) -> None:
        """Advance the running cook; checkpoints once per whole interval crossed."""
        self._live = True
        if not self.is_running or delta_seconds <= 0:
            return
        self._tick_timer += delta_seconds
        while self.is_running and self._tick_timer >= self.checkpoint_interval_seconds:
            self._tick_timer -= self.checkpoint_interval_seconds
            self._remaining = max(0.0, self._remaining - self.checkpoint_interval_seconds)
            self.bus.publish(events.ACTIVITY_TICK, events.ActivityTick(self._remaining))
            self.state.cooking_remaining_seconds = self._remaining
            if self._remaining <= 0:
                self._finish()
            else:
                self._persist("checkpoint")

    # Internal utilities

    def _enter_running(self, recipe: RecipeDefinition, remaining: float) -> None:
        self._recipe = recipe
        self._remaining = float(remaining)
        self._tick_timer = 0.0

    def _finish(self) -> None:
        recipe = self._recipe
        self._recipe = None
        self._remaining = 0.0
        self._tick_timer = 0.0
        self.state.clear_activity()
        self._persist("finish")
        logger.info("Finished cooking %s", recipe.id)
        self.bus.publish(events.ACTIVITY_FINISHED, events.ActivityFinished(recipe.id, True))

    def _abandon(self) -> None:
        self.state.clear_activity()
        self.saver.mark_dirty()

    def _persist(self, reason: str) -> SaveResult:
        result = self.store.save(self.state)
        if not result:
            logger.warning("Cooking %s not persisted: %s", reason, result.message)
        return result
