from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable

from .. import events
from ..events import EventBus
from ..persistence.models import PersistedState
from .catalog import IngredientCost
from .saving import DirtySaveCoordinator

logger = logging.getLogger(__name__)


class Pantry:
    """Ingredient counts backed by the persisted inventory mapping."""

    def __init__(self, state: PersistedState, bus: EventBus, saver: DirtySaveCoordinator) -> None:
        self.state = state
        self.bus = bus
        self.saver = saver

    def get_item_count(self, item_id: str) -> int:
        """The count of an item, or 0 if the player has none."""
        return self.state.inventory.get(item_id, 0)

    @staticmethod
    def _totals(costs: Iterable[IngredientCost]) -> Dict[str, int]:
        totals: Dict[str, int] = Counter()
        for cost in costs:
            totals[cost.item_id] += cost.amount
        return totals

    def has_ingredients(self, costs: Iterable[IngredientCost]) -> bool:
        """True if every item covers the sum of its costs."""
        return all(self.get_item_count(item_id) >= need for item_id, need in self._totals(costs).items())

    def use_ingredients(self, costs: Iterable[IngredientCost]) -> None:
        """Deduct each cost. Callers check ``has_ingredients`` first."""
        totals = self._totals(costs)
        for item_id, need in totals.items():
            have = self.get_item_count(item_id)
            if have < need:
                raise ValueError(f"Not enough {item_id!r}: need {need}, have {have}")
        for item_id, need in totals.items():
            self.state.inventory[item_id] -= need
            logger.debug("Used %d x %s (left: %d)", need, item_id, self.state.inventory[item_id])
        self.bus.publish(events.INVENTORY_CHANGED, events.InventoryChanged())
        self.saver.mark_dirty()

    def add_item(self, item_id: str, amount: int = 1) -> int:
        if amount <= 0:
            raise ValueError("Amount to add must be positive")
        self.state.inventory[item_id] = self.get_item_count(item_id) + amount
        logger.debug("Added %d x %s (total: %d)", amount, item_id, self.state.inventory[item_id])
        self.bus.publish(events.INVENTORY_CHANGED, events.InventoryChanged())
        self.saver.mark_dirty()
        return self.state.inventory[item_id]
