from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..errors import SaveValidationError

logger = logging.getLogger(__name__)

# Increment when making breaking schema changes
SCHEMA_VERSION = 1

DEFAULT_MAX_ENERGY = 100
DEFAULT_STARTER_INVENTORY: Dict[str, int] = {
    "egg": 50,
    "vegetable": 50,
    "rice": 50,
    "carrot": 50,
}


@dataclass
class PersistedState:
    """Everything about a player that must survive a restart.

    The record is always written and read as a whole. ``last_shutdown_ticks``
    is 0 for a state that has never been flushed on suspend/exit.
    """

    current_energy: int = DEFAULT_MAX_ENERGY
    max_energy: int = DEFAULT_MAX_ENERGY
    regen_accumulator: float = 0.0
    last_shutdown_ticks: int = 0
    inventory: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_STARTER_INVENTORY))
    active_recipe_id: Optional[str] = None
    cooking_remaining_seconds: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.max_energy, int) or self.max_energy <= 0:
            raise SaveValidationError("max_energy must be a positive integer")
        if not isinstance(self.current_energy, int) or self.current_energy < 0:
            raise SaveValidationError("current_energy must be a non-negative integer")
        if self.current_energy > self.max_energy:
            raise SaveValidationError(
                f"current_energy {self.current_energy} exceeds max_energy {self.max_energy}"
            )
        if not math.isfinite(self.regen_accumulator) or self.regen_accumulator < 0:
            raise SaveValidationError("regen_accumulator must be a finite, non-negative number")
        if not isinstance(self.last_shutdown_ticks, int) or self.last_shutdown_ticks < 0:
            raise SaveValidationError("last_shutdown_ticks must be a non-negative integer")
        for item_id, count in self.inventory.items():
            if not item_id or not isinstance(item_id, str):
                raise SaveValidationError("inventory ids must be non-empty strings")
            if not isinstance(count, int) or count < 0:
                raise SaveValidationError(f"inventory count for {item_id!r} must be a non-negative integer")
        if not math.isfinite(self.cooking_remaining_seconds) or self.cooking_remaining_seconds < 0:
            raise SaveValidationError("cooking_remaining_seconds must be a finite, non-negative number")
        if self.active_recipe_id is None and self.cooking_remaining_seconds:
            logger.warning(
                "Dropping %.1fs of cooking time recorded without a recipe id",
                self.cooking_remaining_seconds,
            )
            self.cooking_remaining_seconds = 0.0

    @classmethod
    def fresh(
        cls,
        max_energy: int = DEFAULT_MAX_ENERGY,
        starter_inventory: Optional[Mapping[str, int]] = None,
    ) -> "PersistedState":
        """A brand new player: full energy, starter ingredients, nothing cooking."""
        inventory = dict(DEFAULT_STARTER_INVENTORY if starter_inventory is None else starter_inventory)
        return cls(current_energy=max_energy, max_energy=max_energy, inventory=inventory)

    @property
    def is_cooking(self) -> bool:
        return self.active_recipe_id is not None

    def clear_activity(self) -> None:
        self.active_recipe_id = None
        self.cooking_remaining_seconds = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "current_energy": self.current_energy,
            "max_energy": self.max_energy,
            "regen_accumulator": self.regen_accumulator,
            "last_shutdown_ticks": self.last_shutdown_ticks,
            "inventory": [{"id": k, "count": v} for k, v in self.inventory.items()],
            "active_recipe_id": self.active_recipe_id,
            "cooking_remaining_seconds": self.cooking_remaining_seconds,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "PersistedState":
        if not isinstance(data, dict):
            raise SaveValidationError("Save record must be a JSON object")
        try:
            inventory: Dict[str, int] = {}
            entries: List[Dict[str, Any]] = data.get("inventory", [])
            for entry in entries:
                item_id = entry["id"]
                if item_id in inventory:
                    raise SaveValidationError(f"Duplicate inventory id: {item_id!r}")
                inventory[item_id] = int(entry["count"])
            recipe_id = data.get("active_recipe_id")
            return PersistedState(
                current_energy=int(data["current_energy"]),
                max_energy=int(data["max_energy"]),
                regen_accumulator=float(data.get("regen_accumulator", 0.0)),
                last_shutdown_ticks=int(data.get("last_shutdown_ticks", 0)),
                inventory=inventory,
                active_recipe_id=str(recipe_id) if recipe_id else None,
                cooking_remaining_seconds=float(data.get("cooking_remaining_seconds", 0.0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SaveValidationError(f"Malformed save record: {e!r}") from e
