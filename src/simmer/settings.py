from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import SettingsError

logger = logging.getLogger(__name__)

DATA_PACKAGE = "simmer.data"
DEFAULT_SETTINGS_FILE = "default_settings.yaml"


@dataclass
class EnergySettings:
    max_energy: int = 100
    regen_interval_seconds: float = 5.0
    energy_per_tick: int = 1


@dataclass
class CookingSettings:
    energy_cost: int = 10
    checkpoint_interval_seconds: float = 1.0


@dataclass
class StorageSettings:
    save_filename: str = "playerdata.json"
    keep_backup: bool = True


@dataclass
class LoopSettings:
    tick_rate: float = 30.0
    max_steps: Optional[int] = None


@dataclass
class Settings:
    energy: EnergySettings = field(default_factory=EnergySettings)
    cooking: CookingSettings = field(default_factory=CookingSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)
    loop: LoopSettings = field(default_factory=LoopSettings)
    starter_inventory: Dict[str, int] = field(
        default_factory=lambda: {"egg": 50, "vegetable": 50, "rice": 50, "carrot": 50}
    )

    def __post_init__(self) -> None:
        if self.energy.max_energy <= 0:
            raise SettingsError("energy.max_energy must be positive")
        if self.energy.regen_interval_seconds <= 0:
            raise SettingsError("energy.regen_interval_seconds must be positive")
        if self.energy.energy_per_tick < 0:
            raise SettingsError("energy.energy_per_tick cannot be negative")
        if self.cooking.energy_cost < 0:
            raise SettingsError("cooking.energy_cost cannot be negative")
        if self.cooking.checkpoint_interval_seconds <= 0:
            raise SettingsError("cooking.checkpoint_interval_seconds must be positive")
        for item_id, count in self.starter_inventory.items():
            if not isinstance(count, int) or count < 0:
                raise SettingsError(f"starter_inventory[{item_id!r}] must be a non-negative integer")

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must contain a mapping")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict) and k != "starter_inventory":
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Settings":
        known = {"energy", "cooking", "storage", "loop", "starter_inventory"}
        unknown = set(data) - known
        if unknown:
            raise SettingsError(f"Unknown settings sections: {sorted(unknown)}")
        try:
            return cls(
                energy=EnergySettings(**data.get("energy", {})),
                cooking=CookingSettings(**data.get("cooking", {})),
                storage=StorageSettings(**data.get("storage", {})),
                loop=LoopSettings(**data.get("loop", {})),
                starter_inventory=dict(data.get("starter_inventory") or {}),
            )
        except TypeError as e:
            raise SettingsError(f"Invalid settings: {e}") from e

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "Settings":
        """Load settings from built-in defaults and an optional user override file.

        If user_path is provided and exists, its values are overlaid onto the defaults.
        """
        try:
            with resources.files(DATA_PACKAGE).joinpath(DEFAULT_SETTINGS_FILE).open("r", encoding="utf-8") as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = dataclasses.asdict(Settings())

        user_data: dict = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        merged = cls._deep_merge(default_data, user_data)
        settings = cls._from_dict(merged)
        logger.debug("Settings merged: %s", settings)
        return settings

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(dataclasses.asdict(self), f, sort_keys=False)
        logger.info("Saved settings to %s", path)
