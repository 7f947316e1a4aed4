"""Game rules: energy regeneration, the cooking slot, the pantry and save batching."""
from .catalog import IngredientCost, RecipeCatalog, RecipeDefinition
from .clock import ManualClock, PauseController, SystemClock
from .cooking import CookingScheduler, StartFailure, StartResult
from .energy import EnergyRegenerator
from .inventory import Pantry
from .saving import DirtySaveCoordinator

__all__ = [
    "IngredientCost",
    "RecipeCatalog",
    "RecipeDefinition",
    "ManualClock",
    "PauseController",
    "SystemClock",
    "CookingScheduler",
    "StartFailure",
    "StartResult",
    "EnergyRegenerator",
    "Pantry",
    "DirtySaveCoordinator",
]
