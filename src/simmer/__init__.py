"""
simmer core package.

Headless state for an energy-gated cooking game:
- PersistedState and the StateStore that snapshots it to disk
- Energy regeneration, live and after time spent offline
- A single cooking slot that resumes across restarts
- Batched saving on suspend/exit through a dirty flag

Presentation layers subscribe to the EventBus and call into CookingGame.
"""
__version__ = "0.1.0"

from .app import CookingGame, build_store
from .errors import (
    CatalogError,
    SaveValidationError,
    SettingsError,
    SimmerError,
    StorageError,
    StorageReadError,
    StorageWriteError,
    UnknownRecipeError,
)
from .events import EventBus
from .persistence import PersistedState, SaveResult, StateStore
from .settings import Settings

__all__ = [
    "__version__",
    "CookingGame",
    "build_store",
    "CatalogError",
    "SaveValidationError",
    "SettingsError",
    "SimmerError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "UnknownRecipeError",
    "EventBus",
    "PersistedState",
    "SaveResult",
    "StateStore",
    "Settings",
]
