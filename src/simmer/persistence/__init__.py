"""Persistence subsystem for simmer.

This package provides:
- The PersistedState record (energy, inventory, cooking slot)
- Encoding/decoding to a versioned JSON layout
- A StateStore that does atomic whole-record writes with a backup copy
"""

from .models import SCHEMA_VERSION, PersistedState
from .store import SaveResult, StateStore
from .paths import default_save_dir, resolve_save_path

__all__ = [
    "SCHEMA_VERSION",
    "PersistedState",
    "SaveResult",
    "StateStore",
    "default_save_dir",
    "resolve_save_path",
]
