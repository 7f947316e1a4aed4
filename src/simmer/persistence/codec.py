"""JSON layout of the save file and upgrades between its versions."""
from __future__ import annotations

import json
from typing import Any, Callable, Dict

from ..errors import SaveValidationError
from .models import SCHEMA_VERSION, PersistedState

# Oldest layout this build can still read.
MIN_SCHEMA_VERSION = 1

Migration = Callable[[Dict[str, Any]], Dict[str, Any]]

# from_version -> step producing the record at from_version + 1
MIGRATIONS: Dict[int, Migration] = {}


def encode_state(state: PersistedState) -> str:
    return json.dumps(state.to_dict(), ensure_ascii=False, indent=2)


def decode_state(text: str) -> PersistedState:
    """Parse save text, upgrade it to the current layout and build the record.

    Raises:
        SaveValidationError for anything that is not a usable record.
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise SaveValidationError(f"Save file is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SaveValidationError("Save record must be a JSON object")
    return PersistedState.from_dict(migrate_data(data))


def read_version(data: Dict[str, Any]) -> int:
    """The record's layout version. A record without one is read as the current layout."""
    raw = data.get("schema_version", SCHEMA_VERSION)
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise SaveValidationError(f"schema_version must be an integer, got {raw!r}")
    if raw < MIN_SCHEMA_VERSION:
        raise SaveValidationError(f"Unknown save schema version {raw}")
    if raw > SCHEMA_VERSION:
        raise SaveValidationError(f"Save schema version {raw} is newer than supported {SCHEMA_VERSION}")
    return raw


def migrate_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply registered upgrade steps until the record reaches SCHEMA_VERSION."""
    version = read_version(data)
    while version < SCHEMA_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            raise SaveValidationError(f"No upgrade path from save schema version {version}")
        data = step(dict(data))
        version += 1
        data["schema_version"] = version
    return data
