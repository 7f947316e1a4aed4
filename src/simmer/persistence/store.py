from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..errors import StorageReadError, StorageWriteError
from .codec import decode_state, encode_state
from .models import PersistedState
from .paths import ensure_dir

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    success: bool
    path: Path
    message: str = ""
    code: str = "OK"  # OK | IO_ERROR | ENCODE_ERROR

    def __bool__(self) -> bool:
        return self.success


class StateStore:
    """Reads and writes the whole PersistedState record to a single JSON file.

    Pure I/O: no game rules live here. Reads never raise (a fresh default is
    substituted) and writes report failure through SaveResult instead of
    raising, so storage trouble degrades durability but not the session.
    """

    def __init__(
        self,
        path: Path,
        default_factory: Callable[[], PersistedState] = PersistedState.fresh,
        keep_backup: bool = True,
    ) -> None:
        self.path = Path(path)
        self.backup_path = self.path.with_suffix(self.path.suffix + ".bak")
        self.default_factory = default_factory
        self.keep_backup = keep_backup

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> PersistedState:
        """Return the saved record, or a fresh default when nothing usable is on disk."""
        if not self.path.exists() and not self.backup_path.exists():
            logger.info("No save file found at %s; creating new player state", self.path)
            return self.default_factory()

        for candidate in (self.path, self.backup_path):
            if not candidate.exists():
                continue
            try:
                state = self._read(candidate)
            except StorageReadError as e:
                logger.error("Failed to load save data from %s: %s", candidate, e)
                continue
            if candidate == self.backup_path:
                logger.warning("Recovered player state from backup %s", candidate)
            else:
                logger.info("Player state loaded from %s", candidate)
            return state

        logger.error("No readable save at %s; starting from a fresh player state", self.path)
        return self.default_factory()

    def save(self, state: PersistedState) -> SaveResult:
        """Serialize the complete record and atomically replace the save file."""
        try:
            text = encode_state(state)
        except (TypeError, ValueError) as e:
            logger.error("Failed to encode player state: %s", e)
            return SaveResult(False, self.path, f"Failed to encode player state: {e}", "ENCODE_ERROR")
        try:
            self._atomic_write(text)
        except StorageWriteError as e:
            logger.error("Failed to save player state to %s: %s", self.path, e)
            return SaveResult(False, self.path, str(e), "IO_ERROR")
        logger.debug("Player state saved to %s", self.path)
        return SaveResult(True, self.path, "Saved")

    # Internal utilities

    def _read(self, path: Path) -> PersistedState:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Unable to read {path}: {e}") from e
        return decode_state(text)

    def _atomic_write(self, text: str) -> None:
        """Write text next to the target, fsync it, then swap it into place.

        The previous file is copied to the .bak path first, so a crash at any
        point leaves at least one parseable record behind.
        """
        tmp_name: Optional[str] = None
        try:
            ensure_dir(self.path.parent)
            fd, tmp_name = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            if self.keep_backup and self.path.exists():
                shutil.copy2(self.path, self.backup_path)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StorageWriteError(f"Unable to write {self.path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                try:
                    os.remove(tmp_name)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp_name, exc_info=True)
