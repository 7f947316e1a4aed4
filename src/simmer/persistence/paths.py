from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from platformdirs import PlatformDirs

logger = logging.getLogger(__name__)

APP_NAME = "simmer"

# Environment variable override (useful for tests and portable installs)
ENV_SAVE_DIR = "SIMMER_SAVE_DIR"


def default_save_dir() -> Path:
    """Return the directory that holds the save file.

    SIMMER_SAVE_DIR wins when set; otherwise ``<user data dir>/saves`` as
    resolved by platformdirs for the current OS.
    """
    override = os.getenv(ENV_SAVE_DIR)
    if override:
        return Path(override).expanduser().resolve()
    dirs = PlatformDirs(appname=APP_NAME, appauthor=False)
    return Path(dirs.user_data_dir) / "saves"


def resolve_save_path(filename: str, save_dir: Optional[Path] = None) -> Path:
    base = Path(save_dir) if save_dir is not None else default_save_dir()
    return base / filename


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
