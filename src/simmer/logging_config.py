import logging
import os
import sys
from typing import Optional

ENV_LOG_LEVEL = "SIMMER_LOG_LEVEL"


def configure_logging(level: Optional[int] = None, default_level: int = logging.INFO) -> None:
    """Configure the root logger with a single stdout handler.

    An explicit ``level`` wins; otherwise SIMMER_LOG_LEVEL is respected if set.
    """
    if level is None:
        level = default_level
        level_name = os.getenv(ENV_LOG_LEVEL)
        if level_name:
            level = getattr(logging, level_name.upper(), default_level)

    handler = logging.StreamHandler(stream=sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplicates in repeated test runs
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
