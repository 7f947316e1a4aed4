from __future__ import annotations

import logging
from typing import Optional

from ..persistence.models import PersistedState
from ..persistence.store import SaveResult, StateStore
from .clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class DirtySaveCoordinator:
    """Coalesces in-session mutations into one write per suspend/quit.

    Routine mutations (energy ticks, ingredient use) only call ``mark_dirty``.
    The host calls ``flush_if_dirty`` when the app is backgrounded or about to
    exit; the flag is cleared whether or not the write succeeded, so a failed
    flush is retried only after the next mutation re-dirties the state.
    """

    def __init__(self, store: StateStore, clock: Optional[Clock] = None) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self._dirty = False

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def mark_dirty(self) -> None:
        self._dirty = True

    def flush_if_dirty(self, state: PersistedState) -> Optional[SaveResult]:
        """Persist the state if anything changed; returns None when nothing was written."""
        if not self._dirty:
            logger.debug("Flush requested but state is clean; skipping write")
            return None
        logger.info("Saving player data before suspend/exit")
        state.last_shutdown_ticks = self.clock.now_ticks()
        result = self.store.save(state)
        if not result:
            logger.warning("Flush failed (%s); will retry after the next change", result.message)
        self._dirty = False
        return result
