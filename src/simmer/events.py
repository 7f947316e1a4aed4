"""
Synchronous notification channel between the simulation core and its listeners.

Events are fire-and-forget: listeners run in registration order, a failing
listener is logged and never stops the others or the publisher.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, List

logger = logging.getLogger(__name__)

RESOURCE_CHANGED = "resource_changed"
INVENTORY_CHANGED = "inventory_changed"
ACTIVITY_STARTED = "activity_started"
ACTIVITY_TICK = "activity_tick"
ACTIVITY_FINISHED = "activity_finished"

Listener = Callable[[Any], None]


@dataclass(frozen=True)
class ResourceChanged:
    current: int
    maximum: int


@dataclass(frozen=True)
class InventoryChanged:
    pass


@dataclass(frozen=True)
class ActivityStarted:
    recipe_id: str


@dataclass(frozen=True)
class ActivityTick:
    remaining: float


@dataclass(frozen=True)
class ActivityFinished:
    recipe_id: str
    success: bool


class EventBus:
    """Minimal synchronous pub/sub event bus."""

    def __init__(self) -> None:
        self._subscribers: DefaultDict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, event_name: str, callback: Listener) -> None:
        logger.debug("Subscribing to event '%s': %s", event_name, callback)
        self._subscribers[event_name].append(callback)

    def unsubscribe(self, event_name: str, callback: Listener) -> None:
        try:
            self._subscribers[event_name].remove(callback)
        except ValueError:
            logger.debug("Listener %s was not subscribed to '%s'", callback, event_name)

    def publish(self, event_name: str, payload: Any = None) -> None:
        listeners = list(self._subscribers.get(event_name, []))
        logger.debug("Publishing event '%s' to %d subscribers", event_name, len(listeners))
        for cb in listeners:
            try:
                cb(payload)
            except Exception as exc:
                logger.exception("Error in event subscriber for '%s': %s", event_name, exc)
