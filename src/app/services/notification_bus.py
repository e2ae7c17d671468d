from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from src.domain.models import FleetSnapshot

logger = logging.getLogger(__name__)

Observer = Callable[[FleetSnapshot], None]
Unsubscribe = Callable[[], None]


@dataclass(slots=True)
class NotificationBus:
    """Synchronous pub/sub for fleet snapshots.

    Observers are called in registration order with the same snapshot
    instance. A failing observer is logged and skipped; it never stops
    delivery to the others and never reaches the publisher.
    """

    _observers: dict[int, Observer] = field(default_factory=dict, init=False, repr=False)
    _ids: itertools.count = field(
        default_factory=itertools.count, init=False, repr=False
    )
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def subscribe(self, observer: Observer) -> Unsubscribe:
        with self._lock:
            token = next(self._ids)
            self._observers[token] = observer

        def unsubscribe() -> None:
            with self._lock:
                self._observers.pop(token, None)

        return unsubscribe

    def publish(self, snapshot: FleetSnapshot) -> int:
        """Deliver to every current observer; returns the number that succeeded."""

        with self._lock:
            observers = list(self._observers.values())

        delivered = 0
        for observer in observers:
            try:
                observer(snapshot)
            except Exception:
                logger.exception(
                    "Fleet observer %r failed on snapshot %d", observer, snapshot.sequence
                )
                continue
            delivered += 1
        return delivered
