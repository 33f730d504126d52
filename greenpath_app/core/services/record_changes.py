"""Subscriber registry for row-level record changes.

Writers publish a :class:`RecordChange` after every insert or update; screens
that show live data (attendance marking, goal lists) subscribe per table.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Callable

from greenpath_app.core.models import RecordChange

logger = logging.getLogger(__name__)

RecordListener = Callable[[RecordChange], None]


class RecordChangeRegistry:
    """Fans record changes out to the listeners registered for their table."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._listeners: dict[str, list[RecordListener]] = {}

    def subscribe(self, table: str, listener: RecordListener) -> Callable[[], None]:
        """Register ``listener`` for ``table``; returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.setdefault(table, []).append(listener)

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(table, [])
                if listener in listeners:
                    listeners.remove(listener)

        return unsubscribe

    def publish(self, change: RecordChange) -> None:
        with self._lock:
            listeners = list(self._listeners.get(change.table, []))
        for listener in listeners:
            try:
                listener(change)
            except Exception:
                logger.exception("Record listener failed for %s %s", change.table, change.event)

    def listener_count(self, table: str) -> int:
        with self._lock:
            return len(self._listeners.get(table, []))
