"""In-memory event repository."""

from __future__ import annotations

import threading

from bookings.domain.models import StoredEvent


class EventRepository:
    """Dict-backed store for StoredEvent instances, keyed by id.

    Insertion order is the fetch order for ``events_by_date``.
    """

    def __init__(self) -> None:
        self._store: dict[str, StoredEvent] = {}
        self._lock = threading.Lock()

    def add(self, event: StoredEvent) -> None:
        with self._lock:
            self._store[event.id] = event

    def get(self, event_id: str) -> StoredEvent | None:
        return self._store.get(event_id)

    def replace(self, event: StoredEvent) -> None:
        # dict assignment keeps the original insertion position
        with self._lock:
            self._store[event.id] = event

    def delete(self, event_id: str) -> bool:
        with self._lock:
            return self._store.pop(event_id, None) is not None

    def list_all(self) -> list[StoredEvent]:
        with self._lock:
            events = list(self._store.values())
        return sorted(events, key=lambda e: e.start)

    def events_by_date(self, date: str) -> list[StoredEvent]:
        with self._lock:
            return [e for e in self._store.values() if e.start == date]
