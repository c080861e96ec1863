"""Service for creating, editing and cancelling bookings."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Protocol

from bookings.domain.models import EventPayload, StoredEvent
from bookings.services.conflicts import find_conflict

logger = logging.getLogger(__name__)


class EventNotFoundError(LookupError):
    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


class DuplicateEventError(ValueError):
    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id} already exists")
        self.event_id = event_id


class DancerConflictError(ValueError):
    """Raised when a dancer is already booked on another event that day."""

    def __init__(self, dancer: str, date: str) -> None:
        super().__init__(f'Dancer "{dancer}" is already booked on {date}')
        self.dancer = dancer
        self.date = date


class BookingRepository(Protocol):
    def add(self, event: StoredEvent) -> None: ...

    def get(self, event_id: str) -> StoredEvent | None: ...

    def replace(self, event: StoredEvent) -> None: ...

    def delete(self, event_id: str) -> bool: ...

    def list_all(self) -> list[StoredEvent]: ...

    def events_by_date(self, date: str) -> list[StoredEvent]: ...


def _assigned(dancers: list[str]) -> list[str]:
    """Drop the empty slots the booking form sends for unassigned dancers."""
    return [d for d in dancers if d.strip()]


class BookingService:
    """Booking workflow over an event repository.

    The conflict check and the write that follows it run under one lock, so
    two concurrent submissions cannot both pass the check for the same dancer.
    """

    def __init__(self, repo: BookingRepository) -> None:
        self.repo = repo
        self._write_lock = threading.Lock()

    def list_events(self, dancer: str | None = None) -> list[StoredEvent]:
        events = self.repo.list_all()
        if dancer:
            events = [e for e in events if dancer in e.dancers]
        return events

    def create(self, payload: EventPayload) -> StoredEvent:
        event = payload.to_stored()
        dancers = _assigned(payload.extended_props.dancers)

        with self._write_lock:
            if self.repo.get(event.id) is not None:
                raise DuplicateEventError(event.id)
            self._ensure_no_conflict(event.start, dancers)
            self.repo.add(event)

        logger.info("Created event %s on %s", event.id, event.start)
        return event

    def update(self, event_id: str, payload: EventPayload) -> StoredEvent:
        event = payload.to_stored(event_id=event_id)
        dancers = _assigned(payload.extended_props.dancers)

        with self._write_lock:
            existing = self.repo.get(event_id)
            if existing is None:
                raise EventNotFoundError(event_id)
            self._ensure_no_conflict(event.start, dancers, exclude_event_id=event_id)
            event = event.model_copy(
                update={
                    "created_at": existing.created_at,
                    "updated_at": datetime.now(timezone.utc),
                }
            )
            self.repo.replace(event)

        logger.info("Updated event %s on %s", event.id, event.start)
        return event

    def delete(self, event_id: str) -> None:
        with self._write_lock:
            if not self.repo.delete(event_id):
                raise EventNotFoundError(event_id)
        logger.info("Deleted event %s", event_id)

    def _ensure_no_conflict(
        self, date: str, dancers: list[str], exclude_event_id: str | None = None
    ) -> None:
        dancer = find_conflict(self.repo, date, dancers, exclude_event_id)
        if dancer is not None:
            logger.warning("Rejected booking on %s: %s is already booked", date, dancer)
            raise DancerConflictError(dancer, date)
