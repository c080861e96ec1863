"""Service for detecting dancers double-booked on the same date."""

from __future__ import annotations

from typing import Protocol, Sequence

from bookings.domain.models import StoredEvent


class EventStore(Protocol):
    def events_by_date(self, date: str) -> list[StoredEvent]: ...


def find_conflict(
    store: EventStore,
    date: str | None,
    participants: Sequence[str],
    exclude_event_id: str | None = None,
) -> str | None:
    """Return the first participant already booked on *date*, or ``None``.

    Events are scanned in the store's fetch order and, within each event, the
    participants are checked in the order given. The event whose id equals
    *exclude_event_id* is skipped so an edit never conflicts with itself.
    Repeated names inside *participants* are not a conflict on their own.
    """
    if not date or not participants:
        return None

    for event in store.events_by_date(date):
        if exclude_event_id is not None and event.id == exclude_event_id:
            continue
        booked = set(event.dancers)
        for name in participants:
            if name in booked:
                return name
    return None
