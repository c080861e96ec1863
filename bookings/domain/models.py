"""Domain models for the booking calendar."""

from __future__ import annotations

import json
import logging
import time
from datetime import date, datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    # Millisecond timestamp, same shape as the ids the calendar UI generates.
    return str(int(time.time() * 1000))


def _today() -> str:
    return date.today().isoformat()


# ---------------------------------------------------------------------------
# Attribute blob
# ---------------------------------------------------------------------------


class EventAttributes(BaseModel):
    """The opaque attributes map stored with each event.

    Only ``dancers`` is typed; every other field the booking form sends
    (location, contacts, price, ...) is carried through untouched.
    """

    model_config = ConfigDict(extra="allow")

    dancers: list[str] = Field(default_factory=list)

    @classmethod
    def from_blob(cls, blob: str | None) -> EventAttributes:
        """Decode a stored blob, degrading to an empty structure on bad data."""
        if not blob:
            return cls()
        try:
            return cls.model_validate_json(blob)
        except ValidationError as exc:
            logger.debug("Unreadable attribute blob (%d errors)", exc.error_count())
            return cls()


def decode_blob(blob: str | None) -> dict:
    """Return the blob as a plain dict, or ``{}`` if it is not a JSON object."""
    if not blob:
        return {}
    try:
        value = json.loads(blob)
    except ValueError:
        return {}
    return value if isinstance(value, dict) else {}


# ---------------------------------------------------------------------------
# Stored row
# ---------------------------------------------------------------------------


class StoredEvent(BaseModel):
    id: str
    title: str
    start: str
    all_day: bool = False
    color: str = "black"
    data: str = "{}"
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def dancers(self) -> list[str]:
        return EventAttributes.from_blob(self.data).dancers


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class EventPayload(BaseModel):
    """Body of POST /events and PUT /events/{id}."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    title: str | None = None
    start: str | None = None
    all_day: bool = Field(default=False, alias="allDay")
    background_color: str | None = Field(default=None, alias="backgroundColor")
    border_color: str | None = Field(default=None, alias="borderColor")
    extended_props: EventAttributes = Field(
        default_factory=EventAttributes, alias="extendedProps"
    )

    def to_stored(self, event_id: str | None = None) -> StoredEvent:
        return StoredEvent(
            id=event_id or self.id or _new_id(),
            title=self.title or "Event",
            start=self.start or _today(),
            all_day=self.all_day,
            color=self.background_color or "black",
            data=self.extended_props.model_dump_json(),
        )


class CalendarEvent(BaseModel):
    """An event as the calendar UI consumes it."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    start: str
    all_day: bool = Field(alias="allDay")
    background_color: str = Field(alias="backgroundColor")
    border_color: str = Field(alias="borderColor")
    extended_props: dict = Field(default_factory=dict, alias="extendedProps")

    @classmethod
    def from_stored(cls, event: StoredEvent) -> CalendarEvent:
        return cls(
            id=event.id,
            title=event.title,
            start=event.start,
            all_day=event.all_day,
            background_color=event.color or "black",
            border_color=event.color or "black",
            extended_props=decode_blob(event.data),
        )


class WriteResult(BaseModel):
    ok: bool = True
    id: str | None = None


class LoginRequest(BaseModel):
    password: str = ""


class LoginResponse(BaseModel):
    token: str
