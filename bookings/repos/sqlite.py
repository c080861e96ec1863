"""SQLite-backed event repository (single ``events`` table)."""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from bookings.domain.models import StoredEvent

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS events (
  id        TEXT PRIMARY KEY,
  title     TEXT NOT NULL,
  start     TEXT NOT NULL,
  allDay    INTEGER NOT NULL,
  color     TEXT,
  data      TEXT NOT NULL,
  createdAt TEXT NOT NULL,
  updatedAt TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_events_start ON events(start);
"""

_COLUMNS = "id, title, start, allDay, color, data, createdAt, updatedAt"


_TIMESTAMP = TypeAdapter(datetime)


def _text(value: object, default: str = "") -> str:
    """Coerce a column value to text; undecodable bytes are replaced, not raised."""
    if value is None:
        return default
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _timestamp(value: object) -> datetime:
    # Rows written by other clients may carry a trailing "Z" or garbage.
    try:
        return _TIMESTAMP.validate_python(_text(value))
    except ValidationError:
        logger.debug("Unreadable timestamp %r, using now", value)
        return datetime.now(timezone.utc)


def _row_to_event(row: sqlite3.Row) -> StoredEvent:
    """Build a StoredEvent from a row without ever rejecting the row."""
    return StoredEvent(
        id=_text(row["id"]),
        title=_text(row["title"], "Event"),
        start=_text(row["start"]),
        all_day=bool(row["allDay"]),
        color=_text(row["color"]) or "black",
        data=_text(row["data"], "{}"),
        created_at=_timestamp(row["createdAt"]),
        updated_at=_timestamp(row["updatedAt"]),
    )


def _event_to_params(event: StoredEvent) -> tuple:
    return (
        event.id,
        event.title,
        event.start,
        1 if event.all_day else 0,
        event.color,
        event.data,
        event.created_at.isoformat(),
        event.updated_at.isoformat(),
    )


class SqliteEventRepository:
    """Event store over one SQLite connection shared by the process.

    ``events_by_date`` returns rows in rowid order.
    """

    def __init__(self, path: str = "events.db") -> None:
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        with self._lock:
            self._conn.executescript(SCHEMA)
            self._conn.commit()
        logger.info("Opened event database at %s", path)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def add(self, event: StoredEvent) -> None:
        with self._lock:
            self._conn.execute(
                f"INSERT INTO events ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                _event_to_params(event),
            )
            self._conn.commit()

    def get(self, event_id: str) -> StoredEvent | None:
        with self._lock:
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM events WHERE id = ?", (event_id,)
            ).fetchone()
        return _row_to_event(row) if row is not None else None

    def replace(self, event: StoredEvent) -> None:
        with self._lock:
            self._conn.execute(
                """
                UPDATE events
                   SET title = ?, start = ?, allDay = ?, color = ?, data = ?,
                       createdAt = ?, updatedAt = ?
                 WHERE id = ?
                """,
                (*_event_to_params(event)[1:], event.id),
            )
            self._conn.commit()

    def delete(self, event_id: str) -> bool:
        with self._lock:
            cursor = self._conn.execute("DELETE FROM events WHERE id = ?", (event_id,))
            self._conn.commit()
        return cursor.rowcount > 0

    def list_all(self) -> list[StoredEvent]:
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM events ORDER BY start ASC, rowid ASC"
            ).fetchall()
        return [_row_to_event(r) for r in rows]

    def events_by_date(self, date: str) -> list[StoredEvent]:
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM events WHERE start = ? ORDER BY rowid ASC",
                (date,),
            ).fetchall()
        return [_row_to_event(r) for r in rows]
