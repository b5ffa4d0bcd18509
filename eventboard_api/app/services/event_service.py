"""
Business logic for events.

``EventService`` builds the SQL for listing, searching and paginating
events, enforces that only the organizer may change or delete an
event, and manages the attendee list.

Signals raised to the API layer:

* ``ValueError`` when the event does not exist (including ids that are
  not valid integers).
* ``PermissionError`` when the caller is not the organizer.
* ``EventConflict`` when an attend/leave request contradicts the
  current attendee list.
"""

import json
import logging
import sqlite3
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..core.db import get_connection, utcnow_iso
from ..schemas.event import EventCreate, EventRead
from ..schemas.user import UserSummary

logger = logging.getLogger(__name__)

EVENT_NOT_FOUND = "Event not found"
MAX_SQLITE_INTEGER = 2**63 - 1
# Largest page whose offset still fits a SQLite INTEGER at the maximum limit.
MAX_PAGE = MAX_SQLITE_INTEGER // 100

EVENT_SELECT = """
    SELECT e.id, e.title, e.description, e.date, e.time, e.location, e.category,
           e.max_attendees, e.price, e.status, e.tags, e.organizer_id,
           e.created_at, e.updated_at,
           u.name AS organizer_name, u.email AS organizer_email
    FROM events e
    JOIN users u ON u.id = e.organizer_id
"""

# Columns that a partial update may touch.
UPDATABLE_COLUMNS = (
    "title",
    "description",
    "date",
    "time",
    "location",
    "category",
    "max_attendees",
    "price",
    "status",
    "tags",
)


class EventConflict(Exception):
    """Attend/leave request that cannot be applied to the event's current state."""


def _parse_event_id(event_id: Any) -> int:
    text = str(event_id)
    if not (text.isascii() and text.isdigit()):
        raise ValueError(EVENT_NOT_FOUND)
    value = int(text)
    if not 1 <= value <= MAX_SQLITE_INTEGER:
        raise ValueError(EVENT_NOT_FOUND)
    return value


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_filters(search: Optional[str] = None, category: Optional[str] = None) -> Tuple[str, List[Any]]:
    """Return the ``WHERE`` clause and parameters for an event listing.

    ``search`` matches events where any whitespace‑separated term
    occurs, case‑insensitively, in the title, description or location.
    ``category`` is an exact match; an empty value or ``All`` disables
    the filter.
    """
    clauses: List[str] = []
    params: List[Any] = []
    terms = search.split() if search else []
    if terms:
        term_clauses = []
        for term in terms:
            pattern = f"%{_escape_like(term)}%"
            term_clauses.append(
                "(e.title LIKE ? ESCAPE '\\' OR e.description LIKE ? ESCAPE '\\' OR e.location LIKE ? ESCAPE '\\')"
            )
            params.extend([pattern, pattern, pattern])
        clauses.append("(" + " OR ".join(term_clauses) + ")")
    if category and category != "All":
        clauses.append("e.category = ?")
        params.append(category)
    where = " WHERE " + " AND ".join(clauses) if clauses else ""
    return where, params


def _serialize_value(column: str, value: Any) -> Any:
    if column == "tags":
        return json.dumps(value)
    if column == "date":
        return value.isoformat()
    return value


class EventService:
    """Service for managing events and their attendees."""

    @classmethod
    async def list_events(
        cls,
        search: Optional[str] = None,
        category: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[EventRead], int]:
        """Return one page of events and the total number of matches.

        Events are sorted by date ascending (ties by id) and skip
        ``(page - 1) * limit`` matches.
        """
        where, params = build_filters(search, category)
        offset = (page - 1) * limit
        conn = get_connection()
        try:
            cursor = conn.cursor()
            total = cursor.execute(
                f"SELECT COUNT(*) AS count FROM events e{where}", tuple(params)
            ).fetchone()["count"]
            rows = cursor.execute(
                f"{EVENT_SELECT}{where} ORDER BY e.date ASC, e.id ASC LIMIT ? OFFSET ?",
                tuple(params) + (limit, offset),
            ).fetchall()
            return cls._rows_to_events(cursor, rows), total
        finally:
            conn.close()

    @classmethod
    async def list_user_events(cls, user_id: int) -> List[EventRead]:
        """Return every event organized by ``user_id``, sorted by date."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(
                f"{EVENT_SELECT} WHERE e.organizer_id = ? ORDER BY e.date ASC, e.id ASC",
                (user_id,),
            ).fetchall()
            return cls._rows_to_events(cursor, rows)
        finally:
            conn.close()

    @classmethod
    async def get_event(cls, event_id: Any) -> EventRead:
        """Retrieve a single event with organizer and attendees.

        Raises ``ValueError`` if the event does not exist.
        """
        conn = get_connection()
        try:
            return cls._fetch_event(conn.cursor(), _parse_event_id(event_id))
        finally:
            conn.close()

    @classmethod
    async def create_event(cls, data: EventCreate, current_user: Dict[str, Any]) -> EventRead:
        """Create an event organized by ``current_user`` and return it."""
        now = utcnow_iso()
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO events (title, description, date, time, location, category,
                                    max_attendees, price, status, tags, organizer_id,
                                    created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.title,
                    data.description,
                    data.date.isoformat(),
                    data.time,
                    data.location,
                    data.category,
                    data.max_attendees,
                    data.price,
                    data.status,
                    json.dumps(data.tags),
                    current_user["user_id"],
                    now,
                    now,
                ),
            )
            event_id = cursor.lastrowid
            conn.commit()
            logger.info("User %s created event %s '%s'", current_user.get("sub"), event_id, data.title)
            return cls._fetch_event(cursor, event_id)
        finally:
            conn.close()

    @classmethod
    async def update_event(cls, event_id: Any, updates: Dict[str, Any], current_user: Dict[str, Any]) -> EventRead:
        """Apply a partial update to an event owned by ``current_user``.

        Only keys listed in ``UPDATABLE_COLUMNS`` are written.  Raises
        ``ValueError`` if the event does not exist and
        ``PermissionError`` if the caller is not its organizer.
        """
        event_id = _parse_event_id(event_id)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cls._check_owner(cursor, event_id, current_user, "update")
            fields = [key for key in UPDATABLE_COLUMNS if key in updates]
            if fields:
                assignments = ", ".join(f"{key} = ?" for key in fields)
                values = [_serialize_value(key, updates[key]) for key in fields]
                cursor.execute(
                    f"UPDATE events SET {assignments}, updated_at = ? WHERE id = ?",
                    tuple(values) + (utcnow_iso(), event_id),
                )
                conn.commit()
                logger.info("User %s updated event %s: %s", current_user.get("sub"), event_id, ", ".join(fields))
            return cls._fetch_event(cursor, event_id)
        finally:
            conn.close()

    @classmethod
    async def delete_event(cls, event_id: Any, current_user: Dict[str, Any]) -> None:
        """Delete an event owned by ``current_user``.

        Attendee links are removed by the ``ON DELETE CASCADE`` foreign
        key.  Raises ``ValueError`` if the event does not exist and
        ``PermissionError`` if the caller is not its organizer.
        """
        event_id = _parse_event_id(event_id)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cls._check_owner(cursor, event_id, current_user, "delete")
            cursor.execute("DELETE FROM events WHERE id = ?", (event_id,))
            conn.commit()
            logger.info("User %s deleted event %s", current_user.get("sub"), event_id)
        finally:
            conn.close()

    @classmethod
    async def attend_event(cls, event_id: Any, current_user: Dict[str, Any]) -> EventRead:
        """Add ``current_user`` to the event's attendees.

        Raises ``EventConflict`` when the event is cancelled, full, or
        the user already attends it.
        """
        event_id = _parse_event_id(event_id)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            event = cls._fetch_event(cursor, event_id)
            user_id = current_user["user_id"]
            if event.status == "cancelled":
                raise EventConflict("Cannot attend a cancelled event")
            if any(attendee.id == user_id for attendee in event.attendees):
                raise EventConflict("Already attending this event")
            if event.spots_remaining is not None and event.spots_remaining <= 0:
                raise EventConflict("Event is full")
            cursor.execute(
                "INSERT INTO event_attendees (event_id, user_id, joined_at) VALUES (?, ?, ?)",
                (event_id, user_id, utcnow_iso()),
            )
            conn.commit()
            logger.info("User %s is attending event %s", current_user.get("sub"), event_id)
            return cls._fetch_event(cursor, event_id)
        finally:
            conn.close()

    @classmethod
    async def leave_event(cls, event_id: Any, current_user: Dict[str, Any]) -> EventRead:
        """Remove ``current_user`` from the event's attendees."""
        event_id = _parse_event_id(event_id)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cls._fetch_event(cursor, event_id)
            cursor.execute(
                "DELETE FROM event_attendees WHERE event_id = ? AND user_id = ?",
                (event_id, current_user["user_id"]),
            )
            if cursor.rowcount == 0:
                raise EventConflict("Not attending this event")
            conn.commit()
            logger.info("User %s left event %s", current_user.get("sub"), event_id)
            return cls._fetch_event(cursor, event_id)
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _check_owner(cursor: sqlite3.Cursor, event_id: int, current_user: Dict[str, Any], action: str) -> None:
        row = cursor.execute("SELECT organizer_id FROM events WHERE id = ?", (event_id,)).fetchone()
        if not row:
            raise ValueError(EVENT_NOT_FOUND)
        if row["organizer_id"] != current_user.get("user_id"):
            logger.warning(
                "User %s tried to %s event %s owned by user %s",
                current_user.get("sub"), action, event_id, row["organizer_id"],
            )
            raise PermissionError(f"Not authorized to {action} this event")

    @classmethod
    def _fetch_event(cls, cursor: sqlite3.Cursor, event_id: int) -> EventRead:
        row = cursor.execute(f"{EVENT_SELECT} WHERE e.id = ?", (event_id,)).fetchone()
        if not row:
            raise ValueError(EVENT_NOT_FOUND)
        return cls._rows_to_events(cursor, [row])[0]

    @classmethod
    def _rows_to_events(cls, cursor: sqlite3.Cursor, rows: List[sqlite3.Row]) -> List[EventRead]:
        attendees = cls._load_attendees(cursor, [row["id"] for row in rows])
        return [cls._row_to_event(row, attendees.get(row["id"], [])) for row in rows]

    @staticmethod
    def _load_attendees(cursor: sqlite3.Cursor, event_ids: Iterable[int]) -> Dict[int, List[UserSummary]]:
        ids = list(event_ids)
        result: Dict[int, List[UserSummary]] = defaultdict(list)
        if not ids:
            return result
        placeholders = ", ".join("?" for _ in ids)
        rows = cursor.execute(
            f"""
            SELECT a.event_id, u.id, u.name, u.email
            FROM event_attendees a
            JOIN users u ON u.id = a.user_id
            WHERE a.event_id IN ({placeholders})
            ORDER BY a.joined_at ASC, u.id ASC
            """,
            tuple(ids),
        ).fetchall()
        for row in rows:
            result[row["event_id"]].append(UserSummary(id=row["id"], name=row["name"], email=row["email"]))
        return result

    @staticmethod
    def _row_to_event(row: sqlite3.Row, attendees: List[UserSummary]) -> EventRead:
        return EventRead(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            date=row["date"],
            time=row["time"],
            location=row["location"],
            category=row["category"],
            max_attendees=row["max_attendees"],
            price=row["price"],
            status=row["status"],
            tags=json.loads(row["tags"]) if row["tags"] else [],
            organizer=UserSummary(
                id=row["organizer_id"],
                name=row["organizer_name"],
                email=row["organizer_email"],
            ),
            attendees=attendees,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
