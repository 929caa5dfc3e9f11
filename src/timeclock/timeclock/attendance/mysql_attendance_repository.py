from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import EventKind
from ..core.exceptions import NotFound
from ..database.connection import DatabaseConnection
from ..database.decoding import require_enum, require_float, require_int, require_str
from ..database.mysql_base import fetchall, fetchone, read_cursor, write_cursor
from .model import AttendanceEvent
from .repository import AttendanceRepository

_EVENT_COLUMNS = "id, user_id, timestamp, type, photo_url, latitude, longitude"


def decode_event_row(row: Mapping[str, Any]) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=require_str(row, "id"),
        user_id=require_str(row, "user_id"),
        timestamp=require_int(row, "timestamp"),
        kind=require_enum(row, "type", EventKind),
        photo=require_str(row, "photo_url"),
        latitude=require_float(row, "latitude"),
        longitude=require_float(row, "longitude"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_event(self, event: AttendanceEvent) -> None:
        with write_cursor(self._conn_factory, action="insert_event") as (_, cur):
            cur.execute(
                """
                INSERT INTO time_records(id, user_id, timestamp, type, photo_url, latitude, longitude)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    event.event_id,
                    event.user_id,
                    int(event.timestamp),
                    event.kind.value,
                    event.photo,
                    float(event.latitude),
                    float(event.longitude),
                ),
            )

    def update_event(self, event_id: str, *, timestamp: int, kind: EventKind) -> None:
        with write_cursor(self._conn_factory, action="update_event") as (_, cur):
            cur.execute(
                "UPDATE time_records SET timestamp=%s, type=%s WHERE id=%s",
                (int(timestamp), kind.value, event_id),
            )
            if cur.rowcount == 0:
                cur.execute("SELECT 1 AS found FROM time_records WHERE id=%s", (event_id,))
                if not fetchone(cur):
                    raise NotFound("Registro não encontrado")

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        with read_cursor(self._conn_factory, action="get_event") as (_, cur):
            cur.execute(f"SELECT {_EVENT_COLUMNS} FROM time_records WHERE id=%s", (event_id,))
            row = fetchone(cur)
            return decode_event_row(row) if row else None

    def list_by_user(self, user_id: str) -> Sequence[AttendanceEvent]:
        with read_cursor(self._conn_factory, action="list_by_user") as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM time_records
                WHERE user_id=%s
                ORDER BY timestamp DESC
                """,
                (user_id,),
            )
            return [decode_event_row(r) for r in fetchall(cur)]

    def list_by_range(self, start_millis: int, end_millis: int) -> Sequence[AttendanceEvent]:
        # No LIMIT: the date pickers are the only range limiter.
        with read_cursor(self._conn_factory, action="list_by_range") as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM time_records
                WHERE timestamp >= %s AND timestamp <= %s
                ORDER BY timestamp DESC
                """,
                (int(start_millis), int(end_millis)),
            )
            return [decode_event_row(r) for r in fetchall(cur)]
