from __future__ import annotations

from typing import Any, Optional

from ..core.enums import DayOfWeek, LectureType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, update_row
from .model import TimetableEntry
from .repository import TimetableRepository

_SELECT = """
    SELECT t.entry_id, t.user_id, t.subject_id, t.day_of_week, t.start_time, t.end_time,
           t.room, t.lecture_type, t.is_active, t.created_at,
           s.name AS subject_name, s.code AS subject_code, s.color AS subject_color
    FROM timetable_entries t
    JOIN subjects s ON s.subject_id = t.subject_id
"""

_DAY_ORDER = "FIELD(t.day_of_week, 'Monday','Tuesday','Wednesday','Thursday','Friday','Saturday','Sunday')"

_UPDATABLE = {"subject_id", "day_of_week", "start_time", "end_time", "room", "lecture_type", "is_active"}


def _to_entry(r: dict) -> TimetableEntry:
    return TimetableEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        subject_id=int(r["subject_id"]),
        day_of_week=DayOfWeek(r["day_of_week"]),
        start_time=r["start_time"],
        end_time=r["end_time"],
        room=r.get("room"),
        lecture_type=LectureType(r["lecture_type"]),
        is_active=bool(r.get("is_active", True)),
        subject_name=r.get("subject_name"),
        subject_code=r.get("subject_code"),
        subject_color=r.get("subject_color"),
        created_at=r.get("created_at"),
    )


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, user_id: int, *, day: Optional[DayOfWeek] = None) -> list[TimetableEntry]:
        sql = _SELECT + " WHERE t.user_id=%s AND t.is_active=1"
        params: list[Any] = [int(user_id)]
        if day is not None:
            sql += " AND t.day_of_week=%s"
            params.append(day.value)
        sql += f" ORDER BY {_DAY_ORDER}, t.start_time"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_entry(r) for r in fetchall(cur)]

    def get_owned(self, user_id: int, entry_id: int) -> Optional[TimetableEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.entry_id=%s AND t.user_id=%s", (int(entry_id), int(user_id)))
            row = fetchone(cur)
            return _to_entry(row) if row else None

    def create(
        self,
        *,
        user_id: int,
        subject_id: int,
        day_of_week: DayOfWeek,
        start_time: str,
        end_time: str,
        room: Optional[str],
        lecture_type: LectureType,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timetable_entries(user_id, subject_id, day_of_week, start_time, end_time, room, lecture_type)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), int(subject_id), day_of_week.value, start_time, end_time, room, lecture_type.value),
            )
            return int(cur.lastrowid)

    def update_fields(self, entry_id: int, changes: dict[str, Any]) -> bool:
        return update_row(
            self._conn_factory, "timetable_entries", {"entry_id": int(entry_id)}, changes, allowed=_UPDATABLE
        )
