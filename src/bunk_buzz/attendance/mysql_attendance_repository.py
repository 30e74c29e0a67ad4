from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, update_row
from .model import AttendanceFilter, AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.attendance_id, a.user_id, a.subject_id, a.attendance_date, a.status, a.notes, a.marked_at,
           s.name AS subject_name, s.code AS subject_code, s.color AS subject_color
    FROM daily_attendance a
    JOIN subjects s ON s.subject_id = a.subject_id
"""

_UPDATABLE = {"status", "notes", "marked_at"}


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        subject_id=int(r["subject_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        marked_at=r.get("marked_at"),
        subject_name=r.get("subject_name"),
        subject_code=r.get("subject_code"),
        subject_color=r.get("subject_color"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int, filters: AttendanceFilter) -> Sequence[AttendanceRecord]:
        where = ["a.user_id=%s"]
        params: list[Any] = [int(user_id)]
        if filters.subject_id is not None:
            where.append("a.subject_id=%s")
            params.append(int(filters.subject_id))
        if filters.status is not None:
            where.append("a.status=%s")
            params.append(filters.status.value)
        if filters.start_date is not None:
            where.append("a.attendance_date >= %s")
            params.append(filters.start_date)
        if filters.end_date is not None:
            where.append("a.attendance_date <= %s")
            params.append(filters.end_date)

        sql = _SELECT + " WHERE " + " AND ".join(where) + " ORDER BY a.attendance_date DESC, a.attendance_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, user_id: int, day: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE a.user_id=%s AND a.attendance_date=%s ORDER BY s.name",
                (int(user_id), day),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def history(self, user_id: int, subject_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE a.user_id=%s AND a.subject_id=%s
                ORDER BY a.attendance_date DESC
                LIMIT %s
                """,
                (int(user_id), int(subject_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_owned(self, user_id: int, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE a.attendance_id=%s AND a.user_id=%s",
                (int(attendance_id), int(user_id)),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def get_for_day(self, user_id: int, subject_id: int, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE a.user_id=%s AND a.subject_id=%s AND a.attendance_date=%s",
                (int(user_id), int(subject_id), day),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def create(
        self,
        *,
        user_id: int,
        subject_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_attendance(user_id, subject_id, attendance_date, status, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), int(subject_id), attendance_date, status.value, notes),
            )
            return int(cur.lastrowid)

    def update_fields(self, attendance_id: int, changes: dict[str, Any]) -> bool:
        return update_row(
            self._conn_factory,
            "daily_attendance",
            {"attendance_id": int(attendance_id)},
            changes,
            allowed=_UPDATABLE,
        )

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM daily_attendance WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def count_by_status_since(self, user_id: int, since: date) -> dict[AttendanceStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS n
                FROM daily_attendance
                WHERE user_id=%s AND attendance_date >= %s
                GROUP BY status
                """,
                (int(user_id), since),
            )
            counts = {status: 0 for status in AttendanceStatus}
            for r in fetchall(cur):
                counts[AttendanceStatus(r["status"])] = int(r["n"])
            return counts
