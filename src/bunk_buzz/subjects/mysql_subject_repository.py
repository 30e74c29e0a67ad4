from __future__ import annotations

from typing import Any, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, update_row
from .model import Subject
from .repository import SubjectRepository

_COLUMNS = """
    subject_id, user_id, name, code, total_lectures, attended_lectures, minimum_attendance,
    color, faculty, is_active, created_at, updated_at
"""

_UPDATABLE = {
    "name",
    "code",
    "total_lectures",
    "attended_lectures",
    "minimum_attendance",
    "color",
    "faculty",
    "is_active",
}


def _to_subject(r: dict) -> Subject:
    return Subject(
        subject_id=int(r["subject_id"]),
        user_id=int(r["user_id"]),
        name=r["name"],
        code=r.get("code"),
        total_lectures=int(r["total_lectures"]),
        attended_lectures=int(r["attended_lectures"]),
        minimum_attendance=float(r["minimum_attendance"]),
        color=r["color"],
        faculty=r.get("faculty"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, user_id: int) -> list[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM subjects
                WHERE user_id=%s AND is_active=1
                ORDER BY created_at DESC, subject_id DESC
                """,
                (int(user_id),),
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def get_owned(self, user_id: int, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM subjects WHERE subject_id=%s AND user_id=%s",
                (int(subject_id), int(user_id)),
            )
            row = fetchone(cur)
            return _to_subject(row) if row else None

    def create(
        self,
        *,
        user_id: int,
        name: str,
        code: Optional[str],
        total_lectures: int,
        attended_lectures: int,
        minimum_attendance: float,
        color: str,
        faculty: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subjects(user_id, name, code, total_lectures, attended_lectures,
                                     minimum_attendance, color, faculty)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    name,
                    code,
                    int(total_lectures),
                    int(attended_lectures),
                    minimum_attendance,
                    color,
                    faculty,
                ),
            )
            return int(cur.lastrowid)

    def update_fields(self, subject_id: int, changes: dict[str, Any]) -> bool:
        return update_row(
            self._conn_factory, "subjects", {"subject_id": int(subject_id)}, changes, allowed=_UPDATABLE
        )

    def adjust_counters(self, subject_id: int, *, total_delta: int, attended_delta: int) -> bool:
        # single UPDATE so concurrent marks cannot lose increments
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subjects
                SET total_lectures = total_lectures + %s,
                    attended_lectures = attended_lectures + %s
                WHERE subject_id=%s
                  AND attended_lectures + %s >= 0
                  AND attended_lectures + %s <= total_lectures + %s
                """,
                (
                    int(total_delta),
                    int(attended_delta),
                    int(subject_id),
                    int(attended_delta),
                    int(attended_delta),
                    int(total_delta),
                ),
            )
            return cur.rowcount > 0
