from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceFilter, AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_user(self, user_id: int, filters: AttendanceFilter) -> Sequence[AttendanceRecord]:
        """Newest date first."""

        raise NotImplementedError

    def list_for_date(self, user_id: int, day: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def history(self, user_id: int, subject_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_owned(self, user_id: int, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_day(self, user_id: int, subject_id: int, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        subject_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_fields(self, attendance_id: int, changes: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def count_by_status_since(self, user_id: int, since: date) -> dict[AttendanceStatus, int]:
        raise NotImplementedError
