from __future__ import annotations

from typing import Any, Optional, Protocol

from ..core.enums import DayOfWeek, LectureType
from .model import TimetableEntry


class TimetableRepository(Protocol):
    def list_active(self, user_id: int, *, day: Optional[DayOfWeek] = None) -> list[TimetableEntry]:
        raise NotImplementedError

    def get_owned(self, user_id: int, entry_id: int) -> Optional[TimetableEntry]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_fields(self, entry_id: int, changes: dict[str, Any]) -> bool:
        raise NotImplementedError
