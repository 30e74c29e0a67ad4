from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import DayOfWeek, LectureType


@dataclass(frozen=True)
class TimetableEntry:
    """One weekly lecture slot.

    ``subject_*`` fields are joined from the subject row for display and may
    be empty when the entry is built before the join.
    """

    entry_id: int
    user_id: int
    subject_id: int
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    room: Optional[str] = None
    lecture_type: LectureType = LectureType.THEORY
    is_active: bool = True
    subject_name: Optional[str] = None
    subject_code: Optional[str] = None
    subject_color: Optional[str] = None
    created_at: Optional[datetime] = None

    def overlaps(self, start_time: str, end_time: str) -> bool:
        # zero-padded HH:MM strings order the same way as the times
        return self.start_time < end_time and self.end_time > start_time
