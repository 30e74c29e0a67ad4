from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..predictor.model import SubjectCounters


@dataclass(frozen=True)
class Subject:
    """Domain entity: one course a student tracks attendance for."""

    subject_id: int
    user_id: int
    name: str
    code: Optional[str]
    total_lectures: int
    attended_lectures: int
    minimum_attendance: float
    color: str
    faculty: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def counters(self) -> SubjectCounters:
        return SubjectCounters(
            attended_lectures=self.attended_lectures,
            total_lectures=self.total_lectures,
            minimum_attendance=self.minimum_attendance,
        )


@dataclass(frozen=True)
class SubjectOverview:
    """Active subjects plus totals summed across them."""

    subjects: list[Subject]
    total_lectures: int
    total_attended: int
    overall_attendance: float
