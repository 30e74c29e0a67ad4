from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..predictor.model import SubjectStats
from ..subjects.model import Subject


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one subject marked present/absent on one calendar day."""

    attendance_id: int
    user_id: int
    subject_id: int
    attendance_date: date
    status: AttendanceStatus
    notes: Optional[str] = None
    marked_at: Optional[datetime] = None
    subject_name: Optional[str] = None
    subject_code: Optional[str] = None
    subject_color: Optional[str] = None


@dataclass(frozen=True)
class AttendanceFilter:
    subject_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[AttendanceStatus] = None


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    subject: Subject
    created: bool


@dataclass(frozen=True)
class AttendanceSummary:
    """Dashboard read-model across the active subjects of one user."""

    total_lectures: int
    total_attended: int
    overall_attendance: float
    subjects_above_min: int
    subjects_below_min: int
    recent_present: int
    recent_absent: int
    subjects: list[tuple[Subject, SubjectStats]] = field(default_factory=list)

    @property
    def total_subjects(self) -> int:
        return len(self.subjects)

    @property
    def recent_total(self) -> int:
        return self.recent_present + self.recent_absent
