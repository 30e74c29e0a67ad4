from __future__ import annotations

from typing import Any

from ..common.datetime_utils import iso_or_none
from ..predictor import calculator
from ..predictor.model import SubjectStats
from .model import Subject


def subject_to_dict(subject: Subject) -> dict[str, Any]:
    """Stored fields plus the derived attendance figures."""
    stats = calculator.analyze(subject.counters)
    return {
        "id": subject.subject_id,
        "userId": subject.user_id,
        "name": subject.name,
        "code": subject.code,
        "totalLectures": subject.total_lectures,
        "attendedLectures": subject.attended_lectures,
        "minimumAttendance": subject.minimum_attendance,
        "color": subject.color,
        "faculty": subject.faculty,
        "isActive": subject.is_active,
        "createdAt": iso_or_none(subject.created_at),
        "updatedAt": iso_or_none(subject.updated_at),
        "attendancePercentage": stats.attendance_percentage,
        "absentLectures": stats.absent_lectures,
        "safeBunks": stats.safe_bunks,
        "classesNeeded": stats.classes_needed,
    }


def stats_to_dict(subject: Subject, stats: SubjectStats) -> dict[str, Any]:
    return {
        "currentAttendance": stats.attendance_percentage,
        "safeBunks": stats.safe_bunks,
        "classesNeeded": stats.classes_needed,
        "totalLectures": subject.total_lectures,
        "attendedLectures": subject.attended_lectures,
        "missedLectures": stats.absent_lectures,
        "minimumAttendance": subject.minimum_attendance,
        "isAboveMinimum": stats.is_above_minimum,
    }
