from __future__ import annotations

from typing import Any

from ..common.datetime_utils import iso_or_none
from ..predictor import calculator
from ..subjects.model import Subject
from .model import AttendanceRecord, AttendanceSummary


def record_to_dict(record: AttendanceRecord) -> dict[str, Any]:
    return {
        "id": record.attendance_id,
        "subjectId": record.subject_id,
        "subjectName": record.subject_name,
        "subjectCode": record.subject_code,
        "color": record.subject_color,
        "date": record.attendance_date.isoformat(),
        "status": record.status.value,
        "notes": record.notes,
        "markedAt": iso_or_none(record.marked_at),
    }


def subject_counters_to_dict(subject: Subject) -> dict[str, Any]:
    return {
        "id": subject.subject_id,
        "name": subject.name,
        "totalLectures": subject.total_lectures,
        "attendedLectures": subject.attended_lectures,
        "absentLectures": subject.total_lectures - subject.attended_lectures,
        "attendancePercentage": calculator.percentage(subject.attended_lectures, subject.total_lectures),
    }


def summary_to_dict(summary: AttendanceSummary) -> dict[str, Any]:
    return {
        "overall": {
            "totalLectures": summary.total_lectures,
            "totalAttended": summary.total_attended,
            "overallAttendance": summary.overall_attendance,
            "subjectsAboveMin": summary.subjects_above_min,
            "subjectsBelowMin": summary.subjects_below_min,
            "totalSubjects": summary.total_subjects,
        },
        "recentActivity": {
            "last7Days": {
                "present": summary.recent_present,
                "absent": summary.recent_absent,
                "total": summary.recent_total,
            },
        },
        "subjects": [
            {
                "id": subject.subject_id,
                "name": subject.name,
                "attendance": stats.attendance_percentage,
                "safeBunks": stats.safe_bunks,
                "classesNeeded": stats.classes_needed,
            }
            for subject, stats in summary.subjects
        ],
    }
