from __future__ import annotations

from typing import Any

from .model import TimetableEntry


def entry_to_dict(entry: TimetableEntry) -> dict[str, Any]:
    return {
        "id": entry.entry_id,
        "day": entry.day_of_week.value,
        "dayOfWeek": entry.day_of_week.value,
        "subjectId": entry.subject_id,
        "subjectName": entry.subject_name,
        "subjectCode": entry.subject_code,
        "color": entry.subject_color,
        "startTime": entry.start_time,
        "endTime": entry.end_time,
        "room": entry.room,
        "lectureType": entry.lecture_type.value,
    }
