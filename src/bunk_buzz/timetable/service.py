from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Optional

from ..common.datetime_utils import day_of_week, now_local
from ..common.validators import optional_text, require_choice, require_hh_mm, require_id
from ..core.enums import DayOfWeek, LectureType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..subjects.repository import SubjectRepository
from .model import TimetableEntry
from .repository import TimetableRepository

_DAY_MESSAGE = "Day must be one of Monday to Sunday"
_LECTURE_TYPE_MESSAGE = "Lecture type must be one of Theory, Lab, Tutorial, Practical"


def _require_day(value: Any) -> DayOfWeek:
    return require_choice(value, DayOfWeek, "dayOfWeek", _DAY_MESSAGE)


def _require_lecture_type(value: Any) -> LectureType:
    return require_choice(value, LectureType, "lectureType", _LECTURE_TYPE_MESSAGE)


def _sort_key(entry: TimetableEntry):
    return entry.day_of_week.order, entry.start_time


class TimetableService:
    """Weekly schedule use cases; slots of one user never overlap on the same day."""

    def __init__(
        self,
        entries: TimetableRepository,
        subjects: SubjectRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._entries = entries
        self._subjects = subjects
        self._clock = clock

    def _require_subject(self, user_id: int, subject_id: Any) -> int:
        sid = require_id(subject_id, "subjectId")
        subject = self._subjects.get_owned(user_id, sid)
        if not subject or not subject.is_active:
            raise NotFoundError("Subject not found")
        return sid

    def _check_slot(
        self,
        user_id: int,
        day: DayOfWeek,
        start_time: str,
        end_time: str,
        *,
        exclude_entry_id: Optional[int] = None,
    ) -> None:
        if end_time <= start_time:
            raise ValidationError("End time must be after start time", field="endTime")
        for other in self._entries.list_active(user_id, day=day):
            if other.entry_id != exclude_entry_id and other.overlaps(start_time, end_time):
                raise ConflictError("Time slot conflicts with existing entry")

    def list_entries(self, user_id: int, *, day: Any = None) -> list[TimetableEntry]:
        day_filter = _require_day(day) if day else None
        return sorted(self._entries.list_active(user_id, day=day_filter), key=_sort_key)

    @staticmethod
    def group_by_day(entries: list[TimetableEntry]) -> dict[str, list[TimetableEntry]]:
        """Days in week order; days without lectures are left out."""
        grouped: dict[str, list[TimetableEntry]] = {}
        for entry in sorted(entries, key=_sort_key):
            grouped.setdefault(entry.day_of_week.value, []).append(entry)
        return grouped

    def today(self, user_id: int) -> tuple[DayOfWeek, list[TimetableEntry]]:
        today = day_of_week(self._clock().date())
        return today, sorted(self._entries.list_active(user_id, day=today), key=_sort_key)

    def get(self, user_id: int, entry_id: int) -> TimetableEntry:
        entry = self._entries.get_owned(user_id, entry_id)
        if not entry:
            raise NotFoundError("Timetable entry not found")
        return entry

    def create(self, user_id: int, data: dict) -> TimetableEntry:
        subject_id = self._require_subject(user_id, data.get("subjectId"))
        day = _require_day(data.get("dayOfWeek"))
        start_time = require_hh_mm(data.get("startTime"), "startTime")
        end_time = require_hh_mm(data.get("endTime"), "endTime")
        room = optional_text(data.get("room"), "room", 50)
        lecture_type = _require_lecture_type(data.get("lectureType") or LectureType.THEORY.value)

        self._check_slot(user_id, day, start_time, end_time)

        entry_id = self._entries.create(
            user_id=user_id,
            subject_id=subject_id,
            day_of_week=day,
            start_time=start_time,
            end_time=end_time,
            room=room,
            lecture_type=lecture_type,
        )
        return self.get(user_id, entry_id)

    def update(self, user_id: int, entry_id: int, data: dict) -> TimetableEntry:
        entry = self.get(user_id, entry_id)

        changes: dict[str, Any] = {}
        if data.get("subjectId") is not None:
            changes["subject_id"] = self._require_subject(user_id, data["subjectId"])
        if data.get("dayOfWeek") is not None:
            changes["day_of_week"] = _require_day(data["dayOfWeek"])
        if data.get("startTime") is not None:
            changes["start_time"] = require_hh_mm(data["startTime"], "startTime")
        if data.get("endTime") is not None:
            changes["end_time"] = require_hh_mm(data["endTime"], "endTime")
        if "room" in data:
            changes["room"] = optional_text(data["room"], "room", 50)
        if data.get("lectureType") is not None:
            changes["lecture_type"] = _require_lecture_type(data["lectureType"])

        if {"day_of_week", "start_time", "end_time"} & set(changes):
            self._check_slot(
                user_id,
                changes.get("day_of_week", entry.day_of_week),
                changes.get("start_time", entry.start_time),
                changes.get("end_time", entry.end_time),
                exclude_entry_id=entry.entry_id,
            )

        if changes:
            self._entries.update_fields(entry.entry_id, changes)
        return self.get(user_id, entry_id)

    def delete(self, user_id: int, entry_id: int) -> None:
        entry = self.get(user_id, entry_id)
        self._entries.update_fields(entry.entry_id, {"is_active": False})
