from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_iso_date, optional_text, require_choice, require_id, require_iso_date
from ..core.constants import DEFAULT_HISTORY_LIMIT, RECENT_ACTIVITY_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..predictor import calculator
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from .model import AttendanceFilter, AttendanceRecord, AttendanceSummary, MarkResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_STATUS_MESSAGE = "Status must be either present or absent"


def _require_status(value: Any) -> AttendanceStatus:
    return require_choice(value, AttendanceStatus, "status", _STATUS_MESSAGE)


def counter_delta(old: Optional[AttendanceStatus], new: Optional[AttendanceStatus]) -> tuple[int, int]:
    """``(total_delta, attended_delta)`` for a record going from ``old`` to ``new``.

    ``None`` on the left is a new record, ``None`` on the right a deleted one.
    """
    if old is None and new is None:
        return 0, 0
    if old is None:
        return 1, int(new is AttendanceStatus.PRESENT)
    if new is None:
        return -1, -int(old is AttendanceStatus.PRESENT)
    if old is new:
        return 0, 0
    return 0, 1 if new is AttendanceStatus.PRESENT else -1


class AttendanceService:
    """Daily marking; every write keeps the subject's lecture counters in step."""

    def __init__(
        self,
        records: AttendanceRepository,
        subjects: SubjectRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._records = records
        self._subjects = subjects
        self._clock = clock

    def _require_subject(self, user_id: int, subject_id: Any, *, active_only: bool = True) -> Subject:
        subject = self._subjects.get_owned(user_id, require_id(subject_id, "subjectId"))
        if not subject or (active_only and not subject.is_active):
            raise NotFoundError("Subject not found")
        return subject

    def _apply(self, subject: Subject, old: Optional[AttendanceStatus], new: Optional[AttendanceStatus]) -> None:
        total_delta, attended_delta = counter_delta(old, new)
        if (total_delta, attended_delta) == (0, 0):
            return
        if not self._subjects.adjust_counters(
            subject.subject_id, total_delta=total_delta, attended_delta=attended_delta
        ):
            logger.warning(
                "Counter update rejected for subject %s (total %+d, attended %+d)",
                subject.subject_id,
                total_delta,
                attended_delta,
            )
            raise ValidationError("Lecture counts for this subject would become invalid")

    def _reload_subject(self, subject: Subject) -> Subject:
        return self._subjects.get_owned(subject.user_id, subject.subject_id) or subject

    def list_records(self, user_id: int, query: dict) -> Sequence[AttendanceRecord]:
        filters = AttendanceFilter(
            subject_id=require_id(query["subjectId"], "subjectId") if query.get("subjectId") else None,
            start_date=optional_iso_date(query.get("startDate"), "startDate"),
            end_date=optional_iso_date(query.get("endDate"), "endDate"),
            status=_require_status(query["status"]) if query.get("status") else None,
        )
        if filters.start_date and filters.end_date and filters.end_date < filters.start_date:
            raise ValidationError("endDate must not be before startDate", field="endDate")
        return self._records.list_for_user(user_id, filters)

    def for_date(self, user_id: int, value: Any) -> tuple[date, Sequence[AttendanceRecord]]:
        day = require_iso_date(value, "date")
        return day, self._records.list_for_date(user_id, day)

    def mark(self, user_id: int, data: dict) -> MarkResult:
        """Record one day for one subject; marking the same day again edits it."""
        subject = self._require_subject(user_id, data.get("subjectId"))
        day = require_iso_date(data.get("date"), "date")
        status = _require_status(data.get("status"))
        notes = optional_text(data.get("notes"), "notes", 200)

        existing = self._records.get_for_day(user_id, subject.subject_id, day)
        if existing:
            self._apply(subject, existing.status, status)
            changes: dict[str, Any] = {"status": status, "marked_at": self._clock()}
            if "notes" in data:
                changes["notes"] = notes
            self._records.update_fields(existing.attendance_id, changes)
            record_id, created = existing.attendance_id, False
        else:
            self._apply(subject, None, status)
            record_id = self._records.create(
                user_id=user_id,
                subject_id=subject.subject_id,
                attendance_date=day,
                status=status,
                notes=notes,
            )
            created = True

        record = self._records.get_owned(user_id, record_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return MarkResult(record=record, subject=self._reload_subject(subject), created=created)

    def get(self, user_id: int, attendance_id: int) -> AttendanceRecord:
        record = self._records.get_owned(user_id, attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def update(self, user_id: int, attendance_id: int, data: dict) -> MarkResult:
        record = self.get(user_id, attendance_id)
        subject = self._require_subject(user_id, record.subject_id, active_only=False)

        changes: dict[str, Any] = {}
        if data.get("status"):
            status = _require_status(data["status"])
            self._apply(subject, record.status, status)
            changes["status"] = status
            changes["marked_at"] = self._clock()
        if "notes" in data:
            changes["notes"] = optional_text(data["notes"], "notes", 200)

        if changes:
            self._records.update_fields(record.attendance_id, changes)
        return MarkResult(
            record=self.get(user_id, attendance_id),
            subject=self._reload_subject(subject),
            created=False,
        )

    def delete(self, user_id: int, attendance_id: int) -> None:
        record = self.get(user_id, attendance_id)
        subject = self._subjects.get_owned(user_id, record.subject_id)
        if subject:
            self._apply(subject, record.status, None)
        self._records.delete(record.attendance_id)

    def history(self, user_id: int, subject_id: int, limit: Any = None) -> tuple[Subject, Sequence[AttendanceRecord]]:
        subject = self._require_subject(user_id, subject_id, active_only=False)
        n = DEFAULT_HISTORY_LIMIT if limit in (None, "") else require_id(limit, "limit")
        return subject, self._records.history(user_id, subject.subject_id, n)

    def summary(self, user_id: int) -> AttendanceSummary:
        subjects = self._subjects.list_active(user_id)
        per_subject = [(s, calculator.analyze(s.counters)) for s in subjects]

        total = sum(s.total_lectures for s in subjects)
        attended = sum(s.attended_lectures for s in subjects)
        above = sum(1 for _, stats in per_subject if stats.is_above_minimum)

        since = self._clock().date() - timedelta(days=RECENT_ACTIVITY_DAYS)
        recent = self._records.count_by_status_since(user_id, since)

        return AttendanceSummary(
            total_lectures=total,
            total_attended=attended,
            overall_attendance=calculator.percentage(attended, total),
            subjects_above_min=above,
            subjects_below_min=len(per_subject) - above,
            recent_present=recent.get(AttendanceStatus.PRESENT, 0),
            recent_absent=recent.get(AttendanceStatus.ABSENT, 0),
            subjects=per_subject,
        )
