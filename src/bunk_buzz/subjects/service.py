from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.validators import (
    optional_text,
    require_hex_color,
    require_max_length,
    require_non_empty,
    require_non_negative_int,
    require_percentage,
)
from ..core.constants import DEFAULT_MINIMUM_ATTENDANCE, DEFAULT_SUBJECT_COLOR
from ..core.exceptions import NotFoundError, ValidationError
from ..predictor import calculator
from ..predictor.model import SubjectStats
from .model import Subject, SubjectOverview
from .repository import SubjectRepository

logger = logging.getLogger(__name__)


def _require_name(value: Any) -> str:
    name = require_non_empty(value, "name")
    require_max_length(name, "name", 100)
    return name


def _optional_code(value: Any) -> Optional[str]:
    code = optional_text(value, "code", 20)
    return code.upper() if code else None


def _check_counts(attended: int, total: int) -> None:
    if attended > total:
        raise ValidationError("Attended lectures cannot exceed total lectures", field="attendedLectures")


class SubjectService:
    """Use cases for the student's subject list."""

    # request field -> (column attribute, parser)
    _EDITABLE = {
        "name": ("name", _require_name),
        "code": ("code", _optional_code),
        "totalLectures": ("total_lectures", lambda v: require_non_negative_int(v, "totalLectures")),
        "attendedLectures": ("attended_lectures", lambda v: require_non_negative_int(v, "attendedLectures")),
        "minimumAttendance": ("minimum_attendance", lambda v: require_percentage(v, "minimumAttendance")),
        "color": ("color", require_hex_color),
        "faculty": ("faculty", lambda v: optional_text(v, "faculty", 100)),
    }

    def __init__(self, subjects: SubjectRepository):
        self._subjects = subjects

    def overview(self, user_id: int) -> SubjectOverview:
        subjects = self._subjects.list_active(user_id)
        total = sum(s.total_lectures for s in subjects)
        attended = sum(s.attended_lectures for s in subjects)
        return SubjectOverview(
            subjects=subjects,
            total_lectures=total,
            total_attended=attended,
            overall_attendance=calculator.percentage(attended, total),
        )

    def get(self, user_id: int, subject_id: int) -> Subject:
        subject = self._subjects.get_owned(user_id, subject_id)
        if not subject:
            raise NotFoundError("Subject not found")
        return subject

    def get_active(self, user_id: int, subject_id: int) -> Subject:
        """Like ``get`` but deleted subjects count as missing."""
        subject = self.get(user_id, subject_id)
        if not subject.is_active:
            raise NotFoundError("Subject not found")
        return subject

    def create(self, user_id: int, data: dict) -> Subject:
        name = _require_name(data.get("name"))
        code = _optional_code(data.get("code"))
        total = require_non_negative_int(data.get("totalLectures", 0), "totalLectures")
        attended = require_non_negative_int(data.get("attendedLectures", 0), "attendedLectures")
        _check_counts(attended, total)
        minimum = require_percentage(data.get("minimumAttendance", DEFAULT_MINIMUM_ATTENDANCE), "minimumAttendance")
        color = require_hex_color(data.get("color") or DEFAULT_SUBJECT_COLOR)
        faculty = optional_text(data.get("faculty"), "faculty", 100)

        subject_id = self._subjects.create(
            user_id=user_id,
            name=name,
            code=code,
            total_lectures=total,
            attended_lectures=attended,
            minimum_attendance=minimum,
            color=color,
            faculty=faculty,
        )
        logger.info("User %s created subject %s", user_id, subject_id)
        return self.get(user_id, subject_id)

    def update(self, user_id: int, subject_id: int, data: dict) -> Subject:
        subject = self.get(user_id, subject_id)

        changes: dict[str, Any] = {}
        for field, (attr, parse) in self._EDITABLE.items():
            if data.get(field) is not None or (field in ("code", "faculty") and field in data):
                changes[attr] = parse(data[field])

        _check_counts(
            changes.get("attended_lectures", subject.attended_lectures),
            changes.get("total_lectures", subject.total_lectures),
        )
        if changes:
            self._subjects.update_fields(subject.subject_id, changes)
        return self.get(user_id, subject_id)

    def delete(self, user_id: int, subject_id: int) -> None:
        subject = self.get(user_id, subject_id)
        self._subjects.update_fields(subject.subject_id, {"is_active": False})

    def stats(self, user_id: int, subject_id: int) -> tuple[Subject, SubjectStats]:
        subject = self.get(user_id, subject_id)
        return subject, calculator.analyze(subject.counters)
