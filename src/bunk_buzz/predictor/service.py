from __future__ import annotations

from typing import Any

from ..common.validators import require_id
from ..core.exceptions import NotFoundError
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from . import calculator
from .model import BulkPrediction, BunkPrediction, Simulation, SubjectPrediction


class BunkPredictorService:
    """Loads the caller's subjects and hands their counters to the calculator."""

    def __init__(self, subjects: SubjectRepository):
        self._subjects = subjects

    def _require_subject(self, user_id: int, subject_id: Any) -> Subject:
        subject = self._subjects.get_owned(user_id, require_id(subject_id, "subjectId"))
        if not subject:
            raise NotFoundError("Subject not found")
        return subject

    def predict(self, user_id: int, subject_id: Any) -> tuple[Subject, BunkPrediction]:
        subject = self._require_subject(user_id, subject_id)
        return subject, calculator.predict_single_bunk(
            subject.attended_lectures, subject.total_lectures, subject.minimum_attendance
        )

    def bulk_predict(self, user_id: int) -> BulkPrediction:
        return BulkPrediction(
            items=tuple(
                SubjectPrediction(
                    subject_id=s.subject_id,
                    subject_name=s.name,
                    prediction=calculator.predict_single_bunk(
                        s.attended_lectures, s.total_lectures, s.minimum_attendance
                    ),
                )
                for s in self._subjects.list_active(user_id)
            )
        )

    def simulate(self, user_id: int, subject_id: Any, number_of_bunks: Any) -> tuple[Subject, Simulation]:
        # bad counts are rejected before touching storage
        bunks = calculator.require_bunk_count(number_of_bunks)
        subject = self._require_subject(user_id, subject_id)
        return subject, calculator.simulate(
            subject.attended_lectures, subject.total_lectures, subject.minimum_attendance, bunks
        )
