from __future__ import annotations

from typing import Any, Optional, Protocol

from .model import Subject


class SubjectRepository(Protocol):
    def list_active(self, user_id: int) -> list[Subject]:
        """Newest first."""

        raise NotImplementedError

    def get_owned(self, user_id: int, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        name: str,
        code: Optional[str],
        total_lectures: int,
        attended_lectures: int,
        minimum_attendance: float,
        color: str,
        faculty: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_fields(self, subject_id: int, changes: dict[str, Any]) -> bool:
        raise NotImplementedError

    def adjust_counters(self, subject_id: int, *, total_delta: int, attended_delta: int) -> bool:
        """Apply both deltas in one statement.

        Returns False (and changes nothing) when the result would break
        ``0 <= attended <= total``.
        """

        raise NotImplementedError
