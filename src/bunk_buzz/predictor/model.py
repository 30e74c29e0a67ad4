from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def format_percent(value: float) -> str:
    """75.0 -> '75', 74.51 -> '74.51'."""
    return f"{value:g}"


@dataclass(frozen=True)
class SubjectCounters:
    """Immutable snapshot of the counters the calculator works on."""

    attended_lectures: int
    total_lectures: int
    minimum_attendance: float


@dataclass(frozen=True)
class SubjectStats:
    attendance_percentage: float
    absent_lectures: int
    safe_bunks: Optional[int]
    classes_needed: Optional[int]
    is_above_minimum: bool


@dataclass(frozen=True)
class SimulationStep:
    step: int
    total_lectures: int
    attended_lectures: int
    attendance: float
    is_safe: bool


@dataclass(frozen=True)
class Simulation:
    attended_lectures: int
    total_lectures: int
    minimum_attendance: float
    current_attendance: float
    steps: tuple[SimulationStep, ...]

    @property
    def requested_bunks(self) -> int:
        return len(self.steps)

    @property
    def turning_point(self) -> Optional[int]:
        """1-based step where attendance first drops below the minimum."""
        for s in self.steps:
            if not s.is_safe:
                return s.step
        return None

    @property
    def safe_bunks(self) -> int:
        tp = self.turning_point
        return self.requested_bunks if tp is None else tp - 1

    @property
    def final_attendance(self) -> float:
        return self.steps[-1].attendance

    @property
    def recommendation(self) -> str:
        tp = self.turning_point
        if tp is None:
            return f"All {self.requested_bunks} bunks are safe!"
        return (
            f"You can safely bunk {tp - 1} time(s). "
            f"Bunking {tp} times will drop you below {format_percent(self.minimum_attendance)}%."
        )


@dataclass(frozen=True)
class BunkPrediction:
    """Outcome of skipping exactly one more lecture."""

    can_bunk: bool
    safe_bunks: Optional[int]
    current_attendance: float
    after_bunk_attendance: float
    minimum_required: float
    attendance_drop: float
    # None: the minimum cannot be reached again by attending (minimum == 100).
    classes_needed_to_recover: Optional[int]
    current_total: int
    current_attended: int

    @property
    def after_bunk_total(self) -> int:
        return self.current_total + 1

    @property
    def after_bunk_attended(self) -> int:
        return self.current_attended

    @property
    def recommendation(self) -> str:
        after = format_percent(self.after_bunk_attendance)
        minimum = format_percent(self.minimum_required)
        if self.can_bunk:
            return (
                f"You can safely bunk. Your attendance will be {after}%, "
                f"which is above the minimum {minimum}%."
            )
        text = (
            f"You should NOT bunk. Your attendance will drop to {after}%, "
            f"which is below the minimum {minimum}%."
        )
        if self.classes_needed_to_recover is None:
            return text + " Attending more classes can no longer bring it back to the minimum."
        return text + (
            f" You'll need to attend {self.classes_needed_to_recover} consecutive classes to recover."
        )


@dataclass(frozen=True)
class SubjectPrediction:
    subject_id: int
    subject_name: str
    prediction: BunkPrediction


@dataclass(frozen=True)
class BulkPrediction:
    items: tuple[SubjectPrediction, ...]

    @property
    def total_subjects(self) -> int:
        return len(self.items)

    @property
    def safe_subjects(self) -> int:
        return sum(1 for i in self.items if i.prediction.can_bunk)

    @property
    def risky_subjects(self) -> int:
        return self.total_subjects - self.safe_subjects

    @property
    def total_safe_bunks(self) -> int:
        """Sum over subjects with a finite count; unlimited ones are reported separately."""
        return sum(i.prediction.safe_bunks for i in self.items if i.prediction.safe_bunks is not None)

    @property
    def unlimited_subjects(self) -> int:
        return sum(1 for i in self.items if i.prediction.safe_bunks is None)
