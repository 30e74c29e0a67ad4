"""Attendance arithmetic behind the bunk predictor.

Every function here is pure: it takes lecture counts (or a
``SubjectCounters`` snapshot), never touches storage and never mutates its
inputs. Precondition violations raise ``InvalidInputError``; business outcomes
such as "already below the minimum" are ordinary return values.

Contracts worth knowing:

* ``percentage`` returns ``0.0`` when no lectures were held. That is a policy,
  not a mathematical value.
* Percentages are rounded to 2 decimals **half up**, on the exact ratio
  (integer arithmetic), so ``1/800`` gives ``0.13``.
* Threshold searches compare exact rationals, not binary floats, and use
  closed forms instead of open-ended loops.
* ``None`` is the "no finite answer" sentinel: unlimited safe bunks when the
  minimum is 0, unreachable recovery when the minimum is 100.
"""
from __future__ import annotations

import math
from fractions import Fraction
from itertools import islice
from typing import Iterator, Optional

from ..core.constants import MAX_SIMULATED_BUNKS
from ..core.exceptions import InvalidInputError
from .model import BunkPrediction, Simulation, SimulationStep, SubjectCounters, SubjectStats


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require_counts(attended: int, total: int) -> None:
    for field, value in (("totalLectures", total), ("attendedLectures", attended)):
        if not _is_int(value):
            raise InvalidInputError(f"{field} must be an integer", field=field)
        if value < 0:
            raise InvalidInputError(f"{field} cannot be negative", field=field)
    if attended > total:
        raise InvalidInputError("Attended lectures cannot exceed total lectures", field="attendedLectures")


def _require_minimum(minimum: float) -> Fraction:
    if isinstance(minimum, bool) or not isinstance(minimum, (int, float)):
        raise InvalidInputError("minimumAttendance must be a number", field="minimumAttendance")
    if math.isnan(minimum) or not 0 <= minimum <= 100:
        raise InvalidInputError("Minimum attendance must be between 0 and 100", field="minimumAttendance")
    return Fraction(minimum)


def _hundredths(attended: int, total: int) -> int:
    """Percentage in hundredths of a point, rounded half up."""
    if total == 0:
        return 0
    # round(a * 10000 / t) with ties going up, without leaving integers
    return (attended * 20000 + total) // (2 * total)


def percentage(attended: int, total: int) -> float:
    _require_counts(attended, total)
    return _hundredths(attended, total) / 100


def safe_bunks(attended: int, total: int, minimum: float) -> Optional[int]:
    """How many lectures in a row can be skipped while staying at or above ``minimum``.

    Iterative definition: count ``b`` up from 0 while
    ``attended / (total + b + 1) * 100 >= minimum`` holds. With the numerator
    fixed the ratio only falls, so the count is
    ``floor(100 * attended / minimum) - total``, clamped at 0.

    Returns 0 when nothing has been held yet or the subject is already under
    the minimum, and ``None`` (unlimited) when ``minimum`` is 0.
    """
    _require_counts(attended, total)
    threshold = _require_minimum(minimum)

    if total == 0:
        return 0
    if percentage(attended, total) < minimum:
        return 0
    if threshold == 0:
        return None
    return max(0, math.floor(Fraction(100 * attended) / threshold) - total)


def classes_needed(attended: int, total: int, minimum: float) -> Optional[int]:
    """Consecutive attended lectures needed to climb back to ``minimum``.

    Iterative definition: ``needed`` counts failed probes while
    ``(attended + needed + 1) / (total + needed + 1) * 100 < minimum`` and the
    answer is ``needed + 1`` (the first probe that passes is itself a class
    to attend). Solved directly as
    ``ceil((minimum * total - 100 * attended) / (100 - minimum))``, at least 1.

    A 100% minimum is only reachable when every lecture so far was attended;
    otherwise the result is ``None``.
    """
    _require_counts(attended, total)
    threshold = _require_minimum(minimum)

    if percentage(attended, total) >= minimum:
        return 0
    if threshold == 100:
        return 1 if attended == total else None

    deficit = threshold * total - 100 * attended
    return max(1, math.ceil(deficit / (100 - threshold)))


def iter_bunk_steps(attended: int, total: int, minimum: float) -> Iterator[SimulationStep]:
    """Single-pass stream of projections, one per additional bunk.

    Inputs are checked eagerly; the returned iterator is unbounded, so callers
    slice it.
    """
    _require_counts(attended, total)
    _require_minimum(minimum)

    def _steps() -> Iterator[SimulationStep]:
        step = 0
        running_total = total
        while True:
            step += 1
            running_total += 1
            attendance = percentage(attended, running_total)
            yield SimulationStep(
                step=step,
                total_lectures=running_total,
                attended_lectures=attended,
                attendance=attendance,
                is_safe=attendance >= minimum,
            )

    return _steps()


def require_bunk_count(bunk_count) -> int:
    if not _is_int(bunk_count) or bunk_count < 1:
        raise InvalidInputError("Number of bunks must be at least 1", field="numberOfBunks")
    if bunk_count > MAX_SIMULATED_BUNKS:
        raise InvalidInputError(
            f"Cannot simulate more than {MAX_SIMULATED_BUNKS} bunks", field="numberOfBunks"
        )
    return bunk_count


def simulate(attended: int, total: int, minimum: float, bunk_count: int) -> Simulation:
    require_bunk_count(bunk_count)

    steps = tuple(islice(iter_bunk_steps(attended, total, minimum), bunk_count))
    return Simulation(
        attended_lectures=attended,
        total_lectures=total,
        minimum_attendance=float(minimum),
        current_attendance=percentage(attended, total),
        steps=steps,
    )


def predict_single_bunk(attended: int, total: int, minimum: float) -> BunkPrediction:
    """Project skipping the next lecture.

    Recovery is searched from the post-bunk counters
    (``classes_needed(attended, total + 1, minimum)``). The bunk is already
    baked into the starting point, so the count is how many classes to attend
    after skipping, and it already includes the trailing ``+ 1`` that turns the
    last failing probe into a number of classes. Adding another one here would
    double count.
    """
    _require_counts(attended, total)
    _require_minimum(minimum)

    current_h = _hundredths(attended, total)
    after_h = _hundredths(attended, total + 1)
    after = after_h / 100
    can_bunk = after >= minimum

    recover: Optional[int] = 0
    if not can_bunk:
        recover = classes_needed(attended, total + 1, minimum)

    return BunkPrediction(
        can_bunk=can_bunk,
        safe_bunks=safe_bunks(attended, total, minimum),
        current_attendance=current_h / 100,
        after_bunk_attendance=after,
        minimum_required=float(minimum),
        attendance_drop=(current_h - after_h) / 100,
        classes_needed_to_recover=recover,
        current_total=total,
        current_attended=attended,
    )


def analyze(counters: SubjectCounters) -> SubjectStats:
    """All derived figures for one subject snapshot."""
    a = counters.attended_lectures
    t = counters.total_lectures
    m = counters.minimum_attendance
    pct = percentage(a, t)
    return SubjectStats(
        attendance_percentage=pct,
        absent_lectures=t - a,
        safe_bunks=safe_bunks(a, t, m),
        classes_needed=classes_needed(a, t, m),
        is_above_minimum=pct >= m,
    )
