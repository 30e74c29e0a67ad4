from __future__ import annotations

from datetime import date, datetime

from ..core.enums import DayOfWeek


def now_local() -> datetime:
    """Server-local wall clock; services take it as their default ``clock``."""
    return datetime.now()


def day_of_week(value: date) -> DayOfWeek:
    return list(DayOfWeek)[value.weekday()]


def iso_or_none(value) -> str | None:
    return value.isoformat() if value is not None else None
