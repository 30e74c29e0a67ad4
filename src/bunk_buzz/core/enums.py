from __future__ import annotations

from enum import Enum


class AuthProvider(str, Enum):
    """How the account signs in."""

    LOCAL = "local"
    GOOGLE = "google"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class DayOfWeek(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def order(self) -> int:
        return list(DayOfWeek).index(self)


class LectureType(str, Enum):
    THEORY = "Theory"
    LAB = "Lab"
    TUTORIAL = "Tutorial"
    PRACTICAL = "Practical"
