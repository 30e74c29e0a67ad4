from __future__ import annotations

from datetime import datetime

import pytest

from bunk_buzz.core.enums import DayOfWeek, LectureType
from bunk_buzz.core.exceptions import ConflictError, NotFoundError, ValidationError
from bunk_buzz.timetable.service import TimetableService


def _clock():
    # a Wednesday
    return datetime(2026, 3, 4, 8, 0)


@pytest.fixture
def service(timetable_repo, subjects):
    return TimetableService(timetable_repo, subjects, clock=_clock)


@pytest.fixture
def maths(subjects):
    return subjects.add(1, name="Maths", code="MA101", color="#112233")


def _slot(subject_id, **overrides):
    data = {"subjectId": subject_id, "dayOfWeek": "Monday", "startTime": "9:00", "endTime": "10:00"}
    data.update(overrides)
    return data


def test_create_normalizes_times_and_defaults(service, maths):
    entry = service.create(1, _slot(maths.subject_id, room=" B-204 "))

    assert entry.day_of_week is DayOfWeek.MONDAY
    assert (entry.start_time, entry.end_time) == ("09:00", "10:00")
    assert entry.room == "B-204"
    assert entry.lecture_type is LectureType.THEORY
    assert entry.subject_name == "Maths"
    assert entry.subject_color == "#112233"


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"dayOfWeek": "Funday"}, "dayOfWeek"),
        ({"startTime": "25:00"}, "startTime"),
        ({"endTime": "10:5"}, "endTime"),
        ({"startTime": "10:00", "endTime": "10:00"}, "endTime"),
        ({"startTime": "11:00", "endTime": "10:00"}, "endTime"),
        ({"lectureType": "Seminar"}, "lectureType"),
        ({"subjectId": "abc"}, "subjectId"),
    ],
)
def test_create_validation(service, maths, overrides, field):
    with pytest.raises(ValidationError) as exc:
        service.create(1, _slot(maths.subject_id, **overrides))
    assert exc.value.field == field


def test_create_requires_own_active_subject(service, subjects):
    foreign = subjects.add(2)
    dropped = subjects.add(1, is_active=False)

    with pytest.raises(NotFoundError):
        service.create(1, _slot(foreign.subject_id))
    with pytest.raises(NotFoundError):
        service.create(1, _slot(dropped.subject_id))


@pytest.mark.parametrize(
    "start,end",
    [("09:30", "10:30"), ("08:30", "09:01"), ("09:15", "09:45"), ("08:00", "11:00")],
)
def test_overlapping_slot_is_rejected(service, maths, start, end):
    service.create(1, _slot(maths.subject_id))

    with pytest.raises(ConflictError, match="conflicts"):
        service.create(1, _slot(maths.subject_id, startTime=start, endTime=end))


def test_adjacent_slots_and_other_days_are_fine(service, maths):
    service.create(1, _slot(maths.subject_id))

    service.create(1, _slot(maths.subject_id, startTime="10:00", endTime="11:00"))
    service.create(1, _slot(maths.subject_id, startTime="08:00", endTime="09:00"))
    service.create(1, _slot(maths.subject_id, dayOfWeek="Tuesday"))

    assert len(service.list_entries(1)) == 4


def test_deleted_slot_frees_the_time(service, maths):
    entry = service.create(1, _slot(maths.subject_id))
    service.delete(1, entry.entry_id)

    service.create(1, _slot(maths.subject_id))

    assert len(service.list_entries(1)) == 1


def test_update_excludes_itself_from_overlap_check(service, maths):
    entry = service.create(1, _slot(maths.subject_id))

    updated = service.update(1, entry.entry_id, {"endTime": "10:30", "lectureType": "Lab"})

    assert updated.end_time == "10:30"
    assert updated.lecture_type is LectureType.LAB


def test_update_into_taken_slot(service, maths):
    service.create(1, _slot(maths.subject_id))
    other = service.create(1, _slot(maths.subject_id, dayOfWeek="Tuesday"))

    with pytest.raises(ConflictError):
        service.update(1, other.entry_id, {"dayOfWeek": "Monday"})


def test_list_sorted_and_grouped_by_week_order(service, maths):
    service.create(1, _slot(maths.subject_id, dayOfWeek="Friday"))
    service.create(1, _slot(maths.subject_id, dayOfWeek="Monday", startTime="14:00", endTime="15:00"))
    service.create(1, _slot(maths.subject_id, dayOfWeek="Monday"))

    entries = service.list_entries(1)
    grouped = service.group_by_day(entries)

    assert [(e.day_of_week.value, e.start_time) for e in entries] == [
        ("Monday", "09:00"),
        ("Monday", "14:00"),
        ("Friday", "09:00"),
    ]
    assert list(grouped) == ["Monday", "Friday"]
    assert len(grouped["Monday"]) == 2


def test_list_filtered_by_day(service, maths):
    service.create(1, _slot(maths.subject_id, dayOfWeek="Friday"))
    service.create(1, _slot(maths.subject_id))

    assert [e.day_of_week for e in service.list_entries(1, day="Friday")] == [DayOfWeek.FRIDAY]
    with pytest.raises(ValidationError):
        service.list_entries(1, day="Someday")


def test_today_uses_clock(service, maths):
    service.create(1, _slot(maths.subject_id, dayOfWeek="Wednesday"))
    service.create(1, _slot(maths.subject_id))

    day, entries = service.today(1)

    assert day is DayOfWeek.WEDNESDAY
    assert len(entries) == 1


def test_other_users_entry_is_not_found(service, subjects):
    theirs = subjects.add(2)
    entry = service.create(2, _slot(theirs.subject_id))

    with pytest.raises(NotFoundError, match="Timetable entry not found"):
        service.get(1, entry.entry_id)
