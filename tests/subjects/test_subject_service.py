from __future__ import annotations

import pytest

from bunk_buzz.core.exceptions import NotFoundError, ValidationError
from bunk_buzz.subjects.service import SubjectService


@pytest.fixture
def service(subjects):
    return SubjectService(subjects)


def test_create_applies_defaults(service):
    subject = service.create(1, {"name": "  Data Structures ", "code": "cs201"})

    assert subject.name == "Data Structures"
    assert subject.code == "CS201"
    assert subject.total_lectures == 0
    assert subject.attended_lectures == 0
    assert subject.minimum_attendance == 75.0
    assert subject.color == "#8B5CF6"
    assert subject.faculty is None


def test_create_with_counters(service):
    subject = service.create(
        1,
        {
            "name": "Physics",
            "totalLectures": 40,
            "attendedLectures": 38,
            "minimumAttendance": 80,
            "color": "#10b981",
            "faculty": "Dr. Rao",
        },
    )

    assert (subject.attended_lectures, subject.total_lectures) == (38, 40)
    assert subject.minimum_attendance == 80.0
    assert subject.color == "#10b981"
    assert subject.faculty == "Dr. Rao"


@pytest.mark.parametrize(
    "data,field",
    [
        ({}, "name"),
        ({"name": "x" * 101}, "name"),
        ({"name": "Maths", "code": "C" * 21}, "code"),
        ({"name": "Maths", "totalLectures": -1}, "totalLectures"),
        ({"name": "Maths", "totalLectures": 5, "attendedLectures": 6}, "attendedLectures"),
        ({"name": "Maths", "minimumAttendance": 120}, "minimumAttendance"),
        ({"name": "Maths", "color": "purple"}, "color"),
        ({"name": "Maths", "faculty": "f" * 101}, "faculty"),
    ],
)
def test_create_validation(service, data, field):
    with pytest.raises(ValidationError) as exc:
        service.create(1, data)
    assert exc.value.field == field


def test_overview_sums_active_subjects(service, subjects):
    subjects.add(1, name="A", total_lectures=40, attended_lectures=30)
    subjects.add(1, name="B", total_lectures=20, attended_lectures=19)
    subjects.add(1, name="Dropped", total_lectures=10, attended_lectures=0, is_active=False)
    subjects.add(2, name="Someone else", total_lectures=10, attended_lectures=10)

    overview = service.overview(1)

    assert [s.name for s in overview.subjects] == ["B", "A"]
    assert overview.total_lectures == 60
    assert overview.total_attended == 49
    assert overview.overall_attendance == 81.67


def test_overview_without_subjects(service):
    overview = service.overview(1)

    assert overview.subjects == []
    assert overview.overall_attendance == 0.0


def test_update_rechecks_counters(service, subjects):
    subject = subjects.add(1, total_lectures=10, attended_lectures=8)

    with pytest.raises(ValidationError, match="cannot exceed"):
        service.update(1, subject.subject_id, {"totalLectures": 7})

    updated = service.update(1, subject.subject_id, {"totalLectures": 12, "attendedLectures": 12})
    assert (updated.attended_lectures, updated.total_lectures) == (12, 12)


def test_update_clears_optional_text(service, subjects):
    subject = subjects.add(1, code="CS1", faculty="Dr. X")

    updated = service.update(1, subject.subject_id, {"faculty": None, "name": "Renamed"})

    assert updated.faculty is None
    assert updated.code == "CS1"
    assert updated.name == "Renamed"


def test_other_users_subject_is_not_found(service, subjects):
    subject = subjects.add(2)

    with pytest.raises(NotFoundError, match="Subject not found"):
        service.get(1, subject.subject_id)
    with pytest.raises(NotFoundError):
        service.update(1, subject.subject_id, {"name": "Mine now"})
    with pytest.raises(NotFoundError):
        service.delete(1, subject.subject_id)


def test_delete_is_soft(service, subjects):
    subject = subjects.add(1)

    service.delete(1, subject.subject_id)

    assert subjects.subjects[subject.subject_id].is_active is False
    assert service.overview(1).subjects == []
    with pytest.raises(NotFoundError):
        service.get_active(1, subject.subject_id)


def test_stats(service, subjects):
    subject = subjects.add(1, name="Maths", total_lectures=40, attended_lectures=20)

    loaded, stats = service.stats(1, subject.subject_id)

    assert loaded.name == "Maths"
    assert stats.attendance_percentage == 50.0
    assert stats.absent_lectures == 20
    assert stats.safe_bunks == 0
    assert stats.classes_needed == 40
    assert stats.is_above_minimum is False
