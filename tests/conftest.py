from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any, Optional

import pytest
from werkzeug.security import generate_password_hash

from bunk_buzz.attendance.model import AttendanceFilter, AttendanceRecord
from bunk_buzz.attendance.service import AttendanceService
from bunk_buzz.container import Container
from bunk_buzz.core.enums import AttendanceStatus, AuthProvider
from bunk_buzz.predictor.service import BunkPredictorService
from bunk_buzz.subjects.model import Subject
from bunk_buzz.subjects.service import SubjectService
from bunk_buzz.timetable.model import TimetableEntry
from bunk_buzz.timetable.service import TimetableService
from bunk_buzz.users.model import GoogleIdentity, PendingUser, User
from bunk_buzz.users.service import AuthService, ProfileService
from bunk_buzz.users.tokens import TokenService

# Wednesday
NOW = datetime(2026, 3, 4, 9, 30)


def fixed_clock() -> datetime:
    return NOW


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self._id = 0

    def add(self, **kwargs) -> User:
        self._id += 1
        defaults = dict(
            user_id=self._id,
            name="Asha",
            email=f"user{self._id}@example.com",
            college="IIT",
            password_hash=generate_password_hash("Secret1"),
            auth_provider=AuthProvider.LOCAL,
            email_verified=True,
        )
        defaults.update(kwargs)
        user = User(**defaults)
        self.users[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, name, email, college, password_hash, auth_provider, email_verified, google_id=None, profile_picture=None) -> int:
        return self.add(
            name=name,
            email=email,
            college=college,
            password_hash=password_hash,
            auth_provider=auth_provider,
            email_verified=email_verified,
            google_id=google_id,
            profile_picture=profile_picture,
            created_at=NOW,
        ).user_id

    def update_fields(self, user_id: int, changes: dict[str, Any]) -> bool:
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[user.user_id] = replace(user, **changes)
        return True


class InMemoryPendingUsers:
    def __init__(self):
        self.pending: dict[int, PendingUser] = {}
        self._id = 0

    def get_by_email(self, email: str) -> Optional[PendingUser]:
        return next((p for p in self.pending.values() if p.email == email), None)

    def get_by_token(self, token: str, *, now: datetime) -> Optional[PendingUser]:
        return next(
            (p for p in self.pending.values() if p.verification_token == token and p.token_expiry > now),
            None,
        )

    def create(self, *, name, email, college, password_hash, verification_token, token_expiry) -> int:
        self._id += 1
        self.pending[self._id] = PendingUser(
            pending_id=self._id,
            name=name,
            email=email,
            college=college,
            password_hash=password_hash,
            verification_token=verification_token,
            token_expiry=token_expiry,
        )
        return self._id

    def replace_token(self, pending_id: int, *, verification_token: str, token_expiry: datetime) -> bool:
        p = self.pending.get(pending_id)
        if not p:
            return False
        self.pending[pending_id] = replace(p, verification_token=verification_token, token_expiry=token_expiry)
        return True

    def delete_by_email(self, email: str) -> bool:
        ids = [pid for pid, p in self.pending.items() if p.email == email]
        for pid in ids:
            del self.pending[pid]
        return bool(ids)

    def purge_expired(self, *, now: datetime) -> int:
        ids = [pid for pid, p in self.pending.items() if p.token_expiry < now - timedelta(hours=1)]
        for pid in ids:
            del self.pending[pid]
        return len(ids)


class InMemorySubjects:
    def __init__(self):
        self.subjects: dict[int, Subject] = {}
        self._id = 0

    def add(self, user_id: int, **kwargs) -> Subject:
        self._id += 1
        defaults = dict(
            subject_id=self._id,
            user_id=user_id,
            name=f"Subject {self._id}",
            code=None,
            total_lectures=0,
            attended_lectures=0,
            minimum_attendance=75.0,
            color="#8B5CF6",
            # later ids are newer
            created_at=NOW + timedelta(seconds=self._id),
        )
        defaults.update(kwargs)
        subject = Subject(**defaults)
        self.subjects[subject.subject_id] = subject
        return subject

    def list_active(self, user_id: int) -> list[Subject]:
        items = [s for s in self.subjects.values() if s.user_id == user_id and s.is_active]
        return sorted(items, key=lambda s: s.subject_id, reverse=True)

    def get_owned(self, user_id: int, subject_id: int) -> Optional[Subject]:
        s = self.subjects.get(int(subject_id))
        return s if s and s.user_id == user_id else None

    def create(self, *, user_id, name, code, total_lectures, attended_lectures, minimum_attendance, color, faculty) -> int:
        return self.add(
            user_id,
            name=name,
            code=code,
            total_lectures=total_lectures,
            attended_lectures=attended_lectures,
            minimum_attendance=minimum_attendance,
            color=color,
            faculty=faculty,
        ).subject_id

    def update_fields(self, subject_id: int, changes: dict[str, Any]) -> bool:
        s = self.subjects.get(int(subject_id))
        if not s:
            return False
        self.subjects[s.subject_id] = replace(s, **changes)
        return True

    def adjust_counters(self, subject_id: int, *, total_delta: int, attended_delta: int) -> bool:
        s = self.subjects.get(int(subject_id))
        total = s.total_lectures + total_delta
        attended = s.attended_lectures + attended_delta
        if not 0 <= attended <= total:
            return False
        self.subjects[s.subject_id] = replace(s, total_lectures=total, attended_lectures=attended)
        return True


class InMemoryTimetable:
    def __init__(self, subjects: InMemorySubjects):
        self._subjects = subjects
        self.entries: dict[int, TimetableEntry] = {}
        self._id = 0

    def _joined(self, entry: TimetableEntry) -> TimetableEntry:
        s = self._subjects.subjects.get(entry.subject_id)
        return replace(entry, subject_name=s.name, subject_code=s.code, subject_color=s.color)

    def list_active(self, user_id: int, *, day=None) -> list[TimetableEntry]:
        return [
            self._joined(e)
            for e in self.entries.values()
            if e.user_id == user_id and e.is_active and (day is None or e.day_of_week == day)
        ]

    def get_owned(self, user_id: int, entry_id: int) -> Optional[TimetableEntry]:
        e = self.entries.get(int(entry_id))
        return self._joined(e) if e and e.user_id == user_id else None

    def create(self, *, user_id, subject_id, day_of_week, start_time, end_time, room, lecture_type) -> int:
        self._id += 1
        self.entries[self._id] = TimetableEntry(
            entry_id=self._id,
            user_id=user_id,
            subject_id=subject_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            room=room,
            lecture_type=lecture_type,
        )
        return self._id

    def update_fields(self, entry_id: int, changes: dict[str, Any]) -> bool:
        e = self.entries.get(int(entry_id))
        if not e:
            return False
        self.entries[e.entry_id] = replace(e, **changes)
        return True


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0

    def add(self, user_id: int, subject_id: int, day: date, status: AttendanceStatus, notes=None) -> int:
        return self.create(user_id=user_id, subject_id=subject_id, attendance_date=day, status=status, notes=notes)

    def _newest_first(self, items):
        return sorted(items, key=lambda r: (r.attendance_date, r.attendance_id), reverse=True)

    def list_for_user(self, user_id: int, filters: AttendanceFilter):
        items = [
            r
            for r in self.records.values()
            if r.user_id == user_id
            and (filters.subject_id is None or r.subject_id == filters.subject_id)
            and (filters.status is None or r.status == filters.status)
            and (filters.start_date is None or r.attendance_date >= filters.start_date)
            and (filters.end_date is None or r.attendance_date <= filters.end_date)
        ]
        return self._newest_first(items)

    def list_for_date(self, user_id: int, day: date):
        return [r for r in self.records.values() if r.user_id == user_id and r.attendance_date == day]

    def history(self, user_id: int, subject_id: int, limit: int):
        items = [r for r in self.records.values() if r.user_id == user_id and r.subject_id == subject_id]
        return self._newest_first(items)[:limit]

    def get_owned(self, user_id: int, attendance_id: int) -> Optional[AttendanceRecord]:
        r = self.records.get(int(attendance_id))
        return r if r and r.user_id == user_id else None

    def get_for_day(self, user_id: int, subject_id: int, day: date) -> Optional[AttendanceRecord]:
        return next(
            (
                r
                for r in self.records.values()
                if r.user_id == user_id and r.subject_id == subject_id and r.attendance_date == day
            ),
            None,
        )

    def create(self, *, user_id, subject_id, attendance_date, status, notes=None) -> int:
        self._id += 1
        self.records[self._id] = AttendanceRecord(
            attendance_id=self._id,
            user_id=user_id,
            subject_id=subject_id,
            attendance_date=attendance_date,
            status=status,
            notes=notes,
            marked_at=NOW,
        )
        return self._id

    def update_fields(self, attendance_id: int, changes: dict[str, Any]) -> bool:
        r = self.records.get(int(attendance_id))
        if not r:
            return False
        self.records[r.attendance_id] = replace(r, **changes)
        return True

    def delete(self, attendance_id: int) -> bool:
        return self.records.pop(int(attendance_id), None) is not None

    def count_by_status_since(self, user_id: int, since: date):
        counts = {status: 0 for status in AttendanceStatus}
        for r in self.records.values():
            if r.user_id == user_id and r.attendance_date >= since:
                counts[r.status] += 1
        return counts


class FakeMailer:
    def __init__(self, *, succeed: bool = True):
        self.succeed = succeed
        self.verification: list[tuple[str, str, str]] = []
        self.welcome: list[tuple[str, str]] = []

    def send_verification_email(self, email: str, name: str, token: str) -> bool:
        self.verification.append((email, name, token))
        return self.succeed

    def send_welcome_email(self, email: str, name: str) -> bool:
        self.welcome.append((email, name))
        return self.succeed


class FakeGoogle:
    def __init__(self, identity: Optional[GoogleIdentity] = None):
        self.identity = identity or GoogleIdentity(
            google_id="g-123",
            email="asha@gmail.com",
            name="Asha G",
            profile_picture="https://example.com/a.png",
            email_verified=True,
        )

    def verify(self, id_token: str) -> GoogleIdentity:
        return self.identity


@pytest.fixture
def users():
    return InMemoryUsers()


@pytest.fixture
def pending():
    return InMemoryPendingUsers()


@pytest.fixture
def subjects():
    return InMemorySubjects()


@pytest.fixture
def timetable_repo(subjects):
    return InMemoryTimetable(subjects)


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def google():
    return FakeGoogle()


@pytest.fixture
def tokens():
    return TokenService(
        access_secret="test-access-secret-0123456789abcdef",
        refresh_secret="test-refresh-secret-0123456789abcdef",
    )


@pytest.fixture
def auth_service(users, pending, tokens, mailer, google):
    return AuthService(users, pending, tokens, mailer, google, clock=fixed_clock)


@pytest.fixture
def container(users, pending, subjects, timetable_repo, attendance_repo, auth_service):
    return Container(
        conn=None,
        users_repo=users,
        pending_users_repo=pending,
        subjects_repo=subjects,
        timetable_repo=timetable_repo,
        attendance_repo=attendance_repo,
        auth_service=auth_service,
        profile_service=ProfileService(users),
        subject_service=SubjectService(subjects),
        timetable_service=TimetableService(timetable_repo, subjects, clock=fixed_clock),
        attendance_service=AttendanceService(attendance_repo, subjects, clock=fixed_clock),
        bunk_predictor_service=BunkPredictorService(subjects),
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from bunk_buzz.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def student(users):
    return users.add(name="Asha", email="asha@example.com")


@pytest.fixture
def auth_headers(student, tokens):
    pair = tokens.issue_pair(student)
    return {"Authorization": f"Bearer {pair.access_token}"}
