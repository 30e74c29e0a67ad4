from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .notifications.email_service import EmailService, SMTPSettings
from .predictor.service import BunkPredictorService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.service import SubjectService
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.service import TimetableService
from .users.google import GoogleTokenVerifier
from .users.mysql_user_repository import MySQLPendingUserRepository, MySQLUserRepository
from .users.service import AuthService, ProfileService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    # None when the services run on in-memory repositories (tests)
    conn: Optional[DatabaseConnection]

    users_repo: Any
    pending_users_repo: Any
    subjects_repo: Any
    timetable_repo: Any
    attendance_repo: Any

    auth_service: AuthService
    profile_service: ProfileService
    subject_service: SubjectService
    timetable_service: TimetableService
    attendance_service: AttendanceService
    bunk_predictor_service: BunkPredictorService


def build_container(settings) -> Container:
    """Wire MySQL repositories, JWT, SMTP and Google sign-in from a settings module."""
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.DB_CONFIG))

    users_repo = MySQLUserRepository(conn)
    pending_users_repo = MySQLPendingUserRepository(conn)
    subjects_repo = MySQLSubjectRepository(conn)
    timetable_repo = MySQLTimetableRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    tokens = TokenService(
        access_secret=settings.JWT_ACCESS_SECRET,
        refresh_secret=settings.JWT_REFRESH_SECRET,
        algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
        access_minutes=getattr(settings, "JWT_ACCESS_EXPIRY_MINUTES", 15),
        refresh_days=getattr(settings, "JWT_REFRESH_EXPIRY_DAYS", 7),
    )
    mailer = EmailService(
        SMTPSettings.from_dict(getattr(settings, "SMTP_CONFIG", {})),
        from_name=getattr(settings, "EMAIL_FROM_NAME", "Bunk Buzz"),
        frontend_url=settings.FRONTEND_URL,
    )
    client_id = getattr(settings, "GOOGLE_CLIENT_ID", "")
    google = GoogleTokenVerifier(client_id) if client_id else None

    return Container(
        conn=conn,
        users_repo=users_repo,
        pending_users_repo=pending_users_repo,
        subjects_repo=subjects_repo,
        timetable_repo=timetable_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo, pending_users_repo, tokens, mailer, google),
        profile_service=ProfileService(users_repo),
        subject_service=SubjectService(subjects_repo),
        timetable_service=TimetableService(timetable_repo, subjects_repo),
        attendance_service=AttendanceService(attendance_repo, subjects_repo),
        bunk_predictor_service=BunkPredictorService(subjects_repo),
    )
