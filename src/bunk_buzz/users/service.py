from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import (
    optional_iso_date,
    optional_text,
    require_email,
    require_max_length,
    require_min_length,
    require_non_empty,
    require_percentage,
    require_strong_password,
)
from ..core.constants import GOOGLE_DEFAULT_COLLEGE, MIN_PASSWORD_LENGTH, VERIFICATION_TOKEN_HOURS
from ..core.enums import AuthProvider
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from .model import TokenPair, User
from .repository import PendingUserRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignupResult:
    email: str
    token_expiry: datetime
    email_sent: bool


@dataclass(frozen=True)
class AuthResult:
    user: User
    tokens: TokenPair


def _check_password(user: User, password: str) -> bool:
    if not user.password_hash or not password:
        return False
    try:
        return check_password_hash(user.password_hash, password)
    except (ValueError, TypeError):
        # e.g. corrupted or legacy hash formats
        return False


def _require_name(value: Any) -> str:
    name = require_non_empty(value, "name")
    require_min_length(name, "name", 2)
    require_max_length(name, "name", 100)
    return name


def _require_college(value: Any) -> str:
    college = require_non_empty(value, "college")
    require_max_length(college, "college", 200)
    return college


class AuthService:
    """Use cases: signup with email verification, login, Google sign-in, token refresh."""

    def __init__(
        self,
        users: UserRepository,
        pending: PendingUserRepository,
        tokens,
        mailer,
        google=None,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._pending = pending
        self._tokens = tokens
        self._mailer = mailer
        self._google = google
        self._clock = clock

    def _new_verification_token(self) -> tuple[str, datetime]:
        return secrets.token_hex(32), self._clock() + timedelta(hours=VERIFICATION_TOKEN_HOURS)

    def _start_session(self, user: User) -> AuthResult:
        pair = self._tokens.issue_pair(user)
        self._users.update_fields(user.user_id, {"refresh_token": pair.refresh_token, "last_login": self._clock()})
        return AuthResult(user=self._users.get_by_id(user.user_id) or user, tokens=pair)

    def signup(self, *, name: Any, email: Any, college: Any, password: Any) -> SignupResult:
        name = _require_name(name)
        email = require_email(email)
        college = _require_college(college)
        password = require_strong_password(password, min_len=MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("User with this email already exists")

        now = self._clock()
        self._pending.purge_expired(now=now)
        # signing up again restarts verification
        self._pending.delete_by_email(email)

        token, expiry = self._new_verification_token()
        self._pending.create(
            name=name,
            email=email,
            college=college,
            password_hash=generate_password_hash(password),
            verification_token=token,
            token_expiry=expiry,
        )
        email_sent = self._mailer.send_verification_email(email, name, token)
        logger.info("Signup pending verification for %s (email_sent=%s)", email, email_sent)
        return SignupResult(email=email, token_expiry=expiry, email_sent=email_sent)

    def verify_email(self, token: Any) -> AuthResult:
        if not isinstance(token, str) or not token.strip():
            raise ValidationError("Verification token is required", field="token")

        pending = self._pending.get_by_token(token.strip(), now=self._clock())
        if not pending:
            raise ValidationError("Invalid or expired verification token", field="token")
        if self._users.get_by_email(pending.email):
            self._pending.delete_by_email(pending.email)
            raise ConflictError("Email is already verified")

        user_id = self._users.create_user(
            name=pending.name,
            email=pending.email,
            college=pending.college,
            password_hash=pending.password_hash,
            auth_provider=AuthProvider.LOCAL,
            email_verified=True,
        )
        self._pending.delete_by_email(pending.email)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        self._mailer.send_welcome_email(user.email, user.name)
        logger.info("Verified email for user %s", user.user_id)
        return self._start_session(user)

    def login(self, *, email: Any, password: Any) -> AuthResult:
        email = require_email(email)
        if not isinstance(password, str) or not password:
            raise ValidationError("password is required", field="password")

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError("Invalid email or password")
        if not user.email_verified:
            raise AuthorizationError("Please verify your email before logging in")
        if not user.is_active:
            raise AuthorizationError("Your account has been deactivated")
        if not _check_password(user, password):
            logger.info("Failed login for %s", email)
            raise AuthenticationError("Invalid email or password")

        return self._start_session(user)

    def google_auth(self, token: Any) -> AuthResult:
        if not isinstance(token, str) or not token.strip():
            raise ValidationError("Google token is required", field="token")
        if self._google is None:
            raise AuthenticationError("Google sign-in is not configured")

        identity = self._google.verify(token.strip())
        user = self._users.get_by_email(identity.email)

        if user:
            if not user.is_active:
                raise AuthorizationError("Your account has been deactivated")
            if not user.google_id:
                # link Google to the existing account
                self._users.update_fields(
                    user.user_id,
                    {
                        "google_id": identity.google_id,
                        "profile_picture": identity.profile_picture,
                        "email_verified": True,
                    },
                )
                user = self._users.get_by_id(user.user_id) or user
        else:
            user_id = self._users.create_user(
                name=identity.name,
                email=identity.email,
                college=GOOGLE_DEFAULT_COLLEGE,
                password_hash=None,
                auth_provider=AuthProvider.GOOGLE,
                email_verified=True,
                google_id=identity.google_id,
                profile_picture=identity.profile_picture,
            )
            user = self._users.get_by_id(user_id)
            if not user:
                raise NotFoundError("User not found")
            self._mailer.send_welcome_email(user.email, user.name)

        return self._start_session(user)

    def refresh(self, refresh_token: Any) -> TokenPair:
        if not isinstance(refresh_token, str) or not refresh_token.strip():
            raise ValidationError("Refresh token is required", field="refreshToken")

        refresh_token = refresh_token.strip()
        user = self._users.get_by_id(self._tokens.decode_refresh(refresh_token))
        if not user or not user.is_active or user.refresh_token != refresh_token:
            raise AuthenticationError("Invalid refresh token")

        pair = self._tokens.issue_pair(user)
        self._users.update_fields(user.user_id, {"refresh_token": pair.refresh_token})
        return pair

    def logout(self, user: User) -> None:
        self._users.update_fields(user.user_id, {"refresh_token": None})

    def resend_verification(self, email: Any) -> SignupResult:
        email = require_email(email)
        if self._users.get_by_email(email):
            raise ValidationError("Email is already verified", field="email")

        pending = self._pending.get_by_email(email)
        if not pending:
            raise NotFoundError("No pending verification found for this email")

        token, expiry = self._new_verification_token()
        self._pending.replace_token(pending.pending_id, verification_token=token, token_expiry=expiry)
        email_sent = self._mailer.send_verification_email(email, pending.name, token)
        return SignupResult(email=email, token_expiry=expiry, email_sent=email_sent)

    def resolve_access_token(self, token: str) -> User:
        user = self._users.get_by_id(self._tokens.decode_access(token))
        if not user or not user.is_active:
            raise AuthenticationError("User not found or inactive")
        return user


class ProfileService:
    """Use cases: view and edit one's own account."""

    # request field -> (model attribute, parser)
    _EDITABLE = {
        "name": ("name", _require_name),
        "college": ("college", _require_college),
        "semesterStart": ("semester_start", lambda v: optional_iso_date(v, "semesterStart")),
        "semesterEnd": ("semester_end", lambda v: optional_iso_date(v, "semesterEnd")),
        "currentOverallAttendance": (
            "current_overall_attendance",
            lambda v: None if v is None else require_percentage(v, "currentOverallAttendance"),
        ),
        "overallMinimumAttendance": (
            "overall_minimum_attendance",
            lambda v: require_percentage(v, "overallMinimumAttendance"),
        ),
        "profilePicture": ("profile_picture", lambda v: optional_text(v, "profilePicture", 500)),
    }

    def __init__(self, users: UserRepository):
        self._users = users

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update(self, user_id: int, data: dict) -> User:
        user = self.get(user_id)

        changes: dict[str, Any] = {}
        for field, (attr, parse) in self._EDITABLE.items():
            if field in data:
                changes[attr] = parse(data[field])

        start = changes.get("semester_start", user.semester_start)
        end = changes.get("semester_end", user.semester_end)
        if start and end and end < start:
            raise ValidationError("Semester end must be after semester start", field="semesterEnd")

        if changes:
            self._users.update_fields(user_id, changes)
        return self.get(user_id)

    def change_password(self, user_id: int, *, current_password: Any, new_password: Any) -> None:
        if not current_password or not new_password:
            raise ValidationError("Please provide current and new password")
        if not isinstance(new_password, str) or len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters", field="newPassword"
            )

        user = self.get(user_id)
        if not user.password_hash:
            raise ValidationError("Cannot change password for OAuth accounts")
        if not _check_password(user, str(current_password)):
            raise AuthenticationError("Current password is incorrect")

        self._users.update_fields(user_id, {"password_hash": generate_password_hash(new_password)})

    def deactivate(self, user_id: int) -> None:
        self.get(user_id)
        self._users.update_fields(user_id, {"is_active": False, "refresh_token": None})
