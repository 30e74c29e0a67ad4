from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AuthProvider


@dataclass(frozen=True)
class User:
    """Domain entity: a student account.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    name: str
    email: str
    college: str
    password_hash: Optional[str]
    auth_provider: AuthProvider
    email_verified: bool
    google_id: Optional[str] = None
    profile_picture: Optional[str] = None
    semester_start: Optional[date] = None
    semester_end: Optional[date] = None
    current_overall_attendance: Optional[float] = None
    overall_minimum_attendance: float = 75.0
    refresh_token: Optional[str] = None
    last_login: Optional[datetime] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PendingUser:
    """A signup waiting for its email verification link to be opened."""

    pending_id: int
    name: str
    email: str
    college: str
    password_hash: str
    verification_token: str
    token_expiry: datetime


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class GoogleIdentity:
    google_id: str
    email: str
    name: str
    profile_picture: Optional[str]
    email_verified: bool
