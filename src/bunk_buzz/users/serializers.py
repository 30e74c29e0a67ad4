from __future__ import annotations

from typing import Any

from ..common.datetime_utils import iso_or_none
from .model import TokenPair, User


def user_to_dict(user: User) -> dict[str, Any]:
    """Public view of an account; secrets (hash, refresh token) never leave the server."""
    return {
        "id": user.user_id,
        "name": user.name,
        "email": user.email,
        "college": user.college,
        "authProvider": user.auth_provider.value,
        "emailVerified": user.email_verified,
        "profilePicture": user.profile_picture,
        "semesterStart": iso_or_none(user.semester_start),
        "semesterEnd": iso_or_none(user.semester_end),
        "currentOverallAttendance": user.current_overall_attendance,
        "overallMinimumAttendance": user.overall_minimum_attendance,
        "lastLogin": iso_or_none(user.last_login),
        "isActive": user.is_active,
        "createdAt": iso_or_none(user.created_at),
    }


def tokens_to_dict(tokens: TokenPair) -> dict[str, str]:
    return {"accessToken": tokens.access_token, "refreshToken": tokens.refresh_token}
