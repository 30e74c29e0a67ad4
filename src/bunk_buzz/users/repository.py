from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol

from ..core.enums import AuthProvider
from .model import PendingUser, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        college: str,
        password_hash: Optional[str],
        auth_provider: AuthProvider,
        email_verified: bool,
        google_id: Optional[str] = None,
        profile_picture: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_fields(self, user_id: int, changes: dict[str, Any]) -> bool:
        """Update model attributes by name (``name``, ``college``, ``refresh_token`` ...)."""

        raise NotImplementedError


class PendingUserRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[PendingUser]:
        raise NotImplementedError

    def get_by_token(self, token: str, *, now: datetime) -> Optional[PendingUser]:
        """Only returns the signup while its token has not expired."""

        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        email: str,
        college: str,
        password_hash: str,
        verification_token: str,
        token_expiry: datetime,
    ) -> int:
        raise NotImplementedError

    def replace_token(self, pending_id: int, *, verification_token: str, token_expiry: datetime) -> bool:
        raise NotImplementedError

    def delete_by_email(self, email: str) -> bool:
        raise NotImplementedError

    def purge_expired(self, *, now: datetime) -> int:
        """Delete signups whose link expired more than an hour before ``now``."""

        raise NotImplementedError
