from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..core.enums import AuthProvider
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, update_row
from .model import PendingUser, User
from .repository import PendingUserRepository, UserRepository

_USER_COLUMNS = """
    user_id, name, email, college, password_hash, auth_provider, google_id, email_verified,
    profile_picture, semester_start, semester_end, current_overall_attendance,
    overall_minimum_attendance, refresh_token, last_login, is_active, created_at
"""

# columns share the User attribute names
_UPDATABLE = frozenset(
    {
        "name",
        "college",
        "password_hash",
        "auth_provider",
        "google_id",
        "email_verified",
        "profile_picture",
        "semester_start",
        "semester_end",
        "current_overall_attendance",
        "overall_minimum_attendance",
        "refresh_token",
        "last_login",
        "is_active",
    }
)


def _optional_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        name=r["name"],
        email=r["email"],
        college=r["college"],
        password_hash=r.get("password_hash"),
        auth_provider=AuthProvider(r["auth_provider"]),
        email_verified=bool(r.get("email_verified")),
        google_id=r.get("google_id"),
        profile_picture=r.get("profile_picture"),
        semester_start=r.get("semester_start"),
        semester_end=r.get("semester_end"),
        current_overall_attendance=_optional_float(r.get("current_overall_attendance")),
        overall_minimum_attendance=float(r.get("overall_minimum_attendance") or 75),
        refresh_token=r.get("refresh_token"),
        last_login=r.get("last_login"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, college, password_hash, auth_provider, email_verified,
                                  google_id, profile_picture, last_login, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,NOW(),1)
                """,
                (
                    name,
                    email,
                    college,
                    password_hash,
                    auth_provider.value,
                    int(email_verified),
                    google_id,
                    profile_picture,
                ),
            )
            return int(cur.lastrowid)

    def update_fields(self, user_id: int, changes: dict[str, Any]) -> bool:
        return update_row(self._conn_factory, "users", {"user_id": int(user_id)}, changes, allowed=_UPDATABLE)


def _to_pending(r: dict) -> PendingUser:
    return PendingUser(
        pending_id=int(r["pending_id"]),
        name=r["name"],
        email=r["email"],
        college=r["college"],
        password_hash=r["password_hash"],
        verification_token=r["verification_token"],
        token_expiry=r["token_expiry"],
    )


class MySQLPendingUserRepository(PendingUserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[PendingUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT pending_id, name, email, college, password_hash, verification_token, token_expiry
                FROM pending_users
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            return _to_pending(row) if row else None

    def get_by_token(self, token: str, *, now: datetime) -> Optional[PendingUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT pending_id, name, email, college, password_hash, verification_token, token_expiry
                FROM pending_users
                WHERE verification_token=%s AND token_expiry > %s
                """,
                (token, now),
            )
            row = fetchone(cur)
            return _to_pending(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO pending_users(name, email, college, password_hash, verification_token, token_expiry)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, email, college, password_hash, verification_token, token_expiry),
            )
            return int(cur.lastrowid)

    def replace_token(self, pending_id: int, *, verification_token: str, token_expiry: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE pending_users SET verification_token=%s, token_expiry=%s WHERE pending_id=%s",
                (verification_token, token_expiry, int(pending_id)),
            )
            return cur.rowcount > 0

    def delete_by_email(self, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM pending_users WHERE email=%s", (email,))
            return cur.rowcount > 0

    def purge_expired(self, *, now: datetime) -> int:
        """Drop signups whose link expired more than an hour ago."""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM pending_users WHERE token_expiry < DATE_SUB(%s, INTERVAL 1 HOUR)",
                (now,),
            )
            return int(cur.rowcount)
