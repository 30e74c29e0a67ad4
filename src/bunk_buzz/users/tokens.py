from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from ..core.exceptions import AuthenticationError
from .model import TokenPair, User


class TokenService:
    """Issues and verifies the access/refresh JWT pair.

    Access and refresh tokens are signed with different secrets so one can
    never be replayed as the other.
    """

    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_minutes: int = 15,
        refresh_days: int = 7,
    ):
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._algorithm = algorithm
        self._access_ttl = timedelta(minutes=int(access_minutes))
        self._refresh_ttl = timedelta(days=int(refresh_days))

    def _encode(self, user: User, secret: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "sub": str(user.user_id),
            "email": user.email,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": secrets.token_hex(8),
        }
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def _decode(self, token: str, secret: str, label: str) -> dict[str, Any]:
        try:
            payload = jwt.decode(token, secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError(f"{label} token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError(f"Invalid {label.lower()} token") from exc
        if "sub" not in payload:
            raise AuthenticationError(f"Invalid {label.lower()} token")
        return payload

    def issue_pair(self, user: User) -> TokenPair:
        return TokenPair(
            access_token=self._encode(user, self._access_secret, self._access_ttl),
            refresh_token=self._encode(user, self._refresh_secret, self._refresh_ttl),
        )

    def decode_access(self, token: str) -> int:
        """Return the user id carried by a valid access token."""
        return int(self._decode(token, self._access_secret, "Access")["sub"])

    def decode_refresh(self, token: str) -> int:
        return int(self._decode(token, self._refresh_secret, "Refresh")["sub"])
