from __future__ import annotations

import logging
from typing import Optional

import requests

from ..core.exceptions import AuthenticationError
from .model import GoogleIdentity

logger = logging.getLogger(__name__)

TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"


class GoogleTokenVerifier:
    """Checks a Google ID token against Google's tokeninfo endpoint."""

    def __init__(self, client_id: str, *, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self._client_id = client_id
        self._session = session or requests.Session()
        self._timeout = timeout

    def verify(self, id_token: str) -> GoogleIdentity:
        try:
            response = self._session.get(TOKENINFO_URL, params={"id_token": id_token}, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("Google token verification failed: %s", exc)
            raise AuthenticationError("Invalid Google token") from exc

        if response.status_code != 200:
            logger.warning("Google tokeninfo rejected token (status=%s)", response.status_code)
            raise AuthenticationError("Invalid Google token")

        data = response.json()
        if data.get("aud") != self._client_id:
            logger.error("Google token audience mismatch: %s", data.get("aud"))
            raise AuthenticationError("Invalid Google token")
        if not data.get("sub") or not data.get("email"):
            raise AuthenticationError("Invalid Google token")

        return GoogleIdentity(
            google_id=str(data["sub"]),
            email=str(data["email"]).lower(),
            name=data.get("name") or data["email"].split("@")[0],
            profile_picture=data.get("picture"),
            email_verified=str(data.get("email_verified", "false")).lower() == "true",
        )
