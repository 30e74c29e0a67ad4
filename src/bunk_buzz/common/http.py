from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import current_app, g, jsonify, request

from ..core.exceptions import AuthenticationError, AuthorizationError

CONTAINER_KEY = "bunk_buzz.container"


def get_container():
    return current_app.extensions[CONTAINER_KEY]


def ok(data: Optional[dict] = None, *, message: Optional[str] = None, status: int = 200, **extra: Any):
    """JSON success envelope: ``{"success": true, "message"?, ...extra, "data"?}``."""
    payload: dict[str, Any] = {"success": True}
    if message:
        payload["message"] = message
    payload.update(extra)
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def fail(message: str, status: int, *, errors: Optional[list] = None):
    payload: dict[str, Any] = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    return jsonify(payload), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    parts = header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise AuthenticationError("Not authorized, no token provided")
    return parts[1].strip()


def login_required(view):
    """Resolve the bearer access token into ``g.current_user``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        container = get_container()
        g.current_user = container.auth_service.resolve_access_token(_bearer_token())
        return view(*args, **kwargs)

    return wrapper


def verified_required(view):
    """``login_required`` plus a verified email address."""

    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        if not g.current_user.email_verified:
            raise AuthorizationError("Please verify your email to access this resource")
        return view(*args, **kwargs)

    return wrapper
