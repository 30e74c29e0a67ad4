from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Optional

from ..core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^\w+([.+-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,})+$")
HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
HH_MM_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")
STRONG_PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters", field=field_name)
    return value


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must not exceed {max_len} characters", field=field_name)
    return value


def optional_text(value: Any, field_name: str, max_len: int) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string", field=field_name)
    value = value.strip()
    require_max_length(value, field_name, max_len)
    return value or None


def require_email(value: Any, field_name: str = "email") -> str:
    email = require_non_empty(value, field_name).lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("Please provide a valid email", field=field_name)
    return email


def require_strong_password(value: Any, field_name: str = "password", min_len: int = 6) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field_name} is required", field=field_name)
    require_min_length(value, field_name, min_len)
    if not STRONG_PASSWORD_RE.match(value):
        raise ValidationError(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number",
            field=field_name,
        )
    return value


def require_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a non-negative integer", field=field_name)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field_name} must be a non-negative integer", field=field_name)
    return value


def require_percentage(value: Any, field_name: str) -> float:
    try:
        if isinstance(value, bool):
            raise TypeError
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be between 0 and 100", field=field_name)
    if math.isnan(number) or not 0 <= number <= 100:
        raise ValidationError(f"{field_name} must be between 0 and 100", field=field_name)
    return number


def require_hex_color(value: Any, field_name: str = "color") -> str:
    if not isinstance(value, str) or not HEX_COLOR_RE.match(value):
        raise ValidationError("Please provide a valid hex color code", field=field_name)
    return value


def require_hh_mm(value: Any, field_name: str) -> str:
    """Validate ``H:MM``/``HH:MM`` and normalize it to zero-padded ``HH:MM``."""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} is required", field=field_name)
    m = HH_MM_RE.match(value.strip())
    if not m:
        raise ValidationError("Please provide valid time format (HH:mm)", field=field_name)
    return f"{int(m.group(1)):02d}:{m.group(2)}"


def require_id(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}", field=field_name)
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}", field=field_name)
    if ident <= 0 or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"Invalid {field_name}", field=field_name)
    return ident


def require_iso_date(value: Any, field_name: str) -> date:
    """Accept ``YYYY-MM-DD`` or a full ISO-8601 timestamp; the time part is dropped."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    text = value.strip()
    try:
        if len(text) == 10:
            return datetime.strptime(text, "%Y-%m-%d").date()
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError("Please provide a valid date", field=field_name)


def optional_iso_date(value: Any, field_name: str) -> Optional[date]:
    if value in (None, ""):
        return None
    return require_iso_date(value, field_name)


def require_choice(value: Any, enum_cls, field_name: str, message: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(message, field=field_name)
