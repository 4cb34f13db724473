from __future__ import annotations

import re
from typing import Any, Optional

from ..core.constants import REASON_MAX_LENGTH
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Optional[str]) -> str:
    email = (value or "").strip().lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email")
    return email


def optional_email(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    return require_email(value)


def clean_reason(value: Optional[str], max_len: int = REASON_MAX_LENGTH) -> Optional[str]:
    v = (value or "").strip()
    return v[:max_len] or None


def parse_decimal(value: Any, field_name: str) -> float:
    """Parse a number that may use ',' as decimal separator; empty means 0."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    v = str(value).strip().replace(",", ".")
    if not v:
        return 0.0
    try:
        return float(v)
    except ValueError:
        raise ValidationError(f"Invalid number for {field_name}")


def as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
