from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class AuthUser:
    user_id: str
    email: Optional[str]
    last_sign_in_at: Optional[str] = None


@dataclass(frozen=True)
class Caller:
    """The authenticated user behind the current request."""

    user_id: str
    email: Optional[str]
    role: Role
    full_name: Optional[str] = None
