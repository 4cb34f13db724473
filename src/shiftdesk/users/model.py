from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    user_id: str
    full_name: Optional[str]
    role: Role
    active: bool = True

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "role": self.role.value,
            "active": self.active,
        }
