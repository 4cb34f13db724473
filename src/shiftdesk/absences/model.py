from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class Absence:
    absence_id: int
    seller_id: str
    day: date
    status: RequestStatus
    reason: Optional[str] = None
    admin_forced: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.absence_id,
            "seller_id": self.seller_id,
            "date": self.day.isoformat(),
            "status": self.status.value,
            "reason": self.reason,
            "admin_forced": self.admin_forced,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
