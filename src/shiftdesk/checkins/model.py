from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ShiftCode


@dataclass(frozen=True)
class DailyCheckin:
    day: date
    seller_id: str
    shift_code: Optional[ShiftCode]
    code_hash: Optional[str]
    issued_at: Optional[datetime] = None
    issued_by: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    late_minutes: int = 0
    early_minutes: int = 0

    @property
    def confirmed(self) -> bool:
        return self.confirmed_at is not None

    def to_dict(self) -> dict:
        return {
            "day": self.day.isoformat(),
            "seller_id": self.seller_id,
            "shift_code": self.shift_code.value if self.shift_code else None,
            "issued_at": self.issued_at.isoformat() if self.issued_at else None,
            "confirmed_at": self.confirmed_at.isoformat() if self.confirmed_at else None,
            "late_minutes": self.late_minutes,
            "early_minutes": self.early_minutes,
        }
