from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import InterestStatus, ShiftCode


@dataclass(frozen=True)
class ReplacementInterest:
    interest_id: int
    absence_id: int
    volunteer_id: str
    status: InterestStatus
    accepted_shift_code: Optional[ShiftCode] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.interest_id,
            "absence_id": self.absence_id,
            "volunteer_id": self.volunteer_id,
            "status": self.status.value,
            "accepted_shift_code": self.accepted_shift_code.value if self.accepted_shift_code else None,
        }
