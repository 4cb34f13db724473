from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class Leave:
    leave_id: int
    seller_id: str
    start_date: date
    end_date: date
    status: RequestStatus
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.leave_id,
            "seller_id": self.seller_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "status": self.status.value,
            "reason": self.reason,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class LeaveBalance:
    """Official paid-leave (CP) balance copied from the payslip."""

    seller_id: str
    as_of: Optional[date]
    cp_acquired_n: float = 0.0
    cp_taken_n: float = 0.0
    cp_remaining_n: float = 0.0
    cp_acquired_n1: float = 0.0
    cp_taken_n1: float = 0.0
    cp_remaining_n1: float = 0.0
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "seller_id": self.seller_id,
            "as_of": self.as_of.isoformat() if self.as_of else None,
            "cp_acquired_n": self.cp_acquired_n,
            "cp_taken_n": self.cp_taken_n,
            "cp_remaining_n": self.cp_remaining_n,
            "cp_acquired_n1": self.cp_acquired_n1,
            "cp_taken_n1": self.cp_taken_n1,
            "cp_remaining_n1": self.cp_remaining_n1,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "updated_by": self.updated_by,
        }
