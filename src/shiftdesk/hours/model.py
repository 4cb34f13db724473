from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AdminHoursStatus, SellerHoursStatus


@dataclass(frozen=True)
class MonthlyAttestation:
    attestation_id: int
    seller_id: str
    month_start: date
    computed_hours: float
    seller_status: SellerHoursStatus = SellerHoursStatus.PENDING
    seller_correction_hours: Optional[float] = None
    seller_comment: Optional[str] = None
    admin_status: AdminHoursStatus = AdminHoursStatus.PENDING
    admin_comment: Optional[str] = None
    final_hours: Optional[float] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attestation_id,
            "seller_id": self.seller_id,
            "month_start": self.month_start.isoformat(),
            "computed_hours": self.computed_hours,
            "seller_status": self.seller_status.value,
            "seller_correction_hours": self.seller_correction_hours,
            "seller_comment": self.seller_comment,
            "admin_status": self.admin_status.value,
            "admin_comment": self.admin_comment,
            "final_hours": self.final_hours,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class MonthRunResult:
    month_start: date
    ok: bool
    sellers: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "month_start": self.month_start.isoformat(),
            "ok": self.ok,
            "sellers": self.sellers,
            "error": self.error,
        }
