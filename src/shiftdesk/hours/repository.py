from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AdminHoursStatus, SellerHoursStatus
from .model import MonthlyAttestation


class AttestationRepository(Protocol):
    def get(self, attestation_id: int) -> Optional[MonthlyAttestation]:
        raise NotImplementedError

    def get_for(self, *, seller_id: str, month_start: date) -> Optional[MonthlyAttestation]:
        raise NotImplementedError

    def list(self, *, month_start: Optional[date] = None, seller_id: Optional[str] = None) -> Sequence[MonthlyAttestation]:
        raise NotImplementedError

    def insert(self, *, seller_id: str, month_start: date, computed_hours: float) -> int:
        raise NotImplementedError

    def update_computed(self, attestation_id: int, *, computed_hours: float) -> bool:
        """Store new computed hours and reset both statuses; skipped on admin-approved rows."""

        raise NotImplementedError

    def respond(
        self,
        attestation_id: int,
        *,
        seller_status: SellerHoursStatus,
        correction_hours: Optional[float],
        comment: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def decide(
        self,
        attestation_id: int,
        *,
        admin_status: AdminHoursStatus,
        comment: Optional[str],
        final_hours: Optional[float],
    ) -> bool:
        """Conditional on ``admin_status = 'pending'``."""

        raise NotImplementedError
