from __future__ import annotations

import hmac
import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Any, Optional

from ..auth.service import require_role
from ..common.datetime_utils import month_end, month_start, previous_month_start, today_local
from ..common.validators import clean_reason, parse_decimal
from ..core.enums import AdminHoursStatus, Role, SellerHoursStatus
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, UpstreamError, ValidationError
from ..shifts.model import ShiftSlot
from ..shifts.repository import ShiftRepository
from ..users.repository import ProfileRepository
from .calculator.base import HoursCalculator
from .calculator.standard_calculator import StandardHoursCalculator
from .model import MonthlyAttestation, MonthRunResult
from .repository import AttestationRepository

log = logging.getLogger(__name__)

CSV_FIELDS = [
    "month_start",
    "seller_id",
    "full_name",
    "computed_hours",
    "seller_status",
    "seller_correction_hours",
    "admin_status",
    "final_hours",
]


class MonthlyHoursService:
    """Monthly hours attestation: computed by a cron job, accepted or disputed by
    the seller, then approved or rejected by an admin."""

    def __init__(
        self,
        attestations: AttestationRepository,
        shifts: ShiftRepository,
        profiles: ProfileRepository,
        *,
        calculator: Optional[HoursCalculator] = None,
        cron_secret: str = "",
    ):
        self._attestations = attestations
        self._shifts = shifts
        self._profiles = profiles
        self._calculator = calculator or StandardHoursCalculator()
        self._cron_secret = cron_secret

    def check_cron_token(self, token: Optional[str]) -> None:
        if not self._cron_secret:
            raise UpstreamError("CRON_NOT_CONFIGURED")
        if not token or not hmac.compare_digest(token, self._cron_secret):
            raise AuthenticationError("Unauthorized")

    @staticmethod
    def default_months(now: Optional[datetime] = None) -> list[date]:
        today = today_local(now)
        return [previous_month_start(today), month_start(today)]

    def compute_month(self, month: date) -> int:
        """Upsert computed hours for every active seller; admin-approved rows stay untouched."""
        start = month_start(month)
        end = month_end(month)
        by_seller: dict[str, list[ShiftSlot]] = defaultdict(list)
        for s in self._shifts.list_range(start, end):
            if s.seller_id:
                by_seller[s.seller_id].append(s)

        sellers = self._profiles.list_by_roles([Role.SELLER], active_only=True)
        for p in sellers:
            hours = self._calculator.total_hours(by_seller.get(p.user_id, []))
            existing = self._attestations.get_for(seller_id=p.user_id, month_start=start)
            if existing is None:
                self._attestations.insert(seller_id=p.user_id, month_start=start, computed_hours=hours)
            elif existing.admin_status == AdminHoursStatus.APPROVED:
                continue
            elif abs(existing.computed_hours - hours) > 1e-6:
                self._attestations.update_computed(existing.attestation_id, computed_hours=hours)
        return len(sellers)

    def run(self, *, months: list[date]) -> tuple[list[dict], bool]:
        results: list[MonthRunResult] = []
        for m in months:
            try:
                count = self.compute_month(m)
            except Exception as exc:
                log.exception("monthly hours failed for %s", m)
                results.append(MonthRunResult(month_start=month_start(m), ok=False, error=str(exc)))
                continue
            log.info("monthly hours computed for %s (%s sellers)", month_start(m), count)
            results.append(MonthRunResult(month_start=month_start(m), ok=True, sellers=count))
        return [r.to_dict() for r in results], all(r.ok for r in results)

    def list_mine(self, *, seller_id: str, month: Optional[date] = None) -> list[dict]:
        rows = self._attestations.list(seller_id=seller_id, month_start=month_start(month) if month else None)
        return [r.to_dict() for r in rows]

    def respond(
        self,
        *,
        current_role: Role,
        seller_id: str,
        attestation_id: int,
        decision: str,
        correction_hours: Any = None,
        comment: Optional[str] = None,
    ) -> None:
        require_role(current_role, Role.SELLER)
        row = self._attestations.get(attestation_id)
        if row is None or row.seller_id != seller_id:
            raise NotFoundError("Attestation not found")
        if row.admin_status == AdminHoursStatus.APPROVED:
            raise ConflictError("ALREADY_APPROVED")

        choice = (decision or "").strip().lower()
        if choice == "accept":
            status, correction = SellerHoursStatus.ACCEPTED, None
        elif choice == "dispute":
            if correction_hours is None or str(correction_hours).strip() == "":
                raise ValidationError("correction_hours is required")
            correction = parse_decimal(correction_hours, "correction_hours")
            if correction < 0:
                raise ValidationError("correction_hours must be >= 0")
            status = SellerHoursStatus.DISPUTED
        else:
            raise ValidationError("Invalid decision")

        if not self._attestations.respond(
            attestation_id, seller_status=status, correction_hours=correction, comment=clean_reason(comment)
        ):
            raise ConflictError("ALREADY_APPROVED")

    def _with_names(self, rows: list[MonthlyAttestation]) -> list[dict]:
        names = self._profiles.names_by_ids(r.seller_id for r in rows)
        out = []
        for r in rows:
            item = r.to_dict()
            item["full_name"] = names.get(r.seller_id, "-")
            out.append(item)
        out.sort(key=lambda it: (it["full_name"] or "").lower())
        return out

    def list_month(self, *, current_role: Role, month: date) -> list[dict]:
        require_role(current_role, Role.ADMIN)
        return self._with_names(list(self._attestations.list(month_start=month_start(month))))

    def decide(self, *, current_role: Role, attestation_id: int, decision: str, comment: Optional[str] = None) -> dict:
        require_role(current_role, Role.ADMIN)
        row = self._attestations.get(attestation_id)
        if row is None:
            raise NotFoundError("Attestation not found")
        if row.seller_status == SellerHoursStatus.PENDING:
            raise ValidationError("SELLER_NOT_RESPONDED")

        choice = (decision or "").strip().lower()
        if choice == "approve":
            status = AdminHoursStatus.APPROVED
            if row.seller_status == SellerHoursStatus.DISPUTED and row.seller_correction_hours is not None:
                final_hours: Optional[float] = row.seller_correction_hours
            else:
                final_hours = row.computed_hours
        elif choice == "reject":
            status, final_hours = AdminHoursStatus.REJECTED, None
        else:
            raise ValidationError("Invalid decision")

        if not self._attestations.decide(
            attestation_id, admin_status=status, comment=clean_reason(comment), final_hours=final_hours
        ):
            raise ConflictError("ALREADY_DECIDED")
        return {"admin_status": status.value, "final_hours": final_hours}

    def export_rows(self, *, current_role: Role, month: date) -> list[dict]:
        return [{k: row.get(k) for k in CSV_FIELDS} for row in self.list_month(current_role=current_role, month=month)]
