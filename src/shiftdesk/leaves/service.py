from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

from ..auth.service import require_role
from ..common.datetime_utils import parse_iso_date, today_local
from ..common.validators import clean_reason, parse_decimal, require_non_empty
from ..core.enums import RequestStatus, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.repository import ProfileRepository
from .forecast import build_forecast
from .model import LeaveBalance
from .repository import LeaveBalanceRepository, LeaveRepository

log = logging.getLogger(__name__)

_BALANCE_FIELDS = (
    "cp_acquired_n",
    "cp_taken_n",
    "cp_remaining_n",
    "cp_acquired_n1",
    "cp_taken_n1",
    "cp_remaining_n1",
)


class LeaveService:
    """Multi-day leave (congé) requests and admin decisions."""

    def __init__(self, leaves: LeaveRepository, profiles: ProfileRepository, notifications=None):
        self._leaves = leaves
        self._profiles = profiles
        self._notifications = notifications

    def request_leave(
        self,
        *,
        current_role: Role,
        seller_id: str,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        require_role(current_role, Role.SELLER)
        if start_date is None or end_date is None:
            raise ValidationError("start_date and end_date are required")
        if end_date < start_date:
            raise ValidationError("END_BEFORE_START")
        if start_date < today_local(now):
            raise ValidationError("DATE_IN_PAST")

        leave_id = self._leaves.create(
            seller_id=seller_id, start_date=start_date, end_date=end_date, reason=clean_reason(reason)
        )
        log.info("leave %s requested by %s (%s..%s)", leave_id, seller_id, start_date, end_date)

        if self._notifications is not None:
            name = self._profiles.names_by_ids([seller_id]).get(seller_id, "Vendeuse")
            self._notifications.notify_role(
                Role.ADMIN,
                title="Nouvelle demande de congé",
                body=f"{name} - {start_date.strftime('%d/%m/%Y')} au {end_date.strftime('%d/%m/%Y')}",
                url="/admin?tab=leaves",
            )
        return leave_id

    def list_mine(self, *, seller_id: str) -> list[dict]:
        # repository order: start_date DESC
        return [lv.to_dict() for lv in self._leaves.list(seller_id=seller_id)]

    def list_for_admin(
        self, *, current_role: Role, status: Optional[RequestStatus] = None, now: Optional[datetime] = None
    ) -> list[dict]:
        require_role(current_role, Role.ADMIN)
        # a pending leave that already ended no longer needs a decision
        overlap_start = today_local(now) if status == RequestStatus.PENDING else None
        rows = self._leaves.list(statuses=[status] if status else None, overlap_start=overlap_start)
        names = self._profiles.names_by_ids(lv.seller_id for lv in rows)
        out = []
        for lv in rows:
            item = lv.to_dict()
            item["full_name"] = names.get(lv.seller_id, "-")
            out.append(item)
        return out

    def _decide(self, leave_id: int, status: RequestStatus) -> None:
        if self._leaves.decide(leave_id, status=status):
            log.info("leave %s %s", leave_id, status.value)
            return
        if self._leaves.get(leave_id) is None:
            raise NotFoundError("Leave not found")
        raise ConflictError("ALREADY_DECIDED")

    def approve(self, *, current_role: Role, leave_id: int) -> None:
        require_role(current_role, Role.ADMIN)
        self._decide(leave_id, RequestStatus.APPROVED)

    def reject(self, *, current_role: Role, leave_id: int) -> None:
        require_role(current_role, Role.ADMIN)
        self._decide(leave_id, RequestStatus.REJECTED)

    def cancel_upcoming(self, *, current_role: Role, leave_id: int, now: Optional[datetime] = None) -> None:
        """Delete a leave that has not started yet so the seller can ask again."""
        require_role(current_role, Role.ADMIN)
        leave = self._leaves.get(leave_id)
        if leave is None:
            raise NotFoundError("Leave not found")
        if leave.status not in (RequestStatus.PENDING, RequestStatus.APPROVED):
            raise ValidationError("NOT_CANCELLABLE")
        if not leave.start_date > today_local(now):
            raise ValidationError("NOT_CANCELLABLE")
        self._leaves.delete(leave_id)


class LeaveBalanceService:
    """Official payslip balance and the forecast netted against approved upcoming leave."""

    def __init__(self, balances: LeaveBalanceRepository, leaves: LeaveRepository, profiles: ProfileRepository):
        self._balances = balances
        self._leaves = leaves
        self._profiles = profiles

    def my_balance(self, *, seller_id: str, now: Optional[datetime] = None) -> dict:
        balance = self._balances.get(seller_id)
        if balance is None:
            raise NotFoundError("NOT_SET")
        leaves = self._leaves.list(seller_id=seller_id, statuses=[RequestStatus.APPROVED])
        return {"balance": balance.to_dict(), "forecast": build_forecast(balance, leaves, today_local(now))}

    def list_all(self, *, current_role: Role) -> list[dict]:
        require_role(current_role, Role.ADMIN)
        balances = {b.seller_id: b for b in self._balances.list_all()}
        out = []
        for p in self._profiles.list_by_roles([Role.SELLER]):
            b = balances.get(p.user_id)
            out.append(
                {
                    "seller_id": p.user_id,
                    "full_name": p.full_name,
                    "active": p.active,
                    "balance": b.to_dict() if b else None,
                }
            )
        return out

    def upsert(self, *, current_role: Role, updated_by: str, payload: dict[str, Any]) -> LeaveBalance:
        require_role(current_role, Role.ADMIN)
        seller_id = require_non_empty(payload.get("seller_id"), "seller_id")
        if self._profiles.get(seller_id) is None:
            raise NotFoundError("Seller not found")
        try:
            as_of = parse_iso_date(str(payload.get("as_of") or "").strip())
        except ValueError:
            raise ValidationError("Invalid as_of (YYYY-MM-DD)")

        values = {f: parse_decimal(payload.get(f), f) for f in _BALANCE_FIELDS}
        if any(v < 0 for v in values.values()):
            raise ValidationError("Negative values are not allowed")

        balance = LeaveBalance(seller_id=seller_id, as_of=as_of, updated_by=updated_by, **values)
        self._balances.upsert(balance)
        return balance
