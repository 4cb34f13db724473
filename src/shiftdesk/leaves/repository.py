from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import Leave, LeaveBalance


class LeaveRepository(Protocol):
    def create(self, *, seller_id: str, start_date: date, end_date: date, reason: Optional[str]) -> int:
        raise NotImplementedError

    def get(self, leave_id: int) -> Optional[Leave]:
        raise NotImplementedError

    def list(
        self,
        *,
        seller_id: Optional[str] = None,
        statuses: Optional[Sequence[RequestStatus]] = None,
        overlap_start: Optional[date] = None,
        overlap_end: Optional[date] = None,
    ) -> Sequence[Leave]:
        """Leaves filtered by seller/status; ``overlap_*`` keep leaves intersecting the range."""

        raise NotImplementedError

    def decide(self, leave_id: int, *, status: RequestStatus, expected: RequestStatus = RequestStatus.PENDING) -> bool:
        raise NotImplementedError

    def delete(self, leave_id: int) -> bool:
        raise NotImplementedError


class LeaveBalanceRepository(Protocol):
    def get(self, seller_id: str) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_all(self) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def upsert(self, balance: LeaveBalance) -> None:
        raise NotImplementedError
