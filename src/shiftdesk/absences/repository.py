from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import Absence


class AbsenceRepository(Protocol):
    def create(
        self,
        *,
        seller_id: str,
        day: date,
        reason: Optional[str],
        status: RequestStatus = RequestStatus.PENDING,
        admin_forced: bool = False,
    ) -> int:
        raise NotImplementedError

    def get(self, absence_id: int) -> Optional[Absence]:
        raise NotImplementedError

    def list(
        self,
        *,
        seller_id: Optional[str] = None,
        statuses: Optional[Sequence[RequestStatus]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Absence]:
        raise NotImplementedError

    def decide(self, absence_id: int, *, status: RequestStatus, expected: RequestStatus = RequestStatus.PENDING) -> bool:
        """Conditional status change; False when the row is missing or no longer ``expected``."""

        raise NotImplementedError

    def delete_many(self, absence_ids: Sequence[int]) -> int:
        raise NotImplementedError
