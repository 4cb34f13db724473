from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ShiftCode
from .model import DailyCheckin


class CheckinRepository(Protocol):
    def get(self, *, day: date, seller_id: str) -> Optional[DailyCheckin]:
        raise NotImplementedError

    def upsert_issued(
        self,
        *,
        day: date,
        seller_id: str,
        shift_code: ShiftCode,
        code_hash: str,
        issued_by: str,
        issued_at: datetime,
    ) -> None:
        """Store a fresh code hash and clear any previous confirmation."""

        raise NotImplementedError

    def confirm(self, *, day: date, seller_id: str, confirmed_at: datetime, late_minutes: int, early_minutes: int) -> bool:
        """Conditional on ``confirmed_at IS NULL``; False when already confirmed."""

        raise NotImplementedError

    def list_range(self, start: date, end: date, *, seller_id: Optional[str] = None) -> Sequence[DailyCheckin]:
        raise NotImplementedError
