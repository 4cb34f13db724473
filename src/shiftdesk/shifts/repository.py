from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ShiftCode
from .model import ShiftSlot


class ShiftRepository(Protocol):
    def upsert(self, *, day: date, shift_code: ShiftCode, seller_id: Optional[str]) -> None:
        raise NotImplementedError

    def upsert_many(self, slots: Sequence[ShiftSlot]) -> int:
        raise NotImplementedError

    def list_range(self, start: date, end: date, *, seller_id: Optional[str] = None) -> Sequence[ShiftSlot]:
        """Slots with ``start <= day <= end``; empty slots included unless filtered by seller."""

        raise NotImplementedError

    def reassign_if(self, *, day: date, shift_code: ShiftCode, expected_seller_id: str, new_seller_id: str) -> bool:
        """Compare-and-swap: move the slot only if ``expected_seller_id`` still holds it."""

        raise NotImplementedError
