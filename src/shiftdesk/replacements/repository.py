from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ShiftCode
from .model import ReplacementInterest


class ReplacementRepository(Protocol):
    def create(self, *, absence_id: int, volunteer_id: str) -> int:
        raise NotImplementedError

    def get(self, interest_id: int) -> Optional[ReplacementInterest]:
        raise NotImplementedError

    def list_for_absences(self, absence_ids: Sequence[int]) -> Sequence[ReplacementInterest]:
        raise NotImplementedError

    def accept(self, *, absence_id: int, volunteer_id: str, shift_code: ShiftCode) -> bool:
        """Insert or update the volunteer's interest as accepted.

        Returns False when another interest is already accepted for the absence.
        """

        raise NotImplementedError

    def decline(self, interest_id: int) -> bool:
        raise NotImplementedError

    def decline_others(self, *, absence_id: int, keep_interest_id: int) -> int:
        raise NotImplementedError

    def delete_for_absences(self, absence_ids: Sequence[int]) -> int:
        raise NotImplementedError
