from __future__ import annotations

from .base import HoursCalculator
from ...shifts.model import ShiftSlot


class StandardHoursCalculator(HoursCalculator):
    """Standard rule: fixed paid hours per shift code, empty slots count 0."""

    def hours_for(self, slot: ShiftSlot) -> float:
        if not slot.seller_id:
            return 0.0
        return slot.shift_code.hours
