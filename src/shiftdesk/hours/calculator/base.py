from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...shifts.model import ShiftSlot


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for paid hours)."""

    @abstractmethod
    def hours_for(self, slot: ShiftSlot) -> float:
        raise NotImplementedError

    def total_hours(self, slots: Iterable[ShiftSlot]) -> float:
        return round(sum(self.hours_for(s) for s in slots), 2)
