from __future__ import annotations

from ...core.enums import ShiftCode
from .base import CheckinWindowStrategy, TimingDecision


class TooEarlyStrategy(CheckinWindowStrategy):
    """Before the window opens: nothing can be recorded yet."""

    def decide(self, *, delta_minutes: int, shift_code: ShiftCode) -> TimingDecision:
        return TimingDecision(too_early=True)
