from __future__ import annotations

from ...core.constants import MAX_EARLY_MINUTES, MAX_LATE_MINUTES
from ...core.enums import ShiftCode
from .base import CheckinWindowStrategy, TimingDecision


class InWindowStrategy(CheckinWindowStrategy):
    """Inside the window: count late minutes, and early minutes for the morning shift only."""

    def decide(self, *, delta_minutes: int, shift_code: ShiftCode) -> TimingDecision:
        late = min(delta_minutes, MAX_LATE_MINUTES) if delta_minutes > 0 else 0
        early = 0
        if shift_code == ShiftCode.MORNING and delta_minutes < 0:
            early = min(-delta_minutes, MAX_EARLY_MINUTES)
        return TimingDecision(late_minutes=late, early_minutes=early)
