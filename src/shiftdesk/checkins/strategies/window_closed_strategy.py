from __future__ import annotations

from ...core.enums import ShiftCode
from .base import CheckinWindowStrategy, TimingDecision


class WindowClosedStrategy(CheckinWindowStrategy):
    """After the window: presence is recorded without any delta."""

    def decide(self, *, delta_minutes: int, shift_code: ShiftCode) -> TimingDecision:
        return TimingDecision(window_closed=True)
