from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import CHECKIN_CLOSES_AFTER_MINUTES, CHECKIN_OPENS_BEFORE_MINUTES
from .strategies.base import CheckinWindowStrategy
from .strategies.on_time_strategy import InWindowStrategy
from .strategies.too_early_strategy import TooEarlyStrategy
from .strategies.window_closed_strategy import WindowClosedStrategy


@dataclass
class CheckinWindowFactory:
    """Factory Pattern: choose the strategy from the position relative to the window."""

    opens_before: int = CHECKIN_OPENS_BEFORE_MINUTES
    closes_after: int = CHECKIN_CLOSES_AFTER_MINUTES

    def for_delta(self, delta_minutes: int) -> CheckinWindowStrategy:
        if delta_minutes < -self.opens_before:
            return TooEarlyStrategy()
        if delta_minutes > self.closes_after:
            return WindowClosedStrategy()
        return InWindowStrategy()
