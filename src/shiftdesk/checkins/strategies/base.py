from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import ShiftCode


@dataclass(frozen=True)
class TimingDecision:
    late_minutes: int = 0
    early_minutes: int = 0
    window_closed: bool = False
    too_early: bool = False


class CheckinWindowStrategy(ABC):
    """Strategy Pattern: decide lateness/earliness of a check-in."""

    @abstractmethod
    def decide(self, *, delta_minutes: int, shift_code: ShiftCode) -> TimingDecision:
        """``delta_minutes`` is check-in time minus planned start."""

        raise NotImplementedError
