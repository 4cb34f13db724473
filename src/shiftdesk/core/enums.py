from __future__ import annotations

from enum import Enum

from .constants import SHIFT_HOURS, SHIFT_LABELS, SHIFT_PLANNED_START, SHIFT_SORT_ORDER


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    SELLER = "seller"


class ShiftCode(str, Enum):
    """Daily work period of the shop planning grid."""

    MORNING = "MORNING"
    MIDDAY = "MIDDAY"
    EVENING = "EVENING"
    SUNDAY_EXTRA = "SUNDAY_EXTRA"

    @property
    def sort_order(self) -> int:
        return SHIFT_SORT_ORDER[self.value]

    @property
    def hours(self) -> float:
        return SHIFT_HOURS[self.value]

    @property
    def planned_start(self):
        return SHIFT_PLANNED_START[self.value]

    @property
    def label(self) -> str:
        return SHIFT_LABELS[self.value]

    @classmethod
    def ordered(cls) -> list["ShiftCode"]:
        return sorted(cls, key=lambda c: c.sort_order)


class RequestStatus(str, Enum):
    """Approval status of absence and leave requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class InterestStatus(str, Enum):
    """Status of a volunteer's replacement offer."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class SellerHoursStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DISPUTED = "disputed"


class AdminHoursStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
