from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from ..common.datetime_utils import working_days_inclusive
from ..core.enums import RequestStatus
from .model import Leave, LeaveBalance


def official_remaining(balance: LeaveBalance) -> float:
    return max(0.0, balance.cp_remaining_n1 + balance.cp_remaining_n)


def upcoming_leave_days(balance: LeaveBalance, leaves: Iterable[Leave], today: date) -> int:
    """Jours ouvrables of approved leave not yet reflected in the payslip balance.

    A leave only counts from the day after ``as_of`` (and never before today).
    """
    if balance.as_of is None:
        return 0
    floor = max(today, balance.as_of + timedelta(days=1))
    total = 0
    for leave in leaves:
        if leave.status != RequestStatus.APPROVED:
            continue
        start = max(leave.start_date, floor)
        if start > leave.end_date:
            continue
        total += working_days_inclusive(start, leave.end_date)
    return total


def build_forecast(balance: LeaveBalance, leaves: Iterable[Leave], today: date) -> dict:
    official = official_remaining(balance)
    upcoming = upcoming_leave_days(balance, leaves, today)
    return {
        "official_remaining": round(official, 2),
        "upcoming_days": upcoming,
        "forecast_remaining": round(max(0.0, official - upcoming), 2),
    }
