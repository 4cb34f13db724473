from datetime import date

from shiftdesk.core.enums import RequestStatus
from shiftdesk.leaves.forecast import build_forecast, upcoming_leave_days
from shiftdesk.leaves.model import Leave, LeaveBalance


def _leave(start, end, status=RequestStatus.APPROVED, leave_id=1):
    return Leave(leave_id=leave_id, seller_id="u-alice", start_date=start, end_date=end, status=status)


def test_forecast_nets_upcoming_working_days():
    balance = LeaveBalance(seller_id="u-alice", as_of=date(2026, 2, 28), cp_remaining_n=10.0, cp_remaining_n1=2.5)
    # Monday 9 to Sunday 15 March: six jours ouvrables
    leaves = [_leave(date(2026, 3, 9), date(2026, 3, 15))]

    forecast = build_forecast(balance, leaves, today=date(2026, 3, 4))

    assert forecast == {"official_remaining": 12.5, "upcoming_days": 6, "forecast_remaining": 6.5}


def test_leave_days_before_as_of_are_already_counted():
    balance = LeaveBalance(seller_id="u-alice", as_of=date(2026, 3, 10))
    leaves = [_leave(date(2026, 3, 9), date(2026, 3, 12))]

    assert upcoming_leave_days(balance, leaves, today=date(2026, 3, 4)) == 2


def test_past_days_and_unapproved_leaves_are_ignored():
    balance = LeaveBalance(seller_id="u-alice", as_of=date(2026, 2, 1))
    leaves = [
        _leave(date(2026, 3, 2), date(2026, 3, 5)),
        _leave(date(2026, 3, 20), date(2026, 3, 21), status=RequestStatus.PENDING, leave_id=2),
    ]

    assert upcoming_leave_days(balance, leaves, today=date(2026, 3, 4)) == 2


def test_no_as_of_means_no_upcoming_days():
    balance = LeaveBalance(seller_id="u-alice", as_of=None, cp_remaining_n=3.0)
    leaves = [_leave(date(2026, 3, 9), date(2026, 3, 10))]

    assert build_forecast(balance, leaves, today=date(2026, 3, 4)) == {
        "official_remaining": 3.0,
        "upcoming_days": 0,
        "forecast_remaining": 3.0,
    }


def test_forecast_never_negative():
    balance = LeaveBalance(seller_id="u-alice", as_of=date(2026, 3, 1), cp_remaining_n=1.0)
    leaves = [_leave(date(2026, 3, 9), date(2026, 3, 14))]

    assert build_forecast(balance, leaves, today=date(2026, 3, 4))["forecast_remaining"] == 0.0
