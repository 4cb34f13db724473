from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Iterator, Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ValidationError

_tz = ZoneInfo(DEFAULT_TIMEZONE)


def set_timezone(name: str) -> None:
    global _tz
    _tz = ZoneInfo(name)


def business_tz() -> ZoneInfo:
    return _tz


def now_local() -> datetime:
    """Current time in the business timezone.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(_tz)


def today_local(now: Optional[datetime] = None) -> date:
    return (now or now_local()).date()


def to_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=_tz)
    return value.astimezone(_tz)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_date_arg(value: Any, field_name: str, default: Optional[date] = None) -> date:
    v = str(value or "").strip()
    if not v:
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return parse_iso_date(v[:10])
    except ValueError:
        raise ValidationError(f"Invalid {field_name} (YYYY-MM-DD)")


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_dates(monday: date) -> list[date]:
    return [monday + timedelta(days=i) for i in range(7)]


def iter_days(start: date, end: date) -> Iterator[date]:
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def month_start(day: date) -> date:
    return day.replace(day=1)


def next_month_start(day: date) -> date:
    first = month_start(day)
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def previous_month_start(day: date) -> date:
    first = month_start(day)
    return month_start(first - timedelta(days=1))


def month_end(day: date) -> date:
    return next_month_start(day) - timedelta(days=1)


def minutes_of_day(value: datetime | time) -> int:
    return value.hour * 60 + value.minute


def format_minutes(minutes: int) -> str:
    minutes = max(0, int(minutes))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def working_days_inclusive(start: date, end: date) -> int:
    """Count jours ouvrables (Monday..Saturday) between two dates."""
    return sum(1 for d in iter_days(start, end) if d.weekday() != 6)
