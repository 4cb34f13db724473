from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from ..absences.repository import AbsenceRepository
from ..common.datetime_utils import today_local
from ..core.constants import TEAM_EVENTS_DEFAULT_DAYS
from ..core.enums import RequestStatus
from ..leaves.repository import LeaveRepository
from ..users.repository import ProfileRepository


class TeamEventsService:
    """Upcoming absences and leaves of the whole team (the shared calendar)."""

    def __init__(self, absences: AbsenceRepository, leaves: LeaveRepository, profiles: ProfileRepository):
        self._absences = absences
        self._leaves = leaves
        self._profiles = profiles

    def upcoming(self, *, start: Optional[date] = None, end: Optional[date] = None, now: Optional[datetime] = None) -> dict:
        today = today_local(now)
        start = max(start or today, today)
        end = end or today + timedelta(days=TEAM_EVENTS_DEFAULT_DAYS)
        if end < start:
            return {"from": start.isoformat(), "to": end.isoformat(), "absences": [], "leaves": []}

        statuses = [RequestStatus.PENDING, RequestStatus.APPROVED]
        absences = self._absences.list(statuses=statuses, start=start, end=end)
        leaves = sorted(
            self._leaves.list(statuses=statuses, overlap_start=start, overlap_end=end),
            key=lambda lv: lv.start_date,
        )
        names = self._profiles.names_by_ids([a.seller_id for a in absences] + [lv.seller_id for lv in leaves])

        def _with_name(item: dict) -> dict:
            item["full_name"] = names.get(item["seller_id"], "-")
            return item

        return {
            "from": start.isoformat(),
            "to": end.isoformat(),
            "absences": [_with_name(a.to_dict()) for a in absences],
            "leaves": [_with_name(lv.to_dict()) for lv in leaves],
        }
