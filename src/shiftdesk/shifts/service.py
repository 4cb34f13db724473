from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Optional

from ..absences.repository import AbsenceRepository
from ..auth.service import require_role
from ..checkins.repository import CheckinRepository
from ..common.datetime_utils import today_local, week_dates, week_start
from ..core.enums import RequestStatus, Role, ShiftCode
from ..core.exceptions import ValidationError
from ..hours.calculator.base import HoursCalculator
from ..users.repository import ProfileRepository
from .model import ShiftSlot
from .repository import ShiftRepository

log = logging.getLogger(__name__)


def parse_shift_code(value: Optional[str]) -> ShiftCode:
    try:
        return ShiftCode((value or "").strip().upper())
    except ValueError:
        raise ValidationError("INVALID_SHIFT_CODE")


class ShiftPlannerService:
    def __init__(
        self,
        shifts: ShiftRepository,
        profiles: ProfileRepository,
        absences: AbsenceRepository,
        checkins: CheckinRepository,
        calculator: HoursCalculator,
    ):
        self._shifts = shifts
        self._profiles = profiles
        self._absences = absences
        self._checkins = checkins
        self._calculator = calculator

    def week(self, *, day: date) -> dict:
        """Monday..Sunday grid of the week containing ``day``."""
        monday = week_start(day)
        dates = week_dates(monday)
        slots = self._shifts.list_range(dates[0], dates[-1])
        names = self._profiles.names_by_ids(s.seller_id for s in slots)

        assignments: dict[str, dict] = {d.isoformat(): {} for d in dates}
        for s in slots:
            if not s.seller_id:
                continue
            assignments[s.day.isoformat()][s.shift_code.value] = {
                "seller_id": s.seller_id,
                "full_name": names.get(s.seller_id, "-"),
            }
        return {
            "monday": dates[0].isoformat(),
            "sunday": dates[-1].isoformat(),
            "dates": [d.isoformat() for d in dates],
            "shift_codes": [{"code": c.value, "label": c.label, "hours": c.hours} for c in ShiftCode.ordered()],
            "assignments": assignments,
        }

    def assign(self, *, current_role: Role, day: date, shift_code: str, seller_id: Optional[str]) -> None:
        require_role(current_role, Role.ADMIN)
        code = parse_shift_code(shift_code)
        if code == ShiftCode.SUNDAY_EXTRA and day.weekday() != 6:
            raise ValidationError("SUNDAY_EXTRA_ONLY_ON_SUNDAY")

        seller = (seller_id or "").strip() or None
        if seller:
            profile = self._profiles.get(seller)
            if not profile or profile.role != Role.SELLER or not profile.active:
                raise ValidationError("INVALID_SELLER")

        self._shifts.upsert(day=day, shift_code=code, seller_id=seller)
        log.info("shift %s %s assigned to %s", day, code.value, seller or "nobody")

    def copy_week(self, *, current_role: Role, monday: date) -> int:
        require_role(current_role, Role.ADMIN)
        start = week_start(monday)
        source = [s for s in self._shifts.list_range(start, start + timedelta(days=6)) if s.seller_id]
        if not source:
            raise ValidationError("NOTHING_TO_COPY")

        copied = self._shifts.upsert_many(
            [ShiftSlot(day=s.day + timedelta(days=7), shift_code=s.shift_code, seller_id=s.seller_id) for s in source]
        )
        log.info("copied %s shifts from week %s", copied, start)
        return copied

    def supervisor_plan(self, *, current_role: Role, day: date, now: Optional[datetime] = None) -> dict:
        require_role(current_role, Role.SUPERVISOR, Role.ADMIN)
        plan = self.week(day=day)
        monday = week_start(day)
        sunday = monday + timedelta(days=6)
        today = today_local(now)

        absences = self._absences.list(
            statuses=[RequestStatus.PENDING, RequestStatus.APPROVED], start=monday, end=sunday
        )
        checkins = self._checkins.list_range(monday, sunday)
        names = self._profiles.names_by_ids([a.seller_id for a in absences] + [c.seller_id for c in checkins])

        absences_by_date: dict[str, list] = defaultdict(list)
        for a in absences:
            item = a.to_dict()
            item["full_name"] = names.get(a.seller_id, "-")
            absences_by_date[a.day.isoformat()].append(item)

        checkins_week = []
        for c in checkins:
            item = c.to_dict()
            item["full_name"] = names.get(c.seller_id, "-")
            checkins_week.append(item)

        today_iso = today.isoformat()
        plan.update(
            absences=dict(absences_by_date),
            checkins_week=checkins_week,
            checkins_today=[c for c in checkins_week if c["day"] == today_iso],
            absences_week=[a for items in absences_by_date.values() for a in items],
            absences_today=list(absences_by_date.get(today_iso, [])),
        )
        return plan

    def hours_by_range(self, *, current_role: Role, start: date, end: date) -> list[dict]:
        require_role(current_role, Role.ADMIN)
        if end < start:
            raise ValidationError("END_BEFORE_START")

        by_seller: dict[str, list[ShiftSlot]] = defaultdict(list)
        for s in self._shifts.list_range(start, end):
            if s.seller_id:
                by_seller[s.seller_id].append(s)
        names = self._profiles.names_by_ids(by_seller.keys())

        rows = [
            {
                "seller_id": seller_id,
                "full_name": names.get(seller_id, "-"),
                "hours": self._calculator.total_hours(slots),
                "shifts": len(slots),
            }
            for seller_id, slots in by_seller.items()
        ]
        rows.sort(key=lambda r: (r["full_name"] or "").lower())
        return rows
