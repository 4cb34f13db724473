from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from ..absences.repository import AbsenceRepository
from ..auth.service import require_role
from ..common.datetime_utils import (
    business_tz,
    format_minutes,
    minutes_of_day,
    month_end,
    month_start,
    now_local,
    to_local,
)
from ..common.validators import require_non_empty
from ..core.constants import (
    CHECKIN_OPENS_BEFORE_MINUTES,
    MAX_EARLY_MINUTES,
    MAX_LATE_MINUTES,
    MISSING_CHECKIN_AFTER_MINUTES,
)
from ..core.enums import RequestStatus, Role, ShiftCode
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, UpstreamError, ValidationError
from ..leaves.repository import LeaveRepository
from ..shifts.repository import ShiftRepository
from ..users.repository import ProfileRepository
from .codes import generate_code, hash_code, is_valid_format, verify_code
from .factory import CheckinWindowFactory
from .model import DailyCheckin
from .repository import CheckinRepository
from .strategies.base import TimingDecision

log = logging.getLogger(__name__)


def planned_minutes(code: ShiftCode) -> int:
    return minutes_of_day(code.planned_start)


class CheckinService:
    """Daily attendance codes issued by the supervisor device and confirmed by sellers."""

    def __init__(
        self,
        checkins: CheckinRepository,
        shifts: ShiftRepository,
        absences: AbsenceRepository,
        leaves: LeaveRepository,
        profiles: ProfileRepository,
        gateway,
        *,
        window_factory: CheckinWindowFactory,
        secret: str,
    ):
        self._checkins = checkins
        self._shifts = shifts
        self._absences = absences
        self._leaves = leaves
        self._profiles = profiles
        self._gateway = gateway
        self._window_factory = window_factory
        self._secret = secret

    def _require_secret(self) -> str:
        if not self._secret:
            raise UpstreamError("MISSING_CHECKIN_SECRET")
        return self._secret

    def _scheduled_codes(self, day: date, seller_id: str) -> list[ShiftCode]:
        slots = self._shifts.list_range(day, day, seller_id=seller_id)
        return sorted({s.shift_code for s in slots}, key=lambda c: c.sort_order)

    def _decide(self, moment: datetime, code: ShiftCode) -> TimingDecision:
        delta = minutes_of_day(to_local(moment)) - planned_minutes(code)
        return self._window_factory.for_delta(delta).decide(delta_minutes=delta, shift_code=code)

    @staticmethod
    def _opens_at(code: ShiftCode) -> str:
        return format_minutes(planned_minutes(code) - CHECKIN_OPENS_BEFORE_MINUTES)

    def _effective_deltas(self, row: DailyCheckin) -> tuple[int, int]:
        """Stored deltas, recomputed from confirmed_at when missing or out of range."""
        if row.confirmed_at is None:
            return 0, 0
        late, early = row.late_minutes, row.early_minutes
        in_range = 0 <= late <= MAX_LATE_MINUTES and 0 <= early <= MAX_EARLY_MINUTES
        if in_range and (late or early):
            return late, early
        if row.shift_code is None:
            return (late, early) if in_range else (0, 0)
        decision = self._decide(row.confirmed_at, row.shift_code)
        return decision.late_minutes, decision.early_minutes

    def issue_code(
        self,
        *,
        current_role: Role,
        issuer_id: str,
        seller_id: str,
        password: str,
        now: Optional[datetime] = None,
    ) -> dict:
        require_role(current_role, Role.SUPERVISOR, Role.ADMIN)
        secret = self._require_secret()
        sid = require_non_empty(seller_id, "seller_id")
        if not password:
            raise ValidationError("password is required")

        auth_user = self._gateway.admin_get_user(sid)
        if auth_user is None or not auth_user.email:
            raise NotFoundError("Seller not found")
        if not self._gateway.sign_in(auth_user.email, password):
            raise AuthorizationError("BAD_PASSWORD")

        now = now or now_local()
        day = now.date()
        codes = self._scheduled_codes(day, sid)
        if not codes:
            raise AuthorizationError("NOT_SCHEDULED_TODAY")
        shift_code = codes[0]

        decision = self._decide(now, shift_code)
        if decision.too_early:
            raise ConflictError("TOO_EARLY", opens_at=self._opens_at(shift_code))

        existing = self._checkins.get(day=day, seller_id=sid)
        if existing is not None and existing.confirmed:
            raise ConflictError("ALREADY_CONFIRMED")

        code = generate_code()
        self._checkins.upsert_issued(
            day=day,
            seller_id=sid,
            shift_code=shift_code,
            code_hash=hash_code(code, secret),
            issued_by=issuer_id,
            issued_at=now,
        )
        log.info("check-in code issued for %s on %s by %s", sid, day, issuer_id)
        return {
            "code": code,
            "day": day.isoformat(),
            "shift_code": shift_code.value,
            "late_minutes": decision.late_minutes,
            "early_minutes": decision.early_minutes,
        }

    def confirm(
        self,
        *,
        current_role: Role,
        seller_id: str,
        code: str,
        day: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        require_role(current_role, Role.SELLER)
        secret = self._require_secret()
        code = (code or "").strip()
        if not is_valid_format(code):
            raise ValidationError("BAD_CODE_FORMAT")

        now = now or now_local()
        today = now.date()
        if day is not None and day != today:
            raise ValidationError("CHECKIN_NOT_TODAY")

        row = self._checkins.get(day=today, seller_id=seller_id)
        if row is None or not row.code_hash:
            raise ValidationError("NO_CODE_ISSUED")
        if row.confirmed:
            late, early = self._effective_deltas(row)
            return {"already_confirmed": True, "late_minutes": late, "early_minutes": early}
        if not verify_code(code, secret, row.code_hash):
            log.warning("bad check-in code for %s on %s", seller_id, today)
            raise ValidationError("BAD_CODE")

        shift_code = row.shift_code
        if shift_code is None:
            codes = self._scheduled_codes(today, seller_id)
            if not codes:
                raise ValidationError("NOT_SCHEDULED_TODAY")
            shift_code = codes[0]

        decision = self._decide(now, shift_code)
        if decision.too_early:
            raise ValidationError("CHECKIN_TOO_EARLY", opens_at=self._opens_at(shift_code))

        if not self._checkins.confirm(
            day=today,
            seller_id=seller_id,
            confirmed_at=now,
            late_minutes=decision.late_minutes,
            early_minutes=decision.early_minutes,
        ):
            return {"already_confirmed": True, "late_minutes": 0, "early_minutes": 0}

        return {
            "already_confirmed": False,
            "shift_code": shift_code.value,
            "confirmed_at": now.isoformat(),
            "late_minutes": decision.late_minutes,
            "early_minutes": decision.early_minutes,
            "window_closed": decision.window_closed,
        }

    def status(self, *, seller_id: str, day: Optional[date] = None, now: Optional[datetime] = None) -> dict:
        day = day or (now or now_local()).date()
        codes = self._scheduled_codes(day, seller_id)
        row = self._checkins.get(day=day, seller_id=seller_id)
        late, early = self._effective_deltas(row) if row else (0, 0)

        month_delay = 0
        month_extra = 0
        for r in self._checkins.list_range(month_start(day), month_end(day), seller_id=seller_id):
            if not r.confirmed:
                continue
            d_late, d_early = self._effective_deltas(r)
            month_delay += d_late
            month_extra += d_early

        return {
            "day": day.isoformat(),
            "scheduled": [c.value for c in codes],
            "issued": bool(row and row.code_hash),
            "confirmed": bool(row and row.confirmed),
            "confirmed_at": row.confirmed_at.isoformat() if row and row.confirmed_at else None,
            "late_minutes": late,
            "early_minutes": early,
            "month_delay_minutes": month_delay,
            "month_extra_minutes": month_extra,
        }

    def missing(self, *, current_role: Role, day: Optional[date] = None, now: Optional[datetime] = None) -> list[dict]:
        """Scheduled sellers who have not confirmed an hour after their shift started."""
        require_role(current_role, Role.ADMIN)
        now = to_local(now or now_local())
        day = day or now.date()

        first_code: dict[str, ShiftCode] = {}
        for s in self._shifts.list_range(day, day):
            if not s.seller_id:
                continue
            current = first_code.get(s.seller_id)
            if current is None or s.shift_code.sort_order < current.sort_order:
                first_code[s.seller_id] = s.shift_code
        if not first_code:
            return []

        excluded = {a.seller_id for a in self._absences.list(statuses=[RequestStatus.APPROVED], start=day, end=day)}
        excluded |= {
            lv.seller_id
            for lv in self._leaves.list(statuses=[RequestStatus.APPROVED], overlap_start=day, overlap_end=day)
        }
        excluded |= {c.seller_id for c in self._checkins.list_range(day, day) if c.confirmed}

        names = self._profiles.names_by_ids(first_code.keys())
        items = []
        for seller_id, code in first_code.items():
            if seller_id in excluded:
                continue
            start = datetime.combine(day, code.planned_start, tzinfo=business_tz())
            since = int((now - start) // timedelta(minutes=1))
            if since < MISSING_CHECKIN_AFTER_MINUTES:
                continue
            items.append(
                {
                    "seller_id": seller_id,
                    "full_name": names.get(seller_id, "-"),
                    "shift_code": code.value,
                    "planned_start": code.planned_start.strftime("%H:%M"),
                    "minutes_since_start": since,
                }
            )
        items.sort(key=lambda it: it["minutes_since_start"], reverse=True)
        return items
