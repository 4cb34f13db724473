from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..auth.service import require_role
from ..common.datetime_utils import today_local
from ..common.validators import clean_reason, require_non_empty
from ..core.constants import ADMIN_FORCED_ABSENCE_REASON
from ..core.enums import InterestStatus, RequestStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..replacements.repository import ReplacementRepository
from ..users.repository import ProfileRepository
from .repository import AbsenceRepository

log = logging.getLogger(__name__)

_OPEN_STATUSES = [RequestStatus.PENDING, RequestStatus.APPROVED]


def parse_status(value: Optional[str]) -> Optional[RequestStatus]:
    v = (value or "").strip().lower()
    if not v:
        return None
    try:
        return RequestStatus(v)
    except ValueError:
        raise ValidationError("Invalid status")


class AbsenceService:
    """One-day absences: seller requests, admin decisions and admin-forced no-shows."""

    def __init__(
        self,
        absences: AbsenceRepository,
        replacements: ReplacementRepository,
        profiles: ProfileRepository,
        notifications=None,
    ):
        self._absences = absences
        self._replacements = replacements
        self._profiles = profiles
        self._notifications = notifications

    def request_absence(
        self,
        *,
        current_role: Role,
        seller_id: str,
        day: date,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        require_role(current_role, Role.SELLER)
        if day < today_local(now):
            raise ValidationError("DATE_IN_PAST")
        if self._absences.list(seller_id=seller_id, statuses=_OPEN_STATUSES, start=day, end=day):
            raise ConflictError("ALREADY_REQUESTED")

        absence_id = self._absences.create(seller_id=seller_id, day=day, reason=clean_reason(reason))
        log.info("absence %s requested by %s for %s", absence_id, seller_id, day)

        if self._notifications is not None:
            name = self._profiles.names_by_ids([seller_id]).get(seller_id, "Vendeuse")
            self._notifications.notify_role(
                Role.ADMIN, title="Nouvelle absence", body=f"{name} - {day.strftime('%d/%m/%Y')}"
            )
        return absence_id

    def list_mine(self, *, seller_id: str, start: Optional[date] = None, end: Optional[date] = None) -> list[dict]:
        return [a.to_dict() for a in self._absences.list(seller_id=seller_id, start=start, end=end)]

    def cancel_mine(self, *, current_role: Role, seller_id: str, day: date, now: Optional[datetime] = None) -> dict:
        require_role(current_role, Role.SELLER)
        if day < today_local(now):
            raise ValidationError("DATE_IN_PAST")

        rows = self._absences.list(seller_id=seller_id, start=day, end=day)
        if not rows:
            raise NotFoundError("NO_ABSENCE")
        if any(a.admin_forced for a in rows):
            raise AuthorizationError("ADMIN_FORCED")

        ids = [a.absence_id for a in rows]
        interests = self._replacements.list_for_absences(ids)
        if any(i.status == InterestStatus.ACCEPTED for i in interests):
            raise ConflictError("REPLACEMENT_ACCEPTED")

        replacements_deleted = self._replacements.delete_for_absences(ids)
        absences_deleted = self._absences.delete_many(ids)
        log.info("seller %s cancelled %s absence(s) on %s", seller_id, absences_deleted, day)
        return {"absencesDeleted": absences_deleted, "replacementsDeleted": replacements_deleted}

    def list_for_admin(
        self,
        *,
        current_role: Role,
        status: Optional[RequestStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[dict]:
        require_role(current_role, Role.ADMIN)
        rows = self._absences.list(statuses=[status] if status else None, start=start, end=end)
        names = self._profiles.names_by_ids(a.seller_id for a in rows)
        out = []
        for a in rows:
            item = a.to_dict()
            item["full_name"] = names.get(a.seller_id, "-")
            out.append(item)
        return out

    def _decide(self, absence_id: int, status: RequestStatus) -> None:
        if self._absences.decide(absence_id, status=status):
            log.info("absence %s %s", absence_id, status.value)
            return
        if self._absences.get(absence_id) is None:
            raise NotFoundError("Absence not found")
        raise ConflictError("ALREADY_DECIDED")

    def approve(self, *, current_role: Role, absence_id: int) -> None:
        require_role(current_role, Role.ADMIN)
        self._decide(absence_id, RequestStatus.APPROVED)

    def reject(self, *, current_role: Role, absence_id: int) -> None:
        require_role(current_role, Role.ADMIN)
        self._decide(absence_id, RequestStatus.REJECTED)

    def mark_absent(self, *, current_role: Role, seller_id: str, day: date) -> int:
        """Record an undeclared absence; the seller cannot cancel it."""
        require_role(current_role, Role.ADMIN)
        sid = require_non_empty(seller_id, "seller_id")
        if self._profiles.get(sid) is None:
            raise NotFoundError("Seller not found")
        if self._absences.list(seller_id=sid, statuses=_OPEN_STATUSES, start=day, end=day):
            raise ConflictError("ALREADY_ABSENT")
        return self._absences.create(
            seller_id=sid,
            day=day,
            reason=ADMIN_FORCED_ABSENCE_REASON,
            status=RequestStatus.APPROVED,
            admin_forced=True,
        )

    def unmark_absent(self, *, current_role: Role, seller_id: str, day: date) -> dict:
        require_role(current_role, Role.ADMIN)
        sid = require_non_empty(seller_id, "seller_id")
        ids = [a.absence_id for a in self._absences.list(seller_id=sid, start=day, end=day) if a.admin_forced]
        if not ids:
            raise NotFoundError("NO_ABSENCE")
        replacements_deleted = self._replacements.delete_for_absences(ids)
        absences_deleted = self._absences.delete_many(ids)
        return {"absencesDeleted": absences_deleted, "replacementsDeleted": replacements_deleted}
