from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..absences.model import Absence
from ..absences.repository import AbsenceRepository
from ..auth.service import require_role
from ..common.datetime_utils import today_local
from ..core.enums import InterestStatus, RequestStatus, Role, ShiftCode
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..shifts.repository import ShiftRepository
from ..shifts.service import parse_shift_code
from ..users.repository import ProfileRepository
from .repository import ReplacementRepository

log = logging.getLogger(__name__)


class ReplacementService:
    """Match volunteers to absences and move the shift slot with a compare-and-swap."""

    def __init__(
        self,
        replacements: ReplacementRepository,
        absences: AbsenceRepository,
        shifts: ShiftRepository,
        profiles: ProfileRepository,
    ):
        self._replacements = replacements
        self._absences = absences
        self._shifts = shifts
        self._profiles = profiles

    def _codes_held(self, day: date, seller_id: str) -> list[ShiftCode]:
        slots = self._shifts.list_range(day, day, seller_id=seller_id)
        return sorted({s.shift_code for s in slots}, key=lambda c: c.sort_order)

    def _get_absence(self, absence_id: int) -> Absence:
        absence = self._absences.get(absence_id)
        if absence is None:
            raise NotFoundError("ABSENCE_NOT_FOUND")
        return absence

    def _has_accepted(self, absence_id: int) -> bool:
        return any(i.status == InterestStatus.ACCEPTED for i in self._replacements.list_for_absences([absence_id]))

    def _move_slot(self, *, absence: Absence, code: ShiftCode, volunteer_id: str) -> None:
        if not self._shifts.reassign_if(
            day=absence.day, shift_code=code, expected_seller_id=absence.seller_id, new_seller_id=volunteer_id
        ):
            raise ConflictError("ALREADY_TAKEN")
        if not self._replacements.accept(absence_id=absence.absence_id, volunteer_id=volunteer_id, shift_code=code):
            # another volunteer won the absence in between: give the slot back
            self._shifts.reassign_if(
                day=absence.day, shift_code=code, expected_seller_id=volunteer_id, new_seller_id=absence.seller_id
            )
            raise ConflictError("ALREADY_TAKEN")
        log.info("absence %s: %s %s now held by %s", absence.absence_id, absence.day, code.value, volunteer_id)

    def volunteer(self, *, current_role: Role, volunteer_id: str, absence_id: int, now: Optional[datetime] = None) -> int:
        require_role(current_role, Role.SELLER)
        absence = self._get_absence(absence_id)
        if absence.status not in (RequestStatus.PENDING, RequestStatus.APPROVED):
            raise ValidationError("NOT_OPEN")
        if absence.day < today_local(now):
            raise ValidationError("DATE_IN_PAST")
        if absence.seller_id == volunteer_id:
            raise ValidationError("CANNOT_REPLACE_SELF")

        interests = self._replacements.list_for_absences([absence.absence_id])
        if any(i.status == InterestStatus.ACCEPTED for i in interests):
            raise ConflictError("ALREADY_TAKEN")
        if any(i.volunteer_id == volunteer_id for i in interests):
            raise ConflictError("ALREADY_VOLUNTEERED")

        return self._replacements.create(absence_id=absence.absence_id, volunteer_id=volunteer_id)

    def open_slots(self, *, viewer_id: str, start: date, end: date) -> list[dict]:
        """Approved absences of other sellers whose shifts still need a replacement."""
        if end < start:
            raise ValidationError("END_BEFORE_START")
        absences = [
            a
            for a in self._absences.list(statuses=[RequestStatus.APPROVED], start=start, end=end)
            if a.seller_id != viewer_id
        ]
        if not absences:
            return []

        held: dict[tuple[date, str], list[ShiftCode]] = {}
        for s in self._shifts.list_range(start, end):
            if s.seller_id:
                held.setdefault((s.day, s.seller_id), []).append(s.shift_code)

        taken = {
            (i.absence_id, i.accepted_shift_code)
            for i in self._replacements.list_for_absences([a.absence_id for a in absences])
            if i.status == InterestStatus.ACCEPTED
        }
        names = self._profiles.names_by_ids(a.seller_id for a in absences)

        items = []
        for a in absences:
            for code in held.get((a.day, a.seller_id), []):
                if (a.absence_id, code) in taken:
                    continue
                items.append(
                    {
                        "absence_id": a.absence_id,
                        "date": a.day.isoformat(),
                        "shift_code": code.value,
                        "absent_id": a.seller_id,
                        "absent_name": names.get(a.seller_id, "-"),
                    }
                )
        items.sort(key=lambda it: (it["date"], ShiftCode(it["shift_code"]).sort_order))
        return items

    def accept(self, *, current_role: Role, volunteer_id: str, absence_id: int) -> dict:
        """Self-service acceptance; first volunteer to win the shift CAS keeps it."""
        require_role(current_role, Role.SELLER)
        absence = self._get_absence(absence_id)
        if absence.status != RequestStatus.APPROVED:
            raise ValidationError("NOT_APPROVED")
        if absence.seller_id == volunteer_id:
            raise ValidationError("CANNOT_REPLACE_SELF")

        absent_codes = self._codes_held(absence.day, absence.seller_id)
        if not absent_codes:
            raise ValidationError("NO_SHIFT_TO_REPLACE")
        if self._has_accepted(absence.absence_id):
            raise ConflictError("ALREADY_TAKEN")

        own_codes = self._codes_held(absence.day, volunteer_id)
        code = absent_codes[0]
        self._move_slot(absence=absence, code=code, volunteer_id=volunteer_id)

        return {
            "shift_code": code.value,
            "date": absence.day.isoformat(),
            "extra_shift": bool(own_codes),
            "your_shift_code": own_codes[0].value if own_codes else None,
        }

    def list_pending_for_admin(self, *, current_role: Role, start: date) -> list[dict]:
        require_role(current_role, Role.ADMIN)
        absences = {
            a.absence_id: a
            for a in self._absences.list(statuses=[RequestStatus.PENDING, RequestStatus.APPROVED], start=start)
        }
        interests = [
            i
            for i in self._replacements.list_for_absences(list(absences.keys()))
            if i.status == InterestStatus.PENDING
        ]
        names = self._profiles.names_by_ids(
            [absences[i.absence_id].seller_id for i in interests] + [i.volunteer_id for i in interests]
        )

        items = []
        for i in interests:
            a = absences[i.absence_id]
            items.append(
                {
                    "id": i.interest_id,
                    "absence_id": a.absence_id,
                    "date": a.day.isoformat(),
                    "absence_status": a.status.value,
                    "absent_id": a.seller_id,
                    "absent_name": names.get(a.seller_id, "-"),
                    "volunteer_id": i.volunteer_id,
                    "volunteer_name": names.get(i.volunteer_id, "-"),
                    "shift_codes": [c.value for c in self._codes_held(a.day, a.seller_id)],
                }
            )
        items.sort(key=lambda it: (it["date"], it["id"]))
        return items

    def assign(self, *, current_role: Role, interest_id: int, shift_code: Optional[str] = None) -> dict:
        """Admin picks a volunteer: move the slot, decline the others, approve the absence."""
        require_role(current_role, Role.ADMIN)
        interest = self._replacements.get(interest_id)
        if interest is None:
            raise NotFoundError("Interest not found")
        if interest.status == InterestStatus.DECLINED:
            raise ValidationError("INTEREST_DECLINED")

        absence = self._get_absence(interest.absence_id)
        if absence.status == RequestStatus.REJECTED:
            raise ValidationError("NOT_OPEN")
        if self._has_accepted(absence.absence_id):
            raise ConflictError("ALREADY_TAKEN")

        absent_codes = self._codes_held(absence.day, absence.seller_id)
        code = parse_shift_code(shift_code) if shift_code else (absent_codes[0] if absent_codes else None)
        if code is None or code not in absent_codes:
            raise ValidationError("NO_SHIFT_TO_REPLACE")

        self._move_slot(absence=absence, code=code, volunteer_id=interest.volunteer_id)
        declined = self._replacements.decline_others(absence_id=absence.absence_id, keep_interest_id=interest.interest_id)

        approved = False
        if absence.status == RequestStatus.PENDING:
            approved = self._absences.decide(absence.absence_id, status=RequestStatus.APPROVED)

        return {
            "shift_code": code.value,
            "date": absence.day.isoformat(),
            "volunteer_id": interest.volunteer_id,
            "declined": declined,
            "absence_approved": approved,
        }

    def decline(self, *, current_role: Role, interest_id: int) -> None:
        require_role(current_role, Role.ADMIN)
        if self._replacements.decline(interest_id):
            return
        if self._replacements.get(interest_id) is None:
            raise NotFoundError("Interest not found")
        raise ConflictError("ALREADY_DECIDED")
