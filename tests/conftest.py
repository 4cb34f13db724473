from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from types import SimpleNamespace
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from shiftdesk.absences.model import Absence
from shiftdesk.auth.model import AuthUser
from shiftdesk.checkins.model import DailyCheckin
from shiftdesk.container import assemble
from shiftdesk.core.enums import AdminHoursStatus, InterestStatus, RequestStatus, Role, SellerHoursStatus, ShiftCode
from shiftdesk.core.exceptions import AuthenticationError, ValidationError
from shiftdesk.hours.model import MonthlyAttestation
from shiftdesk.leaves.model import Leave
from shiftdesk.replacements.model import ReplacementInterest
from shiftdesk.shifts.model import ShiftSlot
from shiftdesk.users.model import Profile

PARIS = ZoneInfo("Europe/Paris")

ADMIN_ID = "u-admin"
ALICE = "u-alice"
BOB = "u-bob"
CHLOE = "u-chloe"
SUPERVISOR_ID = "u-sup"


class InMemoryProfiles:
    def __init__(self):
        self.rows: dict[str, Profile] = {}
        self.fail_upsert = False

    def add(self, user_id: str, full_name: str, role: Role = Role.SELLER, active: bool = True) -> Profile:
        self.rows[user_id] = Profile(user_id=user_id, full_name=full_name, role=role, active=active)
        return self.rows[user_id]

    def get(self, user_id):
        return self.rows.get(user_id)

    def list_by_roles(self, roles, *, active_only=False):
        out = [p for p in self.rows.values() if p.role in roles and (p.active or not active_only)]
        return sorted(out, key=lambda p: p.full_name or "")

    def names_by_ids(self, user_ids):
        return {u: (self.rows[u].full_name or "-") for u in set(user_ids) if u in self.rows}

    def upsert(self, *, user_id, full_name, role, active=True):
        if self.fail_upsert:
            raise RuntimeError("insert failed")
        self.add(user_id, full_name, role, active)

    def update(self, user_id, *, full_name=None, active=None):
        p = self.rows.get(user_id)
        if not p:
            return False
        self.rows[user_id] = replace(
            p,
            full_name=p.full_name if full_name is None else full_name,
            active=p.active if active is None else active,
        )
        return True


class InMemoryShifts:
    def __init__(self):
        self.slots: dict[tuple[date, ShiftCode], Optional[str]] = {}
        self.steal_before_cas: Optional[str] = None

    def upsert(self, *, day, shift_code, seller_id):
        self.slots[(day, shift_code)] = seller_id

    def upsert_many(self, slots):
        for s in slots:
            self.slots[(s.day, s.shift_code)] = s.seller_id
        return len(slots)

    def list_range(self, start, end, *, seller_id=None):
        out = [
            ShiftSlot(day=d, shift_code=c, seller_id=s)
            for (d, c), s in self.slots.items()
            if start <= d <= end and (seller_id is None or s == seller_id)
        ]
        return sorted(out, key=lambda s: (s.day, s.shift_code.sort_order))

    def reassign_if(self, *, day, shift_code, expected_seller_id, new_seller_id):
        if self.steal_before_cas:
            # simulate a concurrent request winning the slot first
            self.slots[(day, shift_code)] = self.steal_before_cas
            self.steal_before_cas = None
        if self.slots.get((day, shift_code)) != expected_seller_id:
            return False
        self.slots[(day, shift_code)] = new_seller_id
        return True


class InMemoryAbsences:
    def __init__(self):
        self.rows: dict[int, Absence] = {}
        self._next_id = 1

    def create(self, *, seller_id, day, reason, status=RequestStatus.PENDING, admin_forced=False):
        aid = self._next_id
        self._next_id += 1
        self.rows[aid] = Absence(
            absence_id=aid, seller_id=seller_id, day=day, status=status, reason=reason, admin_forced=admin_forced
        )
        return aid

    def get(self, absence_id):
        return self.rows.get(int(absence_id))

    def list(self, *, seller_id=None, statuses=None, start=None, end=None):
        out = [
            a
            for a in self.rows.values()
            if (seller_id is None or a.seller_id == seller_id)
            and (not statuses or a.status in statuses)
            and (start is None or a.day >= start)
            and (end is None or a.day <= end)
        ]
        return sorted(out, key=lambda a: (a.day, a.absence_id))

    def decide(self, absence_id, *, status, expected=RequestStatus.PENDING):
        a = self.rows.get(int(absence_id))
        if not a or a.status != expected:
            return False
        self.rows[a.absence_id] = replace(a, status=status)
        return True

    def delete_many(self, absence_ids):
        count = 0
        for i in absence_ids:
            if self.rows.pop(int(i), None):
                count += 1
        return count


class InMemoryReplacements:
    def __init__(self):
        self.rows: dict[int, ReplacementInterest] = {}
        self._next_id = 1

    def create(self, *, absence_id, volunteer_id):
        iid = self._next_id
        self._next_id += 1
        self.rows[iid] = ReplacementInterest(
            interest_id=iid, absence_id=absence_id, volunteer_id=volunteer_id, status=InterestStatus.PENDING
        )
        return iid

    def get(self, interest_id):
        return self.rows.get(int(interest_id))

    def list_for_absences(self, absence_ids):
        ids = set(absence_ids)
        return [i for i in self.rows.values() if i.absence_id in ids]

    def accept(self, *, absence_id, volunteer_id, shift_code):
        if any(
            i.absence_id == absence_id and i.status == InterestStatus.ACCEPTED and i.volunteer_id != volunteer_id
            for i in self.rows.values()
        ):
            return False
        for i in self.rows.values():
            if i.absence_id == absence_id and i.volunteer_id == volunteer_id:
                self.rows[i.interest_id] = replace(i, status=InterestStatus.ACCEPTED, accepted_shift_code=shift_code)
                return True
        iid = self.create(absence_id=absence_id, volunteer_id=volunteer_id)
        self.rows[iid] = replace(self.rows[iid], status=InterestStatus.ACCEPTED, accepted_shift_code=shift_code)
        return True

    def decline(self, interest_id):
        i = self.rows.get(int(interest_id))
        if not i or i.status != InterestStatus.PENDING:
            return False
        self.rows[i.interest_id] = replace(i, status=InterestStatus.DECLINED)
        return True

    def decline_others(self, *, absence_id, keep_interest_id):
        count = 0
        for i in list(self.rows.values()):
            if i.absence_id == absence_id and i.interest_id != keep_interest_id and i.status == InterestStatus.PENDING:
                self.rows[i.interest_id] = replace(i, status=InterestStatus.DECLINED)
                count += 1
        return count

    def delete_for_absences(self, absence_ids):
        ids = set(absence_ids)
        doomed = [k for k, i in self.rows.items() if i.absence_id in ids]
        for k in doomed:
            del self.rows[k]
        return len(doomed)


class InMemoryLeaves:
    def __init__(self):
        self.rows: dict[int, Leave] = {}
        self._next_id = 1

    def create(self, *, seller_id, start_date, end_date, reason, status=RequestStatus.PENDING):
        lid = self._next_id
        self._next_id += 1
        self.rows[lid] = Leave(
            leave_id=lid, seller_id=seller_id, start_date=start_date, end_date=end_date, status=status, reason=reason
        )
        return lid

    def get(self, leave_id):
        return self.rows.get(int(leave_id))

    def list(self, *, seller_id=None, statuses=None, overlap_start=None, overlap_end=None):
        out = [
            lv
            for lv in self.rows.values()
            if (seller_id is None or lv.seller_id == seller_id)
            and (not statuses or lv.status in statuses)
            and (overlap_start is None or lv.end_date >= overlap_start)
            and (overlap_end is None or lv.start_date <= overlap_end)
        ]
        return sorted(out, key=lambda lv: lv.start_date, reverse=True)

    def decide(self, leave_id, *, status, expected=RequestStatus.PENDING):
        lv = self.rows.get(int(leave_id))
        if not lv or lv.status != expected:
            return False
        self.rows[lv.leave_id] = replace(lv, status=status)
        return True

    def delete(self, leave_id):
        return self.rows.pop(int(leave_id), None) is not None


class InMemoryBalances:
    def __init__(self):
        self.rows = {}

    def get(self, seller_id):
        return self.rows.get(seller_id)

    def list_all(self):
        return list(self.rows.values())

    def upsert(self, balance):
        self.rows[balance.seller_id] = balance


class InMemoryCheckins:
    def __init__(self):
        self.rows: dict[tuple[date, str], DailyCheckin] = {}

    def get(self, *, day, seller_id):
        return self.rows.get((day, seller_id))

    def upsert_issued(self, *, day, seller_id, shift_code, code_hash, issued_by, issued_at):
        self.rows[(day, seller_id)] = DailyCheckin(
            day=day,
            seller_id=seller_id,
            shift_code=shift_code,
            code_hash=code_hash,
            issued_at=issued_at,
            issued_by=issued_by,
        )

    def confirm(self, *, day, seller_id, confirmed_at, late_minutes, early_minutes):
        row = self.rows.get((day, seller_id))
        if not row or row.confirmed_at is not None:
            return False
        self.rows[(day, seller_id)] = replace(
            row, confirmed_at=confirmed_at, late_minutes=late_minutes, early_minutes=early_minutes
        )
        return True

    def list_range(self, start, end, *, seller_id=None):
        return [
            r
            for (d, s), r in sorted(self.rows.items())
            if start <= d <= end and (seller_id is None or s == seller_id)
        ]


class InMemoryAttestations:
    def __init__(self):
        self.rows: dict[int, MonthlyAttestation] = {}
        self._next_id = 1

    def get(self, attestation_id):
        return self.rows.get(int(attestation_id))

    def get_for(self, *, seller_id, month_start):
        for r in self.rows.values():
            if r.seller_id == seller_id and r.month_start == month_start:
                return r
        return None

    def list(self, *, month_start=None, seller_id=None):
        return [
            r
            for r in self.rows.values()
            if (month_start is None or r.month_start == month_start) and (seller_id is None or r.seller_id == seller_id)
        ]

    def insert(self, *, seller_id, month_start, computed_hours):
        aid = self._next_id
        self._next_id += 1
        self.rows[aid] = MonthlyAttestation(
            attestation_id=aid, seller_id=seller_id, month_start=month_start, computed_hours=computed_hours
        )
        return aid

    def update_computed(self, attestation_id, *, computed_hours):
        r = self.rows.get(attestation_id)
        if not r or r.admin_status == AdminHoursStatus.APPROVED:
            return False
        self.rows[attestation_id] = replace(
            r,
            computed_hours=computed_hours,
            seller_status=SellerHoursStatus.PENDING,
            seller_correction_hours=None,
            admin_status=AdminHoursStatus.PENDING,
            final_hours=None,
        )
        return True

    def respond(self, attestation_id, *, seller_status, correction_hours, comment):
        r = self.rows.get(attestation_id)
        if not r or r.admin_status == AdminHoursStatus.APPROVED:
            return False
        self.rows[attestation_id] = replace(
            r,
            seller_status=seller_status,
            seller_correction_hours=correction_hours,
            seller_comment=comment,
            admin_status=AdminHoursStatus.PENDING,
        )
        return True

    def decide(self, attestation_id, *, admin_status, comment, final_hours):
        r = self.rows.get(attestation_id)
        if not r or r.admin_status != AdminHoursStatus.PENDING:
            return False
        self.rows[attestation_id] = replace(r, admin_status=admin_status, admin_comment=comment, final_hours=final_hours)
        return True


class InMemoryPushSubscriptions:
    def __init__(self):
        self.rows = {}

    def upsert(self, subscription):
        self.rows[subscription.endpoint] = subscription

    def delete(self, endpoint):
        return 1 if self.rows.pop(endpoint, None) else 0

    def list_by_role(self, role):
        return [s for s in self.rows.values() if s.role == role]


class FakeAuthGateway:
    def __init__(self):
        self.users: dict[str, dict] = {}
        self.tokens: dict[str, str] = {}
        self.deleted: list[str] = []
        self.updates: list[tuple] = []
        self._next_id = 1

    def add_user(self, user_id: str, email: str, password: str = "secret1", token: Optional[str] = None):
        self.users[user_id] = {"email": email, "password": password}
        if token:
            self.tokens[token] = user_id

    def get_user(self, token):
        uid = self.tokens.get(token)
        if uid is None:
            raise AuthenticationError("Invalid token")
        return AuthUser(user_id=uid, email=self.users[uid]["email"])

    def sign_in(self, email, password):
        return any(u["email"] == email and u["password"] == password for u in self.users.values())

    def admin_create_user(self, *, email, password, full_name=None):
        if any(u["email"] == email for u in self.users.values()):
            raise ValidationError("A user with this email address has already been registered")
        uid = f"u-new-{self._next_id}"
        self._next_id += 1
        self.add_user(uid, email, password)
        return AuthUser(user_id=uid, email=email)

    def admin_get_user(self, user_id):
        u = self.users.get(user_id)
        return AuthUser(user_id=user_id, email=u["email"]) if u else None

    def admin_list_users(self):
        return [AuthUser(user_id=k, email=v["email"], last_sign_in_at="2026-03-01T08:00:00Z") for k, v in self.users.items()]

    def admin_update_user(self, user_id, *, email=None, password=None):
        self.updates.append((user_id, email, password))
        if email:
            self.users[user_id]["email"] = email
        if password:
            self.users[user_id]["password"] = password

    def admin_delete_user(self, user_id):
        self.deleted.append(user_id)
        self.users.pop(user_id, None)


class FakePushSender:
    def __init__(self):
        self.failures: dict[str, int] = {}
        self.sent: list[tuple] = []

    def send(self, subscription, message):
        status = self.failures.get(subscription.endpoint)
        if status is not None:
            return status
        self.sent.append((subscription.endpoint, message.payload()))
        return None


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday, 07:10 in Paris
    return datetime(2026, 3, 4, 7, 10, tzinfo=PARIS)


@pytest.fixture
def repos():
    profiles = InMemoryProfiles()
    profiles.add(ADMIN_ID, "Patronne", Role.ADMIN)
    profiles.add(ALICE, "Alice")
    profiles.add(BOB, "Bob")
    profiles.add(CHLOE, "Chloé")
    profiles.add(SUPERVISOR_ID, "Tablette", Role.SUPERVISOR)

    gateway = FakeAuthGateway()
    gateway.add_user(ADMIN_ID, "boss@example.com", token="tok-admin")
    gateway.add_user(ALICE, "alice@example.com", password="alice-pw", token="tok-alice")
    gateway.add_user(BOB, "bob@example.com", password="bob-pw", token="tok-bob")
    gateway.add_user(CHLOE, "chloe@example.com", token="tok-chloe")
    gateway.add_user(SUPERVISOR_ID, "tablette@example.com", token="tok-sup")

    return SimpleNamespace(
        gateway=gateway,
        profiles=profiles,
        shifts=InMemoryShifts(),
        absences=InMemoryAbsences(),
        replacements=InMemoryReplacements(),
        leaves=InMemoryLeaves(),
        balances=InMemoryBalances(),
        checkins=InMemoryCheckins(),
        attestations=InMemoryAttestations(),
        push_subscriptions=InMemoryPushSubscriptions(),
        push_sender=FakePushSender(),
    )


@pytest.fixture
def container(repos):
    return assemble(
        gateway=repos.gateway,
        profiles=repos.profiles,
        shifts=repos.shifts,
        absences=repos.absences,
        replacements=repos.replacements,
        leaves=repos.leaves,
        balances=repos.balances,
        checkins=repos.checkins,
        attestations=repos.attestations,
        push_subscriptions=repos.push_subscriptions,
        push_sender=repos.push_sender,
        admin_emails=["boss@example.com"],
        checkin_secret="test-pepper",
        cron_secret="test-cron",
        vapid_public_key="BPUBLIC",
    )


@pytest.fixture
def client(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from shiftdesk.main import create_app

    app = create_app(container)
    return app.test_client()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth
