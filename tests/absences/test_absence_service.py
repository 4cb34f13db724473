from datetime import date

import pytest

from shiftdesk.core.enums import RequestStatus, Role
from shiftdesk.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from shiftdesk.notifications.model import PushSubscription


def test_request_absence_creates_pending_and_notifies_admins(container, repos, fixed_now):
    repos.push_subscriptions.upsert(PushSubscription(endpoint="https://push/a", p256dh="k", auth="a", role="admin"))

    absence_id = container.absence_service.request_absence(
        current_role=Role.SELLER, seller_id="u-alice", day=date(2026, 3, 5), reason="  rdv médecin ", now=fixed_now
    )

    absence = repos.absences.get(absence_id)
    assert absence.status == RequestStatus.PENDING
    assert absence.reason == "rdv médecin"
    assert repos.push_sender.sent[0][1]["body"] == "Alice - 05/03/2026"


def test_request_absence_in_past_fails(container, fixed_now):
    with pytest.raises(ValidationError) as exc:
        container.absence_service.request_absence(
            current_role=Role.SELLER, seller_id="u-alice", day=date(2026, 3, 3), now=fixed_now
        )
    assert exc.value.message == "DATE_IN_PAST"


def test_request_absence_twice_same_day_conflicts(container, fixed_now):
    svc = container.absence_service
    svc.request_absence(current_role=Role.SELLER, seller_id="u-alice", day=date(2026, 3, 4), now=fixed_now)
    with pytest.raises(ConflictError) as exc:
        svc.request_absence(current_role=Role.SELLER, seller_id="u-alice", day=date(2026, 3, 4), now=fixed_now)
    assert exc.value.message == "ALREADY_REQUESTED"


def test_rejected_absence_can_be_requested_again(container, repos, fixed_now):
    repos.absences.create(seller_id="u-alice", day=date(2026, 3, 5), reason=None, status=RequestStatus.REJECTED)
    container.absence_service.request_absence(
        current_role=Role.SELLER, seller_id="u-alice", day=date(2026, 3, 5), now=fixed_now
    )
    assert len(repos.absences.rows) == 2


def test_push_failure_does_not_fail_request(container, repos, fixed_now):
    repos.push_subscriptions.upsert(PushSubscription(endpoint="https://push/a", p256dh="k", auth="a", role="admin"))

    def boom(subscription, message):
        raise RuntimeError("push service down")

    repos.push_sender.send = boom

    absence_id = container.absence_service.request_absence(
        current_role=Role.SELLER, seller_id="u-alice", day=date(2026, 3, 5), now=fixed_now
    )
    assert repos.absences.get(absence_id) is not None


def test_cancel_mine_deletes_absences_and_interests(container, repos, fixed_now):
    aid = repos.absences.create(seller_id="u-alice", day=date(2026, 3, 6), reason=None)
    repos.replacements.create(absence_id=aid, volunteer_id="u-bob")

    result = container.absence_service.cancel_mine(
        current_role=Role.SELLER, seller_id="u-alice", day=date(2026, 3, 6), now=fixed_now
    )

    assert result == {"absencesDeleted": 1, "replacementsDeleted": 1}
    assert repos.absences.rows == {}


def test_cancel_mine_blocked_once_replacement_accepted(container, repos, fixed_now):
    aid = repos.absences.create(seller_id="u-alice", day=date(2026, 3, 6), reason=None, status=RequestStatus.APPROVED)
    repos.replacements.accept(absence_id=aid, volunteer_id="u-bob", shift_code="MORNING")

    with pytest.raises(ConflictError) as exc:
        container.absence_service.cancel_mine(
            current_role=Role.SELLER, seller_id="u-alice", day=date(2026, 3, 6), now=fixed_now
        )
    assert exc.value.message == "REPLACEMENT_ACCEPTED"


def test_cancel_mine_refuses_admin_forced(container, fixed_now):
    container.absence_service.mark_absent(current_role=Role.ADMIN, seller_id="u-alice", day=date(2026, 3, 6))
    with pytest.raises(AuthorizationError) as exc:
        container.absence_service.cancel_mine(
            current_role=Role.SELLER, seller_id="u-alice", day=date(2026, 3, 6), now=fixed_now
        )
    assert exc.value.message == "ADMIN_FORCED"


def test_cancel_mine_without_absence_is_not_found(container, fixed_now):
    with pytest.raises(NotFoundError) as exc:
        container.absence_service.cancel_mine(
            current_role=Role.SELLER, seller_id="u-alice", day=date(2026, 3, 6), now=fixed_now
        )
    assert exc.value.message == "NO_ABSENCE"


def test_approve_then_reject_is_already_decided(container, repos):
    aid = repos.absences.create(seller_id="u-alice", day=date(2026, 3, 6), reason=None)
    svc = container.absence_service

    svc.approve(current_role=Role.ADMIN, absence_id=aid)
    assert repos.absences.get(aid).status == RequestStatus.APPROVED

    with pytest.raises(ConflictError) as exc:
        svc.reject(current_role=Role.ADMIN, absence_id=aid)
    assert exc.value.message == "ALREADY_DECIDED"

    with pytest.raises(NotFoundError):
        svc.approve(current_role=Role.ADMIN, absence_id=999)


def test_list_for_admin_filters_by_status_and_adds_names(container, repos):
    repos.absences.create(seller_id="u-alice", day=date(2026, 3, 6), reason=None)
    repos.absences.create(seller_id="u-bob", day=date(2026, 3, 7), reason=None, status=RequestStatus.APPROVED)

    rows = container.absence_service.list_for_admin(current_role=Role.ADMIN, status=RequestStatus.PENDING)

    assert [(r["seller_id"], r["full_name"], r["status"]) for r in rows] == [("u-alice", "Alice", "pending")]


def test_mark_and_unmark_absent(container, repos):
    svc = container.absence_service
    aid = svc.mark_absent(current_role=Role.ADMIN, seller_id="u-bob", day=date(2026, 3, 3))
    absence = repos.absences.get(aid)
    assert absence.admin_forced
    assert absence.status == RequestStatus.APPROVED

    with pytest.raises(ConflictError) as exc:
        svc.mark_absent(current_role=Role.ADMIN, seller_id="u-bob", day=date(2026, 3, 3))
    assert exc.value.message == "ALREADY_ABSENT"

    assert svc.unmark_absent(current_role=Role.ADMIN, seller_id="u-bob", day=date(2026, 3, 3)) == {
        "absencesDeleted": 1,
        "replacementsDeleted": 0,
    }
    with pytest.raises(NotFoundError):
        svc.unmark_absent(current_role=Role.ADMIN, seller_id="u-bob", day=date(2026, 3, 3))
