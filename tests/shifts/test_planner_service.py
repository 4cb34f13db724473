from datetime import date

import pytest

from shiftdesk.core.enums import RequestStatus, Role, ShiftCode
from shiftdesk.core.exceptions import AuthorizationError, ValidationError


def test_week_grid_runs_monday_to_sunday(container, repos):
    repos.shifts.upsert(day=date(2026, 3, 4), shift_code=ShiftCode.MORNING, seller_id="u-alice")
    repos.shifts.upsert(day=date(2026, 3, 4), shift_code=ShiftCode.EVENING, seller_id=None)

    week = container.shift_planner_service.week(day=date(2026, 3, 4))

    assert week["monday"] == "2026-03-02"
    assert week["sunday"] == "2026-03-08"
    assert len(week["dates"]) == 7
    assert [c["code"] for c in week["shift_codes"]] == ["MORNING", "MIDDAY", "SUNDAY_EXTRA", "EVENING"]
    assert week["shift_codes"][2] == {"code": "SUNDAY_EXTRA", "label": "Dimanche 9h-13h30", "hours": 4.5}
    assert week["assignments"]["2026-03-04"] == {"MORNING": {"seller_id": "u-alice", "full_name": "Alice"}}


def test_sunday_extra_only_on_sunday(container):
    svc = container.shift_planner_service
    with pytest.raises(ValidationError) as exc:
        svc.assign(current_role=Role.ADMIN, day=date(2026, 3, 7), shift_code="SUNDAY_EXTRA", seller_id="u-alice")
    assert exc.value.message == "SUNDAY_EXTRA_ONLY_ON_SUNDAY"

    svc.assign(current_role=Role.ADMIN, day=date(2026, 3, 8), shift_code="sunday_extra", seller_id="u-alice")


def test_assign_rejects_unknown_code_and_non_sellers(container):
    svc = container.shift_planner_service
    with pytest.raises(ValidationError) as exc:
        svc.assign(current_role=Role.ADMIN, day=date(2026, 3, 4), shift_code="NIGHT", seller_id="u-alice")
    assert exc.value.message == "INVALID_SHIFT_CODE"

    with pytest.raises(ValidationError) as exc:
        svc.assign(current_role=Role.ADMIN, day=date(2026, 3, 4), shift_code="MORNING", seller_id="u-sup")
    assert exc.value.message == "INVALID_SELLER"


def test_assign_requires_admin(container):
    with pytest.raises(AuthorizationError):
        container.shift_planner_service.assign(
            current_role=Role.SELLER, day=date(2026, 3, 4), shift_code="MORNING", seller_id="u-alice"
        )


def test_assign_empty_seller_clears_slot(container, repos):
    repos.shifts.upsert(day=date(2026, 3, 4), shift_code=ShiftCode.MORNING, seller_id="u-alice")

    container.shift_planner_service.assign(
        current_role=Role.ADMIN, day=date(2026, 3, 4), shift_code="MORNING", seller_id="  "
    )

    assert repos.shifts.slots[(date(2026, 3, 4), ShiftCode.MORNING)] is None


def test_copy_week_shifts_assignments_by_seven_days(container, repos):
    repos.shifts.upsert(day=date(2026, 3, 2), shift_code=ShiftCode.MORNING, seller_id="u-alice")
    repos.shifts.upsert(day=date(2026, 3, 8), shift_code=ShiftCode.SUNDAY_EXTRA, seller_id="u-bob")
    repos.shifts.upsert(day=date(2026, 3, 3), shift_code=ShiftCode.EVENING, seller_id=None)

    copied = container.shift_planner_service.copy_week(current_role=Role.ADMIN, monday=date(2026, 3, 4))

    assert copied == 2
    assert repos.shifts.slots[(date(2026, 3, 9), ShiftCode.MORNING)] == "u-alice"
    assert repos.shifts.slots[(date(2026, 3, 15), ShiftCode.SUNDAY_EXTRA)] == "u-bob"
    assert (date(2026, 3, 10), ShiftCode.EVENING) not in repos.shifts.slots


def test_copy_empty_week_fails(container):
    with pytest.raises(ValidationError) as exc:
        container.shift_planner_service.copy_week(current_role=Role.ADMIN, monday=date(2026, 3, 2))
    assert exc.value.message == "NOTHING_TO_COPY"


def test_supervisor_plan_lists_today_absences(container, repos, fixed_now):
    repos.shifts.upsert(day=date(2026, 3, 4), shift_code=ShiftCode.MORNING, seller_id="u-alice")
    repos.absences.create(seller_id="u-alice", day=date(2026, 3, 4), reason="malade")
    repos.absences.create(seller_id="u-bob", day=date(2026, 3, 6), reason=None, status=RequestStatus.APPROVED)
    repos.absences.create(seller_id="u-chloe", day=date(2026, 3, 5), reason=None, status=RequestStatus.REJECTED)

    plan = container.shift_planner_service.supervisor_plan(
        current_role=Role.SUPERVISOR, day=date(2026, 3, 4), now=fixed_now
    )

    assert [a["full_name"] for a in plan["absences_today"]] == ["Alice"]
    assert sorted(plan["absences"].keys()) == ["2026-03-04", "2026-03-06"]
    assert len(plan["absences_week"]) == 2
    assert plan["checkins_today"] == []


def test_supervisor_plan_forbidden_for_sellers(container, fixed_now):
    with pytest.raises(AuthorizationError):
        container.shift_planner_service.supervisor_plan(current_role=Role.SELLER, day=date(2026, 3, 4), now=fixed_now)


def test_hours_by_range_sums_fixed_shift_hours(container, repos):
    repos.shifts.upsert(day=date(2026, 3, 2), shift_code=ShiftCode.MORNING, seller_id="u-bob")
    repos.shifts.upsert(day=date(2026, 3, 3), shift_code=ShiftCode.MIDDAY, seller_id="u-bob")
    repos.shifts.upsert(day=date(2026, 3, 8), shift_code=ShiftCode.SUNDAY_EXTRA, seller_id="u-alice")

    rows = container.shift_planner_service.hours_by_range(
        current_role=Role.ADMIN, start=date(2026, 3, 2), end=date(2026, 3, 8)
    )

    assert rows == [
        {"seller_id": "u-alice", "full_name": "Alice", "hours": 4.5, "shifts": 1},
        {"seller_id": "u-bob", "full_name": "Bob", "hours": 13.0, "shifts": 2},
    ]


def test_hours_by_range_rejects_inverted_range(container):
    with pytest.raises(ValidationError):
        container.shift_planner_service.hours_by_range(
            current_role=Role.ADMIN, start=date(2026, 3, 8), end=date(2026, 3, 2)
        )
