from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_date_arg, today_local
from ..common.http import json_body, json_ok
from ..core.enums import Role


def register(app: Flask, container) -> None:
    guards = container.guards
    planner = container.shift_planner_service

    @app.route("/api/shifts/week", methods=["GET"], endpoint="shifts_week")
    @guards.login_required
    def shifts_week():
        day = parse_date_arg(request.args.get("date"), "date", default=today_local())
        return json_ok(**planner.week(day=day))

    @app.route("/api/admin/shifts", methods=["POST"], endpoint="admin_assign_shift")
    @guards.admin_required
    def admin_assign_shift():
        body = json_body()
        planner.assign(
            current_role=g.caller.role,
            day=parse_date_arg(body.get("date"), "date"),
            shift_code=body.get("shift_code", ""),
            seller_id=body.get("seller_id"),
        )
        return json_ok()

    @app.route("/api/admin/shifts/copy-week", methods=["POST"], endpoint="admin_copy_week")
    @guards.admin_required
    def admin_copy_week():
        monday = parse_date_arg(json_body().get("monday"), "monday")
        copied = planner.copy_week(current_role=g.caller.role, monday=monday)
        return json_ok(copied=copied)

    @app.route("/api/supervisor/plan", methods=["GET"], endpoint="supervisor_plan")
    @guards.roles_required(Role.SUPERVISOR, Role.ADMIN)
    def supervisor_plan():
        day = parse_date_arg(request.args.get("date"), "date", default=today_local())
        return json_ok(**planner.supervisor_plan(current_role=g.caller.role, day=day))

    @app.route("/api/admin/hours", methods=["GET"], endpoint="admin_hours_by_range")
    @guards.admin_required
    def admin_hours_by_range():
        start = parse_date_arg(request.args.get("from"), "from")
        end = parse_date_arg(request.args.get("to"), "to")
        rows = planner.hours_by_range(current_role=g.caller.role, start=start, end=end)
        return json_ok(rows=rows)
