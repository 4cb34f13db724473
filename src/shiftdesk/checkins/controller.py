from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_date_arg
from ..common.http import json_body, json_ok
from ..core.enums import Role


def register(app: Flask, container) -> None:
    guards = container.guards
    checkins = container.checkin_service

    @app.route("/api/supervisor/checkin-code", methods=["POST"], endpoint="issue_checkin_code")
    @guards.roles_required(Role.SUPERVISOR, Role.ADMIN)
    def issue_checkin_code():
        body = json_body()
        result = checkins.issue_code(
            current_role=g.caller.role,
            issuer_id=g.caller.user_id,
            seller_id=body.get("seller_id", ""),
            password=body.get("password", ""),
        )
        return json_ok(**result)

    @app.route("/api/checkins/confirm", methods=["POST"], endpoint="confirm_checkin")
    @guards.seller_required
    def confirm_checkin():
        body = json_body()
        day = parse_date_arg(body["day"], "day") if body.get("day") else None
        result = checkins.confirm(
            current_role=g.caller.role,
            seller_id=g.caller.user_id,
            code=str(body.get("code", "")),
            day=day,
        )
        return json_ok(**result)

    @app.route("/api/checkins/status", methods=["GET"], endpoint="checkin_status")
    @guards.seller_required
    def checkin_status():
        day = parse_date_arg(request.args["day"], "day") if request.args.get("day") else None
        return json_ok(**checkins.status(seller_id=g.caller.user_id, day=day))

    @app.route("/api/admin/checkins/missing", methods=["GET"], endpoint="admin_missing_checkins")
    @guards.admin_required
    def admin_missing_checkins():
        day = parse_date_arg(request.args["day"], "day") if request.args.get("day") else None
        return json_ok(items=checkins.missing(current_role=g.caller.role, day=day))
