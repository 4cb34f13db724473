from __future__ import annotations

from datetime import timedelta

from flask import Flask, g, request

from ..common.datetime_utils import parse_date_arg, today_local
from ..common.http import json_body, json_ok
from ..core.exceptions import ValidationError


def _absence_id(body: dict) -> int:
    try:
        return int(body.get("absence_id"))
    except (TypeError, ValueError):
        raise ValidationError("absence_id is required")


def register(app: Flask, container) -> None:
    guards = container.guards
    replacements = container.replacement_service

    @app.route("/api/replacements/volunteer", methods=["POST"], endpoint="volunteer_replacement")
    @guards.seller_required
    def volunteer_replacement():
        interest_id = replacements.volunteer(
            current_role=g.caller.role,
            volunteer_id=g.caller.user_id,
            absence_id=_absence_id(json_body()),
        )
        return json_ok(201, id=interest_id)

    @app.route("/api/replacements/open", methods=["GET"], endpoint="open_replacements")
    @guards.login_required
    def open_replacements():
        today = today_local()
        start = parse_date_arg(request.args.get("from"), "from", default=today)
        end = parse_date_arg(request.args.get("to"), "to", default=start + timedelta(days=30))
        items = replacements.open_slots(viewer_id=g.caller.user_id, start=start, end=end)
        return json_ok(items=items)

    @app.route("/api/replacements/accept", methods=["POST"], endpoint="accept_replacement")
    @guards.seller_required
    def accept_replacement():
        result = replacements.accept(
            current_role=g.caller.role,
            volunteer_id=g.caller.user_id,
            absence_id=_absence_id(json_body()),
        )
        return json_ok(**result)

    @app.route("/api/admin/replacements", methods=["GET"], endpoint="admin_list_replacements")
    @guards.admin_required
    def admin_list_replacements():
        start = parse_date_arg(request.args.get("from"), "from", default=today_local())
        return json_ok(items=replacements.list_pending_for_admin(current_role=g.caller.role, start=start))

    @app.route("/api/admin/replacements/<int:interest_id>/assign", methods=["POST"], endpoint="admin_assign_replacement")
    @guards.admin_required
    def admin_assign_replacement(interest_id: int):
        result = replacements.assign(
            current_role=g.caller.role,
            interest_id=interest_id,
            shift_code=json_body().get("shift_code"),
        )
        return json_ok(**result)

    @app.route("/api/admin/replacements/<int:interest_id>/decline", methods=["POST"], endpoint="admin_decline_replacement")
    @guards.admin_required
    def admin_decline_replacement(interest_id: int):
        replacements.decline(current_role=g.caller.role, interest_id=interest_id)
        return json_ok()
