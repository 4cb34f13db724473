from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_date_arg
from ..common.http import json_body, json_ok
from .service import parse_status


def _optional_date(name: str):
    value = request.args.get(name)
    return parse_date_arg(value, name) if value else None


def register(app: Flask, container) -> None:
    guards = container.guards
    absences = container.absence_service

    @app.route("/api/absences", methods=["POST"], endpoint="request_absence")
    @guards.seller_required
    def request_absence():
        body = json_body()
        absence_id = absences.request_absence(
            current_role=g.caller.role,
            seller_id=g.caller.user_id,
            day=parse_date_arg(body.get("date"), "date"),
            reason=body.get("reason"),
        )
        return json_ok(201, id=absence_id)

    @app.route("/api/absences/my", methods=["GET"], endpoint="my_absences")
    @guards.seller_required
    def my_absences():
        rows = absences.list_mine(seller_id=g.caller.user_id, start=_optional_date("from"), end=_optional_date("to"))
        return json_ok(absences=rows)

    @app.route("/api/absences/cancel", methods=["POST"], endpoint="cancel_my_absence")
    @guards.seller_required
    def cancel_my_absence():
        result = absences.cancel_mine(
            current_role=g.caller.role,
            seller_id=g.caller.user_id,
            day=parse_date_arg(json_body().get("date"), "date"),
        )
        return json_ok(**result)

    @app.route("/api/admin/absences", methods=["GET"], endpoint="admin_list_absences")
    @guards.admin_required
    def admin_list_absences():
        rows = absences.list_for_admin(
            current_role=g.caller.role,
            status=parse_status(request.args.get("status")),
            start=_optional_date("from"),
            end=_optional_date("to"),
        )
        return json_ok(absences=rows)

    @app.route("/api/admin/absences/<int:absence_id>/approve", methods=["POST"], endpoint="admin_approve_absence")
    @guards.admin_required
    def admin_approve_absence(absence_id: int):
        absences.approve(current_role=g.caller.role, absence_id=absence_id)
        return json_ok()

    @app.route("/api/admin/absences/<int:absence_id>/reject", methods=["POST"], endpoint="admin_reject_absence")
    @guards.admin_required
    def admin_reject_absence(absence_id: int):
        absences.reject(current_role=g.caller.role, absence_id=absence_id)
        return json_ok()

    @app.route("/api/admin/absences/mark", methods=["POST"], endpoint="admin_mark_absent")
    @guards.admin_required
    def admin_mark_absent():
        body = json_body()
        absence_id = absences.mark_absent(
            current_role=g.caller.role,
            seller_id=body.get("seller_id", ""),
            day=parse_date_arg(body.get("date"), "date"),
        )
        return json_ok(201, id=absence_id)

    @app.route("/api/admin/absences/unmark", methods=["POST"], endpoint="admin_unmark_absent")
    @guards.admin_required
    def admin_unmark_absent():
        body = json_body()
        result = absences.unmark_absent(
            current_role=g.caller.role,
            seller_id=body.get("seller_id", ""),
            day=parse_date_arg(body.get("date"), "date"),
        )
        return json_ok(**result)
