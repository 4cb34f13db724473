from __future__ import annotations

from flask import Flask, g, request

from ..absences.service import parse_status
from ..common.datetime_utils import parse_date_arg
from ..common.http import json_body, json_ok


def register(app: Flask, container) -> None:
    guards = container.guards
    leaves = container.leave_service
    balances = container.leave_balance_service

    @app.route("/api/leaves", methods=["POST"], endpoint="request_leave")
    @guards.seller_required
    def request_leave():
        body = json_body()
        leave_id = leaves.request_leave(
            current_role=g.caller.role,
            seller_id=g.caller.user_id,
            start_date=parse_date_arg(body.get("start_date"), "start_date"),
            end_date=parse_date_arg(body.get("end_date"), "end_date"),
            reason=body.get("reason"),
        )
        return json_ok(201, id=leave_id)

    @app.route("/api/leaves/my", methods=["GET"], endpoint="my_leaves")
    @guards.seller_required
    def my_leaves():
        return json_ok(leaves=leaves.list_mine(seller_id=g.caller.user_id))

    @app.route("/api/leaves/balance", methods=["GET"], endpoint="my_leave_balance")
    @guards.seller_required
    def my_leave_balance():
        return json_ok(**balances.my_balance(seller_id=g.caller.user_id))

    @app.route("/api/admin/leaves", methods=["GET"], endpoint="admin_list_leaves")
    @guards.admin_required
    def admin_list_leaves():
        rows = leaves.list_for_admin(current_role=g.caller.role, status=parse_status(request.args.get("status")))
        return json_ok(leaves=rows)

    @app.route("/api/admin/leaves/<int:leave_id>/approve", methods=["POST"], endpoint="admin_approve_leave")
    @guards.admin_required
    def admin_approve_leave(leave_id: int):
        leaves.approve(current_role=g.caller.role, leave_id=leave_id)
        return json_ok()

    @app.route("/api/admin/leaves/<int:leave_id>/reject", methods=["POST"], endpoint="admin_reject_leave")
    @guards.admin_required
    def admin_reject_leave(leave_id: int):
        leaves.reject(current_role=g.caller.role, leave_id=leave_id)
        return json_ok()

    @app.route("/api/admin/leaves/<int:leave_id>/cancel", methods=["POST"], endpoint="admin_cancel_leave")
    @guards.admin_required
    def admin_cancel_leave(leave_id: int):
        leaves.cancel_upcoming(current_role=g.caller.role, leave_id=leave_id)
        return json_ok()

    @app.route("/api/admin/leave-balances", methods=["GET"], endpoint="admin_list_leave_balances")
    @guards.admin_required
    def admin_list_leave_balances():
        return json_ok(sellers=balances.list_all(current_role=g.caller.role))

    @app.route("/api/admin/leave-balances", methods=["POST"], endpoint="admin_upsert_leave_balance")
    @guards.admin_required
    def admin_upsert_leave_balance():
        balance = balances.upsert(current_role=g.caller.role, updated_by=g.caller.user_id, payload=json_body())
        return json_ok(balance=balance.to_dict())
