from __future__ import annotations

from flask import Flask, g

from ..common.http import json_body, json_ok
from ..common.validators import as_bool


def register(app: Flask, container) -> None:
    guards = container.guards
    sellers = container.seller_admin_service
    supervisors = container.supervisor_admin_service

    @app.route("/api/admin/sellers", methods=["GET"], endpoint="admin_list_sellers")
    @guards.admin_required
    def admin_list_sellers():
        return json_ok(sellers=sellers.list_sellers(current_role=g.caller.role))

    @app.route("/api/admin/sellers", methods=["POST"], endpoint="admin_create_seller")
    @guards.admin_required
    def admin_create_seller():
        body = json_body()
        created = sellers.create_seller(
            current_role=g.caller.role,
            full_name=body.get("full_name", ""),
            email=body.get("email", ""),
            password=body.get("password", ""),
        )
        return json_ok(201, seller=created)

    @app.route("/api/admin/sellers/update", methods=["POST"], endpoint="admin_update_seller")
    @guards.admin_required
    def admin_update_seller():
        body = json_body()
        sellers.update_seller(
            current_role=g.caller.role,
            user_id=body.get("user_id", ""),
            full_name=body.get("full_name"),
            active=(as_bool(body["active"]) if "active" in body else None),
            email=body.get("email"),
            password=body.get("password"),
            disable=as_bool(body.get("disable", False)),
        )
        return json_ok()

    @app.route("/api/admin/sellers/update-auth", methods=["POST"], endpoint="admin_update_seller_auth")
    @guards.admin_required
    def admin_update_seller_auth():
        body = json_body()
        sellers.update_auth(
            current_role=g.caller.role,
            user_id=body.get("user_id", ""),
            email=body.get("email"),
            password=body.get("password"),
        )
        return json_ok()

    @app.route("/api/admin/sellers/delete", methods=["POST"], endpoint="admin_delete_seller")
    @guards.admin_required
    def admin_delete_seller():
        body = json_body()
        hard = as_bool(body.get("hard_delete", False))
        sellers.delete_seller(current_role=g.caller.role, user_id=body.get("user_id", ""), hard_delete=hard)
        return json_ok(hard_deleted=hard)

    @app.route("/api/admin/supervisor", methods=["GET"], endpoint="admin_get_supervisor")
    @guards.admin_required
    def admin_get_supervisor():
        return json_ok(supervisor=supervisors.get_supervisor(current_role=g.caller.role))

    @app.route("/api/admin/supervisor", methods=["POST"], endpoint="admin_create_supervisor")
    @guards.admin_required
    def admin_create_supervisor():
        body = json_body()
        created = supervisors.create_supervisor(
            current_role=g.caller.role,
            full_name=body.get("full_name", ""),
            email=body.get("email", ""),
            password=body.get("password", ""),
        )
        return json_ok(201, supervisor=created)

    @app.route("/api/admin/supervisor/update", methods=["POST"], endpoint="admin_update_supervisor")
    @guards.admin_required
    def admin_update_supervisor():
        body = json_body()
        supervisors.update_supervisor(
            current_role=g.caller.role,
            full_name=body.get("full_name", ""),
            email=body.get("email"),
            password=body.get("password"),
        )
        return json_ok()
