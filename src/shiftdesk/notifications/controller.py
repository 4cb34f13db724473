from __future__ import annotations

from flask import Flask, g

from ..common.http import json_body, json_ok


def register(app: Flask, container) -> None:
    guards = container.guards
    notifications = container.notification_service

    @app.route("/api/push/public-key", methods=["GET"], endpoint="push_public_key")
    def push_public_key():
        return json_ok(publicKey=notifications.public_key)

    @app.route("/api/push/subscribe", methods=["POST"], endpoint="push_subscribe")
    @guards.login_required
    def push_subscribe():
        body = json_body()
        notifications.subscribe(caller=g.caller, endpoint=body.get("endpoint", ""), keys=body.get("keys"))
        return json_ok()

    @app.route("/api/push/unsubscribe", methods=["POST"], endpoint="push_unsubscribe")
    @guards.login_required
    def push_unsubscribe():
        removed = notifications.unsubscribe(endpoint=json_body().get("endpoint", ""))
        return json_ok(removed=removed)

    @app.route("/api/push/broadcast", methods=["POST"], endpoint="push_broadcast")
    @guards.login_required
    def push_broadcast():
        body = json_body()
        result = notifications.broadcast(
            role=body.get("role"),
            title=body.get("title"),
            body=body.get("body"),
            url=body.get("url"),
            badge_count=body.get("badgeCount"),
        )
        return json_ok(**result)
