from __future__ import annotations

import logging
from typing import Any, Optional

import psycopg2
from flask import Flask, jsonify, request
from werkzeug.exceptions import MethodNotAllowed, NotFound

from ..core.exceptions import AuthenticationError, DomainError, UpstreamError

log = logging.getLogger(__name__)


def json_ok(status: int = 200, **payload: Any):
    return jsonify({"ok": True, **payload}), status


def json_error(error: str, status: int, **extra: Any):
    return jsonify({"ok": False, "error": error, **extra}), status


def bearer_token(required: bool = True) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    token = header[7:].strip() if header.lower().startswith("bearer ") else ""
    if not token and required:
        raise AuthenticationError("Missing token")
    return token or None


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        if isinstance(exc, UpstreamError):
            log.warning("upstream failure on %s %s: %s", request.method, request.path, exc.message)
        return json_error(exc.message, exc.status_code, **exc.extra)

    @app.errorhandler(psycopg2.Error)
    def _database_error(exc: psycopg2.Error):
        log.exception("database error on %s %s", request.method, request.path)
        return json_error("DATABASE_ERROR", 500)

    @app.errorhandler(MethodNotAllowed)
    def _method_not_allowed(exc: MethodNotAllowed):
        return json_error("Method not allowed", 405)

    @app.errorhandler(NotFound)
    def _not_found(exc: NotFound):
        return json_error("Not found", 404)
