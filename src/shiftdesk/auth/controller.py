from __future__ import annotations

from functools import wraps

from flask import Flask, g

from .. import __version__
from ..common.http import bearer_token, json_ok
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .service import IdentityService


class Guards:
    """Route decorators that resolve the caller and check its role.

    The resolved :class:`Caller` is stored on ``flask.g.caller``.
    """

    def __init__(self, identity: IdentityService):
        self._identity = identity

    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.caller = self._identity.resolve(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    def roles_required(self, *roles: Role):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                g.caller = self._identity.resolve(bearer_token())
                if g.caller.role not in roles:
                    raise AuthorizationError("Forbidden")
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def admin_required(self, view):
        return self.roles_required(Role.ADMIN)(view)

    def seller_required(self, view):
        return self.roles_required(Role.SELLER)(view)


def register(app: Flask, container) -> None:
    guards = container.guards

    @app.route("/api/role", methods=["GET"], endpoint="api_role")
    @guards.login_required
    def api_role():
        caller = g.caller
        return json_ok(role=caller.role.value, userId=caller.user_id, email=caller.email)

    @app.route("/api/version", methods=["GET"], endpoint="api_version")
    def api_version():
        return json_ok(version=__version__)
