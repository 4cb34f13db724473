from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..users.repository import ProfileRepository
from .model import Caller

log = logging.getLogger(__name__)


def require_role(current_role: Role, *allowed: Role) -> None:
    if current_role not in allowed:
        raise AuthorizationError("Forbidden")


class IdentityService:
    """Resolve a bearer token into a :class:`Caller` with its role.

    Admins are recognised either by the ``ADMIN_EMAILS`` allowlist or by the
    ``admin`` role on their profile; a supervisor has the ``supervisor`` role;
    everybody else is a seller.
    """

    def __init__(self, gateway, profiles: ProfileRepository, *, admin_emails: Iterable[str] = ()):
        self._gateway = gateway
        self._profiles = profiles
        self._admin_emails = {e.strip().lower() for e in admin_emails if e and e.strip()}

    def is_admin_email(self, email: Optional[str]) -> bool:
        return bool(email) and email.strip().lower() in self._admin_emails

    def resolve(self, token: Optional[str]) -> Caller:
        if not token:
            raise AuthenticationError("Missing token")

        user = self._gateway.get_user(token)
        profile = self._profiles.get(user.user_id)

        if self.is_admin_email(user.email) or (profile and profile.role == Role.ADMIN):
            role = Role.ADMIN
        elif profile and profile.role == Role.SUPERVISOR:
            role = Role.SUPERVISOR
        else:
            role = Role.SELLER

        if role != Role.ADMIN and profile is not None and not profile.active:
            log.info("inactive user %s rejected", user.user_id)
            raise AuthorizationError("INACTIVE")

        return Caller(
            user_id=user.user_id,
            email=user.email,
            role=role,
            full_name=profile.full_name if profile else None,
        )
