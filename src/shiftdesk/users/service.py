from __future__ import annotations

import logging
import secrets
from typing import Optional

from ..auth.service import require_role
from ..common.validators import optional_email, require_email, require_min_length, require_non_empty
from ..core.constants import PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .repository import ProfileRepository

log = logging.getLogger(__name__)


def _optional_password(password: Optional[str]) -> Optional[str]:
    if not password:
        return None
    return require_min_length(password, "password", PASSWORD_MIN_LENGTH)


class SellerAdminService:
    """Admin management of seller accounts (profile row + hosted auth user)."""

    def __init__(self, profiles: ProfileRepository, gateway):
        self._profiles = profiles
        self._gateway = gateway

    def list_sellers(self, *, current_role: Role) -> list[dict]:
        require_role(current_role, Role.ADMIN)
        sellers = self._profiles.list_by_roles([Role.SELLER])
        auth_users = {u.user_id: u for u in self._gateway.admin_list_users()}
        out: list[dict] = []
        for p in sellers:
            au = auth_users.get(p.user_id)
            item = p.to_dict()
            item["email"] = au.email if au else None
            item["last_sign_in_at"] = au.last_sign_in_at if au else None
            out.append(item)
        return out

    def create_seller(self, *, current_role: Role, full_name: str, email: str, password: str) -> dict:
        require_role(current_role, Role.ADMIN)
        name = require_non_empty(full_name, "full_name")
        mail = require_email(email)
        require_min_length(password, "password", PASSWORD_MIN_LENGTH)

        user = self._gateway.admin_create_user(email=mail, password=password, full_name=name)
        try:
            self._profiles.upsert(user_id=user.user_id, full_name=name, role=Role.SELLER, active=True)
        except Exception:
            log.warning("profile insert failed, deleting auth user %s", user.user_id)
            self._gateway.admin_delete_user(user.user_id)
            raise
        log.info("seller %s created", user.user_id)
        return {"user_id": user.user_id, "email": mail, "full_name": name}

    def update_seller(
        self,
        *,
        current_role: Role,
        user_id: str,
        full_name: Optional[str] = None,
        active: Optional[bool] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        disable: bool = False,
    ) -> None:
        require_role(current_role, Role.ADMIN)
        uid = require_non_empty(user_id, "user_id")
        if self._profiles.get(uid) is None:
            raise NotFoundError("Seller not found")

        name = full_name.strip() if full_name is not None else None
        if name is not None and not name:
            raise ValidationError("full_name is required")
        mail = optional_email(email)
        new_password = _optional_password(password)

        if disable:
            active = False
            new_password = secrets.token_urlsafe(24)

        self._profiles.update(uid, full_name=name, active=active)
        if mail or new_password:
            self._gateway.admin_update_user(uid, email=mail, password=new_password)

    def update_auth(
        self,
        *,
        current_role: Role,
        user_id: str,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        require_role(current_role, Role.ADMIN)
        uid = require_non_empty(user_id, "user_id")
        mail = optional_email(email)
        new_password = _optional_password(password)
        if not mail and not new_password:
            raise ValidationError("Nothing to update")
        self._gateway.admin_update_user(uid, email=mail, password=new_password)

    def delete_seller(self, *, current_role: Role, user_id: str, hard_delete: bool = False) -> None:
        require_role(current_role, Role.ADMIN)
        uid = require_non_empty(user_id, "user_id")
        if not self._profiles.update(uid, active=False):
            raise NotFoundError("Seller not found")
        if hard_delete:
            self._gateway.admin_delete_user(uid)
            log.info("seller %s hard deleted", uid)


class SupervisorAdminService:
    """The shop has at most one supervisor account (the check-in device)."""

    def __init__(self, profiles: ProfileRepository, gateway):
        self._profiles = profiles
        self._gateway = gateway

    def _current(self):
        rows = self._profiles.list_by_roles([Role.SUPERVISOR])
        return rows[0] if rows else None

    def get_supervisor(self, *, current_role: Role) -> Optional[dict]:
        require_role(current_role, Role.ADMIN)
        sup = self._current()
        if not sup:
            return None
        au = self._gateway.admin_get_user(sup.user_id)
        item = sup.to_dict()
        item["email"] = au.email if au else None
        return item

    def create_supervisor(self, *, current_role: Role, full_name: str, email: str, password: str) -> dict:
        require_role(current_role, Role.ADMIN)
        name = require_non_empty(full_name, "full_name")
        mail = require_email(email)
        require_min_length(password, "password", PASSWORD_MIN_LENGTH)
        if self._current() is not None:
            raise ConflictError("SUPERVISOR_EXISTS")

        user = self._gateway.admin_create_user(email=mail, password=password, full_name=name)
        try:
            self._profiles.upsert(user_id=user.user_id, full_name=name, role=Role.SUPERVISOR, active=True)
        except Exception:
            log.warning("supervisor profile insert failed, deleting auth user %s", user.user_id)
            self._gateway.admin_delete_user(user.user_id)
            raise
        return {"user_id": user.user_id, "email": mail, "full_name": name}

    def update_supervisor(
        self,
        *,
        current_role: Role,
        full_name: str,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        require_role(current_role, Role.ADMIN)
        name = require_non_empty(full_name, "full_name")
        mail = optional_email(email)
        new_password = _optional_password(password)
        sup = self._current()
        if sup is None:
            raise NotFoundError("Supervisor not found")
        self._profiles.update(sup.user_id, full_name=name)
        if mail or new_password:
            self._gateway.admin_update_user(sup.user_id, email=mail, password=new_password)
