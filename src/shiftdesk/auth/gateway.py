"""HTTP client for the hosted auth service (GoTrue-compatible REST API)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..core.exceptions import AuthenticationError, UpstreamError, ValidationError
from .model import AuthUser

log = logging.getLogger(__name__)


def _to_user(data: Dict[str, Any]) -> AuthUser:
    return AuthUser(
        user_id=str(data["id"]),
        email=data.get("email"),
        last_sign_in_at=data.get("last_sign_in_at"),
    )


class HostedAuthGateway:
    """Thin wrapper around the auth endpoints used by shiftdesk."""

    def __init__(self, base_url: str, anon_key: str, service_key: str, timeout: float = 10.0) -> None:
        self._anon_key = anon_key
        self._service_key = service_key
        self._client = httpx.Client(base_url=f"{base_url.rstrip('/')}/auth/v1", timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _admin_headers(self) -> Dict[str, str]:
        if not self._service_key:
            raise UpstreamError("Server misconfigured")
        return {"apikey": self._service_key, "Authorization": f"Bearer {self._service_key}"}

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            log.warning("auth service %s %s failed: %s", method, path, exc)
            raise UpstreamError("AUTH_UNAVAILABLE", cause=exc)

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        return str(data.get("msg") or data.get("message") or data.get("error_description") or data.get("error") or data)

    def _raise_for_admin(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        text = self._error_text(response)
        if response.status_code in (400, 422):
            raise ValidationError(text)
        raise UpstreamError(text)

    def get_user(self, token: str) -> AuthUser:
        response = self._request(
            "GET", "/user", headers={"apikey": self._anon_key, "Authorization": f"Bearer {token}"}
        )
        if response.status_code in (401, 403):
            raise AuthenticationError("Invalid token")
        if not response.is_success:
            raise UpstreamError(self._error_text(response))
        return _to_user(response.json())

    def sign_in(self, email: str, password: str) -> bool:
        """Return True when the credentials are accepted (used to verify a password)."""
        response = self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            headers={"apikey": self._anon_key},
            json={"email": email, "password": password},
        )
        if response.is_success:
            return True
        if response.status_code in (400, 401, 422):
            return False
        raise UpstreamError(self._error_text(response))

    def admin_create_user(self, *, email: str, password: str, full_name: Optional[str] = None) -> AuthUser:
        payload: Dict[str, Any] = {"email": email, "password": password, "email_confirm": True}
        if full_name:
            payload["user_metadata"] = {"full_name": full_name}
        response = self._request("POST", "/admin/users", headers=self._admin_headers(), json=payload)
        self._raise_for_admin(response)
        return _to_user(response.json())

    def admin_get_user(self, user_id: str) -> Optional[AuthUser]:
        response = self._request("GET", f"/admin/users/{user_id}", headers=self._admin_headers())
        if response.status_code == 404:
            return None
        self._raise_for_admin(response)
        return _to_user(response.json())

    def admin_list_users(self, *, per_page: int = 1000) -> list[AuthUser]:
        users: list[AuthUser] = []
        page = 1
        while True:
            response = self._request(
                "GET", "/admin/users", headers=self._admin_headers(), params={"page": page, "per_page": per_page}
            )
            self._raise_for_admin(response)
            data = response.json()
            batch = data.get("users", []) if isinstance(data, dict) else data
            users.extend(_to_user(u) for u in batch)
            if len(batch) < per_page:
                break
            page += 1
        return users

    def admin_update_user(self, user_id: str, *, email: Optional[str] = None, password: Optional[str] = None) -> None:
        payload: Dict[str, Any] = {}
        if email:
            payload["email"] = email
            payload["email_confirm"] = True
        if password:
            payload["password"] = password
        if not payload:
            return
        response = self._request("PUT", f"/admin/users/{user_id}", headers=self._admin_headers(), json=payload)
        self._raise_for_admin(response)

    def admin_delete_user(self, user_id: str) -> None:
        response = self._request("DELETE", f"/admin/users/{user_id}", headers=self._admin_headers())
        if response.status_code == 404:
            return
        self._raise_for_admin(response)
