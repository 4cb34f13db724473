from __future__ import annotations

import logging
from typing import Optional

from ..auth.model import Caller
from ..common.validators import require_non_empty
from ..core.constants import PUSH_DEFAULT_BADGE, PUSH_DEFAULT_ROLE, PUSH_DEFAULT_TITLE, PUSH_DEFAULT_URL
from ..core.enums import Role
from ..core.exceptions import UpstreamError, ValidationError
from .model import PushMessage, PushSubscription
from .repository import PushSubscriptionRepository

log = logging.getLogger(__name__)

_GONE_STATUSES = {404, 410}


class NotificationService:
    def __init__(self, subscriptions: PushSubscriptionRepository, sender=None, *, public_key: str = ""):
        self._subscriptions = subscriptions
        self._sender = sender
        self._public_key = public_key

    @property
    def public_key(self) -> str:
        if not self._public_key:
            raise UpstreamError("VAPID_NOT_CONFIGURED")
        return self._public_key

    def subscribe(self, *, caller: Caller, endpoint: str, keys: Optional[dict]) -> None:
        keys = keys or {}
        self._subscriptions.upsert(
            PushSubscription(
                endpoint=require_non_empty(endpoint, "endpoint"),
                p256dh=require_non_empty(keys.get("p256dh"), "keys.p256dh"),
                auth=require_non_empty(keys.get("auth"), "keys.auth"),
                role=caller.role.value,
                user_id=caller.user_id,
            )
        )

    def unsubscribe(self, *, endpoint: str) -> int:
        return self._subscriptions.delete(require_non_empty(endpoint, "endpoint"))

    def broadcast(
        self,
        *,
        role: Optional[str] = None,
        title: Optional[str] = None,
        body: Optional[str] = None,
        url: Optional[str] = None,
        badge_count: Optional[int] = None,
    ) -> dict:
        if self._sender is None:
            raise UpstreamError("VAPID_NOT_CONFIGURED")

        target = (role or PUSH_DEFAULT_ROLE).strip().lower()
        if target not in {r.value for r in Role}:
            raise ValidationError("Invalid role")
        try:
            badge = int(badge_count) if badge_count is not None else PUSH_DEFAULT_BADGE
        except (TypeError, ValueError):
            raise ValidationError("Invalid badgeCount")

        message = PushMessage(
            title=(title or PUSH_DEFAULT_TITLE),
            body=(body or ""),
            url=(url or PUSH_DEFAULT_URL),
            badge_count=badge,
        )

        subs = self._subscriptions.list_by_role(target)
        sent = 0
        pruned = 0
        for sub in subs:
            status = self._sender.send(sub, message)
            if status is None:
                sent += 1
            elif status in _GONE_STATUSES:
                pruned += self._subscriptions.delete(sub.endpoint)
        log.info("push broadcast role=%s sent=%s total=%s pruned=%s", target, sent, len(subs), pruned)
        return {"sent": sent, "total": len(subs), "pruned": pruned}

    def notify_role(self, role: Role, *, title: str, body: str, url: str = PUSH_DEFAULT_URL) -> None:
        """Best-effort broadcast used after seller requests; never fails the caller."""
        if self._sender is None:
            return
        try:
            self.broadcast(role=role.value, title=title, body=body, url=url)
        except Exception:
            log.exception("push notification to %s failed", role.value)
