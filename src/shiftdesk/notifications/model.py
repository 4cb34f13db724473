from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PushSubscription:
    endpoint: str
    p256dh: str
    auth: str
    role: str
    user_id: Optional[str] = None

    def subscription_info(self) -> dict:
        return {"endpoint": self.endpoint, "keys": {"p256dh": self.p256dh, "auth": self.auth}}


@dataclass(frozen=True)
class PushMessage:
    title: str
    body: str
    url: str
    badge_count: int

    def payload(self) -> dict:
        return {"title": self.title, "body": self.body, "url": self.url, "badgeCount": self.badge_count}
