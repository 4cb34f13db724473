from __future__ import annotations

from typing import Protocol, Sequence

from .model import PushSubscription


class PushSubscriptionRepository(Protocol):
    def upsert(self, subscription: PushSubscription) -> None:
        raise NotImplementedError

    def delete(self, endpoint: str) -> int:
        raise NotImplementedError

    def list_by_role(self, role: str) -> Sequence[PushSubscription]:
        raise NotImplementedError
