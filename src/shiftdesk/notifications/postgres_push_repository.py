from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.postgres_base import db_cursor, fetchall
from .model import PushSubscription
from .repository import PushSubscriptionRepository


class PostgresPushSubscriptionRepository(PushSubscriptionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, subscription: PushSubscription) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO push_subscriptions(endpoint, p256dh, auth, role, user_id)
                VALUES(%s,%s,%s,%s,%s)
                ON CONFLICT (endpoint) DO UPDATE SET
                    p256dh=EXCLUDED.p256dh, auth=EXCLUDED.auth,
                    role=EXCLUDED.role, user_id=EXCLUDED.user_id
                """,
                (
                    subscription.endpoint,
                    subscription.p256dh,
                    subscription.auth,
                    subscription.role,
                    subscription.user_id,
                ),
            )

    def delete(self, endpoint: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM push_subscriptions WHERE endpoint=%s", (endpoint,))
            return cur.rowcount

    def list_by_role(self, role: str) -> Sequence[PushSubscription]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT endpoint, p256dh, auth, role, user_id FROM push_subscriptions WHERE role=%s",
                (role,),
            )
            return [
                PushSubscription(
                    endpoint=r["endpoint"],
                    p256dh=r["p256dh"],
                    auth=r["auth"],
                    role=r["role"],
                    user_id=(str(r["user_id"]) if r.get("user_id") else None),
                )
                for r in fetchall(cur)
            ]
