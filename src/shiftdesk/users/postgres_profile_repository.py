from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.postgres_base import db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository


def _row_to_profile(r: dict) -> Profile:
    try:
        role = Role(r.get("role") or Role.SELLER.value)
    except ValueError:
        role = Role.SELLER
    return Profile(
        user_id=str(r["user_id"]),
        full_name=r.get("full_name"),
        role=role,
        active=bool(r.get("active", True)),
    )


class PostgresProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, full_name, role, active FROM profiles WHERE user_id=%s",
                (str(user_id),),
            )
            r = fetchone(cur)
            return _row_to_profile(r) if r else None

    def list_by_roles(self, roles: Sequence[Role], *, active_only: bool = False) -> Sequence[Profile]:
        clauses = ["COALESCE(role, 'seller') = ANY(%s)"]
        params: list[object] = [[r.value for r in roles]]
        if active_only:
            clauses.append("active IS TRUE")
        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, full_name, role, active
                FROM profiles
                WHERE {where}
                ORDER BY full_name ASC NULLS LAST
                """,
                tuple(params),
            )
            return [_row_to_profile(r) for r in fetchall(cur)]

    def names_by_ids(self, user_ids: Iterable[str]) -> dict[str, str]:
        ids = sorted({str(u) for u in user_ids if u})
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, full_name FROM profiles WHERE user_id::text = ANY(%s)",
                (ids,),
            )
            return {str(r["user_id"]): (r.get("full_name") or "-") for r in fetchall(cur)}

    def upsert(self, *, user_id: str, full_name: str, role: Role, active: bool = True) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(user_id, full_name, role, active)
                VALUES(%s,%s,%s,%s)
                ON CONFLICT (user_id) DO UPDATE
                SET full_name=EXCLUDED.full_name, role=EXCLUDED.role, active=EXCLUDED.active
                """,
                (str(user_id), full_name, role.value, bool(active)),
            )

    def update(self, user_id: str, *, full_name: Optional[str] = None, active: Optional[bool] = None) -> bool:
        sets: list[str] = []
        params: list[object] = []
        if full_name is not None:
            sets.append("full_name=%s")
            params.append(full_name)
        if active is not None:
            sets.append("active=%s")
            params.append(bool(active))
        if not sets:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE profiles SET {', '.join(sets)} WHERE user_id=%s",
                tuple(params + [str(user_id)]),
            )
            return cur.rowcount > 0
