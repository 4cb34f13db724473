from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..core.enums import ShiftCode
from ..database.connection import DatabaseConnection
from ..database.postgres_base import db_cursor, fetchall
from .model import ShiftSlot
from .repository import ShiftRepository

log = logging.getLogger(__name__)

_UPSERT_SQL = """
    INSERT INTO shifts(date, shift_code, seller_id)
    VALUES(%s,%s,%s)
    ON CONFLICT (date, shift_code) DO UPDATE SET seller_id=EXCLUDED.seller_id
"""


def _row_to_slot(r: dict) -> ShiftSlot:
    return ShiftSlot(
        day=r["date"],
        shift_code=ShiftCode(r["shift_code"]),
        seller_id=(str(r["seller_id"]) if r.get("seller_id") else None),
    )


class PostgresShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, *, day: date, shift_code: ShiftCode, seller_id: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_UPSERT_SQL, (day, shift_code.value, seller_id))

    def upsert_many(self, slots: Sequence[ShiftSlot]) -> int:
        if not slots:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            for s in slots:
                cur.execute(_UPSERT_SQL, (s.day, s.shift_code.value, s.seller_id))
        return len(slots)

    def list_range(self, start: date, end: date, *, seller_id: Optional[str] = None) -> Sequence[ShiftSlot]:
        clauses = ["date >= %s", "date <= %s"]
        params: list[object] = [start, end]
        if seller_id is not None:
            clauses.append("seller_id=%s")
            params.append(str(seller_id))
        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT date, shift_code, seller_id FROM shifts WHERE {where} ORDER BY date ASC",
                tuple(params),
            )
            return [_row_to_slot(r) for r in fetchall(cur)]

    def reassign_if(self, *, day: date, shift_code: ShiftCode, expected_seller_id: str, new_seller_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shifts SET seller_id=%s
                WHERE date=%s AND shift_code=%s AND seller_id=%s
                """,
                (str(new_seller_id), day, shift_code.value, str(expected_seller_id)),
            )
            moved = cur.rowcount > 0
        if not moved:
            log.warning("shift %s %s no longer held by %s", day, shift_code.value, expected_seller_id)
        return moved
