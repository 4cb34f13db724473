from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import ShiftCode
from ..database.connection import DatabaseConnection
from ..database.postgres_base import db_cursor, fetchall, fetchone
from .model import DailyCheckin
from .repository import CheckinRepository

_COLUMNS = "day, seller_id, shift_code, code_hash, issued_at, issued_by, confirmed_at, late_minutes, early_minutes"


def _row_to_checkin(r: dict) -> DailyCheckin:
    code = r.get("shift_code")
    return DailyCheckin(
        day=r["day"],
        seller_id=str(r["seller_id"]),
        shift_code=ShiftCode(code) if code else None,
        code_hash=r.get("code_hash"),
        issued_at=r.get("issued_at"),
        issued_by=(str(r["issued_by"]) if r.get("issued_by") else None),
        confirmed_at=r.get("confirmed_at"),
        late_minutes=int(r.get("late_minutes") or 0),
        early_minutes=int(r.get("early_minutes") or 0),
    )


class PostgresCheckinRepository(CheckinRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, day: date, seller_id: str) -> Optional[DailyCheckin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM daily_checkins WHERE day=%s AND seller_id=%s",
                (day, str(seller_id)),
            )
            r = fetchone(cur)
            return _row_to_checkin(r) if r else None

    def upsert_issued(
        self,
        *,
        day: date,
        seller_id: str,
        shift_code: ShiftCode,
        code_hash: str,
        issued_by: str,
        issued_at: datetime,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_checkins(
                    day, seller_id, shift_code, code_hash, issued_at, issued_by,
                    confirmed_at, late_minutes, early_minutes
                )
                VALUES(%s,%s,%s,%s,%s,%s,NULL,0,0)
                ON CONFLICT (day, seller_id) DO UPDATE SET
                    shift_code=EXCLUDED.shift_code,
                    code_hash=EXCLUDED.code_hash,
                    issued_at=EXCLUDED.issued_at,
                    issued_by=EXCLUDED.issued_by,
                    confirmed_at=NULL,
                    late_minutes=0,
                    early_minutes=0
                """,
                (day, str(seller_id), shift_code.value, code_hash, issued_at, str(issued_by)),
            )

    def confirm(self, *, day: date, seller_id: str, confirmed_at: datetime, late_minutes: int, early_minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE daily_checkins
                SET confirmed_at=%s, late_minutes=%s, early_minutes=%s
                WHERE day=%s AND seller_id=%s AND confirmed_at IS NULL
                """,
                (confirmed_at, int(late_minutes), int(early_minutes), day, str(seller_id)),
            )
            return cur.rowcount > 0

    def list_range(self, start: date, end: date, *, seller_id: Optional[str] = None) -> Sequence[DailyCheckin]:
        clauses = ["day >= %s", "day <= %s"]
        params: list[object] = [start, end]
        if seller_id is not None:
            clauses.append("seller_id=%s")
            params.append(str(seller_id))
        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM daily_checkins WHERE {where} ORDER BY day ASC", tuple(params))
            return [_row_to_checkin(r) for r in fetchall(cur)]
