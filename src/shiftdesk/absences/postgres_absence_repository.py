from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.postgres_base import db_cursor, fetchall, fetchone
from .model import Absence
from .repository import AbsenceRepository

_COLUMNS = "id, seller_id, date, status, reason, admin_forced, created_at"


def _row_to_absence(r: dict) -> Absence:
    return Absence(
        absence_id=int(r["id"]),
        seller_id=str(r["seller_id"]),
        day=r["date"],
        status=RequestStatus(r["status"]),
        reason=r.get("reason"),
        admin_forced=bool(r.get("admin_forced")),
        created_at=r.get("created_at"),
    )


class PostgresAbsenceRepository(AbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        seller_id: str,
        day: date,
        reason: Optional[str],
        status: RequestStatus = RequestStatus.PENDING,
        admin_forced: bool = False,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absences(seller_id, date, reason, status, admin_forced)
                VALUES(%s,%s,%s,%s,%s)
                RETURNING id
                """,
                (str(seller_id), day, reason, status.value, bool(admin_forced)),
            )
            return int(fetchone(cur)["id"])

    def get(self, absence_id: int) -> Optional[Absence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM absences WHERE id=%s", (int(absence_id),))
            r = fetchone(cur)
            return _row_to_absence(r) if r else None

    def list(
        self,
        *,
        seller_id: Optional[str] = None,
        statuses: Optional[Sequence[RequestStatus]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Absence]:
        clauses = ["1=1"]
        params: list[object] = []
        if seller_id is not None:
            clauses.append("seller_id=%s")
            params.append(str(seller_id))
        if statuses:
            clauses.append("status = ANY(%s)")
            params.append([s.value for s in statuses])
        if start is not None:
            clauses.append("date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("date <= %s")
            params.append(end)
        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM absences WHERE {where} ORDER BY date ASC, created_at ASC",
                tuple(params),
            )
            return [_row_to_absence(r) for r in fetchall(cur)]

    def decide(self, absence_id: int, *, status: RequestStatus, expected: RequestStatus = RequestStatus.PENDING) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE absences SET status=%s WHERE id=%s AND status=%s",
                (status.value, int(absence_id), expected.value),
            )
            return cur.rowcount > 0

    def delete_many(self, absence_ids: Sequence[int]) -> int:
        ids = [int(i) for i in absence_ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM absences WHERE id = ANY(%s)", (ids,))
            return cur.rowcount
