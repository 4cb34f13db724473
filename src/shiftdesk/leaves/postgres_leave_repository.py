from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.postgres_base import as_float, db_cursor, fetchall, fetchone
from .model import Leave, LeaveBalance
from .repository import LeaveBalanceRepository, LeaveRepository

_LEAVE_COLUMNS = "id, seller_id, start_date, end_date, status, reason, created_at"
_BALANCE_COLUMNS = (
    "seller_id, as_of, cp_acquired_n, cp_taken_n, cp_remaining_n, "
    "cp_acquired_n1, cp_taken_n1, cp_remaining_n1, updated_at, updated_by"
)


def _row_to_leave(r: dict) -> Leave:
    return Leave(
        leave_id=int(r["id"]),
        seller_id=str(r["seller_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=RequestStatus(r["status"]),
        reason=r.get("reason"),
        created_at=r.get("created_at"),
    )


def _row_to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        seller_id=str(r["seller_id"]),
        as_of=r.get("as_of"),
        cp_acquired_n=as_float(r.get("cp_acquired_n")) or 0.0,
        cp_taken_n=as_float(r.get("cp_taken_n")) or 0.0,
        cp_remaining_n=as_float(r.get("cp_remaining_n")) or 0.0,
        cp_acquired_n1=as_float(r.get("cp_acquired_n1")) or 0.0,
        cp_taken_n1=as_float(r.get("cp_taken_n1")) or 0.0,
        cp_remaining_n1=as_float(r.get("cp_remaining_n1")) or 0.0,
        updated_at=r.get("updated_at"),
        updated_by=(str(r["updated_by"]) if r.get("updated_by") else None),
    )


class PostgresLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, seller_id: str, start_date: date, end_date: date, reason: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(seller_id, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s)
                RETURNING id
                """,
                (str(seller_id), start_date, end_date, reason, RequestStatus.PENDING.value),
            )
            return int(fetchone(cur)["id"])

    def get(self, leave_id: int) -> Optional[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list(
        self,
        *,
        seller_id: Optional[str] = None,
        statuses: Optional[Sequence[RequestStatus]] = None,
        overlap_start: Optional[date] = None,
        overlap_end: Optional[date] = None,
    ) -> Sequence[Leave]:
        clauses = ["1=1"]
        params: list[object] = []
        if seller_id is not None:
            clauses.append("seller_id=%s")
            params.append(str(seller_id))
        if statuses:
            clauses.append("status = ANY(%s)")
            params.append([s.value for s in statuses])
        if overlap_start is not None:
            clauses.append("end_date >= %s")
            params.append(overlap_start)
        if overlap_end is not None:
            clauses.append("start_date <= %s")
            params.append(overlap_end)
        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE {where} ORDER BY start_date DESC, created_at DESC",
                tuple(params),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def decide(self, leave_id: int, *, status: RequestStatus, expected: RequestStatus = RequestStatus.PENDING) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leaves SET status=%s WHERE id=%s AND status=%s",
                (status.value, int(leave_id), expected.value),
            )
            return cur.rowcount > 0

    def delete(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leaves WHERE id=%s", (int(leave_id),))
            return cur.rowcount > 0


class PostgresLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, seller_id: str) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_BALANCE_COLUMNS} FROM leave_balances WHERE seller_id=%s", (str(seller_id),))
            r = fetchone(cur)
            return _row_to_balance(r) if r else None

    def list_all(self) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_BALANCE_COLUMNS} FROM leave_balances")
            return [_row_to_balance(r) for r in fetchall(cur)]

    def upsert(self, balance: LeaveBalance) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_balances(
                    seller_id, as_of, cp_acquired_n, cp_taken_n, cp_remaining_n,
                    cp_acquired_n1, cp_taken_n1, cp_remaining_n1, updated_at, updated_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,now(),%s)
                ON CONFLICT (seller_id) DO UPDATE SET
                    as_of=EXCLUDED.as_of,
                    cp_acquired_n=EXCLUDED.cp_acquired_n,
                    cp_taken_n=EXCLUDED.cp_taken_n,
                    cp_remaining_n=EXCLUDED.cp_remaining_n,
                    cp_acquired_n1=EXCLUDED.cp_acquired_n1,
                    cp_taken_n1=EXCLUDED.cp_taken_n1,
                    cp_remaining_n1=EXCLUDED.cp_remaining_n1,
                    updated_at=now(),
                    updated_by=EXCLUDED.updated_by
                """,
                (
                    balance.seller_id,
                    balance.as_of,
                    balance.cp_acquired_n,
                    balance.cp_taken_n,
                    balance.cp_remaining_n,
                    balance.cp_acquired_n1,
                    balance.cp_taken_n1,
                    balance.cp_remaining_n1,
                    balance.updated_by,
                ),
            )
