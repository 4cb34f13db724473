from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AdminHoursStatus, SellerHoursStatus
from ..database.connection import DatabaseConnection
from ..database.postgres_base import as_float, db_cursor, fetchall, fetchone
from .model import MonthlyAttestation
from .repository import AttestationRepository

_COLUMNS = (
    "id, seller_id, month_start, computed_hours, seller_status, seller_correction_hours, "
    "seller_comment, admin_status, admin_comment, final_hours, updated_at"
)


def _row_to_attestation(r: dict) -> MonthlyAttestation:
    return MonthlyAttestation(
        attestation_id=int(r["id"]),
        seller_id=str(r["seller_id"]),
        month_start=r["month_start"],
        computed_hours=as_float(r.get("computed_hours")) or 0.0,
        seller_status=SellerHoursStatus(r.get("seller_status") or "pending"),
        seller_correction_hours=as_float(r.get("seller_correction_hours")),
        seller_comment=r.get("seller_comment"),
        admin_status=AdminHoursStatus(r.get("admin_status") or "pending"),
        admin_comment=r.get("admin_comment"),
        final_hours=as_float(r.get("final_hours")),
        updated_at=r.get("updated_at"),
    )


class PostgresAttestationRepository(AttestationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, attestation_id: int) -> Optional[MonthlyAttestation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM monthly_hours_attestations WHERE id=%s", (int(attestation_id),))
            r = fetchone(cur)
            return _row_to_attestation(r) if r else None

    def get_for(self, *, seller_id: str, month_start: date) -> Optional[MonthlyAttestation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM monthly_hours_attestations WHERE seller_id=%s AND month_start=%s",
                (str(seller_id), month_start),
            )
            r = fetchone(cur)
            return _row_to_attestation(r) if r else None

    def list(self, *, month_start: Optional[date] = None, seller_id: Optional[str] = None) -> Sequence[MonthlyAttestation]:
        clauses = ["1=1"]
        params: list[object] = []
        if month_start is not None:
            clauses.append("month_start=%s")
            params.append(month_start)
        if seller_id is not None:
            clauses.append("seller_id=%s")
            params.append(str(seller_id))
        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM monthly_hours_attestations WHERE {where} ORDER BY month_start DESC",
                tuple(params),
            )
            return [_row_to_attestation(r) for r in fetchall(cur)]

    def insert(self, *, seller_id: str, month_start: date, computed_hours: float) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO monthly_hours_attestations(seller_id, month_start, computed_hours, updated_at)
                VALUES(%s,%s,%s,now())
                ON CONFLICT (seller_id, month_start) DO UPDATE SET computed_hours=EXCLUDED.computed_hours
                RETURNING id
                """,
                (str(seller_id), month_start, float(computed_hours)),
            )
            return int(fetchone(cur)["id"])

    def update_computed(self, attestation_id: int, *, computed_hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE monthly_hours_attestations
                SET computed_hours=%s, seller_status='pending', seller_correction_hours=NULL,
                    admin_status='pending', final_hours=NULL, updated_at=now()
                WHERE id=%s AND admin_status<>'approved'
                """,
                (float(computed_hours), int(attestation_id)),
            )
            return cur.rowcount > 0

    def respond(
        self,
        attestation_id: int,
        *,
        seller_status: SellerHoursStatus,
        correction_hours: Optional[float],
        comment: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE monthly_hours_attestations
                SET seller_status=%s, seller_correction_hours=%s, seller_comment=%s,
                    admin_status='pending', updated_at=now()
                WHERE id=%s AND admin_status<>'approved'
                """,
                (seller_status.value, correction_hours, comment, int(attestation_id)),
            )
            return cur.rowcount > 0

    def decide(
        self,
        attestation_id: int,
        *,
        admin_status: AdminHoursStatus,
        comment: Optional[str],
        final_hours: Optional[float],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE monthly_hours_attestations
                SET admin_status=%s, admin_comment=%s, final_hours=%s, updated_at=now()
                WHERE id=%s AND admin_status='pending'
                """,
                (admin_status.value, comment, final_hours, int(attestation_id)),
            )
            return cur.rowcount > 0
