from __future__ import annotations

import logging
from typing import Optional, Sequence

from psycopg2 import errors

from ..core.enums import InterestStatus, ShiftCode
from ..database.connection import DatabaseConnection
from ..database.postgres_base import db_cursor, fetchall, fetchone
from .model import ReplacementInterest
from .repository import ReplacementRepository

log = logging.getLogger(__name__)

_COLUMNS = "id, absence_id, volunteer_id, status, accepted_shift_code, created_at"


def _row_to_interest(r: dict) -> ReplacementInterest:
    code = r.get("accepted_shift_code")
    return ReplacementInterest(
        interest_id=int(r["id"]),
        absence_id=int(r["absence_id"]),
        volunteer_id=str(r["volunteer_id"]),
        status=InterestStatus(r["status"]),
        accepted_shift_code=ShiftCode(code) if code else None,
        created_at=r.get("created_at"),
    )


class PostgresReplacementRepository(ReplacementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, absence_id: int, volunteer_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO replacement_interest(absence_id, volunteer_id, status)
                VALUES(%s,%s,%s)
                RETURNING id
                """,
                (int(absence_id), str(volunteer_id), InterestStatus.PENDING.value),
            )
            return int(fetchone(cur)["id"])

    def get(self, interest_id: int) -> Optional[ReplacementInterest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM replacement_interest WHERE id=%s", (int(interest_id),))
            r = fetchone(cur)
            return _row_to_interest(r) if r else None

    def list_for_absences(self, absence_ids: Sequence[int]) -> Sequence[ReplacementInterest]:
        ids = [int(i) for i in absence_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM replacement_interest WHERE absence_id = ANY(%s) ORDER BY created_at ASC",
                (ids,),
            )
            return [_row_to_interest(r) for r in fetchall(cur)]

    def accept(self, *, absence_id: int, volunteer_id: str, shift_code: ShiftCode) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE replacement_interest
                    SET status=%s, accepted_shift_code=%s
                    WHERE absence_id=%s AND volunteer_id=%s
                    """,
                    (InterestStatus.ACCEPTED.value, shift_code.value, int(absence_id), str(volunteer_id)),
                )
                if cur.rowcount == 0:
                    cur.execute(
                        """
                        INSERT INTO replacement_interest(absence_id, volunteer_id, status, accepted_shift_code)
                        VALUES(%s,%s,%s,%s)
                        """,
                        (int(absence_id), str(volunteer_id), InterestStatus.ACCEPTED.value, shift_code.value),
                    )
        except errors.UniqueViolation:
            log.warning("absence %s already has an accepted volunteer", absence_id)
            return False
        return True

    def decline(self, interest_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE replacement_interest SET status=%s WHERE id=%s AND status=%s",
                (InterestStatus.DECLINED.value, int(interest_id), InterestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def decline_others(self, *, absence_id: int, keep_interest_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE replacement_interest SET status=%s
                WHERE absence_id=%s AND id<>%s AND status=%s
                """,
                (InterestStatus.DECLINED.value, int(absence_id), int(keep_interest_id), InterestStatus.PENDING.value),
            )
            return cur.rowcount

    def delete_for_absences(self, absence_ids: Sequence[int]) -> int:
        ids = [int(i) for i in absence_ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM replacement_interest WHERE absence_id = ANY(%s)", (ids,))
            return cur.rowcount
