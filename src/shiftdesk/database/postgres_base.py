from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import psycopg2.extras

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return dict(row) if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return [dict(r) for r in (rows or [])]


def as_float(value: Any) -> Optional[float]:
    # NUMERIC columns come back as Decimal.
    return None if value is None else float(value)
