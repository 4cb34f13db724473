from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .connection import DatabaseConnection
from .postgres_base import db_cursor, fetchall

log = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().with_name("schema.sql")


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: Optional[Path] = None) -> None:
    # psycopg2 runs a multi-statement script in a single execute()
    sql = Path(schema_path or SCHEMA_PATH).read_text(encoding="utf-8")
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(sql)
    log.info("schema applied from %s", schema_path or SCHEMA_PATH)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(
            """
            SELECT table_name FROM information_schema.tables
            WHERE table_schema = current_schema() ORDER BY table_name
            """
        )
        return [r["table_name"] for r in fetchall(cur)]
