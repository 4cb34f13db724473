from __future__ import annotations

import importlib

from dotenv import load_dotenv

from shiftdesk.config import get_settings_module
from shiftdesk.database.bootstrap import apply_schema, list_tables
from shiftdesk.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = DBConfig.from_dict(settings.DB_CONFIG)

    conn = DatabaseConnection.get_instance(db_config)
    apply_schema(conn)
    tables = list_tables(conn)
    print(f"OK: Applied schema.sql -> {db_config.describe()} (tables={len(tables)})")


if __name__ == "__main__":
    main()
