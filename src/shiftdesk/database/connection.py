from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import psycopg2


@dataclass
class DBConfig:
    dsn: Optional[str] = None
    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: str = ""
    database: str = "postgres"
    sslmode: Optional[str] = None

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            dsn=(db_config.get("dsn") or None),
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 5432)),
            user=str(db_config.get("user", "postgres")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "postgres")),
            sslmode=db_config.get("sslmode") or None,
        )

    def describe(self) -> str:
        if self.dsn:
            return "dsn"
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        if self._config.dsn:
            return psycopg2.connect(self._config.dsn)
        kwargs = {}
        if self._config.sslmode:
            kwargs["sslmode"] = self._config.sslmode
        return psycopg2.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            dbname=self._config.database,
            **kwargs,
        )
