from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "kpt_attendance")),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict[str, Any]:
        """Arguments for mysql.connector.connect.

        Without the database name the connection reaches the server only,
        which schema bootstrap needs before the database exists.
        """

        kwargs: dict[str, Any] = dict(host=self.host, port=self.port, user=self.user, password=self.password)
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Process-wide connection factory for the directory store and audit log.

    Every store operation opens its own short-lived connection.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        # A changed config (other APP_ENV, tests) gets a fresh factory.
        if cls._instance is None or cls._instance._config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        return mysql.connector.connect(**self._config.connect_kwargs(with_database=with_database))
