from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import mysql.connector
from mysql.connector import pooling

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 0

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "shift_attendance_db")),
            pool_size=int(db_config.get("pool_size", 0) or 0),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
        }
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class ConnectionFactory:
    """Hands out one connection per repository call.

    With ``pool_size`` > 0 connections come from a mysql-connector pool and
    ``close()`` returns them to it; otherwise each call opens a new one.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        if self._config.pool_size <= 0:
            return mysql.connector.connect(**self._config.connect_kwargs())

        if self._pool is None:
            logger.info("Opening MySQL pool size=%s db=%s", self._config.pool_size, self._config.database)
            self._pool = pooling.MySQLConnectionPool(
                pool_name="shift_attendance",
                pool_size=self._config.pool_size,
                **self._config.connect_kwargs(),
            )
        return self._pool.get_connection()
