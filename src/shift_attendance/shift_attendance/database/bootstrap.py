from __future__ import annotations

import logging
import re
from importlib import resources
from pathlib import Path
from typing import Optional

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

# schema.sql names its own database; the configured one is used instead.
_SKIPPED = re.compile(r"^(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def schema_statements(sql: str) -> list[str]:
    """Split a schema file into statements.

    ``--`` comment lines are dropped, as are ``CREATE DATABASE`` and ``USE``.
    Statements end with ``;`` and must not contain one inside a literal.
    """
    body = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    statements = []
    for chunk in body.split(";"):
        stmt = chunk.strip()
        if stmt and not _SKIPPED.match(stmt):
            statements.append(stmt)
    return statements


def load_schema(schema_path: Optional[str | Path] = None) -> str:
    """Read schema_path, or the schema.sql shipped inside the package."""
    if schema_path is not None:
        return Path(schema_path).read_text(encoding="utf-8")
    package = __package__.rpartition(".")[0]
    return (resources.files(package) / "database" / "schema.sql").read_text(encoding="utf-8")


def apply_schema(db_config: dict, *, schema_path: Optional[str | Path] = None) -> int:
    """Create the configured database if needed and run the schema against it."""
    config = DBConfig.from_dict(db_config)
    statements = schema_statements(load_schema(schema_path))

    conn = mysql.connector.connect(**config.connect_kwargs(with_database=False))
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        cur.execute(f"USE `{config.database}`")
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()

    logger.info("Applied %d schema statements to %s", len(statements), config.database)
    return len(statements)
