from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterator, Optional

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import parse_wall_time
from .connection import ConnectionFactory


@contextmanager
def db_cursor(conn_factory: ConnectionFactory) -> Iterator[Any]:
    """Dictionary cursor in its own transaction: commit on success, rollback on error."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=True, buffered=True)
    try:
        yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def is_duplicate_key(error: BaseException) -> bool:
    """True for an INSERT that hit one of the unique keys."""
    return isinstance(error, mysql.connector.IntegrityError) and error.errno == errorcode.ER_DUP_ENTRY


def to_time(value: Any) -> Optional[time]:
    # TIME columns arrive as timedelta from the C extension, time or str otherwise.
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)
    if isinstance(value, str):
        return parse_wall_time(value)
    raise TypeError(f"Unsupported MySQL TIME value: {value!r}")


def to_hours(value: Any) -> float:
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
