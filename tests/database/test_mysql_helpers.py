from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

import mysql.connector
import pytest

from src.shift_attendance.shift_attendance.database.bootstrap import load_schema, schema_statements
from src.shift_attendance.shift_attendance.database.connection import ConnectionFactory, DBConfig
from src.shift_attendance.shift_attendance.database.mysql_base import db_cursor, is_duplicate_key, to_hours, to_time


def test_schema_statements_skip_database_selection():
    statements = schema_statements(load_schema())

    assert [s.split("(")[0].split()[-1] for s in statements] == ["staff", "schedules", "attendance_records"]
    assert "uq_schedules_staff_date_shift" in statements[1]
    assert "uq_attendance_staff_date" in statements[2]


def test_load_schema_reads_bundled_file_or_explicit_path(tmp_path):
    assert "uq_attendance_staff_date" in load_schema()

    custom = tmp_path / "custom.sql"
    custom.write_text("CREATE TABLE t (id INT);", encoding="utf-8")
    assert load_schema(custom) == "CREATE TABLE t (id INT);"
    assert load_schema(str(custom)) == "CREATE TABLE t (id INT);"


def test_schema_statements_drop_comment_lines():
    sql = "-- a; comment\nCREATE TABLE a (id INT);\n\n  -- another\nCREATE TABLE b (id INT)"

    assert schema_statements(sql) == ["CREATE TABLE a (id INT)", "CREATE TABLE b (id INT)"]


def test_duplicate_key_detection():
    assert is_duplicate_key(mysql.connector.IntegrityError(msg="Duplicate entry", errno=1062))
    assert not is_duplicate_key(mysql.connector.IntegrityError(msg="FK failed", errno=1452))
    assert not is_duplicate_key(RuntimeError("Duplicate entry"))


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        (time(6, 5), time(6, 5)),
        (timedelta(hours=22, minutes=30), time(22, 30)),
        ("08:15:09", time(8, 15, 9)),
    ],
)
def test_to_time(value, expected):
    assert to_time(value) == expected


def test_to_hours():
    assert to_hours(None) == 0.0
    assert to_hours(Decimal("5.50")) == 5.5
    assert to_hours(3.005) == 3.01


def test_db_config_defaults_and_kwargs():
    config = DBConfig.from_dict({"host": "db", "user": "app", "password": "pw", "database": "shifts"})

    assert config.port == 3306
    assert config.pool_size == 0
    assert config.connect_kwargs(with_database=False) == {"host": "db", "port": 3306, "user": "app", "password": "pw"}
    assert config.connect_kwargs()["database"] == "shifts"


class _FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class _FakeConnection:
    def __init__(self):
        self.events: list[str] = []
        self.cursor_obj = _FakeCursor()

    def cursor(self, **kwargs):
        return self.cursor_obj

    def commit(self):
        self.events.append("commit")

    def rollback(self):
        self.events.append("rollback")

    def close(self):
        self.events.append("close")


def _factory(monkeypatch):
    conn = _FakeConnection()
    monkeypatch.setattr(mysql.connector, "connect", lambda **kwargs: conn)
    return ConnectionFactory(DBConfig.from_dict({})), conn


def test_db_cursor_commits_on_success(monkeypatch):
    factory, conn = _factory(monkeypatch)

    with db_cursor(factory) as cur:
        assert cur is conn.cursor_obj

    assert conn.events == ["commit", "close"]
    assert conn.cursor_obj.closed


def test_db_cursor_rolls_back_and_reraises(monkeypatch):
    factory, conn = _factory(monkeypatch)

    with pytest.raises(ValueError):
        with db_cursor(factory):
            raise ValueError("boom")

    assert conn.events == ["rollback", "close"]
