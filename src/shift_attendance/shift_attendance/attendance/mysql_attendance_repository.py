from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, ErrorCode
from ..core.exceptions import StateConflict
from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, is_duplicate_key, to_hours, to_time
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, staff_id, work_date, schedule_id, time_in, time_out, hours_worked, status, note"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        staff_id=int(r["staff_id"]),
        work_date=r["work_date"],
        schedule_id=int(r["schedule_id"]) if r.get("schedule_id") is not None else None,
        time_in=to_time(r.get("time_in")),
        time_out=to_time(r.get("time_out")),
        hours_worked=to_hours(r.get("hours_worked")),
        status=AttendanceStatus(r["status"]),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE staff_id=%s AND work_date=%s
                """,
                (int(staff_id), work_date),
            )
            r = cur.fetchone()
            return _row_to_record(r) if r else None

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE work_date=%s ORDER BY staff_id ASC",
                (work_date,),
            )
            return [_row_to_record(r) for r in cur.fetchall()]

    def list_range(self, *, start: date, end: date, staff_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC, staff_id ASC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in cur.fetchall()]

    def create_record(
        self,
        *,
        staff_id: int,
        work_date: date,
        schedule_id: Optional[int],
        time_in: Optional[time],
        time_out: Optional[time],
        hours_worked: float,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as cur:
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_records(staff_id, work_date, schedule_id, time_in, time_out, hours_worked, status, note)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(staff_id), work_date, schedule_id, time_in, time_out, hours_worked, status.value, note),
                )
            except Exception as e:
                if is_duplicate_key(e):
                    raise StateConflict(
                        "Đã có bản ghi chấm công cho ngày này",
                        code=ErrorCode.ALREADY_CLOCKED_IN,
                        details={"staff_id": int(staff_id), "work_date": work_date.isoformat()},
                    ) from e
                raise
            return int(cur.lastrowid)

    def update_record(
        self,
        *,
        attendance_id: int,
        schedule_id: Optional[int],
        time_in: Optional[time],
        time_out: Optional[time],
        hours_worked: float,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                UPDATE attendance_records
                SET schedule_id=%s, time_in=%s, time_out=%s, hours_worked=%s, status=%s, note=%s
                WHERE attendance_id=%s
                """,
                (schedule_id, time_in, time_out, hours_worked, status.value, note, int(attendance_id)),
            )
            return cur.rowcount > 0
