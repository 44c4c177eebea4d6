from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import CreatedBy, ErrorCode, ScheduleStatus, ShiftType
from ..core.exceptions import StateConflict
from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, is_duplicate_key
from .model import ScheduleAssignment
from .repository import ScheduleRepository

_COLUMNS = "schedule_id, staff_id, work_date, shift, status, created_by, reject_reason, note"


def _row_to_schedule(r: dict) -> ScheduleAssignment:
    return ScheduleAssignment(
        schedule_id=int(r["schedule_id"]),
        staff_id=int(r["staff_id"]),
        work_date=r["work_date"],
        shift=ShiftType(r["shift"]),
        status=ScheduleStatus(r["status"]),
        created_by=CreatedBy(r["created_by"]),
        reject_reason=r.get("reject_reason"),
        note=r.get("note"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[ScheduleAssignment]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM schedules WHERE schedule_id=%s", (int(schedule_id),))
            r = cur.fetchone()
            return _row_to_schedule(r) if r else None

    def find_exact(self, *, staff_id: int, work_date: date, shift: ShiftType) -> Optional[ScheduleAssignment]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM schedules
                WHERE staff_id=%s AND work_date=%s AND shift=%s
                """,
                (int(staff_id), work_date, shift.value),
            )
            r = cur.fetchone()
            return _row_to_schedule(r) if r else None

    def list_for_staff_and_date(self, *, staff_id: int, work_date: date) -> Sequence[ScheduleAssignment]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM schedules
                WHERE staff_id=%s AND work_date=%s
                ORDER BY schedule_id ASC
                """,
                (int(staff_id), work_date),
            )
            return [_row_to_schedule(r) for r in cur.fetchall()]

    def list_for_date(
        self, *, work_date: date, statuses: Optional[Iterable[ScheduleStatus]] = None
    ) -> Sequence[ScheduleAssignment]:
        clauses = ["work_date=%s"]
        params: list[object] = [work_date]

        wanted = [s.value for s in statuses or []]
        if wanted:
            clauses.append(f"status IN ({', '.join(['%s'] * len(wanted))})")
            params.extend(wanted)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM schedules WHERE {where} ORDER BY schedule_id ASC",
                tuple(params),
            )
            return [_row_to_schedule(r) for r in cur.fetchall()]

    def list_range(self, *, start: date, end: date, staff_id: Optional[int] = None) -> Sequence[ScheduleAssignment]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM schedules WHERE {where} ORDER BY work_date ASC, staff_id ASC",
                tuple(params),
            )
            return [_row_to_schedule(r) for r in cur.fetchall()]

    def create(
        self,
        *,
        staff_id: int,
        work_date: date,
        shift: ShiftType,
        status: ScheduleStatus,
        created_by: CreatedBy,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as cur:
            try:
                cur.execute(
                    """
                    INSERT INTO schedules(staff_id, work_date, shift, status, created_by, note)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(staff_id), work_date, shift.value, status.value, created_by.value, note),
                )
            except Exception as e:
                if is_duplicate_key(e):
                    raise StateConflict(
                        "Nhân viên đã có lịch làm việc cho ca này",
                        code=ErrorCode.DUPLICATE_ASSIGNMENT,
                        details={"staff_id": int(staff_id), "work_date": work_date.isoformat(), "shift": shift.value},
                    ) from e
                raise
            return int(cur.lastrowid)

    def update_status(
        self,
        *,
        schedule_id: int,
        status: ScheduleStatus,
        reject_reason: Optional[str] = None,
        note: Optional[str] = None,
    ) -> bool:
        sets = ["status=%s"]
        params: list[object] = [status.value]
        if reject_reason is not None:
            sets.append("reject_reason=%s")
            params.append(reject_reason)
        if note is not None:
            sets.append("note=%s")
            params.append(note)
        params.append(int(schedule_id))

        with db_cursor(self._conn_factory) as cur:
            cur.execute(f"UPDATE schedules SET {', '.join(sets)} WHERE schedule_id=%s", tuple(params))
            return cur.rowcount > 0
