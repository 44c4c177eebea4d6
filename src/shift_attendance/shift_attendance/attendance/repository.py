from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date, staff_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert a record and return attendance_id.

        The (staff_id, work_date) unique key rejects a second record for the same day.
        """

        raise NotImplementedError

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
        raise NotImplementedError
