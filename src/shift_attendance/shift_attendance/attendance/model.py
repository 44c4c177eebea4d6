from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import AttendanceStatus, ClockState
from ..schedules.model import ScheduleAssignment


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi chấm công, tối đa một bản ghi cho mỗi (nhân viên, ngày)."""

    attendance_id: int
    staff_id: int
    work_date: date
    schedule_id: Optional[int]
    time_in: Optional[time]
    time_out: Optional[time]
    hours_worked: float
    status: AttendanceStatus
    note: Optional[str] = None

    @property
    def clock_state(self) -> ClockState:
        if self.time_in is None:
            return ClockState.NO_RECORD
        if self.time_out is None:
            return ClockState.CLOCKED_IN
        return ClockState.CLOCKED_OUT


@dataclass(frozen=True)
class ClockResult:
    """Outcome of clock-in/clock-out with the shift's nominal window echoed back."""

    record: AttendanceRecord
    schedule: ScheduleAssignment
    shift_start: time
    shift_end: time
    auto_clock_in: bool = False


@dataclass(frozen=True)
class TodayAttendance:
    work_date: date
    record: Optional[AttendanceRecord]
    schedule: Optional[ScheduleAssignment]
