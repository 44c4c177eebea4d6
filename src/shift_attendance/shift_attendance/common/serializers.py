from __future__ import annotations

from typing import Any, Optional

from ..attendance.model import AttendanceRecord, ClockResult, TodayAttendance
from ..reports.service import ShiftCoverage, StaffMonthStats
from ..schedules.model import BatchResult, ScheduleAssignment
from ..schedules.service import AvailableShifts, DayConstraints
from ..shifts.calendar import shift_times
from .datetime_utils import format_wall_time


def assignment_to_dict(a: Optional[ScheduleAssignment]) -> Optional[dict[str, Any]]:
    if a is None:
        return None
    return {
        "schedule_id": a.schedule_id,
        "staff_id": a.staff_id,
        "work_date": a.work_date.isoformat(),
        "shift": a.shift.value,
        "status": a.status.value,
        "created_by": a.created_by.value,
        "reject_reason": a.reject_reason,
        "note": a.note,
        **shift_times(a.shift),
    }


def record_to_dict(r: Optional[AttendanceRecord]) -> Optional[dict[str, Any]]:
    if r is None:
        return None
    return {
        "attendance_id": r.attendance_id,
        "staff_id": r.staff_id,
        "work_date": r.work_date.isoformat(),
        "schedule_id": r.schedule_id,
        "time_in": format_wall_time(r.time_in),
        "time_out": format_wall_time(r.time_out),
        "hours_worked": r.hours_worked,
        "status": r.status.value,
        "clock_state": r.clock_state.value,
        "note": r.note,
    }


def clock_result_to_dict(result: ClockResult) -> dict[str, Any]:
    return {
        "attendance": record_to_dict(result.record),
        "schedule": assignment_to_dict(result.schedule),
        "start_time": format_wall_time(result.shift_start),
        "end_time": format_wall_time(result.shift_end),
        "auto_clock_in": result.auto_clock_in,
    }


def today_to_dict(today: TodayAttendance) -> dict[str, Any]:
    return {
        "work_date": today.work_date.isoformat(),
        "attendance": record_to_dict(today.record),
        "schedule": assignment_to_dict(today.schedule),
    }


def batch_result_to_dict(result: BatchResult) -> dict[str, Any]:
    return {
        "success": [assignment_to_dict(a) for a in result.successes],
        "errors": [
            {
                "staff_id": f.staff_id,
                "work_date": f.work_date.isoformat(),
                "shift": f.shift.value,
                "error": f.code.value,
                "message": f.message,
            }
            for f in result.failures
        ],
        "total": result.total,
    }


def available_shifts_to_dict(value: AvailableShifts) -> dict[str, Any]:
    return {
        "work_date": value.work_date.isoformat(),
        "can_register": value.can_register,
        "registered": [s.value for s in value.registered],
        "available": [s.value for s in value.available],
    }


def day_constraints_to_dict(value: DayConstraints) -> dict[str, Any]:
    return {
        "work_date": value.work_date.isoformat(),
        "shifts": [s.value for s in value.shifts],
        "count": value.count,
        "can_add_more": value.can_add_more,
    }


def staff_stats_to_dict(stats: StaffMonthStats) -> dict[str, Any]:
    return {
        "staff_id": stats.staff_id,
        "full_name": stats.full_name,
        "role": stats.role.value,
        "year": stats.year,
        "month": stats.month,
        **stats.summary.to_dict(),
    }


def coverage_to_dict(coverage: ShiftCoverage) -> dict[str, Any]:
    return {
        "shift": coverage.shift.value,
        "total": coverage.total,
        "by_role": {role.value: count for role, count in coverage.by_role.items()},
    }
