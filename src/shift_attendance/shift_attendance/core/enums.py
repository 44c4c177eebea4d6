from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò người dùng (caller identity do tầng ngoài cung cấp)."""

    ADMIN = "admin"
    KITCHEN = "kitchen"
    WAITER = "waiter"


class ShiftType(str, Enum):
    """Ca làm việc cố định của nhà hàng."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"
    FULL_DAY = "full_day"


class AttendanceStatus(str, Enum):
    """Trạng thái chấm công lưu trong CSDL."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class ClockState(str, Enum):
    """Where a (staff, date) attendance record is in the clock-in/clock-out cycle."""

    NO_RECORD = "no_record"
    CLOCKED_IN = "clocked_in"
    CLOCKED_OUT = "clocked_out"


class ScheduleStatus(str, Enum):
    """Trạng thái lịch làm việc (phân ca)."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self in (ScheduleStatus.SCHEDULED, ScheduleStatus.CONFIRMED)


class CreatedBy(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


class ErrorCode(str, Enum):
    """Machine-readable reason attached to every domain error."""

    INVALID_INPUT = "INVALID_INPUT"

    ALREADY_CLOCKED_IN = "ALREADY_CLOCKED_IN"
    ALREADY_CLOCKED_OUT = "ALREADY_CLOCKED_OUT"
    DUPLICATE_ASSIGNMENT = "DUPLICATE_ASSIGNMENT"
    DAILY_LIMIT_EXCEEDED = "DAILY_LIMIT_EXCEEDED"
    FULL_DAY_CONFLICT = "FULL_DAY_CONFLICT"
    SCHEDULE_MISMATCH = "SCHEDULE_MISMATCH"
    INVALID_TIME_ORDER = "INVALID_TIME_ORDER"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    TOO_EARLY = "TOO_EARLY"
    TOO_LATE = "TOO_LATE"
    PAST_DATE = "PAST_DATE"
    SHIFT_ALREADY_STARTED = "SHIFT_ALREADY_STARTED"
    INSUFFICIENT_LEAD_TIME = "INSUFFICIENT_LEAD_TIME"

    NO_CONFIRMED_SCHEDULE = "NO_CONFIRMED_SCHEDULE"
    NO_SCHEDULE = "NO_SCHEDULE"
    SCHEDULE_NOT_FOUND = "SCHEDULE_NOT_FOUND"
    STAFF_NOT_FOUND = "STAFF_NOT_FOUND"

    PAYROLL_FAILED = "PAYROLL_FAILED"
    STORAGE_FAILED = "STORAGE_FAILED"
