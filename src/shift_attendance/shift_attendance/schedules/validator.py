from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Mapping, Optional

from ..common.clock import Clock
from ..common.datetime_utils import start_of_day, whole_hours, whole_minutes
from ..core.constants import ADMIN_LEAD_MINUTES, MAX_SHIFTS_PER_DAY, STAFF_LEAD_HOURS
from ..core.enums import CreatedBy, ErrorCode, ShiftType
from ..core.exceptions import DomainError, StateConflict, TimingViolation
from ..shifts.calendar import SHIFT_CALENDAR, require_shift_definition
from ..shifts.model import ShiftDefinition
from .repository import ScheduleRepository

_ERROR_KIND: Mapping[ErrorCode, type[DomainError]] = {
    ErrorCode.PAST_DATE: TimingViolation,
    ErrorCode.SHIFT_ALREADY_STARTED: TimingViolation,
    ErrorCode.INSUFFICIENT_LEAD_TIME: TimingViolation,
    ErrorCode.DUPLICATE_ASSIGNMENT: StateConflict,
    ErrorCode.DAILY_LIMIT_EXCEEDED: StateConflict,
    ErrorCode.FULL_DAY_CONFLICT: StateConflict,
}


@dataclass(frozen=True)
class Rejection:
    """Why a candidate assignment may not be created."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_error(self) -> DomainError:
        kind = _ERROR_KIND.get(self.code, DomainError)
        return kind(self.message, code=self.code, details=self.details)


class ScheduleConstraintValidator:
    """Decides whether (staff, date, shift) may be assigned; the first failing rule wins.

    Rules, in order:
      1. date before today                                   -> PAST_DATE
      2. today and the nominal start already passed          -> SHIFT_ALREADY_STARTED
      3. lead time: admin needs ``admin_lead_minutes`` before
         the nominal start, staff needs ``staff_lead_hours``
         before midnight of the date                         -> INSUFFICIENT_LEAD_TIME
      4. the exact (staff, date, shift) exists in any status -> DUPLICATE_ASSIGNMENT
      5. ``max_shifts_per_day`` active assignments already   -> DAILY_LIMIT_EXCEEDED
      6. staff only: full_day next to any other shift        -> FULL_DAY_CONFLICT
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        clock: Clock,
        *,
        calendar: Mapping[ShiftType, ShiftDefinition] = SHIFT_CALENDAR,
        admin_lead_minutes: int = ADMIN_LEAD_MINUTES,
        staff_lead_hours: int = STAFF_LEAD_HOURS,
        max_shifts_per_day: int = MAX_SHIFTS_PER_DAY,
    ):
        self._schedules = schedules
        self._clock = clock
        self._calendar = calendar
        self._admin_lead_minutes = int(admin_lead_minutes)
        self._staff_lead_hours = int(staff_lead_hours)
        self.max_shifts_per_day = int(max_shifts_per_day)

    def hours_until_date(self, work_date: date) -> int:
        return whole_hours(start_of_day(work_date) - self._clock.now())

    def staff_lead_time_ok(self, work_date: date) -> bool:
        return self.hours_until_date(work_date) >= self._staff_lead_hours

    def validate(
        self,
        *,
        staff_id: int,
        work_date: date,
        shift: ShiftType,
        requested_by: CreatedBy,
    ) -> Optional[Rejection]:
        now = self._clock.now()
        definition = require_shift_definition(shift, self._calendar)
        shift_start, _ = definition.window(work_date)

        if work_date < now.date():
            return Rejection(
                ErrorCode.PAST_DATE,
                "Không thể tạo lịch làm việc cho ngày trong quá khứ",
                {"work_date": work_date.isoformat(), "today": now.date().isoformat()},
            )

        if work_date == now.date() and now > shift_start:
            return Rejection(
                ErrorCode.SHIFT_ALREADY_STARTED,
                f"{definition.label or shift.value} đã bắt đầu, không thể tạo lịch",
                {"shift_start": shift_start.isoformat(sep=" ")},
            )

        rejection = self._check_lead_time(now=now, work_date=work_date, shift_start=shift_start, requested_by=requested_by)
        if rejection:
            return rejection

        if self._schedules.find_exact(staff_id=staff_id, work_date=work_date, shift=shift):
            return Rejection(
                ErrorCode.DUPLICATE_ASSIGNMENT,
                "Nhân viên đã có lịch làm việc cho ca này",
                {"staff_id": staff_id, "work_date": work_date.isoformat(), "shift": shift.value},
            )

        active = [a for a in self._schedules.list_for_staff_and_date(staff_id=staff_id, work_date=work_date) if a.is_active]
        if len(active) >= self.max_shifts_per_day:
            return Rejection(
                ErrorCode.DAILY_LIMIT_EXCEEDED,
                f"Nhân viên đã có {len(active)} ca trong ngày này. Tối đa {self.max_shifts_per_day} ca/ngày",
                {"existing_count": len(active), "max_shifts_per_day": self.max_shifts_per_day},
            )

        if requested_by == CreatedBy.STAFF and active:
            if shift == ShiftType.FULL_DAY:
                return Rejection(
                    ErrorCode.FULL_DAY_CONFLICT,
                    "Không thể đăng ký ca cả ngày khi đã có ca khác trong ngày",
                    {"existing_shifts": [a.shift.value for a in active]},
                )
            if any(a.shift == ShiftType.FULL_DAY for a in active):
                return Rejection(
                    ErrorCode.FULL_DAY_CONFLICT,
                    "Đã đăng ký ca cả ngày, không thể đăng ký thêm ca khác",
                    {"existing_shifts": [a.shift.value for a in active]},
                )

        return None

    def _check_lead_time(self, *, now, work_date: date, shift_start, requested_by: CreatedBy) -> Optional[Rejection]:
        if requested_by == CreatedBy.ADMIN:
            if now > shift_start - timedelta(minutes=self._admin_lead_minutes):
                minutes_until_start = whole_minutes(shift_start - now)
                return Rejection(
                    ErrorCode.INSUFFICIENT_LEAD_TIME,
                    f"Phải tạo lịch trước giờ vào ca ít nhất {self._admin_lead_minutes} phút",
                    {"minutes_until_start": minutes_until_start, "required_minutes": self._admin_lead_minutes},
                )
            return None

        hours_until = whole_hours(start_of_day(work_date) - now)
        if hours_until < self._staff_lead_hours:
            return Rejection(
                ErrorCode.INSUFFICIENT_LEAD_TIME,
                f"Phải đăng ký trước ít nhất {self._staff_lead_hours} giờ",
                {"hours_until_date": hours_until, "required_hours": self._staff_lead_hours},
            )
        return None
