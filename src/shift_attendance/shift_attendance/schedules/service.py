from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Optional

from ..common.clock import Clock
from ..common.validators import optional_note, require_date, require_id, require_shift
from ..core.constants import CANCELLED_BY_STAFF_NOTE, DEFAULT_REJECT_REASON, STAFF_CANCEL_LEAD_HOURS
from ..core.enums import CreatedBy, ErrorCode, ScheduleStatus, ShiftType
from ..core.exceptions import NotFound, StateConflict, TimingViolation, ValidationError
from .model import ScheduleAssignment
from .repository import ScheduleRepository
from .validator import ScheduleConstraintValidator

logger = logging.getLogger(__name__)

# Admin edit: allowed status transitions.
_ADMIN_TRANSITIONS: dict[ScheduleStatus, frozenset[ScheduleStatus]] = {
    ScheduleStatus.SCHEDULED: frozenset({ScheduleStatus.CONFIRMED, ScheduleStatus.REJECTED}),
    ScheduleStatus.CONFIRMED: frozenset({ScheduleStatus.REJECTED}),
    ScheduleStatus.REJECTED: frozenset(),
    ScheduleStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class AvailableShifts:
    work_date: date
    can_register: bool
    registered: list[ShiftType]
    available: list[ShiftType]


@dataclass(frozen=True)
class DayConstraints:
    work_date: date
    shifts: list[ShiftType]
    count: int
    can_add_more: bool


class ScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        validator: ScheduleConstraintValidator,
        clock: Clock,
        *,
        staff_cancel_lead_hours: int = STAFF_CANCEL_LEAD_HOURS,
    ):
        self._schedules = schedules
        self._validator = validator
        self._clock = clock
        self._staff_cancel_lead_hours = int(staff_cancel_lead_hours)

    def create(self, *, staff_id: Any, work_date: Any, shift: Any, note: Optional[str] = None) -> ScheduleAssignment:
        """Admin creates an assignment for a staff member (starts as scheduled)."""
        return self._create(staff_id=staff_id, work_date=work_date, shift=shift, note=note, created_by=CreatedBy.ADMIN)

    def register(self, *, staff_id: Any, work_date: Any, shift: Any, note: Optional[str] = None) -> ScheduleAssignment:
        """Staff self-registration (starts as scheduled)."""
        return self._create(staff_id=staff_id, work_date=work_date, shift=shift, note=note, created_by=CreatedBy.STAFF)

    def _create(
        self,
        *,
        staff_id: Any,
        work_date: Any,
        shift: Any,
        note: Optional[str],
        created_by: CreatedBy,
    ) -> ScheduleAssignment:
        staff_id = require_id(staff_id, "staff_id")
        work_date = require_date(work_date, "work_date")
        shift = require_shift(shift)
        note = optional_note(note)

        rejection = self._validator.validate(
            staff_id=staff_id, work_date=work_date, shift=shift, requested_by=created_by
        )
        if rejection:
            logger.info(
                "Schedule rejected staff_id=%s date=%s shift=%s by=%s: %s",
                staff_id,
                work_date,
                shift.value,
                created_by.value,
                rejection.code.value,
            )
            raise rejection.to_error()

        schedule_id = self._schedules.create(
            staff_id=staff_id,
            work_date=work_date,
            shift=shift,
            status=ScheduleStatus.SCHEDULED,
            created_by=created_by,
            note=note,
        )
        return ScheduleAssignment(
            schedule_id=schedule_id,
            staff_id=staff_id,
            work_date=work_date,
            shift=shift,
            status=ScheduleStatus.SCHEDULED,
            created_by=created_by,
            note=note,
        )

    def _get_pending_for_staff(self, *, staff_id: Any, schedule_id: Any) -> ScheduleAssignment:
        staff_id = require_id(staff_id, "staff_id")
        schedule_id = require_id(schedule_id, "schedule_id")

        assignment = self._schedules.get_by_id(schedule_id)
        if (
            assignment is None
            or assignment.staff_id != staff_id
            or assignment.status != ScheduleStatus.SCHEDULED
        ):
            raise NotFound(
                "Không tìm thấy lịch làm việc hoặc lịch đã được xử lý",
                code=ErrorCode.SCHEDULE_NOT_FOUND,
                details={"schedule_id": schedule_id},
            )
        return assignment

    def confirm(self, *, staff_id: Any, schedule_id: Any) -> ScheduleAssignment:
        assignment = self._get_pending_for_staff(staff_id=staff_id, schedule_id=schedule_id)
        self._schedules.update_status(schedule_id=assignment.schedule_id, status=ScheduleStatus.CONFIRMED)
        return replace(assignment, status=ScheduleStatus.CONFIRMED)

    def reject(self, *, staff_id: Any, schedule_id: Any, reason: Optional[str] = None) -> ScheduleAssignment:
        assignment = self._get_pending_for_staff(staff_id=staff_id, schedule_id=schedule_id)
        reason = optional_note(reason, "reason") or DEFAULT_REJECT_REASON
        self._schedules.update_status(
            schedule_id=assignment.schedule_id, status=ScheduleStatus.REJECTED, reject_reason=reason
        )
        return replace(assignment, status=ScheduleStatus.REJECTED, reject_reason=reason)

    def cancel(self, *, staff_id: Any, schedule_id: Any) -> ScheduleAssignment:
        assignment = self._get_pending_for_staff(staff_id=staff_id, schedule_id=schedule_id)

        hours_until = self._validator.hours_until_date(assignment.work_date)
        if hours_until < self._staff_cancel_lead_hours:
            raise TimingViolation(
                f"Chỉ có thể hủy lịch trước ít nhất {self._staff_cancel_lead_hours} giờ",
                code=ErrorCode.INSUFFICIENT_LEAD_TIME,
                details={"hours_until_date": hours_until, "required_hours": self._staff_cancel_lead_hours},
            )

        note = f"{assignment.note} {CANCELLED_BY_STAFF_NOTE}" if assignment.note else CANCELLED_BY_STAFF_NOTE
        self._schedules.update_status(schedule_id=assignment.schedule_id, status=ScheduleStatus.CANCELLED, note=note)
        return replace(assignment, status=ScheduleStatus.CANCELLED, note=note)

    def set_status(
        self, *, schedule_id: Any, status: Any, reject_reason: Optional[str] = None
    ) -> ScheduleAssignment:
        """Admin edit of an assignment's status."""
        schedule_id = require_id(schedule_id, "schedule_id")
        try:
            status = ScheduleStatus(status)
        except ValueError:
            raise ValidationError(f"Trạng thái không hợp lệ: {status!r}", details={"field": "status"})

        assignment = self._schedules.get_by_id(schedule_id)
        if assignment is None:
            raise NotFound(
                "Không tìm thấy lịch làm việc",
                code=ErrorCode.SCHEDULE_NOT_FOUND,
                details={"schedule_id": schedule_id},
            )

        if status not in _ADMIN_TRANSITIONS[assignment.status]:
            raise StateConflict(
                f"Không thể chuyển trạng thái từ {assignment.status.value} sang {status.value}",
                code=ErrorCode.INVALID_TRANSITION,
                details={"from": assignment.status.value, "to": status.value},
            )

        reason = None
        if status == ScheduleStatus.REJECTED:
            reason = optional_note(reject_reason, "reject_reason") or DEFAULT_REJECT_REASON

        self._schedules.update_status(schedule_id=schedule_id, status=status, reject_reason=reason)
        return replace(assignment, status=status, reject_reason=reason or assignment.reject_reason)

    def _active_shifts(self, staff_id: int, work_date: date) -> list[ShiftType]:
        return [
            a.shift
            for a in self._schedules.list_for_staff_and_date(staff_id=staff_id, work_date=work_date)
            if a.is_active
        ]

    def available_shifts(self, *, staff_id: Any, work_date: Any) -> AvailableShifts:
        """Shifts the staff member may still self-register for on ``work_date``."""
        staff_id = require_id(staff_id, "staff_id")
        work_date = require_date(work_date, "work_date")

        registered = self._active_shifts(staff_id, work_date)
        limit = self._validator.max_shifts_per_day

        if ShiftType.FULL_DAY in registered or len(registered) >= limit:
            available: list[ShiftType] = []
        elif not registered:
            available = list(ShiftType)
        else:
            available = [s for s in ShiftType if s != ShiftType.FULL_DAY and s not in registered]

        return AvailableShifts(
            work_date=work_date,
            can_register=self._validator.staff_lead_time_ok(work_date),
            registered=registered,
            available=available,
        )

    def day_constraints(self, *, staff_id: Any, work_date: Any) -> DayConstraints:
        staff_id = require_id(staff_id, "staff_id")
        work_date = require_date(work_date, "work_date")

        shifts = self._active_shifts(staff_id, work_date)
        return DayConstraints(
            work_date=work_date,
            shifts=shifts,
            count=len(shifts),
            can_add_more=len(shifts) < self._validator.max_shifts_per_day and ShiftType.FULL_DAY not in shifts,
        )

    def list_for_staff(self, *, staff_id: Any, start: Any, end: Any) -> list[ScheduleAssignment]:
        staff_id = require_id(staff_id, "staff_id")
        start = require_date(start, "start")
        end = require_date(end, "end")
        return list(self._schedules.list_range(start=start, end=end, staff_id=staff_id))
