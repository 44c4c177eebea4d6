from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional, Sequence

from ..common.clock import Clock
from ..common.datetime_utils import whole_minutes
from ..common.validators import require_date, require_id
from ..core.constants import (
    EARLY_CHECKIN_MINUTES,
    LATE_CHECKIN_CUTOFF_MINUTES,
    LATE_GRACE_MINUTES,
    NEXT_DAY_CUTOFF_HOUR,
)
from ..core.enums import ClockState, ErrorCode, ScheduleStatus, ShiftType
from ..core.exceptions import NotFound, StateConflict, TimingViolation, ValidationError
from ..payroll.trigger import PayrollTrigger
from ..schedules.model import ScheduleAssignment
from ..schedules.repository import ScheduleRepository
from ..shifts.calendar import SHIFT_CALENDAR, require_shift_definition
from ..shifts.hours import compute_hours
from ..shifts.model import ShiftDefinition
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, ClockResult, TodayAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Clock-in / clock-out state machine, one record per (staff, date).

    no record -> clocked in (time_in set) -> clocked out (time_out set).
    Every successful clock-out asks the payroll collaborator to recompute pay;
    a failure there is logged and never undoes the clock-out.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        payroll: PayrollTrigger,
        clock: Clock,
        *,
        calendar: Mapping[ShiftType, ShiftDefinition] = SHIFT_CALENDAR,
        strategy_factory: AttendanceStrategyFactory | None = None,
        grace_minutes: int = LATE_GRACE_MINUTES,
        early_checkin_minutes: int = EARLY_CHECKIN_MINUTES,
        late_checkin_cutoff_minutes: int = LATE_CHECKIN_CUTOFF_MINUTES,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._payroll = payroll
        self._clock = clock
        self._calendar = calendar
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._grace_minutes = int(grace_minutes)
        self._early_checkin_minutes = int(early_checkin_minutes)
        self._late_checkin_cutoff_minutes = int(late_checkin_cutoff_minutes)

    def _definition(self, shift: ShiftType) -> ShiftDefinition:
        return require_shift_definition(shift, self._calendar)

    def _assignments(self, staff_id: int, work_date: date, statuses: tuple[ScheduleStatus, ...]) -> list[ScheduleAssignment]:
        found = [
            a
            for a in self._schedules.list_for_staff_and_date(staff_id=staff_id, work_date=work_date)
            if a.status in statuses
        ]
        return sorted(found, key=lambda a: (self._definition(a.shift).nominal_start, a.schedule_id))

    def clock_in(self, staff_id: Any, *, schedule_id: Any = None) -> ClockResult:
        staff_id = require_id(staff_id, "staff_id")
        if schedule_id is not None:
            schedule_id = require_id(schedule_id, "schedule_id")

        now = self._clock.now()
        today = now.date()

        existing = self._attendance.get_for_staff_and_date(staff_id, today)
        if existing and existing.time_in is not None:
            raise StateConflict(
                "Bạn đã chấm công vào ca hôm nay rồi",
                code=ErrorCode.ALREADY_CLOCKED_IN,
                details={"time_in": existing.time_in.isoformat()},
            )

        confirmed = self._assignments(staff_id, today, (ScheduleStatus.CONFIRMED,))
        if not confirmed:
            raise NotFound(
                "Bạn không có lịch làm việc đã xác nhận cho hôm nay",
                code=ErrorCode.NO_CONFIRMED_SCHEDULE,
                details={"work_date": today.isoformat()},
            )
        # Earliest confirmed shift that still accepts clock-in, else the earliest one.
        schedule = next(
            (
                a
                for a in confirmed
                if whole_minutes(self._definition(a.shift).window(today)[1] - now) > self._late_checkin_cutoff_minutes
            ),
            confirmed[0],
        )

        if schedule_id is not None and schedule_id != schedule.schedule_id:
            raise StateConflict(
                "ID lịch làm việc không khớp với lịch hôm nay",
                code=ErrorCode.SCHEDULE_MISMATCH,
                details={"schedule_id": schedule_id, "expected_schedule_id": schedule.schedule_id},
            )

        definition = self._definition(schedule.shift)
        shift_start, shift_end = definition.window(today)

        minutes_early = whole_minutes(shift_start - now)
        if minutes_early > self._early_checkin_minutes:
            logger.info("Clock-in too early staff_id=%s shift=%s minutes_early=%s", staff_id, schedule.shift.value, minutes_early)
            raise TimingViolation(
                f"Chỉ được chấm công vào trước giờ vào ca tối đa {self._early_checkin_minutes} phút",
                code=ErrorCode.TOO_EARLY,
                details={"minutes_early": minutes_early, "shift_start": definition.nominal_start.isoformat()},
            )

        minutes_before_end = whole_minutes(shift_end - now)
        if minutes_before_end <= self._late_checkin_cutoff_minutes:
            logger.info(
                "Clock-in too late staff_id=%s shift=%s minutes_before_end=%s",
                staff_id,
                schedule.shift.value,
                minutes_before_end,
            )
            raise TimingViolation(
                f"Không thể chấm công vào khi còn {self._late_checkin_cutoff_minutes} phút hoặc ít hơn trước khi hết ca",
                code=ErrorCode.TOO_LATE,
                details={"minutes_before_end": minutes_before_end, "shift_end": definition.nominal_end.isoformat()},
            )

        strategy = self._factory.for_clock_in(now=now, shift_start=shift_start, grace_minutes=self._grace_minutes)
        decision = strategy.decide_clock_in(now=now, shift_start=shift_start)
        time_in = now.time().replace(microsecond=0)
        note = decision.note

        if existing:
            self._attendance.update_record(
                attendance_id=existing.attendance_id,
                schedule_id=schedule.schedule_id,
                time_in=time_in,
                time_out=None,
                hours_worked=0.0,
                status=decision.status,
                note=note,
            )
            record = replace(
                existing,
                schedule_id=schedule.schedule_id,
                time_in=time_in,
                time_out=None,
                hours_worked=0.0,
                status=decision.status,
                note=note,
            )
        else:
            attendance_id = self._attendance.create_record(
                staff_id=staff_id,
                work_date=today,
                schedule_id=schedule.schedule_id,
                time_in=time_in,
                time_out=None,
                hours_worked=0.0,
                status=decision.status,
                note=note,
            )
            record = AttendanceRecord(
                attendance_id=attendance_id,
                staff_id=staff_id,
                work_date=today,
                schedule_id=schedule.schedule_id,
                time_in=time_in,
                time_out=None,
                hours_worked=0.0,
                status=decision.status,
                note=note,
            )

        logger.info(
            "Clock-in staff_id=%s date=%s shift=%s status=%s minutes_early=%s",
            staff_id,
            today,
            schedule.shift.value,
            decision.status.value,
            minutes_early,
        )
        return ClockResult(
            record=record,
            schedule=schedule,
            shift_start=definition.nominal_start,
            shift_end=definition.nominal_end,
        )

    def _resolve_clock_out(
        self, staff_id: int, now: datetime
    ) -> tuple[Optional[ScheduleAssignment], date, Optional[AttendanceRecord]]:
        """Pick the (assignment, work date, record) a clock-out applies to.

        An overnight shift worked yesterday wins before noon while its record is
        still clocked in, or when nothing is scheduled today.
        """
        active = (ScheduleStatus.CONFIRMED, ScheduleStatus.SCHEDULED)
        today = now.date()

        overnight: Optional[ScheduleAssignment] = None
        previous: Optional[AttendanceRecord] = None
        yesterday = today - timedelta(days=1)
        if now.hour < NEXT_DAY_CUTOFF_HOUR:
            candidates = [a for a in self._assignments(staff_id, yesterday, active) if self._definition(a.shift).crosses_midnight]
            if candidates:
                overnight = candidates[0]
                previous = self._attendance.get_for_staff_and_date(staff_id, yesterday)
                if previous and previous.clock_state == ClockState.CLOCKED_IN:
                    return overnight, yesterday, previous

        record = self._attendance.get_for_staff_and_date(staff_id, today)
        candidates = self._assignments(staff_id, today, active)
        if candidates:
            preferred = [a for a in candidates if record and a.schedule_id == record.schedule_id]
            return (preferred or candidates)[0], today, record

        if overnight and (previous is None or previous.time_out is None):
            return overnight, yesterday, previous

        return None, today, record

    def clock_out(self, staff_id: Any) -> ClockResult:
        staff_id = require_id(staff_id, "staff_id")
        now = self._clock.now()

        schedule, work_date, record = self._resolve_clock_out(staff_id, now)
        if schedule is None:
            raise NotFound(
                "Bạn không có lịch làm việc cho hôm nay",
                code=ErrorCode.NO_SCHEDULE,
                details={"work_date": work_date.isoformat()},
            )

        definition = self._definition(schedule.shift)
        time_out = now.time().replace(microsecond=0)
        auto_clock_in = record is None or record.time_in is None

        if auto_clock_in:
            time_in = definition.nominal_start
            shift_start, _ = definition.window(work_date)
            decision = self._factory.for_clock_out(clocked_in=False).decide_clock_in(now=now, shift_start=shift_start)
        else:
            if record.time_out is not None:
                raise StateConflict(
                    "Bạn đã chấm công ra rồi",
                    code=ErrorCode.ALREADY_CLOCKED_OUT,
                    details={"time_out": record.time_out.isoformat()},
                )
            time_in = record.time_in
            clocked_in_at = datetime.combine(work_date, time_in)
            if now <= clocked_in_at:
                raise StateConflict(
                    "Thời gian chấm công ra phải sau thời gian chấm công vào",
                    code=ErrorCode.INVALID_TIME_ORDER,
                    details={"time_in": time_in.isoformat(), "time_out": time_out.isoformat()},
                )
            decision = self._factory.for_clock_out(clocked_in=True).decide_clock_out(now=now, current=record.status)

        hours = compute_hours(schedule.shift, time_in, time_out, work_date, calendar=self._calendar)
        note = decision.note or (record.note if record else None)

        if record is None:
            attendance_id = self._attendance.create_record(
                staff_id=staff_id,
                work_date=work_date,
                schedule_id=schedule.schedule_id,
                time_in=time_in,
                time_out=time_out,
                hours_worked=hours,
                status=decision.status,
                note=note,
            )
            record = AttendanceRecord(
                attendance_id=attendance_id,
                staff_id=staff_id,
                work_date=work_date,
                schedule_id=schedule.schedule_id,
                time_in=time_in,
                time_out=time_out,
                hours_worked=hours,
                status=decision.status,
                note=note,
            )
        else:
            self._attendance.update_record(
                attendance_id=record.attendance_id,
                schedule_id=schedule.schedule_id,
                time_in=time_in,
                time_out=time_out,
                hours_worked=hours,
                status=decision.status,
                note=note,
            )
            record = replace(
                record,
                schedule_id=schedule.schedule_id,
                time_in=time_in,
                time_out=time_out,
                hours_worked=hours,
                status=decision.status,
                note=note,
            )

        logger.info(
            "Clock-out staff_id=%s date=%s shift=%s status=%s hours=%s auto_clock_in=%s",
            staff_id,
            work_date,
            schedule.shift.value,
            record.status.value,
            hours,
            auto_clock_in,
        )
        self._trigger_payroll(record.attendance_id)

        return ClockResult(
            record=record,
            schedule=schedule,
            shift_start=definition.nominal_start,
            shift_end=definition.nominal_end,
            auto_clock_in=auto_clock_in,
        )

    def _trigger_payroll(self, attendance_id: int) -> None:
        try:
            self._payroll.recompute_pay(attendance_id)
        except Exception:
            logger.exception("Payroll recompute failed for attendance_id=%s", attendance_id)

    def today(self, staff_id: Any) -> TodayAttendance:
        staff_id = require_id(staff_id, "staff_id")
        today = self._clock.now().date()

        record = self._attendance.get_for_staff_and_date(staff_id, today)
        assignments = self._assignments(staff_id, today, (ScheduleStatus.CONFIRMED, ScheduleStatus.SCHEDULED))

        schedule = None
        if record and record.schedule_id is not None:
            schedule = next((a for a in assignments if a.schedule_id == record.schedule_id), None)
        if schedule is None and assignments:
            schedule = assignments[0]

        return TodayAttendance(work_date=today, record=record, schedule=schedule)

    def history(self, staff_id: Any, *, start: Any, end: Any) -> Sequence[AttendanceRecord]:
        staff_id = require_id(staff_id, "staff_id")
        start = require_date(start, "start")
        end = require_date(end, "end")
        if end < start:
            raise ValidationError(
                "Ngày kết thúc phải sau hoặc bằng ngày bắt đầu",
                details={"start": start.isoformat(), "end": end.isoformat()},
            )
        return self._attendance.list_range(start=start, end=end, staff_id=staff_id)
