from __future__ import annotations

from datetime import date, time

import pytest

from fakes import InMemoryAttendance, InMemorySchedules, RecordingPayroll, clock_at
from src.shift_attendance.shift_attendance.attendance.service import AttendanceService
from src.shift_attendance.shift_attendance.core.enums import (
    AttendanceStatus,
    ClockState,
    ErrorCode,
    ScheduleStatus,
    ShiftType,
)
from src.shift_attendance.shift_attendance.core.exceptions import NotFound, StateConflict

TODAY = date(2024, 3, 10)
STAFF = 3


def _build(clock, *, payroll=None):
    schedules = InMemorySchedules()
    attendance = InMemoryAttendance()
    payroll = payroll or RecordingPayroll()
    svc = AttendanceService(attendance, schedules, payroll, clock)
    return svc, schedules, attendance, payroll


def test_clock_out_after_clock_in_computes_hours_and_triggers_payroll():
    clock = clock_at(2024, 3, 10, 6, 5)
    svc, schedules, attendance, payroll = _build(clock)
    schedules.add(STAFF, TODAY, ShiftType.MORNING)
    svc.clock_in(STAFF)

    clock.set(clock.now().replace(hour=11, minute=0))
    result = svc.clock_out(STAFF)

    assert result.auto_clock_in is False
    assert result.record.time_out == time(11, 0)
    assert result.record.hours_worked == 4.92
    assert result.record.status == AttendanceStatus.PRESENT
    assert result.record.clock_state == ClockState.CLOCKED_OUT
    assert payroll.calls == [result.record.attendance_id]
    assert attendance.items[result.record.attendance_id].hours_worked == 4.92


def test_clock_out_keeps_late_status():
    clock = clock_at(2024, 3, 10, 6, 40)
    svc, schedules, _, _ = _build(clock)
    schedules.add(STAFF, TODAY, ShiftType.MORNING)
    svc.clock_in(STAFF)

    clock.set(clock.now().replace(hour=12, minute=30))
    result = svc.clock_out(STAFF)

    assert result.record.status == AttendanceStatus.LATE
    assert result.record.hours_worked == 5.33


def test_clock_out_without_clock_in_is_implicit_late():
    clock = clock_at(2024, 3, 10, 10, 0)
    svc, schedules, attendance, payroll = _build(clock)
    assignment = schedules.add(STAFF, TODAY, ShiftType.MORNING, ScheduleStatus.SCHEDULED)

    result = svc.clock_out(STAFF)

    assert result.auto_clock_in is True
    assert result.record.time_in == time(6, 0)
    assert result.record.time_out == time(10, 0)
    assert result.record.hours_worked == 4.0
    assert result.record.status == AttendanceStatus.LATE
    assert result.record.schedule_id == assignment.schedule_id
    assert len(attendance.items) == 1
    assert payroll.calls == [result.record.attendance_id]


def test_clock_out_fills_absent_record_without_time_in():
    clock = clock_at(2024, 3, 10, 12, 0)
    svc, schedules, attendance, _ = _build(clock)
    schedules.add(STAFF, TODAY, ShiftType.MORNING)
    existing = attendance.add(STAFF, TODAY, status=AttendanceStatus.ABSENT)

    result = svc.clock_out(STAFF)

    assert result.record.attendance_id == existing.attendance_id
    assert result.record.hours_worked == 6.0
    assert result.record.status == AttendanceStatus.LATE
    assert len(attendance.items) == 1


def test_clock_out_twice_fails():
    clock = clock_at(2024, 3, 10, 6, 0)
    svc, schedules, _, payroll = _build(clock)
    schedules.add(STAFF, TODAY, ShiftType.MORNING)
    svc.clock_in(STAFF)
    clock.advance(hours=5)
    svc.clock_out(STAFF)
    clock.advance(minutes=1)

    with pytest.raises(StateConflict) as exc:
        svc.clock_out(STAFF)

    assert exc.value.code == ErrorCode.ALREADY_CLOCKED_OUT
    assert len(payroll.calls) == 1


def test_clock_out_without_schedule_fails():
    svc, schedules, _, payroll = _build(clock_at(2024, 3, 10, 15, 0))
    schedules.add(STAFF, TODAY, ShiftType.AFTERNOON, ScheduleStatus.CANCELLED)

    with pytest.raises(NotFound) as exc:
        svc.clock_out(STAFF)

    assert exc.value.code == ErrorCode.NO_SCHEDULE
    assert payroll.calls == []


def test_clock_out_at_clock_in_instant_fails():
    svc, schedules, attendance, _ = _build(clock_at(2024, 3, 10, 10, 0))
    assignment = schedules.add(STAFF, TODAY, ShiftType.MORNING)
    attendance.add(STAFF, TODAY, schedule_id=assignment.schedule_id, time_in=time(10, 0))

    with pytest.raises(StateConflict) as exc:
        svc.clock_out(STAFF)

    assert exc.value.code == ErrorCode.INVALID_TIME_ORDER


def test_payroll_failure_does_not_undo_clock_out():
    clock = clock_at(2024, 3, 10, 6, 0)
    svc, schedules, attendance, payroll = _build(clock, payroll=RecordingPayroll(fail=True))
    schedules.add(STAFF, TODAY, ShiftType.MORNING)
    svc.clock_in(STAFF)
    clock.advance(hours=6)

    result = svc.clock_out(STAFF)

    assert payroll.calls == [result.record.attendance_id]
    stored = attendance.items[result.record.attendance_id]
    assert stored.time_out == time(12, 0)
    assert stored.hours_worked == 6.0


def test_night_shift_clock_out_next_morning_uses_yesterdays_record():
    clock = clock_at(2024, 1, 1, 22, 30)
    svc, schedules, attendance, _ = _build(clock)
    schedules.add(STAFF, date(2024, 1, 1), ShiftType.NIGHT)
    svc.clock_in(STAFF)

    clock.set(clock.now().replace(day=2, hour=5, minute=30))
    result = svc.clock_out(STAFF)

    assert result.record.work_date == date(2024, 1, 1)
    assert result.record.hours_worked == 7.0
    assert result.record.status == AttendanceStatus.LATE
    assert len(attendance.items) == 1


def test_night_shift_without_clock_in_falls_back_to_yesterday():
    svc, schedules, _, _ = _build(clock_at(2024, 1, 2, 5, 30))
    schedules.add(STAFF, date(2024, 1, 1), ShiftType.NIGHT)

    result = svc.clock_out(STAFF)

    assert result.auto_clock_in is True
    assert result.record.work_date == date(2024, 1, 1)
    assert result.record.hours_worked == 7.5


def test_today_and_history():
    clock = clock_at(2024, 3, 10, 6, 0)
    svc, schedules, attendance, _ = _build(clock)
    assignment = schedules.add(STAFF, TODAY, ShiftType.MORNING)
    attendance.add(STAFF, date(2024, 3, 1), status=AttendanceStatus.ABSENT)
    svc.clock_in(STAFF)

    today = svc.today(STAFF)
    assert today.work_date == TODAY
    assert today.schedule.schedule_id == assignment.schedule_id
    assert today.record.clock_state == ClockState.CLOCKED_IN

    history = svc.history(STAFF, start="2024-03-01", end="2024-03-31")
    assert {r.work_date for r in history} == {date(2024, 3, 1), TODAY}
