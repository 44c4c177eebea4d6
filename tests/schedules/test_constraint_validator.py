from __future__ import annotations

from datetime import date

import pytest

from fakes import InMemorySchedules, clock_at
from src.shift_attendance.shift_attendance.core.enums import CreatedBy, ErrorCode, ScheduleStatus, ShiftType
from src.shift_attendance.shift_attendance.core.exceptions import StateConflict, TimingViolation
from src.shift_attendance.shift_attendance.schedules.validator import ScheduleConstraintValidator

STAFF = 11
TODAY = date(2024, 5, 10)
LATER = date(2024, 5, 20)


def _validator(clock=None, schedules=None):
    schedules = schedules if schedules is not None else InMemorySchedules()
    return ScheduleConstraintValidator(schedules, clock or clock_at(2024, 5, 10, 8, 0)), schedules


def _check(validator, work_date, shift, by=CreatedBy.ADMIN):
    return validator.validate(staff_id=STAFF, work_date=work_date, shift=shift, requested_by=by)


def test_past_date_rejected():
    validator, _ = _validator()

    rejection = _check(validator, date(2024, 5, 9), ShiftType.EVENING)

    assert rejection.code == ErrorCode.PAST_DATE


def test_today_shift_already_started_rejected():
    validator, _ = _validator()

    assert _check(validator, TODAY, ShiftType.MORNING).code == ErrorCode.SHIFT_ALREADY_STARTED


def test_admin_needs_30_minutes_before_start():
    validator, _ = _validator(clock_at(2024, 5, 10, 11, 31))
    rejection = _check(validator, TODAY, ShiftType.AFTERNOON)
    assert rejection.code == ErrorCode.INSUFFICIENT_LEAD_TIME
    assert rejection.details["minutes_until_start"] == 29

    validator, _ = _validator(clock_at(2024, 5, 10, 11, 30))
    assert _check(validator, TODAY, ShiftType.AFTERNOON) is None


def test_staff_needs_24_hours_before_the_date():
    validator, _ = _validator(clock_at(2024, 5, 10, 0, 0))
    assert _check(validator, date(2024, 5, 11), ShiftType.EVENING, CreatedBy.STAFF) is None

    validator, _ = _validator(clock_at(2024, 5, 10, 0, 0, 1))
    rejection = _check(validator, date(2024, 5, 11), ShiftType.EVENING, CreatedBy.STAFF)
    assert rejection.code == ErrorCode.INSUFFICIENT_LEAD_TIME
    assert rejection.details["hours_until_date"] == 23


def test_staff_lead_time_measured_to_date_not_shift_start():
    # 20:00 the day before: 28 hours to the evening shift, but only 4 to the date.
    validator, _ = _validator(clock_at(2024, 5, 10, 20, 0))

    assert _check(validator, date(2024, 5, 11), ShiftType.EVENING, CreatedBy.STAFF).code == ErrorCode.INSUFFICIENT_LEAD_TIME


def test_duplicate_in_any_status_rejected():
    validator, schedules = _validator()
    schedules.add(STAFF, LATER, ShiftType.MORNING, ScheduleStatus.CANCELLED)

    assert _check(validator, LATER, ShiftType.MORNING).code == ErrorCode.DUPLICATE_ASSIGNMENT


def test_two_per_day_accepted_third_rejected():
    validator, schedules = _validator()
    schedules.add(STAFF, LATER, ShiftType.MORNING)
    assert _check(validator, LATER, ShiftType.AFTERNOON) is None

    schedules.add(STAFF, LATER, ShiftType.AFTERNOON, ScheduleStatus.SCHEDULED)
    rejection = _check(validator, LATER, ShiftType.EVENING)

    assert rejection.code == ErrorCode.DAILY_LIMIT_EXCEEDED
    assert rejection.details["existing_count"] == 2


def test_rejected_and_cancelled_do_not_count_toward_limit():
    validator, schedules = _validator()
    schedules.add(STAFF, LATER, ShiftType.MORNING, ScheduleStatus.REJECTED)
    schedules.add(STAFF, LATER, ShiftType.AFTERNOON, ScheduleStatus.CANCELLED)
    schedules.add(STAFF, LATER, ShiftType.EVENING)

    assert _check(validator, LATER, ShiftType.NIGHT) is None


@pytest.mark.parametrize(
    "existing, requested",
    [
        (ShiftType.MORNING, ShiftType.FULL_DAY),
        (ShiftType.FULL_DAY, ShiftType.EVENING),
    ],
)
def test_full_day_excludes_other_shifts_for_staff(existing, requested):
    validator, schedules = _validator()
    schedules.add(STAFF, LATER, existing, ScheduleStatus.SCHEDULED, CreatedBy.STAFF)

    assert _check(validator, LATER, requested, CreatedBy.STAFF).code == ErrorCode.FULL_DAY_CONFLICT


def test_full_day_rule_only_applies_to_staff_registration():
    validator, schedules = _validator()
    schedules.add(STAFF, LATER, ShiftType.FULL_DAY)

    assert _check(validator, LATER, ShiftType.NIGHT, CreatedBy.ADMIN) is None


def test_full_day_ignores_cancelled_assignments():
    validator, schedules = _validator()
    schedules.add(STAFF, LATER, ShiftType.MORNING, ScheduleStatus.CANCELLED)

    assert _check(validator, LATER, ShiftType.FULL_DAY, CreatedBy.STAFF) is None


def test_first_failing_rule_wins():
    validator, schedules = _validator()
    schedules.add(STAFF, date(2024, 5, 1), ShiftType.MORNING)

    assert _check(validator, date(2024, 5, 1), ShiftType.MORNING).code == ErrorCode.PAST_DATE


def test_rejection_to_error_kind():
    validator, schedules = _validator()
    schedules.add(STAFF, LATER, ShiftType.MORNING)

    assert isinstance(_check(validator, TODAY, ShiftType.MORNING).to_error(), TimingViolation)
    error = _check(validator, LATER, ShiftType.MORNING).to_error()
    assert isinstance(error, StateConflict)
    assert error.code == ErrorCode.DUPLICATE_ASSIGNMENT
