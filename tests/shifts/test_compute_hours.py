from __future__ import annotations

from datetime import date, time

import pytest

from src.shift_attendance.shift_attendance.core.enums import ShiftType
from src.shift_attendance.shift_attendance.core.exceptions import ValidationError
from src.shift_attendance.shift_attendance.shifts.calendar import SHIFT_CALENDAR, nominal_window, shift_times
from src.shift_attendance.shift_attendance.shifts.hours import compute_hours, round_hours
from src.shift_attendance.shift_attendance.shifts.model import ShiftDefinition

D = date(2024, 1, 1)


@pytest.mark.parametrize(
    "shift, time_in, time_out, expected",
    [
        (ShiftType.MORNING, "07:00", "11:30", 4.5),
        (ShiftType.AFTERNOON, "12:15", "17:45", 5.5),
        (ShiftType.EVENING, "18:00", "22:00", 4.0),
        (ShiftType.FULL_DAY, "08:00", "16:20", 8.33),
    ],
)
def test_inside_window_counts_actual_time(shift, time_in, time_out, expected):
    assert compute_hours(shift, time_in, time_out, D) == expected


@pytest.mark.parametrize(
    "shift, time_in, time_out, expected",
    [
        (ShiftType.MORNING, "05:00", "13:00", 6.0),
        (ShiftType.AFTERNOON, "11:00", "19:30", 6.0),
        (ShiftType.EVENING, "17:10", "23:59", 4.0),
        (ShiftType.FULL_DAY, "05:30", "18:30", 12.0),
    ],
)
def test_outside_window_clips_to_nominal_duration(shift, time_in, time_out, expected):
    assert compute_hours(shift, time_in, time_out, D) == expected


def test_night_shift_rolls_checkout_to_next_day():
    assert compute_hours("night", "22:30", "05:30", D) == 7.0


def test_night_shift_clips_both_ends():
    assert compute_hours(ShiftType.NIGHT, time(21, 0), time(7, 15), D) == 8.0


def test_night_shift_checkout_before_midnight():
    assert compute_hours(ShiftType.NIGHT, "22:00", "23:30", D) == 1.5


def test_missing_input_returns_nominal_duration():
    assert compute_hours(ShiftType.MORNING, None, "11:00", D) == 6.0
    assert compute_hours(ShiftType.NIGHT, "22:00", None, D) == 8.0
    assert compute_hours(ShiftType.EVENING, "18:00", "21:00", None) == 4.0


def test_unknown_shift_is_zero():
    assert compute_hours("brunch", "07:00", "11:00", D) == 0.0
    assert compute_hours("brunch", None, None, D) == 0.0


def test_checkout_before_checkin_floors_at_zero():
    assert compute_hours(ShiftType.MORNING, "10:00", "09:00", D) == 0.0


def test_same_inputs_same_result():
    first = compute_hours(ShiftType.NIGHT, "22:07", "05:53", D)
    assert compute_hours(ShiftType.NIGHT, "22:07", "05:53", D) == first


def test_custom_calendar_any_shift_may_cross_midnight():
    calendar = dict(SHIFT_CALENDAR)
    calendar[ShiftType.EVENING] = ShiftDefinition(ShiftType.EVENING, time(20, 0), time(2, 0), crosses_midnight=True)
    assert compute_hours(ShiftType.EVENING, "20:00", "01:00", D, calendar=calendar) == 5.0


def test_round_hours_half_up():
    # 1 minute = 0.01666.. -> 0.02, 50 minutes = 0.8333.. -> 0.83
    assert round_hours(1) == 0.02
    assert round_hours(50) == 0.83
    assert round_hours(45) == 0.75


def test_nominal_window_for_night_ends_next_day():
    start, end = nominal_window(ShiftType.NIGHT, D)
    assert start.date() == D
    assert end.date() == date(2024, 1, 2)
    assert end.time() == time(6, 0)


def test_shift_times_echo():
    assert shift_times(ShiftType.EVENING) == {"start_time": "18:00:00", "end_time": "22:00:00"}


def test_accepts_iso_date_string():
    assert compute_hours("night", "22:30", "05:30", "2024-01-01") == 7.0
    assert compute_hours(ShiftType.MORNING, "07:00", "11:30", "2024-01-01") == 4.5


def test_malformed_date_string_is_a_validation_error():
    with pytest.raises(ValidationError):
        compute_hours(ShiftType.MORNING, "07:00", "11:30", "01/01/2024")
