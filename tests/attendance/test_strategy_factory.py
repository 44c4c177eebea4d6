from datetime import datetime

from src.shift_attendance.shift_attendance.attendance.factory import AttendanceStrategyFactory
from src.shift_attendance.shift_attendance.attendance.strategies.implicit_strategy import ImplicitClockInStrategy
from src.shift_attendance.shift_attendance.attendance.strategies.late_strategy import LateStrategy
from src.shift_attendance.shift_attendance.attendance.strategies.normal_strategy import NormalStrategy
from src.shift_attendance.shift_attendance.core.enums import AttendanceStatus

SHIFT_START = datetime(2025, 1, 1, 6, 0)


def test_factory_clock_in_exactly_at_grace_is_on_time():
    strategy = AttendanceStrategyFactory().for_clock_in(
        now=datetime(2025, 1, 1, 6, 15, 0), shift_start=SHIFT_START, grace_minutes=15
    )

    assert isinstance(strategy, NormalStrategy)
    assert strategy.decide_clock_in(now=datetime(2025, 1, 1, 6, 15), shift_start=SHIFT_START).status == AttendanceStatus.PRESENT


def test_factory_clock_in_partial_minute_after_grace_is_on_time():
    strategy = AttendanceStrategyFactory().for_clock_in(
        now=datetime(2025, 1, 1, 6, 15, 59), shift_start=SHIFT_START, grace_minutes=15
    )

    assert isinstance(strategy, NormalStrategy)


def test_factory_clock_in_late_after_grace():
    now = datetime(2025, 1, 1, 6, 16, 0)
    strategy = AttendanceStrategyFactory().for_clock_in(now=now, shift_start=SHIFT_START, grace_minutes=15)

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide_clock_in(now=now, shift_start=SHIFT_START)
    assert decision.status == AttendanceStatus.LATE
    assert "16" in decision.note


def test_factory_clock_in_before_start_is_on_time():
    strategy = AttendanceStrategyFactory().for_clock_in(
        now=datetime(2025, 1, 1, 5, 10), shift_start=SHIFT_START, grace_minutes=15
    )

    assert isinstance(strategy, NormalStrategy)


def test_factory_clock_out_keeps_status_when_clocked_in():
    strategy = AttendanceStrategyFactory().for_clock_out(clocked_in=True)

    assert isinstance(strategy, NormalStrategy)
    assert strategy.decide_clock_out(now=SHIFT_START, current=AttendanceStatus.LATE).status == AttendanceStatus.LATE


def test_factory_clock_out_without_clock_in_forces_late():
    strategy = AttendanceStrategyFactory().for_clock_out(clocked_in=False)

    assert isinstance(strategy, ImplicitClockInStrategy)
    assert strategy.decide_clock_in(now=SHIFT_START, shift_start=SHIFT_START).status == AttendanceStatus.LATE
