from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import whole_minutes
from .strategies.base import AttendanceStrategy
from .strategies.implicit_strategy import ImplicitClockInStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_clock_in(self, *, now: datetime, shift_start: datetime, grace_minutes: int) -> AttendanceStrategy:
        # Whole minutes, truncated: 15m59s after start is still on time with a 15 minute grace.
        if whole_minutes(now - shift_start) > grace_minutes:
            return LateStrategy()
        return NormalStrategy()

    def for_clock_out(self, *, clocked_in: bool) -> AttendanceStrategy:
        if not clocked_in:
            return ImplicitClockInStrategy()
        return NormalStrategy()
