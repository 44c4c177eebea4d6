from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import whole_minutes
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late clock-in."""

    def decide_clock_in(self, *, now: datetime, shift_start: datetime) -> StatusDecision:
        minutes_late = max(whole_minutes(now - shift_start), 0)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Đi muộn {minutes_late} phút" if minutes_late else None)

    def decide_clock_out(self, *, now: datetime, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
