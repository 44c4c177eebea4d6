from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision

IMPLICIT_CLOCK_IN_NOTE = "Tự động chấm công vào theo giờ bắt đầu ca khi chấm công ra"


class ImplicitClockInStrategy(AttendanceStrategy):
    """Clock-out without a prior clock-in: the record is created as late."""

    def decide_clock_in(self, *, now: datetime, shift_start: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, note=IMPLICIT_CLOCK_IN_NOTE)

    def decide_clock_out(self, *, now: datetime, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, note=IMPLICIT_CLOCK_IN_NOTE)
