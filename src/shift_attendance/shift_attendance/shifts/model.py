from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..common.datetime_utils import whole_minutes
from ..core.constants import NEXT_DAY_CUTOFF_HOUR
from ..core.enums import ShiftType


@dataclass(frozen=True)
class ShiftDefinition:
    """Thực thể miền (domain): Ca làm việc với giờ bắt đầu/kết thúc danh nghĩa."""

    shift: ShiftType
    nominal_start: time
    nominal_end: time
    crosses_midnight: bool = False
    label: str = ""

    def end_date(self, work_date: date) -> date:
        """Calendar date the nominal end falls on for a shift worked on ``work_date``."""
        if self.crosses_midnight and self.nominal_end.hour < NEXT_DAY_CUTOFF_HOUR:
            return work_date + timedelta(days=1)
        return work_date

    def window(self, work_date: date) -> tuple[datetime, datetime]:
        start = datetime.combine(work_date, self.nominal_start)
        end = datetime.combine(self.end_date(work_date), self.nominal_end)
        return start, end

    @property
    def duration_hours(self) -> float:
        start, end = self.window(date(2000, 1, 1))
        return max(whole_minutes(end - start), 0) / 60
