from __future__ import annotations

from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional

from ..common.datetime_utils import parse_wall_time, whole_minutes
from ..common.validators import require_date
from ..core.constants import NEXT_DAY_CUTOFF_HOUR
from ..core.enums import ShiftType
from .calendar import SHIFT_CALENDAR, get_shift
from .model import ShiftDefinition


def round_hours(minutes: int) -> float:
    hours = Decimal(int(minutes)) / Decimal(60)
    return float(hours.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _as_time(value: time | str | None) -> Optional[time]:
    if value is None or isinstance(value, time):
        return value
    return parse_wall_time(value) if value else None


def _as_date(value: date | str | None) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return require_date(value, "work_date") if value else None


def compute_hours(
    shift: ShiftType | str,
    time_in: time | str | None,
    time_out: time | str | None,
    work_date: date | str | None,
    *,
    calendar: Mapping[ShiftType, ShiftDefinition] = SHIFT_CALENDAR,
) -> float:
    """Hours creditable to ``work_date``, clipped to the shift's nominal window.

    - Missing check-in, check-out or date: the full nominal duration.
    - Unknown shift: 0.
    - Overnight shifts: the nominal end and any check-out before noon land on
      the following day.

    Effective start is max(check-in, nominal start), effective end is
    min(check-out, nominal end); the difference in whole minutes / 60,
    floored at 0 and rounded to 2 decimals.
    """

    definition = get_shift(shift, calendar)
    time_in = _as_time(time_in)
    time_out = _as_time(time_out)
    work_date = _as_date(work_date)

    if time_in is None or time_out is None or work_date is None:
        return round(definition.duration_hours, 2) if definition else 0.0

    if definition is None:
        return 0.0

    shift_start, shift_end = definition.window(work_date)

    actual_in = datetime.combine(work_date, time_in)
    if definition.crosses_midnight and time_out.hour < NEXT_DAY_CUTOFF_HOUR:
        actual_out = datetime.combine(definition.end_date(work_date), time_out)
    else:
        actual_out = datetime.combine(work_date, time_out)

    effective_start = max(actual_in, shift_start)
    effective_end = min(actual_out, shift_end)

    minutes = whole_minutes(effective_end - effective_start)
    return max(0.0, round_hours(minutes))
