from __future__ import annotations

from datetime import date, datetime, time
from typing import Mapping, Optional

from ..core.enums import ShiftType
from .model import ShiftDefinition

SHIFT_CALENDAR: Mapping[ShiftType, ShiftDefinition] = {
    ShiftType.MORNING: ShiftDefinition(ShiftType.MORNING, time(6, 0), time(12, 0), label="Ca sáng"),
    ShiftType.AFTERNOON: ShiftDefinition(ShiftType.AFTERNOON, time(12, 0), time(18, 0), label="Ca chiều"),
    ShiftType.EVENING: ShiftDefinition(ShiftType.EVENING, time(18, 0), time(22, 0), label="Ca tối"),
    ShiftType.NIGHT: ShiftDefinition(ShiftType.NIGHT, time(22, 0), time(6, 0), crosses_midnight=True, label="Ca đêm"),
    ShiftType.FULL_DAY: ShiftDefinition(ShiftType.FULL_DAY, time(6, 0), time(18, 0), label="Ca cả ngày"),
}


def get_shift(shift: ShiftType | str, calendar: Mapping[ShiftType, ShiftDefinition] = SHIFT_CALENDAR) -> Optional[ShiftDefinition]:
    try:
        return calendar.get(ShiftType(shift))
    except ValueError:
        return None


def require_shift_definition(shift: ShiftType, calendar: Mapping[ShiftType, ShiftDefinition] = SHIFT_CALENDAR) -> ShiftDefinition:
    definition = get_shift(shift, calendar)
    if definition is None:
        raise LookupError(f"No calendar entry for shift {shift!r}")
    return definition


def nominal_window(
    shift: ShiftType, work_date: date, calendar: Mapping[ShiftType, ShiftDefinition] = SHIFT_CALENDAR
) -> tuple[datetime, datetime]:
    return require_shift_definition(shift, calendar).window(work_date)


def shift_times(shift: ShiftType, calendar: Mapping[ShiftType, ShiftDefinition] = SHIFT_CALENDAR) -> dict:
    """Nominal start/end echoed back to callers next to records."""
    definition = require_shift_definition(shift, calendar)
    return {
        "start_time": definition.nominal_start.strftime("%H:%M:%S"),
        "end_time": definition.nominal_end.strftime("%H:%M:%S"),
    }
