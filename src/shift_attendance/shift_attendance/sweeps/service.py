from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Mapping

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.clock import Clock
from ..common.datetime_utils import whole_minutes
from ..core.constants import AUTO_ABSENT_NOTE, AUTO_REJECT_REASON, AUTO_REJECT_WINDOW_MINUTES
from ..core.enums import AttendanceStatus, ScheduleStatus, ShiftType
from ..core.exceptions import StateConflict
from ..schedules.model import ScheduleAssignment
from ..schedules.repository import ScheduleRepository
from ..shifts.calendar import SHIFT_CALENDAR, get_shift
from ..shifts.model import ShiftDefinition

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    rejected: list[ScheduleAssignment] = field(default_factory=list)
    marked_absent: list[AttendanceRecord] = field(default_factory=list)


class SweepService:
    """Periodic jobs run by an external timer (see the ``flask`` CLI commands).

    - ``auto_reject``: every few minutes, rejects today's still-unconfirmed
      assignments whose shift starts within ``window_minutes``. Once a shift is
      closer than 0 minutes (already started) it is left alone.
    - ``mark_absent``: at the end of the day, writes an absent record for each
      confirmed assignment that has no attendance record at all.
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        attendance: AttendanceRepository,
        clock: Clock,
        *,
        calendar: Mapping[ShiftType, ShiftDefinition] = SHIFT_CALENDAR,
        window_minutes: int = AUTO_REJECT_WINDOW_MINUTES,
    ):
        self._schedules = schedules
        self._attendance = attendance
        self._clock = clock
        self._calendar = calendar
        self._window_minutes = int(window_minutes)

    def auto_reject(self) -> list[ScheduleAssignment]:
        now = self._clock.now()
        today = now.date()

        rejected: list[ScheduleAssignment] = []
        for assignment in self._schedules.list_for_date(work_date=today, statuses=[ScheduleStatus.SCHEDULED]):
            definition = get_shift(assignment.shift, self._calendar)
            if definition is None:
                continue

            shift_start, _ = definition.window(today)
            minutes_until_start = whole_minutes(shift_start - now)
            if 0 <= minutes_until_start < self._window_minutes:
                self._schedules.update_status(
                    schedule_id=assignment.schedule_id,
                    status=ScheduleStatus.REJECTED,
                    reject_reason=AUTO_REJECT_REASON,
                )
                rejected.append(replace(assignment, status=ScheduleStatus.REJECTED, reject_reason=AUTO_REJECT_REASON))

        logger.info("Auto-reject sweep for %s: %s assignment(s) rejected", today, len(rejected))
        return rejected

    def mark_absent(self) -> list[AttendanceRecord]:
        today = self._clock.now().date()

        recorded = {r.staff_id for r in self._attendance.list_for_date(today)}
        created: list[AttendanceRecord] = []
        for assignment in self._schedules.list_for_date(work_date=today, statuses=[ScheduleStatus.CONFIRMED]):
            # One record per (staff, date), even with two confirmed shifts.
            if assignment.staff_id in recorded:
                continue

            recorded.add(assignment.staff_id)
            try:
                attendance_id = self._attendance.create_record(
                    staff_id=assignment.staff_id,
                    work_date=today,
                    schedule_id=assignment.schedule_id,
                    time_in=None,
                    time_out=None,
                    hours_worked=0.0,
                    status=AttendanceStatus.ABSENT,
                    note=AUTO_ABSENT_NOTE,
                )
            except StateConflict:
                # A clock-in landed between the read above and this insert.
                logger.info("Absence sweep skipped staff_id=%s: record created meanwhile", assignment.staff_id)
                continue

            created.append(
                AttendanceRecord(
                    attendance_id=attendance_id,
                    staff_id=assignment.staff_id,
                    work_date=today,
                    schedule_id=assignment.schedule_id,
                    time_in=None,
                    time_out=None,
                    hours_worked=0.0,
                    status=AttendanceStatus.ABSENT,
                    note=AUTO_ABSENT_NOTE,
                )
            )

        logger.info("Absence sweep for %s: %s staff marked absent", today, len(created))
        return created

    def run_all(self) -> SweepReport:
        return SweepReport(rejected=self.auto_reject(), marked_absent=self.mark_absent())
