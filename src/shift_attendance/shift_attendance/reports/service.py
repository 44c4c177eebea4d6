from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds
from ..common.validators import require_date, require_id
from ..core.enums import AttendanceStatus, ErrorCode, Role, ScheduleStatus, ShiftType
from ..core.exceptions import NotFound, ValidationError
from ..schedules.model import ScheduleAssignment
from ..schedules.repository import ScheduleRepository
from ..users.model import StaffMember
from ..users.repository import StaffRepository

REPORT_ROLES = (Role.KITCHEN, Role.WAITER)


def percent(part: int, whole: int) -> int:
    """round(100 * part / whole) with halves rounded up; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    value = Decimal(100 * int(part)) / Decimal(int(whole))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class AttendanceSummary:
    on_time: int = 0
    late: int = 0
    absent: int = 0
    total_hours: float = 0.0
    scheduled_count: int = 0
    confirmed_count: int = 0

    @property
    def worked_days(self) -> int:
        return self.on_time + self.late

    @property
    def attendance_rate(self) -> int:
        return percent(self.worked_days, self.scheduled_count)

    @property
    def completion_rate(self) -> int:
        return percent(self.confirmed_count, self.scheduled_count)

    @property
    def on_time_rate(self) -> int:
        return percent(self.on_time, self.on_time + self.late + self.absent)

    def __add__(self, other: "AttendanceSummary") -> "AttendanceSummary":
        return AttendanceSummary(
            on_time=self.on_time + other.on_time,
            late=self.late + other.late,
            absent=self.absent + other.absent,
            total_hours=round(self.total_hours + other.total_hours, 2),
            scheduled_count=self.scheduled_count + other.scheduled_count,
            confirmed_count=self.confirmed_count + other.confirmed_count,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "on_time": self.on_time,
            "late": self.late,
            "absent": self.absent,
            "worked_days": self.worked_days,
            "total_hours": self.total_hours,
            "scheduled_count": self.scheduled_count,
            "confirmed_count": self.confirmed_count,
            "attendance_rate": self.attendance_rate,
            "completion_rate": self.completion_rate,
            "on_time_rate": self.on_time_rate,
        }


def summarize(records: Iterable[AttendanceRecord], schedules: Iterable[ScheduleAssignment]) -> AttendanceSummary:
    """Monthly figures from already-filtered records and assignments.

    Every assignment in the period counts as scheduled, whatever its status.
    """
    records = list(records)
    schedules = list(schedules)
    return AttendanceSummary(
        on_time=sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
        late=sum(1 for r in records if r.status == AttendanceStatus.LATE),
        absent=sum(1 for r in records if r.status == AttendanceStatus.ABSENT),
        total_hours=round(sum(float(r.hours_worked or 0) for r in records), 2),
        scheduled_count=len(schedules),
        confirmed_count=sum(1 for s in schedules if s.status == ScheduleStatus.CONFIRMED),
    )


@dataclass(frozen=True)
class StaffMonthStats:
    staff_id: int
    full_name: str
    role: Role
    year: int
    month: int
    summary: AttendanceSummary


@dataclass(frozen=True)
class ShiftCoverage:
    shift: ShiftType
    total: int = 0
    by_role: dict[Role, int] = field(default_factory=dict)


class StatsService:
    """Read-side monthly statistics; nothing here writes."""

    def __init__(self, attendance: AttendanceRepository, schedules: ScheduleRepository, staff: StaffRepository):
        self._attendance = attendance
        self._schedules = schedules
        self._staff = staff

    @staticmethod
    def _month(year: Any, month: Any) -> tuple[date, date]:
        try:
            return month_bounds(int(year), int(month))
        except (TypeError, ValueError):
            raise ValidationError("Tháng/năm không hợp lệ", details={"year": year, "month": month})

    def _staff_summary(self, staff_id: int, start: date, end: date) -> AttendanceSummary:
        return summarize(
            self._attendance.list_range(start=start, end=end, staff_id=staff_id),
            self._schedules.list_range(start=start, end=end, staff_id=staff_id),
        )

    def staff_month(self, *, staff_id: Any, year: Any, month: Any) -> StaffMonthStats:
        staff_id = require_id(staff_id, "staff_id")
        start, end = self._month(year, month)

        member = self._staff.get_by_id(staff_id)
        if member is None:
            raise NotFound("Nhân viên không tồn tại", code=ErrorCode.STAFF_NOT_FOUND, details={"staff_id": staff_id})

        return self._to_stats(member, int(year), int(month), self._staff_summary(staff_id, start, end))

    def all_staff_month(self, *, year: Any, month: Any) -> list[StaffMonthStats]:
        start, end = self._month(year, month)
        return [
            self._to_stats(member, int(year), int(month), self._staff_summary(member.staff_id, start, end))
            for role in REPORT_ROLES
            for member in self._staff.list_by_role(role)
        ]

    def role_month(self, *, year: Any, month: Any) -> dict[Role, AttendanceSummary]:
        """Per-role sums; rates are recomputed from the summed counts."""
        totals: dict[Role, AttendanceSummary] = {role: AttendanceSummary() for role in REPORT_ROLES}
        for stats in self.all_staff_month(year=year, month=month):
            totals[stats.role] = totals[stats.role] + stats.summary
        return totals

    def shift_coverage(self, *, work_date: Any) -> dict[ShiftType, ShiftCoverage]:
        work_date = require_date(work_date, "work_date")

        counts: dict[ShiftType, dict[Role, int]] = {shift: {} for shift in ShiftType}
        roles: dict[int, Optional[Role]] = {}
        for assignment in self._schedules.list_for_date(
            work_date=work_date, statuses=[ScheduleStatus.SCHEDULED, ScheduleStatus.CONFIRMED]
        ):
            if assignment.staff_id not in roles:
                member = self._staff.get_by_id(assignment.staff_id)
                roles[assignment.staff_id] = member.role if member else None
            role = roles[assignment.staff_id]
            if role is None:
                continue
            by_role = counts[assignment.shift]
            by_role[role] = by_role.get(role, 0) + 1

        return {
            shift: ShiftCoverage(shift=shift, total=sum(by_role.values()), by_role=by_role)
            for shift, by_role in counts.items()
        }

    @staticmethod
    def _to_stats(member: StaffMember, year: int, month: int, summary: AttendanceSummary) -> StaffMonthStats:
        return StaffMonthStats(
            staff_id=member.staff_id,
            full_name=member.full_name,
            role=member.role,
            year=year,
            month=month,
            summary=summary,
        )
