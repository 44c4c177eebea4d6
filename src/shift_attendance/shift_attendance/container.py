from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.clock import Clock, SystemClock
from .core import constants
from .database.connection import ConnectionFactory, DBConfig
from .payroll.trigger import LoggingPayrollTrigger, PayrollTrigger
from .reports.service import StatsService
from .schedules.batch import BatchAssignmentService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .schedules.validator import ScheduleConstraintValidator
from .sweeps.service import SweepService
from .users.mysql_staff_repository import MySQLStaffRepository


@dataclass(frozen=True)
class Container:
    conn: ConnectionFactory
    clock: Clock

    staff_repo: MySQLStaffRepository
    attendance_repo: MySQLAttendanceRepository
    schedules_repo: MySQLScheduleRepository

    attendance_service: AttendanceService
    schedule_service: ScheduleService
    batch_service: BatchAssignmentService
    sweep_service: SweepService
    stats_service: StatsService


def _rule(rules: Mapping[str, Any], name: str) -> int:
    return int(rules.get(name, getattr(constants, name)))


def build_container(
    *,
    db_config: dict,
    rules: Optional[Mapping[str, Any]] = None,
    clock: Optional[Clock] = None,
    payroll: Optional[PayrollTrigger] = None,
) -> Container:
    rules = rules or {}
    clock = clock or SystemClock()
    payroll = payroll or LoggingPayrollTrigger()

    conn = ConnectionFactory(DBConfig.from_dict(db_config))

    staff_repo = MySQLStaffRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)

    validator = ScheduleConstraintValidator(
        schedules_repo,
        clock,
        admin_lead_minutes=_rule(rules, "ADMIN_LEAD_MINUTES"),
        staff_lead_hours=_rule(rules, "STAFF_LEAD_HOURS"),
        max_shifts_per_day=_rule(rules, "MAX_SHIFTS_PER_DAY"),
    )
    schedule_service = ScheduleService(
        schedules_repo,
        validator,
        clock,
        staff_cancel_lead_hours=_rule(rules, "STAFF_CANCEL_LEAD_HOURS"),
    )
    batch_service = BatchAssignmentService(schedule_service, staff_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        schedules_repo,
        payroll,
        clock,
        strategy_factory=AttendanceStrategyFactory(),
        grace_minutes=_rule(rules, "LATE_GRACE_MINUTES"),
        early_checkin_minutes=_rule(rules, "EARLY_CHECKIN_MINUTES"),
        late_checkin_cutoff_minutes=_rule(rules, "LATE_CHECKIN_CUTOFF_MINUTES"),
    )
    sweep_service = SweepService(
        schedules_repo,
        attendance_repo,
        clock,
        window_minutes=_rule(rules, "AUTO_REJECT_WINDOW_MINUTES"),
    )
    stats_service = StatsService(attendance_repo, schedules_repo, staff_repo)

    return Container(
        conn=conn,
        clock=clock,
        staff_repo=staff_repo,
        attendance_repo=attendance_repo,
        schedules_repo=schedules_repo,
        attendance_service=attendance_service,
        schedule_service=schedule_service,
        batch_service=batch_service,
        sweep_service=sweep_service,
        stats_service=stats_service,
    )
