from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import CreatedBy, ErrorCode, ScheduleStatus, ShiftType


@dataclass(frozen=True)
class ScheduleAssignment:
    """Thực thể miền (domain): Lịch làm việc của một nhân viên cho một ca trong ngày."""

    schedule_id: int
    staff_id: int
    work_date: date
    shift: ShiftType
    status: ScheduleStatus
    created_by: CreatedBy = CreatedBy.ADMIN
    reject_reason: Optional[str] = None
    note: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status.is_active


@dataclass(frozen=True)
class BatchFailure:
    staff_id: int
    work_date: date
    shift: ShiftType
    code: ErrorCode
    message: str


@dataclass
class BatchResult:
    """Outcome of a batch/template run; every item lands in exactly one list."""

    successes: list[ScheduleAssignment] = field(default_factory=list)
    failures: list[BatchFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successes) + len(self.failures)
