from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import CreatedBy, ScheduleStatus, ShiftType
from .model import ScheduleAssignment


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[ScheduleAssignment]:
        raise NotImplementedError

    def find_exact(self, *, staff_id: int, work_date: date, shift: ShiftType) -> Optional[ScheduleAssignment]:
        """The (staff, date, shift) assignment in any status."""

        raise NotImplementedError

    def list_for_staff_and_date(self, *, staff_id: int, work_date: date) -> Sequence[ScheduleAssignment]:
        raise NotImplementedError

    def list_for_date(
        self, *, work_date: date, statuses: Optional[Iterable[ScheduleStatus]] = None
    ) -> Sequence[ScheduleAssignment]:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date, staff_id: Optional[int] = None) -> Sequence[ScheduleAssignment]:
        raise NotImplementedError

    def create(
        self,
        *,
        staff_id: int,
        work_date: date,
        shift: ShiftType,
        status: ScheduleStatus,
        created_by: CreatedBy,
        note: Optional[str] = None,
    ) -> int:
        """Insert an assignment.

        Returns schedule_id. The (staff, date, shift) unique key is the backstop
        against concurrent duplicates.
        """

        raise NotImplementedError

    def update_status(
        self,
        *,
        schedule_id: int,
        status: ScheduleStatus,
        reject_reason: Optional[str] = None,
        note: Optional[str] = None,
    ) -> bool:
        """Change status; ``reject_reason``/``note`` are only written when given."""

        raise NotImplementedError
