from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import iter_dates
from ..common.validators import optional_note, require_date, require_id, require_non_empty_list, require_shift
from ..core.constants import DEFAULT_TEMPLATE_HEADCOUNT
from ..core.enums import ErrorCode, Role, ShiftType
from ..core.exceptions import DomainError, NotFound, ValidationError
from ..users.model import StaffMember
from ..users.repository import StaffRepository
from .model import BatchFailure, BatchResult
from .service import ScheduleService

logger = logging.getLogger(__name__)

TEMPLATE_ROLES = (Role.KITCHEN, Role.WAITER)


class BatchAssignmentService:
    """Creates many assignments at once; one failing item never stops the others.

    Every item goes through ``ScheduleService.create`` (admin rules), so the
    result holds one entry per attempted (staff, date, shift).
    """

    def __init__(self, schedules: ScheduleService, staff: StaffRepository):
        self._schedules = schedules
        self._staff = staff

    def create_batch(
        self,
        *,
        staff_ids: Iterable[Any],
        dates: Iterable[Any],
        shift: Any,
        note: Optional[str] = None,
    ) -> BatchResult:
        """Every (staff, date) pair of the cartesian product, staff-major."""
        staff_ids = [require_id(s, "staff_ids") for s in require_non_empty_list(staff_ids, "staff_ids")]
        dates = [require_date(d, "dates") for d in require_non_empty_list(dates, "dates")]
        shift = require_shift(shift)
        note = optional_note(note)

        result = BatchResult()
        for staff_id in staff_ids:
            for work_date in dates:
                self._assign_one(result, staff_id=staff_id, work_date=work_date, shift=shift, note=note)

        logger.info(
            "Batch %s: %s created, %s failed", shift.value, len(result.successes), len(result.failures)
        )
        return result

    def create_from_template(
        self,
        *,
        start: Any,
        end: Any,
        shifts: Iterable[Any],
        headcount: Optional[Mapping[Role, int]] = None,
    ) -> BatchResult:
        """Round-robin a role-filtered staff pool across every date and shift.

        For each date and then each shift, ``len(pool)`` staff are taken starting
        at a rotating offset; the offset advances by one after each shift so the
        same person does not always land first.
        """
        start = require_date(start, "start_date")
        end = require_date(end, "end_date")
        if end < start:
            raise ValidationError(
                "Ngày kết thúc phải sau hoặc bằng ngày bắt đầu",
                details={"start_date": start.isoformat(), "end_date": end.isoformat()},
            )
        shifts = [require_shift(s, "shifts") for s in require_non_empty_list(shifts, "shifts")]

        pool = self._select_pool(headcount)
        if not pool:
            raise NotFound("Không có nhân viên phù hợp", code=ErrorCode.STAFF_NOT_FOUND)

        result = BatchResult()
        offset = 0
        for work_date in iter_dates(start, end):
            for shift in shifts:
                note = f"Lịch tự động tạo cho {shift.value}"
                for i in range(len(pool)):
                    member = pool[(offset + i) % len(pool)]
                    self._assign_one(result, staff_id=member.staff_id, work_date=work_date, shift=shift, note=note)
                offset = (offset + 1) % len(pool)

        logger.info(
            "Template %s..%s: %s created, %s failed", start, end, len(result.successes), len(result.failures)
        )
        return result

    def _select_pool(self, headcount: Optional[Mapping[Role, int]]) -> list[StaffMember]:
        if headcount is None:
            headcount = {role: DEFAULT_TEMPLATE_HEADCOUNT for role in TEMPLATE_ROLES}

        pool: list[StaffMember] = []
        for role in TEMPLATE_ROLES:
            count = int(headcount.get(role) or 0)
            if count <= 0:
                count = DEFAULT_TEMPLATE_HEADCOUNT
            pool.extend(self._staff.list_by_role(role, limit=count))
        return pool

    def _assign_one(
        self,
        result: BatchResult,
        *,
        staff_id: int,
        work_date: date,
        shift: ShiftType,
        note: Optional[str],
    ) -> None:
        try:
            result.successes.append(
                self._schedules.create(staff_id=staff_id, work_date=work_date, shift=shift, note=note)
            )
        except DomainError as e:
            logger.warning("Batch item staff_id=%s date=%s shift=%s failed: %s", staff_id, work_date, shift.value, e.code.value)
            result.failures.append(
                BatchFailure(staff_id=staff_id, work_date=work_date, shift=shift, code=e.code, message=e.message)
            )
        except Exception:
            # Storage errors (e.g. the unique key losing a race) become item failures.
            logger.exception("Batch item staff_id=%s date=%s shift=%s failed unexpectedly", staff_id, work_date, shift.value)
            result.failures.append(
                BatchFailure(
                    staff_id=staff_id,
                    work_date=work_date,
                    shift=shift,
                    code=ErrorCode.STORAGE_FAILED,
                    message="Lỗi khi lưu lịch làm việc",
                )
            )
