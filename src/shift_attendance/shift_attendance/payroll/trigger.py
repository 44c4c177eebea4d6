from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class PayrollTrigger(Protocol):
    """Payroll collaborator: asked to recompute pay after every successful clock-out."""

    def recompute_pay(self, attendance_id: int) -> None:
        raise NotImplementedError


class LoggingPayrollTrigger:
    """Default wiring: no payroll engine is attached, the request is only logged."""

    def recompute_pay(self, attendance_id: int) -> None:
        logger.info("Payroll recompute requested for attendance_id=%s", attendance_id)
