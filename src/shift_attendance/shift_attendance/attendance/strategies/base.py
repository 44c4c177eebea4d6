from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    """Status tag and note to write on the attendance record."""

    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Decides the present/late tag at clock-in and whether clock-out changes it."""

    @abstractmethod
    def decide_clock_in(self, *, now: datetime, shift_start: datetime) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_clock_out(self, *, now: datetime, current: AttendanceStatus) -> StatusDecision:
        raise NotImplementedError
