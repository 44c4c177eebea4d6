from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of "now" for every time-window rule."""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Local wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()


@dataclass
class FixedClock:
    """Clock frozen at a given instant; tests move it with ``advance``/``set``."""

    current: datetime = field(default_factory=datetime.now)

    def now(self) -> datetime:
        return self.current

    def set(self, value: datetime) -> None:
        self.current = value

    def advance(self, **delta: float) -> None:
        self.current = self.current + timedelta(**delta)
