from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import AttendanceRecord


class PresentDayCounter(ABC):
    """Counter interface (Strategy Pattern for present-day counting)."""

    @abstractmethod
    def present_days(self, records: Sequence[AttendanceRecord]) -> int:
        raise NotImplementedError
