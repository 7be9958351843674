from __future__ import annotations

from typing import Sequence

from .base import PresentDayCounter
from ...attendance.model import AttendanceRecord


class DistinctDatePresentDayCounter(PresentDayCounter):
    """Standard rule: a date with at least one present record counts once."""

    def present_days(self, records: Sequence[AttendanceRecord]) -> int:
        return len({r.work_date for r in records if r.is_present})
