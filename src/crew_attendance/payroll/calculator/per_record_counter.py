from __future__ import annotations

from typing import Sequence

from .base import PresentDayCounter
from ...attendance.model import AttendanceRecord


class PerRecordPresentDayCounter(PresentDayCounter):
    """Legacy rule: every present record counts, same-day duplicates included."""

    def present_days(self, records: Sequence[AttendanceRecord]) -> int:
        return sum(1 for r in records if r.is_present)
