"""Monthly roll-up of one worker's attendance records.

Totals are derived on every fetch and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceType, Presence, Scope
from .calculator.base import PresentDayCounter
from .calculator.distinct_date_counter import DistinctDatePresentDayCounter


@dataclass(frozen=True)
class TotalsBucket:
    present_days: int = 0
    total_working_hours: float = 0.0
    total_overtime_hours: float = 0.0

    def as_dict(self) -> dict:
        return {
            "presentDays": self.present_days,
            "totalWorkingHours": self.total_working_hours,
            "totalOvertimeHours": self.total_overtime_hours,
        }


@dataclass(frozen=True)
class MonthlyTotals:
    scope: Scope
    overall: TotalsBucket = field(default_factory=TotalsBucket)
    project: TotalsBucket = field(default_factory=TotalsBucket)
    normal: TotalsBucket = field(default_factory=TotalsBucket)
    paid_leave_days: int = 0

    def as_dict(self) -> dict:
        out = {"overall": self.overall.as_dict(), "paidLeaveDays": self.paid_leave_days}
        if self.scope in (Scope.ALL, Scope.PROJECT):
            out["project"] = self.project.as_dict()
        if self.scope in (Scope.ALL, Scope.NORMAL):
            out["normal"] = self.normal.as_dict()
        return out


def _in_scope(record: AttendanceRecord, scope: Scope) -> bool:
    if scope == Scope.ALL:
        return True
    return record.type.value == scope.value


def _hours(records: Sequence[AttendanceRecord]) -> tuple[float, float]:
    working = 0.0
    overtime = 0.0
    for r in records:
        if r.presence == Presence.PAID_LEAVE:
            continue
        working += float(r.working_hours or 0)
        overtime += float(r.overtime_hours or 0)
    return working, overtime


def _bucket(records: Sequence[AttendanceRecord], counter: PresentDayCounter) -> TotalsBucket:
    working, overtime = _hours(records)
    return TotalsBucket(
        present_days=counter.present_days(records),
        total_working_hours=working,
        total_overtime_hours=overtime,
    )


def aggregate_month(
    records: Sequence[AttendanceRecord],
    scope: Scope = Scope.ALL,
    *,
    counter: Optional[PresentDayCounter] = None,
    paid_leave_days: int = 0,
) -> MonthlyTotals:
    """Sum one worker's month per attendance type and overall.

    ``records`` must already be limited to one worker and one month. Hours are
    additive (partial-day records add up); present days follow ``counter``.
    ``paid_leave_days`` is carried through untouched for callers that show it.
    """

    counter = counter or DistinctDatePresentDayCounter()
    scope = Scope(scope)

    scoped = [r for r in records if _in_scope(r, scope)]
    normal = [r for r in scoped if r.type == AttendanceType.NORMAL]
    project = [r for r in scoped if r.type == AttendanceType.PROJECT]

    normal_bucket = _bucket(normal, counter)
    project_bucket = _bucket(project, counter)
    overall_bucket = TotalsBucket(
        present_days=counter.present_days(scoped),
        total_working_hours=normal_bucket.total_working_hours + project_bucket.total_working_hours,
        total_overtime_hours=normal_bucket.total_overtime_hours + project_bucket.total_overtime_hours,
    )

    return MonthlyTotals(
        scope=scope,
        overall=overall_bucket,
        project=project_bucket,
        normal=normal_bucket,
        paid_leave_days=int(paid_leave_days),
    )
