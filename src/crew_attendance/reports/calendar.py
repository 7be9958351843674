"""Grid and matrix builders consumed by the templates and JSON views.

Nothing here adds rules; cells only carry what the resolver and the
aggregator already derived.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..attendance.day_state import DayState, group_by_date, resolve_day
from ..attendance.model import AttendanceRecord
from ..core.constants import DAY_CELL_RECORD_CAP
from ..core.enums import Presence
from ..payroll.aggregator import TotalsBucket, aggregate_month
from ..users.model import Worker


@dataclass(frozen=True)
class CalendarCell:
    work_date: date
    day_state: DayState
    visible_records: Sequence[AttendanceRecord]
    more_count: int
    is_weekend: bool
    is_today: bool


CalendarWeek = list[Optional[CalendarCell]]


def build_month_calendar(
    records: Sequence[AttendanceRecord],
    year: int,
    month: int,
    *,
    cap: int = DAY_CELL_RECORD_CAP,
    today: Optional[date] = None,
) -> list[CalendarWeek]:
    """Weeks start on Sunday; days outside the month are ``None``."""

    grouped = group_by_date(records)
    month_calendar = calendar.Calendar(firstweekday=calendar.SUNDAY)

    weeks: list[CalendarWeek] = []
    for week in month_calendar.monthdatescalendar(year, month):
        row: CalendarWeek = []
        for day in week:
            if day.month != month:
                row.append(None)
                continue
            day_records = grouped.get(day, [])
            row.append(
                CalendarCell(
                    work_date=day,
                    day_state=resolve_day(day_records),
                    visible_records=tuple(day_records[:cap]),
                    more_count=max(len(day_records) - cap, 0),
                    is_weekend=day.weekday() >= 5,
                    is_today=day == today,
                )
            )
        weeks.append(row)
    return weeks


@dataclass(frozen=True)
class MatrixCell:
    present: bool
    working_hours: float
    overtime_hours: float


@dataclass(frozen=True)
class MatrixRow:
    work_date: date
    cells: dict[str, Optional[MatrixCell]]


@dataclass(frozen=True)
class ProjectMatrix:
    workers: Sequence[Worker]
    rows: Sequence[MatrixRow]
    totals: dict[str, TotalsBucket]


def build_project_matrix(
    records: Sequence[AttendanceRecord],
    workers: Sequence[Worker],
    dates: Sequence[date],
) -> ProjectMatrix:
    """One row per date, one column per worker, totals per worker."""

    by_worker_date: dict[tuple[str, date], list[AttendanceRecord]] = {}
    for r in records:
        by_worker_date.setdefault((r.user_id, r.work_date), []).append(r)

    rows = []
    for day in sorted(set(dates)):
        cells: dict[str, Optional[MatrixCell]] = {}
        for worker in workers:
            day_records = by_worker_date.get((worker.user_id, day))
            if not day_records:
                cells[worker.user_id] = None
                continue
            cells[worker.user_id] = MatrixCell(
                present=any(r.presence == Presence.PRESENT for r in day_records),
                working_hours=sum(float(r.working_hours or 0) for r in day_records),
                overtime_hours=sum(float(r.overtime_hours or 0) for r in day_records),
            )
        rows.append(MatrixRow(work_date=day, cells=cells))

    totals = {
        worker.user_id: aggregate_month([r for r in records if r.user_id == worker.user_id]).overall
        for worker in workers
    }
    return ProjectMatrix(workers=list(workers), rows=rows, totals=totals)
