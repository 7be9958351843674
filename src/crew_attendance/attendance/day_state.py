from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from ..core.enums import DayBadge, Presence
from .model import AttendanceRecord


@dataclass(frozen=True)
class DayState:
    """Merged view of every record one worker has on one date."""

    is_empty: bool
    has_paid_leave: bool
    has_present: bool
    has_absent: bool
    badge: DayBadge
    record_count: int


EMPTY_DAY = DayState(
    is_empty=True,
    has_paid_leave=False,
    has_present=False,
    has_absent=False,
    badge=DayBadge.EMPTY,
    record_count=0,
)


def resolve_day(records: Iterable[AttendanceRecord]) -> DayState:
    records = tuple(records)
    if not records:
        return EMPTY_DAY

    has_paid_leave = any(r.presence == Presence.PAID_LEAVE for r in records)
    has_present = any(r.presence == Presence.PRESENT for r in records)
    # Paid leave is its own category, not an absence.
    has_absent = any(r.presence == Presence.ABSENT for r in records)

    if has_paid_leave:
        badge = DayBadge.PAID_LEAVE
    elif has_present and has_absent:
        badge = DayBadge.MIXED
    elif has_present:
        badge = DayBadge.PRESENT
    elif has_absent:
        badge = DayBadge.ABSENT
    else:
        badge = DayBadge.EMPTY

    return DayState(
        is_empty=False,
        has_paid_leave=has_paid_leave,
        has_present=has_present,
        has_absent=has_absent,
        badge=badge,
        record_count=len(records),
    )


def group_by_date(records: Sequence[AttendanceRecord]) -> dict[date, list[AttendanceRecord]]:
    """Bucket records per day, keeping each day sorted by type (normal first)."""

    by_date: dict[date, list[AttendanceRecord]] = defaultdict(list)
    for r in records:
        by_date[r.work_date].append(r)
    for day_records in by_date.values():
        day_records.sort(key=lambda r: r.type.value)
    return dict(by_date)
