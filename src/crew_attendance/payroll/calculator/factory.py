from __future__ import annotations

from .base import PresentDayCounter
from .distinct_date_counter import DistinctDatePresentDayCounter
from .per_record_counter import PerRecordPresentDayCounter

_COUNTERS = {
    "distinct_date": DistinctDatePresentDayCounter,
    "per_record": PerRecordPresentDayCounter,
}


def counter_for_policy(policy: str) -> PresentDayCounter:
    """Factory Pattern: pick the present-day counter configured for payroll."""

    try:
        return _COUNTERS[(policy or "distinct_date").strip().lower()]()
    except KeyError:
        raise ValueError(f"Unknown present-day policy: {policy!r}") from None
