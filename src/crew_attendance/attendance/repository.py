from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Scope
from ..users.model import Worker
from .model import AttendanceDraft, AttendanceRecord


@dataclass(frozen=True)
class ProjectAttendance:
    """Read-model for the project matrix: records plus the workers shown."""

    project_id: str
    records: Sequence[AttendanceRecord]
    workers: Sequence[Worker]
    dates: Sequence[date]


class AttendanceRepository(Protocol):
    def create_or_update(self, draft: AttendanceDraft) -> AttendanceRecord:
        """Upsert: updates when ``draft.record_id`` is set, creates otherwise."""

        raise NotImplementedError

    def delete(self, record_id: str) -> None:
        raise NotImplementedError

    def fetch_monthly(self, user_id: str, month: int, year: int, scope: Scope = Scope.ALL) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def fetch_for_user_and_date(self, user_id: str, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def fetch_daily(self, work_date: date) -> Sequence[AttendanceRecord]:
        """All workers' records for one day (same-day bulk marking)."""

        raise NotImplementedError

    def fetch_project_summary(
        self,
        project_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ProjectAttendance:
        raise NotImplementedError
