from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceType, Presence


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one persisted attendance record."""

    record_id: str
    user_id: str
    work_date: date
    presence: Presence
    type: AttendanceType
    project_id: Optional[str] = None
    working_hours: float = 0.0
    overtime_hours: float = 0.0
    marked_by: Optional[str] = None
    marked_at: Optional[datetime] = None
    project_name: Optional[str] = None
    marked_by_name: Optional[str] = None

    @property
    def is_present(self) -> bool:
        return self.presence == Presence.PRESENT

    @property
    def is_paid_leave(self) -> bool:
        return self.presence == Presence.PAID_LEAVE

    def to_draft(self, *, marked_by: Optional[str] = None) -> "AttendanceDraft":
        return AttendanceDraft(
            user_id=self.user_id,
            work_date=self.work_date,
            presence=self.presence,
            type=self.type,
            project_id=self.project_id,
            working_hours=self.working_hours,
            overtime_hours=self.overtime_hours,
            marked_by=marked_by or self.marked_by,
            record_id=self.record_id,
        )


@dataclass(frozen=True)
class AttendanceDraft:
    """Pre-persistence shape of a record (create when ``record_id`` is None)."""

    user_id: str
    work_date: date
    presence: Presence
    type: AttendanceType = AttendanceType.NORMAL
    project_id: Optional[str] = None
    working_hours: float = 0.0
    overtime_hours: float = 0.0
    marked_by: Optional[str] = None
    record_id: Optional[str] = None

    @property
    def is_update(self) -> bool:
        return self.record_id is not None
