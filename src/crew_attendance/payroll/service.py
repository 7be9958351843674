from __future__ import annotations

import calendar
from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService, MonthlyAttendance
from ..core.enums import AttendanceType, Presence, Scope
from ..users.repository import UserRepository
from .aggregator import MonthlyTotals

REPORT_COLUMNS = [
    "Date",
    "Status",
    "Type",
    "Project",
    "Working Hours",
    "Overtime Hours",
    "Marked By",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    totals_row: dict
    totals: MonthlyTotals
    worker_name: str
    month: int
    year: int
    scope: Scope

    @property
    def filename_stem(self) -> str:
        name = (self.worker_name or "User").replace(" ", "_")
        return f"Attendance_{name}_{calendar.month_name[self.month]}_{self.year}_{self.scope.value}"


def _status_label(record: AttendanceRecord) -> str:
    if record.presence == Presence.PAID_LEAVE:
        return "Day Off (Paid)"
    return "Present" if record.presence == Presence.PRESENT else "Absent"


def _to_row(record: AttendanceRecord) -> dict:
    return {
        "Date": record.work_date.strftime("%d/%m/%Y"),
        "Status": _status_label(record),
        "Type": "Project" if record.type == AttendanceType.PROJECT else "Normal",
        "Project": record.project_name or record.project_id or "N/A",
        "Working Hours": record.working_hours or 0,
        "Overtime Hours": record.overtime_hours or 0,
        "Marked By": record.marked_by_name or record.marked_by or "System",
    }


class PayrollReportService:
    def __init__(self, attendance: AttendanceService, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def build_monthly_report(
        self,
        *,
        user_id: str,
        month: int,
        year: int,
        scope: Scope = Scope.ALL,
        snapshot: Optional[MonthlyAttendance] = None,
    ) -> ReportData:
        snapshot = snapshot or self._attendance.load_month(user_id, month, year, scope)
        worker = self._users.get_by_id(user_id)

        totals = snapshot.totals
        totals_row = {
            "Date": "TOTALS",
            "Status": f"{totals.overall.present_days} Present Days",
            "Type": f"{snapshot.scope.value.upper()} Attendance",
            "Project": "",
            "Working Hours": totals.overall.total_working_hours,
            "Overtime Hours": totals.overall.total_overtime_hours,
            "Marked By": "",
        }

        return ReportData(
            rows=[_to_row(r) for r in snapshot.records],
            totals_row=totals_row,
            totals=totals,
            worker_name=worker.full_name if worker else "",
            month=snapshot.month,
            year=snapshot.year,
            scope=snapshot.scope,
        )
