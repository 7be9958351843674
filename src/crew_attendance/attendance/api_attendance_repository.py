from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..api.connection import ApiConnection
from ..api.http_base import api_call, raise_for_status, unwrap
from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..core.enums import AttendanceType, Presence, Scope
from ..users.api_user_repository import worker_from_payload
from .model import AttendanceDraft, AttendanceRecord
from .repository import AttendanceRepository, ProjectAttendance

logger = logging.getLogger(__name__)


def _ref(value: Any) -> tuple[Optional[str], Optional[dict]]:
    """Split a reference that may be a bare id or a populated document."""

    if value is None:
        return None, None
    if isinstance(value, dict):
        ref_id = value.get("_id") or value.get("id")
        return (str(ref_id) if ref_id is not None else None), value
    return str(value), None


def _presence(payload: dict) -> Presence:
    if payload.get("isPaidLeave"):
        return Presence.PAID_LEAVE
    return Presence.PRESENT if payload.get("present") else Presence.ABSENT


def record_from_payload(payload: dict, *, user_id: Optional[str] = None) -> AttendanceRecord:
    project_id, project = _ref(payload.get("project") or payload.get("projectId"))
    marked_by, marker = _ref(payload.get("markedBy"))
    owner, _ = _ref(payload.get("user") or payload.get("userId"))

    marked_by_name = None
    if marker:
        marked_by_name = f"{marker.get('firstName', '')} {marker.get('lastName', '')}".strip() or None

    return AttendanceRecord(
        record_id=str(payload.get("_id") or payload.get("id")),
        user_id=owner or str(user_id or ""),
        work_date=parse_iso_date(str(payload["date"])),
        presence=_presence(payload),
        type=AttendanceType(payload.get("type") or AttendanceType.NORMAL.value),
        project_id=project_id,
        working_hours=float(payload.get("workingHours") or 0),
        overtime_hours=float(payload.get("overtimeHours") or 0),
        marked_by=marked_by,
        marked_at=parse_iso_datetime(payload.get("markedAt")),
        project_name=project.get("projectName") if project else None,
        marked_by_name=marked_by_name,
    )


def draft_to_payload(draft: AttendanceDraft) -> dict:
    payload: dict[str, Any] = {
        "userId": draft.user_id,
        "date": draft.work_date.isoformat(),
        "present": draft.presence == Presence.PRESENT,
        "isPaidLeave": draft.presence == Presence.PAID_LEAVE,
        "workingHours": draft.working_hours,
        "overtimeHours": draft.overtime_hours,
        "type": draft.type.value,
        "markedBy": draft.marked_by,
    }
    if draft.type == AttendanceType.PROJECT:
        payload["projectId"] = draft.project_id
    if draft.record_id:
        payload["attendanceId"] = draft.record_id
    return payload


def _monthly_items(data: Any) -> list[dict]:
    # The monthly endpoint has answered in three shapes over time.
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get("attendance"), list):
            return data["attendance"]
        if "normalAttendance" in data or "projectAttendance" in data:
            return list(data.get("normalAttendance") or []) + list(data.get("projectAttendance") or [])
    return []


def sort_month(records: Sequence[AttendanceRecord]) -> list[AttendanceRecord]:
    return sorted(records, key=lambda r: (r.work_date, r.type.value))


class ApiAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def create_or_update(self, draft: AttendanceDraft) -> AttendanceRecord:
        with api_call(draft=draft):
            response = self._conn.request(
                "POST",
                "/attendance-management/create-update",
                json=draft_to_payload(draft),
            )
        data = unwrap(raise_for_status(response, draft=draft))
        return record_from_payload(data, user_id=draft.user_id)

    def delete(self, record_id: str) -> None:
        with api_call():
            response = self._conn.request("DELETE", f"/attendance-management/delete/{record_id}")
        raise_for_status(response)

    def fetch_monthly(self, user_id: str, month: int, year: int, scope: Scope = Scope.ALL) -> Sequence[AttendanceRecord]:
        with api_call():
            response = self._conn.request(
                "GET",
                f"/attendance/user/{user_id}/monthly",
                params={"month": int(month), "year": int(year), "type": Scope(scope).value},
            )
        data = unwrap(raise_for_status(response))
        records = [record_from_payload(item, user_id=user_id) for item in _monthly_items(data)]
        return sort_month(records)

    def fetch_for_user_and_date(self, user_id: str, work_date: date) -> Sequence[AttendanceRecord]:
        with api_call():
            response = self._conn.request(
                "GET",
                f"/attendance-management/user/{user_id}/date",
                params={"date": work_date.isoformat()},
            )
        data = unwrap(raise_for_status(response))
        if isinstance(data, dict):
            data = data.get("attendance") or data.get("records") or []
        return [record_from_payload(item, user_id=user_id) for item in data or []]

    def fetch_daily(self, work_date: date) -> Sequence[AttendanceRecord]:
        with api_call():
            response = self._conn.request(
                "GET",
                "/attendance/normal/daily",
                params={"date": work_date.isoformat()},
            )
        data = unwrap(raise_for_status(response))

        items = data.get("users") if isinstance(data, dict) else data
        records: list[AttendanceRecord] = []
        for item in items or []:
            if item.get("present") is None and not item.get("isPaidLeave"):
                # Worker listed but not marked yet.
                continue
            item = dict(item)
            item.setdefault("date", work_date.isoformat())
            if not (item.get("_id") or item.get("id")):
                owner, _ = _ref(item.get("user"))
                item["_id"] = f"{owner}:{work_date.isoformat()}"
            records.append(record_from_payload(item))
        return records

    def fetch_project_summary(
        self,
        project_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ProjectAttendance:
        params: dict[str, str] = {}
        if start:
            params["startDate"] = start.isoformat()
        if end:
            params["endDate"] = end.isoformat()

        with api_call():
            response = self._conn.request("GET", f"/attendance/project/{project_id}/summary", params=params or None)
        data = unwrap(raise_for_status(response)) or {}

        workers = [worker_from_payload(u) for u in data.get("users") or []]
        dates = [parse_iso_date(str(d)) for d in data.get("dates") or []]
        records: list[AttendanceRecord] = []
        for row in data.get("summary") or []:
            work_date = parse_iso_date(str(row["date"]))
            if work_date not in dates:
                dates.append(work_date)
            for worker in workers:
                cell = row.get(worker.user_id)
                if not isinstance(cell, dict):
                    continue
                records.append(
                    AttendanceRecord(
                        record_id=f"{project_id}:{worker.user_id}:{work_date.isoformat()}",
                        user_id=worker.user_id,
                        work_date=work_date,
                        presence=Presence.PRESENT if cell.get("present") else Presence.ABSENT,
                        type=AttendanceType.PROJECT,
                        project_id=project_id,
                        working_hours=float(cell.get("workingHours") or 0),
                        overtime_hours=float(cell.get("overtimeHours") or 0),
                    )
                )

        logger.debug("Project %s summary: %d workers, %d records", project_id, len(workers), len(records))
        return ProjectAttendance(project_id=project_id, records=records, workers=workers, dates=sorted(dates))
