from __future__ import annotations

from datetime import date
from typing import Any, Optional

from flask import Flask, jsonify, render_template, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..core.enums import AttendanceType, Presence, Scope, ValidationErrorKind
from ..core.exceptions import NotFoundError, PersistenceError, ValidationError
from ..container import Container
from ..payroll.aggregator import TotalsBucket
from ..payroll.export import export_csv, export_xlsx
from ..reports.calendar import CalendarCell, build_month_calendar, build_project_matrix
from .day_state import DayState
from .editor import EditorState, SelectPresence, SelectProject, SelectType, SetHours, transition
from .model import AttendanceDraft, AttendanceRecord
from .service import MonthlyAttendance


def _record_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "userId": r.user_id,
        "date": r.work_date.isoformat(),
        "presence": r.presence.value,
        "type": r.type.value,
        "projectId": r.project_id,
        "projectName": r.project_name,
        "workingHours": r.working_hours,
        "overtimeHours": r.overtime_hours,
        "markedBy": r.marked_by,
        "markedByName": r.marked_by_name,
        "markedAt": r.marked_at.isoformat() if r.marked_at else None,
    }


def _day_json(state: DayState) -> dict:
    return {
        "badge": state.badge.value,
        "isEmpty": state.is_empty,
        "hasPaidLeave": state.has_paid_leave,
        "hasPresent": state.has_present,
        "hasAbsent": state.has_absent,
        "recordCount": state.record_count,
    }


def _cell_json(cell: Optional[CalendarCell]) -> Optional[dict]:
    if cell is None:
        return None
    return {
        "date": cell.work_date.isoformat(),
        "day": _day_json(cell.day_state),
        "records": [_record_json(r) for r in cell.visible_records],
        "moreCount": cell.more_count,
        "isWeekend": cell.is_weekend,
        "isToday": cell.is_today,
    }


def _month_json(month: MonthlyAttendance, *, cap: int) -> dict:
    weeks = build_month_calendar(month.records, month.year, month.month, cap=cap, today=now_local().date())
    return {
        "userId": month.user_id,
        "month": month.month,
        "year": month.year,
        "scope": month.scope.value,
        "records": [_record_json(r) for r in month.records],
        "calendar": [[_cell_json(c) for c in week] for week in weeks],
        "totals": month.totals.as_dict(),
    }


def _state_json(state: EditorState) -> dict:
    return {
        "presence": state.presence.value,
        "type": state.type.value,
        "projectId": state.project_id,
        "workingHours": state.working_hours,
        "overtimeHours": state.overtime_hours,
        "needsProject": state.needs_project,
    }


def _presence_from(body: dict) -> Presence:
    if body.get("presence"):
        return Presence(body["presence"])
    if body.get("isPaidLeave"):
        return Presence.PAID_LEAVE
    return Presence.PRESENT if body.get("present") else Presence.ABSENT


def _state_from(body: Optional[dict]) -> EditorState:
    if not body:
        return EditorState()
    return EditorState(
        presence=_presence_from(body),
        type=AttendanceType(body.get("type") or AttendanceType.NORMAL.value),
        project_id=body.get("projectId") or None,
        working_hours=float(body.get("workingHours") or 0),
        overtime_hours=float(body.get("overtimeHours") or 0),
    )


def _event_from(body: dict):
    kind = (body.get("kind") or "").lower()
    if kind == "presence":
        return SelectPresence(Presence(body["presence"]), default_hours=float(body.get("defaultHours") or 8))
    if kind == "type":
        return SelectType(AttendanceType(body["type"]))
    if kind == "project":
        return SelectProject(body.get("projectId"))
    if kind == "hours":
        return SetHours(float(body.get("workingHours") or 0), float(body.get("overtimeHours") or 0))
    raise ValidationError(ValidationErrorKind.MISSING_FIELD, f"Unknown editor event: {kind!r}")


def _draft_from(body: dict) -> AttendanceDraft:
    if not body.get("date"):
        raise ValidationError(ValidationErrorKind.MISSING_FIELD, "Attendance date is required")
    return AttendanceDraft(
        user_id=str(body.get("userId") or ""),
        work_date=parse_iso_date(str(body["date"])),
        presence=_presence_from(body),
        type=AttendanceType(body.get("type") or AttendanceType.NORMAL.value),
        project_id=body.get("projectId") or None,
        working_hours=body.get("workingHours") or 0,
        overtime_hours=body.get("overtimeHours") or 0,
        marked_by=body.get("markedBy"),
        record_id=body.get("recordId") or body.get("attendanceId") or None,
    )


def _totals_json(bucket: TotalsBucket) -> dict:
    return bucket.as_dict()


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service
    reports = container.payroll_report_service

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return jsonify({"success": False, "kind": e.kind.value, "message": str(e)}), 400

    @app.errorhandler(ValueError)
    def handle_bad_input(e: ValueError):
        # Unknown enum values, non-numeric months and malformed dates.
        return jsonify({"success": False, "message": f"Invalid request: {e}"}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return jsonify({"success": False, "message": str(e), "refetch": True}), 404

    @app.errorhandler(PersistenceError)
    def handle_persistence(e: PersistenceError):
        draft = e.draft
        return jsonify(
            {
                "success": False,
                "message": str(e),
                "draft": _draft_json(draft) if isinstance(draft, AttendanceDraft) else None,
            }
        ), 502

    def _draft_json(d: AttendanceDraft) -> dict:
        return {
            "recordId": d.record_id,
            "userId": d.user_id,
            "date": d.work_date.isoformat(),
            "presence": d.presence.value,
            "type": d.type.value,
            "projectId": d.project_id,
            "workingHours": d.working_hours,
            "overtimeHours": d.overtime_hours,
            "markedBy": d.marked_by,
        }

    def _month_args() -> tuple[int, int, Scope]:
        today = now_local().date()
        month = int(request.args.get("month") or today.month)
        year = int(request.args.get("year") or today.year)
        scope = Scope(request.args.get("scope") or request.args.get("type") or Scope.ALL.value)
        return month, year, scope

    def _date_arg(value: Optional[str]) -> date:
        return parse_iso_date(value) if value else now_local().date()

    @app.route("/attendance/users/<user_id>/monthly", methods=["GET"], endpoint="user_monthly")
    def user_monthly(user_id: str):
        month, year, scope = _month_args()
        data = svc.load_month(user_id, month, year, scope)
        return jsonify(_month_json(data, cap=container.day_cell_cap))

    @app.route("/attendance/users/<user_id>/monthly.csv", methods=["GET"], endpoint="user_monthly_csv")
    def user_monthly_csv(user_id: str):
        month, year, scope = _month_args()
        data = reports.build_monthly_report(user_id=user_id, month=month, year=year, scope=scope)
        return app.response_class(
            export_csv(data),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={data.filename_stem}.csv"},
        )

    @app.route("/attendance/users/<user_id>/monthly.xlsx", methods=["GET"], endpoint="user_monthly_xlsx")
    def user_monthly_xlsx(user_id: str):
        month, year, scope = _month_args()
        data = reports.build_monthly_report(user_id=user_id, month=month, year=year, scope=scope)
        return app.response_class(
            export_xlsx(data),
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": f"attachment; filename={data.filename_stem}.xlsx"},
        )

    @app.route("/attendance/users/<user_id>/monthly/print", methods=["GET"], endpoint="user_monthly_print")
    def user_monthly_print(user_id: str):
        month, year, scope = _month_args()
        snapshot = svc.load_month(user_id, month, year, scope)
        data = reports.build_monthly_report(user_id=user_id, month=month, year=year, scope=scope, snapshot=snapshot)
        weeks = build_month_calendar(snapshot.records, year, month, cap=container.day_cell_cap)
        return render_template("reports/monthly_summary.html", report=data, weeks=weeks)

    @app.route("/attendance/users/<user_id>/projects", methods=["GET"], endpoint="user_projects")
    def user_projects(user_id: str):
        projects = svc.user_projects(user_id)
        return jsonify(
            {
                "projects": [
                    {
                        "id": p.project_id,
                        "projectName": p.project_name,
                        "projectNumber": p.project_number,
                        "clientName": p.client_name,
                        "location": p.location,
                    }
                    for p in projects
                ]
            }
        )

    @app.route("/attendance/records", methods=["POST"], endpoint="save_record")
    def save_record():
        body: dict[str, Any] = request.get_json(silent=True) or {}
        draft = _draft_from(body)
        scope = Scope(body.get("scope") or Scope.ALL.value)
        result = svc.save(draft, scope=scope)
        status = 200 if draft.is_update else 201
        return jsonify(
            {
                "success": True,
                "record": _record_json(result.record),
                "month": _month_json(result.month, cap=container.day_cell_cap),
            }
        ), status

    @app.route("/attendance/records/<record_id>", methods=["DELETE"], endpoint="delete_record")
    def delete_record(record_id: str):
        month = svc.delete(
            record_id,
            user_id=request.args.get("userId", ""),
            work_date=_date_arg(request.args.get("date")),
            marked_by=request.args.get("markedBy", ""),
            scope=Scope(request.args.get("scope") or Scope.ALL.value),
        )
        return jsonify({"success": True, "month": _month_json(month, cap=container.day_cell_cap)})

    @app.route("/attendance/editor/transition", methods=["POST"], endpoint="editor_transition")
    def editor_transition():
        body: dict[str, Any] = request.get_json(silent=True) or {}
        state = _state_from(body.get("state"))
        event = _event_from(body.get("event") or {})
        return jsonify({"state": _state_json(transition(state, event))})

    @app.route("/attendance/mark/normal", methods=["POST"], endpoint="mark_normal")
    def mark_normal():
        body: dict[str, Any] = request.get_json(silent=True) or {}
        result = svc.mark_normal(
            user_id=str(body.get("userId") or ""),
            work_date=_date_arg(body.get("date")),
            present=bool(body.get("present")),
            hours=body.get("workingHours"),
            marked_by=str(body.get("markedBy") or ""),
        )
        return jsonify({"success": True, "record": _record_json(result.record)})

    @app.route("/attendance/mark/project/<project_id>", methods=["POST"], endpoint="mark_project")
    def mark_project(project_id: str):
        body: dict[str, Any] = request.get_json(silent=True) or {}
        result = svc.mark_project(
            project_id=project_id,
            user_id=str(body.get("userId") or ""),
            work_date=_date_arg(body.get("date")),
            present=bool(body.get("present")),
            hours=body.get("workingHours"),
            paid_leave=bool(body.get("isPaidLeave")),
            marked_by=str(body.get("markedBy") or ""),
        )
        return jsonify({"success": True, "record": _record_json(result.record)})

    @app.route("/attendance/daily", methods=["GET"], endpoint="daily_roster")
    def daily_roster():
        work_date = _date_arg(request.args.get("date"))
        roster = svc.daily_roster(work_date)
        return jsonify(
            {
                "date": work_date.isoformat(),
                "users": [
                    {
                        "userId": e.worker.user_id,
                        "name": e.worker.full_name,
                        "day": _day_json(e.day_state),
                        "records": [_record_json(r) for r in e.records],
                    }
                    for e in roster
                ],
            }
        )

    @app.route("/attendance/projects/<project_id>/summary", methods=["GET"], endpoint="project_summary")
    def project_summary(project_id: str):
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        summary = svc.project_attendance(
            project_id,
            start=parse_iso_date(start_s) if start_s else None,
            end=parse_iso_date(end_s) if end_s else None,
        )
        matrix = build_project_matrix(summary.records, summary.workers, summary.dates)
        return jsonify(
            {
                "projectId": project_id,
                "users": [{"userId": w.user_id, "name": w.full_name} for w in matrix.workers],
                "rows": [
                    {
                        "date": row.work_date.isoformat(),
                        "cells": {
                            uid: (
                                {
                                    "present": cell.present,
                                    "workingHours": cell.working_hours,
                                    "overtimeHours": cell.overtime_hours,
                                }
                                if cell
                                else None
                            )
                            for uid, cell in row.cells.items()
                        },
                    }
                    for row in matrix.rows
                ],
                "totals": {uid: _totals_json(b) for uid, b in matrix.totals.items()},
            }
        )
