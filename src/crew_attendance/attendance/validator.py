"""Attendance record rules.

``validate`` is the single gate every draft passes before a create/update is
sent to the persistence API. It is pure: it never fetches, it only looks at the
draft and at the same-day records the caller already holds.

Rules are checked in a fixed order and the first failure wins, so a rejected
draft always names exactly one violated rule.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable, Optional, Union

from ..core.constants import MAX_WORKING_HOURS
from ..core.enums import AttendanceType, Presence, ValidationErrorKind
from ..core.exceptions import ValidationError
from .model import AttendanceDraft, AttendanceRecord

SameDayRecord = Union[AttendanceRecord, AttendanceDraft]


def _clean_project_id(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _as_hours(value) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(ValidationErrorKind.HOURS_OUT_OF_RANGE, f"Hours must be a number, got {value!r}")


def _normalize(draft: AttendanceDraft) -> AttendanceDraft:
    working = _as_hours(draft.working_hours)
    overtime = _as_hours(draft.overtime_hours)
    project_id = _clean_project_id(draft.project_id)

    if draft.presence != Presence.PRESENT:
        working = overtime = 0.0
    if draft.type == AttendanceType.NORMAL:
        project_id = None

    return replace(draft, working_hours=working, overtime_hours=overtime, project_id=project_id)


def check_required(draft: AttendanceDraft, *, require_operator: bool = True) -> None:
    """Reject a draft that lacks the user, the date, the operator or its axes."""

    if not draft.user_id or not str(draft.user_id).strip():
        raise ValidationError(ValidationErrorKind.MISSING_FIELD, "No user selected")
    if draft.work_date is None:
        raise ValidationError(ValidationErrorKind.MISSING_FIELD, "Attendance date is required")
    if require_operator and (not draft.marked_by or not str(draft.marked_by).strip()):
        raise ValidationError(ValidationErrorKind.MISSING_FIELD, "The operator marking attendance is required")
    if not isinstance(draft.presence, Presence) or not isinstance(draft.type, AttendanceType):
        raise ValidationError(ValidationErrorKind.MISSING_FIELD, "Presence and type must be set")


def _check_leave(draft: AttendanceDraft) -> None:
    if draft.presence != Presence.PAID_LEAVE:
        return
    if draft.type == AttendanceType.PROJECT or _clean_project_id(draft.project_id):
        raise ValidationError(
            ValidationErrorKind.INVALID_LEAVE_PROJECT,
            "Paid leave cannot be recorded against a project",
        )


def _check_project_reference(draft: AttendanceDraft, *, strict: bool) -> None:
    project_id = _clean_project_id(draft.project_id)
    if draft.type == AttendanceType.PROJECT and not project_id:
        raise ValidationError(
            ValidationErrorKind.MISSING_PROJECT_REFERENCE,
            "Please select a project for project attendance",
        )
    if strict and draft.type == AttendanceType.NORMAL and project_id:
        raise ValidationError(
            ValidationErrorKind.MISSING_PROJECT_REFERENCE,
            "Normal attendance must not reference a project",
        )


def _check_hours(draft: AttendanceDraft) -> None:
    working = _as_hours(draft.working_hours)
    overtime = _as_hours(draft.overtime_hours)
    if draft.presence == Presence.PRESENT:
        if not math.isfinite(working) or working < 0 or working > MAX_WORKING_HOURS:
            raise ValidationError(
                ValidationErrorKind.HOURS_OUT_OF_RANGE,
                f"Working hours must be between 0 and {MAX_WORKING_HOURS:g}",
            )
        if not math.isfinite(overtime) or overtime < 0:
            raise ValidationError(ValidationErrorKind.HOURS_OUT_OF_RANGE, "Overtime hours cannot be negative")
    elif working != 0 or overtime != 0:
        raise ValidationError(
            ValidationErrorKind.NON_ZERO_HOURS_ON_ABSENCE,
            "Absent and paid leave records cannot carry hours",
        )


def _check_duplicate_leave(draft: AttendanceDraft, existing: Iterable[SameDayRecord]) -> None:
    if draft.presence != Presence.PAID_LEAVE:
        return
    for other in existing:
        if other.presence != Presence.PAID_LEAVE:
            continue
        if other.user_id != draft.user_id or other.work_date != draft.work_date:
            continue
        if draft.record_id is not None and other.record_id == draft.record_id:
            continue
        raise ValidationError(
            ValidationErrorKind.DUPLICATE_PAID_LEAVE,
            f"Paid leave is already recorded for {draft.work_date.isoformat()}",
        )


def validate(
    draft: AttendanceDraft,
    existing: Iterable[SameDayRecord] = (),
    *,
    strict: bool = False,
    require_operator: bool = True,
) -> AttendanceDraft:
    """Return the normalized draft or raise ``ValidationError``.

    ``existing`` holds the records already stored for the same worker and
    date; only paid leave entries among them matter. With ``strict`` the draft
    is checked as-is instead of being normalized first.
    """

    check_required(draft, require_operator=require_operator)
    _check_leave(draft)
    _check_project_reference(draft, strict=strict)

    if not strict:
        draft = _normalize(draft)

    _check_hours(draft)
    _check_duplicate_leave(draft, existing)

    if strict:
        return replace(
            draft,
            working_hours=_as_hours(draft.working_hours),
            overtime_hours=_as_hours(draft.overtime_hours),
            project_id=_clean_project_id(draft.project_id),
        )
    return draft


def check_record(record: AttendanceRecord) -> AttendanceRecord:
    """Vet a record read back from the API without rewriting it."""

    validate(record.to_draft(), strict=True, require_operator=False)
    return record
