"""Edit workflow for a single attendance record.

The editor is an explicit ``presence x type`` value with one pure transition
function. Paid leave collapses the type axis to normal.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional, Union

from ..core.constants import DEFAULT_WORKING_HOURS
from ..core.enums import AttendanceType, Presence
from .model import AttendanceDraft, AttendanceRecord
from .validator import SameDayRecord, validate


@dataclass(frozen=True)
class EditorState:
    presence: Presence = Presence.PRESENT
    type: AttendanceType = AttendanceType.NORMAL
    project_id: Optional[str] = None
    working_hours: float = DEFAULT_WORKING_HOURS
    overtime_hours: float = 0.0

    @property
    def needs_project(self) -> bool:
        return (
            self.type == AttendanceType.PROJECT
            and self.presence != Presence.PAID_LEAVE
            and not self.project_id
        )


@dataclass(frozen=True)
class SelectPresence:
    presence: Presence
    default_hours: float = DEFAULT_WORKING_HOURS


@dataclass(frozen=True)
class SelectType:
    type: AttendanceType


@dataclass(frozen=True)
class SelectProject:
    project_id: Optional[str]


@dataclass(frozen=True)
class SetHours:
    working_hours: float
    overtime_hours: float = 0.0


EditorEvent = Union[SelectPresence, SelectType, SelectProject, SetHours]


def initial_state(record: Optional[AttendanceRecord] = None) -> EditorState:
    if record is None:
        return EditorState()
    return EditorState(
        presence=record.presence,
        type=record.type,
        project_id=record.project_id,
        working_hours=float(record.working_hours or 0),
        overtime_hours=float(record.overtime_hours or 0),
    )


def _select_presence(state: EditorState, event: SelectPresence) -> EditorState:
    if event.presence == Presence.PRESENT:
        hours = state.working_hours if state.working_hours else float(event.default_hours)
        return replace(state, presence=Presence.PRESENT, working_hours=hours)
    if event.presence == Presence.ABSENT:
        return replace(state, presence=Presence.ABSENT, working_hours=0.0, overtime_hours=0.0)
    return replace(
        state,
        presence=Presence.PAID_LEAVE,
        type=AttendanceType.NORMAL,
        project_id=None,
        working_hours=0.0,
        overtime_hours=0.0,
    )


def _select_type(state: EditorState, event: SelectType) -> EditorState:
    if event.type == state.type:
        return state
    if state.presence == Presence.PAID_LEAVE:
        # Leave days are always normal attendance.
        return state
    return replace(state, type=event.type, project_id=None)


def _select_project(state: EditorState, event: SelectProject) -> EditorState:
    if state.type != AttendanceType.PROJECT:
        return state
    project_id = (event.project_id or "").strip() or None
    return replace(state, project_id=project_id)


def _set_hours(state: EditorState, event: SetHours) -> EditorState:
    if state.presence != Presence.PRESENT:
        return state
    return replace(state, working_hours=float(event.working_hours), overtime_hours=float(event.overtime_hours))


def transition(state: EditorState, event: EditorEvent) -> EditorState:
    if isinstance(event, SelectPresence):
        return _select_presence(state, event)
    if isinstance(event, SelectType):
        return _select_type(state, event)
    if isinstance(event, SelectProject):
        return _select_project(state, event)
    if isinstance(event, SetHours):
        return _set_hours(state, event)
    raise TypeError(f"Unsupported editor event: {event!r}")


def submit(
    state: EditorState,
    *,
    user_id: str,
    work_date: date,
    marked_by: str,
    record_id: Optional[str] = None,
    existing: Iterable[SameDayRecord] = (),
) -> AttendanceDraft:
    """Turn the editor state into a validated draft ready for persistence."""

    draft = AttendanceDraft(
        user_id=user_id,
        work_date=work_date,
        presence=state.presence,
        type=state.type,
        project_id=state.project_id,
        working_hours=state.working_hours,
        overtime_hours=state.overtime_hours,
        marked_by=marked_by,
        record_id=record_id,
    )
    return validate(draft, existing)
