from datetime import date

import pytest

from crew_attendance.attendance.editor import (
    EditorState,
    SelectPresence,
    SelectProject,
    SelectType,
    SetHours,
    initial_state,
    submit,
    transition,
)
from crew_attendance.core.enums import AttendanceType, Presence, ValidationErrorKind
from crew_attendance.core.exceptions import ValidationError


def test_paid_leave_collapses_type_and_hours():
    state = EditorState(type=AttendanceType.PROJECT, project_id="p1", working_hours=6, overtime_hours=1)

    out = transition(state, SelectPresence(Presence.PAID_LEAVE))

    assert out.presence == Presence.PAID_LEAVE
    assert out.type == AttendanceType.NORMAL
    assert out.project_id is None
    assert (out.working_hours, out.overtime_hours) == (0, 0)


def test_type_cannot_change_during_paid_leave():
    state = transition(EditorState(), SelectPresence(Presence.PAID_LEAVE))

    assert transition(state, SelectType(AttendanceType.PROJECT)) == state


def test_absent_zeroes_hours_and_present_restores_default():
    state = transition(EditorState(working_hours=6), SelectPresence(Presence.ABSENT))
    assert state.working_hours == 0

    state = transition(state, SelectPresence(Presence.PRESENT, default_hours=7.5))
    assert state.working_hours == 7.5


def test_present_keeps_existing_hours():
    state = transition(EditorState(working_hours=5), SelectPresence(Presence.PRESENT))

    assert state.working_hours == 5


def test_switching_type_clears_project():
    state = transition(EditorState(), SelectType(AttendanceType.PROJECT))
    state = transition(state, SelectProject("p1"))
    assert state.project_id == "p1"
    assert not state.needs_project

    state = transition(state, SelectType(AttendanceType.NORMAL))
    assert state.project_id is None


def test_project_needed_until_selected():
    state = transition(EditorState(), SelectType(AttendanceType.PROJECT))

    assert state.needs_project


def test_select_project_ignored_for_normal():
    assert transition(EditorState(), SelectProject("p1")).project_id is None


def test_hours_ignored_unless_present():
    state = transition(EditorState(), SelectPresence(Presence.ABSENT))

    assert transition(state, SetHours(9, 2)) == state


def test_unknown_event_raises():
    with pytest.raises(TypeError):
        transition(EditorState(), object())


def test_initial_state_from_record(make_record):
    rec = make_record(type=AttendanceType.PROJECT, project_id="p1", working_hours=6)

    state = initial_state(rec)

    assert state.type == AttendanceType.PROJECT
    assert state.project_id == "p1"
    assert state.working_hours == 6


def test_submit_validates_the_draft():
    state = transition(EditorState(), SelectType(AttendanceType.PROJECT))

    with pytest.raises(ValidationError) as exc:
        submit(state, user_id="u1", work_date=date(2024, 5, 6), marked_by="admin")
    assert exc.value.kind == ValidationErrorKind.MISSING_PROJECT_REFERENCE


def test_submit_builds_update_draft():
    draft = submit(EditorState(), user_id="u1", work_date=date(2024, 5, 6), marked_by="admin", record_id="r1")

    assert draft.is_update
    assert draft.working_hours == 8
