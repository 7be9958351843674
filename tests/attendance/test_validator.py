from datetime import date

import pytest

from crew_attendance.attendance.model import AttendanceDraft
from crew_attendance.attendance.validator import check_record, validate
from crew_attendance.core.enums import AttendanceType, Presence, ValidationErrorKind
from crew_attendance.core.exceptions import ValidationError

DAY = date(2024, 5, 6)


def _draft(**kw) -> AttendanceDraft:
    base = dict(user_id="u1", work_date=DAY, presence=Presence.PRESENT, marked_by="admin", working_hours=8)
    base.update(kw)
    return AttendanceDraft(**base)


def test_paid_leave_on_project_is_rejected():
    draft = _draft(presence=Presence.PAID_LEAVE, type=AttendanceType.PROJECT, project_id="p1", working_hours=0)

    with pytest.raises(ValidationError) as exc:
        validate(draft)
    assert exc.value.kind == ValidationErrorKind.INVALID_LEAVE_PROJECT


def test_paid_leave_with_stray_project_id_is_rejected():
    draft = _draft(presence=Presence.PAID_LEAVE, project_id="p1", working_hours=0)

    with pytest.raises(ValidationError) as exc:
        validate(draft)
    assert exc.value.kind == ValidationErrorKind.INVALID_LEAVE_PROJECT


def test_absent_hours_are_normalized_to_zero():
    out = validate(_draft(presence=Presence.ABSENT, working_hours=5, overtime_hours=2))

    assert out.working_hours == 0
    assert out.overtime_hours == 0


def test_second_paid_leave_same_day_is_rejected():
    first = validate(_draft(presence=Presence.PAID_LEAVE, working_hours=0))

    with pytest.raises(ValidationError) as exc:
        validate(_draft(presence=Presence.PAID_LEAVE, working_hours=0), existing=[first])
    assert exc.value.kind == ValidationErrorKind.DUPLICATE_PAID_LEAVE


def test_updating_the_same_paid_leave_record_is_allowed(make_record):
    stored = make_record("r9", work_date=DAY, presence=Presence.PAID_LEAVE, working_hours=0)

    out = validate(_draft(presence=Presence.PAID_LEAVE, working_hours=0, record_id="r9"), existing=[stored])
    assert out.record_id == "r9"


def test_paid_leave_on_another_day_does_not_conflict(make_record):
    other = make_record("r2", work_date=date(2024, 5, 7), presence=Presence.PAID_LEAVE, working_hours=0)

    validate(_draft(presence=Presence.PAID_LEAVE, working_hours=0), existing=[other])


def test_project_attendance_needs_a_project():
    with pytest.raises(ValidationError) as exc:
        validate(_draft(type=AttendanceType.PROJECT, project_id="  "))
    assert exc.value.kind == ValidationErrorKind.MISSING_PROJECT_REFERENCE


def test_normal_attendance_drops_project_id():
    out = validate(_draft(project_id="p1"))

    assert out.project_id is None
    assert out.type == AttendanceType.NORMAL


@pytest.mark.parametrize("hours", [-1, 24.5, "abc"])
def test_working_hours_out_of_range(hours):
    with pytest.raises(ValidationError) as exc:
        validate(_draft(working_hours=hours))
    assert exc.value.kind == ValidationErrorKind.HOURS_OUT_OF_RANGE


def test_negative_overtime_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate(_draft(overtime_hours=-0.5))
    assert exc.value.kind == ValidationErrorKind.HOURS_OUT_OF_RANGE


def test_missing_operator_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate(_draft(marked_by=" "))
    assert exc.value.kind == ValidationErrorKind.MISSING_FIELD


def test_missing_user_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate(_draft(user_id=""))
    assert exc.value.kind == ValidationErrorKind.MISSING_FIELD


def test_first_failing_rule_wins():
    # Leave on a project with hours breaks two rules; the leave rule is checked first.
    draft = _draft(presence=Presence.PAID_LEAVE, type=AttendanceType.PROJECT, project_id="p1", working_hours=30)

    with pytest.raises(ValidationError) as exc:
        validate(draft)
    assert exc.value.kind == ValidationErrorKind.INVALID_LEAVE_PROJECT


def test_validate_is_idempotent():
    once = validate(_draft(presence=Presence.ABSENT, working_hours="5", project_id="p1"))

    assert validate(once) == once


def test_check_record_flags_hours_on_absence(make_record):
    rec = make_record(presence=Presence.ABSENT, working_hours=4)

    with pytest.raises(ValidationError) as exc:
        check_record(rec)
    assert exc.value.kind == ValidationErrorKind.NON_ZERO_HOURS_ON_ABSENCE


def test_check_record_accepts_clean_record(make_record):
    rec = make_record()

    assert check_record(rec) is rec
