from datetime import date
from itertools import permutations

from crew_attendance.attendance.day_state import EMPTY_DAY, group_by_date, resolve_day
from crew_attendance.core.enums import AttendanceType, DayBadge, Presence


def test_single_present_record(make_record):
    state = resolve_day([make_record()])

    assert state.badge == DayBadge.PRESENT
    assert state.record_count == 1


def test_present_and_absent_is_mixed(make_record):
    records = [
        make_record("a", work_date=date(2024, 5, 2)),
        make_record("b", work_date=date(2024, 5, 2), presence=Presence.ABSENT, type=AttendanceType.PROJECT, project_id="p1", working_hours=0),
    ]

    assert resolve_day(records).badge == DayBadge.MIXED


def test_paid_leave_takes_precedence(make_record):
    records = [
        make_record("a", presence=Presence.ABSENT, working_hours=0),
        make_record("b", presence=Presence.PAID_LEAVE, working_hours=0),
    ]

    state = resolve_day(records)

    assert state.badge == DayBadge.PAID_LEAVE
    assert state.has_paid_leave
    assert not state.has_present


def test_no_records_is_empty():
    assert resolve_day([]) == EMPTY_DAY


def test_order_does_not_matter(make_record):
    records = [
        make_record("a"),
        make_record("b", presence=Presence.ABSENT, working_hours=0),
        make_record("c", type=AttendanceType.PROJECT, project_id="p1"),
    ]

    states = {resolve_day(p) for p in permutations(records)}
    assert len(states) == 1


def test_group_by_date_sorts_normal_first(make_record):
    records = [
        make_record("p", type=AttendanceType.PROJECT, project_id="p1"),
        make_record("n"),
        make_record("x", work_date=date(2024, 5, 3)),
    ]

    grouped = group_by_date(records)

    assert [r.record_id for r in grouped[date(2024, 5, 1)]] == ["n", "p"]
    assert len(grouped[date(2024, 5, 3)]) == 1
