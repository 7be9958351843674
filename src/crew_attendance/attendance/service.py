from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Hashable, Optional, Sequence

from ..common.datetime_utils import iter_days, month_bounds
from ..common.validators import require_month, require_non_empty
from ..core.constants import DEFAULT_WORKING_HOURS
from ..core.enums import AttendanceType, Presence, Scope
from ..core.exceptions import NotFoundError, PersistenceError, ValidationError
from ..payroll.aggregator import MonthlyTotals, aggregate_month
from ..payroll.calculator.base import PresentDayCounter
from ..projects.model import Project
from ..projects.repository import ProjectRepository
from ..users.model import Worker
from ..users.repository import UserRepository
from .day_state import DayState, group_by_date, resolve_day
from .editor import EditorState, SelectPresence, SelectProject, SelectType, SetHours, transition
from .model import AttendanceDraft, AttendanceRecord
from .repository import AttendanceRepository, ProjectAttendance
from .sequencer import ResponseSequencer
from .validator import check_record, check_required, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyAttendance:
    user_id: str
    month: int
    year: int
    scope: Scope
    records: Sequence[AttendanceRecord]
    days: dict[date, DayState]
    totals: MonthlyTotals

    def records_on(self, work_date: date) -> list[AttendanceRecord]:
        return [r for r in self.records if r.work_date == work_date]


@dataclass(frozen=True)
class SaveResult:
    record: AttendanceRecord
    month: MonthlyAttendance


@dataclass(frozen=True)
class RosterEntry:
    worker: Worker
    records: Sequence[AttendanceRecord]
    day_state: DayState


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        projects: ProjectRepository,
        *,
        sequencer: Optional[ResponseSequencer] = None,
        counter: Optional[PresentDayCounter] = None,
        default_hours: float = DEFAULT_WORKING_HOURS,
    ):
        self._attendance = attendance
        self._users = users
        self._projects = projects
        self._sequencer = sequencer or ResponseSequencer()
        self._counter = counter
        self._default_hours = float(default_hours)
        self._snapshots: dict[Hashable, MonthlyAttendance] = {}
        self._snapshots_lock = threading.Lock()
        self._in_flight: dict[Hashable, int] = {}

    # ----- reads -----

    def load_month(self, user_id: str, month: int, year: int, scope: Scope = Scope.ALL) -> MonthlyAttendance:
        """Fetch one worker's month and derive day states and totals.

        If a newer request for the same month finished first, its snapshot is
        returned and this (older) response is dropped.
        """

        user_id = require_non_empty(user_id, "User")
        month, year = require_month(month, year)
        scope = Scope(scope)
        key = (user_id, month, year, scope)

        with self._snapshots_lock:
            self._in_flight[key] = self._in_flight.get(key, 0) + 1
            ticket = self._sequencer.issue(key)

        try:
            records = list(self._attendance.fetch_monthly(user_id, month, year, scope))
            snapshot = self._build_month(user_id, month, year, scope, records)

            with self._snapshots_lock:
                if self._sequencer.accept(key, ticket):
                    self._snapshots[key] = snapshot
                    return snapshot
                logger.debug("Dropped stale monthly response %s ticket=%s", key, ticket)
                return self._snapshots[key]
        finally:
            self._release(key)

    def _release(self, key: Hashable) -> None:
        # Snapshots only live while a request for their month is in flight.
        with self._snapshots_lock:
            self._in_flight[key] -= 1
            if self._in_flight[key] == 0:
                del self._in_flight[key]
                self._snapshots.pop(key, None)
                self._sequencer.forget(key)

    def pending_months(self) -> int:
        with self._snapshots_lock:
            return len(self._snapshots) + len(self._in_flight)

    def _build_month(
        self,
        user_id: str,
        month: int,
        year: int,
        scope: Scope,
        records: list[AttendanceRecord],
    ) -> MonthlyAttendance:
        for r in records:
            try:
                check_record(r)
            except ValidationError as e:
                logger.warning("Record %s from the API breaks %s: %s", r.record_id, e.kind.value, e)

        grouped = group_by_date(records)
        start, end = month_bounds(year, month)
        days = {day: resolve_day(grouped.get(day, ())) for day in iter_days(start, end)}
        paid_leave_days = sum(1 for state in days.values() if state.has_paid_leave)

        totals = aggregate_month(records, scope, counter=self._counter, paid_leave_days=paid_leave_days)
        return MonthlyAttendance(
            user_id=user_id,
            month=month,
            year=year,
            scope=scope,
            records=records,
            days=days,
            totals=totals,
        )

    def daily_roster(self, work_date: date) -> list[RosterEntry]:
        records = self._attendance.fetch_daily(work_date)
        by_user: dict[str, list[AttendanceRecord]] = {}
        for r in records:
            by_user.setdefault(r.user_id, []).append(r)

        roster = []
        for worker in self._users.list_users():
            mine = by_user.get(worker.user_id, [])
            roster.append(RosterEntry(worker=worker, records=mine, day_state=resolve_day(mine)))
        return roster

    def user_projects(self, user_id: str) -> list[Project]:
        projects = list(self._projects.fetch_user_projects(require_non_empty(user_id, "User")))
        if not projects:
            logger.info("No projects assigned to user %s", user_id)
        return projects

    def project_attendance(
        self,
        project_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ProjectAttendance:
        return self._attendance.fetch_project_summary(require_non_empty(project_id, "Project"), start=start, end=end)

    # ----- writes -----

    def save(self, draft: AttendanceDraft, *, scope: Scope = Scope.ALL) -> SaveResult:
        """Validate fully, then issue exactly one create/update and re-fetch the month."""

        check_required(draft)
        try:
            existing = self._attendance.fetch_for_user_and_date(draft.user_id, draft.work_date)
        except PersistenceError as e:
            raise PersistenceError(str(e), draft=draft, status=e.status) from e

        validated = validate(draft, existing)

        try:
            saved = self._attendance.create_or_update(validated)
        except NotFoundError:
            self._refresh_after_conflict(draft.user_id, draft.work_date, scope)
            raise
        except PersistenceError as e:
            if e.draft is None:
                raise PersistenceError(str(e), draft=validated, status=e.status) from e
            raise

        logger.info(
            "%s attendance %s for user %s on %s by %s",
            "Updated" if validated.is_update else "Created",
            saved.record_id,
            saved.user_id,
            saved.work_date.isoformat(),
            validated.marked_by,
        )
        month = self.load_month(saved.user_id, saved.work_date.month, saved.work_date.year, scope)
        return SaveResult(record=saved, month=month)

    def delete(
        self,
        record_id: str,
        *,
        user_id: str,
        work_date: date,
        marked_by: str,
        scope: Scope = Scope.ALL,
    ) -> MonthlyAttendance:
        record_id = require_non_empty(record_id, "Attendance record")
        user_id = require_non_empty(user_id, "User")
        marked_by = require_non_empty(marked_by, "Operator")

        try:
            self._attendance.delete(record_id)
        except NotFoundError:
            self._refresh_after_conflict(user_id, work_date, scope)
            raise

        logger.info("Deleted attendance %s for user %s by %s", record_id, user_id, marked_by)
        return self.load_month(user_id, work_date.month, work_date.year, scope)

    def _refresh_after_conflict(self, user_id: str, work_date: date, scope: Scope) -> None:
        logger.info("Record for user %s on %s changed concurrently, re-fetching", user_id, work_date.isoformat())
        self.load_month(user_id, work_date.month, work_date.year, scope)

    def mark_normal(
        self,
        *,
        user_id: str,
        work_date: date,
        present: bool,
        marked_by: str,
        hours: Optional[float] = None,
    ) -> SaveResult:
        state = EditorState(working_hours=0.0)
        presence = Presence.PRESENT if present else Presence.ABSENT
        state = transition(state, SelectPresence(presence, default_hours=self._default_hours))
        if present and hours is not None:
            state = transition(state, SetHours(float(hours)))

        current = self._same_day_match(user_id, work_date, AttendanceType.NORMAL, None)
        draft = self._draft_from_state(state, user_id=user_id, work_date=work_date, marked_by=marked_by, current=current)
        return self.save(draft)

    def mark_project(
        self,
        *,
        project_id: str,
        user_id: str,
        work_date: date,
        present: bool,
        marked_by: str,
        hours: Optional[float] = None,
        paid_leave: bool = False,
    ) -> SaveResult:
        project_id = require_non_empty(project_id, "Project")

        state = EditorState(working_hours=0.0)
        state = transition(state, SelectType(AttendanceType.PROJECT))
        state = transition(state, SelectProject(project_id))
        if paid_leave:
            # Leave is never booked against a project; the editor moves it to normal.
            state = transition(state, SelectPresence(Presence.PAID_LEAVE))
        else:
            presence = Presence.PRESENT if present else Presence.ABSENT
            state = transition(state, SelectPresence(presence, default_hours=self._default_hours))
            if present and hours is not None:
                state = transition(state, SetHours(float(hours)))

        current = self._same_day_match(user_id, work_date, state.type, state.project_id)
        draft = self._draft_from_state(state, user_id=user_id, work_date=work_date, marked_by=marked_by, current=current)
        return self.save(draft)

    def _same_day_match(
        self,
        user_id: str,
        work_date: date,
        type_: AttendanceType,
        project_id: Optional[str],
    ) -> Optional[AttendanceRecord]:
        for r in self._attendance.fetch_for_user_and_date(user_id, work_date):
            if r.type == type_ and r.project_id == project_id:
                return r
        return None

    @staticmethod
    def _draft_from_state(state: EditorState, *, user_id: str, work_date: date, marked_by: str, current: Optional[AttendanceRecord]) -> AttendanceDraft:
        return AttendanceDraft(
            user_id=user_id,
            work_date=work_date,
            presence=state.presence,
            type=state.type,
            project_id=state.project_id,
            working_hours=state.working_hours,
            overtime_hours=state.overtime_hours,
            marked_by=marked_by,
            record_id=current.record_id if current else None,
        )
