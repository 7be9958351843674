from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import pytest

from crew_attendance.attendance.model import AttendanceDraft, AttendanceRecord
from crew_attendance.attendance.repository import ProjectAttendance
from crew_attendance.container import wire_services
from crew_attendance.core.enums import AttendanceType, Presence, Scope
from crew_attendance.core.exceptions import NotFoundError
from crew_attendance.projects.model import Project
from crew_attendance.users.model import Worker


class InMemoryAttendance:
    def __init__(self, records: Sequence[AttendanceRecord] = ()):
        self.records: dict[str, AttendanceRecord] = {r.record_id: r for r in records}
        self.saved: list[AttendanceDraft] = []
        self.deleted: list[str] = []
        self.monthly_calls = 0
        self.fail_next: Optional[Exception] = None
        self._id = 0

    def _maybe_fail(self) -> None:
        if self.fail_next is not None:
            err, self.fail_next = self.fail_next, None
            raise err

    def create_or_update(self, draft: AttendanceDraft) -> AttendanceRecord:
        self._maybe_fail()
        self.saved.append(draft)
        if draft.record_id is not None:
            if draft.record_id not in self.records:
                raise NotFoundError(f"Attendance {draft.record_id} not found")
            record_id = draft.record_id
        else:
            self._id += 1
            record_id = f"r{self._id}"

        rec = AttendanceRecord(
            record_id=record_id,
            user_id=draft.user_id,
            work_date=draft.work_date,
            presence=draft.presence,
            type=draft.type,
            project_id=draft.project_id,
            working_hours=draft.working_hours,
            overtime_hours=draft.overtime_hours,
            marked_by=draft.marked_by,
        )
        self.records[record_id] = rec
        return rec

    def delete(self, record_id: str) -> None:
        self._maybe_fail()
        if record_id not in self.records:
            raise NotFoundError(f"Attendance {record_id} not found")
        del self.records[record_id]
        self.deleted.append(record_id)

    def fetch_monthly(self, user_id: str, month: int, year: int, scope: Scope = Scope.ALL):
        self.monthly_calls += 1
        items = [
            r
            for r in self.records.values()
            if r.user_id == user_id
            and r.work_date.month == month
            and r.work_date.year == year
            and (scope == Scope.ALL or r.type.value == scope.value)
        ]
        return sorted(items, key=lambda r: (r.work_date, r.type.value))

    def fetch_for_user_and_date(self, user_id: str, work_date: date):
        return [r for r in self.records.values() if r.user_id == user_id and r.work_date == work_date]

    def fetch_daily(self, work_date: date):
        return [r for r in self.records.values() if r.work_date == work_date and r.type == AttendanceType.NORMAL]

    def fetch_project_summary(self, project_id: str, *, start=None, end=None) -> ProjectAttendance:
        records = [r for r in self.records.values() if r.project_id == project_id]
        user_ids = sorted({r.user_id for r in records})
        return ProjectAttendance(
            project_id=project_id,
            records=records,
            workers=[Worker(user_id=u, first_name=u.upper()) for u in user_ids],
            dates=sorted({r.work_date for r in records}),
        )


class InMemoryUsers:
    def __init__(self, workers: Sequence[Worker]):
        self._workers = list(workers)

    def list_users(self, *, limit: int = 1000, page: int = 1, search=None, role=None):
        return list(self._workers)

    def get_by_id(self, user_id: str) -> Optional[Worker]:
        return next((w for w in self._workers if w.user_id == user_id), None)


class InMemoryProjects:
    def __init__(self, by_user: dict[str, list[Project]]):
        self._by_user = by_user

    def fetch_user_projects(self, user_id: str):
        return list(self._by_user.get(user_id, []))


@pytest.fixture()
def workers():
    return [
        Worker(user_id="u1", first_name="Anna", last_name="Berg"),
        Worker(user_id="u2", first_name="Ole", last_name="Dahl"),
    ]


@pytest.fixture()
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture()
def users_repo(workers):
    return InMemoryUsers(workers)


@pytest.fixture()
def projects_repo():
    return InMemoryProjects({"u1": [Project(project_id="p1", project_name="Harbour Block A")]})


@pytest.fixture()
def container(attendance_repo, users_repo, projects_repo):
    return wire_services(
        attendance_repo=attendance_repo,
        users_repo=users_repo,
        projects_repo=projects_repo,
    )


@pytest.fixture()
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from crew_attendance.main import create_app

    return create_app(container=container)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_record():
    def _make(
        record_id: str = "r1",
        *,
        user_id: str = "u1",
        work_date: date = date(2024, 5, 1),
        presence: Presence = Presence.PRESENT,
        type: AttendanceType = AttendanceType.NORMAL,
        project_id: Optional[str] = None,
        working_hours: float = 8.0,
        overtime_hours: float = 0.0,
    ) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=record_id,
            user_id=user_id,
            work_date=work_date,
            presence=presence,
            type=type,
            project_id=project_id,
            working_hours=working_hours,
            overtime_hours=overtime_hours,
            marked_by="admin",
        )

    return _make
