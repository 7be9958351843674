from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .api.connection import ApiConfig, ApiConnection
from .attendance.api_attendance_repository import ApiAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.sequencer import ResponseSequencer
from .attendance.service import AttendanceService
from .core.constants import DAY_CELL_RECORD_CAP, DEFAULT_API_TIMEOUT_SEC, DEFAULT_WORKING_HOURS
from .payroll.calculator.factory import counter_for_policy
from .payroll.service import PayrollReportService
from .projects.api_project_repository import ApiProjectRepository
from .projects.repository import ProjectRepository
from .users.api_user_repository import ApiUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[ApiConnection]

    attendance_repo: AttendanceRepository
    users_repo: UserRepository
    projects_repo: ProjectRepository

    attendance_service: AttendanceService
    payroll_report_service: PayrollReportService

    day_cell_cap: int = DAY_CELL_RECORD_CAP
    default_hours: float = DEFAULT_WORKING_HOURS


def wire_services(
    *,
    attendance_repo: AttendanceRepository,
    users_repo: UserRepository,
    projects_repo: ProjectRepository,
    conn: Optional[ApiConnection] = None,
    default_hours: float = DEFAULT_WORKING_HOURS,
    present_day_policy: str = "distinct_date",
    day_cell_cap: int = DAY_CELL_RECORD_CAP,
) -> Container:
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        projects_repo,
        sequencer=ResponseSequencer(),
        counter=counter_for_policy(present_day_policy),
        default_hours=default_hours,
    )
    payroll_report_service = PayrollReportService(attendance_service, users_repo)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        users_repo=users_repo,
        projects_repo=projects_repo,
        attendance_service=attendance_service,
        payroll_report_service=payroll_report_service,
        day_cell_cap=int(day_cell_cap),
        default_hours=float(default_hours),
    )


def build_container(
    *,
    api_config: dict,
    default_hours: float = DEFAULT_WORKING_HOURS,
    present_day_policy: str = "distinct_date",
    day_cell_cap: int = DAY_CELL_RECORD_CAP,
) -> Container:
    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        timeout=float(api_config.get("timeout") or DEFAULT_API_TIMEOUT_SEC),
        token=api_config.get("token"),
    )
    conn = ApiConnection.get_instance(config)

    return wire_services(
        attendance_repo=ApiAttendanceRepository(conn),
        users_repo=ApiUserRepository(conn),
        projects_repo=ApiProjectRepository(conn),
        conn=conn,
        default_hours=default_hours,
        present_day_policy=present_day_policy,
        day_cell_cap=day_cell_cap,
    )
