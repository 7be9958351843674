from __future__ import annotations

from typing import Any, Sequence

from ..api.connection import ApiConnection
from ..api.http_base import api_call, raise_for_status, unwrap
from .model import Project
from .repository import ProjectRepository


def project_from_payload(payload: Any) -> Project:
    return Project(
        project_id=str(payload.get("_id") or payload.get("id")),
        project_name=payload.get("projectName") or "",
        project_number=payload.get("projectNumber"),
        client_name=payload.get("clientName"),
        location=payload.get("location"),
        building=payload.get("building"),
        apartment_number=payload.get("apartmentNumber"),
        assignment_type=payload.get("assignmentType"),
    )


class ApiProjectRepository(ProjectRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def fetch_user_projects(self, user_id: str) -> Sequence[Project]:
        with api_call():
            response = self._conn.request("GET", f"/attendance-management/user/{user_id}/projects")
        data = unwrap(raise_for_status(response))
        return [project_from_payload(p) for p in data or []]
