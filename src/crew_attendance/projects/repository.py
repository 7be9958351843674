from __future__ import annotations

from typing import Protocol, Sequence

from .model import Project


class ProjectRepository(Protocol):
    def fetch_user_projects(self, user_id: str) -> Sequence[Project]:
        """Projects assigned to the worker; empty when none are assigned."""

        raise NotImplementedError
