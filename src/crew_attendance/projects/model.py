from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Project:
    """Domain entity: a client project a worker can be assigned to."""

    project_id: str
    project_name: str
    project_number: Optional[str] = None
    client_name: Optional[str] = None
    location: Optional[str] = None
    building: Optional[str] = None
    apartment_number: Optional[str] = None
    assignment_type: Optional[str] = None
