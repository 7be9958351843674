from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Worker:
    """Domain entity: a worker from the user directory.

    Note: pure data object; the directory itself lives behind the API.
    """

    user_id: str
    first_name: str
    last_name: str = ""
    email: Optional[str] = None
    role: Optional[str] = None
    profile_image: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
