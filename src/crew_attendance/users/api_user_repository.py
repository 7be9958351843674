from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.connection import ApiConnection
from ..api.http_base import api_call, raise_for_status, unwrap
from ..core.constants import DEFAULT_USER_PAGE_LIMIT
from .model import Worker
from .repository import UserRepository


def worker_from_payload(payload: Any) -> Worker:
    if isinstance(payload, str):
        return Worker(user_id=payload, first_name="")
    first_name = payload.get("firstName")
    last_name = payload.get("lastName") or ""
    if first_name is None:
        # Summary endpoints only send a display name.
        first_name = payload.get("name") or ""
    return Worker(
        user_id=str(payload.get("_id") or payload.get("id")),
        first_name=first_name,
        last_name=last_name,
        email=payload.get("email"),
        role=payload.get("role"),
        profile_image=payload.get("profileImage"),
    )


class ApiUserRepository(UserRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def list_users(
        self,
        *,
        limit: int = DEFAULT_USER_PAGE_LIMIT,
        page: int = 1,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Sequence[Worker]:
        params: dict[str, object] = {"limit": int(limit), "page": int(page)}
        if search:
            params["search"] = search
        if role:
            params["role"] = role

        with api_call():
            response = self._conn.request("GET", "/user", params=params)
        data = unwrap(raise_for_status(response))

        if isinstance(data, dict):
            data = data.get("users") or []
        return [worker_from_payload(u) for u in data or []]

    def get_by_id(self, user_id: str) -> Optional[Worker]:
        for worker in self.list_users():
            if worker.user_id == user_id:
                return worker
        return None
