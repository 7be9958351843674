from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Worker


class UserRepository(Protocol):
    """Repository interface for the user directory.

    Note (DIP): services depend on this interface, not on the HTTP adapter.
    """

    def list_users(
        self,
        *,
        limit: int = 1000,
        page: int = 1,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Sequence[Worker]:
        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[Worker]:
        raise NotImplementedError
