from __future__ import annotations

import threading
from typing import Hashable


class ResponseSequencer:
    """Drop responses that arrive after a newer request for the same key completed.

    Ordering is by when the request was issued, not by when its response
    arrived: a slow early fetch never overwrites a fast later one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._issued: dict[Hashable, int] = {}
        self._applied: dict[Hashable, int] = {}

    def issue(self, key: Hashable) -> int:
        with self._lock:
            ticket = self._issued.get(key, 0) + 1
            self._issued[key] = ticket
            return ticket

    def accept(self, key: Hashable, ticket: int) -> bool:
        with self._lock:
            if ticket <= self._applied.get(key, 0):
                return False
            self._applied[key] = ticket
            return True

    def latest_applied(self, key: Hashable) -> int:
        with self._lock:
            return self._applied.get(key, 0)

    def forget(self, key: Hashable) -> None:
        """Drop the counters of a key that has no request in flight."""
        with self._lock:
            self._issued.pop(key, None)
            self._applied.pop(key, None)
