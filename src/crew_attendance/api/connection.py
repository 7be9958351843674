from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from ..core.constants import DEFAULT_API_TIMEOUT_SEC

logger = logging.getLogger(__name__)


@dataclass
class ApiConfig:
    base_url: str
    timeout: float = DEFAULT_API_TIMEOUT_SEC
    token: Optional[str] = None


class ApiConnection:
    """Singleton-like gateway to the persistence API.

    Note: one ``requests.Session`` is shared so connections are pooled; every
    call is a single request/response with no retries.
    """

    _instance: Optional["ApiConnection"] = None

    def __init__(self, config: ApiConfig, *, session: Optional[requests.Session] = None):
        self._config = config
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json", "Content-Type": "application/json"})
        if config.token:
            self._session.headers["Authorization"] = f"Bearer {config.token}"

    @classmethod
    def get_instance(cls, config: ApiConfig) -> "ApiConnection":
        if cls._instance is None:
            cls._instance = ApiConnection(config)
        return cls._instance

    def url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def request(self, method: str, path: str, *, params: Optional[dict] = None, json: Any = None) -> requests.Response:
        url = self.url(path)
        logger.debug("%s %s params=%s", method, url, params)
        return self._session.request(method, url, params=params, json=json, timeout=self._config.timeout)
