from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import requests

from ..core.exceptions import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


def _server_message(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("message") or body.get("error")
    return None


def raise_for_status(response: requests.Response, *, draft: Any = None) -> requests.Response:
    if response.status_code < 400:
        return response

    message = _server_message(response) or f"Persistence API answered {response.status_code}"
    if response.status_code == 404:
        raise NotFoundError(message)
    logger.warning("Persistence API error %s on %s: %s", response.status_code, response.url, message)
    raise PersistenceError(message, draft=draft, status=response.status_code)


@contextmanager
def api_call(*, draft: Any = None) -> Iterator[None]:
    """Translate transport failures into ``PersistenceError``.

    ``draft`` is attached to the error so an unsaved edit is never lost.
    """

    try:
        yield
    except requests.RequestException as exc:
        logger.warning("Persistence API unreachable: %s", exc)
        raise PersistenceError(f"Persistence API unreachable: {exc}", draft=draft) from exc


def unwrap(response: requests.Response) -> Any:
    """Return the payload, stripping the ``{"data": ...}`` envelope if present."""

    if response.status_code == 204 or not response.content:
        return None
    try:
        body = response.json()
    except ValueError as exc:
        raise PersistenceError("Persistence API returned a non-JSON body", status=response.status_code) from exc
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body
