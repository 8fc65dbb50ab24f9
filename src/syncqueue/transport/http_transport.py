"""HTTP transport for the time-entries API (stateless apart from the client)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from syncqueue.errors import (
    ApiError,
    HttpErrorInfo,
    NetworkError,
    SyncQueueError,
    map_http_error,
)
from syncqueue.util.time import to_rfc3339

from .config import TransportConfig

logger = logging.getLogger(__name__)

ENTRIES_PATH = "/api/time-entries"


class TimeEntriesTransport:
    """
    Performs one remote mutation per call and raises on any non-2xx response.

    Notes:
        - The underlying httpx.AsyncClient is NOT exposed.
        - Errors are mapped with map_http_error; network/timeouts -> NetworkError.
    """

    def __init__(self, config: TransportConfig) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_sec),
        )

    @classmethod
    def from_client(cls, client: httpx.AsyncClient, config: TransportConfig) -> "TimeEntriesTransport":
        """Create transport with an injected client (useful for tests)."""
        obj = cls.__new__(cls)
        obj._config = config
        obj._client = client
        return obj

    async def __aenter__(self) -> "TimeEntriesTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ----------------------------
    # Public API
    # ----------------------------
    async def update_entry(self, entry_id: int, fields: dict[str, Any]) -> Any:
        """PATCH the given fields of a time entry and return the decoded body."""
        return await self._request("PATCH", _entry_path(entry_id), json=_to_wire(fields))

    async def stop_entry(self, entry_id: int, stop: datetime) -> Any:
        """Stop a running time entry at `stop`."""
        return await self._request("PATCH", _entry_path(entry_id), json={"stop": to_rfc3339(stop)})

    async def delete_entry(self, entry_id: int) -> Any:
        return await self._request("DELETE", _entry_path(entry_id))

    # ----------------------------
    # Internals
    # ----------------------------
    async def _request(self, method: str, path: str, *, json: Optional[dict[str, Any]] = None) -> Any:
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                headers={self._config.session_header: self._config.session_token},
            )
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            raise NetworkError(
                "Network error",
                details={"method": method, "path": path},
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise ApiError("Time entries API error", cause=exc) from exc

        if response.is_error:
            logger.warning("%s %s -> HTTP %d", method, path, response.status_code)
            raise _response_to_error(response, method, path)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text


def _entry_path(entry_id: int) -> str:
    if isinstance(entry_id, bool) or not isinstance(entry_id, int) or entry_id <= 0:
        raise ValueError("entry_id must be a positive int (a permanent id)")
    return f"{ENTRIES_PATH}/{entry_id}"


def _to_wire(fields: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for name, value in fields.items():
        body[name] = to_rfc3339(value) if isinstance(value, datetime) else value
    return body


def _response_to_error(response: httpx.Response, method: str, path: str) -> SyncQueueError:
    message = None
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, str):
            message = err
        elif isinstance(err, dict) and isinstance(err.get("message"), str):
            message = err["message"]

    if message is None and response.text:
        message = response.text[:200]

    info = HttpErrorInfo(
        status_code=response.status_code,
        reason=response.reason_phrase or None,
        message=message,
        details={"method": method, "path": path},
    )
    return map_http_error(info)
