"""Errors raised by the queue and by the time-entries transport."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class SyncQueueError(Exception):
    """
    Root of every error this package raises.

    `details` carries structured context (entity key, op id, HTTP status);
    `cause` is the lower-level exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


# ----------------------------
# Queue usage
# ----------------------------
class InvalidStateError(SyncQueueError):
    """The call conflicts with queue state, e.g. enqueue on a deleted entry."""


class FlushInProgressError(InvalidStateError):
    """The entry already has a flush running."""


class InvalidArgumentError(SyncQueueError):
    """A bad id or operation was passed in, or the API answered 400/422."""


# ----------------------------
# Remote side
# ----------------------------
class RemoteError(SyncQueueError):
    """The time-entries API rejected a replayed mutation or could not be reached."""

    @property
    def status_code(self) -> Optional[int]:
        return self.details.get("status_code")


class AuthError(RemoteError):
    """Session token missing or expired (401)."""


class AccessDeniedError(RemoteError):
    """The session may not modify this entry (403)."""


class NotFoundError(RemoteError):
    """The entry no longer exists remotely (404)."""


class ConflictError(RemoteError):
    """The entry changed remotely in a conflicting way (409/412)."""


class RateLimitError(RemoteError):
    """Too many requests (429)."""


class NetworkError(RemoteError):
    """Connection failure or timeout; no status code."""


class ApiError(RemoteError):
    """Any other failed response (5xx, unlisted 4xx)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_STATUS_ERRORS: dict[int, type[SyncQueueError]] = {
    400: InvalidArgumentError,
    401: AuthError,
    403: AccessDeniedError,
    404: NotFoundError,
    409: ConflictError,
    412: ConflictError,
    422: InvalidArgumentError,
    429: RateLimitError,
}


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> SyncQueueError:
    """Pick the error class for a failed response; unlisted codes become ApiError."""
    error_cls = _STATUS_ERRORS.get(info.status_code, ApiError)
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
        **(info.details or {}),
    }
    return error_cls(
        info.message or f"HTTP error {info.status_code}",
        details=details,
        cause=cause,
    )
