"""Public error exports for syncqueue."""

from __future__ import annotations

from .exceptions import (
    AccessDeniedError,
    ApiError,
    AuthError,
    ConflictError,
    FlushInProgressError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RemoteError,
    SyncQueueError,
    map_http_error,
)

__all__ = [
    "SyncQueueError",
    "InvalidStateError",
    "FlushInProgressError",
    "InvalidArgumentError",
    "AuthError",
    "AccessDeniedError",
    "RemoteError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
]
