"""syncqueue public API."""

from __future__ import annotations

from syncqueue.errors import (
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
from syncqueue.manager import SyncQueueManager
from syncqueue.models import OperationResult, QueueDebugInfo
from syncqueue.ops import (
    IdentifierMap,
    OperationKind,
    QueuedOperation,
    RetryPolicy,
    SyncStatus,
    SyncStatusTracker,
    merge_operations,
)
from syncqueue.transport import (
    DeleteEntryCommand,
    StopEntryCommand,
    TimeEntriesTransport,
    TransportConfig,
    UpdateEntryCommand,
    build_operation,
)
from syncqueue.util.ids import (
    EntryKey,
    PermanentId,
    TempIdAllocator,
    TemporaryId,
    is_temp_id,
    to_entry_key,
)

__all__ = [
    # High-level
    "SyncQueueManager",
    "RetryPolicy",
    # Queue building blocks
    "OperationKind",
    "QueuedOperation",
    "merge_operations",
    "IdentifierMap",
    "SyncStatus",
    "SyncStatusTracker",
    # Identifiers
    "EntryKey",
    "TemporaryId",
    "PermanentId",
    "TempIdAllocator",
    "to_entry_key",
    "is_temp_id",
    # Transport
    "TransportConfig",
    "TimeEntriesTransport",
    "UpdateEntryCommand",
    "StopEntryCommand",
    "DeleteEntryCommand",
    "build_operation",
    # Models
    "OperationResult",
    "QueueDebugInfo",
    # Errors
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
