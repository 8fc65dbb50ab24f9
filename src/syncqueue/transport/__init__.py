"""Transport to the time-entries API and command executors."""

from __future__ import annotations

from .commands import (
    DeleteEntryCommand,
    EntriesTransport,
    StopEntryCommand,
    UpdateEntryCommand,
    build_operation,
    wire_fields,
)
from .config import TransportConfig
from .http_transport import TimeEntriesTransport

__all__ = [
    "TransportConfig",
    "TimeEntriesTransport",
    "EntriesTransport",
    "UpdateEntryCommand",
    "StopEntryCommand",
    "DeleteEntryCommand",
    "build_operation",
    "wire_fields",
]
