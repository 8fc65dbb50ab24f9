"""Result models for flush/retry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional


OperationStatus = Literal["success", "failed", "skipped"]


@dataclass(slots=True)
class OperationResult:
    """Result for a single QueuedOperation within a flush."""

    op_id: str
    kind: str
    status: OperationStatus
    attempts: int = 0

    error_type: Optional[str] = None
    error_message: Optional[str] = None
    error_details: Optional[dict[str, Any]] = None

    @property
    def success(self) -> bool:
        return self.status == "success"


@dataclass(slots=True)
class QueueDebugInfo:
    """Snapshot of queue sizes for diagnostics."""

    queue_size: int
    id_mappings: int
    sync_statuses: int
    queued_keys: list[str] = field(default_factory=list)
