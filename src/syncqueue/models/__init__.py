"""Public model exports for syncqueue."""

from __future__ import annotations

from .results import OperationResult, OperationStatus, QueueDebugInfo

__all__ = [
    "OperationStatus",
    "OperationResult",
    "QueueDebugInfo",
]
