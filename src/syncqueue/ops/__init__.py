"""Public queue building blocks for syncqueue."""

from __future__ import annotations

from .id_map import IdentifierMap
from .kinds import (
    FIELD_ALIASES,
    SINGLE_FIELD_KINDS,
    OperationKind,
    canonical_field,
    single_field_item,
)
from .merge import merge_operations
from .operation import Executor, QueuedOperation
from .retry import RetryPolicy
from .status import SETTLED_STATUSES, SyncStatus, SyncStatusTracker

__all__ = [
    "OperationKind",
    "SINGLE_FIELD_KINDS",
    "FIELD_ALIASES",
    "canonical_field",
    "single_field_item",
    "Executor",
    "QueuedOperation",
    "merge_operations",
    "IdentifierMap",
    "SyncStatus",
    "SETTLED_STATUSES",
    "SyncStatusTracker",
    "RetryPolicy",
]
