"""Queued operation model (one pending mutation on one entity)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from syncqueue.util.ids import EntryKey, new_op_id
from syncqueue.util.time import logical_now

from .kinds import SINGLE_FIELD_KINDS, OperationKind, single_field_item

Executor = Callable[[int], Awaitable[Any]]


@dataclass(slots=True)
class QueuedOperation:
    """
    A single pending mutation.

    Everything except retry_count is treated as immutable once queued; the
    merger produces replacement descriptors instead of editing in place.

    The executor receives the permanent id (as a plain int) and performs the
    remote mutation. It must raise on failure and be safe to re-invoke.
    """

    kind: OperationKind
    key: EntryKey
    payload: dict[str, Any]
    executor: Executor

    retry_count: int = 0
    created_at: int = field(default_factory=logical_now)
    op_id: str = field(default_factory=new_op_id)

    def validate_executor(self) -> None:
        """Raises ValueError unless the executor is callable."""
        if not callable(self.executor):
            raise ValueError("executor must be callable")

    def validate_required_fields(self) -> None:
        """
        Validate payload fields the remote API needs for this kind. Raises ValueError.

        The queue itself treats payloads as opaque; this check is for callers
        that turn a payload into a request (see build_operation).
        """
        self.validate_executor()

        if self.kind in SINGLE_FIELD_KINDS:
            if single_field_item(self.kind, self.payload) is None:
                raise ValueError(f"Missing required field: {SINGLE_FIELD_KINDS[self.kind]}")
            return

        if self.kind is OperationKind.UPDATE_TIME:
            if "start" not in self.payload and "stop" not in self.payload:
                raise ValueError("Missing required field: start or stop")
            return

        if self.kind is OperationKind.UPDATE_DURATION:
            _require(self.payload, "duration")
            return

        if self.kind is OperationKind.UPDATE_BULK:
            if not self.payload:
                raise ValueError("UPDATE_BULK requires a non-empty payload")
            return

        if self.kind is OperationKind.STOP:
            _require(self.payload, "stop")
            return

        if self.kind is OperationKind.DELETE:
            return

        raise ValueError(f"Unsupported kind: {self.kind}")


def _require(payload: dict[str, Any], field_name: str) -> None:
    if field_name not in payload:
        raise ValueError(f"Missing required field: {field_name}")
