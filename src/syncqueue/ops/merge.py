"""Merge rules for collapsing a new operation into a pending list."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional

from .kinds import OperationKind, canonical_field, single_field_item
from .operation import Executor, QueuedOperation

logger = logging.getLogger(__name__)


def merge_operations(
    existing: list[QueuedOperation],
    new_op: QueuedOperation,
) -> list[QueuedOperation]:
    """
    Fold new_op into existing and return a new list. Inputs are not modified.

    Rules (first match wins):
        - UPDATE_BULK onto a queued UPDATE_BULK (most recent one): merge
          payloads (last write wins per field), take new_op's created_at and
          executor, keep the queued position.
        - Single-field update onto a queued UPDATE_BULK: fold the field into
          the bulk payload under its canonical name, take new_op's created_at,
          keep the bulk executor. A single-field update whose payload lacks
          its field is appended instead.
        - Otherwise append (FIFO).

    Executors that expose with_payload(payload) are rebound to the merged
    payload so the single remaining remote call carries every field.

    Non-mergeable operations are never reordered relative to each other.
    """
    bulk_index = _last_bulk_index(existing)

    if bulk_index is not None and new_op.kind is OperationKind.UPDATE_BULK:
        bulk = existing[bulk_index]
        payload = {**bulk.payload, **new_op.payload}
        merged = dataclasses.replace(
            bulk,
            payload=payload,
            created_at=new_op.created_at,
            executor=_bind(new_op.executor, payload),
        )
        logger.debug("Merged bulk operations for %s", new_op.key)
        return _replace_at(existing, bulk_index, merged)

    item = single_field_item(new_op.kind, new_op.payload)
    if bulk_index is not None and item is not None:
        bulk = existing[bulk_index]
        field_name, value = item
        payload = {
            name: v for name, v in bulk.payload.items() if canonical_field(name) != field_name
        }
        payload[field_name] = value
        merged = dataclasses.replace(
            bulk,
            payload=payload,
            created_at=new_op.created_at,
            executor=_bind(bulk.executor, payload),
        )
        logger.debug("Merged %s into bulk update for %s", new_op.kind.value, new_op.key)
        return _replace_at(existing, bulk_index, merged)

    return [*existing, new_op]


def _bind(executor: Executor, payload: dict[str, Any]) -> Executor:
    with_payload = getattr(executor, "with_payload", None)
    if callable(with_payload):
        return with_payload(payload)
    return executor


def _last_bulk_index(ops: list[QueuedOperation]) -> Optional[int]:
    for i in range(len(ops) - 1, -1, -1):
        if ops[i].kind is OperationKind.UPDATE_BULK:
            return i
    return None


def _replace_at(
    ops: list[QueuedOperation],
    index: int,
    op: QueuedOperation,
) -> list[QueuedOperation]:
    result = list(ops)
    result[index] = op
    return result
