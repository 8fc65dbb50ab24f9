"""Command objects used as QueuedOperation executors."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from syncqueue.ops import OperationKind, QueuedOperation, canonical_field
from syncqueue.util.ids import EntryKey, to_entry_key

# Payload fields accepted by PATCH /api/time-entries/{id}.
WIRE_FIELDS: frozenset[str] = frozenset(
    {"description", "project_name", "tags", "tag_ids", "start", "stop", "duration"}
)


class EntriesTransport(Protocol):
    async def update_entry(self, entry_id: int, fields: dict[str, Any]) -> Any: ...

    async def stop_entry(self, entry_id: int, stop: datetime) -> Any: ...

    async def delete_entry(self, entry_id: int) -> Any: ...


@dataclass(slots=True)
class UpdateEntryCommand:
    transport: EntriesTransport
    fields: dict[str, Any] = field(default_factory=dict)

    async def __call__(self, entry_id: int) -> Any:
        return await self.transport.update_entry(entry_id, dict(self.fields))

    def with_payload(self, payload: dict[str, Any]) -> "UpdateEntryCommand":
        """Return a copy that sends `payload` (used when updates are merged)."""
        return dataclasses.replace(self, fields=wire_fields(payload))


@dataclass(slots=True)
class StopEntryCommand:
    transport: EntriesTransport
    stop: datetime

    async def __call__(self, entry_id: int) -> Any:
        return await self.transport.stop_entry(entry_id, self.stop)


@dataclass(slots=True)
class DeleteEntryCommand:
    transport: EntriesTransport

    async def __call__(self, entry_id: int) -> Any:
        return await self.transport.delete_entry(entry_id)


def build_operation(
    key: EntryKey | int,
    kind: OperationKind,
    payload: dict[str, Any],
    transport: EntriesTransport,
) -> QueuedOperation:
    """
    Build a QueuedOperation whose executor is the matching command.

    Update kinds send the payload (aliases such as projectName are renamed and
    fields the API does not know are dropped);
    STOP sends payload["stop"]; DELETE ignores the payload.

    Raises:
        ValueError: if the payload lacks what the kind requires.
    """
    if kind is OperationKind.DELETE:
        executor: Any = DeleteEntryCommand(transport)
    elif kind is OperationKind.STOP:
        stop = payload.get("stop")
        if not isinstance(stop, datetime):
            raise ValueError("STOP requires payload['stop'] as a datetime")
        executor = StopEntryCommand(transport, stop)
    else:
        executor = UpdateEntryCommand(transport, wire_fields(payload))

    op = QueuedOperation(
        kind=kind,
        key=to_entry_key(key),
        payload=dict(payload),
        executor=executor,
    )
    op.validate_required_fields()
    return op


def wire_fields(payload: dict[str, Any]) -> dict[str, Any]:
    """Keep the fields the API accepts, with aliases such as projectName renamed."""
    fields: dict[str, Any] = {}
    for name, value in payload.items():
        wire_name = canonical_field(name)
        if wire_name not in WIRE_FIELDS:
            continue
        if wire_name != name and wire_name in payload:
            continue
        fields[wire_name] = value
    return fields
