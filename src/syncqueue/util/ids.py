"""Entity identifiers: temporary (local) vs permanent (server-assigned)."""

from __future__ import annotations

import itertools
import uuid
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class TemporaryId:
    """Locally generated placeholder id. Always negative."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("TemporaryId.value must be an int")
        if self.value >= 0:
            raise ValueError("TemporaryId.value must be negative")

    def __str__(self) -> str:
        return f"temp:{self.value}"


@dataclass(frozen=True, slots=True)
class PermanentId:
    """Id assigned by the remote service once creation succeeds. Always positive."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("PermanentId.value must be an int")
        if self.value <= 0:
            raise ValueError("PermanentId.value must be positive")

    def __str__(self) -> str:
        return str(self.value)


EntryKey = Union[TemporaryId, PermanentId]


def to_entry_key(value: EntryKey | int) -> EntryKey:
    """
    Normalize a raw id into a tagged EntryKey.

    Plain ints follow the client convention: negative -> TemporaryId,
    positive -> PermanentId. Zero is rejected.
    """
    if isinstance(value, (TemporaryId, PermanentId)):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Unsupported id type: {type(value).__name__}")
    if value < 0:
        return TemporaryId(value)
    if value > 0:
        return PermanentId(value)
    raise ValueError("0 is neither a temporary nor a permanent id")


def is_temp_id(value: EntryKey | int) -> bool:
    """Return True if value denotes a temporary id."""
    return isinstance(to_entry_key(value), TemporaryId)


class TempIdAllocator:
    """Hands out fresh temporary ids: -1, -2, -3, ..."""

    def __init__(self, start: int = -1) -> None:
        if start >= 0:
            raise ValueError("start must be negative")
        self._counter = itertools.count(start, -1)

    def allocate(self) -> TemporaryId:
        return TemporaryId(next(self._counter))


def new_op_id() -> str:
    """Generate a new QueuedOperation ID (uuid4 string)."""
    return str(uuid.uuid4())
