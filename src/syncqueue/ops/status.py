"""Per-entity sync status tracking."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from syncqueue.util.ids import EntryKey


class SyncStatus(str, Enum):
    """Lifecycle: PENDING -> SYNCING -> SYNCED | ERROR (ERROR -> SYNCING on retry)."""

    PENDING = "pending"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"


SETTLED_STATUSES: frozenset[SyncStatus] = frozenset({SyncStatus.SYNCED, SyncStatus.ERROR})


class SyncStatusTracker:
    """Recorded status per current key. Keys with no record are implicitly SYNCED."""

    def __init__(self) -> None:
        self._statuses: dict[EntryKey, SyncStatus] = {}

    def get(self, key: EntryKey) -> Optional[SyncStatus]:
        """Return the recorded status, or None if nothing was recorded."""
        return self._statuses.get(key)

    def status_of(self, key: EntryKey) -> SyncStatus:
        return self._statuses.get(key, SyncStatus.SYNCED)

    def set(self, key: EntryKey, status: SyncStatus) -> None:
        self._statuses[key] = status

    def discard(self, key: EntryKey) -> None:
        self._statuses.pop(key, None)

    def migrate(self, old_key: EntryKey, new_key: EntryKey) -> SyncStatus:
        """
        Move the status recorded for old_key to new_key.

        PENDING becomes SYNCING (reconciliation means remote work is now
        possible); a missing status also starts as SYNCING.
        """
        old = self._statuses.pop(old_key, None)
        if old is None or old is SyncStatus.PENDING:
            new = SyncStatus.SYNCING
        else:
            new = old
        self._statuses[new_key] = new
        return new

    def clear(self) -> None:
        self._statuses.clear()

    def __len__(self) -> int:
        return len(self._statuses)
