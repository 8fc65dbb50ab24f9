"""Temporary -> permanent identifier map (write-once per temporary id)."""

from __future__ import annotations

from typing import Optional

from syncqueue.errors import InvalidStateError
from syncqueue.util.ids import PermanentId, TemporaryId


class IdentifierMap:
    """Record which permanent id each reconciled temporary id became."""

    def __init__(self) -> None:
        self._by_temp: dict[TemporaryId, PermanentId] = {}

    def bind(self, temp_id: TemporaryId, permanent_id: PermanentId) -> bool:
        """
        Record temp_id -> permanent_id.

        Returns:
            True if a new mapping was recorded, False if the identical mapping
            already existed.

        Raises:
            InvalidStateError: if temp_id is already bound to another id.
        """
        current = self._by_temp.get(temp_id)
        if current is None:
            self._by_temp[temp_id] = permanent_id
            return True
        if current == permanent_id:
            return False
        raise InvalidStateError(
            "Temporary id is already reconciled to a different permanent id",
            details={
                "temp_id": temp_id.value,
                "permanent_id": current.value,
                "requested_permanent_id": permanent_id.value,
            },
        )

    def get(self, temp_id: TemporaryId) -> Optional[PermanentId]:
        return self._by_temp.get(temp_id)

    def temp_ids_for(self, permanent_id: PermanentId) -> list[TemporaryId]:
        """Reverse lookup, in binding order."""
        return [t for t, p in self._by_temp.items() if p == permanent_id]

    def clear(self) -> None:
        self._by_temp.clear()

    def __len__(self) -> int:
        return len(self._by_temp)

    def __contains__(self, temp_id: object) -> bool:
        return temp_id in self._by_temp
