from .ids import (
    EntryKey,
    PermanentId,
    TempIdAllocator,
    TemporaryId,
    is_temp_id,
    new_op_id,
    to_entry_key,
)
from .time import logical_now, normalize_dt, to_rfc3339

__all__ = [
    "EntryKey",
    "TemporaryId",
    "PermanentId",
    "TempIdAllocator",
    "to_entry_key",
    "is_temp_id",
    "new_op_id",
    "logical_now",
    "to_rfc3339",
    "normalize_dt",
]
