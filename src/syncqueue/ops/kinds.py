"""Mutation kinds for queued operations."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class OperationKind(str, Enum):
    """Supported mutation kinds on a time entry."""

    UPDATE_DESCRIPTION = "UPDATE_DESCRIPTION"
    UPDATE_PROJECT = "UPDATE_PROJECT"
    UPDATE_TAGS = "UPDATE_TAGS"
    UPDATE_TIME = "UPDATE_TIME"
    UPDATE_DURATION = "UPDATE_DURATION"
    UPDATE_BULK = "UPDATE_BULK"
    DELETE = "DELETE"
    STOP = "STOP"


# Kinds that change exactly one field, and the payload field they carry.
SINGLE_FIELD_KINDS: dict[OperationKind, str] = {
    OperationKind.UPDATE_DESCRIPTION: "description",
    OperationKind.UPDATE_PROJECT: "project_name",
    OperationKind.UPDATE_TAGS: "tags",
}

# Client-side spellings accepted for a canonical field.
FIELD_ALIASES: dict[str, str] = {
    "projectName": "project_name",
    "tagNames": "tags",
}


def canonical_field(name: str) -> str:
    return FIELD_ALIASES.get(name, name)


def single_field_item(kind: OperationKind, payload: dict[str, Any]) -> Optional[tuple[str, Any]]:
    """
    Return (canonical field, value) carried by a single-field update, or None.

    The canonical spelling wins over an alias when both are present.
    """
    field_name = SINGLE_FIELD_KINDS.get(kind)
    if field_name is None:
        return None
    if field_name in payload:
        return field_name, payload[field_name]
    for alias, target in FIELD_ALIASES.items():
        if target == field_name and alias in payload:
            return field_name, payload[alias]
    return None
