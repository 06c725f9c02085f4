from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class Action(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    UNSPECIFIED = "unspecified"


class Operation(str, Enum):
    """The statement kind a record resolves to."""
    INSERT = "insert"
    UPSERT = "upsert"
    DELETE = "delete"


# column -> decoded JSON value
StructuredData = dict[str, Any]


@dataclass
class ChangeRecord:
    """
    A single change event delivered by an upstream source.

    key and payload hold raw JSON object bytes; they are decoded on demand.
    metadata may carry per-record "action" and "table" overrides.
    """
    action: Action = Action.UNSPECIFIED
    key: Optional[bytes] = None
    payload: Optional[bytes] = None
    metadata: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class WriteIntent:
    """
    The resolved write for one record. Built fresh per record, never cached.

    For DELETE, columns/values hold only the key column and its value.
    """
    operation: Operation
    table_name: str
    key_column_name: str
    columns: tuple[str, ...]
    values: tuple[Any, ...]


@dataclass(frozen=True)
class Statement:
    sql: str
    args: list[Any]
