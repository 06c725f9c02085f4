from __future__ import annotations

import json
from typing import Any, Optional

from ..errors import DecodeError
from ..models import Action, ChangeRecord
from .models import QueueMessage


def _raw(value: Any, what: str) -> Optional[bytes]:
    if value is None:
        return None
    if isinstance(value, dict):
        return json.dumps(value).encode()
    if isinstance(value, str):
        return value.encode()
    raise DecodeError(f"{what} must be a JSON object or a string, got {type(value).__name__}")


def record_from_message(msg: QueueMessage) -> ChangeRecord:
    """
    Build a ChangeRecord from a stream message of the form

        {"action": "update", "key": {"id": 1}, "payload": {...}, "metadata": {...}}

    key and payload may be objects or JSON text; every field is optional.
    """
    body = msg.payload
    try:
        action = Action(body.get("action") or Action.UNSPECIFIED)
    except ValueError:
        action = Action.UNSPECIFIED

    metadata = body.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise DecodeError(f"metadata of message {msg.entry_id} must be an object")

    return ChangeRecord(
        action=action,
        key=_raw(body.get("key"), "key"),
        payload=_raw(body.get("payload"), "payload"),
        metadata={str(k): str(v) for k, v in metadata.items()},
    )


def message_from_record(record: ChangeRecord) -> dict[str, Any]:
    """The inverse of record_from_message(), for producers."""
    return {
        "action": Action(record.action).value,
        "key": record.key.decode() if record.key is not None else None,
        "payload": record.payload.decode() if record.payload is not None else None,
        "metadata": dict(record.metadata),
    }
