from __future__ import annotations

import json
import logging
from typing import Optional

from .errors import DecodeError
from .models import Action, ChangeRecord, StructuredData

logger = logging.getLogger(__name__)


def _structured_data(raw: Optional[bytes], what: str) -> StructuredData:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"{what} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise DecodeError(
            f"{what} must be a JSON object, got {type(data).__name__}"
        )
    return data


def get_payload(record: ChangeRecord) -> StructuredData:
    """
    Decode the record payload into a column -> value mapping.

    Absent or empty payload bytes decode to an empty mapping.

    Raises:
        DecodeError: If the bytes are not a JSON object
    """
    return _structured_data(record.payload, "payload")


def get_key(record: ChangeRecord) -> StructuredData:
    """Decode the record key; same contract as get_payload()."""
    return _structured_data(record.key, "key")


def has_key(record: ChangeRecord) -> bool:
    return record.key is not None and len(record.key) > 0


def effective_action(record: ChangeRecord) -> Action:
    """
    Resolve the action a record should be written with.

    metadata["action"] takes precedence over record.action. Missing,
    unspecified and unrecognized actions all resolve to INSERT.
    """
    declared = record.metadata.get("action")
    if declared is None:
        declared = record.action
    try:
        action = Action(declared)
    except ValueError:
        logger.warning("Unrecognized action %r, writing as insert", declared)
        return Action.INSERT

    if action == Action.UNSPECIFIED:
        return Action.INSERT
    return action
