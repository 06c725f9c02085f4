from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class QueueMessage:
    """
    A message read from the stream.
    """
    entry_id: str
    payload: Mapping[str, Any]
