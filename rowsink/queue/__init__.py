from __future__ import annotations

from ..config import QueueConfig
from .consumer import QueueConsumer
from .models import QueueMessage
from .records import message_from_record, record_from_message
from .redis_streams import RedisStreamsQueue

__all__ = [
    "QueueConfig",
    "QueueConsumer",
    "QueueMessage",
    "RedisStreamsQueue",
    "record_from_message",
    "message_from_record",
]
