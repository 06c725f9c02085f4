from __future__ import annotations

import json
import logging
import time
from typing import Any, Mapping

from redis import Redis
from redis.exceptions import RedisError, ResponseError

from ..config import QueueConfig
from ..errors import QueueError
from ..metrics.registry import (
    QUEUE_MESSAGES_ACK_TOTAL,
    QUEUE_MESSAGES_CLAIMED_TOTAL,
    QUEUE_MESSAGES_READ_TOTAL,
    QUEUE_READ_LATENCY_SECONDS,
)
from .models import QueueMessage

logger = logging.getLogger(__name__)

DATA_FIELD = "data"


def _text(value: Any) -> str:
    return value.decode() if isinstance(value, bytes) else str(value)


class RedisStreamsQueue:
    """
    Low-level Redis Streams access for one consumer in one consumer group.

    Each entry carries a single field, "data", holding the JSON-encoded
    payload. All Redis failures are raised as QueueError.
    """

    def __init__(self, redis: Redis, config: QueueConfig) -> None:
        self.redis = redis
        self.config = config
        self._ensure_group()

    def _ensure_group(self) -> None:
        try:
            self.redis.xgroup_create(
                self.config.stream_key,
                self.config.consumer_group,
                id="0",
                mkstream=True,
            )
        except ResponseError as exc:
            if "BUSYGROUP" not in str(exc):
                raise QueueError(f"Failed to create consumer group: {exc}") from exc
        except RedisError as exc:
            raise QueueError(f"Failed to create consumer group: {exc}") from exc

    def enqueue(self, payload: Mapping[str, Any]) -> str:
        """
        Append a message to the stream.

        Returns:
            The stream entry id

        Raises:
            QueueError: If the payload is not JSON-serializable or Redis fails
        """
        try:
            data = json.dumps(payload)
        except (TypeError, ValueError) as exc:
            raise QueueError(f"Payload is not JSON-serializable: {exc}") from exc

        try:
            entry_id = self.redis.xadd(self.config.stream_key, {DATA_FIELD: data})
        except RedisError as exc:
            raise QueueError(f"Failed to enqueue message: {exc}") from exc
        return _text(entry_id)

    def read(self, block_ms: int, count: int) -> list[QueueMessage]:
        """Read up to count new messages for this consumer, blocking up to block_ms."""
        stream = self.config.stream_key
        start_time = time.monotonic()
        try:
            response = self.redis.xreadgroup(
                self.config.consumer_group,
                self.config.consumer_name,
                {stream: ">"},
                count=count,
                block=block_ms,
            )
        except RedisError as exc:
            raise QueueError(f"Failed to read from stream {stream!r}: {exc}") from exc
        finally:
            QUEUE_READ_LATENCY_SECONDS.labels(stream=stream).observe(
                time.monotonic() - start_time
            )

        messages: list[QueueMessage] = []
        for _stream, entries in response or []:
            for entry_id, fields in entries:
                messages.append(self._to_message(entry_id, fields))

        if messages:
            QUEUE_MESSAGES_READ_TOTAL.labels(stream=stream).inc(len(messages))
        return messages

    def ack(self, msg: QueueMessage) -> None:
        try:
            self.redis.xack(self.config.stream_key, self.config.consumer_group, msg.entry_id)
        except RedisError as exc:
            raise QueueError(f"Failed to ack message {msg.entry_id}: {exc}") from exc
        QUEUE_MESSAGES_ACK_TOTAL.labels(stream=self.config.stream_key).inc()

    def claim_stale(self, min_idle_ms: int, count: int = 1) -> list[QueueMessage]:
        """
        Claim messages pending on other consumers for at least min_idle_ms.

        Entries deleted from the stream while pending are skipped.
        """
        stream = self.config.stream_key
        try:
            response = self.redis.xautoclaim(
                stream,
                self.config.consumer_group,
                self.config.consumer_name,
                min_idle_time=min_idle_ms,
                start_id="0-0",
                count=count,
            )
        except RedisError as exc:
            raise QueueError(f"Failed to claim stale messages: {exc}") from exc

        # [next_start_id, entries] or, on Redis 7+, [next_start_id, entries, deleted_ids]
        entries = response[1] if len(response) > 1 else []
        messages = [
            self._to_message(entry_id, fields)
            for entry_id, fields in entries
            if fields
        ]
        if messages:
            QUEUE_MESSAGES_CLAIMED_TOTAL.labels(stream=stream).inc(len(messages))
            logger.info("Claimed %d stale message(s) from %s", len(messages), stream)
        return messages

    def _to_message(self, entry_id: Any, fields: Mapping[Any, Any]) -> QueueMessage:
        entry_id = _text(entry_id)
        raw = fields.get(DATA_FIELD, fields.get(DATA_FIELD.encode()))
        if raw is None:
            raise QueueError(f"Message {entry_id} has no {DATA_FIELD!r} field")
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise QueueError(f"Message {entry_id} is not valid JSON: {exc}") from exc
        return QueueMessage(entry_id=entry_id, payload=payload)
