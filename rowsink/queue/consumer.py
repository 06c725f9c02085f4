from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from typing import Optional

from redis import Redis

from ..config import QueueConfig
from ..errors import QueueError
from .models import QueueMessage
from .redis_streams import RedisStreamsQueue


class QueueConsumer:
    """
    Reads change messages from a Redis Streams consumer group, one at a time.

    The consumer only moves messages from the stream to the caller. It
    coordinates:
    - Message retrieval
    - Shutdown
    - Delivery to a handler

    It does not retry, buffer or recover on its own.

    Delivery model:
    - At-least-once delivery
    - Explicit acknowledgment, after the row change is committed
    - Stale messages are reclaimed only when user code asks
    - No background threads

    Failures are surfaced to the caller.

    Usage:
        consumer = QueueConsumer(redis_client, config)

        # Option 1: Manual control
        while True:
            msg = consumer.next()
            if msg is None:
                continue
            destination.write(record_from_message(msg))
            consumer.ack(msg)

        # Option 2: Iterator
        for msg in consumer.iter_messages():
            destination.write(record_from_message(msg))
            consumer.ack(msg)

        # Option 3: Template method
        consumer.run(handler=lambda msg: destination.write(record_from_message(msg)))
    """

    def __init__(self, redis: Redis, config: QueueConfig) -> None:
        """
        Bind to the configured stream and make sure the consumer group exists.

        Args:
            redis: Redis client instance
            config: Stream, group and consumer settings

        Raises:
            QueueError: If consumer group creation fails (except BUSYGROUP)
        """
        self.config = config
        self._queue = RedisStreamsQueue(redis, config)
        self._stopping = threading.Event()

    def next(self, block_ms: Optional[int] = None) -> Optional[QueueMessage]:
        """
        Fetch at most one change message.

        Rules:
        - Returns at most one message
        - Returns None when nothing arrived within block_ms, or once stop()
          has been called
        - Blocks in XREADGROUP rather than polling
        - Never drops a message it has read
        - Redis failures propagate as QueueError

        Args:
            block_ms: Maximum time to block in milliseconds. Defaults to
                      config.block_ms. Must be a positive integer.

        Returns:
            The next QueueMessage, or None

        Raises:
            QueueError: If the Redis read fails or block_ms is invalid
        """
        if self._stopping.is_set():
            return None

        actual_block_ms = block_ms if block_ms is not None else self.config.block_ms
        if not isinstance(actual_block_ms, int) or actual_block_ms <= 0:
            raise QueueError("block_ms must be a positive integer (> 0)")

        messages = self._queue.read(block_ms=actual_block_ms, count=1)
        if not messages:
            return None
        return messages[0]

    def iter_messages(self) -> Iterator[QueueMessage]:
        """
        Yield change messages until stopped.

        Behavior:
        - Blocks for config.block_ms between empty reads
        - Stops yielding once stop() is observed
        - Does not acknowledge what it yields
        - Propagates all exceptions

        Yields:
            QueueMessage instances

        Raises:
            QueueError: If the Redis read fails
        """
        while not self._stopping.is_set():
            msg = self.next(block_ms=self.config.block_ms)
            if msg is None:
                continue
            yield msg

    def ack(self, msg: QueueMessage) -> None:
        """
        Acknowledge a message whose row change has been written.

        Rules:
        - Called explicitly by user code, or by run() after the handler returns
        - An unacknowledged message stays pending and can be reclaimed with
          recover_stale()
        - Redis failures propagate as QueueError

        Args:
            msg: The QueueMessage to acknowledge

        Raises:
            QueueError: If the Redis XACK fails
        """
        self._queue.ack(msg)

    def stop(self) -> None:
        """
        Signal graceful shutdown.

        After stop():
        - No new reads start
        - A message already handed out is not acknowledged automatically
        - Nothing is reclaimed

        Unacknowledged messages stay pending and may be reclaimed by another
        consumer later.
        """
        self._stopping.set()

    def run(self, *, handler: Callable[[QueueMessage], object]) -> None:
        """
        Template-method runner, until stopped:
        1) fetch one message
        2) handler(msg)
        3) ack

        Each record is written in its own transaction inside the handler, so
        a message is acknowledged only after its statement has committed.

        Rules:
        - No retries
        - Never acknowledges before the handler returns
        - Handler exceptions propagate unchanged and leave the message pending
        - If ack fails after a successful write, QueueError propagates and the
          message may be delivered again; writes should be idempotent (upserts
          and deletes by key are)

        Args:
            handler: Called with each message; its return value is ignored

        Raises:
            QueueError: If a Redis operation fails
            Any exception raised by handler is propagated
        """
        while not self._stopping.is_set():
            msg = self.next(block_ms=self.config.block_ms)
            if msg is None:
                continue
            handler(msg)
            self.ack(msg)

    def recover_stale(self, min_idle_ms: Optional[int] = None, count: int = 1) -> list[QueueMessage]:
        """
        Claim messages that have been pending longer than min_idle_ms.

        Recovery is best-effort and off the hot path. It uses XAUTOCLAIM and
        is never triggered automatically; call it periodically from user code.
        Claimed messages are handed back for processing and still need ack().

        Args:
            min_idle_ms: Minimum idle time in milliseconds before a message can
                         be claimed. Defaults to config.claim_idle_ms.
            count: Maximum number of messages to claim (default 1)

        Returns:
            Claimed QueueMessage objects (may be empty)

        Raises:
            QueueError: If the Redis claim fails
        """
        actual_min_idle_ms = min_idle_ms if min_idle_ms is not None else self.config.claim_idle_ms
        return self._queue.claim_stale(min_idle_ms=actual_min_idle_ms, count=count)
