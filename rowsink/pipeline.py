from __future__ import annotations

import logging

from .destination.writer import Destination
from .errors import ConfigError, DecodeError, UnsupportedError, ValidationError
from .queue.consumer import QueueConsumer
from .queue.models import QueueMessage
from .queue.records import record_from_message

logger = logging.getLogger(__name__)

# The record itself cannot be written; redelivering it would fail the same way.
RECORD_ERRORS = (DecodeError, ConfigError, ValidationError, UnsupportedError)


def replicate(consumer: QueueConsumer, destination: Destination) -> None:
    """
    Write every message from consumer to destination until the consumer stops.

    Messages are acknowledged after their statement commits.

    A record that cannot be translated (DecodeError, ConfigError,
    ValidationError, UnsupportedError) is logged, acknowledged and skipped;
    replication continues with the next message.

    ExecutionError and QueueError propagate and stop replication. The failing
    message stays pending and is redelivered or reclaimed later.
    """

    def handle(msg: QueueMessage) -> None:
        try:
            destination.write(record_from_message(msg))
        except RECORD_ERRORS as exc:
            logger.error("Skipping message %s: %r", msg.entry_id, exc)
        except Exception:
            logger.error("Failed to write message %s", msg.entry_id)
            raise

    consumer.run(handler=handle)
