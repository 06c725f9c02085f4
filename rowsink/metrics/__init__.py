from .registry import (
    QUEUE_MESSAGES_ACK_TOTAL,
    QUEUE_MESSAGES_CLAIMED_TOTAL,
    QUEUE_MESSAGES_READ_TOTAL,
    QUEUE_READ_LATENCY_SECONDS,
    WRITE_LATENCY_SECONDS,
    WRITES_TOTAL,
)

__all__ = [
    "WRITES_TOTAL",
    "WRITE_LATENCY_SECONDS",
    "QUEUE_MESSAGES_READ_TOTAL",
    "QUEUE_MESSAGES_ACK_TOTAL",
    "QUEUE_MESSAGES_CLAIMED_TOTAL",
    "QUEUE_READ_LATENCY_SECONDS",
]
