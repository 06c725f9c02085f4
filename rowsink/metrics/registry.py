from __future__ import annotations

from prometheus_client import Counter, Histogram

WRITES_TOTAL = Counter(
    "rowsink_writes_total",
    "Records written to the destination, by outcome",
    ["table", "operation", "status"],
)

WRITE_LATENCY_SECONDS = Histogram(
    "rowsink_write_latency_seconds",
    "Latency of a single record write, including commit",
    ["table", "operation"],
)

QUEUE_MESSAGES_READ_TOTAL = Counter(
    "rowsink_queue_messages_read_total",
    "Messages read from the stream",
    ["stream"],
)

QUEUE_MESSAGES_ACK_TOTAL = Counter(
    "rowsink_queue_messages_ack_total",
    "Messages acknowledged on the stream",
    ["stream"],
)

QUEUE_MESSAGES_CLAIMED_TOTAL = Counter(
    "rowsink_queue_messages_claimed_total",
    "Stale messages claimed from other consumers",
    ["stream"],
)

QUEUE_READ_LATENCY_SECONDS = Histogram(
    "rowsink_queue_read_latency_seconds",
    "Latency of stream reads, including blocking time",
    ["stream"],
)
