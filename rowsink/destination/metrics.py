from __future__ import annotations

from ..metrics.registry import WRITE_LATENCY_SECONDS, WRITES_TOTAL


def observe_write(table: str, operation: str, status: str, latency_s: float) -> None:
    """Record the outcome and latency of one record write."""
    WRITES_TOTAL.labels(table=table, operation=operation, status=status).inc()
    WRITE_LATENCY_SECONDS.labels(table=table, operation=operation).observe(latency_s)
