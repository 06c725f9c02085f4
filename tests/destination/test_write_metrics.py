from __future__ import annotations

import pytest

from rowsink.config import DestinationConfig
from rowsink.destination.metrics import observe_write
from rowsink.destination.writer import Destination
from rowsink.errors import ExecutionError
from rowsink.metrics.registry import WRITE_LATENCY_SECONDS, WRITES_TOTAL
from rowsink.models import ChangeRecord


def _count(table: str, operation: str, status: str) -> float:
    return WRITES_TOTAL.labels(table=table, operation=operation, status=status)._value.get()


def _latency_samples(table: str, operation: str) -> int:
    for family in WRITE_LATENCY_SECONDS.labels(table=table, operation=operation).collect():
        for sample in family.samples:
            if sample.name.endswith("_count"):
                return int(sample.value)
    return 0


def test_observe_write_increments_counter_and_histogram() -> None:
    before = _count("metrics_table", "upsert", "success")
    samples_before = _latency_samples("metrics_table", "upsert")

    observe_write("metrics_table", "upsert", "success", 0.01)

    assert _count("metrics_table", "upsert", "success") == before + 1
    assert _latency_samples("metrics_table", "upsert") == samples_before + 1


def test_successful_write_is_counted(engine, keyed_config: DestinationConfig, users_table: str) -> None:
    before = _count(users_table, "upsert", "success")

    with Destination(keyed_config, engine=engine) as dest:
        dest.write(ChangeRecord(key=b'{"id": 1}', payload=b'{"name": "m"}'))

    assert _count(users_table, "upsert", "success") == before + 1


def test_failed_write_is_counted_as_error(engine, keyed_config: DestinationConfig, users_table: str) -> None:
    before = _count(users_table, "insert", "error")

    with Destination(keyed_config, engine=engine) as dest:
        with pytest.raises(ExecutionError):
            dest.write(ChangeRecord(payload=b'{"missing_column": 1}'))

    assert _count(users_table, "insert", "error") == before + 1
