from __future__ import annotations

import uuid
from collections.abc import Callable, Iterator

import fakeredis
import pytest
from redis import Redis

from rowsink.config import QueueConfig


@pytest.fixture
def redis_client() -> Iterator[Redis]:
    """
    In-process Redis for unit tests; each test gets an empty server.
    """
    client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=False)
    yield client
    client.close()


@pytest.fixture
def queue_config_factory(request: pytest.FixtureRequest) -> Callable[[], QueueConfig]:
    """
    Factory fixture creating per-test QueueConfig instances.

    Each config uses a unique stream key, consumer group, and consumer name.
    """

    def _create() -> QueueConfig:
        test_id = uuid.uuid4().hex[:8]
        return QueueConfig(
            stream_key=f"test_stream_{request.node.name[:30]}_{test_id}",
            consumer_group=f"test_group_{test_id}",
            consumer_name=f"test_consumer_{test_id}",
            block_ms=50,
            max_read_count=1,
            claim_idle_ms=60_000,
        )

    return _create


@pytest.fixture
def queue_config(queue_config_factory: Callable[[], QueueConfig]) -> QueueConfig:
    return queue_config_factory()
