from __future__ import annotations

import re
import uuid
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from rowsink.config import DestinationConfig


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """
    File-backed SQLite database, one per test.

    SQLite understands INSERT ... ON CONFLICT (col) DO UPDATE SET col=EXCLUDED.col,
    so the generated statements run unchanged against it.
    """
    return f"sqlite:///{tmp_path / 'rowsink.db'}"


@pytest.fixture
def engine(sqlite_url: str) -> Iterator[Engine]:
    eng = create_engine(sqlite_url)
    yield eng
    eng.dispose()


def _sanitize_table_name(name: str) -> str:
    name = re.sub(r"[^a-zA-Z0-9_]+", "_", name).strip("_").lower()
    if not name:
        name = "t"
    return name[:40]


@pytest.fixture
def table_factory(engine: Engine, request: pytest.FixtureRequest) -> Callable[[str], str]:
    """
    Factory fixture creating per-test tables.

    Usage:
        table = table_factory("id INTEGER PRIMARY KEY, name TEXT")
    """

    def _create(schema_sql: str) -> str:
        base = _sanitize_table_name(f"t_{request.node.name}")
        table = f"{base}_{uuid.uuid4().hex[:10]}"

        with engine.begin() as conn:
            conn.exec_driver_sql(f"CREATE TABLE {table} ({schema_sql})")
        return table

    return _create


@pytest.fixture
def users_table(table_factory: Callable[[str], str]) -> str:
    """
    Default table used across destination tests.

    - `id` is the primary key (conflict target for upserts)
    - `attrs` receives nested JSON values
    """
    return table_factory(
        """
        id INTEGER PRIMARY KEY,
        name TEXT NULL,
        email TEXT NULL,
        attrs TEXT NULL
        """
    )


@pytest.fixture
def keyed_config(users_table: str) -> DestinationConfig:
    return DestinationConfig(table_name=users_table, key_column_name="id")
