from __future__ import annotations

from typing import Mapping

from ..config import DestinationConfig
from ..errors import ConfigError, UnsupportedError
from ..models import StructuredData


def resolve_table_name(metadata: Mapping[str, str], config: DestinationConfig) -> str:
    """
    Return the record's metadata table, else the configured default table.

    Raises:
        ConfigError: If neither is set; every write needs a table
    """
    table = metadata.get("table")
    if table:
        return table
    if not config.table_name:
        raise ConfigError("no table provided for default writes")
    return config.table_name


def resolve_key_column_name(key: StructuredData, default_name: str) -> str:
    """
    Return the key column for a record.

    A single-field key names its own column, so keys are not limited to "id".
    An empty key falls back to default_name (which may be empty).

    Raises:
        UnsupportedError: For composite keys. Picking one of several fields
            would target the wrong rows, so they are refused outright.
    """
    if len(key) > 1:
        raise UnsupportedError(
            f"composite keys are not supported (got fields {sorted(key)})"
        )
    for name in key:
        return name
    return default_name
