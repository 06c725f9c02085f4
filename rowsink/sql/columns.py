from __future__ import annotations

from typing import Any, Mapping


def merge_columns_and_values(
    key: Mapping[str, Any],
    payload: Mapping[str, Any],
) -> tuple[list[str], list[Any]]:
    """
    Combine key and payload fields into index-aligned column and value lists.

    Key fields come first and win over payload fields of the same name, so a
    column never appears twice. Each group is ordered by column name: binding
    is positional, and the same row shape must always produce the same
    statement no matter which field order the producer used.

    Neither input is modified.

    Example:
        >>> merge_columns_and_values({"id": 1}, {"name": "x", "id": 1})
        (['id', 'name'], [1, 'x'])
    """
    columns: list[str] = []
    values: list[Any] = []

    for column, value in sorted(key.items()):
        columns.append(column)
        values.append(value)

    for column, value in sorted(payload.items()):
        if column in key:
            continue
        columns.append(column)
        values.append(value)

    return columns, values
