from __future__ import annotations

from typing import Any, Sequence

from ..errors import ValidationError
from ..models import Statement
from .identifiers import validate_identifier, validate_table_name
from .placeholders import PlaceholderStrategy


def build_insert(
    table: str,
    columns: Sequence[str],
    values: Sequence[Any],
    *,
    placeholder: PlaceholderStrategy,
) -> Statement:
    """
    Build a plain parameterized INSERT.

    INSERT has no conflict handling: a duplicate key is the datastore's error
    to raise.

    Args:
        table: Target table (optionally schema-qualified)
        columns: Column names, index-aligned with values
        values: Values to bind, in column order
        placeholder: Bind-marker strategy for the target dialect

    Returns:
        Statement with SQL of the form ``INSERT INTO t (a,b) VALUES (?,?)``

    Raises:
        ValidationError: If an identifier is invalid, no columns are given, or
            columns and values differ in length
    """
    table = validate_table_name(table)
    if not columns:
        raise ValidationError(f"insert into {table} requires at least one column")
    if len(columns) != len(values):
        raise ValidationError(
            f"{len(columns)} columns but {len(values)} values for insert into {table}"
        )

    col_names = ",".join(validate_identifier(c, "column") for c in columns)
    markers = ",".join(placeholder.render(i) for i in range(1, len(values) + 1))

    sql = f"INSERT INTO {table} ({col_names}) VALUES ({markers})"
    return Statement(sql=sql, args=list(values))


def build_upsert(
    table: str,
    key_column: str,
    columns: Sequence[str],
    values: Sequence[Any],
    *,
    placeholder: PlaceholderStrategy,
) -> Statement:
    """
    Build an INSERT that updates the existing row when the key column conflicts.

    Every column other than the key column is overwritten with the proposed
    value (``EXCLUDED.column``). The conflict target is always the single key
    column; other unique constraints are not handled and still raise.

    Example (dollar placeholders):
        INSERT INTO t (id,val) VALUES ($1,$2) ON CONFLICT (id) DO UPDATE SET val=EXCLUDED.val;

    When the key column is the only column there is nothing to update and the
    suffix becomes ``ON CONFLICT (id) DO NOTHING;``.
    """
    key_column = validate_identifier(key_column, "key column")
    insert = build_insert(table, columns, values, placeholder=placeholder)

    assignments = [f"{c}=EXCLUDED.{c}" for c in columns if c != key_column]
    if assignments:
        conflict = f"ON CONFLICT ({key_column}) DO UPDATE SET {', '.join(assignments)};"
    else:
        conflict = f"ON CONFLICT ({key_column}) DO NOTHING;"

    return Statement(sql=f"{insert.sql} {conflict}", args=insert.args)


def build_delete(
    table: str,
    key_column: str,
    key_value: Any,
    *,
    placeholder: PlaceholderStrategy,
) -> Statement:
    """
    Build a DELETE of the row whose key column equals key_value.

    A None key value matches with ``IS NULL``, since ``= NULL`` never matches.
    """
    table = validate_table_name(table)
    key_column = validate_identifier(key_column, "key column")

    if key_value is None:
        return Statement(sql=f"DELETE FROM {table} WHERE {key_column} IS NULL", args=[])
    return Statement(
        sql=f"DELETE FROM {table} WHERE {key_column} = {placeholder.render(1)}",
        args=[key_value],
    )
