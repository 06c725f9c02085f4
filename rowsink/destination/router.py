from __future__ import annotations

import logging

from ..config import DestinationConfig
from ..decoding import effective_action, get_key, get_payload, has_key
from ..errors import ConfigError, ValidationError
from ..models import Action, ChangeRecord, Operation, Statement, WriteIntent
from ..sql.builder import build_delete, build_insert, build_upsert
from ..sql.columns import merge_columns_and_values
from ..sql.placeholders import PlaceholderStrategy
from .resolver import resolve_key_column_name, resolve_table_name

logger = logging.getLogger(__name__)


def plan(record: ChangeRecord, config: DestinationConfig) -> WriteIntent:
    """
    Decide how a record is written.

    Routing:
    - insert (also missing/unrecognized actions): plain INSERT when the record
      has no key or no key column is configured, UPSERT otherwise
    - update: UPSERT; the record must have a key
    - delete: DELETE by key; the record must have a key

    A plain INSERT of a keyed record does not guard against existing rows: a
    duplicate key surfaces as the datastore's error.

    Raises:
        DecodeError, ConfigError, ValidationError, UnsupportedError
    """
    action = effective_action(record)

    if action == Action.UPDATE:
        if not has_key(record):
            raise ValidationError("key required for update")
        return _plan_upsert(record, config, action)

    if action == Action.DELETE:
        if not has_key(record):
            raise ValidationError("key required for delete")
        return _plan_delete(record, config)

    if not has_key(record) or not config.key_column_name:
        return _plan_insert(record, config)
    return _plan_upsert(record, config, action)


def _plan_insert(record: ChangeRecord, config: DestinationConfig) -> WriteIntent:
    table_name = resolve_table_name(record.metadata, config)
    key = get_key(record)
    payload = get_payload(record)
    columns, values = merge_columns_and_values(key, payload)
    return WriteIntent(
        operation=Operation.INSERT,
        table_name=table_name,
        key_column_name="",
        columns=tuple(columns),
        values=tuple(values),
    )


def _plan_upsert(
    record: ChangeRecord,
    config: DestinationConfig,
    action: Action,
) -> WriteIntent:
    payload = get_payload(record)
    key = get_key(record)
    key_column_name = resolve_key_column_name(key, config.key_column_name)
    if not key_column_name:
        raise ConfigError(f"no key column resolvable for {action.value}")
    table_name = resolve_table_name(record.metadata, config)
    columns, values = merge_columns_and_values(key, payload)
    return WriteIntent(
        operation=Operation.UPSERT,
        table_name=table_name,
        key_column_name=key_column_name,
        columns=tuple(columns),
        values=tuple(values),
    )


def _plan_delete(record: ChangeRecord, config: DestinationConfig) -> WriteIntent:
    key = get_key(record)
    key_column_name = resolve_key_column_name(key, config.key_column_name)
    if not key_column_name:
        raise ConfigError("no key column resolvable for delete")
    if key_column_name not in key:
        raise ValidationError(f"key has no value for column {key_column_name!r}")
    table_name = resolve_table_name(record.metadata, config)
    return WriteIntent(
        operation=Operation.DELETE,
        table_name=table_name,
        key_column_name=key_column_name,
        columns=(key_column_name,),
        values=(key[key_column_name],),
    )


def build_statement(intent: WriteIntent, *, placeholder: PlaceholderStrategy) -> Statement:
    if intent.operation == Operation.DELETE:
        return build_delete(
            intent.table_name,
            intent.key_column_name,
            intent.values[0],
            placeholder=placeholder,
        )
    if intent.operation == Operation.UPSERT:
        return build_upsert(
            intent.table_name,
            intent.key_column_name,
            intent.columns,
            intent.values,
            placeholder=placeholder,
        )
    return build_insert(
        intent.table_name,
        intent.columns,
        intent.values,
        placeholder=placeholder,
    )


def route(
    record: ChangeRecord,
    config: DestinationConfig,
    *,
    placeholder: PlaceholderStrategy,
) -> tuple[WriteIntent, Statement]:
    """Plan a record and build its statement. Stateless; nothing is executed."""
    intent = plan(record, config)
    statement = build_statement(intent, placeholder=placeholder)
    logger.debug(
        "Routed record to %s on %s: %s",
        intent.operation.value,
        intent.table_name,
        statement.sql,
    )
    return intent, statement
