from __future__ import annotations

import json
import logging
import time
from typing import Any, Mapping, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..config import DestinationConfig
from ..errors import ConfigError, ExecutionError
from ..models import ChangeRecord
from ..sql.placeholders import PlaceholderFormat, PlaceholderStrategy
from .metrics import observe_write
from .router import route
from .session import DbSession

logger = logging.getLogger(__name__)


def _bind_value(value: Any) -> Any:
    # nested JSON values are stored as their JSON text
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return value


class Destination:
    """
    Writes change records to a relational table, one statement per record.

    Lifecycle mirrors a connector: configure() -> open() -> write()* -> teardown().
    It can also be built around an existing engine and used as a context manager:

        with Destination(DestinationConfig(table_name="users"), engine=engine) as dest:
            dest.write(record)

    Each write runs in its own short transaction. There is no batching, no
    retrying and no reconnection at this layer; errors surface per record:

    - DecodeError, ConfigError, ValidationError, UnsupportedError: the record
      could not be translated; nothing was executed
    - ExecutionError: the datastore rejected the statement
    """

    def __init__(
        self,
        config: Optional[DestinationConfig] = None,
        *,
        engine: Optional[Engine] = None,
        placeholder: Optional[PlaceholderStrategy] = None,
    ) -> None:
        self.config = config or DestinationConfig()
        self._engine = engine
        self._owns_engine = False
        self._placeholder = placeholder

    def configure(self, cfg: Mapping[str, str]) -> None:
        """Replace the configuration from a connector settings mapping."""
        self.config = DestinationConfig.from_mapping(cfg)

    def open(self) -> None:
        """
        Connect to the datastore and resolve the placeholder style.

        Raises:
            ConfigError: If no engine was given and no url is configured, or
                the driver's paramstyle cannot bind positional arguments
            ExecutionError: If the datastore is unreachable
        """
        if self._engine is None:
            if not self.config.url:
                raise ConfigError("no url configured")
            self._engine = create_engine(self.config.url, pool_pre_ping=True)
            self._owns_engine = True

        try:
            with self._engine.connect() as conn:
                conn.exec_driver_sql("SELECT 1")
        except SQLAlchemyError as exc:
            if self._owns_engine:
                self._engine.dispose()
                self._engine = None
                self._owns_engine = False
            raise ExecutionError(f"failed to connect to datastore: {exc}") from exc

        placeholder = self.placeholder
        logger.info(
            "Destination opened (dialect=%s, placeholder=%s, default table=%r)",
            self._engine.dialect.name,
            getattr(placeholder, "value", placeholder),
            self.config.table_name,
        )

    @property
    def placeholder(self) -> PlaceholderStrategy:
        if self._placeholder is None:
            if self.config.placeholder:
                self._placeholder = PlaceholderFormat.from_paramstyle(self.config.placeholder)
            else:
                self._placeholder = PlaceholderFormat.from_paramstyle(
                    self._require_engine().dialect.paramstyle
                )
        return self._placeholder

    def _require_engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Destination is not open; call open() first")
        return self._engine

    def write(self, record: ChangeRecord) -> int:
        """
        Translate a record and execute the resulting statement.

        Returns:
            Number of affected rows

        Raises:
            DecodeError, ConfigError, ValidationError, UnsupportedError,
            ExecutionError
        """
        engine = self._require_engine()
        intent, statement = route(record, self.config, placeholder=self.placeholder)
        args = [_bind_value(v) for v in statement.args]

        start_time = time.monotonic()
        status = "error"
        try:
            with DbSession(engine) as session:
                rowcount = session.execute(statement.sql, args)
            status = "success"
        except SQLAlchemyError as exc:
            raise ExecutionError(
                f"{intent.operation.value} on {intent.table_name} failed: {exc}"
            ) from exc
        finally:
            latency = time.monotonic() - start_time
            observe_write(intent.table_name, intent.operation.value, status, latency)

        logger.debug(
            "%s on %s affected %d row(s)",
            intent.operation.value,
            intent.table_name,
            rowcount,
        )
        return rowcount

    def flush(self) -> None:
        """Writes are not buffered; nothing to flush."""

    def teardown(self) -> None:
        """Release the engine if this destination created it. Safe to call twice."""
        if self._engine is not None and self._owns_engine:
            self._engine.dispose()
            self._engine = None
            self._owns_engine = False
            logger.info("Destination torn down")

    def __enter__(self) -> "Destination":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()
        return False
