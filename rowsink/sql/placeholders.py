from __future__ import annotations

from enum import Enum
from typing import Protocol

from ..errors import ConfigError


class PlaceholderStrategy(Protocol):
    """Renders the bind marker for a 1-based argument position."""

    def render(self, position: int) -> str:
        ...


class PlaceholderFormat(str, Enum):
    """
    Positional bind-marker styles, named after their DB-API paramstyle.

    Every style binds a plain sequence of arguments in statement order.
    """
    QUESTION = "qmark"  # ?            sqlite3, pyodbc
    DOLLAR = "numeric_dollar"  # $1    asyncpg, pg8000
    NUMERIC = "numeric"  # :1
    FORMAT = "format"  # %s            psycopg2, pymysql

    def render(self, position: int) -> str:
        if self is PlaceholderFormat.QUESTION:
            return "?"
        if self is PlaceholderFormat.DOLLAR:
            return f"${position}"
        if self is PlaceholderFormat.NUMERIC:
            return f":{position}"
        return "%s"

    @classmethod
    def from_paramstyle(cls, paramstyle: str) -> "PlaceholderFormat":
        """
        Map a DB-API paramstyle to a placeholder format.

        Raises:
            ConfigError: For named styles, which cannot bind positional arguments
        """
        if paramstyle == "pyformat":
            return cls.FORMAT
        try:
            return cls(paramstyle)
        except ValueError:
            raise ConfigError(
                f"Unsupported paramstyle {paramstyle!r}: positional parameters are required"
            ) from None
