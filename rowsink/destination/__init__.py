from .resolver import resolve_key_column_name, resolve_table_name
from .router import build_statement, plan, route
from .session import DbSession
from .writer import Destination

__all__ = [
    "Destination",
    "DbSession",
    "plan",
    "route",
    "build_statement",
    "resolve_table_name",
    "resolve_key_column_name",
]
