from .builder import build_delete, build_insert, build_upsert
from .columns import merge_columns_and_values
from .identifiers import validate_identifier, validate_table_name
from .placeholders import PlaceholderFormat, PlaceholderStrategy

__all__ = [
    "build_insert",
    "build_upsert",
    "build_delete",
    "merge_columns_and_values",
    "validate_identifier",
    "validate_table_name",
    "PlaceholderFormat",
    "PlaceholderStrategy",
]
