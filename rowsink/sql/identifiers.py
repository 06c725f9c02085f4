from __future__ import annotations

import re

from ..errors import ValidationError

_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# PostgreSQL truncates identifiers beyond NAMEDATALEN - 1
MAX_IDENTIFIER_LENGTH = 63


def validate_identifier(name: str, identifier_type: str = "identifier") -> str:
    """
    Validate that an identifier (column name) is safe for SQL interpolation.

    Identifiers are interpolated into statements unquoted, so we restrict them
    to letters, digits and underscores. Column names come straight from record
    keys and payloads, which makes this check the only thing standing between a
    hostile payload field and the statement text.

    Args:
        name: The identifier to validate
        identifier_type: Description of the identifier (for error messages)

    Returns:
        The validated identifier (unchanged if valid)

    Raises:
        ValidationError: If identifier is not a string, is empty, or contains
            unsafe characters

    Example:
        >>> validate_identifier("user_id", "column")
        'user_id'
        >>> validate_identifier("'; DROP TABLE--", "column")
        ValidationError: Invalid column "'; DROP TABLE--": ...
    """
    if not isinstance(name, str):
        raise ValidationError(
            f"{identifier_type} must be a string, got {type(name).__name__}"
        )

    if not name:
        raise ValidationError(f"{identifier_type} cannot be empty")

    if not _IDENTIFIER.match(name):
        raise ValidationError(
            f"Invalid {identifier_type} {name!r}: "
            "must start with letter/underscore and contain only alphanumeric characters and underscores"
        )

    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise ValidationError(
            f"{identifier_type} {name!r} exceeds the {MAX_IDENTIFIER_LENGTH}-character limit"
        )

    return name


def validate_table_name(name: str) -> str:
    """
    Validate a table name, allowing a single schema qualifier ("public.users").
    """
    if isinstance(name, str) and name.count(".") == 1:
        schema, table = name.split(".")
        validate_identifier(schema, "schema")
        validate_identifier(table, "table")
        return name
    return validate_identifier(name, "table")
