class RowsinkError(Exception):
    """Base exception for rowsink errors."""


class DecodeError(RowsinkError):
    """Key or payload bytes are present but are not a JSON object."""


class ConfigError(RowsinkError):
    """No table or key column can be resolved, or the configuration is invalid."""


class ValidationError(RowsinkError):
    """A record cannot be written as declared (missing key, bad identifier)."""


class UnsupportedError(RowsinkError):
    """The record uses a feature that is not supported (composite keys)."""


class ExecutionError(RowsinkError):
    """The datastore rejected the statement or could not be reached."""


class QueueError(RowsinkError):
    """General queue-related issues."""
