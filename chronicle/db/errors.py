"""Error hierarchy for the audit and versioning engine.

Repositories, gateways and the codec raise these errors; nothing in the
engine retries or swallows them.
"""


class StoreError(Exception):
    """Base exception for all engine and store errors.

    Backend-specific failures are wrapped in one of the subclasses and
    keep the original exception on ``cause``.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConnectionError(StoreError):
    """Raised when the storage backend cannot be reached or fails mid-query."""

    pass


class NotFoundError(StoreError):
    """Raised when a record, version or point-in-time snapshot does not exist.

    Empty query results are not errors; this is only raised for a specific
    lookup that must succeed (update, delete, version comparison, ...).
    """

    pass


class ConflictError(StoreError):
    """Raised when adding a record whose key is already stored."""

    pass


class SerializationError(StoreError):
    """Raised when a value cannot be encoded, or a stored encoded value
    cannot be decoded into the requested type.
    """

    pass


class InvariantViolation(StoreError):
    """Raised when an internal consistency check fails.

    Examples:
        - Appending a history entry to a non-contiguous history
        - Appending after a terminal Deleted entry
        - Comparing snapshots of two different record types

    This signals a programming error, not a recoverable condition.
    """

    pass
