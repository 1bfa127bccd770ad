"""Database utilities for Chronicle.

This module contains:
- Error hierarchy shared by the engine and its stores
- PostgreSQL connection pool management
- Alembic migrations for the history tables
"""

from chronicle.db.errors import (
    ConflictError,
    ConnectionError,
    InvariantViolation,
    NotFoundError,
    SerializationError,
    StoreError,
)

__all__ = [
    "StoreError",
    "ConnectionError",
    "NotFoundError",
    "ConflictError",
    "SerializationError",
    "InvariantViolation",
]
