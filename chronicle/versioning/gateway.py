"""RecordGateway abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from chronicle.versioning.models.record import VersionedRecord

RecordT = TypeVar("RecordT", bound=VersionedRecord[Any])
KeyT = TypeVar("KeyT")

Predicate = Callable[[RecordT], bool]


class RecordGateway(ABC, Generic[RecordT, KeyT]):
    """Abstract persistence gateway consumed by the audit repository.

    Implementations persist the whole record, history included, and hand
    out copies so callers never share state with the store. No soft-delete
    filtering happens here; that is the repository's job.
    """

    @abstractmethod
    async def add(self, record: RecordT) -> KeyT:
        """Store a new record, returning its key."""
        pass

    @abstractmethod
    async def replace_by_key(self, key: KeyT, record: RecordT) -> None:
        """Replace the stored record with the given key."""
        pass

    @abstractmethod
    async def query(self, predicate: Predicate[RecordT] | None = None) -> list[RecordT]:
        """Return all stored records matching the predicate."""
        pass

    @abstractmethod
    async def find_by_key(self, key: KeyT) -> RecordT | None:
        """Return the record with the given key, or None."""
        pass
