"""In-memory implementation of RecordGateway."""

from typing import Any, Generic, TypeVar

from chronicle.db.errors import ConflictError, NotFoundError
from chronicle.versioning.gateway import Predicate, RecordGateway
from chronicle.versioning.models.record import VersionedRecord

RecordT = TypeVar("RecordT", bound=VersionedRecord[Any])
KeyT = TypeVar("KeyT")


class InMemoryRecordGateway(RecordGateway[RecordT, KeyT], Generic[RecordT, KeyT]):
    """In-memory implementation of RecordGateway for testing and development.

    Uses simple dict storage with linear scan for queries. Records are
    deep-copied on the way in and out, so a stored snapshot only changes
    through add/replace_by_key.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._records: dict[KeyT, RecordT] = {}

    async def add(self, record: RecordT) -> KeyT:
        """Store a new record."""
        if record.id in self._records:
            raise ConflictError(f"{type(record).__name__} {record.id!r} already exists")
        self._records[record.id] = record.clone()
        return record.id

    async def replace_by_key(self, key: KeyT, record: RecordT) -> None:
        """Replace an existing record."""
        if key not in self._records:
            raise NotFoundError(f"No record with key {key!r}")
        self._records[key] = record.clone()

    async def query(self, predicate: Predicate[RecordT] | None = None) -> list[RecordT]:
        """Return copies of matching records in insertion order."""
        copies = [record.clone() for record in self._records.values()]
        if predicate is None:
            return copies
        return [record for record in copies if predicate(record)]

    async def find_by_key(self, key: KeyT) -> RecordT | None:
        """Get a copy of the record with the given key."""
        record = self._records.get(key)
        return record.clone() if record is not None else None
