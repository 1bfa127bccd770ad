"""Audit repository: the mutation and query gateway for versioned records.

Every create, update and soft delete goes through AuditRepository, which
stamps audit metadata, detects field changes, appends exactly one history
entry and hands the full record to the RecordGateway for storage.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from chronicle.activity.service import ActivityLogService
from chronicle.db.errors import InvariantViolation, NotFoundError
from chronicle.observability.logging import get_logger
from chronicle.observability.metrics import HISTORY_ENTRIES, UPDATES_SKIPPED
from chronicle.versioning.codec import encode
from chronicle.versioning.detector import detect_changes
from chronicle.versioning.gateway import Predicate, RecordGateway
from chronicle.versioning.models.history import ChangeKind, HistoryEntry, utc_now
from chronicle.versioning.models.record import VersionedRecord
from chronicle.versioning.models.reporting import VersionDiff, VersionInfo
from chronicle.versioning.reconstruction import reconstruct_version
from chronicle.versioning.reporting import (
    compare_versions,
    list_versions,
    summarize_version,
)

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=VersionedRecord[Any])
KeyT = TypeVar("KeyT")


class AuditRepository(Generic[RecordT, KeyT]):
    """Versioning data-access layer over a RecordGateway.

    The actor (and, for the activity log, the tenant) is passed explicitly
    on every mutating call. Concurrent updates of the same record are not
    isolated from each other; the gateway's last write wins.

    Usage:
        repo = AuditRepository(InMemoryRecordGateway(), Product)
        await repo.create(product, "alice")
        product.price = Decimal("9.99")
        await repo.update(product, "bob")
        history = await repo.get_history(product.id)
    """

    def __init__(
        self,
        gateway: RecordGateway[RecordT, KeyT],
        record_type: type[RecordT],
        *,
        activity_log: ActivityLogService | None = None,
        clock: Callable[[], datetime] = utc_now,
        record_empty_updates: bool = False,
    ) -> None:
        """Initialize the repository.

        Args:
            gateway: Storage for records and their history
            record_type: Record model class managed by this repository
            activity_log: Mirror mutations into this tenant activity log
            clock: Source of audit timestamps
            record_empty_updates: Append an Updated entry even when no
                domain field changed
        """
        self._gateway = gateway
        self._record_type = record_type
        self._activity_log = activity_log
        self._clock = clock
        self._record_empty_updates = record_empty_updates

    @property
    def record_type(self) -> type[RecordT]:
        return self._record_type

    # Mutations
    async def create(
        self,
        record: RecordT,
        actor: str,
        *,
        tenant_id: UUID | None = None,
    ) -> HistoryEntry:
        """Stamp, seed the history with version 1 and store a new record.

        Raises:
            InvariantViolation: If the record already carries history.
            ConflictError: If the key is already stored.
        """
        if record.history:
            raise InvariantViolation(
                f"{self._type_name} {record.id!r} already has history; use update()"
            )

        now = self._now()
        staged = record.clone()
        staged.created_by = actor
        staged.created_at = now
        entry = staged.append_entry(actor, ChangeKind.CREATED, changed_at=now)
        await self._gateway.add(staged)

        record.created_by = actor
        record.created_at = now
        record.history = list(staged.history)

        self._record_entry(record, entry)
        await self._log_activity(
            tenant_id, actor, entry, record, new_values=encode(record.snapshot())
        )
        return entry

    async def update(
        self,
        record: RecordT,
        actor: str,
        *,
        tenant_id: UUID | None = None,
    ) -> HistoryEntry | None:
        """Diff against the stored snapshot, append an Updated entry, store.

        Creation stamps and history are taken from the stored record, so a
        stale copy cannot rewrite them. When no domain field changed and
        empty updates are not recorded, nothing is written.

        Returns:
            The appended entry, or None for a skipped no-op update.

        Raises:
            NotFoundError: If the record is not stored or is soft-deleted.
        """
        original = await self._load_live(record.id)
        changes = detect_changes(original, record)

        if not changes and not self._record_empty_updates:
            UPDATES_SKIPPED.labels(record_type=self._type_name).inc()
            logger.info(
                "record_update_skipped",
                record_type=self._type_name,
                record_id=str(record.id),
                actor=actor,
            )
            return None

        now = self._now()
        staged = record.clone()
        staged.created_by = original.created_by
        staged.created_at = original.created_at
        staged.history = list(original.history)
        staged.modified_by = actor
        staged.modified_at = now
        entry = staged.append_entry(actor, ChangeKind.UPDATED, changes, changed_at=now)
        await self._gateway.replace_by_key(record.id, staged)

        record.created_by = staged.created_by
        record.created_at = staged.created_at
        record.modified_by = actor
        record.modified_at = now
        record.history = list(staged.history)

        self._record_entry(record, entry)
        await self._log_activity(
            tenant_id,
            actor,
            entry,
            record,
            old_values=encode({name: old for name, (old, _) in changes.items()}),
            new_values=encode({name: new for name, (_, new) in changes.items()}),
        )
        return entry

    async def delete(
        self,
        record: RecordT,
        actor: str,
        *,
        tenant_id: UUID | None = None,
    ) -> HistoryEntry:
        """Soft-delete: stamp deletion, append a terminal Deleted entry, store.

        The stored snapshot is what gets marked deleted; unsaved domain edits
        on ``record`` are not written. ``record`` receives the new stamps and
        history.

        Raises:
            NotFoundError: If the record is not stored or already deleted.
        """
        stored = await self._load_live(record.id)

        now = self._now()
        stored.is_deleted = True
        stored.deleted_by = actor
        stored.deleted_at = now
        entry = stored.append_entry(actor, ChangeKind.DELETED, changed_at=now)
        await self._gateway.replace_by_key(stored.id, stored)

        record.created_by = stored.created_by
        record.created_at = stored.created_at
        record.modified_by = stored.modified_by
        record.modified_at = stored.modified_at
        record.is_deleted = True
        record.deleted_by = actor
        record.deleted_at = now
        record.history = list(stored.history)

        self._record_entry(stored, entry)
        await self._log_activity(
            tenant_id, actor, entry, stored, old_values=encode(stored.snapshot())
        )
        return entry

    # Queries
    async def query(
        self,
        predicate: Predicate[RecordT] | None = None,
        *,
        include_deleted: bool = False,
    ) -> list[RecordT]:
        """Records matching the predicate; soft-deleted ones only on request."""

        def matches(record: RecordT) -> bool:
            if record.is_deleted and not include_deleted:
                return False
            return predicate is None or predicate(record)

        return await self._gateway.query(matches)

    async def find_one(
        self,
        predicate: Predicate[RecordT],
        *,
        include_deleted: bool = False,
    ) -> RecordT | None:
        """First record matching the predicate, or None."""
        results = await self.query(predicate, include_deleted=include_deleted)
        return results[0] if results else None

    async def get(self, record_id: KeyT, *, include_deleted: bool = False) -> RecordT | None:
        """Record by key, or None (soft-deleted ones only on request)."""
        record = await self._gateway.find_by_key(record_id)
        if record is None or (record.is_deleted and not include_deleted):
            return None
        return record

    async def get_history(self, record_id: KeyT) -> list[HistoryEntry]:
        """History of a record, most recent first; empty if it does not exist."""
        record = await self._gateway.find_by_key(record_id)
        if record is None:
            return []
        return sorted(record.history, key=lambda e: e.version_number, reverse=True)

    async def get_version_at(self, record_id: KeyT, point_in_time: datetime) -> RecordT | None:
        """Record as it was at ``point_in_time``; None if it does not exist.

        Raises:
            NotFoundError: If the record has no version at or before that time.
        """
        record = await self._gateway.find_by_key(record_id)
        if record is None:
            return None
        return reconstruct_version(record, point_in_time)

    async def list_versions(self, record_id: KeyT) -> list[VersionInfo]:
        """Version listing of a stored record, newest first."""
        return list_versions(await self._load(record_id))

    async def compare_versions(
        self, record_id: KeyT, version_a: int, version_b: int
    ) -> VersionDiff:
        """Compare two versions of a stored record."""
        return compare_versions(await self._load(record_id), version_a, version_b)

    async def summarize_version(self, record_id: KeyT, version: int) -> str:
        """Text summary of one version of a stored record."""
        return summarize_version(await self._load(record_id), version)

    # Helpers
    @property
    def _type_name(self) -> str:
        return self._record_type.__name__

    def _now(self) -> datetime:
        now = self._clock()
        return now if now.tzinfo is not None else now.replace(tzinfo=UTC)

    async def _load(self, record_id: KeyT) -> RecordT:
        record = await self._gateway.find_by_key(record_id)
        if record is None:
            raise NotFoundError(f"{self._type_name} {record_id!r} not found")
        return record

    async def _load_live(self, record_id: KeyT) -> RecordT:
        record = await self._load(record_id)
        if record.is_deleted:
            raise NotFoundError(f"{self._type_name} {record_id!r} is deleted")
        return record

    def _record_entry(self, record: RecordT, entry: HistoryEntry) -> None:
        HISTORY_ENTRIES.labels(
            record_type=self._type_name, change_kind=entry.change_kind.value
        ).inc()
        logger.info(
            f"record_{entry.change_kind.value.lower()}",
            record_type=self._type_name,
            record_id=str(record.id),
            actor=entry.changed_by,
            version=entry.version_number,
            changed_fields=entry.changed_fields,
        )

    async def _log_activity(
        self,
        tenant_id: UUID | None,
        actor: str,
        entry: HistoryEntry,
        record: RecordT,
        *,
        old_values: str | None = None,
        new_values: str | None = None,
    ) -> None:
        if self._activity_log is None or tenant_id is None:
            return
        await self._activity_log.log_activity(
            tenant_id,
            actor,
            f"{entry.change_kind.value} {self._type_name}",
            entity_type=self._type_name,
            entity_id=str(record.id),
            old_values=old_values,
            new_values=new_values,
        )
