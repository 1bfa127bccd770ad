"""PostgreSQL implementation of RecordGateway.

Uses asyncpg for async database access. Record documents live in
``versioned_records`` as JSONB; history entries are an append-only log in
``record_history`` keyed by (record_type, record_id, version_number) and
are re-attached to the record when it is loaded.
"""

from typing import Any, Generic, TypeVar

import asyncpg

from chronicle.db.errors import ConflictError, InvariantViolation, NotFoundError
from chronicle.db.pool import PostgresPool
from chronicle.observability.logging import get_logger
from chronicle.versioning.codec import encode
from chronicle.versioning.gateway import Predicate, RecordGateway
from chronicle.versioning.models.history import ChangeKind, FieldChange, HistoryEntry
from chronicle.versioning.models.record import VersionedRecord

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=VersionedRecord[Any])
KeyT = TypeVar("KeyT")

_HISTORY_COLUMNS = """
    id, record_id, version_number, changed_at, changed_by,
    change_kind, summary, field_changes
"""


class PostgresRecordGateway(RecordGateway[RecordT, KeyT], Generic[RecordT, KeyT]):
    """PostgreSQL implementation of RecordGateway.

    The record row and any history entries not yet stored are written in
    one transaction. Query predicates are Python callables, so they are
    evaluated after loading the record type's rows.
    """

    def __init__(
        self,
        pool: PostgresPool,
        record_type: type[RecordT],
        record_kind: str | None = None,
    ) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
            record_type: Model class used to rebuild stored records
            record_kind: Discriminator stored in record_type columns
                (defaults to the class name)
        """
        self._pool = pool
        self._record_type = record_type
        self._kind = record_kind or record_type.__name__

    @staticmethod
    def _key(key: Any) -> str:
        encoded = encode(key)
        if encoded is None:
            raise InvariantViolation("Record key must not be None")
        return encoded

    async def add(self, record: RecordT) -> KeyT:
        """Insert the record row and its history."""
        record_id = self._key(record.id)
        async with self._pool.transaction() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO versioned_records (record_type, record_id, data, is_deleted)
                    VALUES ($1, $2, $3::jsonb, $4)
                    """,
                    self._kind,
                    record_id,
                    record.model_dump(mode="json", exclude={"history"}),
                    record.is_deleted,
                )
            except asyncpg.UniqueViolationError as e:
                raise ConflictError(
                    f"{self._kind} {record.id!r} already exists", cause=e
                ) from e
            await self._append_history(conn, record_id, record.history)
        logger.debug("record_row_inserted", record_type=self._kind, record_id=record_id)
        return record.id

    async def replace_by_key(self, key: KeyT, record: RecordT) -> None:
        """Update the record row and append history entries not yet stored."""
        record_id = self._key(key)
        async with self._pool.transaction() as conn:
            status = await conn.execute(
                """
                UPDATE versioned_records
                SET data = $3::jsonb, is_deleted = $4, updated_at = NOW()
                WHERE record_type = $1 AND record_id = $2
                """,
                self._kind,
                record_id,
                record.model_dump(mode="json", exclude={"history"}),
                record.is_deleted,
            )
            if status.endswith(" 0"):
                raise NotFoundError(f"No {self._kind} with key {key!r}")

            stored = await conn.fetchval(
                """
                SELECT COALESCE(MAX(version_number), 0) FROM record_history
                WHERE record_type = $1 AND record_id = $2
                """,
                self._kind,
                record_id,
            )
            pending = [e for e in record.history if e.version_number > stored]
            await self._append_history(conn, record_id, pending)
        logger.debug(
            "record_row_replaced",
            record_type=self._kind,
            record_id=record_id,
            appended=len(pending),
        )

    async def query(self, predicate: Predicate[RecordT] | None = None) -> list[RecordT]:
        """Load every record of this type and filter with the predicate."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT record_id, data FROM versioned_records
                WHERE record_type = $1
                ORDER BY created_at ASC
                """,
                self._kind,
            )
            history_rows = await conn.fetch(
                f"""
                SELECT {_HISTORY_COLUMNS} FROM record_history
                WHERE record_type = $1
                ORDER BY record_id, version_number ASC
                """,
                self._kind,
            )

        history: dict[str, list[HistoryEntry]] = {}
        for row in history_rows:
            history.setdefault(row["record_id"], []).append(self._row_to_entry(row))

        records = [
            self._row_to_record(row, history.get(row["record_id"], []))
            for row in rows
        ]
        if predicate is None:
            return records
        return [record for record in records if predicate(record)]

    async def find_by_key(self, key: KeyT) -> RecordT | None:
        """Load one record with its history."""
        record_id = self._key(key)
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT record_id, data FROM versioned_records
                WHERE record_type = $1 AND record_id = $2
                """,
                self._kind,
                record_id,
            )
            if row is None:
                return None
            history_rows = await conn.fetch(
                f"""
                SELECT {_HISTORY_COLUMNS} FROM record_history
                WHERE record_type = $1 AND record_id = $2
                ORDER BY version_number ASC
                """,
                self._kind,
                record_id,
            )
        return self._row_to_record(row, [self._row_to_entry(r) for r in history_rows])

    async def _append_history(
        self,
        conn: asyncpg.Connection,
        record_id: str,
        entries: list[HistoryEntry],
    ) -> None:
        if not entries:
            return
        await conn.executemany(
            """
            INSERT INTO record_history (
                id, record_type, record_id, version_number, changed_at,
                changed_by, change_kind, summary, field_changes
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9::jsonb)
            ON CONFLICT (record_type, record_id, version_number) DO NOTHING
            """,
            [
                (
                    entry.id,
                    self._kind,
                    record_id,
                    entry.version_number,
                    entry.changed_at,
                    entry.changed_by,
                    entry.change_kind.value,
                    entry.summary,
                    [change.model_dump() for change in entry.field_changes],
                )
                for entry in entries
            ],
        )

    def _row_to_record(self, row: Any, history: list[HistoryEntry]) -> RecordT:
        return self._record_type.model_validate({**row["data"], "history": history})

    @staticmethod
    def _row_to_entry(row: Any) -> HistoryEntry:
        return HistoryEntry(
            id=row["id"],
            changed_at=row["changed_at"],
            changed_by=row["changed_by"],
            change_kind=ChangeKind(row["change_kind"]),
            version_number=row["version_number"],
            summary=row["summary"],
            field_changes=[FieldChange(**change) for change in row["field_changes"]],
        )
