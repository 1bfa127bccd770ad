"""Point-in-time reconstruction of versioned records.

A field's value at time T is the new value of the latest entry at or
before T that changed it. When no such entry exists the field still held
its creation value, which is the old value of the first later entry that
changed it, or the current value when nothing ever changed it.
"""

from datetime import UTC, datetime
from typing import Any, TypeVar

from chronicle.db.errors import NotFoundError
from chronicle.observability.logging import get_logger
from chronicle.observability.metrics import RECONSTRUCTIONS
from chronicle.versioning.codec import decode
from chronicle.versioning.models.history import ChangeKind, HistoryEntry
from chronicle.versioning.models.record import VersionedRecord

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=VersionedRecord[Any])


def _chronological(entries: list[HistoryEntry]) -> list[HistoryEntry]:
    return sorted(entries, key=lambda e: (e.changed_at, e.version_number))


def _encoded_value_at(
    field_name: str,
    selected: list[HistoryEntry],
    later: list[HistoryEntry],
) -> tuple[str | None, bool]:
    """Return (encoded value, found) for a field at the cut-off."""
    for entry in reversed(selected):
        change = entry.get_change(field_name)
        if change is not None:
            return change.new_value, True
    for entry in later:
        change = entry.get_change(field_name)
        if change is not None:
            return change.old_value, True
    return None, False


def reconstruct_version(record: RecordT, point_in_time: datetime) -> RecordT:
    """Rebuild the record as it was at ``point_in_time``.

    The live record is left untouched. Naive timestamps are taken as UTC.
    Audit stamps and history are cut back to the selected entries as well.

    Raises:
        NotFoundError: If no history entry exists at or before point_in_time.
        SerializationError: If a stored value cannot be decoded.
    """
    if point_in_time.tzinfo is None:
        point_in_time = point_in_time.replace(tzinfo=UTC)

    record_type = type(record).__name__
    selected = _chronological([e for e in record.history if e.changed_at <= point_in_time])
    if not selected:
        RECONSTRUCTIONS.labels(record_type=record_type, outcome="not_found").inc()
        raise NotFoundError(
            f"No version of {record_type} {record.id!r} exists at or before "
            f"{point_in_time.isoformat()}"
        )
    later = _chronological([e for e in record.history if e.changed_at > point_in_time])

    working = record.clone()
    for name in record.domain_fields():
        encoded, found = _encoded_value_at(name, selected, later)
        if found:
            working.apply_field(name, decode(encoded, record.field_type(name)))

    updates = [e for e in selected if e.change_kind is ChangeKind.UPDATED]
    deletion = next((e for e in selected if e.change_kind is ChangeKind.DELETED), None)
    working.modified_by = updates[-1].changed_by if updates else None
    working.modified_at = updates[-1].changed_at if updates else None
    working.is_deleted = deletion is not None
    working.deleted_by = deletion.changed_by if deletion else None
    working.deleted_at = deletion.changed_at if deletion else None
    working.history = [e for e in working.history if e.changed_at <= point_in_time]

    RECONSTRUCTIONS.labels(record_type=record_type, outcome="ok").inc()
    logger.debug(
        "record_version_reconstructed",
        record_type=record_type,
        record_id=str(record.id),
        version=selected[-1].version_number,
    )
    return working
