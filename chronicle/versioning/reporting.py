"""Version listing, comparison and summaries over a record's history."""

from typing import Any

from chronicle.db.errors import NotFoundError
from chronicle.versioning.models.history import HistoryEntry
from chronicle.versioning.models.record import VersionedRecord
from chronicle.versioning.models.reporting import VersionDiff, VersionInfo

ABSENT_VALUE = "(none)"


def _require_entry(record: VersionedRecord[Any], version: int) -> HistoryEntry:
    entry = record.get_entry(version)
    if entry is None:
        raise NotFoundError(
            f"Version {version} of {type(record).__name__} {record.id!r} not found"
        )
    return entry


def list_versions(record: VersionedRecord[Any]) -> list[VersionInfo]:
    """All versions of the record, newest first."""
    return [
        VersionInfo(
            version_number=entry.version_number,
            changed_at=entry.changed_at,
            changed_by=entry.changed_by,
            change_kind=entry.change_kind,
            changed_fields=entry.changed_fields,
        )
        for entry in sorted(record.history, key=lambda e: e.version_number, reverse=True)
    ]


def compare_versions(
    record: VersionedRecord[Any],
    version_a: int,
    version_b: int,
) -> VersionDiff:
    """Compare two versions; field diffs are those recorded at version B.

    Raises:
        NotFoundError: If either version is absent from the history.
    """
    entry_a = _require_entry(record, version_a)
    entry_b = _require_entry(record, version_b)
    return VersionDiff(
        version_a=version_a,
        version_b=version_b,
        date_a=entry_a.changed_at,
        date_b=entry_b.changed_at,
        changed_by=entry_b.changed_by,
        change_kind=entry_b.change_kind,
        field_diffs=list(entry_b.field_changes),
    )


def summarize_version(record: VersionedRecord[Any], version: int) -> str:
    """Render one version as text.

    Example:
        Version 2 - Updated on 2025-01-01T10:00:00+00:00 by alice
          - name: "Initial" → "Updated"

    Raises:
        NotFoundError: If the version is absent from the history.
    """
    entry = _require_entry(record, version)
    lines = [
        f"Version {version} - {entry.change_kind.value} on "
        f"{entry.changed_at.isoformat()} by {entry.changed_by}"
    ]
    for change in entry.field_changes:
        old = change.old_value if change.old_value is not None else ABSENT_VALUE
        new = change.new_value if change.new_value is not None else ABSENT_VALUE
        lines.append(f"  - {change.field_name}: {old} → {new}")
    return "\n".join(lines)
