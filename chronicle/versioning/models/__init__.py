"""Versioning domain models.

Contains the pydantic models of the history data model:
- VersionedRecord, the base of every audited record
- HistoryEntry and FieldChange, the append-only change log
- VersionInfo and VersionDiff, produced by the reporting utilities
"""

from chronicle.versioning.models.history import (
    ChangeKind,
    FieldChange,
    HistoryEntry,
    utc_now,
)
from chronicle.versioning.models.record import AUDIT_FIELDS, VersionedRecord
from chronicle.versioning.models.reporting import VersionDiff, VersionInfo

__all__ = [
    "AUDIT_FIELDS",
    "ChangeKind",
    "FieldChange",
    "HistoryEntry",
    "VersionDiff",
    "VersionInfo",
    "VersionedRecord",
    "utc_now",
]
