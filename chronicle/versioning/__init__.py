"""Entity audit and versioning.

Records every create, update and soft delete of a VersionedRecord as an
append-only history, and answers history, version and point-in-time
queries over it.

Usage:
    from chronicle.versioning import AuditRepository, InMemoryRecordGateway

    repo = AuditRepository(InMemoryRecordGateway(), Product)
    await repo.create(product, "alice")
"""

from chronicle.versioning.codec import decode, encode
from chronicle.versioning.detector import detect_changes
from chronicle.versioning.gateway import RecordGateway
from chronicle.versioning.models import (
    ChangeKind,
    FieldChange,
    HistoryEntry,
    VersionDiff,
    VersionedRecord,
    VersionInfo,
)
from chronicle.versioning.reconstruction import reconstruct_version
from chronicle.versioning.reporting import (
    compare_versions,
    list_versions,
    summarize_version,
)
from chronicle.versioning.repository import AuditRepository
from chronicle.versioning.stores.inmemory import InMemoryRecordGateway

__all__ = [
    # Codec and detection
    "encode",
    "decode",
    "detect_changes",
    # Models
    "ChangeKind",
    "FieldChange",
    "HistoryEntry",
    "VersionDiff",
    "VersionInfo",
    "VersionedRecord",
    # Repository and storage
    "AuditRepository",
    "RecordGateway",
    "InMemoryRecordGateway",
    # Reconstruction and reporting
    "reconstruct_version",
    "list_versions",
    "compare_versions",
    "summarize_version",
]
