"""Base model for records whose changes are versioned."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from chronicle.db.errors import InvariantViolation
from chronicle.versioning.codec import encode
from chronicle.versioning.models.history import (
    ChangeKind,
    FieldChange,
    HistoryEntry,
    utc_now,
)

KeyT = TypeVar("KeyT")
RecordT = TypeVar("RecordT", bound="VersionedRecord[Any]")

# Identity, audit stamps and history are never tracked as domain fields
AUDIT_FIELDS: frozenset[str] = frozenset({
    "id",
    "created_by",
    "created_at",
    "modified_by",
    "modified_at",
    "deleted_by",
    "deleted_at",
    "is_deleted",
    "history",
})


class VersionedRecord(BaseModel, Generic[KeyT]):
    """Base for domain records with audit stamps and an append-only history.

    Subclass with the identity type and declare domain fields as ordinary
    model fields:

        class Product(VersionedRecord[int]):
            name: str
            price: Decimal

    Every declared field that is not an audit field is a domain field and
    is tracked in declaration order. List extra names in
    ``untracked_fields`` to leave them out of change detection.
    """

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        extra="ignore",
    )

    untracked_fields: ClassVar[frozenset[str]] = frozenset()

    id: KeyT = Field(..., description="Record identity")
    created_by: str | None = Field(default=None, description="Actor that created the record")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    modified_by: str | None = Field(default=None, description="Actor of the last update")
    modified_at: datetime | None = Field(default=None, description="Last update timestamp")
    deleted_by: str | None = Field(default=None, description="Actor that soft-deleted the record")
    deleted_at: datetime | None = Field(default=None, description="Soft delete timestamp")
    is_deleted: bool = Field(default=False, description="Soft delete flag")
    history: list[HistoryEntry] = Field(
        default_factory=list, description="Change history, oldest first"
    )

    @classmethod
    def domain_fields(cls) -> list[str]:
        """Tracked field names in declaration order."""
        excluded = AUDIT_FIELDS | cls.untracked_fields
        return [name for name in cls.model_fields if name not in excluded]

    @classmethod
    def field_type(cls, name: str) -> Any:
        """Declared type of a domain field, used to decode stored values."""
        if name not in cls.domain_fields():
            raise InvariantViolation(f"{cls.__name__} has no domain field {name!r}")
        return cls.model_fields[name].annotation

    def snapshot(self) -> dict[str, Any]:
        """Ordered mapping of domain field name to current value."""
        return {name: getattr(self, name) for name in self.domain_fields()}

    def apply_field(self, name: str, value: Any) -> None:
        """Assign a domain field, validating against its declared type."""
        if name not in self.domain_fields():
            raise InvariantViolation(f"{type(self).__name__} has no domain field {name!r}")
        setattr(self, name, value)

    def clone(self: RecordT) -> RecordT:
        """Deep copy, independent of this record and its history."""
        return self.model_copy(deep=True)

    @property
    def current_version(self) -> int:
        """Highest version number in the history, 0 when empty."""
        return max((entry.version_number for entry in self.history), default=0)

    def get_entry(self, version_number: int) -> HistoryEntry | None:
        """Return the entry with the given version number, if present."""
        for entry in self.history:
            if entry.version_number == version_number:
                return entry
        return None

    def append_entry(
        self,
        changed_by: str,
        kind: ChangeKind,
        field_changes: Mapping[str, tuple[Any, Any]] | None = None,
        *,
        changed_at: datetime | None = None,
        summary: str | None = None,
    ) -> HistoryEntry:
        """Append a history entry with the next version number.

        Args:
            changed_by: Actor making the change
            kind: Created, Updated or Deleted
            field_changes: Field name -> (old, new) raw values; encoded here
            changed_at: Entry timestamp (defaults to now, UTC)
            summary: Explicit summary; derived from field names when omitted

        Raises:
            InvariantViolation: If the history is not the contiguous sequence
                1..N, a Created entry is not first, the history already ends
                with a Deleted entry, or a change names an audit field.
        """
        self._check_history(kind)

        changes: list[FieldChange] = []
        for name, (old, new) in (field_changes or {}).items():
            if name in AUDIT_FIELDS:
                raise InvariantViolation(f"Audit field {name!r} cannot be recorded as a change")
            changes.append(
                FieldChange(field_name=name, old_value=encode(old), new_value=encode(new))
            )

        if summary is None and changes:
            summary = "Changed fields: " + ", ".join(c.field_name for c in changes)

        entry = HistoryEntry(
            changed_at=changed_at or utc_now(),
            changed_by=changed_by,
            change_kind=kind,
            version_number=self.current_version + 1,
            summary=summary,
            field_changes=changes,
        )
        self.history.append(entry)
        return entry

    def _check_history(self, kind: ChangeKind) -> None:
        versions = [entry.version_number for entry in self.history]
        if versions != list(range(1, len(versions) + 1)):
            raise InvariantViolation(
                f"History of {type(self).__name__} {self.id!r} is not contiguous: {versions}"
            )
        if not self.history and kind is not ChangeKind.CREATED:
            raise InvariantViolation("The first history entry must be a Created entry")
        if self.history and kind is ChangeKind.CREATED:
            raise InvariantViolation("A Created entry can only start the history")
        if self.history and self.history[-1].change_kind is ChangeKind.DELETED:
            raise InvariantViolation(
                f"{type(self).__name__} {self.id!r} is deleted; its history is closed"
            )
