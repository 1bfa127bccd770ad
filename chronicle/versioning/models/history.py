"""History entry models for versioned records."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chronicle.versioning.codec import decode

T = TypeVar("T")


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class ChangeKind(str, Enum):
    """Kind of change a history entry records."""

    CREATED = "Created"
    UPDATED = "Updated"
    DELETED = "Deleted"


class FieldChange(BaseModel):
    """Old and new encoded value of one domain field within an entry."""

    model_config = ConfigDict(frozen=True)

    field_name: str = Field(..., description="Domain field name")
    old_value: str | None = Field(default=None, description="Encoded value before the change")
    new_value: str | None = Field(default=None, description="Encoded value after the change")

    def decode_old(self, type_: type[T] | Any) -> T | None:
        """Decode the old value as ``type_``."""
        return decode(self.old_value, type_)

    def decode_new(self, type_: type[T] | Any) -> T | None:
        """Decode the new value as ``type_``."""
        return decode(self.new_value, type_)


class HistoryEntry(BaseModel):
    """One recorded change event of a versioned record.

    Entries are immutable once appended. Version numbers start at 1 with
    the Created entry and grow by one per entry.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Entry identifier")
    changed_at: datetime = Field(default_factory=utc_now, description="When the change happened")
    changed_by: str = Field(..., description="Actor that made the change")
    change_kind: ChangeKind = Field(..., description="Created, Updated or Deleted")
    version_number: int = Field(..., gt=0, description="Per-record version, 1-based")
    summary: str | None = Field(default=None, description="Human-readable change summary")
    field_changes: list[FieldChange] = Field(
        default_factory=list, description="Changed domain fields, in declaration order"
    )

    @field_validator("changed_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken as UTC."""
        return v.replace(tzinfo=UTC) if v.tzinfo is None else v

    @property
    def changed_fields(self) -> list[str]:
        """Names of the fields changed by this entry."""
        return [change.field_name for change in self.field_changes]

    def get_change(self, field_name: str) -> FieldChange | None:
        """Return the change recorded for ``field_name``, if any."""
        for change in self.field_changes:
            if change.field_name == field_name:
                return change
        return None
