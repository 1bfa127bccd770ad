"""ActivityLog model for the activity domain."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class ActivityLog(BaseModel):
    """One user activity, scoped to a tenant.

    Immutable once written. Old/new values are canonical JSON objects of
    the changed fields when the activity comes from a record mutation.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    tenant_id: UUID = Field(..., description="Owning tenant")
    user_id: str = Field(..., description="Acting user")
    activity: str = Field(..., description="What happened")
    entity_type: str | None = Field(default=None, description="Affected record type")
    entity_id: str | None = Field(default=None, description="Affected record key")
    old_values: str | None = Field(default=None, description="Encoded values before")
    new_values: str | None = Field(default=None, description="Encoded values after")
    timestamp: datetime = Field(default_factory=utc_now, description="Activity time")
