"""Read-only views produced by the reporting utilities."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from chronicle.versioning.models.history import ChangeKind, FieldChange


class VersionInfo(BaseModel):
    """One line of a record's version listing."""

    model_config = ConfigDict(frozen=True)

    version_number: int = Field(..., description="Version number")
    changed_at: datetime = Field(..., description="When the version was recorded")
    changed_by: str = Field(..., description="Actor that made the change")
    change_kind: ChangeKind = Field(..., description="Kind of change")
    changed_fields: list[str] = Field(
        default_factory=list, description="Domain fields changed in this version"
    )


class VersionDiff(BaseModel):
    """Comparison of two versions of a record.

    Field diffs are the changes recorded at ``version_b``.
    """

    model_config = ConfigDict(frozen=True)

    version_a: int = Field(..., description="Base version")
    version_b: int = Field(..., description="Compared version")
    date_a: datetime = Field(..., description="Timestamp of version A")
    date_b: datetime = Field(..., description="Timestamp of version B")
    changed_by: str = Field(..., description="Actor of version B")
    change_kind: ChangeKind = Field(..., description="Kind of change of version B")
    field_diffs: list[FieldChange] = Field(
        default_factory=list, description="Field changes recorded at version B"
    )
