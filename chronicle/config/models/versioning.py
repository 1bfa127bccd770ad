"""Versioning behaviour configuration."""

from pydantic import BaseModel, Field


class VersioningConfig(BaseModel):
    """Controls how the audit repository records history."""

    record_empty_updates: bool = Field(
        default=False,
        description=(
            "Append an Updated entry even when no domain field changed. "
            "When false, such updates are skipped entirely."
        ),
    )
    activity_log_enabled: bool = Field(
        default=False,
        description="Mirror every mutation into the tenant activity log",
    )
    activity_page_size: int = Field(
        default=50,
        gt=0,
        le=1000,
        description="Default page size for activity log queries",
    )
