"""Structured logging settings for audit events."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "console"]


class LoggingConfig(BaseModel):
    """How audit and store events are rendered."""

    level: LogLevel = Field(default="INFO", description="Minimum level emitted")
    format: LogFormat = Field(default="json", description="json or console rendering")
    redact_pii: bool = Field(
        default=True,
        description="Mask sensitive keys and PII patterns in log events",
    )
    redacted_keys: list[str] = Field(
        default_factory=list,
        description="Event keys masked in addition to the built-in sensitive keys",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept level names in any case, e.g. ``debug`` from the environment."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("redacted_keys")
    @classmethod
    def lowercase_keys(cls, v: list[str]) -> list[str]:
        return [key.lower() for key in v]


class ObservabilityConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
