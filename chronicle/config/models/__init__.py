"""Configuration model exports.

    from chronicle.config.models import StorageConfig, VersioningConfig
"""

from chronicle.config.models.observability import LoggingConfig, ObservabilityConfig
from chronicle.config.models.storage import PostgresConfig, StorageConfig
from chronicle.config.models.versioning import VersioningConfig

__all__ = [
    "LoggingConfig",
    "ObservabilityConfig",
    "PostgresConfig",
    "StorageConfig",
    "VersioningConfig",
]
