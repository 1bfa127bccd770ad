"""Build audit repositories from configuration."""

from typing import Any, TypeVar

from chronicle.activity.service import ActivityLogService
from chronicle.activity.store import ActivityLogStore
from chronicle.activity.stores.inmemory import InMemoryActivityLogStore
from chronicle.activity.stores.postgres import PostgresActivityLogStore
from chronicle.config import get_settings
from chronicle.config.settings import Settings
from chronicle.db.pool import PostgresPool
from chronicle.observability.logging import get_logger, setup_logging
from chronicle.versioning.gateway import RecordGateway
from chronicle.versioning.models.record import VersionedRecord
from chronicle.versioning.repository import AuditRepository
from chronicle.versioning.stores.inmemory import InMemoryRecordGateway
from chronicle.versioning.stores.postgres import PostgresRecordGateway

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=VersionedRecord[Any])


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the observability.logging settings to structlog."""
    logging_config = (settings or get_settings()).observability.logging
    setup_logging(
        level=logging_config.level,
        format=logging_config.format,
        redact_pii=logging_config.redact_pii,
        redacted_keys=logging_config.redacted_keys,
    )


def create_pool(settings: Settings) -> PostgresPool:
    """Create (but do not connect) a pool from the postgres settings."""
    return PostgresPool(settings.storage.postgres)


def build_repository(
    record_type: type[RecordT],
    settings: Settings | None = None,
    pool: PostgresPool | None = None,
    activity_store: ActivityLogStore | None = None,
) -> AuditRepository[RecordT, Any]:
    """Wire an AuditRepository for ``record_type`` from settings.

    Args:
        record_type: Record model class
        settings: Settings to use (defaults to get_settings())
        pool: Shared pool for the postgres backend; created when omitted
        activity_store: Activity store to share across repositories; one
            matching the backend is created when the activity log is enabled
    """
    settings = settings or get_settings()
    backend = settings.storage.backend

    gateway: RecordGateway[RecordT, Any]
    if backend == "postgres":
        pool = pool or create_pool(settings)
        gateway = PostgresRecordGateway(pool, record_type)
    else:
        gateway = InMemoryRecordGateway()

    activity_log = None
    if settings.versioning.activity_log_enabled:
        if activity_store is None:
            activity_store = (
                PostgresActivityLogStore(pool)
                if backend == "postgres" and pool is not None
                else InMemoryActivityLogStore()
            )
        activity_log = ActivityLogService(
            activity_store, page_size=settings.versioning.activity_page_size
        )

    logger.info(
        "audit_repository_built",
        record_type=record_type.__name__,
        backend=backend,
        activity_log=activity_log is not None,
    )
    return AuditRepository(
        gateway,
        record_type,
        activity_log=activity_log,
        record_empty_updates=settings.versioning.record_empty_updates,
    )
