"""Service for writing and reading tenant activity logs."""

from datetime import datetime
from uuid import UUID

from chronicle.activity.models import ActivityLog
from chronicle.activity.store import ActivityLogStore
from chronicle.observability.logging import get_logger

logger = get_logger(__name__)


class ActivityLogService:
    """Records user activities and answers filtered, paged queries.

    The tenant is always passed in explicitly; the service keeps no
    ambient tenant state.
    """

    def __init__(self, store: ActivityLogStore, page_size: int = 50) -> None:
        self._store = store
        self._page_size = page_size

    async def log_activity(
        self,
        tenant_id: UUID,
        user_id: str,
        activity: str,
        *,
        entity_type: str | None = None,
        entity_id: str | None = None,
        old_values: str | None = None,
        new_values: str | None = None,
    ) -> ActivityLog:
        """Append one activity entry and return it."""
        entry = ActivityLog(
            tenant_id=tenant_id,
            user_id=user_id,
            activity=activity,
            entity_type=entity_type,
            entity_id=entity_id,
            old_values=old_values,
            new_values=new_values,
        )
        await self._store.save(entry)
        logger.info(
            "activity_logged",
            tenant_id=str(tenant_id),
            activity=activity,
            entity_type=entity_type,
            entity_id=entity_id,
        )
        return entry

    async def get_activity_logs(
        self,
        tenant_id: UUID,
        *,
        user_id: str | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        skip: int = 0,
        take: int | None = None,
    ) -> list[ActivityLog]:
        """Return a page of the tenant's activity, most recent first."""
        return await self._store.list_logs(
            tenant_id,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=entity_id,
            start_time=start_time,
            end_time=end_time,
            skip=skip,
            take=take or self._page_size,
        )
