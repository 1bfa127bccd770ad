"""In-memory implementation of ActivityLogStore."""

from datetime import datetime
from uuid import UUID

from chronicle.activity.models import ActivityLog
from chronicle.activity.store import ActivityLogStore


class InMemoryActivityLogStore(ActivityLogStore):
    """In-memory implementation of ActivityLogStore for testing and development.

    Uses simple dict storage with linear scan for queries.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._entries: dict[UUID, ActivityLog] = {}

    async def save(self, entry: ActivityLog) -> UUID:
        """Save an activity log entry."""
        self._entries[entry.id] = entry
        return entry.id

    async def list_logs(
        self,
        tenant_id: UUID,
        *,
        user_id: str | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        skip: int = 0,
        take: int = 50,
    ) -> list[ActivityLog]:
        """List a tenant's entries, most recent first."""
        results = []
        for entry in self._entries.values():
            if entry.tenant_id != tenant_id:
                continue
            if user_id and entry.user_id != user_id:
                continue
            if entity_type and entry.entity_type != entity_type:
                continue
            if entity_id and entry.entity_id != entity_id:
                continue
            if start_time is not None and entry.timestamp < start_time:
                continue
            if end_time is not None and entry.timestamp > end_time:
                continue
            results.append(entry)
        # Sort by timestamp descending (most recent first)
        results.sort(key=lambda x: x.timestamp, reverse=True)
        return results[skip:skip + take]
