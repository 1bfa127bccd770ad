"""ActivityLogStore abstract interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from chronicle.activity.models import ActivityLog


class ActivityLogStore(ABC):
    """Abstract interface for activity log storage.

    Entries are append-only and always read within one tenant.
    """

    @abstractmethod
    async def save(self, entry: ActivityLog) -> UUID:
        """Save an activity log entry."""
        pass

    @abstractmethod
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
        """List a tenant's entries, most recent first, with optional filters."""
        pass
