"""PostgreSQL implementation of ActivityLogStore.

Uses asyncpg for async database access.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from chronicle.activity.models import ActivityLog
from chronicle.activity.store import ActivityLogStore
from chronicle.db.pool import PostgresPool
from chronicle.observability.logging import get_logger

logger = get_logger(__name__)


class PostgresActivityLogStore(ActivityLogStore):
    """PostgreSQL implementation of ActivityLogStore.

    Rows are never updated once written.
    """

    def __init__(self, pool: PostgresPool) -> None:
        self._pool = pool

    async def save(self, entry: ActivityLog) -> UUID:
        """Save an activity log entry."""
        async with self._pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO activity_logs (
                    id, tenant_id, user_id, activity, entity_type,
                    entity_id, old_values, new_values, timestamp
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                """,
                entry.id,
                entry.tenant_id,
                entry.user_id,
                entry.activity,
                entry.entity_type,
                entry.entity_id,
                entry.old_values,
                entry.new_values,
                entry.timestamp,
            )
        logger.debug("activity_log_saved", activity_id=str(entry.id))
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
        conditions = ["tenant_id = $1"]
        params: list[Any] = [tenant_id]

        for column, value, op in (
            ("user_id", user_id, "="),
            ("entity_type", entity_type, "="),
            ("entity_id", entity_id, "="),
            ("timestamp", start_time, ">="),
            ("timestamp", end_time, "<="),
        ):
            if value is None or value == "":
                continue
            params.append(value)
            conditions.append(f"{column} {op} ${len(params)}")

        params.extend([take, skip])
        query = f"""
            SELECT id, tenant_id, user_id, activity, entity_type,
                   entity_id, old_values, new_values, timestamp
            FROM activity_logs
            WHERE {" AND ".join(conditions)}
            ORDER BY timestamp DESC
            LIMIT ${len(params) - 1} OFFSET ${len(params)}
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, *params)
        return [ActivityLog(**dict(row)) for row in rows]
