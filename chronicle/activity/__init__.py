"""Activity log: tenant-scoped record of who did what.

Complements the per-record history with a flat, queryable trail that
spans record types.
"""

from chronicle.activity.models import ActivityLog
from chronicle.activity.service import ActivityLogService
from chronicle.activity.store import ActivityLogStore

__all__ = [
    "ActivityLog",
    "ActivityLogService",
    "ActivityLogStore",
]
