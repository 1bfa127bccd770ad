"""Activity log stores."""

from chronicle.activity.store import ActivityLogStore
from chronicle.activity.stores.inmemory import InMemoryActivityLogStore
from chronicle.activity.stores.postgres import PostgresActivityLogStore

__all__ = [
    "ActivityLogStore",
    "InMemoryActivityLogStore",
    "PostgresActivityLogStore",
]
