"""Record gateways backing the audit repository."""

from chronicle.versioning.gateway import RecordGateway
from chronicle.versioning.stores.inmemory import InMemoryRecordGateway
from chronicle.versioning.stores.postgres import PostgresRecordGateway

__all__ = [
    "RecordGateway",
    "InMemoryRecordGateway",
    "PostgresRecordGateway",
]
