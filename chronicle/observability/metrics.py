"""Prometheus metrics for Chronicle.

Counts history growth, skipped no-op updates, reconstructions and codec
failures.
"""

from prometheus_client import Counter

HISTORY_ENTRIES = Counter(
    "chronicle_history_entries_total",
    "Total number of history entries appended",
    labelnames=["record_type", "change_kind"],
)

UPDATES_SKIPPED = Counter(
    "chronicle_update_skipped_total",
    "Updates that changed no domain field and appended no entry",
    labelnames=["record_type"],
)

RECONSTRUCTIONS = Counter(
    "chronicle_reconstructions_total",
    "Point-in-time reconstructions by outcome",
    labelnames=["record_type", "outcome"],
)

SERIALIZATION_ERRORS = Counter(
    "chronicle_serialization_errors_total",
    "Values that failed to encode or decode",
    labelnames=["direction"],
)
