"""Change detection between two snapshots of the same record type."""

from typing import Any

from chronicle.db.errors import InvariantViolation
from chronicle.versioning.models.record import VersionedRecord


def detect_changes(
    original: VersionedRecord[Any],
    modified: VersionedRecord[Any],
) -> dict[str, tuple[Any, Any]]:
    """Compare the domain fields of two snapshots.

    A field is changed when its values differ by value equality. Identity,
    audit stamps, history and the type's untracked fields are ignored.

    Args:
        original: Snapshot before the change
        modified: Snapshot after the change

    Returns:
        Field name -> (old value, new value), in field declaration order.

    Raises:
        InvariantViolation: If the snapshots are of different record types.
    """
    if type(original) is not type(modified):
        raise InvariantViolation(
            f"Cannot compare {type(original).__name__} with {type(modified).__name__}"
        )

    before = original.snapshot()
    after = modified.snapshot()
    return {
        name: (before[name], after[name])
        for name in before
        if before[name] != after[name]
    }
