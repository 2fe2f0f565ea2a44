"""
continuity -- Cross-book consistency engine for serial fiction.

The engine exposes two operations to the REST and UI layers:

    check_consistency(snapshot)                       -> ConsistencyReport
    validate_character_progression(snapshot, char_id) -> ProgressionValidation

Both take a read-only series snapshot (a ``Series`` model or the plain
dict the persistence layer produces) and never modify it.
"""

from continuity.consistency_checker import check_consistency, format_human_message
from continuity.models.validators import InvalidSnapshotError
from continuity.progression import validate_character_progression

__all__ = [
    "InvalidSnapshotError",
    "check_consistency",
    "format_human_message",
    "validate_character_progression",
]
