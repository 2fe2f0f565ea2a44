"""
continuity/models/ -- Pydantic v2 models for the continuity engine.

Submodules:
    snapshot    Frozen read-only view of one series (input).
    report      Issue, ConsistencyReport, ProgressionValidation (output).
    validators  Structural validation of incoming snapshot dicts.
"""

from continuity.models.report import ConsistencyReport, Issue, LevelPoint, ProgressionValidation
from continuity.models.snapshot import Book, Chapter, Series, SharedCharacter, SharedLocation
from continuity.models.validators import InvalidSnapshotError, load_snapshot

__all__ = [
    "Book",
    "Chapter",
    "ConsistencyReport",
    "InvalidSnapshotError",
    "Issue",
    "LevelPoint",
    "ProgressionValidation",
    "Series",
    "SharedCharacter",
    "SharedLocation",
    "load_snapshot",
]
