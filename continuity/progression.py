"""
continuity/progression.py -- Single-character progression check.

A narrower flow than the full consistency report: the character screen
only needs to know whether one character's levels make sense from book to
book.  The detection rules are the character evaluator's own, so the two
never disagree.
"""

from __future__ import annotations

import logging

from continuity.checks.character import (
    JUMP_SUGGESTION,
    REGRESSION_SUGGESTION,
    find_level_jumps,
    find_level_regressions,
    level_progression,
)
from continuity.models.report import LevelPoint, ProgressionValidation
from continuity.models.validators import load_snapshot
from continuity.utils import unique

logger = logging.getLogger(__name__)

CHARACTER_NOT_FOUND = "Character not found in series"


def validate_character_progression(snapshot, character_id: str) -> ProgressionValidation:
    """Validate the level progression of one character across the series.

    Parameters
    ----------
    snapshot : Series or dict
        The read-only series aggregate.
    character_id : str
        ``characterId`` of the shared character to inspect.

    Returns
    -------
    ProgressionValidation
        ``valid`` is True when no regression or oversized jump is found.

    Raises
    ------
    TypeError
        If *character_id* is not a string.
    InvalidSnapshotError
        If the snapshot is structurally invalid.
    """
    if not isinstance(character_id, str):
        raise TypeError(
            f"character_id must be a string, got {type(character_id).__name__}"
        )

    series = load_snapshot(snapshot)
    shared = series.find_character(character_id)
    if shared is None:
        logger.info("Character %s not found in series %s", character_id, series.id)
        return ProgressionValidation(valid=False, issues=(CHARACTER_NOT_FOUND,))

    progression = level_progression(shared)
    issues: list[str] = []
    suggestions: list[str] = []

    for prev_book, book, _, _ in find_level_regressions(progression):
        issues.append(f"Level decreases from book {prev_book} to {book}")
        suggestions.append(REGRESSION_SUGGESTION)

    for prev_book, book, gain in find_level_jumps(progression):
        issues.append(f"Large level jump (+{gain}) between books {prev_book} and {book}")
        suggestions.append(JUMP_SUGGESTION)

    return ProgressionValidation(
        valid=not issues,
        issues=tuple(issues),
        suggestions=tuple(unique(suggestions)),
        level_progression=tuple(
            LevelPoint(book_number=book, level=level) for book, level in progression
        ),
    )
