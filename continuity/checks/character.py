"""
continuity/checks/character.py -- Character Evaluator

Finds character-level contradictions across the books of a series:

    - two characters sharing a name
    - ending levels that go down from one book to the next
    - level jumps too large to be believable
    - hit points that do not fit the character's level and constitution
    - a book starting below the level the previous book ended on
    - backstories naming places the world does not define
    - one-sided relationships

The progression helpers (``level_progression``, ``find_level_regressions``,
``find_level_jumps``) are shared with ``continuity.progression``.
"""

from __future__ import annotations

import logging
import math

from continuity.heuristics import extract_location_references
from continuity.models.report import Issue
from continuity.models.snapshot import Series, SharedCharacter
from continuity.utils import group_duplicates, normalize_name

logger = logging.getLogger(__name__)

# Largest level gain between consecutive books that is not flagged.
MAX_LEVEL_JUMP = 20

# Allowed hit-point deviation from the expected value, per character level.
HP_TOLERANCE_PER_LEVEL = 2

BASE_HIT_POINTS = 10

REGRESSION_SUGGESTION = "Ensure character levels only increase or stay the same across books"
JUMP_SUGGESTION = "Consider more gradual level progression between books"


def check_characters(series: Series) -> list[Issue]:
    """Run every character rule against *series* and return the issues found."""
    issues: list[Issue] = []
    issues.extend(_check_duplicate_names(series))

    known_locations = {normalize_name(loc.name) for loc in series.locations}
    for shared in series.characters:
        issues.extend(_check_level_progression(shared))
        issues.extend(_check_arc_continuity(shared))
        issues.extend(_check_hit_points(shared))
        issues.extend(_check_backstory_locations(shared, known_locations))

    issues.extend(_check_reciprocal_relationships(series))

    logger.debug("Character checks on %s produced %d issues", series.id, len(issues))
    return issues


# ------------------------------------------------------------------
# Level progression (shared with the progression validator)
# ------------------------------------------------------------------

def level_progression(shared: SharedCharacter) -> list[tuple[int, int]]:
    """``(book_number, ending_level)`` pairs sorted by book number."""
    arc = sorted(shared.development_arc, key=lambda dev: dev.book_number)
    return [(dev.book_number, dev.ending_level) for dev in arc]


def find_level_regressions(progression):
    """Yield ``(prev_book, book, prev_level, level)`` wherever the level drops."""
    for (prev_book, prev_level), (book, level) in zip(progression, progression[1:]):
        if level < prev_level:
            yield prev_book, book, prev_level, level


def find_level_jumps(progression, threshold=MAX_LEVEL_JUMP):
    """Yield ``(prev_book, book, gain)`` wherever the gain exceeds *threshold*."""
    for (prev_book, prev_level), (book, level) in zip(progression, progression[1:]):
        gain = level - prev_level
        if gain > threshold:
            yield prev_book, book, gain


def _check_level_progression(shared: SharedCharacter) -> list[Issue]:
    issues: list[Issue] = []
    name = shared.name or shared.character_id
    progression = level_progression(shared)

    for prev_book, book, prev_level, level in find_level_regressions(progression):
        issues.append(Issue(
            severity="error",
            category="character",
            message=(
                f"Character \"{name}\" drops from level {prev_level} in book "
                f"{prev_book} to level {level} in book {book}"
            ),
            related_ids=(shared.character_id,),
            books=(prev_book, book),
            suggestions=(REGRESSION_SUGGESTION,),
        ))

    for prev_book, book, gain in find_level_jumps(progression):
        issues.append(Issue(
            severity="warning",
            category="character",
            message=(
                f"Character \"{name}\" gains {gain} levels between books "
                f"{prev_book} and {book}"
            ),
            related_ids=(shared.character_id,),
            books=(prev_book, book),
            suggestions=(JUMP_SUGGESTION,),
        ))

    return issues


def _check_arc_continuity(shared: SharedCharacter) -> list[Issue]:
    """A book should not open below the level the previous book closed on."""
    issues: list[Issue] = []
    name = shared.name or shared.character_id
    arc = sorted(shared.development_arc, key=lambda dev: dev.book_number)

    for prev, current in zip(arc, arc[1:]):
        if current.starting_level is None:
            continue
        if current.starting_level < prev.ending_level:
            issues.append(Issue(
                severity="warning",
                category="character",
                message=(
                    f"Character \"{name}\" ends book {prev.book_number} at level "
                    f"{prev.ending_level} but starts book {current.book_number} "
                    f"at level {current.starting_level}"
                ),
                related_ids=(shared.character_id,),
                books=(prev.book_number, current.book_number),
                suggestions=(
                    "Review character level progression and ensure consistency across books",
                    "Explain the lost levels in the story if they are intentional",
                ),
            ))
    return issues


# ------------------------------------------------------------------
# Stats
# ------------------------------------------------------------------

def expected_hit_points(level: int, constitution: int) -> int:
    """Base HP plus ``level * (constitution modifier + 5)``."""
    con_modifier = math.floor((constitution - 10) / 2)
    return BASE_HIT_POINTS + level * (con_modifier + 5)


def _check_hit_points(shared: SharedCharacter) -> list[Issue]:
    character = shared.character
    hit_points = character.stats.hit_points
    if hit_points is None:
        return []

    expected = expected_hit_points(character.level, character.stats.constitution)
    if abs(hit_points - expected) <= character.level * HP_TOLERANCE_PER_LEVEL:
        return []

    name = character.name or shared.character_id
    return [Issue(
        severity="warning",
        category="character",
        message=(
            f"Character \"{name}\" has unusual hit points for their level "
            f"({hit_points}, expected about {expected} at level {character.level})"
        ),
        related_ids=(shared.character_id,),
        suggestions=("Recalculate hit points from level and constitution",),
    )]


# ------------------------------------------------------------------
# Names, backstories, relationships
# ------------------------------------------------------------------

def _check_duplicate_names(series: Series) -> list[Issue]:
    issues: list[Issue] = []
    for group in group_duplicates(series.characters, key=lambda shared: shared.name):
        issues.append(Issue(
            severity="warning",
            category="character",
            message=f"Multiple characters with name \"{group[0].name.strip()}\"",
            related_ids=tuple(shared.character_id for shared in group),
            suggestions=(
                "Consider giving characters unique names",
                "Use nicknames or titles to differentiate",
            ),
        ))
    return issues


def _check_backstory_locations(shared: SharedCharacter, known_locations: set[str]) -> list[Issue]:
    issues: list[Issue] = []
    name = shared.name or shared.character_id
    for place in extract_location_references(shared.character.backstory):
        if normalize_name(place) in known_locations:
            continue
        issues.append(Issue(
            severity="info",
            category="character",
            message=f"Character \"{name}\" references location \"{place}\" that may not be defined",
            related_ids=(shared.character_id,),
            suggestions=(
                "Add referenced locations to world building",
                "Update character backstory",
            ),
        ))
    return issues


def _check_reciprocal_relationships(series: Series) -> list[Issue]:
    """Flag relationships the other character does not list in return."""
    issues: list[Issue] = []
    by_id = {shared.character_id: shared for shared in series.characters}

    for shared in series.characters:
        for rel in shared.relationships:
            target = by_id.get(rel.target_character_id)
            if target is None or target.character_id == shared.character_id:
                continue
            if any(back.target_character_id == shared.character_id for back in target.relationships):
                continue
            name = shared.name or shared.character_id
            target_name = target.name or target.character_id
            issues.append(Issue(
                severity="info",
                category="character",
                message=(
                    f"\"{name}\" has a relationship with \"{target_name}\", "
                    f"but not vice versa"
                ),
                related_ids=(shared.character_id, target.character_id),
                suggestions=(f"Add a reciprocal relationship to {target_name}",),
            ))
    return issues
