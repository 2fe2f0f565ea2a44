"""
Shared pytest fixtures for the continuity engine test suite.

Provides:
    - series_data: a plain-dict series snapshot with no consistency issues
    - make_series: factory that patches series_data and validates it
    - shared_character: builder for a SharedCharacter payload
"""

import copy
import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Ensure continuity/ is importable regardless of where pytest is invoked
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from continuity.models.validators import load_snapshot  # noqa: E402


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

_CLEAN_SERIES = {
    "id": "ember-cycle",
    "name": "The Ember Cycle",
    "books": [
        {
            "id": "book-1",
            "seriesId": "ember-cycle",
            "bookNumber": 1,
            "title": "Ashfall",
            "status": "published",
            "targetWordCount": 1000,
            "currentWordCount": 900,
            "chapters": [
                {"id": "ch-1", "title": "The Road", "order": 1,
                 "content": "Aria walked the road north with Bram."},
                {"id": "ch-2", "title": "The Gate", "order": 2,
                 "content": "The gate was found open at dawn."},
            ],
            "timelineEvents": [
                {
                    "id": "ev-gate",
                    "title": "The gate opens",
                    "date": "1200-03-20",
                    "charactersInvolved": ["aria"],
                    "importance": "major",
                    "chapter": "ch-2",
                    "bookNumber": 1,
                },
            ],
        },
        {
            "id": "book-2",
            "seriesId": "ember-cycle",
            "bookNumber": 2,
            "title": "Emberfall Rising",
            "status": "writing",
            "targetWordCount": 1000,
            "currentWordCount": 1100,
            "chapters": [
                {"id": "ch-3", "title": "Return", "order": 1,
                 "content": "They returned home."},
            ],
        },
    ],
    "sharedElements": {
        "characters": [
            {
                "characterId": "aria",
                "character": {
                    "id": "aria",
                    "name": "Aria",
                    "backstory": "Aria was born in Riverton.",
                    "level": 5,
                    "stats": {"hitPoints": 40, "constitution": 12},
                },
                "appearances": [
                    {"bookNumber": 1, "role": "main"},
                    {"bookNumber": 2, "role": "main"},
                ],
                "developmentArc": [
                    {"bookNumber": 1, "startingLevel": 1, "endingLevel": 5},
                    {"bookNumber": 2, "startingLevel": 5, "endingLevel": 12},
                ],
                "relationships": [
                    {"targetCharacterId": "bram", "relationship": "friend", "strength": 7},
                ],
            },
            {
                "characterId": "bram",
                "character": {
                    "id": "bram",
                    "name": "Bram",
                    "level": 3,
                    "stats": {"hitPoints": 25, "constitution": 10},
                },
                "appearances": [{"bookNumber": 1, "role": "supporting"}],
                "developmentArc": [{"bookNumber": 1, "startingLevel": 1, "endingLevel": 3}],
                "relationships": [
                    {"targetCharacterId": "aria", "relationship": "friend", "strength": 7},
                ],
            },
        ],
        "worldBuilding": {
            "name": "Emberfall",
            "description": (
                "A continent of ash plains and ember forests where fire "
                "magic shapes every kingdom."
            ),
            "timeline": [
                {
                    "id": "ev-burning",
                    "title": "The Burning",
                    "date": "1200-01-01",
                    "importance": "critical",
                },
            ],
            "worldRules": [
                {
                    "id": "rule-fuel",
                    "name": "Fire needs fuel",
                    "category": "magic",
                    "establishedInBook": 1,
                    "references": [
                        {"bookNumber": 1, "importance": "establishes"},
                        {"bookNumber": 2, "importance": "follows"},
                    ],
                },
            ],
        },
        "locations": [
            {"id": "loc-emberfall", "name": "Emberfall", "type": "continent", "size": "gigantic"},
            {"id": "loc-riverton", "name": "Riverton", "type": "city", "size": "small",
             "parentLocationId": "loc-emberfall"},
        ],
        "factions": [
            {"id": "f-guard", "name": "Ash Guard", "allies": ["f-crown"],
             "enemies": ["f-cult"], "influence": 60},
        ],
        "terminology": [
            {"id": "t-ember", "term": "Ember", "aliases": ["Spark"]},
        ],
    },
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def series_data():
    """Return a fresh dict snapshot of a series with no consistency issues."""
    return copy.deepcopy(_CLEAN_SERIES)


@pytest.fixture
def make_series(series_data):
    """Return a factory that patches ``sharedElements`` / ``books`` and validates.

    Keyword arguments named after a ``sharedElements`` key replace that
    collection; ``world`` is merged into ``worldBuilding``; ``books``
    replaces the book list.
    """
    def _make(books=None, world=None, **shared):
        data = copy.deepcopy(series_data)
        if books is not None:
            data["books"] = books
        if world is not None:
            data["sharedElements"]["worldBuilding"].update(world)
        data["sharedElements"].update(shared)
        return load_snapshot(data)

    return _make


@pytest.fixture
def shared_character():
    """Return a builder for minimal SharedCharacter payloads."""
    def _build(character_id, name=None, arc=(), backstory="", level=1,
               hit_points=None, constitution=10, relationships=()):
        return {
            "characterId": character_id,
            "character": {
                "id": character_id,
                "name": name if name is not None else character_id.title(),
                "backstory": backstory,
                "level": level,
                "stats": {"hitPoints": hit_points, "constitution": constitution},
            },
            "developmentArc": [
                {"bookNumber": book, "endingLevel": level_}
                for book, level_ in arc
            ],
            "relationships": [
                {"targetCharacterId": target} for target in relationships
            ],
        }

    return _build
