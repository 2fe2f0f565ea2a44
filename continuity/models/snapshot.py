"""
continuity/models/snapshot.py -- Read-only aggregate view of one series.

The persistence layer hands the engine a plain dict shaped like the REST
payloads (camelCase keys).  These Pydantic v2 models validate that dict into
a frozen tree: every model is ``frozen=True`` and every collection is a
tuple, so the evaluators can share one snapshot without copying it and
cannot write back into it.

Snake_case field names are accepted as well (``populate_by_name``), which
keeps test fixtures readable.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Ordered smallest to largest; a child location must sit strictly below its parent.
SIZE_ORDER = ("tiny", "small", "medium", "large", "huge", "gigantic")

LocationSize = Literal["tiny", "small", "medium", "large", "huge", "gigantic"]
EventImportance = Literal["minor", "moderate", "major", "critical"]
ReferenceImportance = Literal["establishes", "reinforces", "follows", "challenges", "breaks"]
AppearanceRole = Literal["main", "supporting", "minor", "mentioned", "cameo"]


class SnapshotModel(BaseModel):
    """Base for every snapshot type: camelCase aliases, immutable, lenient extras."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# ------------------------------------------------------------------
# Characters
# ------------------------------------------------------------------

class CharacterStats(SnapshotModel):
    hit_points: Optional[int] = None
    constitution: int = 10
    intelligence: int = 10
    dexterity: int = 10
    strength: int = 10


class Character(SnapshotModel):
    """Denormalised copy of the character record the series points at."""

    id: str = ""
    name: str = ""
    backstory: str = ""
    level: int = 1
    stats: CharacterStats = Field(default_factory=CharacterStats)


class BookAppearance(SnapshotModel):
    book_number: int
    role: AppearanceRole = "supporting"
    book_id: Optional[str] = None


class CharacterDevelopment(SnapshotModel):
    book_number: int
    ending_level: int
    starting_level: Optional[int] = None
    skills_gained: tuple[str, ...] = ()


class CrossBookRelationship(SnapshotModel):
    target_character_id: str
    relationship: str = ""
    strength: int = 0


class SharedCharacter(SnapshotModel):
    character_id: str
    character: Character = Field(default_factory=Character)
    appearances: tuple[BookAppearance, ...] = ()
    development_arc: tuple[CharacterDevelopment, ...] = ()
    relationships: tuple[CrossBookRelationship, ...] = ()

    @property
    def name(self) -> str:
        return self.character.name


# ------------------------------------------------------------------
# Timeline and world-building
# ------------------------------------------------------------------

class TimelineEvent(SnapshotModel):
    id: str
    title: str = ""
    description: str = ""
    date: str = ""
    characters_involved: tuple[str, ...] = ()
    importance: EventImportance = "moderate"
    chapter: Optional[str] = None
    book_number: Optional[int] = None


class BookReference(SnapshotModel):
    book_number: int
    importance: ReferenceImportance = "follows"
    context: str = ""


class WorldRule(SnapshotModel):
    id: str
    name: str = ""
    category: str = ""
    description: str = ""
    established_in_book: Optional[int] = None
    references: tuple[BookReference, ...] = ()
    exceptions: tuple[str, ...] = ()


class WorldBuilding(SnapshotModel):
    name: str = ""
    description: str = ""
    timeline: tuple[TimelineEvent, ...] = ()
    world_rules: tuple[WorldRule, ...] = ()


class MagicSystem(SnapshotModel):
    id: str
    name: str = ""
    type: str = ""
    description: str = ""
    limitations: tuple[str, ...] = ()
    costs: tuple[str, ...] = ()
    practitioners: tuple[str, ...] = ()


class LocationAppearance(SnapshotModel):
    book_number: int
    role: str = "setting"


class SharedLocation(SnapshotModel):
    id: str
    name: str = ""
    type: str = ""
    description: str = ""
    parent_location_id: Optional[str] = None
    size: Optional[LocationSize] = None
    appearances: tuple[LocationAppearance, ...] = ()

    @property
    def size_rank(self) -> int | None:
        """Position of ``size`` on SIZE_ORDER, or None when no size is recorded."""
        if self.size is None:
            return None
        return SIZE_ORDER.index(self.size)


class SharedFaction(SnapshotModel):
    id: str
    name: str = ""
    type: str = ""
    allies: tuple[str, ...] = ()
    enemies: tuple[str, ...] = ()
    influence: float = 0


class Terminology(SnapshotModel):
    id: str
    term: str
    definition: str = ""
    aliases: tuple[str, ...] = ()
    first_mentioned: Optional[int] = None


class SharedElements(SnapshotModel):
    characters: tuple[SharedCharacter, ...] = ()
    world_building: WorldBuilding = Field(default_factory=WorldBuilding)
    magic_systems: tuple[MagicSystem, ...] = ()
    locations: tuple[SharedLocation, ...] = ()
    factions: tuple[SharedFaction, ...] = ()
    terminology: tuple[Terminology, ...] = ()


# ------------------------------------------------------------------
# Books
# ------------------------------------------------------------------

class Chapter(SnapshotModel):
    id: str
    title: str = ""
    order: int = 0
    content: str = ""

    @property
    def word_count(self) -> int:
        return len(self.content.split())


class PlotThread(SnapshotModel):
    id: str
    name: str = ""
    type: str = "main"
    status: str = "introduced"
    resolution: Optional[str] = None


class CharacterArc(SnapshotModel):
    id: str
    character_id: str
    book_number: int
    arc_type: str = "static"


class Book(SnapshotModel):
    id: str
    book_number: int
    series_id: str = ""
    title: str = ""
    status: str = "planning"
    target_word_count: Optional[int] = None
    current_word_count: Optional[int] = None
    chapters: tuple[Chapter, ...] = ()
    plot_threads: tuple[PlotThread, ...] = ()
    character_arcs: tuple[CharacterArc, ...] = ()
    timeline_events: tuple[TimelineEvent, ...] = ()

    @property
    def word_count(self) -> int:
        """Recorded word count, or the sum over chapter text when none is recorded."""
        if self.current_word_count is not None:
            return self.current_word_count
        return sum(chapter.word_count for chapter in self.chapters)


class Series(SnapshotModel):
    """Root of the snapshot.  ``books`` and ``shared_elements`` are required."""

    id: str
    books: tuple[Book, ...]
    shared_elements: SharedElements
    name: str = ""

    # Convenience views used by several evaluators.

    @property
    def characters(self) -> tuple[SharedCharacter, ...]:
        return self.shared_elements.characters

    @property
    def locations(self) -> tuple[SharedLocation, ...]:
        return self.shared_elements.locations

    @property
    def world(self) -> WorldBuilding:
        return self.shared_elements.world_building

    @property
    def chapters(self) -> list[Chapter]:
        return [chapter for book in self.books for chapter in book.chapters]

    @property
    def timeline_events(self) -> list[TimelineEvent]:
        """Series-level events followed by each book's local events, in book order."""
        events = list(self.world.timeline)
        for book in self.books:
            events.extend(book.timeline_events)
        return events

    def find_character(self, character_id: str) -> SharedCharacter | None:
        for shared in self.characters:
            if shared.character_id == character_id:
                return shared
        return None
