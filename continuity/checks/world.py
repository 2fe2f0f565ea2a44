"""
continuity/checks/world.py -- World Evaluator

Validates the structural rules of a series' world-building:

    - the world has a name and a real description
    - location names are unique
    - every parent location exists, is larger than its children, and the
      containment links do not loop
    - world rules that are broken have documented exceptions, and are not
      referenced before the book that establishes them
    - factions are not both allied with and opposed to the same entity, and
      their influence stays within 0-100
    - glossary terms and aliases do not collide
"""

from __future__ import annotations

import logging

from continuity.location_graph import LocationGraph
from continuity.models.report import Issue
from continuity.models.snapshot import Series
from continuity.utils import group_duplicates

logger = logging.getLogger(__name__)

MIN_WORLD_DESCRIPTION = 50

INFLUENCE_RANGE = (0, 100)


def check_world(series: Series) -> list[Issue]:
    """Run every world-building rule against *series* and return the issues found."""
    issues: list[Issue] = []
    issues.extend(_check_completeness(series))
    issues.extend(_check_location_names(series))
    issues.extend(_check_location_hierarchy(series))
    issues.extend(_check_world_rules(series))
    issues.extend(_check_factions(series))
    issues.extend(_check_terminology(series))

    logger.debug("World checks on %s produced %d issues", series.id, len(issues))
    return issues


def _check_completeness(series: Series) -> list[Issue]:
    world = series.world
    issues: list[Issue] = []

    if not world.name.strip():
        issues.append(Issue(
            severity="warning",
            category="world",
            message="World name is not defined",
            suggestions=("Add a name for your world",),
        ))

    if len(world.description.strip()) < MIN_WORLD_DESCRIPTION:
        issues.append(Issue(
            severity="warning",
            category="world",
            message="World description is too brief or missing",
            suggestions=("Add more detailed world description",),
        ))

    return issues


# ------------------------------------------------------------------
# Locations
# ------------------------------------------------------------------

def _check_location_names(series: Series) -> list[Issue]:
    issues: list[Issue] = []
    for group in group_duplicates(series.locations, key=lambda loc: loc.name):
        issues.append(Issue(
            severity="error",
            category="world",
            message=f"Multiple locations named \"{group[0].name.strip()}\"",
            related_ids=tuple(loc.id for loc in group),
            suggestions=("Use unique location names", "Add regional prefixes"),
        ))
    return issues


def _check_location_hierarchy(series: Series) -> list[Issue]:
    issues: list[Issue] = []
    graph = LocationGraph(series.locations)

    for location_id, _ in graph.dangling:
        location = graph.get(location_id)
        issues.append(Issue(
            severity="error",
            category="world",
            message=f"Location \"{location.name}\" references non-existent parent location",
            related_ids=(location.id,),
            suggestions=(
                "Fix parent location reference",
                "Create missing parent location",
            ),
        ))

    for location in graph.locations():
        parent = graph.parent_of(location.id)
        if parent is None:
            continue
        if location.size_rank is None or parent.size_rank is None:
            continue
        if location.size_rank >= parent.size_rank:
            issues.append(Issue(
                severity="warning",
                category="world",
                message=(
                    f"Location \"{location.name}\" ({location.size}) is not smaller "
                    f"than its parent \"{parent.name}\" ({parent.size})"
                ),
                related_ids=(location.id, parent.id),
                suggestions=("Adjust location sizes", "Review location hierarchy"),
            ))

    for cycle in graph.find_cycles():
        names = [graph.get(loc_id).name or loc_id for loc_id in cycle]
        issues.append(Issue(
            severity="error",
            category="world",
            message=(
                "Locations contain each other in a loop: "
                + " -> ".join(names + names[:1])
            ),
            related_ids=tuple(cycle),
            suggestions=("Break the loop by choosing a single outermost location",),
        ))

    return issues


# ------------------------------------------------------------------
# World rules
# ------------------------------------------------------------------

def _check_world_rules(series: Series) -> list[Issue]:
    issues: list[Issue] = []
    for rule in series.world.world_rules:
        breaking = [ref.book_number for ref in rule.references if ref.importance == "breaks"]
        if breaking and not rule.exceptions:
            issues.append(Issue(
                severity="error",
                category="world",
                message=(
                    f"World rule \"{rule.name}\" is broken in some books but has "
                    f"no documented exceptions"
                ),
                related_ids=(rule.id,),
                books=tuple(sorted(set(breaking))),
                suggestions=("Add exceptions to the world rule or fix the contradictions",),
            ))

        if rule.established_in_book is None:
            continue
        early = sorted({
            ref.book_number for ref in rule.references
            if ref.book_number < rule.established_in_book
        })
        if early:
            issues.append(Issue(
                severity="warning",
                category="world",
                message=(
                    f"World rule \"{rule.name}\" is referenced in book(s) "
                    f"{', '.join(str(b) for b in early)} before it is established "
                    f"in book {rule.established_in_book}"
                ),
                related_ids=(rule.id,),
                books=(*early, rule.established_in_book),
                suggestions=(
                    "Move the rule's establishment to an earlier book",
                    "Remove or reword the early references",
                ),
            ))
    return issues


# ------------------------------------------------------------------
# Factions and terminology
# ------------------------------------------------------------------

def _check_factions(series: Series) -> list[Issue]:
    issues: list[Issue] = []
    low, high = INFLUENCE_RANGE

    for faction in series.shared_elements.factions:
        both = [ally for ally in faction.allies if ally in faction.enemies]
        if both:
            issues.append(Issue(
                severity="error",
                category="world",
                message=(
                    f"Faction \"{faction.name}\" lists the same entity as both ally "
                    f"and enemy: {', '.join(dict.fromkeys(both))}"
                ),
                related_ids=(faction.id,),
                suggestions=("Review faction relationships", "Choose either ally or enemy"),
            ))

        if not low <= faction.influence <= high:
            issues.append(Issue(
                severity="error",
                category="world",
                message=(
                    f"Faction \"{faction.name}\" has invalid influence level: "
                    f"{faction.influence:g}"
                ),
                related_ids=(faction.id,),
                suggestions=(f"Set influence between {low}-{high}",),
            ))

    return issues


def _check_terminology(series: Series) -> list[Issue]:
    """Two glossary entries must not share a term or alias."""
    issues: list[Issue] = []
    spellings = [
        (spelling, entry)
        for entry in series.shared_elements.terminology
        for spelling in dict.fromkeys((entry.term, *entry.aliases))
    ]
    for group in group_duplicates(spellings, key=lambda pair: pair[0]):
        entries = list({entry.id: entry for _, entry in group}.values())
        if len(entries) < 2:
            continue
        issues.append(Issue(
            severity="warning",
            category="world",
            message=(
                f"\"{group[0][0].strip()}\" is used by several glossary terms: "
                + ", ".join(entry.term for entry in entries)
            ),
            related_ids=tuple(entry.id for entry in entries),
            suggestions=("Give each term a distinct name", "Merge the duplicate terms"),
        ))
    return issues
