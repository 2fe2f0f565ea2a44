"""
continuity/checks/timeline.py -- Timeline Evaluator

Detects temporal contradictions over the series timeline plus every book's
local events.

Events are ordered by comparing their ``date`` strings.  That is only
chronological for ISO-8601 dates in a single format; mixed formats give
undefined results and are left as such rather than guessed at.
"""

from __future__ import annotations

import logging

from continuity.models.report import Issue
from continuity.models.snapshot import Series, TimelineEvent
from continuity.utils import days_between

logger = logging.getLogger(__name__)

MIN_CRITICAL_SPACING_DAYS = 7

# Chapters longer than this (in characters) are expected to carry an event.
LONG_CHAPTER_CHARS = 1000


def check_timeline(series: Series) -> list[Issue]:
    """Run every timeline rule against *series* and return the issues found."""
    events = series.timeline_events
    issues: list[Issue] = []

    ordered = sorted(events, key=lambda event: event.date)
    for prev, current in zip(ordered, ordered[1:]):
        issues.extend(_check_same_day_conflict(prev, current))
        issues.extend(_check_critical_spacing(prev, current))

    issues.extend(_check_unknown_characters(series, events))
    issues.extend(_check_chapter_coverage(series, events))

    logger.debug(
        "Timeline checks on %s: %d events, %d issues", series.id, len(events), len(issues)
    )
    return issues


def _check_same_day_conflict(prev: TimelineEvent, current: TimelineEvent) -> list[Issue]:
    """A character cannot take part in two events on the same date."""
    if prev.date != current.date:
        return []
    shared = [char for char in prev.characters_involved if char in current.characters_involved]
    if not shared:
        return []
    return [Issue(
        severity="error",
        category="timeline",
        message=(
            f"Timeline conflict: Characters {', '.join(shared)} appear in "
            f"multiple events on {prev.date}"
        ),
        related_ids=(prev.id, current.id, *shared),
        suggestions=("Adjust event dates", "Review character involvement"),
    )]


def _check_critical_spacing(prev: TimelineEvent, current: TimelineEvent) -> list[Issue]:
    if prev.importance != "critical" or current.importance != "critical":
        return []
    gap = days_between(prev.date, current.date)
    if gap is None or gap >= MIN_CRITICAL_SPACING_DAYS:
        return []
    return [Issue(
        severity="warning",
        category="timeline",
        message=(
            f"Two critical events \"{prev.title}\" and \"{current.title}\" "
            f"occur very close together"
        ),
        related_ids=(prev.id, current.id),
        suggestions=("Consider spacing major events", "Reduce importance of one event"),
    )]


def _check_unknown_characters(series: Series, events: list[TimelineEvent]) -> list[Issue]:
    """Events naming character ids the series does not know about."""
    if not series.characters:
        return []
    known = {shared.character_id for shared in series.characters}
    issues: list[Issue] = []
    for event in events:
        missing = [char for char in event.characters_involved if char not in known]
        if not missing:
            continue
        issues.append(Issue(
            severity="info",
            category="timeline",
            message=(
                f"Event \"{event.title}\" involves unknown characters: "
                f"{', '.join(missing)}"
            ),
            related_ids=(event.id, *missing),
            books=(event.book_number,) if event.book_number is not None else (),
            suggestions=(
                "Add the characters to the series",
                "Remove stale character references from the event",
            ),
        ))
    return issues


def _check_chapter_coverage(series: Series, events: list[TimelineEvent]) -> list[Issue]:
    """Long chapters should have at least one timeline event pointing at them."""
    covered = {event.chapter for event in events if event.chapter}
    issues: list[Issue] = []
    for book in series.books:
        for chapter in book.chapters:
            if chapter.id in covered or len(chapter.content) <= LONG_CHAPTER_CHARS:
                continue
            issues.append(Issue(
                severity="info",
                category="timeline",
                message=(
                    f"Chapter \"{chapter.title}\" has no timeline events "
                    f"but significant content"
                ),
                related_ids=(chapter.id,),
                books=(book.book_number,),
                suggestions=("Add timeline events for major chapter developments",),
            ))
    return issues
