"""
Shared helpers for the continuity evaluators.

Name normalisation and grouping are used by both the character and world
evaluators; date arithmetic is used by the timeline evaluator.
"""

import logging
from datetime import datetime

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------

def normalize_name(name):
    """Return *name* trimmed and case-folded, the key used for collisions."""
    return (name or "").strip().casefold()


def group_duplicates(items, key):
    """Group *items* by normalised ``key(item)`` and keep groups of two or more.

    Items with an empty name are ignored.  Groups come back in order of
    first appearance, members in input order, so reports are reproducible.

    Parameters
    ----------
    items : iterable
        Records to group.
    key : callable
        Returns the display name of a record.

    Returns
    -------
    list[list]
        One list per colliding name.
    """
    groups = {}
    for item in items:
        normalized = normalize_name(key(item))
        if not normalized:
            continue
        groups.setdefault(normalized, []).append(item)
    return [members for members in groups.values() if len(members) > 1]


def unique(values):
    """Drop repeated values while keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def parse_iso_date(value):
    """Parse an ISO-8601 date or datetime string, or return None."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        logger.debug("Unparseable timeline date %r", value)
        return None


def days_between(first, second):
    """Absolute number of days between two ISO date strings.

    Returns None when either date cannot be parsed or the two mix naive
    and timezone-aware values; callers skip the comparison in that case.
    """
    start = parse_iso_date(first)
    end = parse_iso_date(second)
    if start is None or end is None:
        return None
    try:
        delta = end - start
    except TypeError:
        logger.debug("Cannot compare %r with %r (mixed timezone awareness)", first, second)
        return None
    return abs(delta.total_seconds()) / 86400
