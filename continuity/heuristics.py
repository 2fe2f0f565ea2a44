"""
continuity/heuristics.py -- Lexical heuristics used by the evaluators.

These are deliberately simple string scans, not parsers.  False positives
and false negatives are expected; each function is self-contained so a
better heuristic can replace it without touching the evaluators.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# "born in Riverton", "a knight of Aldara", "fled from Ash Hollow"
_PLACE_AFTER_PREPOSITION = re.compile(
    r"\b(?:from|in|at|near|of)\s+([A-Z][a-zA-Z]*(?:\s+[A-Z][a-zA-Z]*)*)"
)

_SETTLEMENT_WORDS = ("kingdom", "city", "town", "village", "land", "realm")

# "the Aldara kingdom", "Silverwood Village"
_PLACE_BEFORE_SETTLEMENT_WORD = re.compile(
    r"\b([A-Z][a-zA-Z]*(?:\s+[A-Z][a-zA-Z]*)*)\s+((?i:"
    + "|".join(_SETTLEMENT_WORDS)
    + r"))\b"
)

_MIN_PLACE_LENGTH = 3
# Sentence-initial words that the capitalised-run patterns sweep up
_LEADING_WORDS = {"The", "A", "An", "From", "In", "At", "Near", "Of"}

MYSTERY_KEYWORDS = (
    "mystery", "secret", "hidden", "unknown", "discover", "find out",
    "question", "wonder", "curious", "investigate",
)

RESOLUTION_KEYWORDS = (
    "revealed", "discovered", "found", "answered", "solved", "resolved",
)


def extract_location_references(text: str) -> list[str]:
    """Pull capitalised, place-like phrases out of free text.

    Two patterns are recognised: a run of capitalised words after
    from/in/at/near/of, and a run of capitalised words before a settlement
    word (kingdom, city, town, village, land, realm).  When the settlement
    word is itself capitalised it is taken as part of the name
    ("Silverwood Village"); otherwise only the preceding words are kept
    ("the Aldara kingdom" -> "Aldara").

    Returns candidates in order of first appearance, without duplicates.
    """
    if not text:
        return []

    candidates: list[str] = []

    def _add(candidate: str) -> None:
        words = candidate.split()
        while len(words) > 1 and words[0] in _LEADING_WORDS:
            words = words[1:]
        candidate = " ".join(words)
        # "The Kingdom of Aldara" leaves a bare "Kingdom"
        if candidate.lower() in _SETTLEMENT_WORDS:
            return
        if len(candidate) >= _MIN_PLACE_LENGTH and candidate not in candidates:
            candidates.append(candidate)

    for match in _PLACE_AFTER_PREPOSITION.finditer(text):
        _add(match.group(1))

    for match in _PLACE_BEFORE_SETTLEMENT_WORD.finditer(text):
        words, settlement = match.group(1), match.group(2)
        _add(f"{words} {settlement}" if settlement[0].isupper() else words)

    return candidates


def count_keywords(text: str, keywords: Iterable[str]) -> int:
    """Count case-insensitive substring occurrences of each keyword in *text*.

    Matching is by substring, so inflected forms count ("secrets",
    "investigated") and so do unrelated words that contain a keyword
    ("foundation").
    """
    lowered = text.lower()
    return sum(lowered.count(keyword.lower()) for keyword in keywords)


def has_unresolved_threads(text: str) -> bool:
    """True when mystery keywords outnumber resolution keywords more than two to one."""
    mysteries = count_keywords(text, MYSTERY_KEYWORDS)
    resolutions = count_keywords(text, RESOLUTION_KEYWORDS)
    return mysteries > resolutions * 2
