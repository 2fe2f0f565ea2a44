"""
continuity/checks/plot.py -- Plot Evaluator

Coarse plot-health heuristics.  These are approximate on purpose: the
unresolved-thread signal is a keyword count, not an understanding of the
story.
"""

from __future__ import annotations

import logging

from continuity.heuristics import has_unresolved_threads
from continuity.models.report import Issue
from continuity.models.snapshot import Book, Series

logger = logging.getLogger(__name__)

# A book may run this far past its target before it is flagged.
WORD_COUNT_OVERRUN_RATIO = 1.5


def check_plot(series: Series) -> list[Issue]:
    """Run every plot rule against *series* and return the issues found."""
    issues: list[Issue] = []
    for book in series.books:
        issues.extend(_check_chapter_order(book))

    all_text = " ".join(chapter.content for chapter in series.chapters)
    if has_unresolved_threads(all_text):
        issues.append(Issue(
            severity="info",
            category="plot",
            message="Story may have many unresolved plot threads",
            suggestions=(
                "Review unresolved mysteries",
                "Consider resolving some plot threads",
            ),
        ))

    for book in series.books:
        issues.extend(_check_length(book))

    logger.debug("Plot checks on %s produced %d issues", series.id, len(issues))
    return issues


def _check_chapter_order(book: Book) -> list[Issue]:
    """Chapter ``order`` values must be strictly increasing within a book."""
    issues: list[Issue] = []
    chapters = sorted(book.chapters, key=lambda chapter: chapter.order)
    for prev, current in zip(chapters, chapters[1:]):
        if current.order <= prev.order:
            issues.append(Issue(
                severity="error",
                category="plot",
                message=(
                    f"Chapter ordering conflict between \"{prev.title}\" and "
                    f"\"{current.title}\""
                ),
                related_ids=(prev.id, current.id),
                books=(book.book_number,),
                suggestions=("Renumber chapters in correct order",),
            ))
    return issues


def _check_length(book: Book) -> list[Issue]:
    target = book.target_word_count
    if not target:
        return []
    words = book.word_count
    if words <= target * WORD_COUNT_OVERRUN_RATIO:
        return []
    return [Issue(
        severity="warning",
        category="plot",
        message=(
            f"Book {book.book_number} is significantly longer than target "
            f"({words} vs {target} words)"
        ),
        related_ids=(book.id,),
        books=(book.book_number,),
        suggestions=("Consider editing for length", "Adjust target word count"),
    )]
