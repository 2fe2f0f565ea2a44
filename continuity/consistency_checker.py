"""
continuity/consistency_checker.py -- Series Consistency Report

Runs the four rule evaluators over one series snapshot and folds their
issues into a scored report:

    Character -> Timeline -> World -> Plot

Issues keep evaluator order, then the order each evaluator found them in,
so the same snapshot always yields the same report (timestamp aside).

The score starts at 100 and loses 10 per error, 5 per warning and 1 per
info, floored at 0.  It depends on the issue list and nothing else.

Usage:
    from continuity.consistency_checker import check_consistency

    report = check_consistency(series_payload)
    # report.score         -> 0..100
    # report.to_dict()     -> camelCase JSON for the REST layer
    # format_human_message(report) -> friendly summary for the author
"""

import logging

from continuity.checks import EVALUATORS
from continuity.models.report import ConsistencyReport
from continuity.models.validators import load_snapshot

logger = logging.getLogger(__name__)

SEVERITY_PENALTIES = {
    "error": 10,
    "warning": 5,
    "info": 1,
}

MAX_SCORE = 100

BASELINE_SUGGESTIONS = (
    "Regularly run consistency checks during writing",
    "Keep a character sheet updated with key details",
    "Maintain a timeline of major story events",
)

# Conditional suggestions kick in past these counts.
MANY_WARNINGS = 5
MANY_CHAPTERS = 5


def check_consistency(snapshot):
    """Check one series snapshot and return its ConsistencyReport.

    Parameters
    ----------
    snapshot : Series or dict
        The read-only series aggregate.  Dicts are validated first.

    Returns
    -------
    ConsistencyReport

    Raises
    ------
    InvalidSnapshotError
        If the snapshot is structurally invalid.
    """
    series = load_snapshot(snapshot)

    issues = []
    for name, evaluator in EVALUATORS:
        found = evaluator(series)
        logger.debug("%s evaluator found %d issues", name, len(found))
        issues.extend(found)

    report = ConsistencyReport(
        series_id=series.id,
        issues=tuple(issues),
        score=calculate_score(issues),
        suggestions=tuple(generate_suggestions(series, issues)),
    )
    logger.info(
        "Consistency check for series %s: %d errors, %d warnings, %d info, score %d",
        series.id,
        report.count("error"),
        report.count("warning"),
        report.count("info"),
        report.score,
    )
    return report


# The name the REST collaborators use.
build_report = check_consistency


def calculate_score(issues):
    """Return the 0-100 consistency score for *issues*."""
    score = MAX_SCORE
    for issue in issues:
        score -= SEVERITY_PENALTIES[issue.severity]
    return max(0, min(MAX_SCORE, score))


def generate_suggestions(series, issues):
    """Baseline writing advice plus suggestions triggered by the issues found."""
    suggestions = list(BASELINE_SUGGESTIONS)

    error_count = sum(1 for issue in issues if issue.severity == "error")
    warning_count = sum(1 for issue in issues if issue.severity == "warning")

    if error_count > 0:
        suggestions.append("Address critical errors first to maintain story integrity")

    if warning_count > MANY_WARNINGS:
        suggestions.append("Review character and world building consistency")

    if not series.world.name.strip():
        suggestions.append("Give your world a name to establish identity")

    if len(series.chapters) > MANY_CHAPTERS and not series.timeline_events:
        suggestions.append("Add timeline events to track story progression")

    return suggestions


# ------------------------------------------------------------------
# Human-friendly message formatting
# ------------------------------------------------------------------

def format_human_message(report, series_name=None):
    """Convert a ConsistencyReport into a friendly plain-text summary.

    Written for an author, not a developer: no JSON, no ids unless they
    help.  Errors come first, then warnings, then notes.

    Example output::

        'The Ember Cycle' scored 85/100.

        PROBLEMS TO FIX:
          1. Character "Aria" drops from level 10 in book 1 to level 8 in book 2
             -> Ensure character levels only increase or stay the same across books

        THINGS TO TIDY UP:
          1. World description is too brief or missing

        TIPS:
          - Regularly run consistency checks during writing
    """
    if series_name is None:
        series_name = report.series_id or "this series"

    lines = [f"'{series_name}' scored {report.score}/100."]

    if not report.issues:
        lines.append("")
        lines.append("No consistency issues were found.")

    sections = (
        ("error", "PROBLEMS TO FIX:"),
        ("warning", "THINGS TO TIDY UP:"),
        ("info", "NOTES (not blocking, just worth reviewing):"),
    )
    for severity, heading in sections:
        selected = [issue for issue in report.issues if issue.severity == severity]
        if not selected:
            continue
        lines.append("")
        lines.append(heading)
        for i, issue in enumerate(selected, 1):
            lines.append(f"  {i}. {issue.message}")
            if issue.suggestions:
                lines.append(f"     -> {issue.suggestions[0]}")

    if report.suggestions:
        lines.append("")
        lines.append("TIPS:")
        for suggestion in report.suggestions:
            lines.append(f"  - {suggestion}")

    return "\n".join(lines)
