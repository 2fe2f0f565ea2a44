"""
Tests for continuity/checks/character.py -- Character Evaluator.

Validates:
    - duplicate name grouping (trim + case-insensitive)
    - level regression, equal levels, and jump boundaries
    - hit point plausibility
    - arc continuity between books
    - backstory location cross-references
    - reciprocal relationships
"""

import pytest

from continuity.checks.character import (
    MAX_LEVEL_JUMP,
    check_characters,
    expected_hit_points,
    find_level_jumps,
    find_level_regressions,
)


def _of(issues, severity):
    return [issue for issue in issues if issue.severity == severity]


class TestDuplicateNames:
    """Duplicate character name detection."""

    def test_names_equal_after_normalisation_grouped(self, make_series, shared_character):
        """Names differing only in case and whitespace are one duplicate group."""
        series = make_series(characters=[
            shared_character("a1", name="Kael"),
            shared_character("a2", name="  kael "),
        ])
        dupes = [i for i in check_characters(series) if "Multiple characters" in i.message]
        assert len(dupes) == 1
        assert dupes[0].severity == "warning"
        assert set(dupes[0].related_ids) == {"a1", "a2"}

    def test_three_way_collision_is_one_issue(self, make_series, shared_character):
        """Three characters with the same name produce a single warning."""
        series = make_series(characters=[
            shared_character("a1", name="Kael"),
            shared_character("a2", name="KAEL"),
            shared_character("a3", name="Kael"),
        ])
        dupes = [i for i in check_characters(series) if "Multiple characters" in i.message]
        assert len(dupes) == 1
        assert dupes[0].related_ids == ("a1", "a2", "a3")

    def test_distinct_names_not_flagged(self, make_series, shared_character):
        """Similar but different names are fine."""
        series = make_series(characters=[
            shared_character("a1", name="Kael"),
            shared_character("a2", name="Kaela"),
        ])
        assert check_characters(series) == []


class TestLevelProgression:
    """Monotonicity and jump detection over development arcs."""

    def test_equal_levels_not_reported(self, make_series, shared_character):
        """Ending two books at the same level is not a regression."""
        series = make_series(characters=[shared_character("c", arc=[(1, 10), (2, 10)])])
        assert check_characters(series) == []

    def test_decrease_is_one_error_citing_both_books(self, make_series, shared_character):
        """A level drop is one error naming both books."""
        series = make_series(characters=[shared_character("c", arc=[(1, 10), (2, 8)])])
        errors = _of(check_characters(series), "error")
        assert len(errors) == 1
        assert errors[0].books == (1, 2)
        assert "book 1" in errors[0].message and "book 2" in errors[0].message

    def test_arc_is_sorted_by_book_number(self, make_series, shared_character):
        """Arc entries are compared in book order, not list order."""
        series = make_series(characters=[shared_character("c", arc=[(2, 8), (1, 10)])])
        errors = _of(check_characters(series), "error")
        assert len(errors) == 1
        assert errors[0].books == (1, 2)

    def test_jump_over_threshold_is_one_warning(self, make_series, shared_character):
        """A gain of 25 levels warns but is not an error."""
        series = make_series(characters=[shared_character("c", arc=[(1, 5), (2, 30)])])
        issues = check_characters(series)
        assert len(_of(issues, "warning")) == 1
        assert _of(issues, "error") == []

    def test_jump_at_threshold_not_flagged(self, make_series, shared_character):
        """A gain of exactly the threshold is allowed."""
        series = make_series(characters=[shared_character("c", arc=[(1, 5), (2, 25)])])
        assert check_characters(series) == []

    @pytest.mark.parametrize("gain,flagged", [
        (MAX_LEVEL_JUMP - 1, False),
        (MAX_LEVEL_JUMP, False),
        (MAX_LEVEL_JUMP + 1, True),
    ])
    def test_jump_boundary_is_strict(self, gain, flagged):
        """Only gains strictly above the threshold are jumps."""
        jumps = list(find_level_jumps([(1, 1), (2, 1 + gain)]))
        assert bool(jumps) is flagged

    def test_regression_helper_reports_each_drop(self):
        """Every adjacent drop is yielded with its books and levels."""
        drops = list(find_level_regressions([(1, 10), (2, 8), (3, 9), (4, 2)]))
        assert drops == [(1, 2, 10, 8), (3, 4, 9, 2)]


class TestArcContinuity:
    """A book should not start below where the previous one ended."""

    def test_starting_below_previous_end_warns(self, make_series, shared_character):
        """Starting book 2 below book 1's ending level warns."""
        character = shared_character("c")
        character["developmentArc"] = [
            {"bookNumber": 1, "startingLevel": 1, "endingLevel": 10},
            {"bookNumber": 2, "startingLevel": 4, "endingLevel": 12},
        ]
        issues = check_characters(make_series(characters=[character]))
        assert len(issues) == 1
        assert issues[0].severity == "warning"
        assert issues[0].books == (1, 2)

    def test_missing_starting_level_skipped(self, make_series, shared_character):
        """Arcs without starting levels are not checked for continuity."""
        series = make_series(characters=[shared_character("c", arc=[(1, 10), (2, 12)])])
        assert check_characters(series) == []


class TestHitPoints:
    """Stat plausibility against level and constitution."""

    def test_expected_hit_points_formula(self):
        """Expected HP is 10 + level * (constitution modifier + 5)."""
        assert expected_hit_points(5, 12) == 40
        assert expected_hit_points(1, 7) == 13
        assert expected_hit_points(3, 10) == 25

    def test_matching_hit_points_pass(self, make_series, shared_character):
        """Hit points equal to the expectation pass."""
        series = make_series(characters=[
            shared_character("c", level=5, hit_points=40, constitution=12),
        ])
        assert check_characters(series) == []

    def test_deviation_at_tolerance_passes(self, make_series, shared_character):
        """A deviation of exactly level * 2 is tolerated."""
        series = make_series(characters=[
            shared_character("c", level=5, hit_points=50, constitution=12),
        ])
        assert check_characters(series) == []

    def test_deviation_over_tolerance_warns(self, make_series, shared_character):
        """A deviation past the tolerance warns."""
        series = make_series(characters=[
            shared_character("c", level=5, hit_points=60, constitution=12),
        ])
        issues = check_characters(series)
        assert len(issues) == 1
        assert issues[0].severity == "warning"
        assert "hit points" in issues[0].message

    def test_unrecorded_hit_points_skipped(self, make_series, shared_character):
        """Characters without recorded hit points are not checked."""
        series = make_series(characters=[shared_character("c", level=20)])
        assert check_characters(series) == []


class TestBackstoryLocations:
    """Backstory place names are cross-checked against known locations."""

    def test_unknown_location_is_info(self, make_series, shared_character):
        """A place the series does not define is a note."""
        series = make_series(characters=[
            shared_character("c", backstory="Raised in Stormhold by wolves."),
        ])
        issues = check_characters(series)
        assert len(issues) == 1
        assert issues[0].severity == "info"
        assert "Stormhold" in issues[0].message

    def test_known_location_matches_case_insensitively(self, make_series, shared_character):
        """Location names match regardless of case."""
        series = make_series(
            characters=[shared_character("c", backstory="She was born in Riverton.")],
            locations=[{"id": "l1", "name": "RIVERTON"}],
        )
        assert check_characters(series) == []

    def test_sentence_initial_place_matches_location(self, make_series, shared_character):
        """'From Riverton City ...' matches a defined 'Riverton City'."""
        series = make_series(
            characters=[shared_character("c", backstory="From Riverton City she fled.")],
            locations=[{"id": "l1", "name": "Riverton City"}],
        )
        assert check_characters(series) == []


class TestRelationships:
    """Relationships should be listed on both sides."""

    def test_one_sided_relationship_is_info(self, make_series, shared_character):
        """A relationship not listed back is a note naming both characters."""
        series = make_series(characters=[
            shared_character("a", relationships=["b"]),
            shared_character("b"),
        ])
        issues = check_characters(series)
        assert len(issues) == 1
        assert issues[0].severity == "info"
        assert issues[0].related_ids == ("a", "b")

    def test_mutual_relationship_passes(self, make_series, shared_character):
        """Relationships listed on both sides are fine."""
        series = make_series(characters=[
            shared_character("a", relationships=["b"]),
            shared_character("b", relationships=["a"]),
        ])
        assert check_characters(series) == []

    def test_relationship_to_unknown_character_ignored(self, make_series, shared_character):
        """Targets outside the series are not checked for reciprocity."""
        series = make_series(characters=[shared_character("a", relationships=["ghost"])])
        assert check_characters(series) == []


class TestCleanSeries:
    """The shared clean fixture has no character issues."""

    def test_no_issues(self, make_series):
        """No character issues in the clean fixture."""
        assert check_characters(make_series()) == []
