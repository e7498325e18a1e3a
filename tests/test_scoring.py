"""
Tests for dimension scoring: builder arithmetic, tier ladders, clamping
and the display helpers.
"""

from __future__ import annotations

import pytest

from docforge.errors import ConfigurationError
from docforge.scoring import (
    Dimension,
    DimensionBuilder,
    DimensionScore,
    Tier,
    TierLadder,
    get_grade,
    get_score_color,
    get_score_label,
    rubric_total,
    scaled,
)


QUANTIFIED = TierLadder(
    tiers=(
        Tier(5, 10, "Strong quantification ({value} metrics)"),
        Tier(2, 5, "Some quantification ({value} metrics)"),
        Tier(1, 2, "Only {value} metric", strength=False),
    ),
    fallback="No quantified metrics",
)


class TestDimensionBuilder:

    def test_additive_starts_at_zero(self):
        assert DimensionBuilder(25).build().score == 0

    def test_deductive_starts_at_max(self):
        b = DimensionBuilder(25, deductive=True)
        b.deduct(5, issue="Vague language")
        result = b.build()
        assert result.score == 20
        assert result.issues == ["Vague language"]

    def test_add_records_feedback(self):
        b = DimensionBuilder(25)
        b.add(10, strength="Clear problem")
        b.add(0, issue="No metrics")
        result = b.build()
        assert result.score == 10
        assert result.strengths == ["Clear problem"]
        assert result.issues == ["No metrics"]

    def test_clamped_to_max(self):
        b = DimensionBuilder(10).add(8).add(8)
        assert b.build().score == 10

    def test_clamped_to_zero(self):
        b = DimensionBuilder(10, deductive=True).deduct(6).deduct(6)
        assert b.build().score == 0

    def test_chaining(self):
        result = DimensionBuilder(20).issue("a").strength("b").add(3).build()
        assert (result.score, result.issues, result.strengths) == (3, ["a"], ["b"])


class TestTierLadder:

    def test_first_tier_reached_wins(self):
        b = DimensionBuilder(25)
        assert b.ladder(QUANTIFIED, 7) == 10
        assert b.build().strengths == ["Strong quantification (7 metrics)"]

    def test_middle_tier(self):
        b = DimensionBuilder(25)
        assert b.ladder(QUANTIFIED, 3) == 5

    def test_issue_tier(self):
        b = DimensionBuilder(25)
        b.ladder(QUANTIFIED, 1)
        result = b.build()
        assert result.score == 2
        assert result.issues == ["Only 1 metric"]
        assert result.strengths == []

    def test_fallback(self):
        b = DimensionBuilder(25)
        assert b.ladder(QUANTIFIED, 0) == 0
        assert b.build().issues == ["No quantified metrics"]

    def test_thresholds_must_descend(self):
        with pytest.raises(ConfigurationError):
            TierLadder(tiers=(Tier(1, 2), Tier(5, 10)))


class TestDimension:

    def test_score_stamps_metadata_and_clamps(self):
        dim = Dimension("x", "Example", 10, lambda text: DimensionScore(score=99, max_score=0))
        result = dim.score("anything")
        assert result.score == 10
        assert result.max_score == 10
        assert result.name == "Example"

    def test_zone_aware_receives_zones(self):
        seen = []

        def scorer(text, zones):
            seen.append(zones)
            return DimensionScore(score=1, max_score=5)

        Dimension("z", "Zoned", 5, scorer, zone_aware=True).score("t", ("zone",))
        assert seen == [("zone",)]

    def test_negative_clamped(self):
        dim = Dimension("x", "Example", 10, lambda text: DimensionScore(score=-4, max_score=10))
        assert dim.score("t").score == 0

    def test_rubric_total(self):
        noop = lambda text: DimensionScore(0, 0)  # noqa: E731
        assert rubric_total([Dimension("a", "A", 60, noop), Dimension("b", "B", 40, noop)]) == 100

    def test_to_dict(self):
        dim = DimensionScore(0, 25, issues=["Missing"], name="Clarity")
        assert dim.to_dict() == {
            "name": "Clarity", "score": 0, "max_score": 25, "issues": ["Missing"], "strengths": [],
        }


class TestScaled:

    def test_floor(self):
        assert scaled(25, 0.4) == 10
        assert scaled(25, 0.35) == 8
        assert scaled(25, 0.1) == 2


class TestDisplayHelpers:

    @pytest.mark.parametrize("score,grade", [
        (100, "A"), (90, "A"), (89, "B"), (80, "B"), (70, "C"), (60, "D"), (59, "F"), (0, "F"),
    ])
    def test_grade(self, score, grade):
        assert get_grade(score) == grade

    @pytest.mark.parametrize("score,color", [
        (70, "green"), (69, "yellow"), (50, "yellow"), (49, "orange"), (30, "orange"), (29, "red"),
    ])
    def test_color(self, score, color):
        assert get_score_color(score) == color

    @pytest.mark.parametrize("score,label", [
        (80, "Excellent"), (70, "Ready"), (50, "Needs Work"), (30, "Draft"), (29, "Incomplete"),
    ])
    def test_label(self, score, label):
        assert get_score_label(score) == label
