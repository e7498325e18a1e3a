"""
Tests for the pattern layer: safety validation, phrase builders,
detectors and exclusion zones.

Every rule in the engine goes through check_pattern_safety, so a
regression here is a regression everywhere.
"""

from __future__ import annotations

import pytest

from docforge.detection import detect, detect_sections, distinct_terms
from docforge.errors import ConfigurationError, UnsafePatternError
from docforge.patterns import (
    PatternCategory,
    PatternRule,
    appears_in_zones,
    check_pattern_safety,
    compile_pattern,
    heading_rule,
    phrase_pattern,
    phrase_rule,
    strip_exclusion_zones,
)


# ============================================================
# SAFETY VALIDATION
# ============================================================

class TestPatternSafety:
    """Shapes with non-linear worst cases are refused at construction."""

    @pytest.mark.parametrize("pattern", [
        r"(\w+\s?)+",
        r"(a+)*",
        r"(?:\d+,?)+",
        r"(x|y+){2,}",
    ])
    def test_nested_unbounded_rejected(self, pattern):
        with pytest.raises(UnsafePatternError) as exc:
            check_pattern_safety("nested", pattern)
        assert exc.value.reason == "nested unbounded quantifier"

    @pytest.mark.parametrize("pattern", [r"from.*to", r"if.+fails", r"a.*?b"])
    def test_unbounded_dot_rejected(self, pattern):
        with pytest.raises(UnsafePatternError) as exc:
            check_pattern_safety("dot", pattern)
        assert exc.value.reason == "unbounded dot wildcard"

    @pytest.mark.parametrize("pattern", [
        r"from.{0,80}to",
        r"[^\n]{0,120}",
        r"\$[\d,]{1,20}",
        r"(?:a|b)+",
        r"(?:\d+)?",
        r"(?<!\w)(?:very|really)(?!\w)",
        r"\w+ed\b",
        r"(?P<num>\d+)%",
    ])
    def test_bounded_shapes_accepted(self, pattern):
        check_pattern_safety("ok", pattern)

    @pytest.mark.parametrize("pattern", [
        r"\s*\n+\s*",
        r"[ \t]*\s+",
        r"\w+\d*",
        r"[-\s]+\s*",
    ])
    def test_adjacent_overlapping_rejected(self, pattern):
        with pytest.raises(UnsafePatternError) as exc:
            check_pattern_safety("adjacent", pattern)
        assert exc.value.reason == "adjacent overlapping quantifiers"

    @pytest.mark.parametrize("pattern", [
        r"[ \t]*\n[ \t\n]*",
        r"\d+\s*(?:%|percent)",
        r"#+\s*",
        r"\d+\.?\d*",
        r"[A-Z]{2,}[,\s]+",
        r"\s*|\s+",
    ])
    def test_adjacent_disjoint_accepted(self, pattern):
        check_pattern_safety("ok", pattern)

    def test_unbalanced_parenthesis(self):
        with pytest.raises(UnsafePatternError):
            check_pattern_safety("open", r"(abc")
        with pytest.raises(UnsafePatternError):
            check_pattern_safety("close", r"abc)")

    def test_error_message_names_rule(self):
        with pytest.raises(UnsafePatternError) as exc:
            PatternRule("greedy_rule", r".+")
        assert "greedy_rule" in str(exc.value)
        assert exc.value.pattern == r".+"

    def test_unsafe_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            PatternRule("bad", r"(\w+)+")

    def test_uncompilable_pattern(self):
        with pytest.raises(ConfigurationError, match="does not compile"):
            PatternRule("broken", r"[abc")

    def test_compile_pattern_checks_safety(self):
        with pytest.raises(UnsafePatternError):
            compile_pattern("qa", r"Q:(.{1,500}?)\s*\n+\s*A:")
        compiled = compile_pattern("qa", r"Q:([^\n]{1,500}?)[ \t]*\n[ \t\n]*A:")
        assert compiled.search("Q: why?\n\n  A: because").group(1) == " why?"


# ============================================================
# RULES AND CATEGORIES
# ============================================================

class TestPatternRule:

    def test_case_insensitive_by_default(self):
        rule = PatternRule("roi", r"\broi\b")
        assert rule.count("ROI and roi and Roi") == 3

    def test_case_sensitive(self):
        rule = PatternRule("acronym", r"\bROI\b", case_sensitive=True)
        assert rule.count("ROI and roi") == 1

    def test_multiline_anchor(self):
        rule = PatternRule("bullet", r"^- ", multiline=True)
        assert rule.count("- one\n- two\ntext - not") == 2

    def test_findall_returns_full_matches(self):
        rule = PatternRule("pct", r"\d{1,3}%")
        assert rule.findall("cut 30% then 5%") == ["30%", "5%"]

    def test_search(self):
        rule = PatternRule("pct", r"\d{1,3}%")
        assert rule.search("about 40%")
        assert not rule.search("about forty percent")

    def test_rule_is_frozen(self):
        rule = PatternRule("x", r"x")
        with pytest.raises(Exception):
            rule.name = "y"


class TestPatternCategory:

    def test_duplicate_rule_names_rejected(self):
        with pytest.raises(ConfigurationError, match="duplicate"):
            PatternCategory("dup", (PatternRule("a", "a"), PatternRule("a", "b")))

    def test_rule_lookup(self):
        cat = PatternCategory("c", (PatternRule("a", "a"), PatternRule("b", "b")))
        assert cat.rule("b").pattern == "b"
        with pytest.raises(KeyError):
            cat.rule("missing")

    def test_total_weight(self):
        cat = PatternCategory("c", (
            PatternRule("a", "a", weight=2),
            PatternRule("b", "b", weight=1.5),
        ))
        assert cat.total_weight == 3.5


# ============================================================
# BUILDERS
# ============================================================

class TestPhraseRule:
    """Phrase lists are data: escaped, longest-first, word-anchored."""

    def test_metacharacters_escaped(self):
        rule = phrase_rule("odd", ["absolutely!", "fp&a", "c++"])
        assert rule.findall("Absolutely! The FP&A team") == ["Absolutely!", "FP&A"]

    def test_longest_phrase_wins(self):
        rule = phrase_rule("filler", ["in order", "in order to"])
        assert rule.findall("in order to ship") == ["in order to"]

    def test_word_anchored(self):
        rule = phrase_rule("booster", ["very"])
        assert rule.count("everything is very good") == 1

    def test_flexible_separators(self):
        rule = phrase_rule("pace", ["fast-paced"], flexible_separators=True)
        assert rule.count("fast paced and fast-paced and fast - paced") == 3

    def test_strict_separators(self):
        rule = phrase_rule("pace", ["fast-paced"])
        assert rule.count("fast paced") == 0

    def test_empty_list_rejected(self):
        with pytest.raises(ConfigurationError):
            phrase_pattern(["", "   "])

    def test_duplicates_collapsed(self):
        assert phrase_pattern(["Robust", "robust"]) == phrase_pattern(["robust"])


class TestHeadingRule:

    def test_markdown_heading(self):
        rule = heading_rule("problem", r"problem(?: statement)?")
        assert rule.search("# Intro\n## Problem Statement\nText")

    def test_numbered_heading(self):
        rule = heading_rule("problem", r"problem")
        assert rule.search("2. Problem\nText")
        assert rule.search("### 2.1 Problem")

    def test_mid_sentence_is_not_a_heading(self):
        rule = heading_rule("problem", r"problem")
        assert not rule.search("The problem is that nobody reads it.")

    def test_category_and_weight(self):
        rule = heading_rule("goals", r"goals?", weight=1.5)
        assert rule.category == "section"
        assert rule.weight == 1.5
        assert rule.multiline


# ============================================================
# DETECTORS
# ============================================================

class TestDetect:

    CATEGORY = PatternCategory("metrics", (
        PatternRule("percent", r"\d{1,3}%", indicator="{count} percentages ({terms})"),
        PatternRule("dollars", r"\$[\d,]{1,20}"),
    ))

    def test_counts_terms_indicators(self):
        result = detect("Cut 30% and then 20% more, saving $5,000.", self.CATEGORY)
        assert result.count("percent") == 2
        assert result.found("percent") == ["30%", "20%"]
        assert result.has("dollars")
        assert result.indicators == ["2 percentages (30%, 20%)"]
        assert result.total() == 3
        assert result.total("dollars") == 1

    def test_empty_text_keeps_every_rule(self):
        result = detect("", self.CATEGORY)
        assert result.counts == {"percent": 0, "dollars": 0}
        assert result.indicators == []
        assert not result.has("percent")

    def test_to_dict_flags(self):
        data = detect("up 10%", self.CATEGORY).to_dict()
        assert data["category"] == "metrics"
        assert data["flags"] == {"percent": True, "dollars": False}
        assert data["counts"]["percent"] == 1

    def test_distinct_terms(self):
        assert distinct_terms(["Very", "very", "VERY  good", "very good"]) == ["very", "very good"]

    def test_fresh_result_per_call(self):
        a = detect("10%", self.CATEGORY)
        b = detect("nothing", self.CATEGORY)
        assert a.count("percent") == 1
        assert b.count("percent") == 0


class TestDetectSections:

    SECTIONS = (
        heading_rule("Problem", r"problem", weight=2),
        heading_rule("Solution", r"solution", weight=2),
        heading_rule("Risks", r"risks?", weight=1),
    )

    def test_found_and_missing(self):
        coverage = detect_sections("## Problem\nx\n## Risks\ny", self.SECTIONS)
        assert coverage.found == ["Problem", "Risks"]
        assert coverage.missing == ["Solution"]
        assert coverage.found_weight == 3
        assert coverage.total_weight == 5
        assert coverage.ratio == pytest.approx(0.6)

    def test_empty_text(self):
        coverage = detect_sections("", self.SECTIONS)
        assert coverage.found == []
        assert coverage.ratio == 0.0
        assert coverage.to_dict()["coverage"] == 0.0


# ============================================================
# EXCLUSION ZONES
# ============================================================

class TestExclusionZones:
    """Mandated boilerplate is removed before scoring and kept for lookups."""

    def test_preamble_removed(self):
        text = "Intro\n[COMPANY_PREAMBLE]We value integrity.[/COMPANY_PREAMBLE]\nBody"
        result = strip_exclusion_zones(text)
        assert result.clean_text == "Intro\n\nBody"
        assert len(result.zones) == 1
        assert result.zones[0].kind == "preamble"
        assert result.zones[0].content == "We value integrity."

    def test_markers_case_insensitive(self):
        text = "A [company_legal_text]Equal opportunity employer.[/Company_Legal_Text] B"
        result = strip_exclusion_zones(text)
        assert result.clean_text == "A  B"
        assert result.zones[0].kind == "legal"

    def test_both_kinds_and_repeats(self):
        text = (
            "[COMPANY_PREAMBLE]one[/COMPANY_PREAMBLE] mid "
            "[COMPANY_PREAMBLE]two[/COMPANY_PREAMBLE] "
            "[COMPANY_LEGAL_TEXT]three[/COMPANY_LEGAL_TEXT]"
        )
        result = strip_exclusion_zones(text)
        assert [z.content for z in result.zones] == ["one", "two", "three"]
        assert "COMPANY" not in result.clean_text

    def test_unclosed_marker_left_in_place(self):
        text = "Start [COMPANY_PREAMBLE] never closed"
        result = strip_exclusion_zones(text)
        assert result.clean_text == text
        assert result.zones == ()

    def test_no_zones(self):
        result = strip_exclusion_zones("Plain text")
        assert result.clean_text == "Plain text"
        assert result.zones == ()

    def test_appears_in_zones(self):
        zones = strip_exclusion_zones(
            "[COMPANY_LEGAL_TEXT]We are a Fast-Paced company.[/COMPANY_LEGAL_TEXT]"
        ).zones
        assert appears_in_zones("fast-paced", zones)
        assert not appears_in_zones("rockstar", zones)
        assert not appears_in_zones("fast-paced", ())
