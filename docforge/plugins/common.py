"""
Shared pattern fragments and helpers used by several document types.
"""

from __future__ import annotations

from typing import Sequence

from docforge.detection import SectionCoverage, detect_sections
from docforge.patterns import PatternRule
from docforge.scoring import DimensionBuilder, Tier, TierLadder


# ============================================================
# PATTERNS
# ============================================================

QUANTIFIED_UNITS = (
    r"%|million|thousand|hour|day|week|month|year|\$|dollar|user|customer"
)

QUANTIFIED = PatternRule(
    "quantified",
    r"\d+\s*(?:" + QUANTIFIED_UNITS + r")",
    "quality",
    indicator="{count} quantified metrics",
)
BUSINESS_FOCUS = PatternRule(
    "business_focus",
    r"\b(?:business|customer|user|market|revenue|profit|competitive|strategic|value)\b",
    "quality",
    indicator="Business/customer focus",
)
ACTIONABLE = PatternRule(
    "actionable",
    r"\b(?:will|shall|must|should|enable|provide|deliver|implement|build|create)\b",
    "quality",
)
MEASURABLE = PatternRule(
    "measurable",
    r"\b(?:measure|metric|kpi|track|monitor|achieve|target|goal)\b",
    "quality",
)
MARKDOWN_HEADING = PatternRule("heading", r"^#+\s+\S", "structure", multiline=True)
NUMBER = PatternRule("number", r"\d+", "quality")


# ============================================================
# HELPERS
# ============================================================

def score_section_coverage(
    b: DimensionBuilder,
    text: str,
    sections: Sequence[PatternRule],
    ladder: TierLadder,
) -> SectionCoverage:
    """
    Award a section-coverage ladder keyed on weighted coverage ratio.

    Tier messages may use {found}, {total} and {missing}.
    """
    coverage = detect_sections(text, sections)
    tier = ladder.evaluate(coverage.ratio)
    fmt = {
        "found": len(coverage.found),
        "total": len(sections),
        "missing": ", ".join(coverage.missing),
    }
    if tier is None:
        if ladder.fallback:
            b.issue(ladder.fallback.format(**fmt))
        return coverage
    b.add(tier.points)
    if tier.message:
        message = tier.message.format(**fmt)
        if tier.strength:
            b.strength(message)
        else:
            b.issue(message)
    return coverage


def coverage_ladder(*tiers: tuple[float, int, str, bool], fallback: str = "") -> TierLadder:
    """Shorthand: coverage_ladder((0.85, 8, "msg", True), (0.6, 4, "msg", False))."""
    return TierLadder(tuple(Tier(t, p, m, s) for t, p, m, s in tiers), fallback=fallback)
