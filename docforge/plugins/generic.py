"""
Generic fallback rubric for documents with no dedicated plugin.

Every dimension draws on the same handful of signals (headings, common
sections, word count and the shared quality patterns) and weights them
differently, so a well-organised, quantified, business-focused draft
scores well whatever its type.
"""

from __future__ import annotations

from docforge.detection import DetectionResult, detect, detect_sections
from docforge.normalize import count_words
from docforge.patterns import PatternCategory, heading_rule
from docforge.plugins.common import ACTIONABLE, BUSINESS_FOCUS, MARKDOWN_HEADING, MEASURABLE, QUANTIFIED
from docforge.registry import DocumentTypePlugin
from docforge.scoring import Dimension, DimensionBuilder, DimensionScore, scaled


MIN_HEADINGS_FOR_STRUCTURE = 3
WORD_COUNT_FULL = 200
WORD_COUNT_PARTIAL = 100
SECTION_COUNT_FULL = 5
SECTION_COUNT_PARTIAL = 3
QUANTIFIED_FULL = 3


COMMON_SECTIONS = (
    heading_rule("Overview", r"executive\s+summary|overview|summary|purpose|introduction", 2),
    heading_rule("Problem", r"problem\s+statement|problem|challenge|pain.?point|current\s+state|background", 2),
    heading_rule("Solution", r"proposed\s+solution|solution|proposal|approach|recommendation", 2),
    heading_rule("Goals", r"goal|objective|benefit|outcome", 1.5),
    heading_rule("Scope", r"scope|in.scope|out.of.scope|boundary", 1.5),
    heading_rule("Metrics", r"success\s+metric|metric|kpi|measure", 1),
    heading_rule("Timeline", r"timeline|milestone|schedule|roadmap|next\s+steps", 1),
    heading_rule("Risks", r"risk|mitigation|assumption|dependenc", 1),
)

QUALITY = PatternCategory("quality", (
    QUANTIFIED,
    BUSINESS_FOCUS,
    ACTIONABLE,
    MEASURABLE,
    MARKDOWN_HEADING,
))


def detect_quality(text: str) -> DetectionResult:
    result = detect(text, QUALITY)
    words = count_words(text)
    result.extra.update({
        "word_count": words,
        "has_structure": result.count("heading") >= MIN_HEADINGS_FOR_STRUCTURE,
        "has_substance": words >= WORD_COUNT_PARTIAL,
        "sections_found": len(detect_sections(text, COMMON_SECTIONS).found),
    })
    return result


# ============================================================
# SIGNALS
# ============================================================
# Each helper awards a fraction of the dimension maximum.

def _structure(b: DimensionBuilder, q: DetectionResult, weight: float) -> None:
    if q.extra["has_structure"]:
        b.add(scaled(b.max_score, weight), strength=f"{q.count('heading')} section headings")
    else:
        b.issue("Add more section headings for clarity")


def _coverage(b: DimensionBuilder, q: DetectionResult, weight: float, text: str) -> None:
    found = q.extra["sections_found"]
    if found >= SECTION_COUNT_FULL:
        b.add(scaled(b.max_score, weight), strength=f"{found}/{len(COMMON_SECTIONS)} common sections present")
    elif found >= SECTION_COUNT_PARTIAL:
        missing = detect_sections(text, COMMON_SECTIONS).missing
        b.add(scaled(b.max_score, weight / 2), issue=f"Missing sections: {', '.join(missing[:3])}")
    else:
        b.issue("Add standard sections: Overview, Problem, Solution, Goals, Scope")


def _substance(b: DimensionBuilder, q: DetectionResult, full: float, partial: float) -> None:
    words = q.extra["word_count"]
    if words >= WORD_COUNT_FULL:
        b.add(scaled(b.max_score, full))
    elif words >= WORD_COUNT_PARTIAL:
        b.add(scaled(b.max_score, partial), issue="Consider adding more detail")
    else:
        b.issue("Content is too brief - add more substance")


def _counted(b: DimensionBuilder, n: int, threshold: int, full: float, partial: float,
             strength: str, partial_issue: str, missing_issue: str) -> None:
    if n >= threshold:
        b.add(scaled(b.max_score, full), strength=strength.format(n=n))
    elif n:
        b.add(scaled(b.max_score, partial), issue=partial_issue)
    else:
        b.issue(missing_issue)


# ============================================================
# SCORERS
# ============================================================

def score_structure(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    q = detect_quality(text)
    _structure(b, q, 0.4)
    _coverage(b, q, 0.4, text)
    _substance(b, q, 0.2, 0.1)
    return b.build()


def score_clarity(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    q = detect_quality(text)
    _counted(b, q.count("actionable"), 3, 0.4, 0.2,
             "{n} actionable statements",
             "Make more statements actionable (will, deliver, implement)",
             "State what will be done - add actionable language")
    _counted(b, q.count("quantified"), QUANTIFIED_FULL, 0.35, 0.2,
             "{n} quantified details",
             "Add more quantified data (numbers, percentages, metrics)",
             "Include specific numbers and metrics")
    _structure(b, q, 0.25)
    return b.build()


def score_completeness(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    q = detect_quality(text)
    _coverage(b, q, 0.5, text)
    _substance(b, q, 0.5, 0.3)
    return b.build()


def score_business_value(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    q = detect_quality(text)
    _counted(b, q.count("business_focus"), 3, 0.4, 0.2,
             "Business/customer focus ({n} references)",
             "Strengthen the business or customer angle",
             "Explain the business or customer value")
    _counted(b, q.count("measurable"), 2, 0.3, 0.15,
             "Measurable outcomes defined",
             "Add more measurable targets or KPIs",
             "Define how success will be measured")
    _counted(b, q.count("quantified"), QUANTIFIED_FULL, 0.3, 0.15,
             "{n} quantified metrics",
             "Quantify more of the expected value",
             "Quantify the expected value with numbers")
    return b.build()


PLUGIN = DocumentTypePlugin(
    id="generic",
    name="Generic Document",
    description="Fallback rubric built from common sections and content-quality signals",
    rubric=(
        Dimension("structure", "Structure", 25, score_structure,
                  "Headings, common sections, enough substance"),
        Dimension("clarity", "Clarity", 25, score_clarity,
                  "Actionable, quantified statements"),
        Dimension("completeness", "Completeness", 25, score_completeness,
                  "Common section coverage and detail"),
        Dimension("business_value", "Business Value", 25, score_business_value,
                  "Business focus, measurable and quantified outcomes"),
    ),
    detectors={
        "sections": lambda text: detect_sections(text, COMMON_SECTIONS),
        "quality": detect_quality,
    },
)
