"""
Acceptance Criteria Rubric

Scoring Dimensions (100 pts total):
  1. Structure (25)      — Summary, checkbox criteria, Out of Scope
  2. Clarity (30)        — action verbs, measurable metrics with units
  3. Testability (25)    — deductive: vague terms, user-story / Gherkin
                           syntax, compound criteria, implementation details
  4. Completeness (20)   — criterion count, error / edge cases, sections

Criteria are expected as plain "- [ ]" checkboxes, each binary verifiable.
"""

from __future__ import annotations

import re

from docforge.detection import DetectionResult, detect, detect_sections
from docforge.patterns import PatternCategory, PatternRule, compile_pattern, heading_rule
from docforge.registry import DocumentTypePlugin
from docforge.scoring import Dimension, DimensionBuilder, DimensionScore, Tier, TierLadder


# ============================================================
# PATTERNS
# ============================================================

REQUIRED_SECTIONS = (
    heading_rule("Summary", r"summary", 3),
    heading_rule("Acceptance Criteria", r"acceptance\s+criteria", 4),
    heading_rule("Out of Scope", r"out\s+of\s+scope", 2),
)

CHECKBOX = PatternRule("checkbox", r"^\s*-\s*\[\s*[xX ]?\s*\]", "structure", multiline=True,
                       indicator="{count} checkbox criteria")

STRUCTURE = PatternCategory("structure", (
    heading_rule("summary", r"summary", category="structure"),
    CHECKBOX,
    heading_rule("out_of_scope", r"out\s+of\s+scope", category="structure"),
))

CLARITY = PatternCategory("clarity", (
    PatternRule(
        "action_verbs",
        r"\b(?:implement|create|build|render|handle|display|show|hide|enable|disable|validate|submit|load"
        r"|save|delete|update|fetch|send|receive|trigger|navigate|redirect|authenticate|authorize)\b",
        "clarity",
        indicator="{count} action verbs",
    ),
    PatternRule(
        "metrics",
        r"(?:(?:≤|≥|<|>|=|under|within|less than|more than|at least|at most)\s*)?\d+(?:\.\d+)?\s*"
        r"(?:ms|milliseconds?|seconds?|s|%|percent|kb|mb|gb|tb|px|items?|users?|requests?|errors?|days?"
        r"|hours?|minutes?|calls?|connections?|records?|retries?|attempts?|rows?|entries?|results?"
        r"|pages?|clicks?|taps?|events?)\b",
        "clarity",
        indicator="{count} measurable metrics",
    ),
    PatternRule(
        "thresholds",
        r"\b(?:exactly|at least|at most|maximum|minimum|up to|no more than|no less than)\s+\d+",
        "clarity",
        indicator="Specific thresholds defined",
    ),
))

TESTABILITY = PatternCategory("testability", (
    PatternRule(
        "vague_terms",
        r"\b(?:works?\s+correctly|handles?\s+properly|appropriate(?:ly)?|intuitive(?:ly)?|user[- ]friendly"
        r"|seamless(?:ly)?|fast|slow|good|bad|nice|better|worse|adequate(?:ly)?|sufficient(?:ly)?"
        r"|reasonable|reasonably|acceptable|properly|correctly|as\s+expected|as\s+needed)\b",
        "testability",
        indicator="{count} vague terms found",
    ),
    PatternRule(
        "user_story",
        r"\bas\s+(?:a|an|the)\s+[\w ]{1,60}?,?\s*i\s+want",
        "testability",
        indicator="User story syntax detected (use checkboxes instead)",
    ),
    PatternRule(
        "gherkin",
        r"^\s*(?:-\s*\[\s*[xX ]?\s*\]\s*)?(?:given|when|then)\s",
        "testability",
        multiline=True,
        indicator="Gherkin syntax detected (use simple checkboxes)",
    ),
    PatternRule(
        "compound",
        r"^\s*-\s*\[\s*[xX ]?\s*\][^\n]{0,300}?\b(?:and|or)\b",
        "testability",
        multiline=True,
        indicator="Compound criteria found (split into separate items)",
    ),
    PatternRule(
        "implementation",
        r"\b(?:postgres(?:ql)?|mysql|mongodb|redis|sql|react|vue|angular|svelte|tailwind|css|scss|sass|aws"
        r"|lambda|s3|ec2|gcp|azure|docker|kubernetes|k8s|api\s+endpoint|microservice|graphql|rest\s+api"
        r"|webpack|vite|npm|yarn)\b",
        "testability",
        indicator="Implementation details found: {terms}",
    ),
))

COMPLETENESS = PatternCategory("completeness", (
    CHECKBOX,
    PatternRule(
        "error_cases",
        r"\b(?:error|fail|invalid|empty|null|undefined|missing|timeout|offline|denied|unauthorized"
        r"|forbidden|not found|exception)\b",
        "completeness",
        indicator="Error cases covered",
    ),
    PatternRule(
        "edge_cases",
        r"\b(?:edge\s+case|boundary\s+condition|boundary\s+value|upper\s+limit|lower\s+limit"
        r"|maximum\s+value|minimum\s+value|empty\s+state|no\s+results|only\s+one|zero\s+items?|overflow"
        r"|underflow|race\s+condition|concurrent|simultaneous)\b",
        "completeness",
        indicator="Edge cases addressed",
    ),
    PatternRule("permissions",
                r"\b(?:permission|role|admin|user|guest|authenticated|logged in|logged out)\b", "completeness"),
))

ACTION_VERB_LADDER = TierLadder((
    Tier(5, 15, "{value} action verbs for testable behavior"),
    Tier(3, 10, "{value} action verbs found"),
    Tier(1, 5, "Add more action verbs (implement, create, display, validate, etc.)", strength=False),
), fallback="Missing action verbs - criteria should describe testable behavior")

METRICS_LADDER = TierLadder((
    Tier(3, 15, "{value} measurable metrics with units"),
    Tier(1, 8, "Add more measurable metrics (time limits, percentages, counts)", strength=False),
), fallback="No measurable metrics - add specific numbers with units")

_WHITESPACE = compile_pattern("whitespace", r"\s+")


# ============================================================
# DETECTORS
# ============================================================

def detect_structure(text: str) -> DetectionResult:
    return detect(text, STRUCTURE)


def detect_clarity(text: str) -> DetectionResult:
    return detect(text, CLARITY)


def detect_testability(text: str) -> DetectionResult:
    result = detect(text, TESTABILITY)
    result.extra["has_issues"] = result.total("vague_terms", "user_story", "gherkin", "implementation") > 0
    return result


def detect_completeness(text: str) -> DetectionResult:
    result = detect(text, COMPLETENESS)
    count = result.count("checkbox")
    if 3 <= count <= 7:
        result.indicators.append("Good criterion count (3-7)")
    elif count < 3:
        result.indicators.append("Too few criteria (add more)")
    else:
        result.indicators.append("Too many criteria (consider splitting)")
    return result


# ============================================================
# SCORERS
# ============================================================

def score_structure(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    s = detect_structure(text)
    if s.has("summary"):
        b.add(10, strength="Summary section present")
    else:
        b.issue("Add a Summary section describing the feature/change")

    boxes = s.count("checkbox")
    if boxes >= 3:
        b.add(10, strength=f"{boxes} checkbox criteria found")
    elif boxes:
        b.add(5, issue="Add more checkbox criteria (recommend 3-7)")
    else:
        b.issue('Missing checkbox criteria - use "- [ ]" format')

    if s.has("out_of_scope"):
        b.add(5, strength="Out of Scope section present")
    else:
        b.issue("Add Out of Scope section to set clear boundaries")
    return b.build()


def score_clarity(text: str) -> DimensionScore:
    b = DimensionBuilder(30)
    c = detect_clarity(text)
    b.ladder(ACTION_VERB_LADDER, c.count("action_verbs"))
    b.ladder(METRICS_LADDER, c.count("metrics"))
    return b.build()


def score_testability(text: str) -> DimensionScore:
    b = DimensionBuilder(25, deductive=True)
    t = detect_testability(text)

    vague = t.count("vague_terms")
    terms = [_WHITESPACE.sub(" ", v) for v in t.found("vague_terms")]
    if not vague:
        b.strength("No vague terms - criteria are specific")
    elif vague <= 2:
        b.deduct(5, issue=f"Remove vague terms: {', '.join(terms[:2])}")
    else:
        b.deduct(15, issue=f"{vague} vague terms found: {', '.join(terms[:3])}")

    if t.has("user_story"):
        b.deduct(5, issue="Remove user story syntax - use simple checkboxes instead")
    if t.has("gherkin"):
        b.deduct(5, issue="Remove Given/When/Then syntax - use simple checkboxes")
    if t.has("compound"):
        b.deduct(3, issue="Split compound criteria (and/or) into separate items")
    if t.has("implementation"):
        b.deduct(5, issue=f"Remove implementation details: {', '.join(t.found('implementation')[:3])}")

    if not t.extra["has_issues"] and not t.has("compound"):
        b.strength("All criteria are binary verifiable")
    return b.build()


def score_completeness(text: str) -> DimensionScore:
    b = DimensionBuilder(20)
    c = detect_completeness(text)

    count = c.count("checkbox")
    if 3 <= count <= 7:
        b.add(8, strength=f"{count} criteria (ideal range 3-7)")
    elif count > 7:
        b.add(4, issue="Too many criteria - consider splitting into smaller stories")
    elif count:
        b.add(4, issue="Add more criteria (recommend 3-7 per story)")
    else:
        b.issue("No checkbox criteria found")

    if c.has("error_cases") and c.has("edge_cases"):
        b.add(6, strength="Error states and edge cases addressed")
    elif c.has("error_cases") or c.has("edge_cases"):
        b.add(3, issue="Consider adding more error/edge case handling")
    else:
        b.issue("Add error handling and edge case criteria")

    sections = detect_sections(text, REQUIRED_SECTIONS)
    if sections.ratio >= 0.9:
        b.add(6, strength=f"{len(sections.found)}/{len(REQUIRED_SECTIONS)} sections present")
    elif sections.ratio >= 0.6:
        b.add(3, issue=f"Missing sections: {', '.join(sections.missing)}")
    else:
        b.issue("Add required sections: Summary, Acceptance Criteria, Out of Scope")
    return b.build()


PLUGIN = DocumentTypePlugin(
    id="acceptance-criteria",
    name="Acceptance Criteria",
    description="Binary, testable checkbox criteria for a user story or change",
    rubric=(
        Dimension("structure", "Structure", 25, score_structure,
                  "Summary, checkbox criteria, Out of Scope"),
        Dimension("clarity", "Clarity", 30, score_clarity,
                  "Action verbs and measurable metrics"),
        Dimension("testability", "Testability", 25, score_testability,
                  "No vague terms, anti-patterns or implementation details"),
        Dimension("completeness", "Completeness", 20, score_completeness,
                  "Criterion count, error and edge cases"),
    ),
    detectors={
        "sections": lambda text: detect_sections(text, REQUIRED_SECTIONS),
        "structure": detect_structure,
        "clarity": detect_clarity,
        "testability": detect_testability,
        "completeness": detect_completeness,
    },
)
