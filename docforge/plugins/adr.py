"""
ADR (Architecture Decision Record) Rubric

Scoring Dimensions (100 pts total):
  1. Context (25)        — problem framing, constraints, business focus, decision drivers
  2. Decision (25)       — explicit "we will" statement, alternatives, rationale
  3. Consequences (25)   — balanced positive/negative impacts, team factors, follow-ups
  4. Status (25)         — status value, date, section completeness

Decision Drivers and Confirmation follow MADR 3.0. Vague decision phrases
("improve scalability") and vague consequence terms ("complexity") are
deducted.
"""

from __future__ import annotations

import re

from docforge.detection import DetectionResult, detect, detect_sections
from docforge.normalize import extract_section
from docforge.patterns import PatternCategory, PatternRule, compile_pattern, heading_rule
from docforge.registry import DocumentTypePlugin
from docforge.scoring import Dimension, DimensionBuilder, DimensionScore


# ============================================================
# PATTERNS
# ============================================================

REQUIRED_SECTIONS = (
    heading_rule("Context", r"context|background|problem|situation", 2),
    heading_rule("Decision Drivers", r"decision\s+driver|driver", 1.5),
    heading_rule("Decision", r"decision|choice|selected|chosen", 2),
    heading_rule("Consequences", r"consequence|impact|result|outcome|implication", 2),
    heading_rule("Status", r"status|state", 2),
    heading_rule("Options Considered", r"option|alternative|considered", 1),
    heading_rule("Rationale", r"rationale|reason|justification|why", 1),
    heading_rule("Confirmation", r"confirmation|validation|verification", 1),
)

CONTEXT = PatternCategory("context", (
    heading_rule("context_section", r"context|background|problem|situation|why", category="context"),
    PatternRule(
        "context_language",
        r"\b(?:context|background|problem|situation|challenge|need|requirement|constraint|driver|force)\b",
        "context",
        indicator="Context framing language",
    ),
    PatternRule(
        "constraints",
        r"\b(?:constraint|limitation|requirement|must|should|cannot|restriction|boundary)\b",
        "context",
        indicator="{count} constraints identified",
    ),
    PatternRule(
        "quantified",
        r"\d+\s*(?:%|million|thousand|hour|day|week|month|year|\$|dollar|user|customer|transaction)",
        "context",
        indicator="{count} quantified metrics",
    ),
    PatternRule(
        "business_focus",
        r"\b(?:business|customer|user|market|revenue|profit|competitive|strategic|value|stakeholder)\b",
        "context",
        indicator="Business/stakeholder focus",
    ),
))

DECISION = PatternCategory("decision", (
    heading_rule("decision_section", r"decision|choice|selected|chosen|we.will", category="decision"),
    PatternRule("decision_language",
                r"\b(?:decide|decision|choose|chose|select|selected|adopt|use|implement|will)\b", "decision"),
    PatternRule("clarity", r"\b(?:we.will|we.have.decided|the.decision.is|we.chose|we.selected)\b",
                "decision", indicator="Clear decision statement"),
    PatternRule("specificity", r"\b(?:specifically|exactly|precisely|concretely|particular)\b", "decision"),
    PatternRule("action_verbs", r"\b(?:use|adopt|implement|migrate|split|combine|establish|enforce)\b",
                "decision", indicator="{count} action verbs used"),
    PatternRule(
        "vague_decision",
        r"\b(?:strategic\s+approach|architectural\s+intervention|improve\s+scalability|more\s+maintainable"
        r"|better\s+architecture|enhance\s+performance|optimize\s+the\s+system|modernize\s+the\s+platform"
        r"|transform\s+the\s+infrastructure)\b",
        "decision",
        indicator="{count} vague decision phrases ({terms})",
    ),
))

OPTIONS = PatternCategory("options", (
    heading_rule("options_section", r"option|alternative|considered|candidate", category="options"),
    PatternRule("options_language",
                r"\b(?:option|alternative|candidate|possibility|approach|solution|choice)\b", "options"),
    PatternRule(
        "comparison",
        r"\b(?:compare|versus|vs|pro|con|advantage|disadvantage|trade.?off|benefit|drawback)\b",
        "options",
        indicator="Options compared",
    ),
    PatternRule("rejected", r"\b(?:reject|not.chosen|ruled.out|dismissed|discarded|eliminated)\b", "options",
                indicator="Rejected options explained"),
    PatternRule(
        "explicit_alternatives",
        r"\bwe considered\s[^.\n]{1,300}?,[^.\n]{0,300}?\bbut\s+(?:chose|selected|decided|went with)\b",
        "options",
        indicator='"We considered X but chose Y" comparison',
    ),
))

CONSEQUENCES = PatternCategory("consequences", (
    heading_rule("consequences_section", r"consequence|impact|result|outcome|implication",
                 category="consequences"),
    PatternRule("consequences_language",
                r"\b(?:consequence|impact|result|outcome|implication|effect|affect)\b", "consequences"),
    PatternRule(
        "positive",
        r"\b(?:benefit|advantage|improve|enable|allow|simplify|reduce|faster|easier|better|scalable"
        r"|maintainable|testable|decoupled|independent|automated)\b",
        "consequences",
        indicator="{count} positive consequences",
    ),
    PatternRule(
        "negative",
        r"\b(?:drawback|disadvantage|risk|cost|slower|harder|worse|trade.?off|latency|coupling|dependency"
        r"|bottleneck|single.point.of.failure|migration.effort)\b",
        "consequences",
        indicator="{count} negative consequences",
    ),
    PatternRule("neutral", r"\b(?:change|require|need|must|will.need|migration|update)\b", "consequences"),
    PatternRule(
        "vague_consequences",
        r"\b(?:complexity|overhead|difficult|challenging|problematic|issues?|concerns?)\b",
        "consequences",
        indicator="{count} vague terms (complexity/overhead)",
    ),
    PatternRule(
        "team_factors",
        r"training[^\n]{0,80}need|skill gap|hiring impact|team ramp|learning curve|expertise required"
        r"|onboarding|team structure|hiring|staffing",
        "consequences",
    ),
    PatternRule(
        "subsequent",
        r"subsequent ADR|follow-on ADR|triggers ADR|future ADR|ADR-\d+"
        r"|triggers[^\n]{0,80}(?:decision|choice)[^\n]{0,80}(?:on|for|about|regarding)\s+\w",
        "consequences",
    ),
    PatternRule(
        "review_timing",
        r"\b\d+\s*(?:days?|weeks?|months?)\s*(?:review|reassess|revisit)|after-action"
        r"|review[^\n]{0,60}timing|recommended[^\n]{0,60}review|review in \d+|quarterly\s+review|annual\s+review",
        "consequences",
    ),
))

STATUS = PatternCategory("status", (
    heading_rule("status_section", r"status|state", category="status"),
    PatternRule(
        "status_values",
        r"\b(?:proposed|accepted|deprecated|superseded|rejected|draft|approved|implemented)\b",
        "status",
        indicator="Status: {terms}",
    ),
    PatternRule(
        "date",
        r"\b(?:\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{2,4}|january|february|march|april|may|june|july"
        r"|august|september|october|november|december)\b",
        "status",
        indicator="Date information present",
    ),
    PatternRule("superseded_by", r"\b(?:superseded.by|replaced.by|see.also|successor)\b", "status",
                indicator="Supersession reference"),
))

RATIONALE = PatternCategory("rationale", (
    heading_rule("rationale_section", r"rationale|reason|justification|why", category="rationale"),
    PatternRule(
        "rationale_language",
        r"\b(?:because|reason|rationale|justification|why|due.to|since|therefore|thus)\b",
        "rationale",
        indicator="{count} rationale statements",
    ),
    PatternRule(
        "evidence",
        r"\b(?:evidence|data|research|study|benchmark|test|experiment|proof|demonstrate)\b",
        "rationale",
        indicator="Evidence-based reasoning",
    ),
))

DRIVERS = PatternCategory("decision_drivers", (
    PatternRule("section_header", r"^#+\s*decision\s+drivers?\b", "drivers", multiline=True,
                indicator="Dedicated Decision Drivers section"),
    PatternRule("driver_language",
                r"\b(?:driver|force|concern|quality|constraint|requirement|consideration)\b", "drivers"),
))

CONFIRMATION = PatternCategory("confirmation", (
    PatternRule("section_header", r"^#+\s*confirmation\b", "confirmation", multiline=True,
                indicator="Dedicated Confirmation section"),
    heading_rule("section", r"confirmation|validation|verification|compliance", category="confirmation"),
    PatternRule(
        "validation_language",
        r"\b(?:confirm|validate|verify|review|test|audit|check|compliance|DCAR|architecture review"
        r"|code review|load test)\b",
        "confirmation",
        indicator="{count} validation mechanisms",
    ),
    PatternRule("measurable", r"\b(?:metric|threshold|baseline|target|criteria|pass|fail)\b", "confirmation",
                indicator="Measurable criteria specified"),
))

_DRIVERS_HEADING = compile_pattern(
    "drivers_heading", r"^#+\s*decision\s+drivers?\b", re.IGNORECASE)
_LIST_ITEM = compile_pattern("list_item", r"^[ \t]*(?:[-*•]|\d+\.)[ \t]+\S", re.MULTILINE)


# ============================================================
# DETECTORS
# ============================================================

def detect_context(text: str) -> DetectionResult:
    return detect(text, CONTEXT)


def detect_decision(text: str) -> DetectionResult:
    return detect(text, DECISION)


def detect_options(text: str) -> DetectionResult:
    return detect(text, OPTIONS)


def detect_consequences(text: str) -> DetectionResult:
    return detect(text, CONSEQUENCES)


def detect_status(text: str) -> DetectionResult:
    return detect(text, STATUS)


def detect_rationale(text: str) -> DetectionResult:
    return detect(text, RATIONALE)


def detect_decision_drivers(text: str) -> DetectionResult:
    """Driver count is the number of list items under a "Decision Drivers" heading."""
    result = detect(text, DRIVERS)
    section = extract_section(text, _DRIVERS_HEADING) or ""
    drivers = len(_LIST_ITEM.findall(section))
    result.extra["drivers_count"] = drivers
    result.extra["has_minimum_drivers"] = drivers >= 3
    if drivers:
        result.indicators.append(f"{drivers} drivers listed")
    return result


def detect_confirmation(text: str) -> DetectionResult:
    return detect(text, CONFIRMATION)


# ============================================================
# SCORERS
# ============================================================

def score_context(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    ctx = detect_context(text)

    if ctx.has("context_section") and ctx.has("context_language"):
        b.add(10, strength="Clear context section with problem framing")
    elif ctx.has("context_language"):
        b.add(5, issue="Context mentioned but lacks dedicated section")
    else:
        b.issue("Context section missing - explain the situation and problem")

    constraints = ctx.count("constraints")
    if constraints >= 2:
        b.add(8, strength=f"{constraints} constraints/drivers identified")
    elif constraints:
        b.add(4, issue="Some constraints mentioned - add more specific requirements and limitations")
    else:
        b.issue("Constraints missing - list requirements, limitations, and forces")

    if ctx.has("business_focus"):
        b.add(5, strength="Context tied to business/stakeholder needs")
    else:
        b.issue("Add business context - explain why this matters to stakeholders")

    drivers = detect_decision_drivers(text)
    count = drivers.extra["drivers_count"]
    if drivers.has("section_header") and count >= 3:
        b.add(5, strength=f"Decision Drivers section with {count} drivers (MADR 3.0)")
    elif drivers.has("section_header"):
        b.add(2, issue=f"Decision Drivers section has only {count} drivers - need 3+ (MADR 3.0)")
    elif drivers.has("driver_language"):
        b.add(1, issue="Decision drivers mentioned but missing dedicated section (MADR 3.0)")
    else:
        b.issue("Missing Decision Drivers section - list 3-5 forces/constraints (MADR 3.0)")
    return b.build()


def score_decision(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    decision = detect_decision(text)
    options = detect_options(text)
    rationale = detect_rationale(text)

    if decision.has("decision_section") and decision.has("clarity"):
        b.add(10, strength="Decision clearly stated with dedicated section")
    elif decision.has("decision_language"):
        b.add(5, issue='Decision mentioned but could be clearer - use "We will..." format')
    else:
        b.issue("Decision statement missing - clearly state what was decided")

    if decision.has("vague_decision"):
        b.deduct(5, issue=(f"Vague decision detected ({decision.count('vague_decision')} phrases) - "
                           "be specific about technology/pattern choice"))

    verbs = decision.count("action_verbs")
    if verbs >= 2:
        b.add(2, strength=f"Strong action verbs used ({verbs})")
    elif not verbs:
        b.issue("Missing action verbs - use: adopt, implement, migrate, split, combine, establish, enforce")

    if options.has("explicit_alternatives"):
        b.add(6, strength='Explicit alternatives comparison with "considered X but chose Y" format')
    elif options.has("options_section") and options.has("comparison"):
        b.add(4, strength="Options compared with pros/cons",
              issue='Use explicit format: "We considered X, Y, Z but chose..."')
    elif options.has("options_language"):
        b.add(2, issue='Options mentioned but not compared - use "We considered X, Y, Z but chose..." format')
    else:
        b.issue('Alternatives not documented - use "We considered X, Y, Z but chose..." format')

    if rationale.has("rationale_section") or rationale.has("evidence"):
        b.add(7, strength="Rationale explained with evidence")
    elif rationale.has("rationale_language"):
        b.add(3, issue="Some rationale provided - strengthen with evidence or data")
    else:
        b.issue("Rationale missing - explain WHY this decision was made")
    return b.build()


def score_consequences(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    c = detect_consequences(text)

    if c.has("consequences_section"):
        b.add(5, strength="Dedicated consequences section")
    elif c.has("consequences_language"):
        b.add(2, issue="Consequences mentioned but lack dedicated section")
    else:
        b.issue("Consequences section missing - document impacts of this decision")

    pos, neg = c.count("positive"), c.count("negative")
    if pos >= 3 and neg >= 3:
        b.add(10, strength=f"Balanced consequences: {pos} positive, {neg} negative")
    elif pos >= 2 and neg >= 2:
        b.add(6, issue=f"Need 3+ each: currently {pos} positive, {neg} negative")
    elif pos or neg:
        b.add(3, issue=f"Imbalanced: {pos} positive, {neg} negative - need 3+ each")
    else:
        b.issue("Missing positive AND negative consequences - need 3+ each")

    if c.has("vague_consequences"):
        b.deduct(3, issue=(f"Vague consequence terms detected ({c.count('vague_consequences')}) - "
                           'replace "complexity"/"overhead" with specific impacts'))

    if c.has("team_factors"):
        b.add(5, strength="Team factors addressed (training/skills/hiring)")
    else:
        b.issue("Missing team factors - address training needs, skill gaps, hiring impact")
    if c.has("subsequent"):
        b.add(3, strength="Subsequent ADRs/decisions identified")
    else:
        b.issue("Missing subsequent ADRs - what decisions does this trigger?")
    if c.has("review_timing"):
        b.add(2, strength="Review timing specified")
    else:
        b.issue("Missing review timing - when should this decision be reassessed?")
    return b.build()


def score_status(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    status = detect_status(text)

    if status.has("status_section") and status.has("status_values"):
        b.add(10, strength=f"Status: {', '.join(status.found('status_values'))}")
    elif status.has("status_values"):
        b.add(5, issue="Status mentioned but lacks dedicated section")
    else:
        b.issue("Status missing - add Proposed, Accepted, Deprecated, or Superseded")

    if status.has("date"):
        b.add(7, strength="Date information included")
    else:
        b.issue("Date missing - add when this decision was made")

    sections = detect_sections(text, REQUIRED_SECTIONS)
    total = len(REQUIRED_SECTIONS)
    if sections.ratio >= 0.85:
        b.add(8, strength=f"{len(sections.found)}/{total} required sections present")
    elif sections.ratio >= 0.60:
        b.add(4, issue=f"Missing sections: {', '.join(sections.missing)}")
    else:
        b.issue(f"Only {len(sections.found)} of {total} sections present")
    return b.build()


PLUGIN = DocumentTypePlugin(
    id="adr",
    name="Architecture Decision Record",
    description="Context, decision, consequences and status of an architecture decision (MADR 3.0)",
    rubric=(
        Dimension("context", "Context", 25, score_context,
                  "Problem framing, constraints, decision drivers"),
        Dimension("decision", "Decision", 25, score_decision,
                  "Explicit decision, alternatives, rationale"),
        Dimension("consequences", "Consequences", 25, score_consequences,
                  "Positive and negative impacts, team factors, follow-ups"),
        Dimension("status", "Status", 25, score_status,
                  "Status value, date, completeness"),
    ),
    detectors={
        "sections": lambda text: detect_sections(text, REQUIRED_SECTIONS),
        "context": detect_context,
        "decision": detect_decision,
        "options": detect_options,
        "consequences": detect_consequences,
        "status": detect_status,
        "rationale": detect_rationale,
        "decision_drivers": detect_decision_drivers,
        "confirmation": detect_confirmation,
    },
)
