"""
One-Pager Rubric

Scoring Dimensions:
  1. Problem Clarity (30)   — problem statement, cost of inaction, customer focus, why now
  2. Solution Quality (25)  — addresses the problem, measurable goals, stays high-level,
                              alternatives considered
  3. Scope Discipline (25)  — in/out of scope, SMART success metrics
  4. Completeness (20)      — required sections, stakeholders, phased timeline

Rubric-level rules:
  - 450-word limit: 5 points per 50 words over, max 15
  - circular logic (solution restates the problem) caps the total at 50
  - vague metrics without a baseline -> target pair are flagged
"""

from __future__ import annotations

import re
from typing import Optional

from docforge.detection import DetectionResult, detect, detect_sections
from docforge.normalize import count_words
from docforge.patterns import (
    HEADING_PREFIX,
    PatternCategory,
    PatternRule,
    compile_pattern,
    heading_rule,
)
from docforge.plugins.common import BUSINESS_FOCUS, coverage_ladder, score_section_coverage
from docforge.registry import Adjustment, DocumentTypePlugin, ScoreCap
from docforge.scoring import Dimension, DimensionBuilder, DimensionScore


WORD_LIMIT = 450
WORD_LIMIT_STEP = 50
WORD_LIMIT_POINTS = 5
WORD_LIMIT_MAX_DEDUCTION = 15
CIRCULAR_CAP = 50


# ============================================================
# PATTERNS
# ============================================================

REQUIRED_SECTIONS = (
    heading_rule("Problem/Challenge", r"problem|challenge|pain.?point|context", 2),
    heading_rule("Solution/Proposal", r"solution|proposal|approach|recommendation", 2),
    heading_rule("Goals/Benefits", r"goal|objective|benefit|outcome", 2),
    heading_rule("Scope Definition", r"scope|in.scope|out.of.scope|boundary|boundaries", 2),
    heading_rule("Success Metrics", r"success|metric|kpi|measure|success.metric", 1),
    heading_rule("Stakeholders/Team", r"stakeholder|team|owner|raci|responsible", 1),
    heading_rule("Timeline/Milestones", r"timeline|milestone|phase|schedule|roadmap", 1),
    heading_rule("Investment/Resources", r"investment|effort|resource|cost|budget", 2),
    heading_rule("Risks/Assumptions", r"risk|assumption|mitigation|dependency|dependencies", 1),
    heading_rule("Cost of Doing Nothing", r"cost.of.doing.nothing|cost.of.inaction|why.now|urgency", 2),
)

QUANTIFIED_RULE = PatternRule(
    "quantified",
    r"\d+\s*(?:%|million|thousand|hour|day|week|month|year|\$|dollar|user|customer|transaction)",
    "problem",
    indicator="{count} quantified metrics",
)

PROBLEM = PatternCategory("problem", (
    heading_rule("problem_section", r"problem|challenge|pain.?point|context|why", category="problem"),
    PatternRule(
        "problem_language",
        r"\b(?:problem|challenge|pain.?point|issue|struggle|difficult|frustrat\w{0,5}|current.?state|today|existing)\b",
        "problem",
        indicator="Problem framing language",
    ),
    PatternRule(
        "cost_of_inaction",
        r"\b(?:cost|impact|consequence|risk|without|if.?not|delay|postpone|inaction|doing.?nothing|status.?quo)\b",
        "problem",
        indicator="{count} cost/impact references",
    ),
    QUANTIFIED_RULE,
    BUSINESS_FOCUS,
    heading_rule("cost_section", r"cost|impact|consequence|risk|why.now|urgency", category="problem"),
))

URGENCY = PatternCategory("urgency", (
    heading_rule("urgency_section", r"why.now|urgency|timing", category="urgency"),
    PatternRule(
        "urgency_language",
        r"\b(?:urgent|urgency|why now|critical|immediately|window|deadline|before it)\b",
        "urgency",
        indicator="Urgency language",
    ),
    PatternRule(
        "time_pressure",
        r"\b(?:q[1-4]|this (?:quarter|year|month)|by (?:end of |the end of )?\w+ \d{4}"
        r"|within \d+ (?:days|weeks|months)|renewal|expir\w{0,4})\b",
        "urgency",
        indicator="Time pressure stated",
    ),
))

SOLUTION = PatternCategory("solution", (
    heading_rule("solution_section", r"solution|proposal|approach|recommendation|how", category="solution"),
    PatternRule(
        "solution_language",
        r"\b(?:solution|approach|proposal|implement|build|create|develop|enable|provide|deliver)\b",
        "solution",
        indicator="Solution language present",
    ),
    PatternRule(
        "measurable",
        r"\b(?:measure|metric|kpi|track|monitor|quantify|achieve|reach|target|goal)\b",
        "solution",
        indicator="{count} measurable terms",
    ),
    PatternRule(
        "high_level",
        r"\b(?:overview|summary|high.?level|architecture|design|flow|process|workflow)\b",
        "solution",
        indicator="High-level approach described",
    ),
    PatternRule(
        "implementation_detail",
        r"\b(?:code|function|class|method|api|database|sql|algorithm|library|framework)\b",
        "solution",
    ),
    PatternRule("goals", r"\b(?:goal|objective|benefit|outcome|result)s?\b", "solution",
                indicator="{count} goal/objective mentions"),
))

ALTERNATIVES = PatternCategory("alternatives", (
    heading_rule("alternatives_section", r"alternatives?|options?(?:\s+considered)?", category="alternatives"),
    PatternRule("do_nothing", r"\b(?:do.nothing|status.quo|no.action)\b", "alternatives"),
    PatternRule(
        "alternatives_language",
        r"\b(?:alternatives?|options?|instead of|considered|versus|vs\.?|rather than|trade.?offs?)\b",
        "alternatives",
    ),
))

SCOPE = PatternCategory("scope", (
    PatternRule(
        "in_scope",
        r"\b(?:in.scope|included|within.scope|we.will|we.are|we.provide|we.deliver)\b",
        "scope",
        indicator="In-scope items defined",
    ),
    PatternRule(
        "out_of_scope",
        r"\b(?:out.of.scope|not.included|excluded|we.will.not|won't|outside.scope|future|phase.2|post.mvp|not.in.v1)\b",
        "scope",
        indicator="Out-of-scope items defined",
    ),
    heading_rule("scope_section", r"scope|boundaries|in.scope|out.of.scope", category="scope"),
))

METRICS = PatternCategory("metrics", (
    PatternRule("smart", r"\b(?:specific|measurable|achievable|relevant|time.bound|smart)\b", "metrics"),
    PatternRule(
        "quantified",
        r"\d+\s*(?:%|million|thousand|hour|day|week|month|year|\$|dollar|user|customer"
        r"|transaction|request|response)",
        "metrics",
        indicator="{count} quantified metrics",
    ),
    heading_rule("metrics_section", r"success|metric|kpi|measure|success.metric", category="metrics"),
    PatternRule(
        "metrics_language",
        r"\b(?:metric|kpi|measure|target|goal|achieve|reach|improve|reduce|increase)\b",
        "metrics",
        indicator="{count} metric references",
    ),
))

STAKEHOLDERS = PatternCategory("stakeholders", (
    heading_rule(
        "stakeholder_section",
        r"stakeholder|team|owner|raci|responsible|responsible.accountable",
        category="stakeholders",
    ),
    PatternRule(
        "stakeholder_language",
        r"\b(?:stakeholder|owner|lead|team|responsible|accountable|raci|sponsor|approver)s?\b",
        "stakeholders",
        indicator="{count} stakeholder references",
    ),
    PatternRule(
        "stakeholder_concerns",
        r"\b(?:finance|fp&a|fp.?&.?a|financial.planning|hr|people.?team|people.?ops|legal|compliance"
        r"|equity|liability|approval|sign.?off|cfo|cto|ceo|vp|director)\b",
        "stakeholders",
        indicator="{count} stakeholder concerns addressed (FP&A, legal, C-suite)",
    ),
    PatternRule(
        "roles",
        r"\b(?:responsible|accountable|consulted|informed|raci)\b",
        "stakeholders",
        indicator="Roles/responsibilities defined",
    ),
))

TIMELINE = PatternCategory("timeline", (
    heading_rule("timeline_section", r"timeline|milestone|phase|schedule|roadmap", category="timeline"),
    PatternRule(
        "dates",
        r"\b(?:week|month|quarter|q[1-4]|phase|milestone|sprint|release|v\d+)s?\b",
        "timeline",
        indicator="{count} timeline references",
    ),
    PatternRule(
        "phasing",
        r"\b(?:phase|stage|wave|iteration|sprint|release)s?\b",
        "timeline",
        indicator="{count} phases/milestones",
    ),
))

# Section bodies for circular-logic comparison: heading up to the next '#'
_PROBLEM_BODY = PatternRule(
    "problem_body",
    HEADING_PREFIX + r"(?:problem|challenge|pain.?point|context)[^#]{0,5000}",
    multiline=True,
)
_SOLUTION_BODY = PatternRule(
    "solution_body",
    HEADING_PREFIX + r"(?:solution|proposal|approach|recommendation)[^#]{0,5000}",
    multiline=True,
)

STOP_WORDS = frozenset((
    "the a an is are was were be been being have has had do does did will would could "
    "should may might must shall can need dare ought used to of in for on with at by from "
    "up about into through during before after above below between under again further "
    "then once here there when where why how all each few more most other some such no "
    "nor not only own same so than too very s t just don now we our and or but if because "
    "as until while that this these those it its"
).split())
BUILD_VERBS = ("build", "create", "add", "implement", "develop", "make", "establish",
               "introduce", "launch")
_NOUN_RE = compile_pattern("problem_noun", r"\b[a-z]{4,}\b")
# One matcher per build verb, capturing the word it acts on
_BUILD_OBJECTS = tuple(
    compile_pattern(f"build_object_{verb}", rf"\b{verb}\s+(?:a\s+)?([a-z]{{4,}})")
    for verb in BUILD_VERBS
)

_ARROW = compile_pattern("arrow", r"\d+[%$]?\s*[→\->]\s*\d+[%$]?")
_FROM_TO = compile_pattern("from_to", r"from\s+\d+[%$]?\s+to\s+\d+[%$]?", re.IGNORECASE)
_CURRENT_TARGET = compile_pattern(
    "current_target", r"currently?\s+\d+[%$]?.{0,200}?target\s+\d+[%$]?", re.IGNORECASE)
_BRACKET = compile_pattern(
    "bracket",
    r"\[(?:current|baseline)[^\]]{0,80}\]\s*[→\->]\s*\[(?:target|goal)[^\]]{0,80}\]",
    re.IGNORECASE,
)
_BRACKET_NUMBER = compile_pattern(
    "bracket_number",
    r"\[\s*\d+[%$]?[^\]]{0,80}\]\s*[→\->]\s*\[\s*\d+[%$]?[^\]]{0,80}\]",
)
_VAGUE_METRIC = compile_pattern(
    "vague_metric",
    r"\b(?:improve|increase|decrease|reduce|enhance|better|more|less|faster|slower)\b(?![^.\n]{0,200}\d)",
    re.IGNORECASE,
)


# ============================================================
# DETECTORS
# ============================================================

def detect_problem(text: str) -> DetectionResult:
    return detect(text, PROBLEM)


def detect_urgency(text: str) -> DetectionResult:
    return detect(text, URGENCY)


def detect_solution(text: str) -> DetectionResult:
    result = detect(text, SOLUTION)
    result.extra["is_high_level"] = (
        result.has("high_level") and not result.has("implementation_detail")
    )
    return result


def detect_alternatives(text: str) -> DetectionResult:
    return detect(text, ALTERNATIVES)


def detect_scope(text: str) -> DetectionResult:
    return detect(text, SCOPE)


def detect_metrics(text: str) -> DetectionResult:
    return detect(text, METRICS)


def detect_stakeholders(text: str) -> DetectionResult:
    return detect(text, STAKEHOLDERS)


def detect_timeline(text: str) -> DetectionResult:
    return detect(text, TIMELINE)


def detect_circular_logic(text: str) -> DetectionResult:
    """
    Solution that merely inverts the problem ("no dashboard" -> "build a dashboard").

    Counts (problem noun, build verb) pairs that reappear in the solution
    section; two or more is circular.
    """
    result = DetectionResult(category="circular_logic")
    problem = _PROBLEM_BODY.compiled.search(text)
    solution = _SOLUTION_BODY.compiled.search(text)
    if not problem or not solution:
        result.extra.update(is_circular=False, matches=0, reason="Sections not found")
        return result

    solution_lower = solution.group(0).lower()
    nouns = {w for w in _NOUN_RE.findall(problem.group(0).lower()) if w not in STOP_WORDS}
    matches = 0
    for build_object in _BUILD_OBJECTS:
        objects = set(build_object.findall(solution_lower))
        matches += sum(1 for noun in nouns if any(obj.startswith(noun) for obj in objects))
    is_circular = matches >= 2
    result.counts["circular_pairs"] = matches
    result.extra.update(
        is_circular=is_circular,
        matches=matches,
        confidence=min(100, matches * 25),
        reason=(f"Solution appears to restate the problem ({matches} circular patterns)"
                if is_circular else "Solution addresses root cause"),
    )
    return result


def detect_baseline_target(text: str) -> DetectionResult:
    """[Baseline] -> [Target] metric phrasing vs. bare "improve X" claims."""
    result = DetectionResult(category="baseline_target")
    for name, regex in (("arrow", _ARROW), ("from_to", _FROM_TO),
                        ("current_target", _CURRENT_TARGET), ("bracket", _BRACKET),
                        ("bracket_number", _BRACKET_NUMBER)):
        found = regex.findall(text)
        result.counts[name] = len(found)
        result.terms[name] = found[:2]
    baseline_total = result.total()
    vague = len(_VAGUE_METRIC.findall(text))
    result.counts["vague_metrics"] = vague
    result.extra.update(
        has_baseline_target=baseline_total > 0,
        baseline_target_count=baseline_total,
        has_vague_metrics=vague > baseline_total,
    )
    return result


# ============================================================
# SCORERS
# ============================================================

def score_problem_clarity(text: str) -> DimensionScore:
    b = DimensionBuilder(30)
    problem = detect_problem(text)

    if problem.has("problem_section") and problem.has("problem_language"):
        b.add(8, strength="Clear problem statement with dedicated section")
    elif problem.has("problem_language"):
        b.add(5, issue="Problem mentioned but lacks dedicated section")
    else:
        b.issue("Problem statement missing or unclear - define the specific problem")

    if problem.has("cost_of_inaction") and problem.has("quantified"):
        b.add(10, strength="Cost of inaction quantified with specific metrics")
    elif problem.has("cost_of_inaction"):
        b.add(5, issue="Cost of inaction mentioned but not quantified - add numbers/percentages")
    else:
        b.issue("Missing cost of inaction - explain impact of not solving this problem")

    if problem.has("business_focus"):
        b.add(8, strength="Problem clearly tied to customer/business value")
    else:
        b.issue("Strengthen customer/business focus - explain why this matters to stakeholders")

    urgency = detect_urgency(text)
    if urgency.has("urgency_section") or (urgency.has("urgency_language") and urgency.has("time_pressure")):
        b.add(4, strength='Clear urgency/timing justification ("Why Now")')
    elif urgency.has("urgency_language") or urgency.has("time_pressure"):
        b.add(2, issue='Some urgency mentioned but not clearly justified - add "Why Now" section')
    else:
        b.issue('Missing "Why Now" - explain the urgency or timing for this initiative')
    return b.build()


def score_solution_quality(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    solution = detect_solution(text)
    problem = detect_problem(text)

    if solution.has("solution_section") and problem.has("problem_language"):
        b.add(8, strength="Solution clearly addresses stated problem")
    elif solution.has("solution_language"):
        b.add(5, issue="Solution present but connection to problem could be clearer")
    else:
        b.issue("Solution section missing or unclear")

    if solution.has("measurable") and solution.has("goals"):
        b.add(8, strength="Goals are measurable and well-defined")
    elif solution.has("goals"):
        b.add(4, issue="Goals defined but not measurable - add specific metrics")
    else:
        b.issue("Goals/benefits missing - define what success looks like")

    if solution.extra["is_high_level"]:
        b.add(5, strength="Solution stays at appropriate high-level")
    elif solution.has("implementation_detail"):
        b.issue("Solution includes too much implementation detail - keep it high-level")

    alternatives = detect_alternatives(text)
    if alternatives.has("alternatives_section") and alternatives.has("do_nothing"):
        b.add(4, strength='Alternatives considered including "do nothing" option')
    elif alternatives.has("alternatives_language"):
        b.add(2, issue='Alternatives mentioned but not in dedicated section or missing "do nothing" option')
    else:
        b.issue("No alternatives considered - explain why THIS solution over other options")
    return b.build()


def score_scope_discipline(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    scope = detect_scope(text)

    if scope.has("in_scope") and scope.has("scope_section"):
        b.add(8, strength="In-scope items clearly defined")
    elif scope.has("in_scope"):
        b.add(4, issue="In-scope items mentioned but lack dedicated section")
    else:
        b.issue("In-scope not clearly defined - list what you WILL do")

    if scope.has("out_of_scope"):
        b.add(9, strength="Out-of-scope explicitly defined")
    else:
        b.issue("Out-of-scope missing - explicitly state what you WON'T do")

    metrics = detect_metrics(text)
    if metrics.has("metrics_section") and metrics.has("quantified"):
        b.add(8, strength="Success metrics are SMART and quantified")
    elif metrics.has("metrics_language"):
        b.add(4, issue="Metrics present but not SMART - make them Specific, Measurable, "
                       "Achievable, Relevant, Time-bound")
    else:
        b.issue("Success metrics missing - define how you'll measure success")
    return b.build()


SECTION_LADDER = coverage_ladder(
    (0.85, 8, "{found}/{total} required sections present", True),
    (0.70, 5, "Missing sections: {missing}", False),
    (0.0, 2, "Only {found} of {total} sections present", False),
)


def score_completeness(text: str) -> DimensionScore:
    b = DimensionBuilder(20)
    score_section_coverage(b, text, REQUIRED_SECTIONS, SECTION_LADDER)

    stakeholders = detect_stakeholders(text)
    if stakeholders.has("stakeholder_section") and stakeholders.has("roles"):
        b.add(6, strength="Stakeholders and roles clearly identified")
    elif stakeholders.has("stakeholder_language"):
        b.add(3, issue="Stakeholders mentioned but roles not clearly defined")
    else:
        b.issue("Stakeholders not identified - list who's involved and their roles")

    timeline = detect_timeline(text)
    if timeline.has("timeline_section") and timeline.has("phasing"):
        b.add(6, strength="Timeline is phased and realistic")
    elif timeline.has("dates"):
        b.add(3, issue="Timeline present but lacks clear phasing")
    else:
        b.issue("Timeline missing - provide realistic milestones and phases")
    return b.build()


# ============================================================
# RUBRIC-LEVEL RULES
# ============================================================

def word_limit_deduction(text: str) -> Adjustment:
    words = count_words(text)
    if words <= WORD_LIMIT:
        return Adjustment()
    deduction = min(
        WORD_LIMIT_MAX_DEDUCTION,
        (words - WORD_LIMIT) // WORD_LIMIT_STEP * WORD_LIMIT_POINTS,
    )
    return Adjustment(
        delta=-deduction,
        issues=(f"Document is {words} words (max {WORD_LIMIT}). Deducting {deduction} points.",),
    )


def baseline_target_notice(text: str) -> Adjustment:
    baseline = detect_baseline_target(text)
    if baseline.extra["has_vague_metrics"] and not baseline.extra["has_baseline_target"]:
        return Adjustment(issues=(
            'Vague metrics without baselines. Use [Current] → [Target] format '
            '(e.g., "100/day → 30/day")',
        ))
    return Adjustment()


def circular_logic_cap(text: str) -> Optional[ScoreCap]:
    if detect_circular_logic(text).extra["is_circular"]:
        return ScoreCap(
            CIRCULAR_CAP,
            "CIRCULAR LOGIC DETECTED: Solution is just the inverse of the problem. "
            "Address the ROOT CAUSE instead.",
        )
    return None


PLUGIN = DocumentTypePlugin(
    id="one-pager",
    name="One-Pager",
    description="Concise proposal: problem, solution, scope and success metrics on a single page",
    rubric=(
        Dimension("problem_clarity", "Problem Clarity", 30, score_problem_clarity,
                  "Problem statement, cost of inaction, customer focus"),
        Dimension("solution", "Solution Quality", 25, score_solution_quality,
                  "Addresses the problem, measurable goals, high-level"),
        Dimension("scope", "Scope Discipline", 25, score_scope_discipline,
                  "In/out of scope, SMART success metrics"),
        Dimension("completeness", "Completeness", 20, score_completeness,
                  "Required sections, stakeholders, timeline"),
    ),
    detectors={
        "problem": detect_problem,
        "urgency": detect_urgency,
        "solution": detect_solution,
        "alternatives": detect_alternatives,
        "scope": detect_scope,
        "metrics": detect_metrics,
        "stakeholders": detect_stakeholders,
        "timeline": detect_timeline,
        "sections": lambda text: detect_sections(text, REQUIRED_SECTIONS),
        "circular_logic": detect_circular_logic,
        "baseline_target": detect_baseline_target,
    },
    adjustments=(word_limit_deduction, baseline_target_notice),
    overrides=(circular_logic_cap,),
)
