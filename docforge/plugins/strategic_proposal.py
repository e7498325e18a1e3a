"""
Strategic Proposal Rubric

Scoring Dimensions (100 pts total):
  1. Problem Statement (25)    dedicated section, quantified urgency, strategic alignment
  2. Proposed Solution (25)    dedicated section, actionable, rationale
  3. Business Impact (25)      outcomes, 2+ quantified metrics, financial/competitive value
  4. Implementation Plan (25)  phases, dated timeline, ownership and resources

Risk and success-metric detectors are reported for diagnostics only.
"""

from __future__ import annotations

from docforge.detection import DetectionResult, detect, detect_sections
from docforge.patterns import PatternCategory, PatternRule, heading_rule
from docforge.registry import DocumentTypePlugin
from docforge.scoring import Dimension, DimensionBuilder, DimensionScore


# ============================================================
# PATTERNS
# ============================================================

REQUIRED_SECTIONS = (
    heading_rule("Problem Statement",
                 r"problem|challenge|issue|opportunity|context|pain.?point|current.?pain", 2),
    heading_rule("Proposed Solution", r"solution|proposal|approach|recommendation|strategy", 2),
    heading_rule("Business Impact",
                 r"impact|benefit|outcome|value|roi|return|financial.?impact|gross.?profit|revenue", 2),
    heading_rule("Implementation Plan", r"implementation|plan|timeline|roadmap|execution|next.?steps", 2),
    heading_rule("Resources/Budget",
                 r"resource|budget|cost|investment|team|pricing|price|subscription|commercials", 1),
    heading_rule("Risks/Assumptions", r"risk|assumption|dependency|constraint", 1),
    heading_rule("Success Metrics", r"success|metric|kpi|measure|objective", 1),
)

_QUANTIFIED = r"\d+\s*(?:%|million|thousand|hour|day|week|month|year|\$|dollar|user|customer"

URGENCY_RULE = PatternRule(
    "urgency",
    r"\b(?:urgent|critical|immediate|priority|time.sensitive|deadline|window|opportunity.cost)\b",
    "problem",
    indicator="Urgency/priority established",
)

PROBLEM = PatternCategory("problem", (
    heading_rule("problem_section", r"problem|challenge|issue|opportunity|context|current.?state",
                 category="problem"),
    PatternRule(
        "problem_language",
        r"\b(?:problem|challenge|issue|opportunity|gap|limitation|constraint|blocker|barrier|pain.?point)\b",
        "problem",
        indicator="Problem framing language",
    ),
    URGENCY_RULE,
    PatternRule("quantified", _QUANTIFIED + r"|transaction)", "problem",
                indicator="{count} quantified metrics"),
    PatternRule(
        "strategic_alignment",
        r"\b(?:strategic|mission|vision|objective|goal|priority|initiative|pillar)\b",
        "problem",
        indicator="Strategic alignment shown",
    ),
    heading_rule("urgency_section", r"urgency|priority|why.now|timing|window", category="problem"),
))

SOLUTION = PatternCategory("solution", (
    heading_rule("solution_section", r"solution|proposal|approach|recommendation|strategy",
                 category="solution"),
    PatternRule("solution_language",
                r"\b(?:solution|approach|proposal|strategy|plan|initiative|program|project)\b",
                "solution", indicator="Solution language present"),
    PatternRule(
        "actionable",
        r"\b(?:implement|execute|deliver|launch|build|create|develop|establish|deploy|rollout)\b",
        "solution",
        indicator="Actionable verbs used",
    ),
    PatternRule("alternatives", r"\b(?:alternative|option|approach|consider|evaluate|compare|trade.?off)\b",
                "solution", indicator="Alternatives considered"),
    PatternRule(
        "justification",
        r"\b(?:because|reason|rationale|why|justify|basis|evidence|data.shows|research)\b",
        "solution",
        indicator="Rationale provided",
    ),
))

IMPACT = PatternCategory("impact", (
    heading_rule("impact_section",
                 r"impact|benefit|outcome|value|roi|return|business.case|financial.?impact",
                 category="impact"),
    PatternRule("impact_language",
                r"\b(?:impact|benefit|value|roi|return|outcome|result|improvement|gain|savings)\b",
                "impact", indicator="Impact language present"),
    PatternRule("quantified", _QUANTIFIED + r"|revenue)", "impact", indicator="{count} quantified metrics"),
    PatternRule(
        "financial_terms",
        r"\b(?:revenue|cost|savings|profit|margin|efficiency|productivity|reduction|increase)\b",
        "impact",
        indicator="Financial terms used",
    ),
    PatternRule("competitive_terms",
                r"\b(?:competitive|market|position|advantage|differentiat\w{0,6}|leader|first.mover)\b",
                "impact", indicator="Competitive advantage mentioned"),
    PatternRule(
        "dealership_impact",
        r"\b(?:gross.?profit[^\n]{0,60}?store|per.?store|per.?rooftop|call.?conversion|appointment.?rate"
        r"|inbound.?call|outbound.?connection|missed.?opportunit\w{0,4}|vendor.?switch)",
        "impact",
        indicator="Dealership-level impact metrics",
    ),
))

IMPLEMENTATION = PatternCategory("implementation", (
    heading_rule("implementation_section", r"implementation|plan|timeline|roadmap|execution|delivery",
                 category="implementation"),
    PatternRule("phases", r"\b(?:phase|stage|milestone|sprint|iteration|wave|release|v\d+)\b",
                "implementation", indicator="{count} phases/milestones"),
    PatternRule(
        "dates",
        r"\b(?:week|month|quarter|q[1-4]|year|fy\d+|\d{4}|jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\b",
        "implementation",
        indicator="{count} timeline references",
    ),
    PatternRule("ownership", r"\b(?:owner|lead|responsible|accountable|team|department|function)\b",
                "implementation", indicator="Ownership defined"),
    PatternRule("resources", r"\b(?:resource|budget|cost|investment|headcount|fte|capacity)\b",
                "implementation", indicator="Resources identified"),
))

RISKS = PatternCategory("risks", (
    heading_rule("risk_section", r"risk|assumption|dependency|constraint|challenge", category="risks"),
    PatternRule("risks",
                r"\b(?:risk|assumption|dependency|constraint|blocker|obstacle|challenge|unknown)\b",
                "risks", indicator="{count} risks identified"),
    PatternRule("mitigation",
                r"\b(?:mitigat\w{0,6}|contingency|fallback|plan.b|alternative|backup|workaround)\b",
                "risks", indicator="Mitigation strategies included"),
))

METRICS = PatternCategory("metrics", (
    heading_rule("metrics_section", r"success|metric|kpi|measure|measurement", category="metrics"),
    PatternRule("metrics",
                r"\b(?:metric|kpi|measure|indicator|target|benchmark|baseline|track)\b",
                "metrics", indicator="{count} metric references"),
    PatternRule("quantified", _QUANTIFIED + r")", "metrics", indicator="{count} quantified metrics"),
    PatternRule("timebound",
                r"\b(?:by|within|after|before|during|end.of|q[1-4]|fy\d+|month|quarter|year)\b",
                "metrics", indicator="Time-bound targets specified"),
))


# ============================================================
# DETECTORS
# ============================================================

def detect_problem_statement(text: str) -> DetectionResult:
    return detect(text, PROBLEM)


def detect_solution(text: str) -> DetectionResult:
    return detect(text, SOLUTION)


def detect_business_impact(text: str) -> DetectionResult:
    return detect(text, IMPACT)


def detect_implementation(text: str) -> DetectionResult:
    return detect(text, IMPLEMENTATION)


def detect_risks(text: str) -> DetectionResult:
    return detect(text, RISKS)


def detect_success_metrics(text: str) -> DetectionResult:
    return detect(text, METRICS)


# ============================================================
# SCORERS
# ============================================================

def score_problem_statement(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    p = detect_problem_statement(text)

    if p.has("problem_section") and p.has("problem_language"):
        b.add(10, strength="Clear problem statement with dedicated section")
    elif p.has("problem_language"):
        b.add(5, issue="Problem mentioned but lacks dedicated section")
    else:
        b.issue("Problem statement missing - define the specific challenge or opportunity")

    if p.has("urgency") and p.has("quantified"):
        b.add(8, strength="Urgency quantified with specific metrics")
    elif p.has("urgency"):
        b.add(4, issue="Urgency mentioned but not quantified - add timeframes or costs")
    else:
        b.issue("Missing urgency - explain why this needs action now")

    if p.has("strategic_alignment"):
        b.add(7, strength="Problem tied to strategic objectives")
    else:
        b.issue("Add strategic alignment - connect to organizational goals")
    return b.build()


def score_proposed_solution(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    s = detect_solution(text)

    if s.has("solution_section") and s.has("solution_language"):
        b.add(10, strength="Clear solution with dedicated section")
    elif s.has("solution_language"):
        b.add(5, issue="Solution mentioned but lacks dedicated section")
    else:
        b.issue("Solution section missing or unclear")

    if s.has("actionable"):
        b.add(8, strength="Solution is actionable with clear next steps")
    else:
        b.issue("Add action verbs - specify what will be done")

    if s.has("justification"):
        b.add(7, strength="Solution includes rationale/justification")
    else:
        b.issue("Add rationale - explain why this approach")
    return b.build()


def score_business_impact(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    i = detect_business_impact(text)

    if i.has("impact_section") and i.has("impact_language"):
        b.add(10, strength="Clear impact section with defined outcomes")
    elif i.has("impact_language"):
        b.add(5, issue="Impact mentioned but lacks dedicated section")
    else:
        b.issue("Impact section missing - define expected outcomes")

    quantified = i.count("quantified")
    if quantified >= 2:
        b.add(10, strength="Impact quantified with multiple metrics")
    elif quantified:
        b.add(5, issue="Add more quantified metrics for impact")
    else:
        b.issue("Quantify impact - add specific numbers, percentages, or dollar amounts")

    if i.has("financial_terms") or i.has("competitive_terms"):
        b.add(5, strength="Business value articulated (financial/competitive)")
    else:
        b.issue("Add business value - revenue, cost, efficiency, or competitive impact")
    return b.build()


def score_implementation_plan(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    m = detect_implementation(text)

    if m.has("implementation_section") and m.has("phases"):
        b.add(10, strength="Clear implementation plan with phases")
    elif m.has("implementation_section"):
        b.add(5, issue="Implementation section exists but lacks clear phases")
    else:
        b.issue("Add implementation plan - define phases and milestones")

    dates = m.count("dates")
    if dates >= 2:
        b.add(8, strength="Timeline includes specific dates/periods")
    elif dates:
        b.add(4, issue="Add more timeline specificity")
    else:
        b.issue("Add timeline - specify when activities will occur")

    if m.has("ownership") and m.has("resources"):
        b.add(7, strength="Ownership and resources clearly defined")
    elif m.has("ownership") or m.has("resources"):
        b.add(3, issue="Define both ownership and required resources")
    else:
        b.issue("Add ownership and resources - who and what is needed")
    return b.build()


PLUGIN = DocumentTypePlugin(
    id="strategic-proposal",
    name="Strategic Proposal",
    description="Proposal tying a problem to a solution, its business impact and a delivery plan",
    rubric=(
        Dimension("problem_statement", "Problem Statement", 25, score_problem_statement,
                  "Dedicated problem section, quantified urgency, strategic alignment"),
        Dimension("proposed_solution", "Proposed Solution", 25, score_proposed_solution,
                  "Dedicated solution section, actionable, with rationale"),
        Dimension("business_impact", "Business Impact", 25, score_business_impact,
                  "Outcomes, quantified metrics, financial or competitive value"),
        Dimension("implementation_plan", "Implementation Plan", 25, score_implementation_plan,
                  "Phases, dated timeline, ownership and resources"),
    ),
    detectors={
        "sections": lambda text: detect_sections(text, REQUIRED_SECTIONS),
        "problem": detect_problem_statement,
        "solution": detect_solution,
        "impact": detect_business_impact,
        "implementation": detect_implementation,
        "risks": detect_risks,
        "metrics": detect_success_metrics,
    },
)
