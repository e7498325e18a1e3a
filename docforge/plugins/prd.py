"""
PRD (Product Requirements Document) Rubric

Scoring Dimensions (100 pts total):
  1. Document Structure (20)    — section presence, heading hierarchy, formatting, scope
  2. Requirements Clarity (25)  — precision, FR structure, measurable criteria, prioritization
  3. User Focus (20)            — personas, segments, problem statement, customer evidence
  4. Technical Quality (15)     — non-functional requirements, acceptance criteria, dependencies
  5. Strategic Viability (20)   — metric validity, scope realism, risk quality, traceability

Precision inside Requirements Clarity is deductive: it starts at 7 and
loses the raw slop penalty. Expansion stubs ("[EXPAND: ...]", "TBD") are
reported but not penalized.
"""

from __future__ import annotations

import re

from docforge.detection import DetectionResult, detect, detect_sections
from docforge.patterns import PatternCategory, PatternRule, compile_pattern, heading_rule, phrase_rule
from docforge.registry import Adjustment, DocumentTypePlugin
from docforge.scoring import Dimension, DimensionBuilder, DimensionScore, Tier, TierLadder
from docforge.slop import analyze_slop


# ============================================================
# PATTERNS
# ============================================================

REQUIRED_SECTIONS = (
    heading_rule("Executive Summary", r"executive\s+summary|purpose|introduction|overview", 2),
    heading_rule("Problem Statement", r"problem\s+statement|current\s+state", 2),
    heading_rule("Value Proposition", r"value\s+proposition", 2),
    heading_rule("Goals and Objectives", r"goal|objective|success\s+metric|kpi", 2),
    heading_rule("Customer FAQ", r"customer\s+faq|external\s+faq|working\s+backwards", 2),
    heading_rule("Proposed Solution", r"proposed\s+solution|solution|core\s+functionality", 2),
    heading_rule("Requirements", r"requirement|functional\s+requirement|non.?functional", 2),
    heading_rule("Scope", r"scope|in.scope|out.of.scope", 1.5),
    heading_rule("Stakeholders", r"stakeholder", 1.5),
    heading_rule("Timeline", r"timeline|milestone|schedule|roadmap", 1),
    heading_rule("Risks and Mitigation", r"risk|mitigation", 1),
    heading_rule("Traceability Summary", r"traceability|requirement\s+mapping", 1),
    heading_rule("Open Questions", r"open\s+question", 1),
    heading_rule("Known Unknowns & Dissenting Opinions", r"known\s+unknown|dissenting\s+opinion|unresolved", 1),
)

VAGUE_LANGUAGE = {
    "qualifiers": (
        "easy to use", "user-friendly", "fast", "quick", "responsive",
        "good performance", "high quality", "scalable", "flexible",
        "intuitive", "seamless", "robust", "efficient", "optimal",
        "minimal", "sufficient", "reasonable", "appropriate", "adequate",
    ),
    "quantifiers": (
        "many", "several", "some", "few", "various", "numerous", "multiple",
        "a lot", "a number of", "a bit", "a little",
    ),
    "temporal": (
        "soon", "quickly", "rapidly", "promptly", "eventually", "in the future",
        "as soon as possible", "asap", "shortly", "in due time",
    ),
    "weasel_words": (
        "should be able to", "could potentially",
        "generally", "typically", "usually", "often", "sometimes",
    ),
    "marketing_fluff": (
        "best-in-class", "world-class", "cutting-edge", "next-generation",
        "state-of-the-art", "industry-leading", "innovative", "revolutionary",
    ),
    "unquantified_comparatives": (
        "better", "faster", "more efficient", "improved", "enhanced",
        "easier", "simpler", "cheaper", "superior", "optimized",
    ),
}

VAGUE = PatternCategory("vague_language", tuple(
    phrase_rule(name, phrases, "vague", indicator="{count} " + name.replace("_", " ") + " ({terms})")
    for name, phrases in VAGUE_LANGUAGE.items()
))

PRIORITIZATION = PatternCategory("prioritization", (
    PatternRule(
        "moscow",
        r"\b(?:must[- ]have|should[- ]have|could[- ]have|won't[- ]have)\b",
        "prioritization",
    ),
    PatternRule("p_level", r"\b(?:p[0-3]|priority\s*[0-3]|priority:\s*(?:high|medium|low|critical))\b",
                "prioritization"),
    PatternRule("numbered", r"\b(?:priority|pri|importance):\s*\d", "prioritization"),
    PatternRule("tiered", r"\b(?:tier\s*[1-3]|phase\s*[1-3]|wave\s*[1-3]|mvp|v1|v2)\b", "prioritization"),
    heading_rule(
        "priority_section",
        r"priority|priorities|prioritization|must\s+have|should\s+have|could\s+have|won't\s+have",
        category="prioritization",
    ),
))

CUSTOMER_EVIDENCE = PatternCategory("customer_evidence", (
    PatternRule(
        "research",
        r"\b(?:user research|customer research|user interviews?|customer interviews?|usability test"
        r"|user study|survey results?|focus group|market research|competitive analysis|discovery)\b",
        "evidence",
    ),
    PatternRule(
        "data",
        r"\b(?:data shows|analytics indicate|metrics show|we found that|research indicates"
        r"|\d+%\s+of\s+(?:users|customers)|based on experience|observed that|common pattern"
        r"|industry standard|best practice)",
        "evidence",
    ),
    PatternRule("quotes", r"\"[^\"\n]{10,400}\"", "evidence"),
    PatternRule(
        "feedback",
        r"\b(?:customer feedback|user feedback|nps|csat|support tickets?|feature requests?"
        r"|pain points?|user complaints?|friction)\b",
        "evidence",
    ),
    PatternRule(
        "validation",
        r"\b(?:validated|tested with|confirmed by|based on feedback from|pilot|dogfood"
        r"|internal testing|beta|prototype testing|proof of concept)\b",
        "evidence",
    ),
))

SCOPE = PatternCategory("scope", (
    PatternRule("in_scope", r"\b(?:in.scope|included|within scope|we will)\b", "scope"),
    PatternRule(
        "out_of_scope",
        r"\b(?:out.of.scope|not included|excluded|we will not|won't|outside scope"
        r"|future consideration|not in v1|post.mvp|phase 2)\b",
        "scope",
    ),
    PatternRule("scope_section", r"^#+\s*(?:scope|boundaries)", "scope", multiline=True),
))

PERSONAS = PatternCategory("personas", (
    PatternRule(
        "persona_section",
        r"^#+\s*(?:\d+\.?\d*\.?\s*)?(?:user\s*persona|personas?|target\s+user|audience"
        r"|customer\s+profile|primary\s+user)",
        "personas",
        multiline=True,
        indicator="Dedicated persona section",
    ),
    PatternRule(
        "user_types",
        r"\b(?:admin|administrator|end.?user|power.?user|developer|manager|customer|stakeholder"
        r"|buyer|seller|operator|analyst|engineer|designer|user|professional|owner|team\s+lead"
        r"|solo\s+developer)s?\b",
        "personas",
    ),
    PatternRule(
        "pain_points",
        r"\b(?:pain.?point|problem|challenge|frustrat\w{0,5}|struggle|difficult|issue"
        r"|context.?switch|cognitive\s+overhead|loses?\s+track|scattered|disorganized)",
        "personas",
        indicator="Pain points addressed",
    ),
    PatternRule(
        "scenarios",
        r"\b(?:scenario|use.?case|user.?journey|workflow|user.?flow|daily\s+routine|typical\s+day)",
        "personas",
        indicator="User scenarios described",
    ),
    PatternRule(
        "persona_depth",
        r"\b(?:primary\s+user|target\s+user):|who\s+(?:will|would)\s+use|target\s+audience\s+is",
        "personas",
        indicator="Detailed persona description",
    ),
))

SEGMENTS = PatternCategory("segments", (
    PatternRule("quantified", r"\b(?:top|bottom)\s+\d+%|\b\d+\s*(?:-|to)\s*\d+\s+(?:employees|users|seats|people)\b",
                "segments"),
    PatternRule("bounded", r"\b(?:smb|mid-market|enterprise|startup)s?\s+(?:customers?|teams?|companies)\b",
                "segments"),
    PatternRule("specific", r"\b(?:power|new|first-time|returning|daily active|churned)\s+users?\b", "segments"),
    PatternRule(
        "demographic",
        r"\b(?:aged?\s+\d+|\d+\+?\s*years?\s+old|in\s+(?:north america|europe|emea|apac|latam))\b",
        "segments",
    ),
))

PROBLEM = PatternCategory("problem", (
    PatternRule(
        "problem_section",
        r"^#+\s*(?:\d+\.?\d*\.?\s*)?(?:problem|goal|objective|why|motivation|current\s+state|target\s+state)",
        "problem",
        multiline=True,
        indicator="Dedicated problem statement section",
    ),
    PatternRule("problem_language", r"\b(?:problem|challenge|current.?state|today|existing|pain)\b",
                "problem", indicator="Problem framing language"),
    PatternRule(
        "value_prop",
        r"\b(?:value|benefit|outcome|result|enable|empower|improve|reduce|increase|streamline|automate"
        r"|simplify|eliminate|save|prevent|accelerate|enhance|optimize|transform|deliver|provide"
        r"|ensure|achieve|solution|unified|integrated|seamless|efficient)\b",
        "problem",
        indicator="Value proposition language",
    ),
    PatternRule("why", r"\b(?:so\s+that|in\s+order\s+to|because|this\s+will|enabling)\b", "problem",
                indicator='Explains "why" behind requirements'),
))

VALUE_PROPOSITION = PatternCategory("value_proposition", (
    heading_rule(
        "section",
        r"value\s+proposition|value\s+to\s+customer|value\s+to\s+partner|value\s+to\s+company"
        r"|customer\s+value|business\s+value",
        category="value",
    ),
    PatternRule(
        "customer_value",
        r"\b(?:value\s+to\s+(?:customer|partner|user|client)|customer\s+benefit|partner\s+benefit|user\s+benefit)",
        "value",
    ),
    PatternRule(
        "company_value",
        r"\b(?:value\s+to\s+(?:company|business|organization)|business\s+value|revenue\s+impact"
        r"|cost\s+saving|strategic\s+value)",
        "value",
    ),
    PatternRule(
        "quantified_benefit",
        r"\d+%|\$\d+|\b\d+\s*(?:hours?|days?|minutes?|weeks?)\s*(?:saved|reduced|faster)"
        r"|\b(?:reduce[ds]?|increase[ds]?)\s+from\s+\d+",
        "value",
    ),
    PatternRule(
        "vague_value",
        r"\b(?:improve[ds]?|enhance[ds]?|better|more\s+efficient|streamline[ds]?)\s+(?:the\s+)?"
        r"(?:experience|process|workflow|operations?)\b",
        "value",
    ),
))

NFR = PatternCategory("non_functional", (
    PatternRule("performance", r"\b(?:performance|latency|response.?time|throughput|speed)\b", "nfr"),
    PatternRule("reliability", r"\b(?:reliability|uptime|availability|recovery|backup|failover)\b", "nfr"),
    PatternRule("security", r"\b(?:security|authentication|authorization|encrypt\w{0,4}|privacy|access.?control)\b",
                "nfr"),
    PatternRule("scalability", r"\b(?:scalab\w{0,6}|capacity|concurrent|load|volume)\b", "nfr"),
    PatternRule("usability", r"\b(?:usability|accessibility|wcag|508|a11y)\b", "nfr"),
    PatternRule("compliance", r"\b(?:compliance|regulatory|gdpr|hipaa|sox|pci)\b", "nfr"),
    PatternRule(
        "nfr_section",
        r"^(?:#+\s*)?(?:\d+\.?\d*\.?\s*)?(?:non.?functional|quality\s+attribute|nfr|performance"
        r"|security|technical\s+requirement)",
        "nfr",
        multiline=True,
    ),
))
NFR_CATEGORIES = ("performance", "reliability", "security", "scalability", "usability", "compliance")

REQUIREMENTS = PatternCategory("requirements", (
    PatternRule("user_story", r"\bas\s+an?\s+[\w ]{1,60}?,?\s+i\s+want", "requirements"),
    PatternRule("functional_id", r"\bFR\d+\b", "requirements"),
    PatternRule("door_type", r"(?:🚪|🔄|\bone[- ]?way\b|\btwo[- ]?way\b)\s*(?:door)?", "requirements"),
    PatternRule("problem_link", r"\bP\d+\b", "requirements"),
    PatternRule("gwt_inline", r"\bgiven\b[^\n]{1,300}?\bwhen\b[^\n]{1,300}?\bthen\b", "requirements"),
    PatternRule("gwt_bullet", r"^\s*[-*]\s*given\b", "requirements", multiline=True),
    PatternRule("ac_checkbox", r"^\s*[-*]\s*\[[ xX]\]", "requirements", multiline=True),
    PatternRule("ac_verify", r"^\s*(?:[-*]\s*)?(?:verify|confirm|test|ensure)\s", "requirements", multiline=True),
    PatternRule("ac_numbered", r"\bAC\s*\d+\s*:", "requirements"),
    PatternRule("ac_case", r"\((?:success|failure)\)|\b(?:success|failure)\s+case\b", "requirements"),
    PatternRule(
        "measurable",
        r"(?:[≤≥<>=]\s*)?\d+(?:\.\d+)?\s*(?:ms|milliseconds?|seconds?|minutes?|hours?|days?|weeks?|%|percent"
        r"|\$|dollars?|users?|requests?|transactions?|items?|tasks?|points?|pt)\b",
        "requirements",
    ),
    PatternRule("modal", r"\b(?:shall|must|should|will)\b", "requirements"),
    PatternRule(
        "failure_cases",
        r"\b(?:fail\w{0,3}|error|invalid|edge\s+case|exception|timeout|reject\w{0,2}|deny|empty|offline)\b",
        "requirements",
    ),
))

DEPENDENCIES = PatternCategory("dependencies", (
    PatternRule("dependency_section", r"^(?:#+\s*|\d+\.?\d*\.?\s*)(?:depend|risk|assumption|constraint)",
                "dependencies", multiline=True),
    PatternRule("dependency_language", r"\b(?:depends.?on|requires|prerequisite|blocker|assumption)\b",
                "dependencies"),
))

STRATEGIC = PatternCategory("strategic_viability", (
    PatternRule(
        "leading_indicator",
        r"\b(?:leading\s+indicator|predictive|early\s+signal|adoption\s+rate|activation|first\s+action"
        r"|time\s+to\s+value|onboarding\s+completion)\b",
        "strategic",
    ),
    PatternRule("lagging_indicator", r"\b(?:lagging\s+indicator|revenue|nps|churn|retention|ltv|arpu"
                                     r"|conversion\s+rate)\b", "strategic"),
    PatternRule(
        "counter_metric",
        r"\b(?:counter[\s-]?metric|guardrail\s+metric|balance\s+metric|must\s+not\s+degrade|no\s+decrease\s+in)\b",
        "strategic",
    ),
    PatternRule(
        "source_of_truth",
        r"\b(?:source\s+of\s+truth|measured\s+(?:via|in|by|using)|tracked\s+in|mixpanel|amplitude|datadog"
        r"|segment|google\s+analytics|salesforce|looker|tableau)\b",
        "strategic",
    ),
    PatternRule(
        "kill_switch",
        r"\b(?:kill\s+(?:switch|criteria)|pivot\s+or\s+persevere|failure\s+criteria"
        r"|rollback\s+(?:plan|criteria)|prove[^.\n]{0,80}(?:wrong|failure)|abort\s+criteria)",
        "strategic",
    ),
    PatternRule(
        "traceability",
        r"\b(?:traceability|traces?\s+to|maps?\s+to|linked\s+to\s+problem|requirement\s+id|fr\d+|nfr\d+"
        r"|problem\s+id)\b|\bp\d+\s*[-:→]|→",
        "strategic",
    ),
    PatternRule(
        "traceability_section",
        r"^#+\s*(?:\d+\.?\d*\.?\s*)?(?:traceability|requirement\s+mapping|problem[\s-]requirement\s+matrix)",
        "strategic",
        multiline=True,
    ),
    PatternRule(
        "alternatives_section",
        r"^#+\s*(?:\d+\.?\d*\.?\s*)?(?:alternative|rejected\s+approach|other\s+option|we\s+considered)",
        "strategic",
        multiline=True,
    ),
    PatternRule(
        "alternatives_content",
        r"\b(?:rejected\s+because|we\s+considered|alternative\s+(?:was|approach)|instead\s+of|trade[\s-]?off)",
        "strategic",
    ),
    PatternRule(
        "door_type",
        r"\b(?:one[\s-]?way\s+door|two[\s-]?way\s+door|irreversible|reversible|high\s+cost\s+of\s+change"
        r"|easy\s+to\s+pivot)\b|🚪|🔄",
        "strategic",
    ),
    PatternRule(
        "dissenting_section",
        r"^#+\s*(?:\d+\.?\d*\.?\s*)?(?:dissenting|disagree|known\s+unknown|unresolved\s+debate"
        r"|open\s+question|trade[\s-]?off)",
        "strategic",
        multiline=True,
    ),
    PatternRule(
        "dissenting_content",
        r"\b(?:dissenting\s+opinion|unresolved\s+debate|stakeholder\s+disagree|we\s+disagree"
        r"|different\s+view|known\s+unknown)",
        "strategic",
    ),
    PatternRule(
        "customer_faq",
        r"^#+\s*(?:\d+\.?\d*\.?\s*)?(?:customer\s+faq|external\s+faq|working\s+backwards|press\s+release"
        r"|aha\s+moment)",
        "strategic",
        multiline=True,
    ),
    PatternRule(
        "aha_quote",
        r"\"[^\"\n]{20,400}\"[^\n]{0,40}[—-]|before\s+\[[^\]\n]{1,80}\][^\n]{0,200}after|customer\s+quote",
        "strategic",
    ),
    PatternRule("risk_section", r"^#+\s*(?:\d+\.?\d*\.?\s*)?(?:risk|unknown|assumption)", "strategic",
                multiline=True),
    PatternRule(
        "specific_risks",
        r"\brisk\s*:|\brisk\b[^\n]{0,120}\b(?:that|if|when)\b|mitigation\s*:|contingency",
        "strategic",
    ),
))

EXPANSION_STUB = PatternRule(
    "expansion_stub",
    r"\[(?:expand|to be expanded|tbd|todo)[^\]\n]{0,120}\]|^\s*(?:[-*]\s*)?tbd\.?\s*$",
    "stub",
    multiline=True,
)

_HEADING_LINE = compile_pattern("heading_line", r"^(#+)[ \t]+\S", re.MULTILINE)
_PURPOSE_HEADING = compile_pattern(
    "purpose_heading", r"^#+\s*(?:purpose|introduction|overview)", re.IGNORECASE | re.MULTILINE)
_FEATURE_HEADING = compile_pattern(
    "feature_heading", r"^#+\s*(?:feature|requirement)", re.IGNORECASE | re.MULTILINE)
_SOLUTION_HEADING = compile_pattern(
    "solution_heading", r"^#+\s*(?:\d+\.?\d*\.?\s*)?(?:proposed\s+solution|solution)",
    re.IGNORECASE | re.MULTILINE)
_DASH_BULLET = compile_pattern("dash_bullet", r"^-[ \t]+", re.MULTILINE)
_STAR_BULLET = compile_pattern("star_bullet", r"^\*[ \t]+[^*]", re.MULTILINE)
_TABLE_ROW = compile_pattern("table_row", r"\|[^\n]{1,500}\|")
_CHECKBOX = compile_pattern("checkbox", r"\[[ xX]\]")


# ============================================================
# DETECTORS
# ============================================================

def detect_vague_language(text: str) -> DetectionResult:
    return detect(text, VAGUE)


def detect_prioritization(text: str) -> DetectionResult:
    return detect(text, PRIORITIZATION)


def detect_customer_evidence(text: str) -> DetectionResult:
    result = detect(text, CUSTOMER_EVIDENCE)
    result.extra["evidence_types"] = sum(1 for name in result.counts if result.has(name))
    return result


def detect_scope_boundaries(text: str) -> DetectionResult:
    return detect(text, SCOPE)


def detect_value_proposition(text: str) -> DetectionResult:
    result = detect(text, VALUE_PROPOSITION)
    both = result.has("customer_value") and result.has("company_value")
    result.extra["quality_score"] = (
        int(result.has("section")) + int(both) + int(result.has("quantified_benefit"))
        + int(not result.has("vague_value")
              or result.count("quantified_benefit") > result.count("vague_value"))
    )
    return result


def detect_personas(text: str) -> DetectionResult:
    return detect(text, PERSONAS)


def detect_segments(text: str) -> DetectionResult:
    result = detect(text, SEGMENTS)
    markers = {t for name in result.terms for t in result.terms[name]}
    result.extra["specificity_count"] = len(markers)
    return result


def detect_problem_statement(text: str) -> DetectionResult:
    return detect(text, PROBLEM)


def detect_non_functional(text: str) -> DetectionResult:
    result = detect(text, NFR)
    result.extra["categories"] = [c for c in NFR_CATEGORIES if result.has(c)]
    return result


def detect_requirements(text: str) -> DetectionResult:
    """User stories, FR ids and acceptance criteria counts."""
    result = detect(text, REQUIREMENTS)
    result.extra["functional_count"] = len({t.upper() for t in result.found("functional_id")})
    gwt = max(result.count("gwt_inline"), result.count("gwt_bullet"))
    result.extra["acceptance_criteria"] = max(
        gwt, result.count("ac_checkbox"), result.count("ac_verify"),
        result.count("ac_numbered"), result.count("ac_case"),
    )
    return result


def detect_dependencies(text: str) -> DetectionResult:
    return detect(text, DEPENDENCIES)


def detect_strategic(text: str) -> DetectionResult:
    return detect(text, STRATEGIC)


def detect_expansion_stubs(text: str) -> DetectionResult:
    result = DetectionResult(category="expansion_stubs")
    stubs = EXPANSION_STUB.findall(text)
    result.counts["stubs"] = len(stubs)
    result.terms["stubs"] = [s.strip() for s in stubs[:5]]
    return result


# ============================================================
# SCORERS
# ============================================================

def score_document_structure(text: str) -> DimensionScore:
    b = DimensionBuilder(20)

    sections = detect_sections(text, REQUIRED_SECTIONS)
    b.add(min(10, round(sections.found_weight * 10 / 20)))
    total = len(REQUIRED_SECTIONS)
    if len(sections.found) >= 10:
        b.strength(f"{len(sections.found)}/{total} required sections present")
    elif len(sections.found) >= 6:
        b.strength(f"{len(sections.found)}/{total} sections present")
    for name in sections.missing[:3]:
        b.issue(f"Missing section: {name}")
    if len(sections.missing) > 3:
        b.issue(f"...and {len(sections.missing) - 3} more missing sections")

    levels = {len(m.group(1)) for m in _HEADING_LINE.finditer(text)}
    if 1 in levels and 2 in levels:
        b.add(3, strength="Good heading hierarchy")
    elif levels:
        b.add(1)
    else:
        b.issue("No clear heading structure")

    purpose = _PURPOSE_HEADING.search(text)
    features = _FEATURE_HEADING.search(text)
    if purpose and features and purpose.start() < features.start():
        b.add(1, strength="Logical document flow (context before requirements)")
    faq = STRATEGIC.rule("customer_faq").compiled.search(text)
    solution = _SOLUTION_HEADING.search(text)
    if faq and solution and faq.start() < solution.start():
        b.add(1, strength="Working Backwards: Customer FAQ before Solution")

    dash = _DASH_BULLET.search(text) is not None
    star = _STAR_BULLET.search(text) is not None
    if dash and star:
        b.add(1, issue="Inconsistent bullet point formatting (mixing - and * bullets)")
    elif len(text) > 200:
        b.add(2, strength="Consistent formatting")

    if _TABLE_ROW.search(text):
        b.add(1, strength="Uses tables for structured information")

    scope = detect_scope_boundaries(text)
    if scope.has("in_scope") and scope.has("out_of_scope"):
        b.add(2, strength="Clear scope boundaries with explicit in-scope and out-of-scope definitions")
    elif scope.has("out_of_scope"):
        b.add(1, issue='Add explicit "In Scope" items to complement out-of-scope definitions')
    elif scope.has("scope_section"):
        b.issue('Scope section found but missing explicit "Out of Scope" items')
    return b.build()


MEASURABLE_LADDER = TierLadder((
    Tier(5, 6, "{value} measurable criteria found"),
    Tier(2, 4, "{value} measurable criteria found"),
    Tier(1, 2, "Add more measurable criteria (e.g., response times, percentages, counts)", strength=False),
), fallback="No measurable criteria - requirements should include specific numbers")


def score_requirements_clarity(text: str) -> DimensionScore:
    b = DimensionBuilder(25)

    # Precision (0-7): deductive on the raw slop penalty
    slop = analyze_slop(text)
    b.add(max(0, 7 - slop.penalty))
    if slop.score == 0:
        b.strength("No AI slop or vague language detected")
    elif slop.severity == "clean":
        b.strength("Minimal AI patterns detected")
    else:
        for issue in slop.issues:
            b.issue(issue)
    vague = detect_vague_language(text)
    if vague.total() >= 3:
        b.issue(f"{vague.total()} vague terms - replace with specific, testable language")

    # Requirement structure (0-7)
    reqs = detect_requirements(text)
    fr_count = reqs.extra["functional_count"]
    stories = reqs.count("user_story")
    if fr_count >= 3:
        doors, links = reqs.has("door_type"), reqs.has("problem_link")
        if doors and links:
            b.add(7, strength=f"{fr_count} functional requirements with Door Types and Problem Links")
        elif doors or links:
            b.add(5, strength=f"{fr_count} functional requirements found")
            if not doors:
                b.issue("Add Door Type (🚪 One-Way / 🔄 Two-Way) to requirements")
            if not links:
                b.issue("Link requirements to Problem IDs (P1, P2)")
        else:
            b.add(4, strength=f"{fr_count} functional requirements found")
            b.issue("Enhance FRs with Door Types and Problem Links for traceability")
    elif fr_count >= 1:
        b.add(3, strength=f"{fr_count} functional requirement found")
        b.issue("Add more functional requirements (FR1, FR2, FR3...)")
    elif stories >= 3:
        b.add(5, strength=f"{stories} user stories found")
        b.issue("Consider using FR format with ID, Problem Link, Door Type, and AC")
    elif stories >= 1:
        b.add(3, issue="Use FR format (FR1, FR2) with Problem Link and Door Type")
    elif reqs.count("modal") >= 5:
        b.add(2, issue="Use FR format: FR1, FR2 with Problem Link (P1), Door Type, and AC")
    else:
        b.issue("No functional requirements found")

    # Measurable criteria (0-6)
    b.ladder(MEASURABLE_LADDER, reqs.count("measurable"))

    # Prioritization (0-5)
    prio = detect_prioritization(text)
    method = "MoSCoW" if prio.has("moscow") else "P-level"
    if prio.has("priority_section") and (prio.has("moscow") or prio.has("p_level")):
        b.add(5, strength=f"Uses {method} prioritization with dedicated section")
    elif prio.has("moscow") or prio.has("p_level"):
        b.add(3, strength=f"Uses {method} prioritization")
    elif prio.total("moscow", "p_level", "numbered", "tiered") > 0:
        b.add(1, issue="Consider using explicit prioritization (MoSCoW or P0/P1/P2)")
    else:
        b.issue("No feature prioritization found - use MoSCoW or P0/P1/P2 labels")
    return b.build()


def score_user_focus(text: str) -> DimensionScore:
    b = DimensionBuilder(20)

    personas = detect_personas(text)
    user_types = personas.found("user_types")
    quality = (
        (2 if personas.has("persona_section") else 0)
        + (2 if len(user_types) >= 2 else 1 if user_types else 0)
        + int(personas.has("pain_points")) + int(personas.has("scenarios"))
        + int(personas.has("persona_depth"))
    )
    if quality >= 5:
        b.add(5, strength=(f"{len(user_types)} user types identified with dedicated section"
                           if len(user_types) >= 2 else
                           "Well-defined user persona with pain points and context"))
    elif quality >= 3:
        b.add(4)
        if user_types:
            b.strength(f"User types identified: {', '.join(user_types[:3])}")
        if personas.has("pain_points"):
            b.strength("User pain points addressed")
    elif quality >= 2:
        b.add(2, issue="Add more persona depth (pain points, scenarios, detailed descriptions)")
        if user_types:
            b.strength(f"User types identified: {', '.join(user_types[:3])}")
    elif user_types:
        b.add(1, issue="Add dedicated User Personas section with detailed descriptions")
    else:
        b.issue("No user personas found - identify who will use this product")

    segments = detect_segments(text).extra["specificity_count"]
    if segments >= 3:
        b.add(2, strength=f"Specific user segments defined ({segments} specificity markers)")
    elif segments >= 1:
        b.add(1, strength="Some segment specificity present",
              issue='Be more specific about user segments (e.g., "top 20% of power users" vs "users")')
    elif user_types:
        b.issue('Add quantified/bounded user segments (e.g., "SMB with 10-50 employees")')

    problem = detect_problem_statement(text)
    if problem.has("problem_section") and problem.has("value_prop"):
        b.add(5, strength="Clear problem statement with value proposition")
    elif problem.has("problem_language") and problem.has("value_prop"):
        b.add(3, issue="Consider adding a dedicated Problem Statement section")
    elif problem.has("problem_language") or problem.has("value_prop"):
        b.add(1, issue="Strengthen the problem statement and value proposition")
    else:
        b.issue("Missing problem statement - explain what problem this solves")

    reqs = detect_requirements(text)
    fr_count, stories = reqs.extra["functional_count"], reqs.count("user_story")
    if (fr_count >= 3 or stories >= 3) and problem.has("why"):
        b.add(5, strength="Requirements clearly linked to user needs")
    elif fr_count >= 1 or stories >= 1 or problem.has("why"):
        b.add(2)
        if not (fr_count or stories):
            b.issue("Use FR format (FR1, FR2) to connect features to user needs")
    else:
        b.issue("Requirements should trace back to user needs")

    evidence = detect_customer_evidence(text)
    strategic = detect_strategic(text)
    kinds = evidence.extra["evidence_types"]
    evidence_points = 0
    if kinds >= 3:
        evidence_points += 3
        named = [n for n in ("research", "data", "quotes", "feedback") if evidence.has(n)]
        b.strength(f"Customer evidence: {', '.join(named)}")
    elif kinds >= 2:
        evidence_points += 2
        b.strength("Some customer evidence present")
    elif kinds >= 1:
        evidence_points += 1
        b.issue("Add more customer evidence (research, data, quotes, feedback)")
    else:
        b.issue("No customer evidence found")
    if strategic.has("customer_faq"):
        evidence_points += 1
        b.strength("Customer FAQ section (Working Backwards approach)")
    if strategic.has("aha_quote"):
        evidence_points += 1
        b.strength('Customer "Aha!" moment quote included')
    b.add(min(evidence_points, 5))
    return b.build()


def score_technical_quality(text: str) -> DimensionScore:
    b = DimensionBuilder(15)

    nfr = detect_non_functional(text)
    categories = nfr.extra["categories"]
    if len(categories) >= 4 and nfr.has("nfr_section"):
        b.add(5, strength=f"{len(categories)} NFR categories addressed in dedicated section")
    elif len(categories) >= 3:
        b.add(4, strength=f"{len(categories)} NFR categories mentioned: {', '.join(categories)}")
    elif categories:
        b.add(2, issue="Add more non-functional requirements (performance, security, reliability)")
    else:
        b.issue("Missing non-functional requirements - define quality attributes")

    reqs = detect_requirements(text)
    ac = reqs.extra["acceptance_criteria"]
    success_and_failure = ac >= 2 and reqs.has("failure_cases")
    if ac >= 3 and success_and_failure:
        b.add(5, strength=f"{ac} acceptance criteria with success AND failure cases")
    elif ac >= 3:
        b.add(4, strength=f"{ac} acceptance criteria in Given/When/Then format",
              issue="Add failure/edge case acceptance criteria (not just happy path)")
    elif ac >= 1:
        b.add(2, strength=f"{ac} acceptance criteria found",
              issue="Add more acceptance criteria including failure/edge cases")
    elif _CHECKBOX.search(text):
        b.add(1, issue="Consider using Given/When/Then format for acceptance criteria")
    else:
        b.issue("No acceptance criteria - add testable verification conditions")

    deps = detect_dependencies(text)
    if deps.has("dependency_section") and deps.has("dependency_language"):
        b.add(5, strength="Dependencies and constraints documented")
    elif deps.has("dependency_section") or deps.has("dependency_language"):
        b.add(2, issue="Document all dependencies, assumptions, and constraints")
    else:
        b.issue("Missing dependencies/constraints section")
    return b.build()


def score_strategic_viability(text: str) -> DimensionScore:
    b = DimensionBuilder(20)
    s = detect_strategic(text)

    # Metric validity (0-6)
    if s.has("leading_indicator"):
        b.add(2, strength="Leading indicators defined (predictive metrics)")
    else:
        b.issue("Add leading indicators - metrics that predict success before launch")
    if s.has("counter_metric"):
        b.add(2, strength="Counter-metrics defined to prevent perverse incentives")
    else:
        b.issue("Add counter-metrics to guard against unintended consequences")
    if s.count("source_of_truth") >= 2:
        b.add(2, strength="Metrics have defined sources of truth")
    elif s.has("source_of_truth"):
        b.add(1, issue="Define source of truth for all metrics (e.g., Mixpanel, Datadog)")
    else:
        b.issue("No metric sources defined - specify where metrics are tracked")

    # Scope realism (0-5)
    if s.has("kill_switch"):
        b.add(2, strength="Hypothesis kill switch defined (pivot criteria)")
    else:
        b.issue("Add kill switch - what data would prove this feature is a failure?")
    if s.has("door_type"):
        b.add(2, strength="One-way/Two-way door decisions tagged")
    else:
        b.issue("Tag requirements as One-Way Door 🚪 (irreversible) or Two-Way Door 🔄 (reversible)")
    if s.has("alternatives_section") or s.has("alternatives_content"):
        b.add(1, strength="Alternatives considered and documented")
    else:
        b.issue('Add "Alternatives Considered" section with rejected approaches')

    # Risk and mitigation (0-5)
    if s.has("risk_section") and s.has("specific_risks"):
        b.add(3, strength="Risks documented with specific mitigations")
    elif s.has("risk_section") or s.has("specific_risks"):
        b.add(1, issue="Add specific mitigations for each identified risk")
    else:
        b.issue("Add Risk section with specific risks and mitigations")
    if s.has("dissenting_section") or s.has("dissenting_content"):
        b.add(2, strength="Known unknowns and dissenting opinions documented")
    else:
        b.issue("Document dissenting opinions and unresolved debates")

    # Traceability (0-4)
    if s.has("traceability_section"):
        b.add(2, strength="Traceability section present")
    if s.count("traceability") >= 3:
        b.add(2, strength="Requirements traceable to problems and metrics")
    elif s.has("traceability"):
        b.add(1, issue="Improve traceability - link each requirement to problem and success metric")
    else:
        b.issue("Add traceability matrix: Problem ID → Requirement ID → Metric ID")
    return b.build()


def expansion_stub_notice(text: str) -> Adjustment:
    stubs = detect_expansion_stubs(text).count("stubs")
    if not stubs:
        return Adjustment()
    return Adjustment(issues=(f"{stubs} section(s) marked for expansion - fill them in before review",))


PLUGIN = DocumentTypePlugin(
    id="prd",
    name="Product Requirements Document",
    description="Requirements, users, technical quality and strategic viability of a product plan",
    rubric=(
        Dimension("structure", "Document Structure", 20, score_document_structure,
                  "Section presence, organization, formatting"),
        Dimension("clarity", "Requirements Clarity", 25, score_requirements_clarity,
                  "Precision, completeness, prioritization"),
        Dimension("user_focus", "User Focus", 20, score_user_focus,
                  "Personas, problem statement, customer evidence"),
        Dimension("technical", "Technical Quality", 15, score_technical_quality,
                  "Non-functional requirements, acceptance criteria, dependencies"),
        Dimension("strategic_viability", "Strategic Viability", 20, score_strategic_viability,
                  "Metric validity, scope realism, risk quality, traceability"),
    ),
    detectors={
        "sections": lambda text: detect_sections(text, REQUIRED_SECTIONS),
        "vague_language": detect_vague_language,
        "prioritization": detect_prioritization,
        "customer_evidence": detect_customer_evidence,
        "scope": detect_scope_boundaries,
        "value_proposition": detect_value_proposition,
        "personas": detect_personas,
        "segments": detect_segments,
        "problem": detect_problem_statement,
        "non_functional": detect_non_functional,
        "requirements": detect_requirements,
        "dependencies": detect_dependencies,
        "strategic": detect_strategic,
        "expansion_stubs": detect_expansion_stubs,
    },
    adjustments=(expansion_stub_notice,),
)
