"""
Business Justification Rubric

Scoring Pillars (100 pts total):
  1. Strategic Evidence (30)      quantified problem, credible sources, before/after
  2. Financial Justification (25) ROI with formula, payback period, 3-year TCO
  3. Options & Alternatives (25)  do-nothing scenario, 3+ options, recommendation
  4. Execution Completeness (20)  executive summary, risks, stakeholder concerns
"""

from __future__ import annotations

from docforge.detection import DetectionResult, detect, detect_sections
from docforge.patterns import PatternCategory, PatternRule, heading_rule
from docforge.plugins.common import BUSINESS_FOCUS
from docforge.registry import DocumentTypePlugin
from docforge.scoring import Dimension, DimensionBuilder, DimensionScore


# ============================================================
# PATTERNS
# ============================================================

REQUIRED_SECTIONS = (
    heading_rule("Problem/Challenge", r"problem|challenge|pain.?point|context", 2),
    heading_rule("Options Analysis", r"option|alternative|scenario", 2),
    heading_rule("Financial Justification", r"financial|roi|tco|payback", 2),
    heading_rule("Solution/Proposal", r"solution|proposal|approach|recommendation", 2),
    heading_rule("Scope Definition", r"scope|in.scope|out.of.scope", 1),
    heading_rule("Stakeholders/Team", r"stakeholder|team|owner", 1),
    heading_rule("Risks/Mitigation", r"risk|mitigation", 1),
    heading_rule("Timeline/Milestones", r"timeline|milestone|phase", 1),
)

QUANTIFIED = PatternRule(
    "quantified",
    r"\d+\s*(?:%|million|thousand|hour|day|week|month|year|\$|dollar|user|customer|transaction|k\b|m\b)",
    "evidence",
    indicator="{count} quantified metrics",
)

EVIDENCE = PatternCategory("evidence", (
    heading_rule("problem_section", r"problem|challenge|pain.?point|context|why|current.?state",
                 category="evidence"),
    PatternRule(
        "problem_language",
        r"\b(?:problem|challenge|pain.?point|issue|struggle|difficult|frustrat\w{0,5}|current.?state"
        r"|today|existing)\b",
        "evidence",
        indicator="Problem framing language",
    ),
    QUANTIFIED,
    BUSINESS_FOCUS,
    PatternRule(
        "sources",
        r"\b(?:gartner|forrester|mckinsey|dora|radford|idc|according.to|research|study|survey"
        r"|benchmark|internal.data)\b",
        "evidence",
        indicator="{count} credible sources cited",
    ),
    PatternRule(
        "before_after",
        r"\b(?:before|after|from\s[^\n]{1,60}?\sto|baseline|current|target|improvement|reduction|increase)\b",
        "evidence",
        indicator="Before/after comparisons",
    ),
))

FINANCIAL = PatternCategory("financial", (
    heading_rule("financial_section", r"financial|roi|return|investment|cost|budget|tco|payback",
                 category="financial"),
    PatternRule(
        "roi",
        r"\b(?:roi|return.on.investment|benefit.?.cost|cost.?.benefit|net.present.value|npv)\b",
        "financial",
        indicator="ROI calculation mentioned",
    ),
    PatternRule(
        "roi_formula",
        r"\d+\s*[-−–]\s*\d+\s*[/÷]\s*\d+"
        r"|roi\s*[=:]\s*\d+"
        r"|\([^)\n]{0,80}benefit[^)\n]{0,80}[-−–][^)\n]{0,80}cost[^)\n]{0,80}\)\s*[/÷]"
        r"|savings\s*[/÷]\s*investment"
        r"|\$[\d,]{1,20}\s*[/÷]\s*\$[\d,]{1,20}"
        r"|\([^)\n]{1,80}[-−–][^)\n]{1,80}\)\s*[/÷]\s*\S",
        "financial",
        indicator="Explicit ROI formula present",
    ),
    PatternRule(
        "payback",
        r"\b(?:payback|break.?even|recoup|recover[^\n]{1,40}?investment|months?.to.recover)\b",
        "financial",
        indicator="Payback period discussed",
    ),
    PatternRule("payback_time", r"\b\d+\s*(?:month|year|week)s?\b", "financial",
                indicator="Specific payback timeline"),
    PatternRule(
        "tco",
        r"\b(?:tco|total.cost.of.ownership|3.?year|three.?year|implementation.cost|training.cost"
        r"|operational.cost|opportunity.cost|hidden.cost)\b",
        "financial",
        indicator="TCO/3-year analysis present",
    ),
    PatternRule(
        "dollar_amounts",
        r"\$\s*[\d,]{1,20}(?:\.\d{2})?|\d+\s*(?:million|thousand|k|m)\b\s*(?:dollars?)?",
        "financial",
        indicator="{count} dollar amounts specified",
    ),
))

OPTIONS = PatternCategory("options", (
    heading_rule("options_section", r"option|alternative|approach|scenario|comparison", category="options"),
    PatternRule(
        "do_nothing",
        r"\b(?:do.?nothing|status.?quo|no.?action|inaction|if.we.don't|without.this|current.path|option.?a)\b",
        "options",
        indicator="Do-nothing scenario analyzed",
    ),
    PatternRule(
        "alternatives",
        r"\b(?:alternative|option|approach|scenario|build.vs.buy|buy.vs.build|option.?[abc123]"
        r"|path.?[abc123])\b",
        "options",
        indicator="{count} alternatives considered",
    ),
    PatternRule(
        "recommendation",
        r"\b(?:recommend|recommendation|proposed|chosen|selected|preferred|our.choice|we.propose)\b",
        "options",
        indicator="Clear recommendation present",
    ),
    PatternRule(
        "comparison",
        r"\b(?:compare|comparison|versus|vs\b\.?|trade.?off|pros?.and.cons?|advantage|disadvantage)",
        "options",
        indicator="Comparison/trade-off analysis",
    ),
    PatternRule("minimal_investment", r"\b(?:minimal|minimum|low.?cost|basic|mvp|phase.?1|incremental)\b",
                "options", indicator="Minimal investment option considered"),
    PatternRule(
        "full_investment",
        r"\b(?:full.?investment|full.?option|strategic.?transformation|target.?state|recommended.?approach"
        r"|option.?c|comprehensive|enterprise.?solution)\b",
        "options",
        indicator="Full investment option considered",
    ),
))

EXECUTION = PatternCategory("execution", (
    heading_rule("executive_summary", r"executive.?summary|summary|tl;?dr|overview", category="execution"),
    heading_rule("risks_section", r"risk|mitigation|contingency", category="execution"),
    PatternRule(
        "risk_language",
        r"\b(?:risk|mitigation|contingency|fallback|if\s[^\n]{1,60}?fails|worst.case)\b",
        "execution",
        indicator="{count} risk/mitigation mentions",
    ),
    heading_rule("stakeholder_section", r"stakeholder|team|owner|raci|responsible", category="execution"),
    PatternRule(
        "stakeholder_concerns",
        r"\b(?:finance|fp&a|financial.planning|hr|people.?team|people.?ops|legal|compliance|equity"
        r"|liability|approval|sign.?off|cfo|cto|ceo|vp|director)\b",
        "execution",
        indicator="Finance/HR/Legal concerns addressed",
    ),
    heading_rule("timeline_section", r"timeline|milestone|phase|schedule|roadmap", category="execution"),
    heading_rule("scope_section", r"scope|boundaries|in.scope|out.of.scope", category="execution"),
))


# ============================================================
# DETECTORS
# ============================================================

def detect_strategic_evidence(text: str) -> DetectionResult:
    return detect(text, EVIDENCE)


def detect_financial_justification(text: str) -> DetectionResult:
    return detect(text, FINANCIAL)


def detect_options_analysis(text: str) -> DetectionResult:
    return detect(text, OPTIONS)


def detect_execution_completeness(text: str) -> DetectionResult:
    return detect(text, EXECUTION)


# ============================================================
# SCORERS
# ============================================================

def score_strategic_evidence(text: str) -> DimensionScore:
    b = DimensionBuilder(30)
    e = detect_strategic_evidence(text)

    quantified = e.count("quantified")
    if e.has("problem_section") and quantified >= 3:
        b.add(12, strength=f"Strong quantified problem statement ({quantified} metrics)")
    elif e.has("problem_section") and quantified:
        b.add(8, issue="Add more quantified metrics - aim for 80/20 quant/qual ratio")
    elif e.has("problem_language"):
        b.add(4, issue="Problem statement lacks quantified data - add specific numbers")
    else:
        b.issue("Problem statement missing or unclear - define with specific metrics")

    sources = e.count("sources")
    if sources >= 2:
        b.add(10, strength=f"{sources} credible sources cited")
    elif sources:
        b.add(5, issue="Add more sources - cite industry benchmarks or internal data with dates")
    else:
        b.issue("No sources cited - add Gartner, Forrester, internal data, or other benchmarks")

    if e.has("business_focus") and e.has("before_after"):
        b.add(8, strength="Clear business focus with before/after comparison")
    elif e.has("business_focus"):
        b.add(4, issue="Add before/after comparison to show baseline vs target")
    else:
        b.issue("Strengthen business/customer focus - explain why this matters to stakeholders")
    return b.build()


def score_financial_justification(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    f = detect_financial_justification(text)

    if f.has("roi") and f.has("roi_formula"):
        b.add(10, strength="ROI calculation with explicit formula")
    elif f.has("roi"):
        b.add(5, issue="ROI mentioned but missing explicit formula - use (Benefit - Cost) / Cost × 100")
    else:
        b.issue("ROI calculation missing - add return on investment analysis")

    if f.has("payback") and f.has("payback_time"):
        b.add(8, strength="Payback period specified with timeline")
    elif f.has("payback"):
        b.add(4, issue="Payback period mentioned but no specific timeline - target <12 months")
    else:
        b.issue("Payback period missing - state time to recoup investment")

    if f.has("tco") and f.has("dollar_amounts"):
        b.add(7, strength="TCO analysis with dollar amounts")
    elif f.has("tco"):
        b.add(4, issue="TCO mentioned but lacks specific dollar amounts")
    else:
        b.issue("TCO missing - add 3-year view including implementation, training, ops costs")
    return b.build()


def score_options_analysis(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    o = detect_options_analysis(text)

    do_nothing = o.count("do_nothing")
    if do_nothing >= 2:
        b.add(10, strength="Do-nothing scenario thoroughly analyzed")
    elif do_nothing:
        b.add(6, issue="Do-nothing scenario mentioned - quantify the cost/risk of inaction")
    else:
        b.issue("Do-nothing scenario missing - explain what happens if we do nothing")

    alternatives = o.count("alternatives")
    investment_option = o.has("minimal_investment") or o.has("full_investment")
    if alternatives >= 3 and investment_option:
        b.add(10, strength=f"{alternatives} alternatives analyzed with investment options")
    elif alternatives >= 2:
        b.add(6, issue="Add minimal or full investment option as alternative")
    elif alternatives:
        b.add(3, issue="Only one alternative - add at least 3 options (do-nothing, minimal, full)")
    else:
        b.issue("Alternatives missing - analyze at least 3 options")

    if o.has("recommendation") and o.has("comparison"):
        b.add(5, strength="Clear recommendation with trade-off analysis")
    elif o.has("recommendation"):
        b.add(3, issue="Recommendation present - add pros/cons comparison")
    else:
        b.issue("Recommendation missing - state which option and why")
    return b.build()


def score_execution_completeness(text: str) -> DimensionScore:
    b = DimensionBuilder(20)
    x = detect_execution_completeness(text)

    if x.has("executive_summary"):
        b.add(6, strength="Executive summary present")
    else:
        b.issue("Executive summary missing - add TL;DR readable in 30 seconds")

    risks = x.count("risk_language")
    if x.has("risks_section") and risks >= 3:
        b.add(7, strength=f"{risks} risks identified with mitigation strategies")
    elif x.has("risks_section"):
        b.add(4, issue="Risks section present - add more risks with mitigation strategies")
    else:
        b.issue("Risks section missing - identify risks and mitigation strategies")

    if x.has("stakeholder_section") and x.has("stakeholder_concerns"):
        b.add(7, strength="Stakeholder concerns (Finance/HR/Legal) addressed")
    elif x.has("stakeholder_section"):
        b.add(4, issue="Stakeholders identified - address Finance, HR, Legal concerns")
    else:
        b.issue("Stakeholder section missing - identify and address stakeholder concerns")
    return b.build()


PLUGIN = DocumentTypePlugin(
    id="business-justification",
    name="Business Justification",
    description="Investment case with evidence, financials, options and an execution plan",
    rubric=(
        Dimension("strategic_evidence", "Strategic Evidence", 30, score_strategic_evidence,
                  "Quantified problem, credible sources, before/after comparison"),
        Dimension("financial_justification", "Financial Justification", 25, score_financial_justification,
                  "ROI with formula, payback period, 3-year TCO"),
        Dimension("options_analysis", "Options & Alternatives", 25, score_options_analysis,
                  "Do-nothing scenario, multiple options, clear recommendation"),
        Dimension("execution_completeness", "Execution Completeness", 20, score_execution_completeness,
                  "Executive summary, risks, stakeholder concerns"),
    ),
    detectors={
        "sections": lambda text: detect_sections(text, REQUIRED_SECTIONS),
        "strategic_evidence": detect_strategic_evidence,
        "financial_justification": detect_financial_justification,
        "options_analysis": detect_options_analysis,
        "execution_completeness": detect_execution_completeness,
    },
)
