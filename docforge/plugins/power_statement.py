"""
Power Statement Rubric

Scoring Dimensions (100 pts total):
  1. Clarity (25)      no filler or jargon, 50-150 words, active voice, prose
  2. Impact (25)       business/customer impact, quantified, scale
  3. Action (25)       opens with a strong action verb, avoids weak verbs
  4. Specificity (25)  impact metrics (%, $), context, timeframe

A "Version A" (concise paragraph) plus "Version B" (Challenge / Solution /
Results / Why It Works) layout earns up to a 5-point bonus; the aggregator
clamps the total to 100.
"""

from __future__ import annotations

import re

from docforge.detection import DetectionResult, detect
from docforge.normalize import count_words, split_paragraphs
from docforge.patterns import PatternCategory, PatternRule, compile_pattern, phrase_rule
from docforge.registry import Adjustment, DocumentTypePlugin
from docforge.scoring import Dimension, DimensionBuilder, DimensionScore


CONCISE_MIN_WORDS = 50
CONCISE_MAX_WORDS = 150
TOO_SHORT_WORDS = 30
TOO_LONG_WORDS = 200
VAGUE_TERM_POINTS = 3
VAGUE_TERM_MAX = 9


# ============================================================
# WORD LISTS
# ============================================================

STRONG_ACTION_VERBS = (
    "achieved", "accelerated", "accomplished", "acquired", "activated", "adapted",
    "administered", "advanced", "advised", "advocated", "allocated", "amplified",
    "analyzed", "anchored", "applied", "appointed", "appraised", "approved",
    "architected", "arranged", "assembled", "assessed", "assigned", "attained",
    "audited", "authored", "automated", "awarded", "balanced", "boosted",
    "bridged", "budgeted", "built", "calculated", "captured", "cataloged",
    "centralized", "chaired", "championed", "changed", "clarified", "coached",
    "collaborated", "combined", "commanded", "communicated", "compared", "compiled",
    "completed", "composed", "computed", "conceived", "conceptualized", "condensed",
    "conducted", "configured", "conserved", "consolidated", "constructed", "consulted",
    "contracted", "contributed", "controlled", "converted", "convinced", "coordinated",
    "corrected", "counseled", "created", "critiqued", "cultivated", "customized",
    "cut", "debugged", "decentralized", "decreased", "defined", "delegated",
    "delivered", "demonstrated", "deployed", "designed", "detected", "determined",
    "developed", "devised", "diagnosed", "directed", "discovered", "dispatched",
    "displayed", "dissected", "distributed", "diversified", "diverted", "documented",
    "doubled", "drafted", "drove", "earned", "edited", "educated", "effected",
    "elected", "elevated", "eliminated", "enabled", "encouraged", "endorsed",
    "enforced", "engaged", "engineered", "enhanced", "enlarged", "enlisted",
    "ensured", "established", "estimated", "evaluated", "examined", "exceeded",
    "executed", "expanded", "expedited", "experimented", "explained", "explored",
    "expressed", "extended", "extracted", "fabricated", "facilitated", "fashioned",
    "finalized", "fixed", "focused", "forecasted", "forged", "formalized",
    "formed", "formulated", "fortified", "fostered", "founded", "fulfilled",
    "gained", "gathered", "generated", "governed", "grew", "guided", "halved",
    "handled", "headed", "heightened", "hired", "hosted", "identified",
    "illustrated", "implemented", "improved", "improvised", "inaugurated", "increased",
    "incubated", "influenced", "informed", "initiated", "innovated", "inspected",
    "inspired", "installed", "instituted", "instructed", "integrated", "intensified",
    "interpreted", "interviewed", "introduced", "invented", "invested", "investigated",
    "launched", "led", "leveraged", "licensed", "lifted", "linked", "lobbied",
    "localized", "located", "logged", "lowered", "maintained", "managed", "mapped",
    "marketed", "mastered", "maximized", "measured", "mediated", "mentored", "merged",
    "minimized", "mobilized", "modeled", "moderated", "modernized", "modified",
    "monitored", "motivated", "multiplied", "navigated", "negotiated", "netted",
    "nurtured", "observed", "obtained", "opened", "operated", "optimized", "orchestrated",
    "ordered", "organized", "originated", "outlined", "outpaced", "outperformed",
    "overcame", "overhauled", "oversaw", "partnered", "passed", "performed", "persuaded",
    "piloted", "pioneered", "placed", "planned", "positioned", "predicted", "prepared",
    "presented", "preserved", "presided", "prevented", "prioritized", "processed",
    "procured", "produced", "profiled", "programmed", "projected", "promoted",
    "proposed", "protected", "proved", "provided", "publicized", "published",
    "purchased", "pursued", "qualified", "quantified", "questioned", "raised",
    "ranked", "rated", "reached", "realigned", "realized", "rearranged", "rebuilt",
    "recaptured", "received", "recognized", "recommended", "reconciled", "reconstructed",
    "recorded", "recovered", "recruited", "rectified", "redesigned", "reduced",
    "reengineered", "referred", "refined", "reformed", "refurbished", "regained",
    "registered", "regulated", "rehabilitated", "reinforced", "reinstated", "rejuvenated",
    "related", "released", "remodeled", "renegotiated", "renewed", "reorganized",
    "repaired", "replaced", "replicated", "reported", "repositioned", "represented",
    "reproduced", "requested", "researched", "reshaped", "resolved", "responded",
    "restored", "restructured", "retained", "retrieved", "revamped", "revealed",
    "reversed", "reviewed", "revised", "revitalized", "revolutionized", "rewarded",
    "routed", "safeguarded", "salvaged", "saved", "scheduled", "screened", "secured",
    "segmented", "selected", "separated", "served", "serviced", "set", "settled",
    "shaped", "shared", "sharpened", "shipped", "shortened", "showcased", "simplified",
    "simulated", "slashed", "sold", "solicited", "solved", "sorted", "sourced",
    "sparked", "spearheaded", "specialized", "specified", "sponsored", "stabilized",
    "staffed", "staged", "standardized", "started", "steered", "stimulated",
    "strategized", "streamlined", "strengthened", "stretched", "structured", "studied",
    "submitted", "succeeded", "summarized", "superseded", "supervised", "supplied",
    "supported", "surpassed", "surveyed", "sustained", "synchronized", "synthesized",
    "systematized", "tabulated", "tailored", "targeted", "taught", "terminated",
    "tested", "tightened", "traced", "tracked", "traded", "trained", "transcribed",
    "transferred", "transformed", "transitioned", "translated", "transmitted",
    "transported", "traveled", "treated", "trimmed", "tripled", "troubleshot",
    "turned", "tutored", "uncovered", "undertook", "unified", "united", "updated",
    "upgraded", "upheld", "utilized", "validated", "valued", "verified", "visualized",
    "volunteered", "widened", "won", "worked", "wrote",
)

WEAK_VERBS = (
    "was", "were", "been", "being", "am", "is", "are",
    "had", "has", "have", "having",
    "did", "does", "do", "doing",
    "helped", "assisted", "supported", "worked on", "was responsible for",
    "participated in", "was involved in", "contributed to",
)

_STRONG_VERB_SET = frozenset(STRONG_ACTION_VERBS)


# ============================================================
# PATTERNS
# ============================================================

ACTION = PatternCategory("action", (
    phrase_rule("strong_verbs", STRONG_ACTION_VERBS, "action"),
    phrase_rule("weak_verbs", WEAK_VERBS, "action"),
))

_WEAK_OPENING = compile_pattern(
    "weak_opening",
    r"^(?:was|were|had|have|helped|assisted|worked|participated|contributed)\b", re.IGNORECASE)
_LEADING_PUNCT = compile_pattern("edge_punctuation", r"^\W+|\W+$")

SPECIFICITY = PatternCategory("specificity", (
    PatternRule("numbers", r"\d+(?:\.\d+)?", "specificity", indicator="{count} numeric values"),
    PatternRule("percentages", r"\d+(?:\.\d+)?%", "specificity", indicator="{count} percentages"),
    PatternRule(
        "dollars",
        r"\$[\d,]{1,20}(?:\.\d+)?[KMB]?|\d+(?:\.\d+)?\s*(?:million|billion|thousand)",
        "specificity",
        indicator="Dollar amounts present",
    ),
    PatternRule("time_metrics", r"\d+\s*(?:hour|day|week|month|year|minute|second)s?", "specificity",
                indicator="Time-based metrics"),
    PatternRule(
        "timeframes",
        r"\b(?:Q[1-4]\s*[-–]?\s*(?:Q[1-4]\s*)?\d{4}|\d+\s*(?:months?|quarters?|weeks?)\b"
        r"|next\s+(?:quarter|month|year)|by\s+\w{1,20}\s+\d{4}|within\s+\d+\s+\w{1,20})",
        "specificity",
        indicator="Specific timeframes (Q1, by date, etc.)",
    ),
    PatternRule(
        "quantities",
        r"\d+\s*(?:user|customer|client|team|member|employee|project|product|feature|system|application)s?",
        "specificity",
    ),
    PatternRule(
        "comparisons",
        r"\b(?:increased|decreased|reduced|improved|grew|doubled|tripled|halved|cut)\s+by\s+\d+",
        "specificity",
        indicator="Quantified comparisons",
    ),
    PatternRule("context", r"\b(?:at|for|with|across|within)\s+[A-Z]", "specificity",
                indicator="Contextual details present"),
    PatternRule("team_context", r"\b(?:team|department|organization|company|division|corp|inc|llc)\b",
                "specificity", indicator="Team/org context provided"),
))

IMPACT = PatternCategory("impact", (
    PatternRule("business_impact",
                r"\b(?:revenue|profit|cost|savings|efficiency|productivity|growth|roi|return)\b",
                "impact", indicator="Business impact mentioned"),
    PatternRule(
        "customer_impact",
        r"\b(?:customer|user|client|satisfaction|experience|retention|acquisition|engagement|nps)\b",
        "impact",
        indicator="Customer impact mentioned",
    ),
    PatternRule(
        "scale",
        r"\b(?:company.wide|organization.wide|enterprise|global|national|regional|cross.functional)\b",
        "impact",
        indicator="Scale/scope indicated",
    ),
    PatternRule("result_language",
                r"\b(?:resulting in|leading to|which|enabling|driving|achieving|delivering)\b",
                "impact", indicator="Result language present"),
    PatternRule(
        "improvement_language",
        r"\b(?:improved|increased|reduced|decreased|enhanced|accelerated|streamlined|optimized)\b",
        "impact",
        indicator="Improvement language present",
    ),
))

CLARITY = PatternCategory("clarity", (
    PatternRule(
        "fillers",
        r"\b(?:very|really|quite|somewhat|rather|fairly|pretty much"
        r"|basically|essentially|actually|literally|virtually"
        r"|in order to|due to the fact that|for the purpose of"
        r"|a lot of|lots of|tons of|bunch of"
        r"|thing|stuff|something|somehow)\b"
        r"|it'?s worth noting(?: that)?"
        r"|in today'?s (?:competitive )?landscape"
        r"|let'?s talk about"
        r"|the reality is",
        "clarity",
        indicator="{count} filler words detected",
    ),
    PatternRule(
        "jargon",
        r"\b(?:synergy|synergize|synergistic|leverage|leveraging|leveraged|paradigm shift|paradigm"
        r"|best.in.class|world.class|cutting.edge|state.of.the.art"
        r"|move the needle|low.hanging fruit|boil the ocean"
        r"|circle back|touch base|take offline|bandwidth|deep dive|drill down)\b",
        "clarity",
        indicator="{count} jargon terms detected",
    ),
    PatternRule(
        "passive_voice",
        r"\b(?:am|are|is|was|were|been|being)\s+(?:\w{1,30}ed|achieved|led|built|won|made|done|given"
        r"|taken|shown)\b",
        "clarity",
        indicator="Passive voice detected",
    ),
    PatternRule("bullets", r"^\s*[-*+•◆✓✅→►▶|]\s+|^\s*\d+[.)]\s+", "clarity", multiline=True),
    PatternRule(
        "vague_improvement",
        r"\b(?:improve|improved|improving|enhance|enhanced|enhancing|optimize|optimized|optimizing"
        r"|better results?|significant|significantly)\b",
        "clarity",
        indicator="Vague terms: {terms}",
    ),
))

VERSIONS = PatternCategory("versions", (
    PatternRule("version_a", r"##?\s*Version\s*A[:\s]", "versions", indicator="Version A (concise) present"),
    PatternRule("version_b", r"##?\s*Version\s*B[:\s]", "versions", indicator="Version B (structured) present"),
    PatternRule("challenge", r"###?\s*(?:The\s+)?Challenge", "versions"),
    PatternRule("solution", r"###?\s*(?:The\s+)?Solution", "versions"),
    PatternRule("results", r"###?\s*(?:Proven\s+)?Results", "versions"),
    PatternRule("why_it_works", r"###?\s*Why\s+It\s+Works", "versions"),
))
_STRUCTURED_SECTIONS = ("challenge", "solution", "results", "why_it_works")


# ============================================================
# DETECTORS
# ============================================================

def _opening_word(text: str) -> str:
    """First word of the first prose block, headings skipped."""
    paragraphs = split_paragraphs(text)
    if not paragraphs:
        return ""
    words = paragraphs[0].split()
    return _LEADING_PUNCT.sub("", words[0]).lower() if words else ""


def detect_action_verbs(text: str) -> DetectionResult:
    result = detect(text, ACTION)
    opening = _opening_word(text)
    starts_strong = opening in _STRONG_VERB_SET
    paragraphs = split_paragraphs(text)
    starts_weak = bool(paragraphs and _WEAK_OPENING.match(paragraphs[0]))

    strong = result.found("strong_verbs")
    weak = result.found("weak_verbs")
    result.extra.update({
        "starts_with_strong_verb": starts_strong,
        "starts_with_weak_pattern": starts_weak,
        "strong_verb_count": len(strong),
        "weak_verb_count": len(weak),
    })
    result.indicators = [i for i in (
        starts_strong and "Starts with strong action verb",
        strong and f"{len(strong)} strong action verbs",
        weak and f"{len(weak)} weak verbs detected",
        starts_weak and "Starts with weak verb pattern",
    ) if i]
    return result


def detect_specificity(text: str) -> DetectionResult:
    result = detect(text, SPECIFICITY)
    result.extra["time_count"] = result.total("time_metrics", "timeframes")
    return result


def detect_impact(text: str) -> DetectionResult:
    return detect(text, IMPACT)


def detect_clarity(text: str) -> DetectionResult:
    result = detect(text, CLARITY)
    words = count_words(text)
    result.extra.update({
        "word_count": words,
        "is_concise": CONCISE_MIN_WORDS <= words <= CONCISE_MAX_WORDS,
        "is_too_short": words < TOO_SHORT_WORDS,
        "is_too_long": words > TOO_LONG_WORDS,
        "has_bullet_points": result.count("bullets") > 2,
    })
    return result


def detect_versions(text: str) -> DetectionResult:
    result = detect(text, VERSIONS)
    structured = sum(1 for name in _STRUCTURED_SECTIONS if result.has(name))
    result.extra.update({
        "has_both_versions": result.has("version_a") and result.has("version_b"),
        "structured_section_count": structured,
        "has_structured_content": structured >= 3,
    })
    if structured:
        result.indicators.append(f"{structured}/4 structured sections")
    return result


# ============================================================
# SCORERS
# ============================================================

def score_clarity(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    c = detect_clarity(text)

    fillers = c.count("fillers")
    if not fillers:
        b.add(6, strength="No filler words - clean, direct language")
    else:
        b.add(max(0, 6 - fillers * 2), issue=f"Remove filler words: {', '.join(c.found('fillers')[:3])}")

    jargon = c.count("jargon")
    if not jargon:
        b.add(6, strength="No jargon or buzzwords")
    else:
        b.add(max(0, 6 - jargon * 2), issue=f"Remove jargon: {', '.join(c.found('jargon')[:3])}")

    words = c.extra["word_count"]
    if c.extra["is_concise"]:
        b.add(5, strength=f"Good length for sales messaging ({words} words)")
    elif c.extra["is_too_long"]:
        b.add(2, issue=f"Too verbose ({words} words) - aim for 50-150 words")
    elif c.extra["is_too_short"]:
        b.add(2, issue=f"Too brief ({words} words) - expand to 50-150 words")
    else:
        b.add(3)

    if not c.has("passive_voice"):
        b.add(4, strength="Uses active voice")
    else:
        b.add(1, issue='Rewrite in active voice - avoid "was/were + verb"')

    if not c.extra["has_bullet_points"]:
        b.add(4, strength="Uses flowing paragraphs (not bullet points)")
    else:
        b.issue("Use flowing paragraphs instead of bullet points for sales messaging")

    vague = c.count("vague_improvement")
    if vague:
        penalty = min(VAGUE_TERM_MAX, vague * VAGUE_TERM_POINTS)
        terms = ", ".join(c.found("vague_improvement")[:3])
        b.deduct(penalty, issue=f"Replace vague terms with specifics: {terms} (-{penalty} pts)")
    return b.build()


def score_impact(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    i = detect_impact(text)
    s = detect_specificity(text)

    if i.has("business_impact") or i.has("customer_impact"):
        b.add(10)
        if i.has("business_impact"):
            b.strength("Business impact clearly stated")
        if i.has("customer_impact"):
            b.strength("Customer impact mentioned")
    else:
        b.issue("Add business or customer impact - what was the result?")

    if s.has("comparisons"):
        b.add(10, strength="Impact is quantified with comparisons")
    elif s.has("percentages") or s.has("dollars"):
        b.add(8, strength="Impact includes metrics")
    elif s.has("numbers"):
        b.add(5, issue="Quantify the impact - add percentages or dollar amounts")
    else:
        b.issue("Add quantified impact - how much did you improve/save/grow?")

    if i.has("scale") or s.has("team_context"):
        b.add(5, strength="Scale/scope of impact is clear")
    else:
        b.issue("Add context about scale - team size, company scope, etc.")
    return b.build()


def score_action(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    a = detect_action_verbs(text)
    strong = a.extra["strong_verb_count"]

    if a.extra["starts_with_strong_verb"]:
        b.add(15, strength="Starts with strong action verb")
    elif a.extra["starts_with_weak_pattern"]:
        b.issue('Replace weak opening ("was responsible for", "helped") with strong action verb')
    elif strong:
        b.add(8, issue="Move action verb to the beginning of the statement")
    else:
        b.issue("Start with a strong action verb (Led, Developed, Achieved, etc.)")

    if strong >= 2:
        b.add(5, strength=f"Uses {strong} strong action verbs")
    elif strong == 1:
        b.add(3)

    weak = a.extra["weak_verb_count"]
    if not weak:
        b.add(5, strength="No weak verbs")
    else:
        b.add(max(0, 5 - weak), issue=f"Replace weak verbs: {', '.join(a.found('weak_verbs')[:3])}")
    return b.build()


def score_specificity(text: str) -> DimensionScore:
    b = DimensionBuilder(25)
    s = detect_specificity(text)

    impact_metrics = s.total("percentages", "dollars")
    all_metrics = impact_metrics + s.extra["time_count"] + s.count("quantities")
    if impact_metrics and all_metrics >= 2:
        b.add(10, strength=f"{all_metrics} specific metrics including impact metrics (%, $)")
    elif impact_metrics:
        b.add(7, issue="Add more metrics - aim for 2+ quantified results")
    elif all_metrics >= 2:
        b.add(5, issue="Include impact metrics (%, $) not just quantities")
    elif s.has("numbers"):
        b.add(3, issue="Convert numbers to impact metrics (%, $, time saved)")
    else:
        b.issue("Add specific impact metrics (%, $, time saved)")

    if s.has("context") and s.has("team_context"):
        b.add(8, strength="Clear context provided")
    elif s.has("context") or s.has("team_context"):
        b.add(5, issue="Add more context - company, team size, or scope")
    else:
        b.issue("Add context - where did this happen? What was the scope?")

    if s.extra["time_count"]:
        b.add(7, strength="Includes timeframe or time-based metrics")
    else:
        b.issue("Add timeframe - when did this happen? How long did it take?")
    return b.build()


def version_bonus(text: str) -> Adjustment:
    """Up to +5 for the two-version layout."""
    v = detect_versions(text)
    if v.extra["has_both_versions"] and v.extra["has_structured_content"]:
        return Adjustment(5, strengths=("Both Version A and Version B with structured sections (+5 bonus)",))
    if v.extra["has_both_versions"]:
        found = v.extra["structured_section_count"]
        return Adjustment(3, issues=(f"Version B needs structured sections ({found}/4 found)",))
    if v.has("version_a") or v.has("version_b"):
        return Adjustment(2, issues=("Include both Version A (concise) and Version B (structured)",))
    return Adjustment(issues=("Format as Version A (paragraph) and Version B (structured sections)",))


PLUGIN = DocumentTypePlugin(
    id="power-statement",
    name="Power Statement",
    description="Short sales or achievement statement with quantified impact",
    rubric=(
        Dimension("clarity", "Clarity", 25, score_clarity,
                  "No filler or jargon, concise, active voice, flowing prose"),
        Dimension("impact", "Impact", 25, score_impact,
                  "Business or customer impact, quantified, with scale"),
        Dimension("action", "Action", 25, score_action,
                  "Opens with a strong action verb, avoids weak verbs"),
        Dimension("specificity", "Specificity", 25, score_specificity,
                  "Impact metrics, context and timeframe"),
    ),
    detectors={
        "action": detect_action_verbs,
        "specificity": detect_specificity,
        "impact": detect_impact,
        "clarity": detect_clarity,
        "versions": detect_versions,
    },
    adjustments=(version_bonus,),
)
