"""
PR-FAQ (Press Release + FAQ) Rubric

Scoring Dimensions (100 pts total):
  1. Structure & Hook (20)       — headline, newsworthy opening, release date
  2. Content Quality (20)        — the 5 Ws, press-release shape, credibility
  3. Professional Quality (15)   — tone, readability, marketing fluff
  4. Customer Evidence (10)      — quotes backed by metrics, the 2-quote standard
  5. FAQ Quality (35)            — External FAQ, Internal FAQ, hard questions

Sub-scores are computed on their natural scale and rescaled to the
dimension maximum. When the Internal FAQ is missing, or its questions are
all softballs, the total is capped at 50.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from docforge.detection import DetectionResult, detect
from docforge.normalize import extract_section, extract_title, split_sentences, strip_markdown
from docforge.patterns import PatternCategory, PatternRule, compile_pattern, phrase_rule
from docforge.registry import DocumentTypePlugin, ScoreCap
from docforge.scoring import Dimension, DimensionBuilder, DimensionScore
from docforge.slop import SlopPolicy, analyze_slop

FAQ_CAP = 50
# Deduction taken inside the marketing-fluff sub-score
FLUFF_SLOP_POLICY = SlopPolicy()


# ============================================================
# PATTERNS
# ============================================================

STRONG_VERBS = (
    "launches", "announces", "introduces", "unveils", "delivers", "creates",
    "develops", "achieves", "reduces", "increases", "improves", "transforms",
)
WEAK_HEADLINE_LANGUAGE = (
    "new", "innovative", "cutting-edge", "revolutionary", "world-class",
    "leading", "comprehensive", "robust",
)
HYPE_WORDS = (
    "revolutionary", "groundbreaking", "cutting-edge", "world-class",
    "industry-leading", "best-in-class", "state-of-the-art", "next-generation",
    "breakthrough", "game-changing", "disruptive", "unprecedented",
    "ultimate", "premier", "superior", "exceptional", "outstanding",
)
EMOTIONAL_FLUFF = ("excited", "thrilled", "delighted", "pleased", "proud", "honored")
VAGUE_TERMS = (
    "comprehensive solution", "robust platform", "seamless integration",
    "enhanced productivity", "improved efficiency", "optimal performance",
)
TECH_JARGON = (
    "synergies", "paradigm", "leverage", "ecosystem", "scalable",
    "turnkey", "best-in-class", "enterprise-grade",
)
TIMELINESS_WORDS = ("today", "this week", "announces", "launched", "released", "unveiled", "now available")
PROBLEM_WORDS = ("solves", "addresses", "tackles", "eliminates", "reduces", "improves", "streamlines", "automates")
HOOK_FLUFF_WORDS = (
    "excited", "pleased", "proud", "thrilled", "delighted",
    "revolutionary", "groundbreaking", "cutting-edge",
)
ACTION_WORDS = ("announces", "launches", "introduces", "unveils", "releases", "develops", "creates")
WHY_INDICATORS = (
    "because", "to help", "to address", "to solve", "to improve",
    "to reduce", "to increase", "enables", "allows", "provides",
)
SUPPORTING_ELEMENTS = ("according to", "the company", "additionally", "furthermore", "the solution", "customers")
BOILERPLATE_INDICATORS = ("about", "founded", "headquartered", "company", "organization", "learn more")
TRANSITION_WORDS = ("additionally", "furthermore", "moreover", "however", "meanwhile", "as a result")
THIRD_PARTY_INDICATORS = ("analyst", "research firm", "industry report", "gartner", "forrester", "idc", "mckinsey")
PASSIVE_INDICATORS = (
    "is being", "was being", "are being", "were being",
    "has been", "have been", "had been", "will be",
)

PRESS_LANGUAGE = PatternCategory("press_language", (
    phrase_rule("strong_verbs", STRONG_VERBS, "headline"),
    phrase_rule("weak_headline", WEAK_HEADLINE_LANGUAGE, "headline"),
    phrase_rule("hype", HYPE_WORDS, "fluff", indicator="{count} hyperbolic words ({terms})"),
    phrase_rule("emotional", EMOTIONAL_FLUFF, "fluff"),
    phrase_rule("vague_benefits", VAGUE_TERMS, "fluff", indicator="{count} vague benefit claims"),
    phrase_rule("jargon", TECH_JARGON, "fluff"),
    phrase_rule("timeliness", TIMELINESS_WORDS, "hook"),
    phrase_rule("problem_words", PROBLEM_WORDS, "hook"),
    phrase_rule("hook_fluff", HOOK_FLUFF_WORDS, "hook"),
    phrase_rule("action_words", ACTION_WORDS, "five_ws"),
    phrase_rule("why", WHY_INDICATORS, "five_ws"),
    phrase_rule("supporting", SUPPORTING_ELEMENTS, "structure"),
    phrase_rule("boilerplate", BOILERPLATE_INDICATORS, "structure"),
    phrase_rule("transitions", TRANSITION_WORDS, "structure"),
    phrase_rule("third_party", THIRD_PARTY_INDICATORS, "credibility", indicator="Third-party validation"),
    phrase_rule("passive", PASSIVE_INDICATORS, "tone"),
))

PROOF = PatternRule(
    "proof",
    r"\d+%|\d+x\b|study shows|research indicates|data reveals|according to|measured|demonstrated",
    "credibility",
)
_HEADLINE_SPECIFICS = compile_pattern("headline_specifics", r"\d")
_HEADLINE_MECHANISM = compile_pattern(
    "headline_mechanism",
    r"\b(?:using|via|through|with|leveraging|powered\s+by)\s+\w|\bby\s+(?!\d)\w",
    re.IGNORECASE,
)
_HOOK_SPECIFICS = compile_pattern(
    "hook_specifics",
    r"\d+%|\d+x\b|\b(?:cuts|improves|reduces|increases)\b[^.\n]{1,120}?\bby\b",
    re.IGNORECASE,
)
_DATELINE = compile_pattern("dateline", r"[A-Z]{2,40}[,\s]{1,3}[A-Z]{2}\s*[—–-]|\([A-Za-z]{1,40}\s*Wire\)")
_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]{0,6}"
_RELEASE_DATE = compile_pattern(
    "release_date",
    r"\b" + _MONTH + r"\s+\d{1,2},?\s+\d{4}\b"
    r"|\b\d{1,2}\s+" + _MONTH + r"\s+\d{4}\b"
    r"|\b\d{1,2}/\d{1,2}/\d{4}\b"
    r"|\b\d{4}-\d{1,2}-\d{1,2}\b",
    re.IGNORECASE,
)
_LOCATION = compile_pattern("location", r"\b[A-Z][a-z]+,?\s+[A-Z]{2,}\b")
_WHO = compile_pattern(
    "who",
    r"\b[A-Z][a-z]+\s+(?:Inc|Corp|Company|LLC|Ltd)\b"
    r"|[A-Z][a-zA-Z]{1,40}\s+(?:announced|today|launches)\b"
)
_WHEN = compile_pattern(
    "when", r"\b" + _MONTH + r"\s+\d|today|this week|this month|\d{4}|yesterday|recently", re.IGNORECASE)
_WHERE = compile_pattern("where", r"[A-Z][a-z]+,\s+[A-Z]{2}|[A-Z]{2,40},\s*[A-Z]{2}\s*[—–-]")
_WHERE_CI = compile_pattern("where_market", r"headquarters|market|globally|worldwide|nation", re.IGNORECASE)
_QUOTE = compile_pattern("quote", r"\"([^\"\n]{21,1000})\"")

METRICS = PatternCategory("quote_metrics", (
    PatternRule("percentage", r"\d+(?:\.\d+)?\s*(?:%|percent(?:age\s+points?)?)", "metrics"),
    PatternRule("ratio", r"\d+x\b|\d+(?:\.\d+)?:\d+(?:\.\d+)?|\d+(?:\.\d+)?\s*times\b", "metrics"),
    PatternRule(
        "absolute",
        r"\$\d[\d,]{0,15}(?:\.\d+)?(?:\s*(?:million|billion|thousand|k|m|b)\b)?"
        r"|\d[\d,]{0,15}(?:\.\d+)?\s*(?:milliseconds?|seconds?|minutes?|hours?|days?|customers?|users?"
        r"|transactions?)\b",
        "metrics",
    ),
))
METRIC_TYPE_BONUS = {"percentage": 3, "ratio": 2, "absolute": 2}

RISK = compile_pattern("risk", r"risk|fail|wrong|worst case|challenge|obstacle|concern", re.IGNORECASE)
REVERSIBILITY = compile_pattern(
    "reversibility", r"revers|one.?way|two.?way|undo|roll.?back|door|commitment", re.IGNORECASE)
OPPORTUNITY_COST = compile_pattern(
    "opportunity_cost", r"opportunity cost|instead|alternative|trade.?off|give up|priorit", re.IGNORECASE)
SOFTBALL = compile_pattern(
    "softball",
    r"\b(?:risk|fail|challenge|concern).{0,30}\b(?:success|easy|minimal|none|unlikely|low|small|minor"
    r"|exciting|opportunity)"
    r"|\b(?:success|easy|minimal|none|unlikely|low|small|minor).{0,30}\b(?:risk|fail|challenge|concern)"
    r"|\bno\s+(?:real\s+)?(?:risk|concern|challenge)"
    r"|\brisk.{0,20}(?:too\s+)?success"
    r"|\b(?:one.?way|two.?way)\s+door\s+to\s+(?:success|growth|opportunity)"
    r"|\beasy\s+to\s+(?:reverse|undo|pivot)",
    re.IGNORECASE,
)

_PRESS_RELEASE_HEADING = compile_pattern(
    "press_release_heading", r"^#{1,6}\s*press\s*release\s*$", re.IGNORECASE)
_EXTERNAL_FAQ_HEADING = compile_pattern(
    "external_faq_heading", r"^#{1,6}\s*(?:external|customer)\s+faqs?\s*$", re.IGNORECASE)
_FAQ_HEADING = compile_pattern("faq_heading", r"^#{1,6}\s*faqs?\s*$", re.IGNORECASE)
_INTERNAL_FAQ_HEADING = compile_pattern(
    "internal_faq_heading", r"^#{1,6}\s*internal\s+faqs?\s*$", re.IGNORECASE)
_QA_HEADING = compile_pattern(
    "qa_heading",
    r"^#{1,6}[ \t]*Q:[ \t]*([^\n]{1,500}?)[ \t]*\n[ \t\n]*A:[ \t]*(.{1,5000}?)(?=\n#{1,6}[ \t]*Q:|\Z)",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)
_QA_PLAIN = compile_pattern(
    "qa_plain",
    r"^[ \t]*(?:[-*][ \t]*)?Q\d{0,2}[:.][ \t]*([^\n]{1,500}?)[ \t]*\n[ \t\n]*"
    r"(?:[-*][ \t]*)?A\d{0,2}[:.][ \t]*(.{1,5000}?)(?=\n[ \t]*(?:[-*][ \t]*)?Q\d{0,2}[:.]|\Z)",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)
_H1_LINE = compile_pattern("h1_line", r"^#[ \t]+\S", re.MULTILINE)
_BLANK_LINES = compile_pattern("blank_lines", r"\n\n+")


# ============================================================
# EXTRACTION
# ============================================================

@dataclass
class FAQEntry:
    question: str
    answer: str


@dataclass
class HardQuestions:
    has_risk: bool = False
    has_reversibility: bool = False
    has_opportunity_cost: bool = False
    softball_count: int = 0

    @property
    def count(self) -> int:
        return int(self.has_risk) + int(self.has_reversibility) + int(self.has_opportunity_cost)

    @property
    def missing(self) -> list[str]:
        return [label for label, ok in (
            ("Risk", self.has_risk),
            ("Reversibility", self.has_reversibility),
            ("Opportunity Cost", self.has_opportunity_cost),
        ) if not ok]


def press_release_text(text: str) -> str:
    """Press release body as plain text (the whole document when there is no such section)."""
    section = extract_section(text, _PRESS_RELEASE_HEADING)
    return strip_markdown(section if section else text)


def headline(text: str) -> str:
    """First H1, else the first line under the Press Release heading."""
    if _H1_LINE.search(text):
        return extract_title(text)
    section = extract_section(text, _PRESS_RELEASE_HEADING)
    if section:
        return extract_title(section)
    return ""


def extract_quotes(text: str) -> list[str]:
    return [q.strip() for q in _QUOTE.findall(text)]


def parse_faq(section: Optional[str]) -> list[FAQEntry]:
    """
    Q/A pairs from an FAQ section.

    Accepts "### Q: ..." headings or "Q: ... / A: ..." lines; falls back to
    any line ending in a question mark, paired with the line after it.
    """
    if not section:
        return []
    for pattern in (_QA_HEADING, _QA_PLAIN):
        entries = [FAQEntry(q.strip(), a.strip()) for q, a in pattern.findall(section)]
        if entries:
            return entries
    lines = section.split("\n")
    entries = []
    for idx, line in enumerate(lines):
        line = line.strip()
        if line.endswith("?") and len(line) > 10:
            answer = lines[idx + 1].strip() if idx + 1 < len(lines) else ""
            entries.append(FAQEntry(line.lstrip("#").strip(), answer))
    return entries


def extract_faqs(text: str) -> tuple[list[FAQEntry], list[FAQEntry]]:
    """(external, internal) FAQ entries."""
    external = extract_section(text, _EXTERNAL_FAQ_HEADING)
    if external is None:
        external = extract_section(text, _FAQ_HEADING)
    if external:
        # a bare "FAQ" section may nest the Internal FAQ under it
        lines = external.split("\n")
        for idx, line in enumerate(lines):
            if _INTERNAL_FAQ_HEADING.match(line.strip()):
                external = "\n".join(lines[:idx])
                break
    return parse_faq(external), parse_faq(extract_section(text, _INTERNAL_FAQ_HEADING))


def check_hard_questions(entries: list[FAQEntry]) -> HardQuestions:
    """Softballs (hard keyword in a dismissive context) never count as hard questions."""
    result = HardQuestions()
    for entry in entries:
        combined = f"{entry.question} {entry.answer}"
        if SOFTBALL.search(combined):
            result.softball_count += 1
            continue
        result.has_risk = result.has_risk or bool(RISK.search(combined))
        result.has_reversibility = result.has_reversibility or bool(REVERSIBILITY.search(combined))
        result.has_opportunity_cost = result.has_opportunity_cost or bool(OPPORTUNITY_COST.search(combined))
    return result


# ============================================================
# DETECTORS
# ============================================================

def detect_press_language(text: str) -> DetectionResult:
    plain = press_release_text(text)
    result = detect(plain, PRESS_LANGUAGE)
    result.counts["proof"] = PROOF.count(plain)
    return result


def detect_quote_metrics(text: str) -> DetectionResult:
    return detect(text, METRICS)


def detect_faq(text: str) -> DetectionResult:
    external, internal = extract_faqs(text)
    hard = check_hard_questions(internal)
    result = DetectionResult(category="faq")
    result.counts = {
        "external_questions": len(external),
        "internal_questions": len(internal),
        "hard_questions": hard.count,
        "softballs": hard.softball_count,
    }
    result.extra = {
        "has_risk": hard.has_risk,
        "has_reversibility": hard.has_reversibility,
        "has_opportunity_cost": hard.has_opportunity_cost,
        "softball_penalty": hard.count <= 1,
    }
    return result


# ============================================================
# SCORERS
# ============================================================

def _rescale(raw: int, raw_max: int, max_score: int) -> int:
    return round(raw * max_score / raw_max)


def _headline_points(title: str, b: DimensionBuilder) -> int:
    if not title:
        b.issue("Missing headline/title")
        return 0
    points = 0
    words, chars = len(title.split()), len(title)
    if 40 <= chars <= 100 and 8 <= words <= 15:
        points += 3
        b.strength("Headline length is optimal")
    elif chars > 120 or words > 18:
        b.issue("Headline too long (reduces scannability)")
    elif chars < 30 or words < 4:
        b.issue("Headline too short (lacks specificity)")
    else:
        points += 1

    lowered = title.lower()
    if any(verb in lowered for verb in STRONG_VERBS):
        points += 2
        b.strength("Uses strong action verbs")
    else:
        b.issue("Consider using stronger action verbs")
    if _HEADLINE_SPECIFICS.search(title):
        points += 2
        b.strength("Includes specific metrics or outcomes")
    else:
        b.issue("Consider adding specific metrics to the headline")
    if _HEADLINE_MECHANISM.search(title):
        points += 2
        b.strength("Includes mechanism (HOW it works)")
    else:
        b.issue("Consider explaining HOW (mechanism) in headline, not just WHAT")
    if PRESS_LANGUAGE.rule("weak_headline").search(title):
        b.issue("Avoid generic marketing language in headlines")
    else:
        points += 2
        b.strength("Avoids generic marketing language")
    return points


def _hook_points(plain: str, b: DimensionBuilder) -> int:
    paragraphs = [p.strip() for p in _BLANK_LINES.split(plain) if len(p.strip()) > 50]
    if not paragraphs:
        b.issue("Missing opening hook")
        return 0
    hook = paragraphs[0]
    lowered = hook.lower()
    points = 0
    if PRESS_LANGUAGE.rule("timeliness").search(hook) or _DATELINE.search(hook):
        points += 3
        b.strength("Opens with timely announcement")
    else:
        b.issue("Hook lacks immediate timeliness")
    if _HOOK_SPECIFICS.search(hook):
        points += 4
        b.strength("Hook includes specific, measurable outcomes")
    else:
        b.issue("Hook lacks specific metrics or outcomes")
    if any(word in lowered for word in PROBLEM_WORDS):
        points += 3
        b.strength("Addresses clear problem or improvement")
    else:
        b.issue("Hook doesn't clearly address a problem or need")

    first = hook.split(".")[0]
    separated = any(sep in first for sep in (",", "—", "–"))
    acting = any(verb in first.lower() for verb in ("announce", "launch", "introduce", "unveil"))
    if separated and acting:
        points += 2
        b.strength("Clear company identification and action")
    else:
        b.issue("First sentence should clearly identify who is doing what")
    if any(fluff in lowered for fluff in HOOK_FLUFF_WORDS):
        b.issue("Hook contains marketing fluff - focus on concrete value")
        points = max(0, points - 1)
    else:
        points += 3
        b.strength("Hook avoids marketing fluff")
    return points


def _release_date_points(plain: str, b: DimensionBuilder) -> int:
    opening = plain[:200]
    if not _RELEASE_DATE.search(opening):
        b.issue("Missing release date in opening lines")
        b.issue("Add date and location (e.g., 'Aug 20, 2024. Seattle, WA.')")
        return 0
    b.strength("Includes release date in opening lines")
    if _LOCATION.search(opening):
        b.strength("Follows standard press release dateline format")
    return 5


def score_structure_and_hook(text: str) -> DimensionScore:
    b = DimensionBuilder(20)
    plain = press_release_text(text)
    raw = _headline_points(headline(text), b) + _hook_points(plain, b) + _release_date_points(plain, b)
    b.add(_rescale(raw, 32, 20))
    return b.build()


def _five_ws_points(plain: str, b: DimensionBuilder) -> int:
    lead = " ".join(_BLANK_LINES.split(plain)[:3])
    lowered = lead.lower()
    points = 0
    if _WHO.search(lead):
        points += 3
        b.strength("Clearly identifies WHO (company/organization)")
    else:
        b.issue("WHO: Company/organization not clearly identified in lead")
    if any(action in lowered for action in ACTION_WORDS):
        points += 3
        b.strength("Clearly describes WHAT (action/product/service)")
    else:
        b.issue("WHAT: Action or offering not clearly described")
    if _WHEN.search(lead):
        points += 3
        b.strength("Includes WHEN (timing/date)")
    else:
        b.issue("WHEN: Timing or date not specified")
    if _WHERE.search(lead) or _WHERE_CI.search(lead):
        points += 2
        b.strength("Mentions WHERE (location/market)")
    else:
        b.issue("WHERE: Location or market context could be clearer")
    if any(why in lowered for why in WHY_INDICATORS):
        points += 4
        b.strength("Explains WHY (reason/benefit/problem solved)")
    else:
        b.issue("WHY: Reason or benefit not clearly explained")
    return points


def _shape_points(plain: str, b: DimensionBuilder) -> int:
    paragraphs = [p for p in _BLANK_LINES.split(plain) if p.strip()]
    if len(paragraphs) < 3:
        b.issue("Press release too short for proper structure analysis")
        return 2
    points = 0
    lead_words = len(paragraphs[0].split())
    if 25 <= lead_words <= 70:
        points += 3
        b.strength("Lead paragraph has appropriate length")
    elif lead_words > 80:
        b.issue("Lead paragraph too long - should be concise")
    elif lead_words < 20:
        b.issue("Lead paragraph too brief - lacks key details")

    middle = " ".join(paragraphs[1:max(2, len(paragraphs) - 2)]).lower()
    if middle:
        if any(el in middle for el in SUPPORTING_ELEMENTS):
            points += 3
            b.strength("Includes supporting details and context")
        else:
            b.issue("Middle content lacks supporting details")
    last = paragraphs[-1].lower()
    if any(ind in last for ind in BOILERPLATE_INDICATORS):
        points += 2
        b.strength("Includes proper company boilerplate")
    else:
        b.issue("Missing company boilerplate information")
    if any(t in plain.lower() for t in TRANSITION_WORDS):
        points += 2
        b.strength("Uses transitions for logical flow")
    elif len(paragraphs) > 4:
        b.issue("Consider adding transitions between sections")
    return points


def _credibility_points(plain: str, b: DimensionBuilder) -> int:
    points = 5
    if PROOF.search(plain):
        points += 3
        b.strength("Backs claims with data or evidence")
    else:
        points -= 1
        b.issue("Claims would be stronger with supporting data")
    if PRESS_LANGUAGE.rule("third_party").search(plain):
        points += 2
        b.strength("References third-party validation")
    return points


def score_content_quality(text: str) -> DimensionScore:
    b = DimensionBuilder(20)
    plain = press_release_text(text)
    raw = _five_ws_points(plain, b) + _shape_points(plain, b) + _credibility_points(plain, b)
    b.add(_rescale(raw, 35, 20))
    return b.build()


def _tone_points(plain: str, b: DimensionBuilder) -> int:
    points = 5
    sentences = split_sentences(plain)
    lengths = [len(s.split()) for s in sentences]
    if len(sentences) > 1:
        average = sum(lengths) / len(sentences)
        if 15 <= average <= 20:
            points += 2
            b.strength("Good sentence length for readability")
        elif average > 25:
            b.issue("Sentences too long - break into shorter, clearer statements")
    if sum(1 for n in lengths if n > 25) > len(sentences) / 3:
        points -= 1
        b.issue("Too many overly long sentences - impacts readability")

    language = detect(plain, PRESS_LANGUAGE)
    if language.count("passive") > len(sentences) / 4:
        points -= 1
        b.issue("Overuse of passive voice - use active voice for clarity")
    else:
        points += 1
        b.strength("Good use of active voice")
    jargon = len(language.found("jargon"))
    if jargon > 3:
        points -= 1
        b.issue("Too much technical jargon - write for broader audience")
    elif jargon == 0:
        points += 1
        b.strength("Avoids unnecessary jargon")

    quotes = extract_quotes(plain)
    fluffy = sum(1 for q in quotes if PRESS_LANGUAGE.rule("emotional").search(q))
    if quotes:
        if fluffy < len(quotes) / 2:
            points += 1
            b.strength("Quotes provide substantive insight")
        else:
            b.issue("Too many generic 'excited' quotes - add substantive insights")
    return points


def _fluff_points(plain: str, b: DimensionBuilder) -> int:
    points = 10
    language = detect(plain, PRESS_LANGUAGE)
    hype = len(language.found("hype"))
    if hype > 3:
        points -= 3
        b.issue("Excessive hyperbolic language reduces credibility")
    elif hype > 1:
        points -= 1
        b.issue("Consider reducing promotional adjectives")
    elif hype == 0:
        b.strength("Avoids hyperbolic marketing language")

    quotes = extract_quotes(plain)
    if quotes:
        ratio = sum(1 for q in quotes if PRESS_LANGUAGE.rule("emotional").search(q)) / len(quotes)
        if ratio > 0.7:
            points -= 3
            b.issue("Most quotes are generic emotional responses")
        elif ratio > 0.3:
            points -= 1
            b.issue("Some quotes lack substantive content")
        else:
            b.strength("Quotes provide meaningful insights")

    vague = len(language.found("vague_benefits"))
    if vague > 2:
        points -= 2
        b.issue("Vague benefit claims need specific proof points")
    elif vague == 0:
        b.strength("Avoids vague, unsubstantiated claims")
    if not PROOF.search(plain):
        points -= 1
    points = max(0, points)

    # Slop is charged here, not against the total
    slop = analyze_slop(plain)
    deduction = FLUFF_SLOP_POLICY.deduction(slop.penalty)
    if deduction:
        points = max(0, points - deduction)
        for issue in slop.issues[:2]:
            b.issue(issue)
    return points


def score_professional_quality(text: str) -> DimensionScore:
    b = DimensionBuilder(15)
    plain = press_release_text(text)
    raw = _tone_points(plain, b) + _fluff_points(plain, b)
    b.add(_rescale(raw, 20, 15))
    return b.build()


def score_quote(quote: str) -> int:
    """0-10: base 2 for any metric, bonus per metric type, bonus for 2+ and 3+ metrics."""
    metrics = detect_quote_metrics(quote)
    found = metrics.total()
    if not found:
        return 0
    score = 2 + sum(bonus for kind, bonus in METRIC_TYPE_BONUS.items() if metrics.has(kind))
    if found >= 2:
        score += 2
    if found >= 3:
        score += 1
    return min(score, 10)


def score_customer_evidence(text: str) -> DimensionScore:
    b = DimensionBuilder(10)
    quotes = extract_quotes(press_release_text(text))
    if not quotes:
        return b.issue("No customer quotes found").build()

    scores = [score_quote(q) for q in quotes]
    with_metrics = sum(1 for s in scores if s > 0)
    points = 2 + round(sum(scores) / len(scores) * 6 / 10)
    points += 2 if with_metrics > 1 else 1 if with_metrics else 0
    if len(quotes) == 2:
        points += 1
    elif len(quotes) > 2:
        points -= 2
    b.add(max(0, min(10, points)))

    if with_metrics:
        b.strength(f"{with_metrics} quote(s) include specific metrics")
    else:
        b.issue("Quotes lack quantitative metrics")
    if len(quotes) > 2:
        b.issue("Too many quotes (3+) - reduce to exactly 2: 1 Executive Vision + 1 Customer Relief")
    elif len(quotes) == 2:
        b.strength("Follows 2-quote standard (Executive Vision + Customer Relief)")
    else:
        b.issue("Add a second quote: need 1 Executive Vision + 1 Customer Relief")
    if b.score >= 8:
        b.strength("Strong customer evidence with quantitative backing")
    return b.build()


def _faq_count_points(b: DimensionBuilder, label: str, count: int, missing: str) -> None:
    if count >= 5:
        b.add(10, strength=f"{label} FAQ has {count} questions")
    elif count >= 3:
        b.add(6, issue=f"{label} FAQ has only {count} questions (5-7 recommended)")
    elif count > 0:
        b.add(3, issue=f"{label} FAQ is sparse ({count} questions, need 5-7)")
    else:
        b.issue(missing)


def score_faq_quality(text: str) -> DimensionScore:
    b = DimensionBuilder(35)
    external, internal = extract_faqs(text)
    _faq_count_points(b, "External", len(external), "Missing External FAQ section")
    _faq_count_points(b, "Internal", len(internal),
                      "Missing Internal FAQ section - this is where the idea gets stress-tested")

    hard = check_hard_questions(internal)
    if hard.softball_count:
        b.issue(f'Detected {hard.softball_count} "softball" question(s) - these don\'t count as hard questions')
    if hard.count == 3:
        b.add(15, strength="Internal FAQ covers Risk, Reversibility, and Opportunity Cost")
    elif hard.count == 2:
        b.add(10, issue=f"Internal FAQ missing hard question: {', '.join(hard.missing)}")
    elif hard.count == 1:
        b.add(5, issue="Internal FAQ needs more hard questions (Risk, Reversibility, Opportunity Cost)")
    else:
        b.issue('Internal FAQ contains only "softball" questions - must address Risk, '
                'Reversibility, Opportunity Cost')
    return b.build()


# ============================================================
# RUBRIC-LEVEL RULES
# ============================================================

def internal_faq_cap(text: str) -> Optional[ScoreCap]:
    _, internal = extract_faqs(text)
    if internal and check_hard_questions(internal).count > 1:
        return None
    return ScoreCap(
        FAQ_CAP,
        f"Score capped at {FAQ_CAP}: Internal FAQ is missing or contains only softball questions",
    )


PLUGIN = DocumentTypePlugin(
    id="pr-faq",
    name="PR-FAQ",
    description="Amazon-style working-backwards press release with external and internal FAQ",
    rubric=(
        Dimension("structure", "Structure & Hook", 20, score_structure_and_hook,
                  "Headline, newsworthy hook, release date"),
        Dimension("content", "Content Quality", 20, score_content_quality,
                  "5 Ws, press-release structure, credibility"),
        Dimension("professional", "Professional Quality", 15, score_professional_quality,
                  "Tone, readability, marketing fluff"),
        Dimension("evidence", "Customer Evidence", 10, score_customer_evidence,
                  "Quotes backed by metrics"),
        Dimension("faq_quality", "FAQ Quality", 35, score_faq_quality,
                  "External FAQ, Internal FAQ, hard questions"),
    ),
    detectors={
        "press_language": detect_press_language,
        "quote_metrics": detect_quote_metrics,
        "faq": detect_faq,
    },
    overrides=(internal_faq_cap,),
    slop_policy=SlopPolicy(scale=0.0),
)
