"""
Slop Analyzer — Generic / Formulaic Prose Estimation

Scores how much a text reads like generic, low-information prose,
independent of document type. Three layers, each capped:

  1. LEXICAL (40)      — occurrences of phrases from six vocabularies plus
                         em-dashes: min(40, 2 * occurrences + em_dashes)
  2. STRUCTURAL (25)   — document-shape anti-patterns: min(25, 5 * count)
  3. STYLOMETRIC (15)  — uniform sentence lengths, low vocabulary diversity

The total (practical max 80) maps to a severity bucket and, through a
threshold ladder, to a small integer penalty. Each document type scales
that penalty with its own SlopPolicy before it touches a score.

The vocabularies are plain data held in a SlopLexicon and passed in
explicitly; the default lexicon is compiled once at import.
"""

from __future__ import annotations

import math
import re
import statistics
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from docforge.detection import distinct_terms
from docforge.errors import ConfigurationError
from docforge.normalize import (
    count_words,
    normalize_markdown,
    split_paragraphs,
    split_sentences,
    strip_markdown,
)
from docforge.patterns import PatternRule, compile_pattern, phrase_rule


# ============================================================
# VOCABULARIES
# ============================================================

# Intensifiers that add no meaning
GENERIC_BOOSTERS = (
    "incredibly", "extremely", "highly", "very", "truly", "absolutely",
    "definitely", "really", "quite", "remarkably", "exceptionally",
    "particularly", "especially", "significantly", "substantially",
    "considerably", "dramatically", "tremendously", "immensely", "profoundly",
    "delve", "tapestry", "multifaceted", "myriad", "plethora",
)

# Replace with plain language or a specific description
BUZZWORDS = (
    "robust", "seamless", "comprehensive", "elegant", "powerful", "flexible",
    "intuitive", "user-friendly", "streamlined", "optimized", "efficient",
    "scalable", "reliable", "secure", "modern", "innovative", "sophisticated",
    "advanced", "state-of-the-art", "best-in-class", "world-class",
    "enterprise-ready", "production-grade", "battle-tested", "industry-leading",
    "game-changing", "revolutionary", "transformative", "disruptive",
    "cutting-edge", "next-generation", "bleeding-edge", "groundbreaking",
    "paradigm-shifting", "synergy", "holistic", "ecosystem", "leverage",
    "utilize", "facilitate", "enable", "empower", "optimize", "accelerate",
    "amplify", "unlock", "drive", "spearhead", "champion", "pivot", "actionable",
    "easy to use", "fast", "quick", "responsive", "good performance",
    "high quality", "optimal", "minimal", "sufficient", "reasonable",
    "appropriate", "adequate",
)

# Delete entirely
FILLER_PHRASES = (
    "it's important to note that", "it's worth mentioning that",
    "it should be noted that", "it goes without saying that", "needless to say",
    "as you may know", "as we all know", "in today's world",
    "in today's digital age", "in today's fast-paced environment",
    "in the modern era", "at the end of the day", "when all is said and done",
    "having said that", "that said", "that being said", "with that in mind",
    "with that being said", "let me explain", "let me walk you through",
    "let's dive in", "let's explore", "let's take a look at",
    "let's break this down", "here's the thing", "the thing is",
    "the fact of the matter is", "at this point in time", "in order to",
    "due to the fact that", "for the purpose of", "in the event that",
    "in light of", "with regard to", "in terms of", "on a daily basis",
    "first and foremost", "last but not least", "each and every",
    "one and only", "plain and simple", "pure and simple",
)

# Weasel words that avoid commitment
HEDGE_PATTERNS = (
    "of course", "naturally", "obviously", "clearly", "certainly", "undoubtedly",
    "in many ways", "to some extent", "in some cases", "it depends", "it varies",
    "generally speaking", "for the most part", "more or less", "kind of",
    "sort of", "somewhat", "relatively", "arguably", "potentially", "possibly",
    "might", "may or may not", "could potentially", "tends to", "seems to",
    "appears to",
)

# Never appropriate in a professional document
SYCOPHANTIC_PHRASES = (
    "great question", "excellent question", "that's a great point",
    "good thinking", "i love that idea", "what a fascinating topic",
    "happy to help", "i'd be happy to help", "i'm glad you asked",
    "thanks for asking", "absolutely!", "definitely!", "of course!",
    "sure thing", "no problem", "you're welcome", "my pleasure",
    "i appreciate you sharing", "that's an interesting perspective",
    "i understand your concern",
)

# Overused transitions that pad word count
TRANSITIONAL_FILLER = (
    "furthermore", "moreover", "additionally", "in addition", "nevertheless",
    "nonetheless", "on the other hand", "conversely", "in contrast", "similarly",
    "likewise", "consequently", "therefore", "thus", "hence", "accordingly",
    "as a result", "for this reason", "to that end", "with this in mind",
    "given the above", "based on the above", "as mentioned earlier",
    "as previously stated", "as noted above", "moving forward", "going forward",
)

SIGNPOSTING_PHRASES = (
    "in this section, we will", "as mentioned earlier", "let's now turn to",
    "before we proceed", "as discussed above", "we will now explore",
)


# ============================================================
# CONSTANTS
# ============================================================

LEXICAL_MAX = 40
STRUCTURAL_MAX = 25
STYLOMETRIC_MAX = 15
SLOP_MAX = LEXICAL_MAX + STRUCTURAL_MAX + STYLOMETRIC_MAX  # 80

MIN_SENTENCES_FOR_ANALYSIS = 3
MIN_SENTENCE_STDDEV = 8.0
MIN_WORDS_FOR_TTR = 50
TTR_WINDOW_SIZE = 100
MIN_TTR = 0.45

# Repeated / uniform paragraph detection
MIN_PARAGRAPH_WORDS = 5
UNIFORM_MIN_PARAGRAPHS = 3
UNIFORM_LENGTH_TOLERANCE = 0.10
OPENER_MIN_SENTENCES = 6
OPENER_MIN_REPEATS = 3
OPENER_MIN_SHARE = 0.25

# (upper bound inclusive, label)
SEVERITY_BUCKETS = (
    (10, "clean"),
    (25, "light"),
    (45, "moderate"),
    (65, "heavy"),
)
SEVERITY_ORDER = ("clean", "light", "moderate", "heavy", "severe")

# (min score, min pattern count, penalty, message) evaluated top-down
PENALTY_LADDER = (
    (40, 10, 8, "Severe AI slop detected ({count} patterns): substantial rewrite needed"),
    (25, 6, 6, "Heavy AI slop detected ({count} patterns): significant editing needed"),
    (12, 3, 4, "Moderate AI slop detected ({count} patterns): editing recommended"),
    (4, 1, 2, "Light AI patterns detected ({count} patterns)"),
)


# ============================================================
# LEXICON
# ============================================================

@dataclass(frozen=True)
class SlopLexicon:
    """Compiled vocabulary rules; the category name is the rule name."""
    boosters: PatternRule
    buzzwords: PatternRule
    filler: PatternRule
    hedges: PatternRule
    sycophantic: PatternRule
    transitional: PatternRule
    signposting: PatternRule
    formulaic_intro: PatternRule
    template_sections: PatternRule
    symmetric_coverage: PatternRule

    @property
    def lexical_rules(self) -> tuple[PatternRule, ...]:
        return (self.boosters, self.buzzwords, self.filler,
                self.hedges, self.sycophantic, self.transitional)


def build_lexicon(
    boosters=GENERIC_BOOSTERS,
    buzzwords=BUZZWORDS,
    filler=FILLER_PHRASES,
    hedges=HEDGE_PATTERNS,
    sycophantic=SYCOPHANTIC_PHRASES,
    transitional=TRANSITIONAL_FILLER,
    signposting=SIGNPOSTING_PHRASES,
) -> SlopLexicon:
    """Compile phrase lists into a SlopLexicon. Raises ConfigurationError on bad data."""
    return SlopLexicon(
        boosters=phrase_rule("generic-booster", boosters, "slop.lexical"),
        buzzwords=phrase_rule("buzzword", buzzwords, "slop.lexical"),
        filler=phrase_rule("filler-phrase", filler, "slop.lexical"),
        hedges=phrase_rule("hedge", hedges, "slop.lexical"),
        sycophantic=phrase_rule("sycophantic", sycophantic, "slop.lexical"),
        transitional=phrase_rule("transitional-filler", transitional, "slop.lexical"),
        signposting=phrase_rule("over-signposting", signposting, "slop.structural"),
        formulaic_intro=PatternRule(
            "formulaic-introduction",
            r"^(?:in today's|in this (?:document|section|prd|spec)"
            r"|this (?:document|prd|spec) (?:will|aims|seeks))",
            "slop.structural",
            multiline=True,
        ),
        template_sections=PatternRule(
            "template-section-progression",
            r"overview[\s\S]{0,500}key points[\s\S]{0,500}(?:best practices|conclusion)",
            "slop.structural",
        ),
        symmetric_coverage=PatternRule(
            "symmetric-coverage",
            r"(?:on one hand|on the other hand|pros and cons|advantages and disadvantages"
            r"|both[^.\n]{0,80}have (?:merit|value))",
            "slop.structural",
        ),
    )


DEFAULT_LEXICON = build_lexicon()


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class SlopPolicy:
    """How one document type turns the raw slop penalty into a deduction."""
    scale: float = 0.6
    cap: int = 5

    def __post_init__(self):
        if self.scale < 0 or self.cap < 0:
            raise ConfigurationError("SlopPolicy scale and cap must be non-negative")

    def deduction(self, penalty: int) -> int:
        return min(self.cap, int(math.floor(penalty * self.scale)))


@dataclass
class SlopReport:
    """Full slop analysis for one text."""
    score: int = 0
    severity: str = "clean"
    lexical_score: int = 0
    structural_score: int = 0
    stylometric_score: int = 0
    lexical_counts: dict[str, int] = field(default_factory=dict)   # category -> occurrences
    lexical_terms: dict[str, list[str]] = field(default_factory=dict)
    em_dashes: int = 0
    structural_patterns: list[str] = field(default_factory=list)
    stylometric_issues: list[str] = field(default_factory=list)
    sentence_stddev: Optional[float] = None
    ttr: Optional[float] = None
    top_offenders: list[dict] = field(default_factory=list)
    penalty: int = 0
    issues: list[str] = field(default_factory=list)

    @property
    def lexical_occurrences(self) -> int:
        return sum(self.lexical_counts.values())

    @property
    def pattern_count(self) -> int:
        return self.lexical_occurrences + self.em_dashes + len(self.structural_patterns)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "max_score": SLOP_MAX,
            "severity": self.severity,
            "penalty": self.penalty,
            "pattern_count": self.pattern_count,
            "breakdown": {
                "lexical": {
                    "score": self.lexical_score,
                    "max_score": LEXICAL_MAX,
                    "patterns": self.lexical_occurrences,
                    "em_dashes": self.em_dashes,
                    "by_category": dict(self.lexical_counts),
                    "terms": {k: list(v) for k, v in self.lexical_terms.items()},
                },
                "structural": {
                    "score": self.structural_score,
                    "max_score": STRUCTURAL_MAX,
                    "patterns": list(self.structural_patterns),
                },
                "stylometric": {
                    "score": self.stylometric_score,
                    "max_score": STYLOMETRIC_MAX,
                    "issues": list(self.stylometric_issues),
                    "sentence_variance": self.sentence_stddev,
                    "ttr": self.ttr,
                },
            },
            "top_offenders": [dict(o) for o in self.top_offenders],
            "issues": list(self.issues),
        }


# ============================================================
# STRUCTURAL DETECTORS
# ============================================================

_LIST_LINE = compile_pattern("list_line", r"^[ \t]*(?:[-*+]\s|\d+[.)]\s|\|)")
_NON_WORD = compile_pattern("non_word", r"[^\w\s]")


def _prose_paragraphs(markdown: str) -> list[str]:
    """Paragraph blocks that are neither headings nor lists/tables."""
    blocks = []
    for block in split_paragraphs(markdown):
        lines = [ln for ln in block.split("\n") if ln.strip()]
        if lines and all(_LIST_LINE.match(ln) for ln in lines):
            continue
        blocks.append(block)
    return blocks


def _canonical(paragraph: str) -> str:
    return " ".join(_NON_WORD.sub(" ", paragraph.lower()).split())


def detect_repeated_paragraphs(paragraphs: list[str]) -> list[str]:
    """One finding per duplicate copy beyond the first."""
    counts = Counter(
        _canonical(p) for p in paragraphs if count_words(p) >= MIN_PARAGRAPH_WORDS
    )
    found = []
    for canon, n in counts.items():
        if n > 1:
            preview = " ".join(canon.split()[:6])
            found.extend([f'repeated-paragraph: "{preview}..."'] * (n - 1))
    return found


def detect_uniform_paragraphs(paragraphs: list[str]) -> bool:
    """
    Three or more multi-sentence paragraphs with the same sentence count
    and word counts within a narrow band of their mean.
    """
    groups: dict[int, list[int]] = {}
    for p in paragraphs:
        n_sentences = len(split_sentences(p))
        if n_sentences >= 2:
            groups.setdefault(n_sentences, []).append(count_words(p))
    for lengths in groups.values():
        if len(lengths) < UNIFORM_MIN_PARAGRAPHS:
            continue
        mean = sum(lengths) / len(lengths)
        if mean and max(abs(n - mean) for n in lengths) <= mean * UNIFORM_LENGTH_TOLERANCE:
            return True
    return False


def detect_repeated_openers(paragraphs: list[str]) -> Optional[str]:
    """Most common two-word sentence opener, when it dominates the prose."""
    openers = []
    for p in paragraphs:
        for sentence in split_sentences(p):
            words = _canonical(sentence).split()
            if len(words) >= 2:
                openers.append(" ".join(words[:2]))
    if len(openers) < OPENER_MIN_SENTENCES:
        return None
    opener, n = Counter(openers).most_common(1)[0]
    if n >= OPENER_MIN_REPEATS and n / len(openers) >= OPENER_MIN_SHARE:
        return opener
    return None


def detect_structural_patterns(
    markdown: str,
    plain: str,
    lexicon: SlopLexicon = DEFAULT_LEXICON,
) -> list[str]:
    """Structural anti-pattern findings; each list entry counts once."""
    found: list[str] = []
    if lexicon.formulaic_intro.search(plain):
        found.append("formulaic-introduction")
    signposts = lexicon.signposting.findall(plain)
    if signposts:
        found.append(f'over-signposting: "{signposts[0].lower()}"')
    if lexicon.template_sections.search(plain):
        found.append("template-section-progression")
    if lexicon.symmetric_coverage.search(plain):
        found.append("symmetric-coverage")

    paragraphs = _prose_paragraphs(markdown)
    found.extend(detect_repeated_paragraphs(paragraphs))
    if detect_uniform_paragraphs(paragraphs):
        found.append("uniform-paragraph-shape")
    opener = detect_repeated_openers(paragraphs)
    if opener:
        found.append(f'repeated-sentence-opener: "{opener}"')
    return found


# ============================================================
# STYLOMETRICS
# ============================================================

def sentence_length_stddev(plain: str) -> Optional[float]:
    """Population std dev of words per sentence; None below the sentence minimum."""
    sentences = split_sentences(plain)
    if len(sentences) < MIN_SENTENCES_FOR_ANALYSIS:
        return None
    return statistics.pstdev([count_words(s) for s in sentences])


def type_token_ratio(plain: str) -> Optional[float]:
    """
    Mean distinct/total ratio over non-overlapping windows.

    Falls back to the whole text when it is shorter than one window;
    None below the word minimum.
    """
    words = _NON_WORD.sub("", plain.lower()).split()
    if len(words) < MIN_WORDS_FOR_TTR:
        return None
    ratios = [
        len(set(words[i:i + TTR_WINDOW_SIZE])) / TTR_WINDOW_SIZE
        for i in range(0, len(words) - TTR_WINDOW_SIZE + 1, TTR_WINDOW_SIZE)
    ]
    if not ratios:
        return len(set(words)) / len(words)
    return sum(ratios) / len(ratios)


# ============================================================
# ANALYZER
# ============================================================

def get_severity(score: int) -> str:
    for upper, label in SEVERITY_BUCKETS:
        if score <= upper:
            return label
    return "severe"


def _top_offenders(report: SlopReport) -> list[dict]:
    offenders = []
    for category, limit in (("filler-phrase", 3), ("generic-booster", 3),
                            ("buzzword", 3), ("sycophantic", 2)):
        for term in report.lexical_terms.get(category, [])[:limit]:
            offenders.append({"pattern": term, "category": category})
    if report.em_dashes:
        offenders.append({"pattern": f"{report.em_dashes} em-dash(es)", "category": "em-dash"})
    for pattern in report.structural_patterns[:2]:
        offenders.append({"pattern": pattern, "category": "structural"})
    return offenders[:10]


def slop_penalty(score: int, pattern_count: int) -> tuple[int, str]:
    """Penalty ladder on (score, pattern count). Returns (penalty, message)."""
    for min_score, min_count, penalty, message in PENALTY_LADDER:
        if score >= min_score or pattern_count >= min_count:
            return penalty, message.format(count=pattern_count)
    return 0, ""


def analyze_slop(text: str, lexicon: SlopLexicon = DEFAULT_LEXICON) -> SlopReport:
    """
    Run all three layers over ``text`` (markdown or plain).

    Never raises for content; empty or non-string input yields a clean
    zero report.
    """
    report = SlopReport()
    if not isinstance(text, str) or not text.strip():
        return report

    markdown = normalize_markdown(text)
    plain = strip_markdown(markdown)

    # --- Lexical ---
    for rule in lexicon.lexical_rules:
        matches = rule.findall(plain)
        report.lexical_counts[rule.name] = len(matches)
        report.lexical_terms[rule.name] = distinct_terms(matches)
    report.em_dashes = plain.count("—")
    report.lexical_score = min(LEXICAL_MAX, 2 * report.lexical_occurrences + report.em_dashes)

    # --- Structural ---
    report.structural_patterns = detect_structural_patterns(markdown, plain, lexicon)
    report.structural_score = min(STRUCTURAL_MAX, 5 * len(report.structural_patterns))

    # --- Stylometric ---
    flags = 0
    stddev = sentence_length_stddev(plain)
    if stddev is not None:
        report.sentence_stddev = round(stddev, 1)
        if stddev < MIN_SENTENCE_STDDEV:
            flags += 1
            report.stylometric_issues.append(
                f"Low sentence variance (σ={stddev:.1f}, target >{MIN_SENTENCE_STDDEV})"
            )
    ttr = type_token_ratio(plain)
    if ttr is not None:
        report.ttr = round(ttr, 2)
        if ttr < MIN_TTR:
            flags += 1
            report.stylometric_issues.append(
                f"Low vocabulary diversity (TTR={ttr:.2f}, target >{MIN_TTR})"
            )
    report.stylometric_score = min(STYLOMETRIC_MAX, 5 * flags)

    report.score = report.lexical_score + report.structural_score + report.stylometric_score
    report.severity = get_severity(report.score)
    report.top_offenders = _top_offenders(report)

    penalty, message = slop_penalty(report.score, report.pattern_count)
    report.penalty = penalty
    if message:
        report.issues.append(message)
    if report.top_offenders:
        examples = ", ".join(f'"{o["pattern"]}"' for o in report.top_offenders[:3])
        report.issues.append(f"Examples: {examples}")
    return report
