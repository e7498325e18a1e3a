"""
Job Description Rubric

Deductive rubric: every dimension starts at 25 and loses points per
problem found.

Scoring Dimensions (100 pts total):
  1. Length (25)        — 400-700 words is ideal
  2. Inclusivity (25)   — masculine-coded words, extrovert-bias phrases
  3. Culture (25)       — red-flag phrases that signal a toxic workplace
  4. Transparency (25)  — compensation range, "apply anyway" encouragement

Language that only appears inside organization-mandated blocks
([COMPANY_PREAMBLE], [COMPANY_LEGAL_TEXT]) is never penalized, and
internal postings skip the compensation check. The shared slop deduction
comes off the total, not off Culture.

Masculine-coded list follows Gaucher et al. (2011); extrovert-bias list
follows published neurodiversity hiring guidance.
"""

from __future__ import annotations

import re
from typing import Sequence

from docforge.detection import DetectionResult, detect
from docforge.normalize import count_words
from docforge.patterns import (
    ExcludedZone,
    PatternCategory,
    PatternRule,
    appears_in_zones,
    compile_pattern,
    phrase_rule,
)
from docforge.registry import DocumentTypePlugin
from docforge.scoring import Dimension, DimensionBuilder, DimensionScore

IDEAL_MIN_WORDS = 400
IDEAL_MAX_WORDS = 700
SHORT_PENALTY_MAX = 15
LONG_PENALTY_MAX = 10
PER_TERM_PENALTY = 5
MASCULINE_PENALTY_MAX = 25
EXTROVERT_PENALTY_MAX = 20
RED_FLAG_PENALTY_MAX = 25
COMPENSATION_PENALTY = 10
ENCOURAGEMENT_PENALTY = 5


# ============================================================
# PATTERNS
# ============================================================

MASCULINE_CODED = (
    "aggressive", "ambitious", "assertive", "competitive", "confident",
    "decisive", "determined", "dominant", "driven", "fearless",
    "independent", "ninja", "rockstar", "guru", "self-reliant",
    "self-sufficient", "superior",
    "leader", "go-getter", "hard-charging", "strong", "tough",
    "warrior", "superhero", "superstar", "boss",
)

EXTROVERT_BIAS = (
    "outgoing", "high-energy", "energetic", "people person", "gregarious",
    "strong communicator", "excellent verbal", "team player",
)

RED_FLAGS = (
    "fast-paced", "like a family", "wear many hats", "always-on",
    "hustle", "grind", "unlimited pto", "work hard play hard",
    "hit the ground running", "self-starter", "thick skin",
    "no ego", "drama-free", "whatever it takes", "passion required",
)

SUGGESTIONS = {
    # masculine-coded
    "aggressive": 'Use "proactive" or "bold" instead',
    "ambitious": 'Use "motivated" or "goal-oriented" instead',
    "assertive": 'Use "confident communicator" instead',
    "competitive": 'Use "collaborative" or "results-oriented" instead',
    "confident": 'Use "capable" or "skilled" instead',
    "decisive": 'Use "sound decision-maker" instead',
    "determined": 'Use "dedicated" or "committed" instead',
    "dominant": 'Use "influential" or "guiding" instead',
    "driven": 'Use "motivated" or "dedicated" instead',
    "fearless": 'Use "resilient" or "innovative" instead',
    "independent": 'Use "self-directed" or "ownership-focused" instead',
    "ninja": 'Use "expert" or "specialist" instead',
    "rockstar": 'Use "expert" or "impact player" instead',
    "guru": 'Use "expert" or "specialist" instead',
    "self-reliant": 'Use "capable" or "resourceful" instead',
    "self-sufficient": 'Use "capable" or "resourceful" instead',
    "superior": 'Use "excellent" or "skilled" instead',
    "leader": 'Use "guide" or "mentor" instead',
    "go-getter": 'Use "motivated" or "proactive" instead',
    "hard-charging": 'Use "dedicated" or "committed" instead',
    "strong": 'Use "skilled" or "experienced" instead',
    "tough": 'Use "resilient" or "adaptable" instead',
    "warrior": 'Use "advocate" or "champion" instead',
    "superhero": 'Use "expert" or "specialist" instead',
    "superstar": 'Use "high performer" or "expert" instead',
    "boss": 'Use "manager" or "lead" instead',
    # extrovert-bias
    "outgoing": 'Use "collaborative" or remove if not essential',
    "high-energy": 'Use "dynamic" or "engaged" instead',
    "energetic": 'Use "engaged" or "motivated" instead',
    "people person": 'Use "collaborative" or "team-oriented" instead',
    "gregarious": 'Use "collaborative" instead',
    "strong communicator": 'Use "shares ideas clearly via writing, visuals, or discussion"',
    "excellent verbal": 'Use "communicates effectively" instead',
    "team player": 'Use "contributes to team goals through your strengths"',
    # red flags
    "fast-paced": 'Use "dynamic projects with clear priorities" instead',
    "like a family": 'Use "supportive, collaborative team" instead',
    "wear many hats": 'Use "versatile role with growth opportunities" instead',
    "always-on": 'Use "flexible hours; async work" instead',
    "hustle": 'Use "dedicated effort" or "commitment" instead',
    "grind": 'Use "dedicated effort" or "commitment" instead',
    "unlimited pto": 'Use "20+ PTO days + recharge policy" instead',
    "work hard play hard": 'Use "balanced work culture" instead',
    "hit the ground running": 'Use "ramp up quickly with support" instead',
    "self-starter": 'Use "self-directed" or "ownership-focused" instead',
    "thick skin": 'Use "resilient" or "adaptable" instead',
    "no ego": 'Use "collaborative" or "humble" instead',
    "drama-free": 'Use "professional" or "respectful" instead',
    "whatever it takes": 'Use "committed to delivering results" instead',
    "passion required": 'Use "deeply engaged in problem-solving" instead',
}

INCLUSIVE_LANGUAGE = PatternCategory("inclusive_language", (
    phrase_rule("masculine_coded", MASCULINE_CODED, "inclusivity", flexible_separators=True),
    phrase_rule("extrovert_bias", EXTROVERT_BIAS, "inclusivity", flexible_separators=True),
    phrase_rule("red_flags", RED_FLAGS, "culture", flexible_separators=True),
))

TRANSPARENCY = PatternCategory("transparency", (
    PatternRule(
        "salary_range",
        r"\$[\d,]{1,12}k?\s*[-–—]\s*\$[\d,]{1,12}k?"
        r"|(?:salary|compensation)[^\n]{0,100}\$[\d,]{1,12}"
        r"|(?:USD|EUR|GBP|CAD|AUD)\s*[\d,]{1,12}\s*[-–—]\s*[\d,]{1,12}"
        r"|[\d,]{1,12}\s*[-–—]\s*[\d,]{1,12}\s*(?:USD|EUR|GBP|CAD|AUD)"
        r"|[€£][\d,]{1,12}\s*[-–—]\s*[€£][\d,]{1,12}",
        "transparency",
        indicator="Salary range",
    ),
    PatternRule(
        "hourly_range",
        r"\$[\d.]{1,8}\s*(?:[-–—]\s*\$[\d.]{1,8}\s*)?/?\s*(?:hour|hr)\b",
        "transparency",
        indicator="Hourly rate",
    ),
    PatternRule("bonus", r"\b(?:bonus|equity|stock|RSUs?|options)\b", "transparency"),
    PatternRule(
        "sixty_to_seventy",
        r"60\s*[-–]\s*70\s*%|60\s+to\s+70\s*%",
        "transparency",
        indicator="60-70% threshold mentioned",
    ),
    PatternRule(
        "meet_most",
        r"\bmeet[^\n]{0,80}\bmost\b[^\n]{0,80}(?:requirements|qualifications)",
        "transparency",
        indicator="Meet most requirements language",
    ),
    PatternRule(
        "encourage_apply",
        r"\bwe\s+encourage[^\n]{0,120}\bapply",
        "transparency",
        indicator="Encourage to apply language",
    ),
    PatternRule(
        "dont_meet_all",
        r"\bdon'?t[^\n]{0,60}\bmeet[^\n]{0,60}\ball\b[^\n]{0,60}(?:qualifications|requirements)",
        "transparency",
        indicator="Don't meet all qualifications language",
    ),
    PatternRule("internal_posting", r"\binternal\s+posting\b", "transparency",
                indicator="Internal posting"),
))
ENCOURAGEMENT_RULES = ("sixty_to_seventy", "meet_most", "encourage_apply", "dont_meet_all")

_SEPARATORS = compile_pattern("separators", r"[-\s]+")
_CANONICAL = {_SEPARATORS.sub(" ", p): p for p in (*MASCULINE_CODED, *EXTROVERT_BIAS, *RED_FLAGS)}


# ============================================================
# DETECTORS
# ============================================================

def _listed_terms(result: DetectionResult, rule: str, zones: Sequence[ExcludedZone]) -> list[str]:
    """Distinct list entries matched by ``rule``, minus those found in mandated text."""
    terms = []
    for match in result.found(rule):
        phrase = _CANONICAL.get(_SEPARATORS.sub(" ", match), match)
        if phrase not in terms and not appears_in_zones(phrase, zones):
            terms.append(phrase)
    return terms


def detect_inclusive_language(text: str) -> DetectionResult:
    result = detect(text, INCLUSIVE_LANGUAGE)
    result.extra["warnings"] = [
        {"type": rule, "phrase": phrase, "suggestion": suggestion_for(phrase)}
        for rule in ("masculine_coded", "extrovert_bias", "red_flags")
        for phrase in _listed_terms(result, rule, ())
    ]
    return result


def detect_transparency(text: str) -> DetectionResult:
    result = detect(text, TRANSPARENCY)
    result.extra["has_compensation"] = result.has("salary_range") or result.has("hourly_range")
    result.extra["has_encouragement"] = result.total(*ENCOURAGEMENT_RULES) > 0
    return result


def detect_word_count(text: str) -> dict:
    words = count_words(text)
    return {
        "word_count": words,
        "is_ideal": IDEAL_MIN_WORDS <= words <= IDEAL_MAX_WORDS,
        "is_too_short": words < IDEAL_MIN_WORDS,
        "is_too_long": words > IDEAL_MAX_WORDS,
    }


def suggestion_for(phrase: str) -> str:
    return SUGGESTIONS.get(phrase, f'Consider replacing "{phrase}" with more inclusive language')


def is_internal_posting(text: str, zones: Sequence[ExcludedZone] = ()) -> bool:
    rule = TRANSPARENCY.rule("internal_posting")
    return rule.search(text) or any(rule.search(z.content) for z in zones)


# ============================================================
# SCORERS
# ============================================================

def length_penalty(words: int) -> int:
    if words < IDEAL_MIN_WORDS:
        return min(SHORT_PENALTY_MAX, (IDEAL_MIN_WORDS - words) // 20)
    if words > IDEAL_MAX_WORDS:
        return min(LONG_PENALTY_MAX, (words - IDEAL_MAX_WORDS) // 50)
    return 0


def score_length(text: str) -> DimensionScore:
    b = DimensionBuilder(25, deductive=True)
    words = count_words(text)
    penalty = length_penalty(words)
    if not penalty:
        return b.strength(f"Good length: {words} words (ideal: {IDEAL_MIN_WORDS}-{IDEAL_MAX_WORDS})").build()
    if words < IDEAL_MIN_WORDS:
        b.deduct(penalty, issue=f"Short ({words} words) - aim for {IDEAL_MIN_WORDS}-{IDEAL_MAX_WORDS}")
    else:
        b.deduct(penalty, issue=f"Long ({words} words) - aim for {IDEAL_MAX_WORDS} or fewer")
    return b.build()


def score_inclusivity(text: str, zones: Sequence[ExcludedZone] = ()) -> DimensionScore:
    b = DimensionBuilder(25, deductive=True)
    result = detect(text, INCLUSIVE_LANGUAGE)

    masculine = _listed_terms(result, "masculine_coded", zones)
    if masculine:
        b.deduct(min(MASCULINE_PENALTY_MAX, PER_TERM_PENALTY * len(masculine)))
        for word in masculine:
            b.issue(f'Masculine-coded: "{word}" - {suggestion_for(word)}')
    else:
        b.strength("No masculine-coded words")

    extrovert = _listed_terms(result, "extrovert_bias", zones)
    if extrovert:
        b.deduct(min(EXTROVERT_PENALTY_MAX, PER_TERM_PENALTY * len(extrovert)))
        for phrase in extrovert:
            b.issue(f'Extrovert-bias: "{phrase}" - {suggestion_for(phrase)}')
    else:
        b.strength("No extrovert-bias phrases")
    return b.build()


def score_culture(text: str, zones: Sequence[ExcludedZone] = ()) -> DimensionScore:
    b = DimensionBuilder(25, deductive=True)
    flags = _listed_terms(detect(text, INCLUSIVE_LANGUAGE), "red_flags", zones)
    if not flags:
        return b.strength("No red flag phrases").build()
    b.deduct(min(RED_FLAG_PENALTY_MAX, PER_TERM_PENALTY * len(flags)))
    for phrase in flags:
        b.issue(f'Red flag: "{phrase}" - {suggestion_for(phrase)}')
    return b.build()


def score_transparency(text: str, zones: Sequence[ExcludedZone] = ()) -> DimensionScore:
    b = DimensionBuilder(25, deductive=True)
    result = detect_transparency(text)

    if is_internal_posting(text, zones):
        b.strength("Internal posting - compensation check skipped")
    elif result.extra["has_compensation"]:
        b.strength("Compensation range included")
    else:
        b.deduct(COMPENSATION_PENALTY, issue="No compensation range found")

    if result.extra["has_encouragement"]:
        b.strength("Includes encouragement statement")
    else:
        b.deduct(ENCOURAGEMENT_PENALTY,
                 issue='Missing encouragement statement (e.g., "If you meet 60-70% of the qualifications...")')
    return b.build()


PLUGIN = DocumentTypePlugin(
    id="jd",
    name="Job Description",
    description="Length, inclusive language, culture signals and pay transparency of a job posting",
    rubric=(
        Dimension("length", "Length", 25, score_length, "400-700 words"),
        Dimension("inclusivity", "Inclusivity", 25, score_inclusivity,
                  "Masculine-coded and extrovert-bias language", zone_aware=True),
        Dimension("culture", "Culture", 25, score_culture,
                  "Red-flag phrases", zone_aware=True),
        Dimension("transparency", "Transparency", 25, score_transparency,
                  "Compensation range and encouragement to apply", zone_aware=True),
    ),
    detectors={
        "inclusive_language": detect_inclusive_language,
        "transparency": detect_transparency,
        "word_count": detect_word_count,
    },
)
