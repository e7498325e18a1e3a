"""
Detectors — Pure Text Scans

A detector takes text and a PatternCategory and reports what it found:
raw occurrence counts, the distinct terms behind them, and indicator
strings for display. Results are created fresh per call and never
shared, so detectors can run from any number of threads.

Bespoke detectors (extracting a FAQ section, counting checkbox items)
live with the plugin that needs them and return the same shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from docforge.patterns import PatternCategory, PatternRule


@dataclass
class DetectionResult:
    """Output of one detector call."""
    category: str
    counts: dict[str, int] = field(default_factory=dict)       # rule -> raw occurrences
    terms: dict[str, list[str]] = field(default_factory=dict)  # rule -> distinct matches
    indicators: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)        # bespoke values

    def count(self, rule: str) -> int:
        return self.counts.get(rule, 0)

    def has(self, rule: str) -> bool:
        return self.counts.get(rule, 0) > 0

    def found(self, rule: str) -> list[str]:
        return self.terms.get(rule, [])

    def total(self, *rules: str) -> int:
        """Sum of counts for the named rules, or for every rule when none are named."""
        names = rules or tuple(self.counts)
        return sum(self.counts.get(r, 0) for r in names)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "counts": dict(self.counts),
            "flags": {name: n > 0 for name, n in self.counts.items()},
            "terms": {name: list(t) for name, t in self.terms.items()},
            "indicators": list(self.indicators),
            "extra": dict(self.extra),
        }


def distinct_terms(matches: Iterable[str]) -> list[str]:
    """Lower-cased, whitespace-collapsed, first-seen order."""
    seen: list[str] = []
    for m in matches:
        term = " ".join(m.lower().split())
        if term and term not in seen:
            seen.append(term)
    return seen


def detect(text: str, category: PatternCategory) -> DetectionResult:
    """
    Scan text with every rule in a category.

    Empty text yields an all-zero result with every rule present.
    """
    result = DetectionResult(category=category.name)
    for rule in category.rules:
        matches = rule.findall(text) if text else []
        result.counts[rule.name] = len(matches)
        result.terms[rule.name] = distinct_terms(matches)
        if matches and rule.indicator:
            result.indicators.append(rule.indicator.format(
                count=len(matches),
                terms=", ".join(result.terms[rule.name][:3]),
            ))
    return result


# ============================================================
# SECTION COVERAGE
# ============================================================

@dataclass
class SectionCoverage:
    found: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    found_weight: float = 0.0
    total_weight: float = 0.0

    @property
    def ratio(self) -> float:
        return self.found_weight / self.total_weight if self.total_weight else 0.0

    def to_dict(self) -> dict:
        return {
            "found": list(self.found),
            "missing": list(self.missing),
            "coverage": round(self.ratio, 3),
        }


def detect_sections(text: str, sections: Sequence[PatternRule]) -> SectionCoverage:
    """Weighted presence check over heading rules; rule name is the section label."""
    coverage = SectionCoverage()
    for rule in sections:
        coverage.total_weight += rule.weight
        if text and rule.search(text):
            coverage.found.append(rule.name)
            coverage.found_weight += rule.weight
        else:
            coverage.missing.append(rule.name)
    return coverage
