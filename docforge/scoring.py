"""
Dimension Scoring

A rubric is an ordered set of dimensions, each with a hard maximum. A
dimension scorer reads text and returns a DimensionScore: the points
earned plus the feedback that explains them.

Two shapes are supported by DimensionBuilder:
  - additive: start at 0 and award tiered blocks from TierLadder tables
  - deductive: start at the maximum and subtract per negative signal

Either way the final score is clamped to [0, max_score]. Scorers are
pure functions of text and static configuration.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from docforge.errors import ConfigurationError


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass
class DimensionScore:
    """Outcome of one dimension scorer."""
    score: int
    max_score: int
    issues: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    name: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "score": self.score,
            "max_score": self.max_score,
            "issues": list(self.issues),
            "strengths": list(self.strengths),
        }


@dataclass(frozen=True)
class Tier:
    """One rung of a threshold ladder."""
    threshold: float
    points: int
    message: str = ""          # may use {value}
    strength: bool = True      # False -> message is reported as an issue


@dataclass(frozen=True)
class TierLadder:
    """
    Ordered threshold table, evaluated top-down.

    The first tier whose threshold is reached wins. When none is reached,
    ``fallback`` (if any) is reported as an issue and no points are awarded.
    """
    tiers: tuple[Tier, ...]
    fallback: str = ""

    def __post_init__(self):
        thresholds = [t.threshold for t in self.tiers]
        if thresholds != sorted(thresholds, reverse=True):
            raise ConfigurationError("TierLadder thresholds must be descending")

    def evaluate(self, value: float) -> Optional[Tier]:
        for tier in self.tiers:
            if value >= tier.threshold:
                return tier
        return None


ScorerFn = Callable[..., DimensionScore]


@dataclass(frozen=True)
class Dimension:
    """
    A rubric entry: display metadata, hard cap, and the scorer behind it.

    Zone-aware scorers are called as ``scorer(text, zones)`` and receive the
    excluded mandated blocks; all others are called as ``scorer(text)``.
    """
    key: str
    name: str
    max_score: int
    scorer: ScorerFn = field(repr=False, compare=False)
    description: str = ""
    zone_aware: bool = False

    def score(self, text: str, zones: Sequence = ()) -> DimensionScore:
        result = self.scorer(text, zones) if self.zone_aware else self.scorer(text)
        result.name = self.name
        result.max_score = self.max_score
        result.score = max(0, min(self.max_score, result.score))
        return result

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "max_score": self.max_score,
            "description": self.description,
        }


def rubric_total(rubric: Sequence[Dimension]) -> int:
    return sum(d.max_score for d in rubric)


# ============================================================
# BUILDER
# ============================================================

class DimensionBuilder:
    """
    Accumulates points and feedback for one dimension.

    Usage:
        b = DimensionBuilder(25)
        b.add(10, strength="Clear problem statement")
        b.ladder(QUANTIFIED_LADDER, quantified_count)
        return b.build()

        d = DimensionBuilder(25, deductive=True)
        d.deduct(5, issue="Vague language")
    """

    def __init__(self, max_score: int, deductive: bool = False, name: str = ""):
        self.max_score = max_score
        self.name = name
        self.score = max_score if deductive else 0
        self.issues: list[str] = []
        self.strengths: list[str] = []

    def add(self, points: int, strength: str = "", issue: str = "") -> "DimensionBuilder":
        self.score += points
        if strength:
            self.strengths.append(strength)
        if issue:
            self.issues.append(issue)
        return self

    def deduct(self, points: int, issue: str = "") -> "DimensionBuilder":
        self.score -= points
        if issue:
            self.issues.append(issue)
        return self

    def issue(self, message: str) -> "DimensionBuilder":
        self.issues.append(message)
        return self

    def strength(self, message: str) -> "DimensionBuilder":
        self.strengths.append(message)
        return self

    def ladder(self, ladder: TierLadder, value: float) -> int:
        """Award the first tier reached by ``value``; returns the points awarded."""
        tier = ladder.evaluate(value)
        if tier is None:
            if ladder.fallback:
                self.issues.append(ladder.fallback.format(value=value))
            return 0
        self.score += tier.points
        if tier.message:
            message = tier.message.format(value=value)
            (self.strengths if tier.strength else self.issues).append(message)
        return tier.points

    def build(self) -> DimensionScore:
        return DimensionScore(
            score=int(max(0, min(self.max_score, self.score))),
            max_score=self.max_score,
            issues=list(self.issues),
            strengths=list(self.strengths),
            name=self.name,
        )


def scaled(max_points: int, weight: float) -> int:
    """Floor of a fraction of a dimension's maximum."""
    return int(math.floor(max_points * weight))


# ============================================================
# DISPLAY HELPERS
# ============================================================

def get_grade(score: float) -> str:
    if score >= 90:
        return "A"
    if score >= 80:
        return "B"
    if score >= 70:
        return "C"
    if score >= 60:
        return "D"
    return "F"


def get_score_color(score: float) -> str:
    if score >= 70:
        return "green"
    if score >= 50:
        return "yellow"
    if score >= 30:
        return "orange"
    return "red"


def get_score_label(score: float) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 70:
        return "Ready"
    if score >= 50:
        return "Needs Work"
    if score >= 30:
        return "Draft"
    return "Incomplete"
