"""
Document Validator — The Aggregator

Single entry point that turns text into a ValidationResult for one
document type:

  1. Input guard      — non-string / blank text -> zero-shaped result
  2. Length bound     — text beyond MAX_INPUT_CHARS is truncated
  3. Exclusion zones  — mandated boilerplate removed before scanning
  4. Prompt guard     — unfilled prompt templates -> zero + diagnostic
  5. Normalization    — inline markdown removed, structure kept
  6. Dimensions       — every rubric scorer, summed
  7. Adjustments      — plugin bonuses / deductions
  8. Slop deduction   — plugin-scaled slop penalty, floor 0, cap 100
  9. Overrides        — plugin caps (e.g. missing internal FAQ -> 50)

Content problems never raise; they are returned as data. The only
exception a caller can see is UnknownDocumentTypeError for a doc type
that was never registered.

Usage:
    from docforge.validator import validate
    result = validate(markdown, doc_type="prd")
    print(result.total_score, result.grade)
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Optional

from docforge.config import settings
from docforge.logging import get_logger
from docforge.normalize import normalize_markdown
from docforge.patterns import strip_exclusion_zones
from docforge.prompt_guard import check_prompt
from docforge.registry import DocumentTypePlugin, RubricRegistry, get_registry
from docforge.scoring import DimensionScore, get_grade, get_score_color, get_score_label
from docforge.slop import SlopReport, analyze_slop

logger = get_logger("validator")

NO_CONTENT = "No content to validate"


# ============================================================
# RESULT
# ============================================================

@dataclass
class ValidationResult:
    """Complete scoring outcome for one document."""
    doc_type: str
    total_score: int
    dimensions: dict[str, DimensionScore]
    slop_detection: dict[str, Any]
    issues: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    is_prompt_detected: bool = False
    truncated: bool = False

    @property
    def grade(self) -> str:
        return get_grade(self.total_score)

    @property
    def label(self) -> str:
        return get_score_label(self.total_score)

    @property
    def color(self) -> str:
        return get_score_color(self.total_score)

    def to_dict(self) -> dict:
        return {
            "doc_type": self.doc_type,
            "total_score": self.total_score,
            "max_score": 100,
            "grade": self.grade,
            "label": self.label,
            "color": self.color,
            "dimensions": {k: d.to_dict() for k, d in self.dimensions.items()},
            "slop_detection": dict(self.slop_detection),
            "issues": list(self.issues),
            "strengths": list(self.strengths),
            "is_prompt_detected": self.is_prompt_detected,
            "truncated": self.truncated,
        }


# ============================================================
# HELPERS
# ============================================================

def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            out.append(item)
    return out


def _slop_section(report: SlopReport, deduction: int) -> dict[str, Any]:
    data = report.to_dict()
    data["deduction"] = deduction
    return data


def _zero_result(plugin: DocumentTypePlugin, issue: str, prompt: bool = False) -> ValidationResult:
    return ValidationResult(
        doc_type=plugin.id,
        total_score=0,
        dimensions={
            d.key: DimensionScore(score=0, max_score=d.max_score, name=d.name)
            for d in plugin.rubric
        },
        slop_detection=_slop_section(SlopReport(), 0),
        issues=[issue],
        is_prompt_detected=prompt,
    )


def _resolve_plugin(doc_type: Optional[str], registry: Optional[RubricRegistry]) -> DocumentTypePlugin:
    reg = registry or get_registry()
    return reg.get_default() if doc_type is None else reg.get_plugin(doc_type)


# ============================================================
# AGGREGATOR
# ============================================================

def validate(
    text: Any,
    doc_type: Optional[str] = None,
    registry: Optional[RubricRegistry] = None,
) -> ValidationResult:
    """
    Score ``text`` against the rubric of ``doc_type`` (default type if None).

    Raises:
        UnknownDocumentTypeError: ``doc_type`` is not registered.
    """
    plugin = _resolve_plugin(doc_type, registry)
    start = time.perf_counter()

    # --- 1. Input guard ---
    if not isinstance(text, str) or not text.strip():
        return _zero_result(plugin, NO_CONTENT)

    # --- 2. Length bound ---
    truncated = len(text) > settings.MAX_INPUT_CHARS
    if truncated:
        logger.warning(
            "Input truncated",
            extra={"doc_type": plugin.id, "input_chars": len(text)},
        )
        text = text[:settings.MAX_INPUT_CHARS]

    # --- 3. Exclusion zones ---
    excluded = strip_exclusion_zones(text)

    # --- 4. Prompt guard (preamble zones already removed) ---
    prompt = check_prompt(excluded.clean_text)
    if prompt.is_prompt(settings.PROMPT_SIGNAL_THRESHOLD):
        logger.warning(
            "Prompt template submitted as document",
            extra={"doc_type": plugin.id, "signals": prompt.signals},
        )
        return _zero_result(plugin, prompt.diagnostic(), prompt=True)

    # --- 5. Normalization ---
    body = normalize_markdown(excluded.clean_text)
    if not body:
        return _zero_result(plugin, NO_CONTENT)

    # --- 6. Dimensions ---
    dimensions: dict[str, DimensionScore] = {}
    issues: list[str] = []
    strengths: list[str] = []
    total = 0
    for dim in plugin.rubric:
        result = dim.score(body, excluded.zones)
        dimensions[dim.key] = result
        total += result.score
        issues.extend(result.issues)
        strengths.extend(result.strengths)

    # --- 7. Adjustments ---
    for adjust in plugin.adjustments:
        adj = adjust(body)
        total += adj.delta
        issues.extend(adj.issues)
        strengths.extend(adj.strengths)

    # --- 8. Slop ---
    report = analyze_slop(body)
    deduction = plugin.slop_policy.deduction(report.penalty)
    total = max(0, min(100, total - deduction))
    if deduction:
        issues.extend(report.issues[:2])

    # --- 9. Overrides ---
    for override in plugin.overrides:
        cap = override(body)
        if cap is not None and total > cap.cap:
            total = cap.cap
            issues.append(cap.reason)

    if truncated:
        issues.append(
            f"Document exceeds {settings.MAX_INPUT_CHARS:,} characters; "
            "only the first part was scored"
        )

    result = ValidationResult(
        doc_type=plugin.id,
        total_score=int(total),
        dimensions=dimensions,
        slop_detection=_slop_section(report, deduction),
        issues=_dedupe(issues),
        strengths=_dedupe(strengths),
        truncated=truncated,
    )
    logger.debug(
        "Validation complete",
        extra={
            "doc_type": plugin.id,
            "total_score": result.total_score,
            "slop_severity": report.severity,
            "slop_deduction": deduction,
            "duration_ms": round((time.perf_counter() - start) * 1000, 2),
        },
    )
    return result


def detect(text: str, doc_type: Optional[str] = None,
           registry: Optional[RubricRegistry] = None) -> dict:
    """Raw detector outputs for a document type (after zone stripping and normalization)."""
    plugin = _resolve_plugin(doc_type, registry)
    if not isinstance(text, str) or not text.strip():
        return {}
    body = normalize_markdown(strip_exclusion_zones(text[:settings.MAX_INPUT_CHARS]).clean_text)
    return plugin.run_detectors(body)
