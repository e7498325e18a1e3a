"""
Docforge — Document Quality Scoring Engine

Scores business-document drafts (one-pagers, PRDs, PR-FAQs, ADRs, job
descriptions, ...) against per-type weighted rubrics and returns a bounded
0-100 score with actionable issues and strengths.

Public API:
  - validate:          Score a document against its type's rubric
  - detect:            Raw detector output for a document type
  - analyze_slop:      Lexical / structural / stylometric "AI slop" estimate
  - check_prompt:      Detect unfilled prompt templates
  - get_registry:      The sealed, process-wide rubric registry
  - RubricRegistry:    Build a custom registry of document-type plugins
  - DocumentTypePlugin, Dimension, DimensionBuilder: plugin authoring

Usage:
    from docforge import validate
    result = validate(markdown, doc_type="prd")
    print(result.total_score, result.grade, result.issues[:3])
"""

__version__ = "1.0.0"

from docforge.config import settings
from docforge.errors import (
    ConfigurationError,
    DocforgeError,
    UnknownDocumentTypeError,
    UnsafePatternError,
)
from docforge.prompt_guard import check_prompt
from docforge.registry import (
    Adjustment,
    DocumentTypePlugin,
    RubricRegistry,
    ScoreCap,
    get_registry,
)
from docforge.scoring import (
    Dimension,
    DimensionBuilder,
    DimensionScore,
    get_grade,
    get_score_color,
    get_score_label,
)
from docforge.slop import SlopPolicy, SlopReport, analyze_slop
from docforge.validator import ValidationResult, detect, validate

__all__ = [
    "settings",
    "ConfigurationError",
    "DocforgeError",
    "UnknownDocumentTypeError",
    "UnsafePatternError",
    "check_prompt",
    "Adjustment",
    "DocumentTypePlugin",
    "RubricRegistry",
    "ScoreCap",
    "get_registry",
    "Dimension",
    "DimensionBuilder",
    "DimensionScore",
    "get_grade",
    "get_score_color",
    "get_score_label",
    "SlopPolicy",
    "SlopReport",
    "analyze_slop",
    "ValidationResult",
    "detect",
    "validate",
]
