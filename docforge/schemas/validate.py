"""
API Schemas — Request and Response Models

Pydantic models for the Docforge API.
"""

from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, Field

from docforge.config import settings

_DOC_TYPE_PATTERN = "^[a-z][a-z0-9-]*$"


# ============================================================
# VALIDATE
# ============================================================

class ValidateRequest(BaseModel):
    """POST /validate request body."""
    text: str = Field(..., description="Document text (markdown or plain). Blank text scores 0.")
    doc_type: Optional[str] = Field(None, pattern=_DOC_TYPE_PATTERN,
                                    description="Registered document type id; default type when omitted.")

    model_config = {"json_schema_extra": {"examples": [
        {"text": "# Problem\nSupport tickets take 3 days to resolve...", "doc_type": "one-pager"},
    ]}}


class ValidateBatchRequest(BaseModel):
    """POST /validate/batch request body."""
    items: list[ValidateRequest] = Field(..., min_length=1, max_length=settings.BATCH_MAX_ITEMS)


class DimensionResponse(BaseModel):
    name: str
    score: int
    max_score: int
    issues: list[str]
    strengths: list[str]


class ValidationResponse(BaseModel):
    """POST /validate response body."""
    doc_type: str
    total_score: int
    max_score: int = 100
    grade: str
    label: str
    color: str
    dimensions: dict[str, DimensionResponse]
    slop_detection: dict[str, Any]
    issues: list[str]
    strengths: list[str]
    is_prompt_detected: bool = False
    truncated: bool = False
    error: Optional[str] = None


class ValidateBatchResponse(BaseModel):
    """POST /validate/batch response body."""
    results: list[ValidationResponse]
    total: int
    scored: int


# ============================================================
# SLOP
# ============================================================

class SlopRequest(BaseModel):
    """POST /slop request body."""
    text: str = Field(..., description="Text to analyze for generic, formulaic prose.")


class SlopResponse(BaseModel):
    """POST /slop response body."""
    score: int
    max_score: int
    severity: str
    penalty: int
    pattern_count: int
    breakdown: dict[str, Any]
    top_offenders: list[dict]
    issues: list[str]


# ============================================================
# DETECT
# ============================================================

class DetectRequest(BaseModel):
    """POST /detect request body."""
    text: str
    doc_type: Optional[str] = Field(None, pattern=_DOC_TYPE_PATTERN)


class DetectResponse(BaseModel):
    doc_type: str
    detectors: dict[str, Any]


# ============================================================
# PLUGINS
# ============================================================

class PluginDimension(BaseModel):
    key: str
    name: str
    max_score: int
    description: str = ""


class PluginResponse(BaseModel):
    id: str
    name: str
    description: str = ""
    dimensions: list[PluginDimension]
    max_score: int
    detectors: list[str]
    slop_policy: dict[str, float]


class PluginListResponse(BaseModel):
    default: str
    total: int
    plugins: list[PluginResponse]


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    engine_version: str
    plugin_count: int
    default_doc_type: str
