"""
Structured Logging for Scoring Runs

Every docforge log line describes one scoring event: which document type,
what it scored, how much slop was charged, how long it took. The JSON
formatter emits those fields as top-level keys next to the engine version
so log aggregation can group results by rubric release; the text formatter
appends them as ``key=value`` pairs for terminals.

The API logs JSON to stdout. The CLI logs text to stderr so ``--json``
output on stdout stays machine-readable.

Usage:
    from docforge.logging import get_logger
    logger = get_logger("validator")
    logger.info("Validation complete", extra={"doc_type": "prd", "total_score": 72})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import IO, Optional

from docforge.config import settings
from docforge.errors import ConfigurationError


LOG_LEVEL = os.getenv("DOCFORGE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("DOCFORGE_LOG_FORMAT", "json")  # "json" or "text"

# Scoring context carried through ``extra=``; anything else is dropped
CONTEXT_FIELDS = (
    "doc_type", "total_score", "slop_severity", "slop_deduction",
    "plugin_count", "signals", "input_chars", "items", "file",
    "duration_ms", "status_code", "method", "path", "error", "error_type",
)


def scoring_context(record: logging.LogRecord) -> dict:
    """Whitelisted context fields present on ``record``, in declaration order."""
    context = {}
    for key in CONTEXT_FIELDS:
        val = getattr(record, key, None)
        if val is not None:
            context[key] = val
    return context


class JSONFormatter(logging.Formatter):
    """One JSON object per line, stamped with the rubric engine version."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "engine_version": settings.ENGINE_VERSION,
            "message": record.getMessage(),
        }
        entry.update(scoring_context(record))

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable line with the scoring context appended."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = scoring_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        # exception text, if any, stays on the lines after the first
        head, sep, tail = line.partition("\n")
        return f"{head}  {pairs}{sep}{tail}"


_FORMATTERS = {"json": JSONFormatter, "text": TextFormatter}


def setup_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Configure the docforge root logger. Call once at startup.

    Raises:
        ConfigurationError: ``fmt`` (or DOCFORGE_LOG_FORMAT) is not "json" or "text".
    """
    fmt = (fmt or LOG_FORMAT).lower()
    if fmt not in _FORMATTERS:
        raise ConfigurationError(f"Unknown log format '{fmt}' (expected json or text)")

    root = logging.getLogger("docforge")
    root.setLevel(getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO))

    # Clear existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(_FORMATTERS[fmt]())
    root.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the docforge namespace."""
    return logging.getLogger(f"docforge.{name}")
