"""
Rubric Registry — Document Types and Their Rubrics

Maps a document-type id ("prd", "one-pager", ...) to the plugin that
scores it. Populated once at process start from the built-in plugins,
then sealed; after that it is read-only and safe to share across
threads.

Every registration is checked immediately. A malformed rubric is a
startup failure, never something a request can trip over.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from docforge.config import settings
from docforge.errors import ConfigurationError, UnknownDocumentTypeError
from docforge.logging import get_logger
from docforge.patterns import compile_pattern
from docforge.scoring import Dimension, rubric_total
from docforge.slop import SlopPolicy

logger = get_logger("registry")

_ID_RE = compile_pattern("plugin_id", r"^[a-z][a-z0-9-]*$")
RUBRIC_TOTAL = 100


# ============================================================
# PLUGIN DATA
# ============================================================

@dataclass(frozen=True)
class Adjustment:
    """Rubric-level bonus (positive) or deduction (negative) applied after the sum."""
    delta: int = 0
    issues: tuple[str, ...] = ()
    strengths: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScoreCap:
    """Override rule outcome: the total may not exceed ``cap``."""
    cap: int
    reason: str


AdjustmentFn = Callable[[str], Adjustment]
OverrideFn = Callable[[str], Optional[ScoreCap]]


@dataclass(frozen=True)
class DocumentTypePlugin:
    """Everything the aggregator needs to score one document type."""
    id: str                                   # e.g. "prd"
    name: str                                 # e.g. "Product Requirements Document"
    rubric: tuple[Dimension, ...]
    description: str = ""
    detectors: Mapping[str, Callable[[str], Any]] = field(default_factory=dict)
    slop_policy: SlopPolicy = SlopPolicy()
    adjustments: tuple[AdjustmentFn, ...] = ()
    overrides: tuple[OverrideFn, ...] = ()

    def run_detectors(self, text: str) -> dict:
        """Raw detector outputs, JSON-ready."""
        out = {}
        for name, detector in self.detectors.items():
            value = detector(text)
            out[name] = value.to_dict() if hasattr(value, "to_dict") else value
        return out

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "dimensions": [d.to_dict() for d in self.rubric],
            "max_score": rubric_total(self.rubric),
            "detectors": sorted(self.detectors),
            "slop_policy": {"scale": self.slop_policy.scale, "cap": self.slop_policy.cap},
        }


# ============================================================
# REGISTRY
# ============================================================

class RubricRegistry:
    """In-memory id -> plugin map with boot-time validation."""

    def __init__(self, default_id: str = "one-pager"):
        self._plugins: dict[str, DocumentTypePlugin] = {}
        self._default_id = default_id
        self._sealed = False
        self._lock = threading.Lock()

    def register(self, plugin: DocumentTypePlugin) -> DocumentTypePlugin:
        """
        Add a plugin.

        Raises:
            ConfigurationError: sealed registry, duplicate or malformed id,
                empty rubric, non-positive caps, duplicate dimension keys,
                or caps not summing to 100.
        """
        with self._lock:
            if self._sealed:
                raise ConfigurationError(
                    f"Registry is sealed; cannot register '{plugin.id}'"
                )
            if plugin.id in self._plugins:
                raise ConfigurationError(f"Duplicate document type id '{plugin.id}'")
            self._check(plugin)
            self._plugins[plugin.id] = plugin
        return plugin

    @staticmethod
    def _check(plugin: DocumentTypePlugin) -> None:
        if not isinstance(plugin.id, str) or not _ID_RE.match(plugin.id):
            raise ConfigurationError(f"Malformed document type id {plugin.id!r}")
        if not plugin.rubric:
            raise ConfigurationError(f"'{plugin.id}' has an empty rubric")
        keys = [d.key for d in plugin.rubric]
        if len(set(keys)) != len(keys):
            raise ConfigurationError(f"'{plugin.id}' has duplicate dimension keys")
        for dim in plugin.rubric:
            if dim.max_score <= 0:
                raise ConfigurationError(
                    f"'{plugin.id}' dimension '{dim.key}' has non-positive cap {dim.max_score}"
                )
        total = rubric_total(plugin.rubric)
        if total != RUBRIC_TOTAL:
            raise ConfigurationError(
                f"'{plugin.id}' rubric sums to {total}, expected {RUBRIC_TOTAL}"
            )

    def seal(self) -> None:
        with self._lock:
            if self._default_id not in self._plugins:
                raise ConfigurationError(
                    f"Default document type '{self._default_id}' is not registered"
                )
            self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get_plugin(self, doc_type: str) -> DocumentTypePlugin:
        try:
            return self._plugins[doc_type]
        except (KeyError, TypeError):
            raise UnknownDocumentTypeError(str(doc_type), self.plugin_ids()) from None

    def get_all(self) -> list[DocumentTypePlugin]:
        return list(self._plugins.values())

    def get_default(self) -> DocumentTypePlugin:
        return self.get_plugin(self._default_id)

    def has_plugin(self, doc_type: str) -> bool:
        return doc_type in self._plugins

    def plugin_ids(self) -> list[str]:
        return list(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)

    def __contains__(self, doc_type: object) -> bool:
        return doc_type in self._plugins


# ============================================================
# DEFAULT INSTANCE
# ============================================================

_default: Optional[RubricRegistry] = None
_default_lock = threading.Lock()


def get_registry() -> RubricRegistry:
    """The process-wide registry, populated with the built-in plugins and sealed."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                from docforge.plugins import register_builtin_plugins

                reg = RubricRegistry(default_id=settings.DEFAULT_DOC_TYPE)
                register_builtin_plugins(reg)
                reg.seal()
                logger.info(
                    "Rubric registry ready",
                    extra={"plugin_count": len(reg), "doc_type": settings.DEFAULT_DOC_TYPE},
                )
                _default = reg
    return _default
