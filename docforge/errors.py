"""
Engine Errors

Content problems are never exceptions; they come back as data (zero
scores, issue strings). The classes here cover the two things that are
not content: a broken configuration at startup and a caller asking for a
document type that does not exist.
"""

from __future__ import annotations


class DocforgeError(Exception):
    """Base class for all docforge errors."""


class ConfigurationError(DocforgeError):
    """Raised at import/registration time when the rubric setup is invalid."""


class UnsafePatternError(ConfigurationError):
    """A pattern rule could backtrack non-linearly on adversarial input."""

    def __init__(self, name: str, pattern: str, reason: str):
        self.name = name
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Unsafe pattern '{name}': {reason} ({pattern!r})")


class UnknownDocumentTypeError(DocforgeError, KeyError):
    """Lookup of a document type id that was never registered."""

    def __init__(self, doc_type: str, known: list[str] | None = None):
        self.doc_type = doc_type
        self.known = known or []
        super().__init__(doc_type)

    def __str__(self) -> str:
        known = ", ".join(self.known) if self.known else "none"
        return f"Unknown document type '{self.doc_type}' (registered: {known})"
