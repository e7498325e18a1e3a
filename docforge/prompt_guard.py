"""
Prompt-Misuse Guard

Detects when the submitted "document" is actually an unfilled instruction
template (an LLM prompt) rather than a draft. Four independent signal
categories are checked; a single hit is common in legitimate documents
("Your role is to own the rollout"), so the caller only short-circuits
once several categories fire together.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from docforge.detection import DetectionResult, detect
from docforge.patterns import PatternCategory, PatternRule


PROMPT_SIGNALS = PatternCategory("prompt_signals", (
    PatternRule(
        "role_assignment",
        r"(?:^|[.!?]\s+)(?:you are (?:a|an|the)\s+\w+|act as (?:a|an|the)\s+\w+|your role is to)",
        "prompt",
        indicator="role assignment ({terms})",
        multiline=True,
    ),
    PatternRule(
        "template_placeholder",
        r"\{\{\s*[A-Za-z_][\w .-]{0,60}\}\}|\[\s*(?:insert|your|add|enter)\b[^\]\n]{0,80}\]",
        "prompt",
        indicator="unfilled placeholder ({terms})",
    ),
    PatternRule(
        "instruction_header",
        r"^#{1,6}\s*(?:critical\s+)?(?:instructions?|rules|guidelines|constraints)\b"
        r"|\byour (?:task|job) is(?: to)?\b|\bfollow these (?:steps|instructions)\b",
        "prompt",
        indicator="instruction header ({terms})",
        multiline=True,
    ),
    PatternRule(
        "output_rules",
        r"</?\s*(?:output[_-]?(?:rules|format)|response[_-]?format|instructions|system)\s*>"
        r"|^\s*output format\s*:|\brespond only with\b",
        "prompt",
        indicator="output rule tag ({terms})",
        multiline=True,
    ),
))


@dataclass
class PromptCheck:
    signals: list[str] = field(default_factory=list)   # categories that fired
    indicators: list[str] = field(default_factory=list)

    @property
    def signal_count(self) -> int:
        return len(self.signals)

    def is_prompt(self, threshold: int) -> bool:
        return self.signal_count >= threshold

    def diagnostic(self) -> str:
        return (
            "This looks like an unfilled prompt template, not a document "
            f"({self.signal_count} prompt signals: {', '.join(self.signals)}). "
            "Paste the generated document instead."
        )


def check_prompt(text: str) -> PromptCheck:
    """Scan raw text for prompt-template signal categories."""
    result: DetectionResult = detect(text, PROMPT_SIGNALS)
    return PromptCheck(
        signals=[name for name in result.counts if result.has(name)],
        indicators=list(result.indicators),
    )
