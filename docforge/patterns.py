"""
Pattern Library — Immutable Named Matchers

Every lexical or structural signal the engine looks for is declared here
or in a plugin module as a PatternRule. Rules are data: a name, a regex
source, a category tag and an optional weight. They are compiled exactly
once, when the defining module is imported, and they are checked for
catastrophic-backtracking shapes before they are accepted.

The library holds no state that changes after import. Detectors receive
the rules they need explicitly (see detection.py); nothing reads a
global vocabulary behind the caller's back.

Usage:
    from docforge.patterns import PatternRule, PatternCategory, phrase_rule

    HYPE = PatternCategory("hype", (
        phrase_rule("hype_words", ["revolutionary", "game-changing"], "hype"),
        PatternRule("percent", r"\\d+(?:\\.\\d+)?%", "metrics"),
    ))
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from docforge.errors import ConfigurationError, UnsafePatternError


# ============================================================
# SAFETY VALIDATION
# ============================================================

_GROUP_PREFIXES = ("?:", "?=", "?!", "?<=", "?<!", "?>")


def _read_quantifier(pattern: str, i: int) -> tuple[Optional[bool], int]:
    """
    Parse a quantifier starting at ``pattern[i]``.

    Returns (unbounded, next_index). ``unbounded`` is None when there is
    no quantifier at ``i``.
    """
    if i >= len(pattern):
        return None, i
    ch = pattern[i]
    if ch in "*+":
        unbounded, j = True, i + 1
    elif ch == "?":
        unbounded, j = False, i + 1
    elif ch == "{":
        m = re.match(r"\{(\d*)(,?)(\d*)\}", pattern[i:])
        if not m or (not m.group(1) and not m.group(3)):
            return None, i  # literal brace
        unbounded = bool(m.group(2)) and not m.group(3)
        j = i + m.end()
    else:
        return None, i
    # Lazy / possessive suffix
    if j < len(pattern) and pattern[j] in "?+":
        j += 1
    return unbounded, j


def _skip_class(pattern: str, i: int) -> int:
    """Return the index just past a character class starting at ``pattern[i] == '['``."""
    j = i + 1
    if j < len(pattern) and pattern[j] == "^":
        j += 1
    if j < len(pattern) and pattern[j] == "]":
        j += 1
    while j < len(pattern) and pattern[j] != "]":
        j += 2 if pattern[j] == "\\" else 1
    return j + 1


# Characters tried against two neighbouring quantified atoms to see whether
# they can match the same input
_OVERLAP_PROBE = " \t\naZ5_-.,:;#/%$()"


def _atom_matches(atom: str, probe: set[str]) -> set[str]:
    try:
        compiled = re.compile(atom, re.IGNORECASE)
    except re.error:
        return set()  # back-references and similar cannot be probed alone
    return {c for c in probe if compiled.fullmatch(c)}


def _atoms_overlap(left: str, right: str) -> bool:
    probe = set(_OVERLAP_PROBE) | set(left) | set(right)
    return bool(_atom_matches(left, probe) & _atom_matches(right, probe))


def check_pattern_safety(name: str, pattern: str) -> None:
    """
    Reject regex shapes whose worst case is non-linear.

    Three shapes are refused:
      - an unbounded quantifier applied to a group that itself contains an
        unbounded quantifier, e.g. ``(\\w+\\s?)+`` (exponential backtracking)
      - an unbounded dot wildcard, ``.*`` or ``.+`` (quadratic scans when
        chained); wildcards must be written with an explicit bound,
        e.g. ``.{0,80}``
      - two unbounded quantifiers in a row over atoms that can match the
        same character, e.g. ``\\s*\\n+\\s*`` (polynomial backtracking on a
        long whitespace run)

    Raises:
        UnsafePatternError: describing the offending shape.
    """
    # Each frame: [group holds an unbounded quantifier, previous unbounded atom]
    stack: list[list] = [[False, None]]
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "(":
            stack[-1][1] = None
            stack.append([False, None])
            i += 1
            for prefix in _GROUP_PREFIXES:
                if pattern.startswith(prefix, i):
                    i += len(prefix)
                    break
            else:
                if pattern.startswith("?P<", i):
                    i = pattern.index(">", i) + 1
                elif pattern.startswith("?<", i):
                    i = pattern.index(">", i) + 1
            continue
        if ch == ")":
            if len(stack) == 1:
                raise UnsafePatternError(name, pattern, "unbalanced parenthesis")
            inner_unbounded = stack.pop()[0]
            unbounded, i = _read_quantifier(pattern, i + 1)
            if unbounded and inner_unbounded:
                raise UnsafePatternError(name, pattern, "nested unbounded quantifier")
            if unbounded or inner_unbounded:
                stack[-1][0] = True
            continue
        if ch == "|":
            stack[-1][1] = None
            i += 1
            continue
        if ch in "^$" or pattern.startswith(("\\b", "\\B", "\\A", "\\Z"), i):
            # zero-width, does not separate its neighbours
            i += 1 if ch in "^$" else 2
            continue
        # Atom
        if ch == "\\":
            atom_end = i + 2
        elif ch == "[":
            atom_end = _skip_class(pattern, i)
        else:
            atom_end = i + 1
        unbounded, j = _read_quantifier(pattern, atom_end)
        frame = stack[-1]
        if unbounded:
            if ch == ".":
                raise UnsafePatternError(name, pattern, "unbounded dot wildcard")
            atom = pattern[i:atom_end]
            if frame[1] is not None and _atoms_overlap(frame[1], atom):
                raise UnsafePatternError(name, pattern, "adjacent overlapping quantifiers")
            frame[0] = True
            frame[1] = atom
        else:
            frame[1] = None
        i = j if unbounded is not None else atom_end
    if len(stack) != 1:
        raise UnsafePatternError(name, pattern, "unbalanced parenthesis")


def compile_pattern(name: str, pattern: str, flags: int = 0) -> re.Pattern:
    """
    Safety-check and compile a standalone matcher.

    Used for matchers that need flags a PatternRule does not carry
    (DOTALL, case-sensitive multiline scans). Raises ConfigurationError
    when the pattern is unsafe or does not compile.
    """
    check_pattern_safety(name, pattern)
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise ConfigurationError(f"Pattern '{name}' does not compile: {exc}") from exc


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class PatternRule:
    """A single named matcher. Immutable; compiled on construction."""
    name: str                  # e.g. "quantified", "problem_section"
    pattern: str               # regex source
    category: str = ""         # e.g. "problem", "slop.buzzword"
    weight: float = 1.0        # section weight or scoring weight
    indicator: str = ""        # e.g. "{count} quantified metrics"
    multiline: bool = False    # ^/$ anchor at line boundaries
    case_sensitive: bool = False
    compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        flags = 0 if self.case_sensitive else re.IGNORECASE
        if self.multiline:
            flags |= re.MULTILINE
        object.__setattr__(self, "compiled", compile_pattern(self.name, self.pattern, flags))

    def findall(self, text: str) -> list[str]:
        """All full-match fragments, in order."""
        return [m.group(0) for m in self.compiled.finditer(text)]

    def count(self, text: str) -> int:
        return sum(1 for _ in self.compiled.finditer(text))

    def search(self, text: str) -> bool:
        return self.compiled.search(text) is not None


@dataclass(frozen=True)
class PatternCategory:
    """An ordered group of rules scanned together by one detector call."""
    name: str
    rules: tuple[PatternRule, ...]

    def __post_init__(self):
        names = [r.name for r in self.rules]
        dupes = {n for n in names if names.count(n) > 1}
        if dupes:
            raise ConfigurationError(
                f"Category '{self.name}' has duplicate rule names: {sorted(dupes)}"
            )

    def rule(self, name: str) -> PatternRule:
        for r in self.rules:
            if r.name == name:
                return r
        raise KeyError(name)

    @property
    def total_weight(self) -> float:
        return sum(r.weight for r in self.rules)


# ============================================================
# BUILDERS
# ============================================================

_SEPARATOR_RE = re.compile(r"[-\s]+")

# Optional markdown heading and section numbering, e.g. "## 2.1 Problem"
HEADING_PREFIX = r"^(?:#+\s*)?(?:\d+\.?\d*\.?\s*)?"


def phrase_pattern(
    phrases: Iterable[str],
    flexible_separators: bool = False,
) -> str:
    """
    Build one alternation from a data-driven phrase list.

    Every phrase is escaped, so list entries such as "absolutely!" or
    "fp&a" cannot produce a malformed pattern. Longer phrases come first
    so the longest alternative wins. Matches are anchored with word
    lookarounds rather than ``\\b`` so punctuation at a phrase edge still
    anchors correctly.

    With ``flexible_separators`` a hyphen or whitespace inside a phrase
    matches any run of hyphens/whitespace ("fast-paced" == "fast paced").
    """
    unique = sorted({p.strip().lower() for p in phrases if p and p.strip()},
                    key=lambda p: (-len(p), p))
    if not unique:
        raise ConfigurationError("Phrase list is empty")
    parts = []
    for phrase in unique:
        if flexible_separators:
            pieces = [re.escape(piece) for piece in _SEPARATOR_RE.split(phrase)]
            parts.append(r"[-\s]+".join(pieces))
        else:
            parts.append(re.escape(phrase))
    return r"(?<!\w)(?:" + "|".join(parts) + r")(?!\w)"


def phrase_rule(
    name: str,
    phrases: Sequence[str],
    category: str = "",
    indicator: str = "",
    weight: float = 1.0,
    flexible_separators: bool = False,
) -> PatternRule:
    """PatternRule matching any phrase from a list."""
    return PatternRule(
        name=name,
        pattern=phrase_pattern(phrases, flexible_separators=flexible_separators),
        category=category,
        weight=weight,
        indicator=indicator,
    )


def heading_rule(name: str, body: str, weight: float = 1.0, category: str = "section") -> PatternRule:
    """PatternRule for a section heading line, with optional '#' and numbering."""
    return PatternRule(
        name=name,
        pattern=HEADING_PREFIX + r"(?:" + body + r")",
        category=category,
        weight=weight,
        multiline=True,
    )


# ============================================================
# EXCLUSION ZONES
# ============================================================

# Organization-mandated boilerplate that must not be scored.
EXCLUSION_MARKERS: dict[str, str] = {
    "preamble": "COMPANY_PREAMBLE",
    "legal": "COMPANY_LEGAL_TEXT",
}


@dataclass(frozen=True)
class ExcludedZone:
    """A mandated block removed from the text before scanning."""
    kind: str       # "preamble" | "legal"
    content: str


@dataclass(frozen=True)
class ExclusionResult:
    clean_text: str
    zones: tuple[ExcludedZone, ...]


def strip_exclusion_zones(text: str) -> ExclusionResult:
    """
    Remove ``[MARKER]...[/MARKER]`` blocks (case-insensitive).

    A plain scan rather than a regex so the cost stays linear in the
    input length. An opening marker with no closing marker is left in
    place.
    """
    zones: list[ExcludedZone] = []
    clean = text
    for kind, marker in EXCLUSION_MARKERS.items():
        open_tag, close_tag = f"[{marker}]".lower(), f"[/{marker}]".lower()
        pieces: list[str] = []
        lower = clean.lower()
        pos = 0
        while True:
            start = lower.find(open_tag, pos)
            if start == -1:
                break
            end = lower.find(close_tag, start + len(open_tag))
            if end == -1:
                break
            pieces.append(clean[pos:start])
            zones.append(ExcludedZone(kind, clean[start + len(open_tag):end]))
            pos = end + len(close_tag)
        pieces.append(clean[pos:])
        clean = "".join(pieces)
    return ExclusionResult(clean_text=clean, zones=tuple(zones))


def appears_in_zones(term: str, zones: Sequence[ExcludedZone]) -> bool:
    """True if ``term`` occurs inside any excluded zone (case-insensitive)."""
    needle = term.lower()
    return any(needle in zone.content.lower() for zone in zones)
