"""
Markdown Normalization

Documents arrive as markdown pasted from editors, so the same sentence can
carry emphasis markers, link syntax or inline code ticks. Detectors should
see the words, not the markup. Two levels are offered:

  normalize_markdown  keeps the line structure detectors rely on (heading
                      lines, list markers, checkboxes) and removes inline
                      markup, code blocks and HTML comments.
  strip_markdown      produces plain prose for sentence-level statistics.

Plus small text utilities shared by the slop analyzer and the plugins.
"""

from __future__ import annotations

import re
from typing import Optional, Union

from docforge.patterns import PatternRule, compile_pattern


# ============================================================
# MARKUP PATTERNS
# ============================================================

_FENCE_OPEN = compile_pattern("fence_open", r"^[ \t]*(```|~~~)")
_IMAGE = compile_pattern("image", r"!\[([^\]\n]{0,500})\]\([^)\n]{0,2000}\)")
_LINK = compile_pattern("link", r"\[([^\]\n]{1,500})\]\([^)\n]{0,2000}\)")
_INLINE_CODE = compile_pattern("inline_code", r"`([^`\n]+)`")
_BOLD_STARS = compile_pattern("bold_stars", r"\*\*([^*\n]+)\*\*")
_BOLD_UNDERSCORES = compile_pattern("bold_underscores", r"(?<!\w)__([^_\n]+)__(?!\w)")
_ITALIC_STARS = compile_pattern("italic_stars", r"(?<![\w*])\*(?![\s*])([^*\n]{1,500}?)(?<!\s)\*(?![\w*])")
_ITALIC_UNDERSCORES = compile_pattern("italic_underscores", r"(?<!\w)_(?!\s)([^_\n]{1,500}?)(?<!\s)_(?!\w)")
_STRIKETHROUGH = compile_pattern("strikethrough", r"~~([^~\n]+)~~")

_HEADING_MARK = compile_pattern("heading_mark", r"^#{1,6}\s+", re.MULTILINE)
_BLOCKQUOTE = compile_pattern("blockquote", r"^[ \t]*>[ \t]?", re.MULTILINE)
_HRULE = compile_pattern("hrule", r"^[ \t]*[-*_]{3,}[ \t]*$", re.MULTILINE)
_CHECKBOX = compile_pattern("checkbox", r"^([ \t]*)[-*+][ \t]*\[[ xX]?\][ \t]*", re.MULTILINE)
_BULLET = compile_pattern("bullet", r"^[ \t]*[-*+][ \t]+", re.MULTILINE)
_NUMBERED = compile_pattern("numbered", r"^[ \t]*\d+[.)][ \t]+", re.MULTILINE)
_EXCESS_BLANKS = compile_pattern("excess_blanks", r"\n{3,}")

# Applied to one stripped line at a time
_HEADING_LINE = compile_pattern("heading_line", r"^(#{1,6})[ \t]+([^\n]{1,500}?)[ \t#]*$")
_SENTENCE_SPLIT = compile_pattern("sentence_split", r"[.!?]+")
_PARAGRAPH_SPLIT = compile_pattern("paragraph_split", r"\n[ \t]*\n")

# Curly quotes and apostrophes folded to ASCII before matching
_QUOTE_FOLD = str.maketrans({
    "‘": "'", "’": "'", "“": '"', "”": '"',
})


# ============================================================
# NORMALIZATION
# ============================================================

def _strip_html_comments(text: str) -> str:
    """Drop ``<!-- ... -->`` blocks; an unterminated comment is kept."""
    pieces = []
    pos = 0
    while True:
        start = text.find("<!--", pos)
        if start == -1:
            break
        end = text.find("-->", start + 4)
        if end == -1:
            break
        pieces.append(text[pos:start])
        pos = end + 3
    pieces.append(text[pos:])
    return "".join(pieces)


def _strip_code_blocks(text: str) -> str:
    """
    Drop fenced code blocks, fences included.

    A block opens on a line starting with ``` or ~~~ and closes on the
    next line holding only the same fence. An unclosed fence is kept.
    """
    lines = text.split("\n")
    # next_close[fence][i]: first line after i holding only that fence
    next_close: dict[str, list] = {"```": [None] * len(lines), "~~~": [None] * len(lines)}
    upcoming: dict[str, Optional[int]] = {"```": None, "~~~": None}
    for idx in range(len(lines) - 1, -1, -1):
        for fence in upcoming:
            next_close[fence][idx] = upcoming[fence]
        stripped = lines[idx].strip(" \t")
        if stripped in upcoming:
            upcoming[stripped] = idx

    kept = []
    idx = 0
    while idx < len(lines):
        m = _FENCE_OPEN.match(lines[idx])
        close = next_close[m.group(1)][idx] if m else None
        if close is None:
            kept.append(lines[idx])
            idx += 1
            continue
        kept.append("")
        idx = close + 1
    return "\n".join(kept)


def _strip_inline(text: str) -> str:
    text = _strip_html_comments(text)
    text = _strip_code_blocks(text)
    text = _IMAGE.sub(r"\1", text)
    text = _LINK.sub(r"\1", text)
    text = _INLINE_CODE.sub(r"\1", text)
    text = _BOLD_STARS.sub(r"\1", text)
    text = _BOLD_UNDERSCORES.sub(r"\1", text)
    text = _ITALIC_STARS.sub(r"\1", text)
    text = _ITALIC_UNDERSCORES.sub(r"\1", text)
    text = _STRIKETHROUGH.sub(r"\1", text)
    return text


def normalize_markdown(text: str) -> str:
    """
    Remove inline markup while keeping block structure.

    Heading lines ('## Problem'), bullets and checkboxes ('- [ ] ...')
    survive so section and criteria detectors still see them.
    Curly quotes are folded to ASCII.
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.translate(_QUOTE_FOLD)
    text = _strip_inline(text)
    return _EXCESS_BLANKS.sub("\n\n", text).strip()


def strip_markdown(text: str) -> str:
    """Reduce markdown to plain prose (headings, quotes and list markers removed)."""
    if not text:
        return ""
    text = normalize_markdown(text)
    text = _HEADING_MARK.sub("", text)
    text = _BLOCKQUOTE.sub("", text)
    text = _HRULE.sub("", text)
    text = _CHECKBOX.sub(r"\1", text)
    text = _BULLET.sub("", text)
    text = _NUMBERED.sub("", text)
    return _EXCESS_BLANKS.sub("\n\n", text).strip()


# ============================================================
# TEXT UTILITIES
# ============================================================

def count_words(text: str) -> int:
    return len(text.split()) if text else 0


def split_sentences(text: str) -> list[str]:
    """Sentences split on runs of terminal punctuation; empty pieces dropped."""
    if not text:
        return []
    return [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def split_paragraphs(text: str, include_headings: bool = False) -> list[str]:
    """
    Blank-line separated blocks.

    Heading lines are removed from each block unless ``include_headings``;
    blocks that become empty are dropped.
    """
    if not text:
        return []
    paragraphs = []
    for block in _PARAGRAPH_SPLIT.split(text):
        if not include_headings:
            block = "\n".join(
                line for line in block.split("\n")
                if not line.lstrip().startswith("#")
            )
        block = block.strip()
        if block:
            paragraphs.append(block)
    return paragraphs


def extract_title(text: str) -> str:
    """First H1 heading, else the first non-empty line."""
    if not text:
        return ""
    for line in text.split("\n"):
        m = _HEADING_LINE.match(line.strip())
        if m and len(m.group(1)) == 1:
            return m.group(2).strip()
    for line in text.split("\n"):
        if line.strip():
            return line.strip().lstrip("#").strip()
    return ""


def extract_section(
    text: str,
    heading: Union[str, re.Pattern, PatternRule],
) -> Optional[str]:
    """
    Body of the first section whose heading line matches ``heading``.

    The body runs until the next markdown heading of the same or a higher
    level (any markdown heading if the matched line was a plain-text
    heading). Returns None when no line matches.
    """
    if not text:
        return None
    if isinstance(heading, PatternRule):
        matcher = heading.compiled
    elif isinstance(heading, str):
        matcher = compile_pattern("section heading", heading, re.IGNORECASE)
    else:
        matcher = heading

    lines = text.split("\n")
    for idx, line in enumerate(lines):
        if not matcher.match(line.strip()):
            continue
        level_match = _HEADING_LINE.match(line.strip())
        level = len(level_match.group(1)) if level_match else 6
        body = []
        for following in lines[idx + 1:]:
            m = _HEADING_LINE.match(following.strip())
            if m and len(m.group(1)) <= level:
                break
            body.append(following)
        return "\n".join(body).strip()
    return None
