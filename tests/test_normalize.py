"""
Tests for markdown normalization and the shared text utilities.
"""

from __future__ import annotations

import time

import pytest

from docforge.normalize import (
    count_words,
    extract_section,
    extract_title,
    normalize_markdown,
    split_paragraphs,
    split_sentences,
    strip_markdown,
)
from docforge.patterns import heading_rule


class TestNormalizeMarkdown:
    """Inline markup goes, block structure stays."""

    def test_inline_markup_removed(self):
        assert normalize_markdown("**bold** and [link](http://x) and `code`") == "bold and link and code"

    def test_italics_and_strikethrough(self):
        assert normalize_markdown("*soft* _also_ ~~gone~~") == "soft also gone"

    def test_headings_and_checkboxes_kept(self):
        text = "## Problem\n- [ ] Given a user"
        assert normalize_markdown(text) == text

    def test_code_block_and_comment_removed(self):
        text = "Text\n```\ncode here\n```\nAfter <!-- hidden -->"
        result = normalize_markdown(text)
        assert "code here" not in result
        assert "hidden" not in result
        assert result.startswith("Text")

    def test_unclosed_fence_and_comment_kept(self):
        result = normalize_markdown("Intro\n```\ncode here\n<!-- note")
        assert "code here" in result
        assert "note" in result

    def test_tilde_fence_removed(self):
        assert normalize_markdown("Before\n~~~\nsecret\n~~~\nAfter") == "Before\n\nAfter"

    @pytest.mark.parametrize("text", [
        "<!-- " * 20000 + "\n```" * 20000,
        "[" * 20000,
        "![" * 10000,
        "*a " * 30000,
        "_a " * 30000,
    ])
    def test_unterminated_markers_stay_fast(self, text):
        start = time.perf_counter()
        normalize_markdown(text)
        assert time.perf_counter() - start < 1.0

    def test_curly_quotes_folded(self):
        assert normalize_markdown("it’s “fine”") == "it's \"fine\""

    def test_crlf_and_blank_runs(self):
        assert normalize_markdown("a\r\n\r\n\r\n\r\nb") == "a\n\nb"

    def test_empty(self):
        assert normalize_markdown("") == ""


class TestStripMarkdown:

    def test_block_markers_removed(self):
        text = "# Title\n- item one\n> quote\n1. step\n- [x] done"
        assert strip_markdown(text) == "Title\nitem one\nquote\nstep\ndone"


class TestTextUtilities:

    def test_count_words(self):
        assert count_words("one two  three\nfour") == 4
        assert count_words("") == 0

    def test_split_sentences(self):
        assert split_sentences("One. Two! Three?? ") == ["One", "Two", "Three"]
        assert split_sentences("") == []

    def test_split_paragraphs_drops_headings(self):
        text = "# Title\nIntro text\n\nSecond block\n\n## Only a heading"
        assert split_paragraphs(text) == ["Intro text", "Second block"]

    def test_split_paragraphs_with_headings(self):
        text = "# Title\nIntro text\n\nSecond"
        assert split_paragraphs(text, include_headings=True) == ["# Title\nIntro text", "Second"]

    def test_extract_title_prefers_h1(self):
        assert extract_title("Some text\n# Real Title\n## Sub") == "Real Title"

    def test_extract_title_falls_back_to_first_line(self):
        assert extract_title("\n## Sub heading\nBody") == "Sub heading"
        assert extract_title("") == ""


class TestExtractSection:

    DOC = (
        "# Doc\n"
        "## Problem\n"
        "Body line\n"
        "### Detail\n"
        "More\n"
        "## Next\n"
        "Other"
    )

    def test_body_runs_to_next_same_level_heading(self):
        assert extract_section(self.DOC, r"#+\s*problem") == "Body line\n### Detail\nMore"

    def test_accepts_pattern_rule(self):
        rule = heading_rule("next", r"next")
        assert extract_section(self.DOC, rule) == "Other"

    def test_missing_section(self):
        assert extract_section(self.DOC, r"#+\s*budget") is None
        assert extract_section("", r"anything") is None
