"""
Tests for the aggregator — the full validate() pipeline.

Covers the zero-shaped results (blank input, prompt templates), bounds,
truncation, exclusion zones, adjustments, the slop deduction and score
caps, using small purpose-built registries where exact arithmetic matters.
"""

from __future__ import annotations

from dataclasses import replace

import pytest

import docforge.validator as validator_module
from docforge.config import settings
from docforge.errors import UnknownDocumentTypeError
from docforge.plugins.pr_faq import internal_faq_cap
from docforge.prompt_guard import PROMPT_SIGNALS, check_prompt
from docforge.registry import Adjustment, DocumentTypePlugin, RubricRegistry, ScoreCap, get_registry
from docforge.scoring import Dimension, DimensionScore
from docforge.slop import SlopPolicy, analyze_slop
from docforge.validator import NO_CONTENT, ValidationResult, detect, validate


PROMPT_TEXT = (
    "You are a consultant. Your task is to draft a proposal.\n"
    "{{ORGANIZATION_NAME}}\n"
    "## CRITICAL INSTRUCTIONS"
)

SLOPPY = (
    "Furthermore, this robust, seamless and innovative platform is incredibly powerful. "
    "Moreover, it's important to note that it will truly empower teams."
)

TEMPLATED_PARAGRAPH = (
    "Furthermore, our robust platform delivers seamless value to every customer. "
    "Moreover, this innovative approach truly empowers teams across the organization."
)

AC_DOC = """\
## Summary
Users can reset a forgotten password.

## Acceptance Criteria
- [ ] Display the reset link within 200 ms
- [ ] Send the reset email within 30 seconds
- [ ] Validate the token for 24 hours
- [ ] Show an error message after 5 attempts
- [ ] Redirect to the login page within 2 seconds

## Out of Scope
- SMS reset
"""


def _full_marks(text: str) -> DimensionScore:
    return DimensionScore(score=100, max_score=100, strengths=["Everything present"])


def maxed_registry(**kwargs) -> RubricRegistry:
    """Registry holding one plugin whose single dimension always scores 100."""
    kwargs.setdefault("slop_policy", SlopPolicy(scale=0.0))
    plugin = DocumentTypePlugin(
        id="maxed",
        name="Maxed",
        rubric=(Dimension("all", "All", 100, _full_marks),),
        **kwargs,
    )
    reg = RubricRegistry(default_id="maxed")
    reg.register(plugin)
    reg.seal()
    return reg


# ============================================================
# INPUT GUARD
# ============================================================

class TestInputGuard:
    """Blank or non-string input yields a zero-shaped result, never an error."""

    @pytest.mark.parametrize("text", ["", "   \n\t ", None, 123, ["list"]])
    def test_zero_shape(self, text):
        result = validate(text)
        assert result.total_score == 0
        assert result.issues == [NO_CONTENT]
        assert result.doc_type == get_registry().get_default().id
        assert result.is_prompt_detected is False

    def test_zero_shape_keeps_every_dimension(self):
        result = validate("", "prd")
        plugin = get_registry().get_plugin("prd")
        assert list(result.dimensions) == [d.key for d in plugin.rubric]
        assert all(d.score == 0 for d in result.dimensions.values())
        assert result.slop_detection["severity"] == "clean"

    def test_only_mandated_text(self):
        result = validate("[COMPANY_PREAMBLE]We are Acme.[/COMPANY_PREAMBLE]", "jd")
        assert result.total_score == 0
        assert result.issues == [NO_CONTENT]

    def test_unknown_doc_type_raises(self):
        with pytest.raises(UnknownDocumentTypeError) as exc:
            validate("Some text", "memo")
        assert "one-pager" in exc.value.known


# ============================================================
# PROMPT GUARD
# ============================================================

class TestPromptGuard:

    def test_prompt_template_zeroed(self):
        result = validate(PROMPT_TEXT)
        assert result.total_score == 0
        assert result.is_prompt_detected is True
        assert "unfilled prompt template" in result.issues[0]
        assert all(d.score == 0 for d in result.dimensions.values())

    def test_signals(self):
        check = check_prompt(PROMPT_TEXT)
        assert check.signals == ["role_assignment", "template_placeholder", "instruction_header"]
        assert check.is_prompt(settings.PROMPT_SIGNAL_THRESHOLD)
        assert "3 prompt signals" in check.diagnostic()

    def test_single_signal_is_not_a_prompt(self):
        check = check_prompt("Your role is to own the rollout. Ship it by March.")
        assert check.signal_count == 1
        assert not check.is_prompt(3)

    def test_legitimate_document_scored(self):
        result = validate("Your role is to own the rollout.\n\n## Problem\nRefunds take 3 days.")
        assert result.is_prompt_detected is False

    def test_signals_inside_preamble_zone_ignored(self):
        jd = (
            "## About the Role\nJoin our payments team to build settlement services.\n\n"
            "## Responsibilities\n- Design APIs used by 40 merchants\n- Review code\n\n"
            "## Qualifications\n- 3+ years of Python\n\n"
            "## Compensation\n$150,000 - $180,000 base salary."
        )
        text = f"[COMPANY_PREAMBLE]{PROMPT_TEXT}[/COMPANY_PREAMBLE]\n\n{jd}"
        assert check_prompt(text).is_prompt(settings.PROMPT_SIGNAL_THRESHOLD)

        result = validate(text, "jd")
        assert result.is_prompt_detected is False
        assert result.total_score > 0
        assert result.total_score == validate(jd, "jd").total_score

    def test_four_signal_categories(self):
        assert [r.name for r in PROMPT_SIGNALS.rules] == [
            "role_assignment", "template_placeholder", "instruction_header", "output_rules",
        ]


# ============================================================
# AGGREGATION
# ============================================================

class TestAggregation:

    def test_structure_and_clarity_at_max(self):
        result = validate(AC_DOC, "acceptance-criteria")
        assert result.dimensions["structure"].score == 25
        assert result.dimensions["clarity"].score == 30

    def test_total_is_bounded(self):
        for plugin in get_registry().get_all():
            for text in (AC_DOC, SLOPPY, PROMPT_TEXT.replace("{{ORGANIZATION_NAME}}", "Acme"), "x " * 3000):
                result = validate(text, plugin.id)
                assert 0 <= result.total_score <= 100, plugin.id
                for key, dim in result.dimensions.items():
                    assert 0 <= dim.score <= dim.max_score, (plugin.id, key)

    def test_idempotent(self):
        assert validate(AC_DOC, "acceptance-criteria").to_dict() == \
            validate(AC_DOC, "acceptance-criteria").to_dict()

    def test_feedback_deduplicated(self):
        result = validate(SLOPPY, "generic")
        assert len(result.issues) == len(set(result.issues))
        assert len(result.strengths) == len(set(result.strengths))

    def test_dimension_sum_without_rules(self):
        result = validate("Plain text.", registry=maxed_registry())
        assert result.total_score == 100
        assert result.strengths == ["Everything present"]
        assert result.dimensions["all"].name == "All"

    def test_adjustment_applied(self):
        reg = maxed_registry(adjustments=(lambda text: Adjustment(-10, issues=("Too long",)),))
        result = validate("Plain text.", registry=reg)
        assert result.total_score == 90
        assert "Too long" in result.issues

    def test_total_clamped_to_100(self):
        reg = maxed_registry(adjustments=(lambda text: Adjustment(20, strengths=("Bonus",)),))
        assert validate("Plain text.", registry=reg).total_score == 100

    def test_result_to_dict(self):
        data = validate(AC_DOC, "acceptance-criteria").to_dict()
        assert set(data) == {
            "doc_type", "total_score", "max_score", "grade", "label", "color", "dimensions",
            "slop_detection", "issues", "strengths", "is_prompt_detected", "truncated",
        }
        assert data["max_score"] == 100
        assert set(data["dimensions"]["structure"]) == {"name", "score", "max_score", "issues", "strengths"}


# ============================================================
# SLOP DEDUCTION
# ============================================================

class TestSlopDeduction:

    def test_deduction_scaled_by_policy(self):
        result = validate(SLOPPY, registry=maxed_registry(slop_policy=SlopPolicy(scale=1.0, cap=8)))
        assert result.slop_detection["penalty"] == 8
        assert result.slop_detection["deduction"] == 8
        assert result.total_score == 92
        assert result.issues[0].startswith("Severe AI slop detected")

    def test_default_policy(self):
        result = validate(SLOPPY, registry=maxed_registry(slop_policy=SlopPolicy()))
        assert result.slop_detection["deduction"] == 4
        assert result.total_score == 96

    def test_disabled_policy(self):
        result = validate(SLOPPY, registry=maxed_registry())
        assert result.total_score == 100
        assert result.slop_detection["deduction"] == 0
        assert result.issues == []

    def test_templated_repetition(self):
        text = "\n\n".join([TEMPLATED_PARAGRAPH] * 5)
        report = analyze_slop(text)
        assert report.structural_score == 25
        assert report.severity in ("heavy", "severe")
        result = validate(text)
        assert result.slop_detection["severity"] in ("heavy", "severe")


# ============================================================
# OVERRIDES
# ============================================================

class TestOverrides:

    def test_missing_internal_faq_caps_total(self):
        reg = maxed_registry(overrides=(internal_faq_cap,))
        result = validate("# Acme launches Ledger\n\nToday Acme launches Ledger.", registry=reg)
        assert result.total_score == 50
        assert any(i.startswith("Score capped at 50") for i in result.issues)

    def test_cap_not_applied_below_threshold(self):
        reg = maxed_registry(
            adjustments=(lambda text: Adjustment(-70),),
            overrides=(lambda text: ScoreCap(50, "Capped"),),
        )
        result = validate("Plain text.", registry=reg)
        assert result.total_score == 30
        assert "Capped" not in result.issues

    def test_pr_faq_without_internal_faq(self):
        result = validate("# Acme launches Ledger\n\n## FAQ\nQ: What is it?\nA: A ledger.", "pr-faq")
        assert result.total_score <= 50


# ============================================================
# TRUNCATION / EXCLUSION ZONES
# ============================================================

class TestTruncation:

    def test_long_input_truncated(self, monkeypatch):
        monkeypatch.setattr(validator_module, "settings", replace(settings, MAX_INPUT_CHARS=100))
        result = validate("word " * 100, registry=maxed_registry())
        assert result.truncated is True
        assert any("exceeds 100 characters" in i for i in result.issues)

    def test_short_input_not_truncated(self):
        assert validate("word " * 10, registry=maxed_registry()).truncated is False


class TestExclusionZones:

    def test_mandated_terms_not_penalized(self):
        text = (
            "[COMPANY_PREAMBLE]Acme hires rockstar engineers.[/COMPANY_PREAMBLE]\n"
            "We need a rockstar backend engineer."
        )
        result = validate(text, "jd")
        assert result.dimensions["inclusivity"].score == 25

    def test_same_term_outside_zone_penalized(self):
        result = validate("We need a rockstar backend engineer.", "jd")
        assert result.dimensions["inclusivity"].score == 20


# ============================================================
# DETECT
# ============================================================

class TestDetect:

    def test_detector_outputs(self):
        out = detect(AC_DOC, "acceptance-criteria")
        assert set(out) == set(get_registry().get_plugin("acceptance-criteria").detectors)
        assert out["structure"]["counts"]["checkbox"] == 5

    def test_empty_text(self):
        assert detect("", "prd") == {}

    def test_unknown_type(self):
        with pytest.raises(UnknownDocumentTypeError):
            detect("text", "memo")


class TestValidationResult:

    def test_display_properties(self):
        result = ValidationResult(doc_type="x", total_score=72, dimensions={}, slop_detection={})
        assert (result.grade, result.label, result.color) == ("C", "Ready", "green")


# ============================================================
# MONOTONICITY
# ============================================================

METRIC_SENTENCES = (
    "Reduce refund time by 40%.",
    "Save 12 hours per week for the support team.",
    "Reach 500 customers in the first month.",
    "Cut failed transactions to 2% of volume.",
    "Answer each request within 3 days.",
)

ONE_PAGER_BASE = (
    "## Problem\nRefund requests take too long and customers complain.\n\n"
    "## Solution\nRoute refunds to a dedicated queue.\n\n"
    "## Success Metrics\nWe will track a goal.\n"
)


class TestMonotonicity:
    """Adding quantified metrics never lowers a dimension."""

    def _dimensions(self, k: int) -> dict[str, int]:
        text = ONE_PAGER_BASE + "\n".join(METRIC_SENTENCES[:k])
        return {key: d.score for key, d in validate(text, "one-pager").dimensions.items()}

    def test_metric_insertions_never_lower_a_dimension(self):
        previous = self._dimensions(0)
        for k in range(1, len(METRIC_SENTENCES) + 1):
            current = self._dimensions(k)
            for key, score in current.items():
                assert score >= previous[key], f"{key} fell after {k} metric(s)"
            previous = current

    def test_first_metric_lifts_scope(self):
        assert self._dimensions(1)["scope"] > self._dimensions(0)["scope"]
