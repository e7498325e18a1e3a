"""
Tests for the rubric registry — boot-time validation, sealing and lookup.
"""

from __future__ import annotations

import pytest

from docforge.errors import ConfigurationError, UnknownDocumentTypeError
from docforge.registry import DocumentTypePlugin, RubricRegistry, get_registry
from docforge.scoring import Dimension, DimensionScore
from docforge.slop import SlopPolicy


def _noop(text: str) -> DimensionScore:
    return DimensionScore(score=0, max_score=0)


def make_plugin(id: str = "memo", caps=(60, 40), **kwargs) -> DocumentTypePlugin:
    rubric = tuple(
        Dimension(f"dim_{i}", f"Dimension {i}", cap, _noop) for i, cap in enumerate(caps)
    )
    return DocumentTypePlugin(id=id, name=id.title(), rubric=rubric, **kwargs)


# ============================================================
# REGISTRATION
# ============================================================

class TestRegister:

    def test_register_and_lookup(self):
        reg = RubricRegistry(default_id="memo")
        plugin = reg.register(make_plugin())
        assert reg.get_plugin("memo") is plugin
        assert reg.has_plugin("memo")
        assert "memo" in reg
        assert len(reg) == 1

    def test_duplicate_id_rejected(self):
        reg = RubricRegistry()
        reg.register(make_plugin())
        with pytest.raises(ConfigurationError, match="Duplicate"):
            reg.register(make_plugin())

    @pytest.mark.parametrize("bad_id", ["", "Memo", "1memo", "memo_type", "memo type"])
    def test_malformed_id_rejected(self, bad_id):
        with pytest.raises(ConfigurationError, match="Malformed"):
            RubricRegistry().register(make_plugin(id=bad_id))

    def test_caps_must_sum_to_100(self):
        with pytest.raises(ConfigurationError, match="sums to 90"):
            RubricRegistry().register(make_plugin(caps=(50, 40)))

    def test_empty_rubric_rejected(self):
        with pytest.raises(ConfigurationError, match="empty rubric"):
            RubricRegistry().register(make_plugin(caps=()))

    def test_non_positive_cap_rejected(self):
        with pytest.raises(ConfigurationError, match="non-positive"):
            RubricRegistry().register(make_plugin(caps=(100, 0)))

    def test_duplicate_dimension_keys_rejected(self):
        rubric = (Dimension("a", "A", 50, _noop), Dimension("a", "A again", 50, _noop))
        plugin = DocumentTypePlugin(id="memo", name="Memo", rubric=rubric)
        with pytest.raises(ConfigurationError, match="duplicate dimension keys"):
            RubricRegistry().register(plugin)

    def test_failed_registration_leaves_registry_unchanged(self):
        reg = RubricRegistry()
        with pytest.raises(ConfigurationError):
            reg.register(make_plugin(caps=(10,)))
        assert len(reg) == 0


# ============================================================
# SEALING / LOOKUP
# ============================================================

class TestSealAndLookup:

    def test_sealed_registry_rejects_registration(self):
        reg = RubricRegistry(default_id="memo")
        reg.register(make_plugin())
        reg.seal()
        assert reg.sealed
        with pytest.raises(ConfigurationError, match="sealed"):
            reg.register(make_plugin(id="brief"))

    def test_seal_requires_default(self):
        reg = RubricRegistry(default_id="one-pager")
        reg.register(make_plugin())
        with pytest.raises(ConfigurationError, match="Default document type"):
            reg.seal()

    def test_unknown_type(self):
        reg = RubricRegistry(default_id="memo")
        reg.register(make_plugin())
        with pytest.raises(UnknownDocumentTypeError) as exc:
            reg.get_plugin("nope")
        assert exc.value.doc_type == "nope"
        assert exc.value.known == ["memo"]
        assert str(exc.value) == "Unknown document type 'nope' (registered: memo)"

    def test_unknown_type_is_key_error(self):
        with pytest.raises(KeyError):
            RubricRegistry().get_plugin("nope")

    def test_get_all_preserves_order(self):
        reg = RubricRegistry(default_id="memo")
        reg.register(make_plugin("memo"))
        reg.register(make_plugin("brief"))
        assert [p.id for p in reg.get_all()] == ["memo", "brief"]
        assert reg.plugin_ids() == ["memo", "brief"]
        assert reg.get_default().id == "memo"


# ============================================================
# PLUGIN METADATA
# ============================================================

class TestPluginMetadata:

    def test_to_dict(self):
        plugin = make_plugin(
            detectors={"words": lambda text: {"count": len(text.split())}},
            slop_policy=SlopPolicy(scale=1.0, cap=8),
        )
        data = plugin.to_dict()
        assert data["id"] == "memo"
        assert data["max_score"] == 100
        assert [d["key"] for d in data["dimensions"]] == ["dim_0", "dim_1"]
        assert data["detectors"] == ["words"]
        assert data["slop_policy"] == {"scale": 1.0, "cap": 8}

    def test_run_detectors(self):
        plugin = make_plugin(detectors={"words": lambda text: {"count": len(text.split())}})
        assert plugin.run_detectors("one two three") == {"words": {"count": 3}}


# ============================================================
# DEFAULT REGISTRY
# ============================================================

class TestDefaultRegistry:

    def test_builtin_types_registered(self):
        reg = get_registry()
        assert reg.sealed
        assert reg.plugin_ids() == [
            "one-pager", "prd", "pr-faq", "adr", "jd", "acceptance-criteria",
            "business-justification", "power-statement", "strategic-proposal", "generic",
        ]
        assert reg.get_default().id == "one-pager"

    def test_same_instance(self):
        assert get_registry() is get_registry()

    def test_every_rubric_sums_to_100(self):
        for plugin in get_registry().get_all():
            assert plugin.to_dict()["max_score"] == 100, plugin.id
