"""
API Integration Tests — Endpoint Verification

Tests every public API endpoint using FastAPI's TestClient.

These tests catch:
  - Schema mismatches (response model vs actual data)
  - Route registration issues
  - Middleware bugs (headers, body limit)
  - Error mapping (unknown document type -> 404, bad input -> 422)
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


AC_DOC = """\
## Summary
Users can reset a forgotten password.

## Acceptance Criteria
- [ ] Display the reset link within 200 ms
- [ ] Send the reset email within 30 seconds
- [ ] Show an error message after 5 attempts

## Out of Scope
- SMS reset
"""


# --- Fixtures ---

@pytest.fixture(scope="module")
def client():
    """Create a test client for the Docforge API."""
    from api.main import app
    with TestClient(app) as c:
        yield c


# ============================================================
# HEALTH & META
# ============================================================

class TestHealth:
    """Verify /health returns correct structure."""

    def test_health_returns_200(self, client):
        r = client.get("/health")
        assert r.status_code == 200

    def test_health_fields(self, client):
        data = client.get("/health").json()
        assert data["status"] == "operational"
        assert data["engine_version"]
        assert data["version"]
        assert data["plugin_count"] == 10
        assert data["default_doc_type"] == "one-pager"

    def test_root_returns_200(self, client):
        r = client.get("/")
        assert r.status_code == 200

    def test_version_headers(self, client):
        r = client.get("/health")
        assert "X-Docforge-Version" in r.headers
        assert "X-Engine-Version" in r.headers
        assert r.headers["X-Content-Type-Options"] == "nosniff"


# ============================================================
# VALIDATE
# ============================================================

class TestValidate:
    """Verify /validate scores documents and maps errors."""

    def test_scores_document(self, client):
        r = client.post("/validate", json={"text": AC_DOC, "doc_type": "acceptance-criteria"})
        assert r.status_code == 200
        data = r.json()
        assert data["doc_type"] == "acceptance-criteria"
        assert 0 <= data["total_score"] <= 100
        assert data["max_score"] == 100
        assert set(data["dimensions"]) == {"structure", "clarity", "testability", "completeness"}
        assert data["grade"] in ("A", "B", "C", "D", "F")
        assert "deduction" in data["slop_detection"]

    def test_default_doc_type(self, client):
        data = client.post("/validate", json={"text": "## Problem\nRefunds take 3 days."}).json()
        assert data["doc_type"] == "one-pager"

    def test_empty_text_scores_zero(self, client):
        r = client.post("/validate", json={"text": ""})
        assert r.status_code == 200
        data = r.json()
        assert data["total_score"] == 0
        assert data["issues"] == ["No content to validate"]

    def test_prompt_template(self, client):
        text = ("You are a consultant. Your task is to draft a proposal.\n"
                "{{ORGANIZATION_NAME}}\n## CRITICAL INSTRUCTIONS")
        data = client.post("/validate", json={"text": text}).json()
        assert data["total_score"] == 0
        assert data["is_prompt_detected"] is True

    def test_unknown_doc_type_404(self, client):
        r = client.post("/validate", json={"text": "Hello", "doc_type": "memo"})
        assert r.status_code == 404
        data = r.json()
        assert "memo" in data["detail"]
        assert "prd" in data["known"]

    def test_malformed_doc_type_422(self, client):
        r = client.post("/validate", json={"text": "Hello", "doc_type": "Not A Type"})
        assert r.status_code == 422

    def test_missing_text_422(self, client):
        r = client.post("/validate", json={"doc_type": "prd"})
        assert r.status_code == 422

    def test_body_too_large_413(self, client):
        r = client.post("/validate", json={"text": "a" * 1_100_000})
        assert r.status_code == 413


# ============================================================
# BATCH
# ============================================================

class TestValidateBatch:

    def test_batch(self, client):
        r = client.post("/validate/batch", json={"items": [
            {"text": AC_DOC, "doc_type": "acceptance-criteria"},
            {"text": "## Problem\nRefunds take 3 days."},
        ]})
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 2
        assert data["scored"] == 2
        assert [res["doc_type"] for res in data["results"]] == ["acceptance-criteria", "one-pager"]

    def test_failed_item_is_zero_shaped(self, client):
        r = client.post("/validate/batch", json={"items": [
            {"text": AC_DOC, "doc_type": "acceptance-criteria"},
            {"text": "Hello", "doc_type": "memo"},
        ]})
        assert r.status_code == 200
        data = r.json()
        assert data["scored"] == 1
        failed = data["results"][1]
        assert failed["total_score"] == 0
        assert "Unknown document type 'memo'" in failed["error"]
        assert data["results"][0]["error"] is None

    def test_empty_batch_422(self, client):
        r = client.post("/validate/batch", json={"items": []})
        assert r.status_code == 422

    def test_oversized_batch_422(self, client):
        r = client.post("/validate/batch", json={"items": [{"text": "x"}] * 51})
        assert r.status_code == 422


# ============================================================
# SLOP / DETECT
# ============================================================

class TestSlop:

    def test_slop_analysis(self, client):
        r = client.post("/slop", json={
            "text": "Furthermore, this robust and seamless platform is incredibly powerful.",
        })
        assert r.status_code == 200
        data = r.json()
        assert data["max_score"] == 80
        assert data["score"] > 0
        assert set(data["breakdown"]) == {"lexical", "structural", "stylometric"}

    def test_clean_text(self, client):
        data = client.post("/slop", json={"text": "Refunds take 3 days."}).json()
        assert data["severity"] == "clean"
        assert data["penalty"] == 0


class TestDetect:

    def test_detect(self, client):
        r = client.post("/detect", json={"text": AC_DOC, "doc_type": "acceptance-criteria"})
        assert r.status_code == 200
        data = r.json()
        assert data["doc_type"] == "acceptance-criteria"
        assert data["detectors"]["structure"]["counts"]["checkbox"] == 3

    def test_detect_default_type(self, client):
        data = client.post("/detect", json={"text": "## Problem\nRefunds take 3 days."}).json()
        assert data["doc_type"] == "one-pager"
        assert "circular_logic" in data["detectors"]

    def test_detect_unknown_type(self, client):
        r = client.post("/detect", json={"text": "x", "doc_type": "memo"})
        assert r.status_code == 404


# ============================================================
# PLUGINS
# ============================================================

class TestPlugins:

    def test_list(self, client):
        data = client.get("/plugins").json()
        assert data["default"] == "one-pager"
        assert data["total"] == 10
        ids = [p["id"] for p in data["plugins"]]
        assert "pr-faq" in ids and "generic" in ids

    def test_single(self, client):
        r = client.get("/plugins/prd")
        assert r.status_code == 200
        data = r.json()
        assert data["id"] == "prd"
        assert data["max_score"] == 100
        assert sum(d["max_score"] for d in data["dimensions"]) == 100

    def test_unknown(self, client):
        r = client.get("/plugins/nope")
        assert r.status_code == 404
