"""Unit tests for the analysis API router and app-level error handling.

These tests use FastAPI's TestClient with an in-memory repository wired in
through dependency overrides.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from scamshield.analysis.engine import ScamAnalyzer
from scamshield.api.app import REQUEST_LOG, app
from scamshield.api.dependencies import get_analyzer
from scamshield.settings import get_settings, reload_settings
from scamshield.store.memory import InMemoryReportRepository

client = TestClient(app)


@pytest.fixture(autouse=True)
def clear_overrides():
    REQUEST_LOG.clear()
    yield
    REQUEST_LOG.clear()
    app.dependency_overrides = {}


def _use_repository(documents):
    repository = InMemoryReportRepository(documents)
    analyzer = ScamAnalyzer(repository, settings=get_settings(), observability=MagicMock())
    app.dependency_overrides[get_analyzer] = lambda: analyzer
    return repository


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_analyze_phone_with_verified_report():
    _use_repository(
        {
            "r1": {
                "title": "Bank OTP scam",
                "contactInfo": "4155551234",
                "riskLevel": "high",
                "status": "approved",
                "timestamp": datetime(2024, 1, 1, tzinfo=timezone.utc),
            }
        }
    )

    response = client.post("/analysis", json={"content": "+1 (415) 555-1234"})

    assert response.status_code == 200
    body = response.json()
    assert body["classification"] == "phone_number"
    assert body["outcome"] == "approved_found"
    assert body["risk_level"] == "high"
    assert body["score"] == 40
    assert body["approved_reports"][0]["title"] == "Bank OTP scam"


def test_analyze_free_text_reports_keywords():
    _use_repository({})

    response = client.post("/analysis", json={"content": "Urgent: verify your bitcoin wallet"})

    body = response.json()
    assert response.status_code == 200
    assert body["outcome"] == "no_data"
    assert body["risk_level"] == "low"
    assert "bitcoin" in body["matched_keywords"]
    assert body["keyword_score"] > 0


def test_empty_content_returns_422():
    _use_repository({})
    response = client.post("/analysis", json={"content": "   "})
    assert response.status_code == 422
    assert "Please enter" in response.json()["detail"]


def test_phone_validation_failure_returns_422():
    _use_repository({})
    response = client.post("/analysis", json={"content": "12345", "validate_phone": True})
    assert response.status_code == 422


def test_rate_limit_returns_429(monkeypatch):
    monkeypatch.setenv("SCAMSHIELD_API__MAX_REQUESTS_PER_MINUTE", "2")
    reload_settings()

    assert client.get("/health").status_code == 200
    assert client.get("/health").status_code == 200
    response = client.get("/health")
    assert response.status_code == 429
    assert response.json()["detail"].startswith("Rate limit exceeded")
