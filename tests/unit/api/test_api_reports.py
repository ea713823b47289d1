"""Unit tests for the reports API router, including token auth."""

import anyio
import pytest
from fastapi.testclient import TestClient

from scamshield.api.app import REQUEST_LOG, app
from scamshield.api.auth import AuthenticationError, resolve_token
from scamshield.api.dependencies import get_report_service
from scamshield.errors import RepositoryError
from scamshield.services.reports import ReportService
from scamshield.settings import get_settings, reload_settings
from scamshield.store.memory import InMemoryReportRepository

client = TestClient(app)

REPORTER_HEADERS = {"X-API-KEY": "dev-reporter-token"}
ADMIN_HEADERS = {"X-API-KEY": "dev-admin-token"}


@pytest.fixture(autouse=True)
def clear_overrides():
    REQUEST_LOG.clear()
    yield
    REQUEST_LOG.clear()
    app.dependency_overrides = {}


@pytest.fixture
def repository(make_document):
    repository = InMemoryReportRepository(
        {
            "approved-1": make_document(offset_minutes=1, category="job"),
            "approved-2": make_document(offset_minutes=2, category="job", riskLevel="high"),
            "pending-1": make_document(offset_minutes=3, status="pending"),
        }
    )
    service = ReportService(repository, settings=get_settings())
    app.dependency_overrides[get_report_service] = lambda: service
    return repository


def test_submit_requires_token(repository):
    payload = {"title": "t", "content": "c", "category": "job"}
    assert client.post("/reports", json=payload).status_code == 401
    assert client.post("/reports", json=payload, headers={"X-API-KEY": "bogus"}).status_code == 403


def test_submit_and_list_my_reports(repository):
    payload = {"title": "Fake recruiter", "content": "Asked for a fee", "category": "job"}

    response = client.post("/reports", json=payload, headers=REPORTER_HEADERS)

    assert response.status_code == 201
    created = response.json()
    assert created["status"] == "pending"
    assert created["reporter_id"] == "user-dev-1"

    mine = client.get("/reports/mine", headers=REPORTER_HEADERS)
    assert [report["id"] for report in mine.json()] == [created["id"]]


def test_submit_invalid_category_returns_422(repository):
    payload = {"title": "t", "content": "c", "category": "astrology"}
    response = client.post("/reports", json=payload, headers=REPORTER_HEADERS)
    assert response.status_code == 422


def test_explore_lists_only_approved_reports(repository):
    response = client.get("/reports", params={"category": "job"})

    body = response.json()
    assert response.status_code == 200
    assert [report["id"] for report in body["reports"]] == ["approved-2", "approved-1"]
    assert body["has_more"] is False


def test_explore_search_param(repository):
    anyio.run(repository.update, "approved-2", {"title": "Fake RECRUITER on WhatsApp"})

    response = client.get("/reports", params={"search": "recruiter"})
    assert [report["id"] for report in response.json()["reports"]] == ["approved-2"]

    response = client.get("/reports", params={"search": "lottery"})
    assert response.json()["reports"] == []


def test_get_report_and_not_found(repository):
    detail = client.get("/reports/approved-1")
    assert detail.status_code == 200
    assert [report["id"] for report in detail.json()["similar"]] == ["approved-2"]

    assert client.get("/reports/missing").status_code == 404


def test_confirm_report(repository):
    response = client.post("/reports/approved-1/confirm", headers=REPORTER_HEADERS)
    assert response.status_code == 200
    assert response.json()["report_count"] == 2


def test_moderation_requires_admin(repository):
    payload = {"status": "approved", "risk_level": "high"}

    assert client.post("/reports/pending-1/moderate", json=payload, headers=REPORTER_HEADERS).status_code == 403

    response = client.post("/reports/pending-1/moderate", json=payload, headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    assert response.json()["risk_level"] == "high"


def test_recent_reports(repository):
    response = client.get("/reports/recent", params={"limit": 2})
    assert [report["id"] for report in response.json()] == ["pending-1", "approved-2"]


def test_repository_failure_returns_503():
    class _Broken(InMemoryReportRepository):
        async def query(self, report_query):
            raise RepositoryError("firestore down")

    service = ReportService(_Broken(), settings=get_settings())
    app.dependency_overrides[get_report_service] = lambda: service

    response = client.get("/reports/recent")
    assert response.status_code == 503


def test_configured_service_key_is_admin(repository, monkeypatch):
    monkeypatch.setenv("SCAMSHIELD_API__KEY", "s3cret-key")
    reload_settings()

    payload = {"status": "approved"}
    response = client.post("/reports/pending-1/moderate", json=payload, headers={"X-API-KEY": "s3cret-key"})
    assert response.status_code == 200


def test_resolve_token_strategy_chain():
    calls = []

    def not_mine(token):
        calls.append("not_mine")
        return None

    def claims(token):
        calls.append("claims")
        return {"user_id": "u", "role": "reporter"}

    def unreachable(token):
        calls.append("unreachable")
        return None

    assert resolve_token("abc", [not_mine, claims, unreachable])["user_id"] == "u"
    assert calls == ["not_mine", "claims"]


def test_resolve_token_aborts_on_hard_failure():
    def broken(token):
        raise AuthenticationError("Token revoked")

    def fallback(token):
        return {"user_id": "u"}

    with pytest.raises(AuthenticationError):
        resolve_token("abc", [broken, fallback])
    with pytest.raises(AuthenticationError):
        resolve_token("has space", [fallback])
