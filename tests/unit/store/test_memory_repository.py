"""Tests for the in-memory report repository."""

import pytest

from scamshield.errors import ReportNotFoundError
from scamshield.store.memory import InMemoryReportRepository
from scamshield.store.models import ModerationStatus, RiskLevel
from scamshield.store.repository import ReportQuery


@pytest.fixture
def repository(make_document):
    return InMemoryReportRepository(
        {
            "a": make_document(offset_minutes=1, category="job", reportCount=5),
            "b": make_document(offset_minutes=2, category="job", reportCount=9, status="pending"),
            "c": make_document(offset_minutes=3, category="banking", reportCount=2),
            "legacy": {"status": " Approved ", "contactInfo": "4155551234"},
        }
    )


@pytest.mark.anyio
async def test_get_parses_loose_documents(repository):
    report = await repository.get("legacy")

    assert report.title == "Untitled Report"
    assert report.content == "No content provided"
    assert report.category == "Uncategorized"
    assert report.status is ModerationStatus.APPROVED
    assert report.risk_level is RiskLevel.MEDIUM
    assert report.report_count == 1
    assert await repository.get("missing") is None


@pytest.mark.anyio
async def test_query_orders_and_skips_documents_missing_order_field(repository):
    reports = await repository.query(ReportQuery(order_by="reportCount", descending=True, limit=10))
    assert [report.id for report in reports] == ["b", "a", "c"]


@pytest.mark.anyio
async def test_query_filters_and_cursor(repository):
    query = ReportQuery(filters={"status": "approved"}, order_by="timestamp", descending=True, limit=1)
    first = await repository.query(query)
    assert [report.id for report in first] == ["c"]

    query.start_after = "c"
    second = await repository.query(query)
    assert [report.id for report in second] == ["a"]


@pytest.mark.anyio
async def test_find_prefix_is_case_sensitive_and_bounded(repository, make_document):
    await repository.add(make_document(contactInfo="fakebank.com/login"))
    await repository.add(make_document(contactInfo="FakeBank.com/login"))

    matches = await repository.find_prefix("contactInfo", "fakebank.com", limit=10)

    assert [report.contact_info for report in matches] == ["fakebank.com/login"]


@pytest.mark.anyio
async def test_add_update_and_increment(repository):
    report = await repository.add({"title": "New", "content": "x", "category": "other", "status": "pending"})
    assert report.id
    assert len(repository) == 5

    await repository.update(report.id, {"status": "approved"})
    await repository.increment_report_count(report.id, 2)

    stored = await repository.get(report.id)
    assert stored.status is ModerationStatus.APPROVED
    assert stored.report_count == 2


@pytest.mark.anyio
async def test_mutating_missing_report_raises(repository):
    with pytest.raises(ReportNotFoundError):
        await repository.increment_report_count("missing")
    with pytest.raises(ReportNotFoundError):
        await repository.update("missing", {"status": "approved"})
