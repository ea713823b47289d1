"""Tests for parsing raw report documents into ScamReport records."""

from datetime import datetime, timezone

import pytest

from scamshield.store.models import ModerationStatus, RiskLevel, ScamReport, parse_status


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("approved", ModerationStatus.APPROVED),
        (" APPROVED ", ModerationStatus.APPROVED),
        ("pending", ModerationStatus.PENDING),
        ("rejected", ModerationStatus.PENDING),
        (None, ModerationStatus.PENDING),
        (1, ModerationStatus.PENDING),
    ],
)
def test_parse_status(raw, expected):
    assert parse_status(raw) is expected


def test_from_document_applies_defaults_for_missing_and_malformed_fields():
    report = ScamReport.from_document(
        "r1",
        {
            "title": "   ",
            "riskLevel": "extreme",
            "reportCount": True,
            "timestamp": "not a date",
            "contactInfo": 4155551234,
        },
    )

    assert report.title == "Untitled Report"
    assert report.risk_level is RiskLevel.MEDIUM
    assert report.report_count == 1
    assert report.timestamp.tzinfo is not None
    assert report.contact_info == "4155551234"

    for count in (float("inf"), float("-inf"), float("nan")):
        assert ScamReport.from_document("r1", {"reportCount": count}).report_count == 1


def test_from_document_accepts_iso_timestamp_and_none_document():
    report = ScamReport.from_document("r2", {"timestamp": "2024-03-01T10:00:00", "reportCount": 0})
    assert report.timestamp == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert report.report_count == 1

    empty = ScamReport.from_document("r3", None)
    assert empty.status is ModerationStatus.PENDING


def test_to_document_round_trips_stored_field_names():
    report = ScamReport(id="r1", title="T", risk_level=RiskLevel.HIGH, report_count=4)
    document = report.to_document()
    assert document["riskLevel"] == "high"
    assert document["reportCount"] == 4
    assert "contactInfo" not in document
    assert ScamReport.from_document("r1", document) == report
