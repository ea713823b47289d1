"""Sample reports used to seed the in-memory repository in local sandboxes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

_SEED_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def sample_documents() -> Dict[str, Dict[str, Any]]:
    """Return approved demo reports keyed by document id."""

    rows = [
        (
            "sample-job-offer",
            "Suspicious Job Offer",
            "Received an email claiming to offer a remote job with very high pay but asking for payment "
            'upfront for "training materials".',
            "job",
            "high",
            47,
            None,
        ),
        (
            "sample-bank-otp",
            "Bank OTP Request",
            'Got a text message claiming to be from my bank asking for an OTP to "verify my account".',
            "banking",
            "high",
            124,
            "4155550142",
        ),
        (
            "sample-shopping-site",
            "Fake Shopping Website",
            "Found a website selling branded items at suspiciously low prices with no secure payment options.",
            "website",
            "medium",
            32,
            "cheap-brands-outlet.shop",
        ),
        (
            "sample-lottery",
            "Lottery Winner Notification",
            "Received an email saying I won a lottery I never entered, asking for personal details to claim the prize.",
            "lottery",
            "high",
            89,
            None,
        ),
        (
            "sample-betting-app",
            "Unregulated Betting App",
            "Found a betting app promising guaranteed returns but requiring large deposits upfront.",
            "betting",
            "high",
            56,
            "https://win-big-odds.app/download",
        ),
    ]
    documents: Dict[str, Dict[str, Any]] = {}
    for offset, (report_id, title, content, category, risk, count, contact) in enumerate(rows):
        doc: Dict[str, Any] = {
            "title": title,
            "content": content,
            "category": category,
            "riskLevel": risk,
            "reportCount": count,
            "status": "approved",
            "reporterName": "ScamShield Team",
            "timestamp": _SEED_TIME - timedelta(days=offset),
        }
        if contact:
            doc["contactInfo"] = contact
        documents[report_id] = doc
    return documents


__all__ = ["sample_documents"]
