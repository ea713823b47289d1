"""Shared fixtures for ScamShield unit tests."""

from datetime import datetime, timedelta, timezone

import pytest

from scamshield.observability import reset_observability_cache
from scamshield.settings import reload_settings


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run each test against default settings with no metrics backend."""
    for name in ("SCAMSHIELD_SETTINGS_FILE", "GOOGLE_CLOUD_PROJECT", "SCAMSHIELD_OBSERVABILITY__STATSD_HOST"):
        monkeypatch.delenv(name, raising=False)
    reset_observability_cache()
    reload_settings()
    yield
    reset_observability_cache()
    reload_settings()


@pytest.fixture
def make_document():
    """Build a raw stored report document with sensible defaults."""
    base_time = datetime(2024, 5, 1, tzinfo=timezone.utc)

    def _make(offset_minutes=0, **overrides):
        document = {
            "title": "Fake bank alert",
            "content": "Your account is locked, verify now",
            "category": "banking",
            "riskLevel": "medium",
            "reportCount": 1,
            "status": "approved",
            "timestamp": base_time + timedelta(minutes=offset_minutes),
        }
        document.update(overrides)
        return document

    return _make
