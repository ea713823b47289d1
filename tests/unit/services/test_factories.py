"""Tests for settings-driven service factories."""

import pytest

from scamshield.analysis.engine import ScamAnalyzer
from scamshield.services.factories import build_analyzer, build_report_repository, build_report_service
from scamshield.services.reports import ReportService
from scamshield.settings import get_settings
from scamshield.store.memory import InMemoryReportRepository


def _settings_with_storage(**updates):
    settings = get_settings()
    return settings.model_copy(update={"storage": settings.storage.model_copy(update=updates)})


def test_memory_backend_is_empty_by_default():
    repository = build_report_repository(get_settings())
    assert isinstance(repository, InMemoryReportRepository)
    assert len(repository) == 0


@pytest.mark.anyio
async def test_memory_backend_can_be_seeded():
    repository = build_report_repository(_settings_with_storage(seed_sample_reports=True))
    assert len(repository) > 0

    matches = await repository.find_equal("contactInfo", "4155550142", limit=10)
    assert matches and matches[0].is_approved


def test_firestore_backend_requires_project():
    with pytest.raises(ValueError):
        build_report_repository(_settings_with_storage(repository_backend="firestore", firestore_project=None))


def test_unknown_backend_is_rejected():
    with pytest.raises(NotImplementedError):
        build_report_repository(_settings_with_storage(repository_backend="sqlite"))


def test_services_share_supplied_repository():
    repository = InMemoryReportRepository()
    analyzer = build_analyzer(repository)
    service = build_report_service(repository)

    assert isinstance(analyzer, ScamAnalyzer)
    assert isinstance(service, ReportService)
    assert analyzer.matcher.repository is repository
    assert service.repository is repository
