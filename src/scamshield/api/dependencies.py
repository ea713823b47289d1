"""Dependency providers shared by the API routers."""

from __future__ import annotations

from functools import lru_cache

from scamshield.analysis.engine import ScamAnalyzer
from scamshield.services.factories import build_analyzer, build_report_repository, build_report_service
from scamshield.services.reports import ReportService
from scamshield.store.repository import ReportRepository


@lru_cache(maxsize=1)
def get_report_repository() -> ReportRepository:
    """Return the process-wide report repository.

    Cached so the in-memory backend keeps its documents between requests.
    """

    return build_report_repository()


def get_analyzer() -> ScamAnalyzer:
    """Dependency provider for the analysis engine."""

    return build_analyzer(get_report_repository())


def get_report_service() -> ReportService:
    """Dependency provider for report operations."""

    return build_report_service(get_report_repository())


__all__ = ["get_analyzer", "get_report_repository", "get_report_service"]
