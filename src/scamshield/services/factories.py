"""Factory helpers that instantiate core services based on configuration.

These helpers centralize the logic for honoring the environment-specific
settings declared in :mod:`scamshield.settings` and return the repository
backend compatible with the current environment profile.
"""

from __future__ import annotations

import logging

from scamshield.analysis.engine import ScamAnalyzer
from scamshield.services.reports import ReportService
from scamshield.settings import Settings, get_settings
from scamshield.store.memory import InMemoryReportRepository
from scamshield.store.repository import ReportRepository
from scamshield.store.samples import sample_documents

LOGGER = logging.getLogger(__name__)


def build_report_repository(settings: Settings | None = None) -> ReportRepository:
    """Return the report repository matching the configured backend.

    Args:
        settings: Optional settings override; defaults to :func:`get_settings`.

    Returns:
        Instantiated :class:`ReportRepository`.

    Raises:
        NotImplementedError: If the configured backend is not supported.
    """

    resolved = settings or get_settings()
    backend = resolved.storage.repository_backend
    if backend == "memory":
        documents = sample_documents() if resolved.storage.seed_sample_reports else None
        LOGGER.info("Using in-memory report repository (seeded=%s)", bool(documents))
        return InMemoryReportRepository(documents)

    if backend == "firestore":
        from scamshield.store.firestore import FirestoreReportRepository

        return FirestoreReportRepository(
            project=resolved.storage.firestore_project,
            collection=resolved.storage.firestore_collection,
        )

    raise NotImplementedError(f"Unsupported report repository backend '{backend}'")


def build_analyzer(
    repository: ReportRepository | None = None,
    *,
    settings: Settings | None = None,
) -> ScamAnalyzer:
    """Return a :class:`ScamAnalyzer` wired to the configured repository."""

    resolved = settings or get_settings()
    return ScamAnalyzer(repository or build_report_repository(resolved), settings=resolved)


def build_report_service(
    repository: ReportRepository | None = None,
    *,
    settings: Settings | None = None,
) -> ReportService:
    """Return a :class:`ReportService` wired to the configured repository."""

    resolved = settings or get_settings()
    return ReportService(repository or build_report_repository(resolved), settings=resolved)


__all__ = ["build_analyzer", "build_report_repository", "build_report_service"]
