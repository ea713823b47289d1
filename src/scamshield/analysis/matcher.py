"""Lookup of previously submitted reports that match an analysed input."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from pydantic import BaseModel, Field

from scamshield.analysis.normalizer import InputClassification, url_hostname
from scamshield.settings import Settings, get_settings
from scamshield.store.models import ScamReport
from scamshield.store.repository import ReportRepository

LOGGER = logging.getLogger(__name__)

CONTACT_FIELD = "contactInfo"
CONTENT_FIELD = "content"


class ReportMatches(BaseModel):
    """Matched reports partitioned by moderation status."""

    approved: List[ScamReport] = Field(default_factory=list)
    pending: List[ScamReport] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.approved) + len(self.pending)

    @classmethod
    def partition(cls, reports: Iterable[ScamReport]) -> "ReportMatches":
        approved: List[ScamReport] = []
        pending: List[ScamReport] = []
        for report in reports:
            (approved if report.is_approved else pending).append(report)
        return cls(approved=approved, pending=pending)


class ReportMatcher:
    """Query the report repository for reports related to an input.

    Phone numbers and URLs are matched by equality on ``contactInfo`` against
    every canonical form; free text is matched by prefix lookups on
    ``content`` for each matched keyword. Repository failures never escape:
    they are logged and reported as "no matches".
    """

    def __init__(self, repository: ReportRepository, *, settings: Settings | None = None) -> None:
        self.repository = repository
        self.settings = settings or get_settings()

    async def find_reports(
        self,
        terms: Sequence[str],
        classification: InputClassification,
    ) -> ReportMatches:
        """Return approved and pending reports matching ``terms``.

        Args:
            terms: Canonical forms (phone/URL) or matched keywords (free text).
            classification: Classification of the original input.

        Returns:
            :class:`ReportMatches`; empty when nothing matched or the
            repository failed.
        """

        try:
            if classification is InputClassification.FREE_TEXT:
                found = await self._match_keywords(terms)
            else:
                found = await self._match_contact(terms, classification)
        except Exception:
            LOGGER.exception("Report lookup failed for %s input; treating as no matches", classification.value)
            return ReportMatches()
        return ReportMatches.partition(found.values())

    async def _match_contact(
        self,
        forms: Sequence[str],
        classification: InputClassification,
    ) -> Dict[str, ScamReport]:
        cap = self.settings.analysis.contact_result_cap
        found: Dict[str, ScamReport] = {}
        for form in forms:
            if len(found) >= cap:
                break
            reports = await self.repository.find_equal(CONTACT_FIELD, form, limit=cap - len(found))
            _merge(found, reports, cap)

        if not found and classification is InputClassification.URL and forms:
            hostname = url_hostname(forms[0])
            if hostname:
                LOGGER.debug("No exact contact match; falling back to hostname prefix %s", hostname)
                reports = await self.repository.find_prefix(CONTACT_FIELD, hostname, limit=cap)
                _merge(found, reports, cap)
        return found

    async def _match_keywords(self, keywords: Sequence[str]) -> Dict[str, ScamReport]:
        limit = self.settings.analysis.keyword_result_limit
        selected: List[str] = []
        for keyword in keywords:
            if keyword not in selected:
                selected.append(keyword)
        selected = selected[: self.settings.analysis.max_keyword_lookups]

        found: Dict[str, ScamReport] = {}
        for keyword in selected:
            reports = await self.repository.find_prefix(CONTENT_FIELD, keyword, limit=limit)
            _merge(found, reports)
        return found


def _merge(found: Dict[str, ScamReport], reports: Iterable[ScamReport], cap: int | None = None) -> None:
    for report in reports:
        if cap is not None and len(found) >= cap:
            return
        found.setdefault(report.id, report)


__all__ = ["ReportMatcher", "ReportMatches"]
