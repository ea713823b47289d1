"""Report submission, browsing, confirmation, and moderation."""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from scamshield.errors import ReportNotFoundError, ValidationError
from scamshield.settings import Settings, get_settings
from scamshield.store.models import (
    DEFAULT_REPORTER_NAME,
    ModerationStatus,
    ReportCategory,
    RiskLevel,
    ScamReport,
)
from scamshield.store.repository import ReportQuery, ReportRepository

LOGGER = logging.getLogger(__name__)


class ReportSubmission(BaseModel):
    """Fields a user fills in when reporting a scam."""

    title: str = ""
    content: str = ""
    category: str = ""
    contact_info: Optional[str] = None
    screenshot_url: Optional[str] = None


class Reporter(BaseModel):
    """Authenticated user submitting or confirming a report."""

    user_id: str
    display_name: Optional[str] = None


class ExploreSort(str, Enum):
    LATEST = "latest"
    REPORTED = "reported"


class ExploreFilters(BaseModel):
    """Filters for browsing approved reports."""

    category: Optional[str] = None
    risk_level: Optional[RiskLevel] = None
    search: Optional[str] = None
    sort: ExploreSort = ExploreSort.LATEST
    start_after: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1, le=100)


class ExplorePage(BaseModel):
    reports: List[ScamReport] = Field(default_factory=list)
    next_cursor: Optional[str] = None
    has_more: bool = False


class ReportDetail(BaseModel):
    report: ScamReport
    similar: List[ScamReport] = Field(default_factory=list)


class ReportService:
    """Application operations over the report repository.

    Unlike the analysis engine, repository failures here propagate as
    :class:`~scamshield.errors.RepositoryError` so the caller can tell the
    user the action did not happen.
    """

    def __init__(self, repository: ReportRepository, *, settings: Settings | None = None) -> None:
        self.repository = repository
        self.settings = settings or get_settings()

    async def submit_report(self, submission: ReportSubmission, reporter: Reporter) -> ScamReport:
        """Validate and store a new pending report.

        Raises:
            ValidationError: If a required field is blank or the category is unknown.
        """

        title = submission.title.strip()
        content = submission.content.strip()
        category = submission.category.strip().lower()
        if not title or not content or not category:
            raise ValidationError("Please fill in all required fields: title, content, and category.")
        if category not in {item.value for item in ReportCategory}:
            raise ValidationError(f"Unknown report category: {submission.category!r}")

        document = {
            "title": title,
            "content": content,
            "category": category,
            "contactInfo": (submission.contact_info or "").strip(),
            "reporterId": reporter.user_id,
            "reporterName": reporter.display_name or DEFAULT_REPORTER_NAME,
            "reportCount": 1,
            "riskLevel": RiskLevel.MEDIUM.value,
            "status": ModerationStatus.PENDING.value,
        }
        if submission.screenshot_url:
            document["screenshotUrl"] = submission.screenshot_url
        report = await self.repository.add(document)
        LOGGER.info("Stored report %s (category=%s) from %s", report.id, category, reporter.user_id)
        return report

    async def get_report(self, report_id: str) -> ReportDetail:
        """Return a report and a few others from the same category."""

        report = await self.repository.get(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        limit = self.settings.analysis.similar_limit
        similar: List[ScamReport] = []
        if limit:
            candidates = await self.repository.query(
                ReportQuery(filters={"category": report.category}, limit=limit + 1)
            )
            similar = [candidate for candidate in candidates if candidate.id != report.id][:limit]
        return ReportDetail(report=report, similar=similar)

    async def confirm_report(self, report_id: str, reporter: Reporter) -> ScamReport:
        """Record that another user saw the same scam.

        The stored count is incremented atomically; the returned report is the
        previously read record with the count bumped locally, without a re-read.
        """

        report = await self.repository.get(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        await self.repository.increment_report_count(report_id)
        LOGGER.info("Report %s confirmed by %s", report_id, reporter.user_id)
        return report.model_copy(update={"report_count": report.report_count + 1})

    async def moderate(
        self,
        report_id: str,
        status: ModerationStatus,
        *,
        risk_level: RiskLevel | None = None,
    ) -> ScamReport:
        """Move a report between pending and approved, optionally re-rating its risk."""

        report = await self.repository.get(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        fields = {"status": status.value}
        if risk_level is not None:
            fields["riskLevel"] = risk_level.value
        await self.repository.update(report_id, fields)
        LOGGER.info("Report %s moderated: %s", report_id, fields)
        update = {"status": status}
        if risk_level is not None:
            update["risk_level"] = risk_level
        return report.model_copy(update=update)

    async def explore(self, filters: ExploreFilters) -> ExplorePage:
        """Browse approved reports one page at a time.

        ``search`` is matched case-insensitively against title and content of
        the fetched page, so a filtered page may hold fewer than ``limit``
        reports while ``has_more`` and ``next_cursor`` still follow the
        unfiltered page.
        """

        page_size = filters.limit or self.settings.analysis.explore_page_size
        query_filters = {"status": ModerationStatus.APPROVED.value}
        if filters.category:
            query_filters["category"] = filters.category.strip().lower()
        if filters.risk_level:
            query_filters["riskLevel"] = filters.risk_level.value
        order_by = "timestamp" if filters.sort is ExploreSort.LATEST else "reportCount"

        reports = await self.repository.query(
            ReportQuery(
                filters=query_filters,
                order_by=order_by,
                descending=True,
                limit=page_size,
                start_after=filters.start_after,
            )
        )
        has_more = len(reports) == page_size
        next_cursor = reports[-1].id if has_more else None
        term = (filters.search or "").strip().lower()
        if term:
            reports = [report for report in reports if term in report.title.lower() or term in report.content.lower()]
        return ExplorePage(
            reports=reports,
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def recent_reports(self, limit: int | None = None) -> List[ScamReport]:
        """Newest reports for the home feed."""

        return await self.repository.query(
            ReportQuery(order_by="timestamp", descending=True, limit=limit or self.settings.analysis.recent_limit)
        )

    async def reports_by_reporter(self, reporter_id: str, limit: int = 10) -> List[ScamReport]:
        """Reports submitted by one user, newest first."""

        return await self.repository.query(
            ReportQuery(filters={"reporterId": reporter_id}, order_by="timestamp", descending=True, limit=limit)
        )


__all__ = [
    "ExploreFilters",
    "ExplorePage",
    "ExploreSort",
    "ReportDetail",
    "ReportService",
    "ReportSubmission",
    "Reporter",
]
