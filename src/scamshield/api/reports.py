"""Community reports API router.

Endpoints:
- GET /reports              (approved reports, filtered and paginated)
- GET /reports/recent
- GET /reports/mine
- GET /reports/{report_id}
- POST /reports             (submit, stored as pending)
- POST /reports/{report_id}/confirm
- POST /reports/{report_id}/moderate   (admin)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from scamshield.api.auth import current_reporter, require_role
from scamshield.api.dependencies import get_report_service
from scamshield.services.reports import (
    ExploreFilters,
    ExplorePage,
    ExploreSort,
    ReportDetail,
    Reporter,
    ReportService,
    ReportSubmission,
)
from scamshield.store.models import ModerationStatus, RiskLevel, ScamReport

router = APIRouter(prefix="/reports", tags=["reports"])


class ModerationRequest(BaseModel):
    status: ModerationStatus
    risk_level: Optional[RiskLevel] = None


@router.get("", response_model=ExplorePage)
async def explore_reports(
    category: Optional[str] = Query(None),
    risk_level: Optional[RiskLevel] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive match on title or content"),
    sort: ExploreSort = Query(ExploreSort.LATEST),
    start_after: Optional[str] = Query(None, description="Id of the last report on the previous page"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    service: ReportService = Depends(get_report_service),
):
    filters = ExploreFilters(
        category=category,
        risk_level=risk_level,
        search=search,
        sort=sort,
        start_after=start_after,
        limit=limit,
    )
    return await service.explore(filters)


@router.get("/recent", response_model=List[ScamReport])
async def recent_reports(
    limit: Optional[int] = Query(None, ge=1, le=50),
    service: ReportService = Depends(get_report_service),
):
    return await service.recent_reports(limit)


@router.get("/mine", response_model=List[ScamReport])
async def my_reports(
    reporter: Reporter = Depends(current_reporter),
    service: ReportService = Depends(get_report_service),
):
    """Reports submitted by the calling user."""
    return await service.reports_by_reporter(reporter.user_id)


@router.get("/{report_id}", response_model=ReportDetail)
async def get_report(report_id: str, service: ReportService = Depends(get_report_service)):
    return await service.get_report(report_id)


@router.post("", response_model=ScamReport, status_code=201)
async def submit_report(
    payload: ReportSubmission,
    reporter: Reporter = Depends(current_reporter),
    service: ReportService = Depends(get_report_service),
):
    return await service.submit_report(payload, reporter)


@router.post("/{report_id}/confirm", response_model=ScamReport)
async def confirm_report(
    report_id: str,
    reporter: Reporter = Depends(current_reporter),
    service: ReportService = Depends(get_report_service),
):
    """Record "I saw this too" against an existing report."""
    return await service.confirm_report(report_id, reporter)


@router.post("/{report_id}/moderate", response_model=ScamReport)
async def moderate_report(
    report_id: str,
    payload: ModerationRequest,
    user=Depends(require_role("admin")),
    service: ReportService = Depends(get_report_service),
):
    return await service.moderate(report_id, payload.status, risk_level=payload.risk_level)
