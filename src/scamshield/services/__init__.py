"""Application services built on top of the report repository."""

from .reports import ExploreFilters, ExplorePage, ExploreSort, ReportDetail, ReportService, Reporter, ReportSubmission

__all__ = [
    "ExploreFilters",
    "ExplorePage",
    "ExploreSort",
    "ReportDetail",
    "ReportService",
    "ReportSubmission",
    "Reporter",
]
