"""Report storage layer for ScamShield.

Exposes the repository interface, the typed report record, and the
Firestore and in-memory backends.
"""

from scamshield.store.memory import InMemoryReportRepository
from scamshield.store.models import ModerationStatus, ReportCategory, RiskLevel, ScamReport
from scamshield.store.repository import PREFIX_SENTINEL, ReportQuery, ReportRepository

__all__ = [
    "InMemoryReportRepository",
    "ModerationStatus",
    "PREFIX_SENTINEL",
    "ReportCategory",
    "ReportQuery",
    "ReportRepository",
    "RiskLevel",
    "ScamReport",
]
