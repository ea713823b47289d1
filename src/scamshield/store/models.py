"""Typed report records parsed from raw repository documents."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TITLE = "Untitled Report"
DEFAULT_CONTENT = "No content provided"
DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_REPORTER_NAME = "Anonymous"


class RiskLevel(str, Enum):
    """Coarse risk classification shown to end users."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ModerationStatus(str, Enum):
    """Moderation state of a stored report."""

    PENDING = "pending"
    APPROVED = "approved"


class ReportCategory(str, Enum):
    """Categories offered by the report submission form."""

    JOB = "job"
    BANKING = "banking"
    WEBSITE = "website"
    LOTTERY = "lottery"
    BETTING = "betting"
    SHOPPING = "shopping"
    INVESTMENT = "investment"
    OTHER = "other"


class ScamReport(BaseModel):
    """A community scam report as read from the repository."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = DEFAULT_TITLE
    content: str = DEFAULT_CONTENT
    category: str = DEFAULT_CATEGORY
    risk_level: RiskLevel = RiskLevel.MEDIUM
    report_count: int = Field(default=1, ge=1)
    status: ModerationStatus = ModerationStatus.PENDING
    contact_info: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    reporter_id: str | None = None
    reporter_name: str | None = None
    screenshot_url: str | None = None

    @property
    def is_approved(self) -> bool:
        return self.status is ModerationStatus.APPROVED

    @classmethod
    def from_document(cls, report_id: str, data: Mapping[str, Any] | None) -> "ScamReport":
        """Parse a raw repository document, applying defaults once.

        Documents written by older clients may be missing fields, carry
        whitespace around the status, or hold unexpected types. Every such
        shape is resolved here so callers only ever see a strict record.

        Args:
            report_id: Document identifier.
            data: Raw document fields (camelCase, as stored).

        Returns:
            Parsed :class:`ScamReport`.
        """

        data = data or {}
        return cls(
            id=str(report_id),
            title=_text_or_default(data.get("title"), DEFAULT_TITLE),
            content=_text_or_default(data.get("content"), DEFAULT_CONTENT),
            category=_text_or_default(data.get("category"), DEFAULT_CATEGORY),
            risk_level=parse_risk_level(data.get("riskLevel")),
            report_count=_parse_report_count(data.get("reportCount")),
            status=parse_status(data.get("status")),
            contact_info=_optional_text(data.get("contactInfo")),
            timestamp=_parse_timestamp(data.get("timestamp")),
            reporter_id=_optional_text(data.get("reporterId")),
            reporter_name=_optional_text(data.get("reporterName")),
            screenshot_url=_optional_text(data.get("screenshotUrl")),
        )

    def to_document(self) -> Dict[str, Any]:
        """Serialise the report back into the stored camelCase shape."""

        data = {
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "riskLevel": self.risk_level.value,
            "reportCount": self.report_count,
            "status": self.status.value,
            "contactInfo": self.contact_info,
            "timestamp": self.timestamp,
            "reporterId": self.reporter_id,
            "reporterName": self.reporter_name,
            "screenshotUrl": self.screenshot_url,
        }
        return {key: value for key, value in data.items() if value is not None}


def parse_status(raw: Any) -> ModerationStatus:
    """Return the moderation status, treating anything unrecognised as pending."""

    if isinstance(raw, str):
        cleaned = raw.strip().lower()
        if cleaned == ModerationStatus.APPROVED.value:
            return ModerationStatus.APPROVED
    return ModerationStatus.PENDING


def parse_risk_level(raw: Any) -> RiskLevel:
    if isinstance(raw, str):
        try:
            return RiskLevel(raw.strip().lower())
        except ValueError:
            pass
    return RiskLevel.MEDIUM


def _text_or_default(raw: Any, default: str) -> str:
    text = _optional_text(raw)
    return text if text else default


def _optional_text(raw: Any) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _parse_report_count(raw: Any) -> int:
    # bool is an int subclass; a stored True is not a count
    if isinstance(raw, bool):
        return 1
    try:
        count = int(raw)
    except (TypeError, ValueError, OverflowError):
        return 1
    return count if count >= 1 else 1


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if isinstance(raw, str):
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc)


__all__ = [
    "ModerationStatus",
    "ReportCategory",
    "RiskLevel",
    "ScamReport",
    "parse_risk_level",
    "parse_status",
]
