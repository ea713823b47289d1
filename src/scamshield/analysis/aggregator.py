"""Reduce matched reports into a single risk verdict.

Only approved reports drive the verdict. Pending reports are surfaced as
"under review" without raising the score, and keyword hits are carried along
for display only.

Score for approved matches::

    min(100, 30 * high + 15 * medium + 10 * total)

Risk is ``high`` when any approved report is high risk or the score reaches
50, ``medium`` when any is medium risk or the score reaches 20, else ``low``.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Sequence

from pydantic import BaseModel, ConfigDict, Field

from scamshield.store.models import RiskLevel, ScamReport

HIGH_REPORT_WEIGHT = 30
MEDIUM_REPORT_WEIGHT = 15
PER_REPORT_WEIGHT = 10
HIGH_SCORE_THRESHOLD = 50
MEDIUM_SCORE_THRESHOLD = 20
MAX_SCORE = 100

NO_DATA_MESSAGE = "No scams found. Nothing matching this input has been reported yet."
PENDING_MESSAGE = (
    "This number/website has been reported but the report is still under review. "
    "Please allow some time for review."
)

RECOMMENDED_ACTIONS = {
    RiskLevel.HIGH: [
        "Don't respond or click any links",
        "Block the sender immediately",
        "Report to relevant authorities",
        "Consider reporting to ScamShield community",
    ],
    RiskLevel.MEDIUM: [
        "Be very cautious about any requests",
        "Never share personal information",
        "Research the sender before engaging",
        "Consider reporting for community awareness",
    ],
    RiskLevel.LOW: [
        "While this appears safe, always stay vigilant",
        "Never share sensitive information online",
        "If something feels suspicious, trust your instincts",
    ],
}


class AnalysisOutcome(str, Enum):
    """Which reports were found for an analysed input."""

    NO_DATA = "no_data"
    PENDING_ONLY = "pending_only"
    APPROVED_FOUND = "approved_found"


class Verdict(BaseModel):
    """Aggregated risk verdict for one analysis."""

    model_config = ConfigDict(frozen=True)

    outcome: AnalysisOutcome
    risk_level: RiskLevel
    score: int = Field(ge=0, le=MAX_SCORE)
    keyword_score: int | None = None
    message: str
    recommended_actions: List[str] = Field(default_factory=list)


def score_approved_reports(approved: Sequence[ScamReport]) -> int:
    """Return the 0-100 report score for a set of approved reports."""

    high = sum(1 for report in approved if report.risk_level is RiskLevel.HIGH)
    medium = sum(1 for report in approved if report.risk_level is RiskLevel.MEDIUM)
    raw = HIGH_REPORT_WEIGHT * high + MEDIUM_REPORT_WEIGHT * medium + PER_REPORT_WEIGHT * len(approved)
    return min(MAX_SCORE, raw)


def aggregate(
    approved: Sequence[ScamReport],
    pending: Sequence[ScamReport],
    keyword_score: int | None = None,
) -> Verdict:
    """Combine matched reports into a :class:`Verdict`.

    Args:
        approved: Approved reports matching the input.
        pending: Reports awaiting moderation matching the input.
        keyword_score: Optional keyword heuristic score, passed through for display.

    Returns:
        Deterministic verdict for the given report sets.
    """

    if approved:
        score = score_approved_reports(approved)
        has_high = any(report.risk_level is RiskLevel.HIGH for report in approved)
        has_medium = any(report.risk_level is RiskLevel.MEDIUM for report in approved)
        if has_high or score >= HIGH_SCORE_THRESHOLD:
            risk = RiskLevel.HIGH
        elif has_medium or score >= MEDIUM_SCORE_THRESHOLD:
            risk = RiskLevel.MEDIUM
        else:
            risk = RiskLevel.LOW
        noun = "report" if len(approved) == 1 else "reports"
        return Verdict(
            outcome=AnalysisOutcome.APPROVED_FOUND,
            risk_level=risk,
            score=score,
            keyword_score=keyword_score,
            message=f"Found {len(approved)} verified {noun} matching this input.",
            recommended_actions=list(RECOMMENDED_ACTIONS[risk]),
        )

    if pending:
        return Verdict(
            outcome=AnalysisOutcome.PENDING_ONLY,
            risk_level=RiskLevel.LOW,
            score=0,
            keyword_score=keyword_score,
            message=PENDING_MESSAGE,
            recommended_actions=list(RECOMMENDED_ACTIONS[RiskLevel.LOW]),
        )

    return Verdict(
        outcome=AnalysisOutcome.NO_DATA,
        risk_level=RiskLevel.LOW,
        score=0,
        keyword_score=keyword_score,
        message=NO_DATA_MESSAGE,
        recommended_actions=list(RECOMMENDED_ACTIONS[RiskLevel.LOW]),
    )


__all__ = [
    "AnalysisOutcome",
    "RECOMMENDED_ACTIONS",
    "Verdict",
    "aggregate",
    "score_approved_reports",
]
