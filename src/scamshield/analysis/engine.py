"""Scam-likelihood analysis: classify, look up, score, and aggregate one input."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from scamshield.analysis.aggregator import AnalysisOutcome, aggregate
from scamshield.analysis.keywords import KeywordScore, score_keywords
from scamshield.analysis.matcher import ReportMatcher
from scamshield.analysis.normalizer import (
    InputClassification,
    canonical_forms,
    classify,
    validate_phone_number,
)
from scamshield.errors import ValidationError
from scamshield.observability import Observability, get_observability
from scamshield.settings import Settings, get_settings
from scamshield.store.models import RiskLevel, ScamReport
from scamshield.store.repository import ReportRepository

LOGGER = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter a message, phone number, or URL to check."
ANALYSIS_FAILED_MESSAGE = "Something went wrong while checking this input. Please try again."


class AnalysisResult(BaseModel):
    """Outcome of analysing one input. Built per request and never stored."""

    model_config = ConfigDict(frozen=True)

    input: str
    classification: InputClassification
    outcome: AnalysisOutcome
    risk_level: RiskLevel
    score: int = Field(ge=0, le=100)
    keyword_score: int = Field(default=0, ge=0, le=100)
    matched_keywords: List[str] = Field(default_factory=list)
    approved_reports: List[ScamReport] = Field(default_factory=list)
    pending_reports: List[ScamReport] = Field(default_factory=list)
    message: str
    recommended_actions: List[str] = Field(default_factory=list)

    @property
    def under_review(self) -> bool:
        return self.outcome is AnalysisOutcome.PENDING_ONLY


class ScamAnalyzer:
    """Run the full analysis pipeline against a report repository."""

    def __init__(
        self,
        repository: ReportRepository,
        *,
        matcher: ReportMatcher | None = None,
        settings: Settings | None = None,
        observability: Observability | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.matcher = matcher or ReportMatcher(repository, settings=self.settings)
        self.observability = observability or get_observability(component="analysis", settings=self.settings)

    async def analyze(self, text: str, *, validate_phone: bool = False) -> AnalysisResult:
        """Analyse ``text`` and return a risk verdict.

        Args:
            text: Raw message, phone number, or URL.
            validate_phone: Reject the input unless it is a phone number with
                10-15 digits.

        Returns:
            :class:`AnalysisResult` for the input.

        Raises:
            ValidationError: If the input is empty or fails phone validation.
                Raised before any repository call.
        """

        content = (text or "").strip()
        if not content:
            raise ValidationError(EMPTY_INPUT_MESSAGE)
        if validate_phone:
            validate_phone_number(content)

        started = time.perf_counter()
        classification = classify(content)
        keywords: KeywordScore | None = None
        if classification is InputClassification.FREE_TEXT:
            keywords = score_keywords(content)
            matches = await self.matcher.find_reports(keywords.matched_keywords, classification)
        else:
            forms = canonical_forms(content, classification)
            matches = await self.matcher.find_reports(forms, classification)

        verdict = aggregate(matches.approved, matches.pending, keywords.score if keywords else None)
        result = AnalysisResult(
            input=content,
            classification=classification,
            outcome=verdict.outcome,
            risk_level=verdict.risk_level,
            score=verdict.score,
            keyword_score=keywords.score if keywords else 0,
            matched_keywords=keywords.matched_keywords if keywords else [],
            approved_reports=matches.approved,
            pending_reports=matches.pending,
            message=verdict.message,
            recommended_actions=verdict.recommended_actions,
        )

        elapsed_ms = (time.perf_counter() - started) * 1000
        tags = {"classification": classification.value, "outcome": verdict.outcome.value}
        self.observability.emit_event(
            "analysis.completed",
            classification=classification.value,
            outcome=verdict.outcome.value,
            risk_level=verdict.risk_level.value,
            score=verdict.score,
            keyword_score=result.keyword_score,
            approved=len(matches.approved),
            pending=len(matches.pending),
            duration_ms=round(elapsed_ms, 2),
        )
        self.observability.increment("analysis.requests", tags=tags)
        self.observability.record_timing("analysis.latency_ms", elapsed_ms, tags=tags)
        return result


class SessionStatus(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    DONE = "done"


class SessionState(BaseModel):
    """Snapshot of an analysis session. Replaced as a whole, never mutated."""

    model_config = ConfigDict(frozen=True)

    status: SessionStatus = SessionStatus.IDLE
    input: str | None = None
    result: AnalysisResult | None = None
    error: str | None = None


class AnalysisSession:
    """Track the live input of one user and apply only its latest result.

    A result is committed only if the input it was computed for is still the
    session's live input; results for superseded inputs are dropped.
    """

    def __init__(self, analyzer: ScamAnalyzer) -> None:
        self.analyzer = analyzer
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    async def submit(self, text: str, *, validate_phone: bool = False) -> SessionState:
        """Analyse ``text`` and return the session state after it resolves."""

        self._state = SessionState(status=SessionStatus.ANALYZING, input=text)
        try:
            result = await self.analyzer.analyze(text, validate_phone=validate_phone)
        except ValidationError as exc:
            return self._commit(text, SessionState(status=SessionStatus.DONE, input=text, error=str(exc)))
        except Exception:
            LOGGER.exception("Analysis failed; session moved to done with an error")
            failed = SessionState(status=SessionStatus.DONE, input=text, error=ANALYSIS_FAILED_MESSAGE)
            return self._commit(text, failed)
        return self._commit(text, SessionState(status=SessionStatus.DONE, input=text, result=result))

    def reset(self) -> SessionState:
        self._state = SessionState()
        return self._state

    def _commit(self, text: str, new_state: SessionState) -> SessionState:
        if self._state.input != text:
            LOGGER.debug("Dropping stale analysis result; live input has changed")
            return self._state
        self._state = new_state
        return new_state


__all__ = [
    "AnalysisResult",
    "AnalysisSession",
    "ScamAnalyzer",
    "SessionState",
    "SessionStatus",
]
