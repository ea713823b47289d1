"""Scam-likelihood analysis engine."""

from .aggregator import AnalysisOutcome, Verdict, aggregate
from .engine import AnalysisResult, AnalysisSession, ScamAnalyzer, SessionState, SessionStatus
from .keywords import KeywordScore, score_keywords
from .matcher import ReportMatcher, ReportMatches
from .normalizer import InputClassification, canonical_forms, classify, validate_phone_number

__all__ = [
    "AnalysisOutcome",
    "AnalysisResult",
    "AnalysisSession",
    "InputClassification",
    "KeywordScore",
    "ReportMatcher",
    "ReportMatches",
    "ScamAnalyzer",
    "SessionState",
    "SessionStatus",
    "Verdict",
    "aggregate",
    "canonical_forms",
    "classify",
    "score_keywords",
    "validate_phone_number",
]
