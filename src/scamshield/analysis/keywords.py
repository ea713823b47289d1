"""Heuristic keyword scoring for free-text scam checks.

Text is scanned for two fixed keyword tiers using case-insensitive substring
containment. Each keyword counts once per tier no matter how often it occurs.
The resulting score is informational: matched keywords are used to discover
similar stored reports, they do not by themselves raise the risk verdict.
"""

from typing import List

from pydantic import BaseModel, Field

HIGH_RISK_WEIGHT = 5
MEDIUM_RISK_WEIGHT = 2
MAX_SCORE = 100

# --- Keyword tiers ---
HIGH_RISK_KEYWORDS = [
    "bitcoin", "crypto", "wallet", "urgent", "payment", "verify", "account", "suspicious",
    "otp", "pin", "password", "credit card", "ssn", "social security", "gift card",
    "lottery", "winner", "won", "prize", "claim", "inheritance", "prince", "million",
    "loan", "investment", "work from home", "make money", "easy cash", "get paid",
    "betting", "gambling", "jackpot", "casino", "slots", "poker",
]

MEDIUM_RISK_KEYWORDS = [
    "offer", "limited time", "discount", "sale", "special", "exclusive", "guarantee",
    "cash back", "opportunity", "click here", "download", "activate", "verify",
    "update", "confirm", "service", "request", "process", "application",
    "bet now", "play now", "odds", "win big", "sports betting",
]


class KeywordScore(BaseModel):
    """Keyword hits for one text and the derived 0-100 score."""

    high_matches: List[str] = Field(default_factory=list)
    medium_matches: List[str] = Field(default_factory=list)
    score: int = Field(default=0, ge=0, le=MAX_SCORE)

    @property
    def matched_keywords(self) -> List[str]:
        """High-tier hits followed by medium-tier hits, without repeats."""

        ordered: List[str] = []
        for keyword in self.high_matches + self.medium_matches:
            if keyword not in ordered:
                ordered.append(keyword)
        return ordered


def _match_tier(text: str, keywords: List[str]) -> List[str]:
    matches: List[str] = []
    for keyword in keywords:
        if keyword.lower() in text and keyword not in matches:
            matches.append(keyword)
    return matches


def score_keywords(text: str) -> KeywordScore:
    """Score ``text`` against both keyword tiers.

    Args:
        text: Free-form message content.

    Returns:
        :class:`KeywordScore` with the matched keywords of each tier and
        ``min(100, 5 * high + 2 * medium)``.
    """

    lowered = (text or "").lower()
    high = _match_tier(lowered, HIGH_RISK_KEYWORDS)
    medium = _match_tier(lowered, MEDIUM_RISK_KEYWORDS)
    score = min(MAX_SCORE, HIGH_RISK_WEIGHT * len(high) + MEDIUM_RISK_WEIGHT * len(medium))
    return KeywordScore(high_matches=high, medium_matches=medium, score=score)


__all__ = [
    "HIGH_RISK_KEYWORDS",
    "KeywordScore",
    "MEDIUM_RISK_KEYWORDS",
    "score_keywords",
]
