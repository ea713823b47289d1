"""Input classification and canonicalization for scam lookups.

Raw user input is classified as a phone number, a URL, or free text (tried in
that order, first match wins) and expanded into the equivalent textual forms
a stored report's ``contactInfo`` may have been saved with.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, List
from urllib.parse import SplitResult, urlsplit

from scamshield.errors import ValidationError

PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15
MAIN_NUMBER_DIGITS = 10

# Everything except digits and "+" is dropped before counting digits.
_PHONE_FORMATTING = re.compile(r"[^0-9+]")
_PHONE_PATTERN = re.compile(r"\+?[0-9]+")
_HOST_LABEL = re.compile(r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$")
_IPV4 = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")


class InputClassification(str, Enum):
    """Kind of input supplied for analysis."""

    PHONE_NUMBER = "phone_number"
    URL = "url"
    FREE_TEXT = "free_text"


def classify(text: str) -> InputClassification:
    """Classify raw input as a phone number, URL, or free text."""

    if _phone_digits(text) is not None:
        return InputClassification.PHONE_NUMBER
    if _parse_url(text) is not None:
        return InputClassification.URL
    return InputClassification.FREE_TEXT


def validate_phone_number(text: str) -> str:
    """Return the cleaned digits of a phone number or raise :class:`ValidationError`.

    Only called when the caller explicitly asks for validation before
    analysis; :func:`classify` never raises.
    """

    cleaned = _strip_phone_formatting(text)
    if not _PHONE_PATTERN.fullmatch(cleaned):
        raise ValidationError("Please enter a valid phone number using digits only.")
    digits = cleaned.lstrip("+")
    if not PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS:
        raise ValidationError(
            f"Phone numbers must have between {PHONE_MIN_DIGITS} and {PHONE_MAX_DIGITS} digits "
            f"(got {len(digits)})."
        )
    return digits


def canonical_forms(text: str, classification: InputClassification | None = None) -> List[str]:
    """Return the deduplicated lookup keys equivalent to ``text``.

    Args:
        text: Raw user input.
        classification: Pre-computed classification; derived when omitted.

    Returns:
        Ordered list of equivalent encodings. The first entry is the primary
        comparison key (main number for phones, normalized host+path+fragment
        for URLs, trimmed input for free text).
    """

    kind = classification or classify(text)
    if kind is InputClassification.PHONE_NUMBER:
        digits = _phone_digits(text)
        if digits is not None:
            return _phone_forms(digits)
    elif kind is InputClassification.URL:
        parsed = _parse_url(text)
        if parsed is not None:
            return _url_forms(parsed, text.strip())
    stripped = text.strip()
    return [stripped] if stripped else []


def url_hostname(text: str) -> str | None:
    """Return the lower-cased hostname of ``text`` without a leading ``www.``."""

    parsed = _parse_url(text)
    if parsed is None or not parsed.hostname:
        return None
    return _strip_www(parsed.hostname)


# ---------------------------------------------------------------------------
# Phone numbers
# ---------------------------------------------------------------------------


def _strip_phone_formatting(text: str) -> str:
    return _PHONE_FORMATTING.sub("", text.strip())


def _phone_digits(text: str) -> str | None:
    cleaned = _strip_phone_formatting(text)
    if not _PHONE_PATTERN.fullmatch(cleaned):
        return None
    digits = cleaned.lstrip("+")
    if not PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS:
        return None
    return digits


def _phone_forms(digits: str) -> List[str]:
    # Longer numbers are assumed to carry a country code prefix.
    main = digits[-MAIN_NUMBER_DIGITS:]
    area, exchange, line = main[:3], main[3:6], main[6:]
    return _dedupe(
        [
            main,
            digits,
            f"({area}) {exchange}-{line}",
            f"{area}-{exchange}-{line}",
            f"{area}.{exchange}.{line}",
            f"+1{main}",
            f"1{main}",
            f"+{digits}",
        ]
    )


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------


def _parse_url(text: str) -> SplitResult | None:
    candidate = text.strip().lower()
    if not candidate or any(char.isspace() for char in candidate):
        return None
    if not candidate.startswith(("http://", "https://")):
        candidate = f"https://{candidate}"
    try:
        parsed = urlsplit(candidate)
        port = parsed.port
    except ValueError:
        return None
    # user@host is an email address, not a link
    if port == 0 or parsed.username is not None:
        return None
    host = parsed.hostname
    if not host or not _valid_host(host):
        return None
    return parsed


def _valid_host(host: str) -> bool:
    if _IPV4.match(host):
        return all(int(part) <= 255 for part in host.split("."))
    labels = host.split(".")
    if len(labels) < 2:
        return False
    if not all(_HOST_LABEL.match(label) for label in labels):
        return False
    tld = labels[-1]
    return len(tld) >= 2 and (tld.isalpha() or tld.startswith("xn--"))


def _strip_www(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def _url_forms(parsed: SplitResult, original: str) -> List[str]:
    host = _strip_www(parsed.hostname or "")
    if parsed.port:
        host = f"{host}:{parsed.port}"
    base = host + parsed.path.rstrip("/")
    if parsed.query:
        base = f"{base}?{parsed.query}"
    with_fragment = f"{base}#{parsed.fragment}" if parsed.fragment else base
    forms = [with_fragment, base]
    for variant in (with_fragment, base):
        forms.extend([f"http://{variant}", f"https://{variant}", f"www.{variant}"])
    forms.extend([_strip_www(parsed.hostname or ""), original])
    return _dedupe(forms)


def _dedupe(values: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


__all__ = [
    "InputClassification",
    "canonical_forms",
    "classify",
    "url_hostname",
    "validate_phone_number",
]
