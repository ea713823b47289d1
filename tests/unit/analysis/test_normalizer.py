"""Unit tests for scamshield.analysis.normalizer.

Covers input classification, phone validation, and the canonical forms used
to match stored ``contactInfo`` values.
"""

import pytest

from scamshield.analysis.normalizer import (
    InputClassification,
    canonical_forms,
    classify,
    url_hostname,
    validate_phone_number,
)
from scamshield.errors import ValidationError


@pytest.mark.parametrize(
    "raw",
    [
        "4155551234",
        "+14155551234",
        "(415) 555-1234",
        "415.555.1234",
        "+44 20 7946 0958",
        "123456789012345",
    ],
)
def test_phone_numbers_with_10_to_15_digits(raw):
    assert classify(raw) is InputClassification.PHONE_NUMBER


@pytest.mark.parametrize("raw", ["555-1234", "1234567890123456", "+1 415 555 12ab", "ext 12-34"])
def test_phone_like_inputs_outside_range_are_not_phones(raw):
    assert classify(raw) is not InputClassification.PHONE_NUMBER


@pytest.mark.parametrize(
    "raw",
    [
        "https://fakebank.com/login",
        "http://www.fakebank.com",
        "fakebank.com",
        "sub.example.co.uk/path?x=1",
    ],
)
def test_url_classification(raw):
    assert classify(raw) is InputClassification.URL


@pytest.mark.parametrize(
    "raw",
    [
        "You won a lottery! Claim your prize now",
        "someone@example.com",
        "hello",
        "file.txt1",
    ],
)
def test_free_text_fallback(raw):
    assert classify(raw) is InputClassification.FREE_TEXT


def test_number_inside_message_is_a_phone_number():
    assert classify("Call me at 415 555 1234") is InputClassification.PHONE_NUMBER
    assert canonical_forms("Call me at 415 555 1234")[0] == "4155551234"
    assert classify("tel:+1/415/555/1234") is InputClassification.PHONE_NUMBER


def test_validate_phone_accepts_formatting_and_returns_digits():
    assert validate_phone_number("+1 (415) 555-1234") == "14155551234"


@pytest.mark.parametrize("raw", ["12345", "1234567890123456", "not a number", "415-555-12x4"])
def test_validate_phone_rejects_invalid_input(raw):
    with pytest.raises(ValidationError):
        validate_phone_number(raw)


def test_phone_forms_start_with_main_number():
    forms = canonical_forms("+1 (415) 555-1234")
    assert forms[0] == "4155551234"
    assert "14155551234" in forms
    assert "(415) 555-1234" in forms
    assert "415-555-1234" in forms
    assert "+14155551234" in forms
    assert len(forms) == len(set(forms))


def test_equivalent_phone_inputs_share_a_main_number():
    variants = ["4155551234", "+14155551234", "1-415-555-1234", "(415) 555 1234"]
    assert {canonical_forms(raw)[0] for raw in variants} == {"4155551234"}


def test_url_forms_normalize_scheme_www_and_trailing_slash():
    forms = canonical_forms("https://www.FakeBank.com/login/")
    assert forms[0] == "fakebank.com/login"
    assert "http://fakebank.com/login" in forms
    assert "https://fakebank.com/login" in forms
    assert "www.fakebank.com/login" in forms
    assert "fakebank.com" in forms
    assert forms[-1] == "https://www.FakeBank.com/login/"


def test_url_forms_keep_variant_without_fragment():
    forms = canonical_forms("fakebank.com/login#step2")
    assert forms[0] == "fakebank.com/login#step2"
    assert forms[1] == "fakebank.com/login"


def test_canonical_forms_are_idempotent_on_primary_key():
    for raw in ["+1 415 555 1234", "https://www.fakebank.com/login/"]:
        primary = canonical_forms(raw)[0]
        assert canonical_forms(primary)[0] == primary


def test_free_text_forms_are_trimmed_input():
    assert canonical_forms("  hello there ") == ["hello there"]
    assert canonical_forms("   ") == []


def test_url_hostname_strips_www():
    assert url_hostname("https://www.fakebank.com/login") == "fakebank.com"
    assert url_hostname("not a url") is None
