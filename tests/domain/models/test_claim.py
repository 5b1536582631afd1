"""Tests for claim validation and normalization."""

import pytest

from truthmeter.domain.errors import ClaimValidationError
from truthmeter.domain.models.claim import (
    MAX_CLAIM_LENGTH,
    Claim,
    normalize_claim_text,
    validate_claim_text,
)


def test_validate_trims_text():
    assert validate_claim_text("   The earth orbits the sun.  ") == "The earth orbits the sun."


@pytest.mark.parametrize("text", [None, "", "   \n\t "])
def test_validate_requires_text(text):
    with pytest.raises(ClaimValidationError) as exc_info:
        validate_claim_text(text)
    assert exc_info.value.user_message == "Content text is required"


def test_validate_rejects_short_text():
    with pytest.raises(ClaimValidationError) as exc_info:
        validate_claim_text("short")
    assert exc_info.value.user_message == "Content must be at least 10 characters"


def test_validate_length_bounds_apply_after_trimming():
    assert validate_claim_text("  " + "a" * 10 + "  ") == "a" * 10
    with pytest.raises(ClaimValidationError):
        validate_claim_text("  " + "a" * 9 + "      ")


def test_validate_rejects_long_text():
    assert validate_claim_text("a" * MAX_CLAIM_LENGTH) == "a" * MAX_CLAIM_LENGTH
    with pytest.raises(ClaimValidationError) as exc_info:
        validate_claim_text("a" * (MAX_CLAIM_LENGTH + 1))
    assert exc_info.value.user_message == "Content must be at most 2000 characters"


def test_normalize_lowercases_and_collapses_whitespace():
    assert normalize_claim_text("  Coffee   IS\tgood\n for you ") == "coffee is good for you"


def test_normalize_is_idempotent():
    once = normalize_claim_text(" A  Claim\n\nWith   Spaces ")
    assert normalize_claim_text(once) == once


def test_claim_from_text():
    claim = Claim.from_text("  Coffee  Is Good For You  ")
    assert claim.text == "Coffee  Is Good For You"
    assert claim.normalized_text == "coffee is good for you"


def test_claim_from_text_validates():
    with pytest.raises(ClaimValidationError):
        Claim.from_text("tiny")
