"""Domain model for user-submitted claims."""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ClaimValidationError

MIN_CLAIM_LENGTH = 10
MAX_CLAIM_LENGTH = 2000

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_claim_text(text: str) -> str:
    """Cache key form of a claim: lowercased, trimmed, whitespace collapsed."""
    return _WHITESPACE_RUN.sub(" ", text.lower().strip())


def validate_claim_text(text: Optional[str]) -> str:
    """Trim claim text and enforce the accepted length range.

    Args:
        text: Raw text as submitted

    Returns:
        The trimmed text

    Raises:
        ClaimValidationError: If the text is missing, too short or too long
    """
    if not isinstance(text, str) or not text.strip():
        raise ClaimValidationError("Content text is required")

    trimmed = text.strip()
    if len(trimmed) < MIN_CLAIM_LENGTH:
        raise ClaimValidationError(f"Content must be at least {MIN_CLAIM_LENGTH} characters")
    if len(trimmed) > MAX_CLAIM_LENGTH:
        raise ClaimValidationError(f"Content must be at most {MAX_CLAIM_LENGTH} characters")
    return trimmed


class Claim(BaseModel):
    """A claim to be fact-checked."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {"text": "Coffee consumption has no link to reduced mortality risk in large studies."}
        },
    )

    text: str = Field(..., description="Trimmed claim text")

    @classmethod
    def from_text(cls, text: Optional[str]) -> "Claim":
        """Validate raw input and build a claim from it."""
        return cls(text=validate_claim_text(text))

    @property
    def normalized_text(self) -> str:
        """Cache key for this claim."""
        return normalize_claim_text(self.text)
