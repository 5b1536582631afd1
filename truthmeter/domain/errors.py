"""Error taxonomy for the fact-check pipeline.

Every error carries a ``user_message`` that is safe to return to API
callers. ``str(error)`` may hold internal detail and is only logged.
"""

from typing import Optional


class TruthMeterError(Exception):
    """Base class for all TruthMeter errors."""

    user_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, user_message: Optional[str] = None):
        super().__init__(message or user_message or self.user_message)
        if user_message is not None:
            self.user_message = user_message


class ClaimValidationError(TruthMeterError):
    """Claim text is missing, too short or too long."""

    def __init__(self, message: str):
        super().__init__(message, user_message=message)


class SourceRetrievalError(TruthMeterError):
    """The search provider failed for every page of a retrieval."""

    user_message = "Failed to search sources. Please try again."


class NoSourcesFoundError(TruthMeterError):
    """Retrieval succeeded but produced no usable sources."""

    user_message = "No sources found for this content. Please try a different query."


class AnalysisError(TruthMeterError):
    """Categorization or summary failed, or the model output was malformed."""

    user_message = "Failed to analyze content with AI. Please try again."


class TranslationError(TruthMeterError):
    """Summary translation failed. Never fatal for an analysis."""

    user_message = "Failed to translate summary."


class SearchProviderError(TruthMeterError):
    """A single search provider call failed (HTTP error, rate limit, timeout)."""

    user_message = SourceRetrievalError.user_message


class LLMProviderError(TruthMeterError):
    """A single language model call failed or returned nothing."""

    user_message = AnalysisError.user_message
