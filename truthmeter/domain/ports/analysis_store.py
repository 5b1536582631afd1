"""Storage interface for completed analyses (the result cache)."""

from typing import Optional, Protocol

from ..models.analysis_result import AnalysisResult


class AnalysisStore(Protocol):
    """Protocol for the durable analysis cache.

    Entries are insert-only. Several entries may share a normalized claim
    text; lookups by claim always pick the newest entry inside the TTL.
    """

    def get(self, claim_text: str) -> Optional[AnalysisResult]:
        """Newest unexpired result for the claim, flagged ``cached=True``."""
        ...

    def set(self, result: AnalysisResult) -> None:
        """Store a new entry for the result's claim text."""
        ...

    def get_by_id(self, analysis_id: str) -> Optional[AnalysisResult]:
        """Result with this id, regardless of age."""
        ...

    def delete_expired(self) -> int:
        """Delete entries older than the TTL and return how many were removed."""
        ...

    def count(self) -> int:
        """Number of stored entries."""
        ...
