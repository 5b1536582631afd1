"""Domain models for analysis outcomes and stored results."""

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .source import CategorizedSource, Relevance


def count_relevance(sources: List[CategorizedSource]) -> Dict[Relevance, int]:
    """Count sources per stance. Every stance is present in the result."""
    counts = {relevance: 0 for relevance in Relevance}
    for source in sources:
        counts[source.relevance] += 1
    return counts


class AnalysisOutcome(BaseModel):
    """Everything the claim analyzer produces for one claim."""

    model_config = ConfigDict(frozen=True)

    accuracy_score: float = Field(..., ge=0, le=100)
    agreement_score: float
    disagreement_score: float
    neutral_score: float
    summary: str
    sources: List[CategorizedSource] = Field(default_factory=list)
    summary_translations: Dict[str, str] = Field(default_factory=dict)

    def relevance_counts(self) -> Dict[Relevance, int]:
        return count_relevance(self.sources)


class AnalysisResult(BaseModel):
    """A completed fact-check as returned to callers and stored in the cache.

    Results are immutable. A newer analysis of the same claim is stored as
    a separate result rather than replacing this one.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "0b8e6a52-3f0c-4a8e-9d8e-1b7d1f6f2c11",
                "claimText": "Coffee consumption has no link to reduced mortality risk in large studies.",
                "accuracyScore": 18.0,
                "agreementScore": 15.0,
                "disagreementScore": 60.0,
                "neutralScore": 25.0,
                "summary": "Most sources report lower mortality among coffee drinkers.",
                "summaryTranslations": {"fr": "La plupart des sources ..."},
                "sources": [],
                "totalSourcesRetrieved": 20,
                "analyzedAt": "2025-01-01T12:00:00Z",
                "cached": False,
            }
        },
    )

    id: str = Field(..., description="Opaque unique identifier")
    claim_text: str = Field(..., description="Claim as submitted (trimmed, not normalized)")
    accuracy_score: float = Field(..., ge=0, le=100, description="Estimated accuracy, one decimal")
    agreement_score: float = Field(..., description="Share of supporting sources")
    disagreement_score: float = Field(..., description="Share of contradicting sources")
    neutral_score: float = Field(..., description="Share of neutral sources")
    summary: str = Field(..., description="Short natural-language summary")
    summary_translations: Dict[str, str] = Field(default_factory=dict, description="Summary by language code")
    sources: List[CategorizedSource] = Field(default_factory=list, description="Sources selected for display")
    total_sources_retrieved: int = Field(..., ge=0, description="Sources analyzed, before display filtering")
    analyzed_at: datetime = Field(..., description="When the analysis completed")
    cached: bool = Field(default=False, description="True only when served from the cache")

    def summary_for(self, language: str) -> str:
        """Summary in the requested language, falling back to the original."""
        return self.summary_translations.get(language.lower(), self.summary)

    def sources_by_relevance(self, relevance: Relevance) -> List[CategorizedSource]:
        return [source for source in self.sources if source.relevance == relevance]
