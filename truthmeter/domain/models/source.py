"""Domain models for retrieved and categorized sources."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Relevance(str, Enum):
    """Stance of a source relative to a claim."""

    SUPPORTING = "supporting"  # Source agrees with the claim
    CONTRADICTING = "contradicting"  # Source disagrees with the claim
    NEUTRAL = "neutral"  # Unrelated, mixed or non-committal


class CandidateSource(BaseModel):
    """A web document retrieved as possible evidence for a claim."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    url: str = Field(..., description="Document URL, unique within a retrieval")
    title: str = Field(default="", description="Document title")
    content: str = Field(default="", description="Snippet used as analysis input")
    relevance_score: float = Field(..., description="Provider score, higher ranks first")
    published_date: Optional[str] = Field(None, description="Publication date if the provider knows it")


class CategorizedSource(CandidateSource):
    """A candidate source labelled with its stance."""

    relevance: Relevance = Field(..., description="Stance relative to the claim")

    @classmethod
    def from_candidate(cls, source: CandidateSource, relevance: Relevance) -> "CategorizedSource":
        return cls(**source.model_dump(), relevance=relevance)
