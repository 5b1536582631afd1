"""Service coordinating cache, retrieval and analysis for one claim."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Protocol, Sequence
from urllib.parse import urlparse
from uuid import uuid4

from ..errors import NoSourcesFoundError
from ..models.analysis_result import AnalysisOutcome, AnalysisResult
from ..models.claim import Claim
from ..models.source import CandidateSource, CategorizedSource, Relevance
from ..ports.analysis_store import AnalysisStore
from .scoring import normalize_percentages, percentages_sum_to_100

logger = logging.getLogger(__name__)

DEFAULT_TARGET_SOURCES = 100
DEFAULT_MAX_SOURCES_PER_CATEGORY = 10

DISPLAY_ORDER = (Relevance.SUPPORTING, Relevance.CONTRADICTING, Relevance.NEUTRAL)


class Retriever(Protocol):
    """What the orchestrator needs from a source retriever."""

    async def retrieve_extended(self, query: str, target_results: int = ...) -> List[CandidateSource]:
        ...


class Analyzer(Protocol):
    """What the orchestrator needs from a claim analyzer."""

    async def analyze(self, claim: str, sources: Sequence[CandidateSource]) -> AnalysisOutcome:
        ...


def source_domain(url: str) -> str:
    """Host of a URL, lowercased, without port or a leading ``www.``."""
    host = urlparse(url).hostname or url.lower()
    return host[4:] if host.startswith("www.") else host


def select_display_sources(
    sources: Iterable[CategorizedSource],
    max_per_category: int = DEFAULT_MAX_SOURCES_PER_CATEGORY,
) -> List[CategorizedSource]:
    """Pick the sources to show with a result.

    Within each stance, only the first source from each domain is kept
    and at most ``max_per_category`` sources are shown. Supporting sources
    come first, then contradicting, then neutral.
    """
    sources = list(sources)
    selected: List[CategorizedSource] = []
    for relevance in DISPLAY_ORDER:
        seen_domains = set()
        picked = 0
        for source in sources:
            if picked >= max_per_category:
                break
            if source.relevance != relevance:
                continue
            domain = source_domain(source.url)
            if domain in seen_domains:
                continue
            seen_domains.add(domain)
            selected.append(source)
            picked += 1
    return selected


class FactCheckOrchestrator:
    """Runs the fact-check pipeline for a claim.

    Cache hit: the stored result is returned as is. Cache miss: retrieve,
    analyze, select display sources, store and return. Nothing is stored
    when retrieval or analysis fails. Store calls are blocking and run in
    a worker thread.
    """

    def __init__(
        self,
        retriever: Retriever,
        analyzer: Analyzer,
        store: AnalysisStore,
        target_sources: int = DEFAULT_TARGET_SOURCES,
        max_sources_per_category: int = DEFAULT_MAX_SOURCES_PER_CATEGORY,
    ):
        """Initialize the orchestrator.

        Args:
            retriever: Source retriever
            analyzer: Claim analyzer
            store: Analysis cache
            target_sources: Number of sources to retrieve per claim
            max_sources_per_category: Display cap per stance
        """
        self._retriever = retriever
        self._analyzer = analyzer
        self._store = store
        self._target_sources = target_sources
        self._max_sources_per_category = max_sources_per_category
        logger.info("🔧 FactCheckOrchestrator initialized")

    async def analyze_claim(self, claim_text: str) -> AnalysisResult:
        """Fact-check a claim, serving it from the cache when possible.

        Args:
            claim_text: Claim as submitted

        Returns:
            The analysis result; ``cached`` tells whether it came from the cache

        Raises:
            ClaimValidationError: If the claim text is out of bounds
            SourceRetrievalError: If the search provider failed entirely
            NoSourcesFoundError: If no sources were found
            AnalysisError: If the language model step failed
        """
        claim = Claim.from_text(claim_text)

        cached = await asyncio.to_thread(self._store.get, claim.text)
        if cached is not None:
            logger.info(f"💾 Cache hit for claim: {claim.text[:50]}")
            return cached

        logger.info(f"🔍 Cache miss, starting fact check for claim: {claim.text[:100]}")
        sources = await self._retriever.retrieve_extended(claim.text, self._target_sources)
        if not sources:
            raise NoSourcesFoundError(f"No sources found for claim: {claim.text[:100]}")

        logger.info(f"📚 Found {len(sources)} sources, analyzing...")
        outcome = self._verified(await self._analyzer.analyze(claim.text, sources))

        result = AnalysisResult(
            id=str(uuid4()),
            claim_text=claim.text,
            accuracy_score=outcome.accuracy_score,
            agreement_score=outcome.agreement_score,
            disagreement_score=outcome.disagreement_score,
            neutral_score=outcome.neutral_score,
            summary=outcome.summary,
            summary_translations=outcome.summary_translations,
            sources=select_display_sources(outcome.sources, self._max_sources_per_category),
            total_sources_retrieved=len(sources),
            analyzed_at=datetime.now(timezone.utc),
            cached=False,
        )

        await asyncio.to_thread(self._store.set, result)
        logger.info(
            f"✅ Analysis {result.id} complete and cached: "
            f"{result.agreement_score}% agree, {result.disagreement_score}% disagree, "
            f"{result.neutral_score}% neutral"
        )
        return result

    def _verified(self, outcome: AnalysisOutcome) -> AnalysisOutcome:
        """Check the percentage invariant, recomputing from the labels if it is broken."""
        if percentages_sum_to_100(outcome.agreement_score, outcome.disagreement_score, outcome.neutral_score):
            return outcome

        logger.warning(
            f"⚠️ Analyzer percentages do not sum to 100 "
            f"({outcome.agreement_score}/{outcome.disagreement_score}/{outcome.neutral_score}), recomputing"
        )
        counts = outcome.relevance_counts()
        breakdown = normalize_percentages(
            counts[Relevance.SUPPORTING],
            counts[Relevance.CONTRADICTING],
            counts[Relevance.NEUTRAL],
        )
        return outcome.model_copy(
            update={
                "agreement_score": breakdown.agreement,
                "disagreement_score": breakdown.disagreement,
                "neutral_score": breakdown.neutral,
            }
        )
