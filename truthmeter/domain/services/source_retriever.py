"""Service for retrieving candidate sources from a web search provider."""

import asyncio
import logging
import math
import time
from typing import Iterable, List, Sequence

from ..errors import SourceRetrievalError
from ..models.source import CandidateSource
from ..ports.search_provider import SearchHit, SearchProvider

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 100
MAX_RESULTS_PER_ROUND = 100
DEFAULT_CONTENT_LENGTH = 500

# Appended to the claim when one search round cannot supply enough results
QUERY_SUFFIXES = ("fact check", "evidence", "research", "news")


def deduplicate_by_url(sources: Iterable[CandidateSource]) -> List[CandidateSource]:
    """Drop repeated URLs, keeping the first occurrence and the input order."""
    seen = set()
    unique = []
    for source in sources:
        if source.url in seen:
            continue
        seen.add(source.url)
        unique.append(source)
    return unique


def _raise_if_cancelled(result: object) -> None:
    if isinstance(result, BaseException) and not isinstance(result, Exception):
        raise result


class SourceRetriever:
    """Collects candidate sources for a claim.

    Pages are fetched in parallel. A failing page counts as an empty page,
    so retrieval only fails when every page fails.
    """

    def __init__(
        self,
        search_provider: SearchProvider,
        max_content_length: int = DEFAULT_CONTENT_LENGTH,
    ):
        """Initialize the retriever.

        Args:
            search_provider: Paginated web search provider
            max_content_length: Snippets are cut to this many characters
        """
        self._provider = search_provider
        self._max_content_length = max_content_length

    async def retrieve(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> List[CandidateSource]:
        """Retrieve up to ``max_results`` unique sources in one search round.

        Args:
            query: Search query, usually the claim text
            max_results: Maximum number of sources to return

        Returns:
            Sources in provider rank order, deduplicated by URL

        Raises:
            ValueError: If the query is empty or max_results is not positive
            SourceRetrievalError: If every page request failed
        """
        query = query.strip()
        if not query:
            raise ValueError("Query must not be empty")
        if max_results < 1:
            raise ValueError("max_results must be positive")

        page_size = self._provider.page_size
        num_pages = max(1, min(math.ceil(max_results / page_size), self._provider.max_pages))
        logger.info(
            f"🔎 Searching {self._provider.provider_name} for {query[:80]!r} "
            f"({max_results} results, {num_pages} pages in parallel)"
        )
        started = time.monotonic()

        pages = await asyncio.gather(
            *(
                self._provider.search_page(query, page=page, page_size=page_size)
                for page in range(1, num_pages + 1)
            ),
            return_exceptions=True,
        )

        hits: List[SearchHit] = []
        failed_pages = 0
        for page_number, page in enumerate(pages, start=1):
            _raise_if_cancelled(page)
            if isinstance(page, Exception):
                failed_pages += 1
                logger.warning(f"⚠️ Search page {page_number} failed: {type(page).__name__}: {page}")
                continue
            hits.extend(page)

        if failed_pages == num_pages:
            raise SourceRetrievalError(
                f"All {num_pages} search pages failed for query {query[:80]!r}"
            )

        sources = deduplicate_by_url(self._to_source(hit) for hit in hits if hit.url)[:max_results]
        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(
            f"✅ Retrieved {len(sources)} unique sources in {elapsed_ms:.0f}ms "
            f"({failed_pages} of {num_pages} pages failed)"
        )
        return sources

    async def retrieve_extended(self, query: str, target_results: int = DEFAULT_MAX_RESULTS) -> List[CandidateSource]:
        """Retrieve sources, adding suffixed query variants past one round.

        With a target of one round or less this is ``retrieve``. Otherwise
        the claim and its suffixed variants are searched in parallel and
        merged by URL. A variant whose round fails is skipped.

        Raises:
            SourceRetrievalError: If every variant failed
        """
        if target_results <= MAX_RESULTS_PER_ROUND:
            return await self.retrieve(query, target_results)

        query = query.strip()
        variants = self.query_variants(query, math.ceil(target_results / MAX_RESULTS_PER_ROUND))
        logger.info(f"🔎 Using {len(variants)} query variants for {target_results} results")

        rounds = await asyncio.gather(
            *(self.retrieve(variant, MAX_RESULTS_PER_ROUND) for variant in variants),
            return_exceptions=True,
        )

        merged: List[CandidateSource] = []
        failed = 0
        for variant, result in zip(variants, rounds):
            _raise_if_cancelled(result)
            if isinstance(result, Exception):
                failed += 1
                logger.warning(f"⚠️ Query variant {variant!r} failed: {result}")
                continue
            merged.extend(result)

        if failed == len(variants):
            raise SourceRetrievalError(f"All {len(variants)} query variants failed")

        sources = deduplicate_by_url(merged)[:target_results]
        logger.info(f"✅ Retrieved {len(sources)} unique sources from {len(variants)} queries")
        return sources

    @staticmethod
    def query_variants(query: str, count: int) -> Sequence[str]:
        """The bare query followed by suffixed variants, ``count`` in total."""
        variants = [query] + [f"{query} {suffix}" for suffix in QUERY_SUFFIXES]
        return variants[: max(1, min(count, len(variants)))]

    def _to_source(self, hit: SearchHit) -> CandidateSource:
        return CandidateSource(
            url=hit.url,
            title=hit.title,
            content=hit.snippet[: self._max_content_length],
            relevance_score=hit.score,
            published_date=hit.published_date,
        )
