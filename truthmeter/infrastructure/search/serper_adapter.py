"""Serper (Google search API) implementation of the search provider interface."""

import logging
from typing import Any, List, Optional

import httpx
from cachetools import TTLCache
from pydantic import BaseModel, Field

from ...domain.errors import SearchProviderError
from ...domain.ports.search_provider import SearchHit

logger = logging.getLogger(__name__)


class SerperConfig(BaseModel):
    """Configuration for the Serper adapter."""

    api_key: str = Field(..., description="Serper API key")
    base_url: str = Field(default="https://google.serper.dev", description="API base URL")
    timeout: float = Field(default=20.0, description="Request timeout in seconds")
    cache_ttl: int = Field(default=600, description="Page cache TTL in seconds")
    cache_maxsize: int = Field(default=256, description="Maximum cached pages")


class SerperSearchAdapter:
    """Serper implementation of the search provider interface.

    Serper returns 10 organic results per page and serves up to 10 pages
    for one query. Pages are memoized for a short TTL so that repeated
    searches for the same claim do not spend API quota.
    """

    PAGE_SIZE = 10
    MAX_PAGES = 10

    def __init__(
        self,
        config: Optional[SerperConfig] = None,
        provider_name: str = "Serper",
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            provider_name: Name of the provider
        """
        self._config = config or SerperConfig(api_key="")
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False
        self._cache = TTLCache(
            maxsize=self._config.cache_maxsize,
            ttl=self._config.cache_ttl,
        )

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize Serper provider: SERPER_API_KEY is required")

        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={
                    "X-API-KEY": self._config.api_key,
                    "Content-Type": "application/json",
                },
            )
        self._initialized = True

    async def search_page(
        self,
        query: str,
        page: int = 1,
        page_size: int = PAGE_SIZE,
    ) -> List[SearchHit]:
        """Fetch one page of organic results.

        Args:
            query: Search query
            page: 1-based page number
            page_size: Results per page

        Returns:
            Hits in rank order, possibly empty

        Raises:
            SearchProviderError: On HTTP errors, rate limiting, timeouts or
                an unreadable response
        """
        if not self._client:
            raise RuntimeError("Provider not initialized")

        cache_key = f"search:{query}:{page}:{page_size}"
        if cache_key in self._cache:
            logger.debug(f"Serper cache hit: {cache_key}")
            return self._cache[cache_key]

        try:
            response = await self._client.post(
                "/search",
                json={"q": query, "page": page, "num": page_size},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise SearchProviderError(
                f"Serper API error (page {page}): {e.response.status_code} - {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise SearchProviderError(f"Serper request failed (page {page}): {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise SearchProviderError(f"Serper returned invalid JSON (page {page}): {e}") from e

        hits = self._parse_organic(data, page, page_size)
        self._cache[cache_key] = hits
        return hits

    def _parse_organic(self, data: Any, page: int, page_size: int) -> List[SearchHit]:
        organic = data.get("organic") if isinstance(data, dict) else None
        if not organic:
            return []

        hits = []
        offset = (page - 1) * page_size
        for index, result in enumerate(organic):
            if not isinstance(result, dict) or not result.get("link"):
                continue
            position = offset + index
            hits.append(
                SearchHit(
                    url=result["link"],
                    title=result.get("title") or "",
                    snippet=result.get("snippet") or "",
                    rank=position + 1,
                    # Score decreases with page and position
                    score=1 - position / 100,
                    published_date=result.get("date"),
                )
            )
        return hits

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._cache.clear()
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def page_size(self) -> int:
        return self.PAGE_SIZE

    @property
    def max_pages(self) -> int:
        return self.MAX_PAGES

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None
