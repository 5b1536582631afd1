"""Tavily implementation of the search provider interface."""

from typing import Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.errors import SearchProviderError
from ...domain.ports.search_provider import SearchHit


class TavilyConfig(BaseModel):
    """Configuration for the Tavily adapter."""

    api_key: str = Field(..., description="Tavily API key")
    base_url: str = Field(default="https://api.tavily.com", description="API base URL")
    timeout: float = Field(default=20.0, description="Request timeout in seconds")
    search_depth: str = Field(default="advanced", description="basic or advanced")


class TavilySearchAdapter:
    """Tavily implementation of the search provider interface.

    Tavily has no pagination: one request returns at most 20 results, so
    only page 1 is ever fetched.
    """

    PAGE_SIZE = 20
    MAX_PAGES = 1

    def __init__(
        self,
        config: Optional[TavilyConfig] = None,
        provider_name: str = "Tavily",
    ):
        """Initialize the adapter."""
        self._config = config or TavilyConfig(api_key="")
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize Tavily provider: TAVILY_API_KEY is required")

        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={"Content-Type": "application/json"},
            )
        self._initialized = True

    async def search_page(
        self,
        query: str,
        page: int = 1,
        page_size: int = PAGE_SIZE,
    ) -> List[SearchHit]:
        """Fetch the single page Tavily offers; later pages are empty."""
        if not self._client:
            raise RuntimeError("Provider not initialized")
        if page > self.MAX_PAGES:
            return []

        try:
            response = await self._client.post(
                "/search",
                json={
                    "api_key": self._config.api_key,
                    "query": query,
                    "max_results": min(page_size, self.PAGE_SIZE),
                    "search_depth": self._config.search_depth,
                    "include_answer": False,
                    "include_raw_content": False,
                },
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise SearchProviderError(
                f"Tavily API error: {e.response.status_code} - {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise SearchProviderError(f"Tavily request failed: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise SearchProviderError(f"Tavily returned invalid JSON: {e}") from e

        results = data.get("results") if isinstance(data, dict) else None
        return [
            SearchHit(
                url=result["url"],
                title=result.get("title") or "",
                snippet=result.get("content") or "",
                rank=index + 1,
                score=float(result.get("score") or 0.0),
                published_date=result.get("published_date"),
            )
            for index, result in enumerate(results or [])
            if isinstance(result, dict) and result.get("url")
        ]

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
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
