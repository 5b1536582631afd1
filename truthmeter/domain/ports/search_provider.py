"""Search provider interface for source retrieval."""

from typing import List, Optional, Protocol

from pydantic import BaseModel, Field


class SearchHit(BaseModel):
    """One organic result returned by a web search provider."""

    url: str = Field(..., description="Result URL")
    title: str = Field(default="", description="Result title")
    snippet: str = Field(default="", description="Result snippet")
    rank: int = Field(..., description="1-based position across all pages")
    score: float = Field(..., description="Provider or position-derived score")
    published_date: Optional[str] = Field(None, description="Publication date if known")


class SearchProvider(Protocol):
    """Protocol for paginated web search providers.

    ``search_page`` raises ``SearchProviderError`` on any failure of that
    single page, including rate limiting and timeouts.
    """

    async def initialize(self) -> None:
        """Initialize the provider."""
        ...

    async def search_page(
        self,
        query: str,
        page: int = 1,
        page_size: int = 10,
    ) -> List[SearchHit]:
        """Fetch one page of results for the query."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def page_size(self) -> int:
        """Results per page the provider returns."""
        ...

    @property
    def max_pages(self) -> int:
        """Pages one query may request."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        ...
