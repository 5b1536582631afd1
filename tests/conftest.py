"""Test configuration and common fixtures."""

import json
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional

import pytest

from truthmeter.domain.errors import LLMProviderError, SearchProviderError
from truthmeter.domain.models.source import CandidateSource
from truthmeter.domain.ports.search_provider import SearchHit
from truthmeter.infrastructure.storage.sqlite_store import SQLiteAnalysisStore

_URL_LINE = re.compile(r"^URL: (.+)$", re.MULTILINE)


class FakeClock:
    """Settable clock for TTL tests."""

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeSearchProvider:
    """In-memory search provider producing ``total_hits`` results per query.

    URLs are unique per query unless ``shared_urls`` is set, in which case
    every query returns the same URLs.
    """

    def __init__(
        self,
        total_hits: int = 100,
        page_size: int = 10,
        max_pages: int = 10,
        failing_pages: Iterable[int] = (),
        failing_queries: Iterable[str] = (),
        shared_urls: bool = False,
    ):
        self.total_hits = total_hits
        self._page_size = page_size
        self._max_pages = max_pages
        self.failing_pages = set(failing_pages)
        self.failing_queries = set(failing_queries)
        self.shared_urls = shared_urls
        self.calls: List[tuple] = []

    async def initialize(self) -> None:
        pass

    async def search_page(self, query: str, page: int = 1, page_size: int = 10) -> List[SearchHit]:
        self.calls.append((query, page, page_size))
        if page in self.failing_pages or query in self.failing_queries:
            raise SearchProviderError(f"page {page} of {query!r} failed")

        start = (page - 1) * page_size
        end = min(start + page_size, self.total_hits)
        slug = "shared" if self.shared_urls else query.replace(" ", "-")
        return [
            SearchHit(
                url=f"https://site{n}.example.com/{slug}",
                title=f"Result {n}",
                snippet=f"Snippet {n} " * 100,
                rank=n + 1,
                score=1 - n / 100,
            )
            for n in range(start, end)
        ]

    async def shutdown(self) -> None:
        pass

    @property
    def provider_name(self) -> str:
        return "Fake"

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def max_pages(self) -> int:
        return self._max_pages

    @property
    def is_available(self) -> bool:
        return True


class ScriptedLLMProvider:
    """LLM provider that answers by recognizing the analyzer's prompts.

    Categorization prompts are answered by labelling every ``URL:`` line
    with ``labeler(url)``. Summary and translation prompts get the
    configured replies. Names in ``failing`` make that call raise
    ``LLMProviderError``; ``errors`` maps a call name to any exception to raise.
    """

    def __init__(
        self,
        labeler: Callable[[str], str] = lambda url: "supporting",
        summary_reply: Optional[str] = None,
        translation_reply: Optional[str] = None,
        failing: Iterable[str] = (),
        errors: Optional[Dict[str, BaseException]] = None,
    ):
        self.labeler = labeler
        self.summary_reply = summary_reply or json.dumps(
            {"accuracyScore": 72.46, "summary": "Most sources support the claim."}
        )
        self.translation_reply = translation_reply or json.dumps(
            {"fr": "La plupart des sources soutiennent l'affirmation.", "es": "La mayoría de las fuentes lo apoyan."}
        )
        self.failing = set(failing)
        self.errors = errors or {}
        self.calls: List[Dict[str, object]] = []

    async def initialize(self) -> None:
        pass

    async def complete_json(self, system_prompt: str, user_prompt: str, max_tokens: int = 1000) -> str:
        if "Categorize each of these" in user_prompt:
            kind = "categorize"
        elif "Write a brief 2-3 sentence summary" in user_prompt:
            kind = "summary"
        elif user_prompt.startswith("Translate this fact-checking summary"):
            kind = "translate"
        else:
            raise AssertionError(f"Unexpected prompt: {user_prompt[:80]}")

        self.calls.append({"kind": kind, "system": system_prompt, "user": user_prompt, "max_tokens": max_tokens})
        if kind in self.failing:
            raise LLMProviderError(f"{kind} failed")
        if kind in self.errors:
            raise self.errors[kind]

        if kind == "categorize":
            urls = _URL_LINE.findall(user_prompt)
            return json.dumps({"sources": [{"url": url, "relevance": self.labeler(url)} for url in urls]})
        if kind == "summary":
            return self.summary_reply
        return self.translation_reply

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call["kind"] == kind)

    async def shutdown(self) -> None:
        pass

    @property
    def provider_name(self) -> str:
        return "Scripted"

    @property
    def is_available(self) -> bool:
        return True


def build_sources(count: int, domain: Optional[str] = None) -> List[CandidateSource]:
    """Candidate sources on distinct domains, or all on ``domain``."""
    return [
        CandidateSource(
            url=f"https://{domain or f'site{n}.example.com'}/article-{n}",
            title=f"Article {n}",
            content=f"Content of article {n}",
            relevance_score=1 - n / 1000,
        )
        for n in range(count)
    ]


@pytest.fixture
def make_sources() -> Callable[..., List[CandidateSource]]:
    """Provide the candidate source builder."""
    return build_sources


@pytest.fixture
def clock() -> FakeClock:
    """Provide a settable clock."""
    return FakeClock()


@pytest.fixture
def store(tmp_path, clock) -> SQLiteAnalysisStore:
    """Provide an initialized store in a temporary database."""
    analysis_store = SQLiteAnalysisStore(str(tmp_path / "analyses.db"), clock=clock)
    analysis_store.init_schema()
    return analysis_store


@pytest.fixture
def search_provider() -> FakeSearchProvider:
    """Provide a search provider with 100 hits per query."""
    return FakeSearchProvider()


@pytest.fixture
def llm_provider() -> ScriptedLLMProvider:
    """Provide an LLM provider labelling every source as supporting."""
    return ScriptedLLMProvider()


@pytest.fixture
def make_search_provider() -> Callable[..., FakeSearchProvider]:
    """Provide the fake search provider class for custom setups."""
    return FakeSearchProvider


@pytest.fixture
def make_llm_provider() -> Callable[..., ScriptedLLMProvider]:
    """Provide the scripted LLM provider class for custom setups."""
    return ScriptedLLMProvider
