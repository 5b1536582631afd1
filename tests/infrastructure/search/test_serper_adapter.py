"""Tests for the Serper search adapter."""

import json

import httpx
import pytest
import pytest_asyncio

from truthmeter.domain.errors import SearchProviderError
from truthmeter.infrastructure.search.serper_adapter import SerperConfig, SerperSearchAdapter


def organic_page(page: int, count: int = 10):
    return {
        "organic": [
            {
                "title": f"Title {page}-{i}",
                "link": f"https://example.com/{page}/{i}",
                "snippet": f"Snippet {page}-{i}",
                "date": "Jan 1, 2024" if i == 0 else None,
            }
            for i in range(count)
        ]
    }


class SerperStub:
    """Request recorder serving canned Serper responses."""

    def __init__(self, status_code: int = 200, body=None):
        self.status_code = status_code
        self.body = body
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append((request, payload))
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="quota exceeded")
        if self.body is not None:
            return httpx.Response(200, content=self.body)
        return httpx.Response(200, json=organic_page(payload["page"]))


@pytest.fixture
def stub() -> SerperStub:
    return SerperStub()


@pytest_asyncio.fixture
async def adapter(stub):
    """Provide an adapter whose client talks to the stub."""
    adapter = SerperSearchAdapter(SerperConfig(api_key="test-key"))
    adapter._client = httpx.AsyncClient(
        base_url="https://google.serper.dev",
        headers={"X-API-KEY": "test-key"},
        transport=httpx.MockTransport(stub),
    )
    yield adapter
    await adapter.shutdown()


@pytest.mark.asyncio
async def test_search_page_maps_organic_results(adapter, stub):
    hits = await adapter.search_page("coffee mortality", page=2, page_size=10)

    request, payload = stub.requests[0]
    assert request.url.path == "/search"
    assert request.headers["X-API-KEY"] == "test-key"
    assert payload == {"q": "coffee mortality", "page": 2, "num": 10}

    assert len(hits) == 10
    assert hits[0].url == "https://example.com/2/0"
    assert hits[0].title == "Title 2-0"
    assert hits[0].snippet == "Snippet 2-0"
    assert hits[0].published_date == "Jan 1, 2024"
    assert hits[0].rank == 11
    assert hits[0].score == pytest.approx(0.9)
    assert hits[1].published_date is None


@pytest.mark.asyncio
async def test_scores_decrease_across_pages(adapter):
    first = await adapter.search_page("coffee", page=1)
    second = await adapter.search_page("coffee", page=2)

    scores = [hit.score for hit in first + second]
    assert scores == sorted(scores, reverse=True)
    assert first[0].score == 1.0


@pytest.mark.asyncio
async def test_pages_are_cached(adapter, stub):
    await adapter.search_page("coffee", page=1)
    await adapter.search_page("coffee", page=1)
    await adapter.search_page("coffee", page=2)

    assert len(stub.requests) == 2


@pytest.mark.asyncio
async def test_missing_organic_results_give_empty_page(stub, adapter):
    stub.body = b'{"searchParameters": {}}'

    assert await adapter.search_page("nothing here") == []


@pytest.mark.asyncio
async def test_results_without_link_are_skipped(stub, adapter):
    stub.body = json.dumps({"organic": [{"title": "no link"}, {"link": "https://a.com", "title": "A"}]}).encode()

    hits = await adapter.search_page("coffee")

    assert [hit.url for hit in hits] == ["https://a.com"]


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [401, 429, 500])
async def test_http_errors_raise_provider_error(adapter, stub, status_code):
    stub.status_code = status_code

    with pytest.raises(SearchProviderError) as exc_info:
        await adapter.search_page("coffee")
    assert str(status_code) in str(exc_info.value)


@pytest.mark.asyncio
async def test_invalid_json_raises_provider_error(adapter, stub):
    stub.body = b"<html>not json</html>"

    with pytest.raises(SearchProviderError):
        await adapter.search_page("coffee")


@pytest.mark.asyncio
async def test_timeout_raises_provider_error():
    def timeout(request):
        raise httpx.ReadTimeout("timed out", request=request)

    adapter = SerperSearchAdapter(SerperConfig(api_key="test-key"))
    adapter._client = httpx.AsyncClient(base_url="https://google.serper.dev", transport=httpx.MockTransport(timeout))

    with pytest.raises(SearchProviderError):
        await adapter.search_page("coffee")
    await adapter.shutdown()


@pytest.mark.asyncio
async def test_initialize_requires_api_key():
    with pytest.raises(ConnectionError):
        await SerperSearchAdapter(SerperConfig(api_key="")).initialize()


@pytest.mark.asyncio
async def test_lifecycle():
    adapter = SerperSearchAdapter(SerperConfig(api_key="test-key"))
    assert not adapter.is_available

    await adapter.initialize()
    assert adapter.is_available
    assert adapter.page_size == 10
    assert adapter.max_pages == 10

    await adapter.shutdown()
    assert not adapter.is_available


@pytest.mark.asyncio
async def test_search_before_initialize_fails():
    with pytest.raises(RuntimeError):
        await SerperSearchAdapter(SerperConfig(api_key="test-key")).search_page("coffee")
