"""Tests for the DuckDuckGo search client and result formatting."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import aiohttp
import pytest

from webscout.tools.web_tools.rate_limiter import RateLimiter
from webscout.tools.web_tools.search import (
    NO_RESULTS_MESSAGE,
    DuckDuckGoSearchClient,
    SearchResult,
    format_results_for_llm,
)


def _result_block(index: int, href: str | None = None) -> str:
    href = href or f"//duckduckgo.com/l/?uddg=https%3A%2F%2Fsite{index}.example%2Fpage%3Fid%3D{index}&rut=abc"
    return f"""
    <div class="result results_links web-result">
      <div class="links_main result__body">
        <h2 class="result__title"><a rel="nofollow" class="result__a" href="{href}">Result <b>{index}</b></a></h2>
        <a class="result__snippet" href="{href}">Snippet for   result {index}.</a>
      </div>
    </div>
    """


def _results_page(blocks: list[str]) -> str:
    return "<html><body><div id='links' class='results'>" + "".join(blocks) + "</div></body></html>"


TEN_RESULTS = _results_page([_result_block(i) for i in range(1, 11)])


@pytest.fixture()
def client() -> DuckDuckGoSearchClient:
    return DuckDuckGoSearchClient(rate_limiter=RateLimiter(1000))


class TestParseResults:
    def test_caps_results_and_numbers_positions(self, client):
        results = client.parse_results(TEN_RESULTS, max_results=2)

        assert [r.position for r in results] == [1, 2]
        assert results[0].title == "Result 1"
        assert results[1].link == "https://site2.example/page?id=2"

    def test_resolves_redirect_wrapper(self, client):
        results = client.parse_results(TEN_RESULTS, max_results=10)

        assert len(results) == 10
        assert all(r.link.startswith("https://site") for r in results)
        assert results[0].snippet == "Snippet for   result 1."

    def test_direct_links_are_kept(self, client):
        page = _results_page([_result_block(1, href="https://direct.example/a")])

        assert client.parse_results(page)[0].link == "https://direct.example/a"

    def test_skips_ads_and_keeps_positions_dense(self, client):
        page = _results_page([
            _result_block(1),
            _result_block(2, href="https://duckduckgo.com/y.js?ad_provider=x"),
            _result_block(3),
        ])

        results = client.parse_results(page)

        assert [r.title for r in results] == ["Result 1", "Result 3"]
        assert [r.position for r in results] == [1, 2]

    def test_skips_blocks_without_title_link(self, client):
        page = _results_page([
            '<div class="result"><div class="result__snippet">orphan</div></div>',
            '<div class="result"><h2 class="result__title">no anchor</h2></div>',
            _result_block(7),
        ])

        results = client.parse_results(page)

        assert len(results) == 1
        assert results[0].position == 1
        assert results[0].title == "Result 7"

    def test_missing_snippet_is_empty(self, client):
        page = _results_page([
            '<div class="result"><h2 class="result__title"><a href="https://x.example">X</a></h2></div>'
        ])

        assert client.parse_results(page)[0].snippet == ""

    def test_unrelated_page_yields_nothing(self, client):
        assert client.parse_results("<html><body><p>captcha</p></body></html>") == []


class TestSearch:
    @pytest.mark.asyncio
    async def test_returns_capped_results(self, client):
        client._fetch_results = AsyncMock(return_value=TEN_RESULTS)

        results = await client.search("python asyncio", max_results=2)

        assert len(results) == 2
        assert [r.position for r in results] == [1, 2]
        client._fetch_results.assert_awaited_once_with("python asyncio")

    @pytest.mark.asyncio
    async def test_acquires_permit(self, client):
        client.rate_limiter.acquire = AsyncMock()
        client._fetch_results = AsyncMock(return_value=TEN_RESULTS)

        await client.search("query")

        client.rate_limiter.acquire.assert_awaited_once()

    @pytest.mark.parametrize(
        "error",
        [asyncio.TimeoutError(), aiohttp.ClientConnectionError("refused"), RuntimeError("bad markup")],
    )
    @pytest.mark.asyncio
    async def test_failures_return_empty_list(self, client, error):
        client._fetch_results = AsyncMock(side_effect=error)

        assert await client.search("query") == []

    @pytest.mark.asyncio
    async def test_non_positive_cap_skips_request(self, client):
        client._fetch_results = AsyncMock(return_value=TEN_RESULTS)

        assert await client.search("query", max_results=0) == []
        client._fetch_results.assert_not_awaited()


class TestFormatting:
    def test_formats_numbered_list(self):
        results = [
            SearchResult(title="First", link="https://a.example", snippet="About A", position=1),
            SearchResult(title="Second", link="https://b.example", snippet="About B", position=2),
        ]

        text = format_results_for_llm(results)

        assert text == (
            "Found 2 search results:\n\n"
            "1. First\n"
            "   URL: https://a.example\n"
            "   Summary: About A\n"
            "\n"
            "2. Second\n"
            "   URL: https://b.example\n"
            "   Summary: About B\n"
        )

    def test_no_results_message(self):
        assert format_results_for_llm([]) == NO_RESULTS_MESSAGE
