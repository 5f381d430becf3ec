"""Unit tests for the metadata enricher."""

import asyncio
import time
from collections.abc import AsyncIterator, Sequence

import httpx
import pytest

from hn_digest.enricher import (
    EnrichedStory,
    EnrichMetrics,
    EnrichOutcome,
    Metadata,
    MetadataEnricher,
    should_enrich,
)
from hn_digest.fetch import AsyncHttpFetcher
from hn_digest.ranker import CandidateItem, ScoredItem
from tests.helpers.http import RecordingRouter, html_response


PAGE_URL = "https://blog.test/post"
PAGE = (
    "<html><head>"
    '<meta property="og:description" content="A post about models.">'
    '<meta property="og:image" content="https://blog.test/card.png">'
    "</head><body></body></html>"
)


def _enrich(router: RecordingRouter, url: str | None) -> Metadata:
    async def go() -> Metadata:
        async with httpx.AsyncClient(transport=router.transport()) as client:
            return await MetadataEnricher(AsyncHttpFetcher(client)).enrich(url)

    return asyncio.run(go())


def _enrich_many(
    router: RecordingRouter, stories: Sequence[ScoredItem]
) -> list[EnrichedStory]:
    async def go() -> list[EnrichedStory]:
        async with httpx.AsyncClient(transport=router.transport()) as client:
            return await MetadataEnricher(AsyncHttpFetcher(client)).enrich_many(stories)

    return asyncio.run(go())


def _scored(item_id: int, url: str | None) -> ScoredItem:
    item = CandidateItem(id=item_id, title=f"Story {item_id}", url=url)
    return ScoredItem(item=item, relevance_score=30, is_recent=True)


class TestShouldEnrich:
    """Tests for link eligibility."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/a",
            "http://example.com",
            "https://sub.example.org/path?q=1",
        ],
    )
    def test_external_links(self, url: str) -> None:
        """External http(s) links are enriched."""
        assert should_enrich(url)

    @pytest.mark.parametrize(
        "url",
        [
            None,
            "",
            "https://news.ycombinator.com/item?id=1",
            "https://NEWS.YCOMBINATOR.COM/item?id=1",
            "ftp://example.com/file",
            "mailto:someone@example.com",
            "not a url",
        ],
    )
    def test_skipped_links(self, url: str | None) -> None:
        """Missing, non-http and discussion links are skipped."""
        assert not should_enrich(url)


class TestEnrich:
    """Tests for single link enrichment."""

    def test_success(self) -> None:
        """Metadata is extracted from a fetched page."""
        router = RecordingRouter({PAGE_URL: html_response(PAGE)})
        metadata = _enrich(router, PAGE_URL)

        assert metadata == Metadata(
            image="https://blog.test/card.png",
            description="A post about models.",
        )

    def test_no_url_no_request(self) -> None:
        """Items without a link are not fetched."""
        router = RecordingRouter()

        assert _enrich(router, None).is_empty
        assert router.requests == []

    def test_discussion_link_not_fetched(self) -> None:
        """The platform's own threads are not fetched."""
        router = RecordingRouter()

        assert _enrich(router, "https://news.ycombinator.com/item?id=5").is_empty
        assert router.requests == []

    @pytest.mark.parametrize(
        "route",
        [
            httpx.Response(404, text="missing"),
            httpx.Response(500),
            httpx.ReadTimeout("slow"),
            httpx.ConnectError("refused"),
        ],
    )
    def test_failures_yield_empty(self, route: httpx.Response | Exception) -> None:
        """Any fetch failure yields empty metadata."""
        router = RecordingRouter({PAGE_URL: route})

        assert _enrich(router, PAGE_URL).is_empty

    def test_non_html_skipped(self) -> None:
        """Non-HTML responses are not parsed."""
        router = RecordingRouter(
            {
                PAGE_URL: httpx.Response(
                    200, content=b"%PDF-1.7", headers={"content-type": "application/pdf"}
                )
            }
        )

        assert _enrich(router, PAGE_URL).is_empty

    def test_timeout_passed_to_fetch(self) -> None:
        """The enrichment timeout is applied to the request."""
        router = RecordingRouter({PAGE_URL: html_response(PAGE)})

        async def go() -> None:
            async with httpx.AsyncClient(transport=router.transport()) as client:
                enricher = MetadataEnricher(AsyncHttpFetcher(client), timeout_seconds=2.5)
                await enricher.enrich(PAGE_URL)

        asyncio.run(go())
        timeout = router.requests[0].extensions["timeout"]
        assert timeout["read"] == 2.5


class TestEnrichMany:
    """Tests for batch enrichment."""

    def test_order_kept_and_failures_isolated(self) -> None:
        """Each story gets its own result in input order."""
        ok_url = "https://ok.test/"
        bad_url = "https://bad.test/"
        router = RecordingRouter(
            {
                ok_url: html_response(PAGE),
                bad_url: httpx.ConnectError("refused"),
            }
        )
        stories = [_scored(1, bad_url), _scored(2, None), _scored(3, ok_url)]
        enriched = _enrich_many(router, stories)

        assert [e.scored.item.id for e in enriched] == [1, 2, 3]
        assert enriched[0].metadata.is_empty
        assert enriched[1].metadata.is_empty
        assert enriched[2].metadata.description == "A post about models."
        assert enriched[2].scored is stories[2]

    def test_empty(self) -> None:
        """No stories, no requests."""
        router = RecordingRouter()

        assert _enrich_many(router, []) == []
        assert router.requests == []


def _trickling_page(request: httpx.Request) -> httpx.Response:
    """A page that sends one byte every 100ms for three seconds."""

    async def trickle() -> AsyncIterator[bytes]:
        yield b"<html><head>"
        for _ in range(30):
            await asyncio.sleep(0.1)
            yield b" "

    return httpx.Response(200, content=trickle(), headers={"content-type": "text/html"})


class TestEnrichDeadline:
    """Tests for the per-story deadline."""

    def test_trickling_page_cut_off(self) -> None:
        """A page that keeps sending bytes is abandoned at the deadline."""
        router = RecordingRouter({PAGE_URL: _trickling_page})

        async def go() -> Metadata:
            async with httpx.AsyncClient(transport=router.transport()) as client:
                enricher = MetadataEnricher(AsyncHttpFetcher(client), timeout_seconds=0.3)
                return await enricher.enrich(PAGE_URL)

        start = time.perf_counter()
        metadata = asyncio.run(go())
        elapsed = time.perf_counter() - start

        assert metadata.is_empty
        assert elapsed < 1.5
        assert EnrichMetrics.get_instance().count(EnrichOutcome.TIMED_OUT) == 1

    def test_slow_page_does_not_hold_up_batch(self) -> None:
        """Other stories finish and keep their metadata."""
        slow_url = "https://slow.test/"
        router = RecordingRouter(
            {slow_url: _trickling_page, PAGE_URL: html_response(PAGE)}
        )

        async def go() -> list[EnrichedStory]:
            async with httpx.AsyncClient(transport=router.transport()) as client:
                enricher = MetadataEnricher(AsyncHttpFetcher(client), timeout_seconds=0.3)
                return await enricher.enrich_many(
                    [_scored(1, slow_url), _scored(2, PAGE_URL)]
                )

        start = time.perf_counter()
        enriched = asyncio.run(go())
        elapsed = time.perf_counter() - start

        assert elapsed < 1.5
        assert enriched[0].metadata.is_empty
        assert enriched[1].metadata.description == "A post about models."


class TestEnrichEncoding:
    """Tests for non-UTF-8 pages."""

    def test_latin1_page(self) -> None:
        """A page served as Latin-1 keeps its accented characters."""
        body = (
            "<html><head>"
            '<meta name="description" content="Résumé parsing with a café LLM">'
            "</head></html>"
        ).encode("latin-1")
        router = RecordingRouter(
            {
                PAGE_URL: httpx.Response(
                    200,
                    content=body,
                    headers={"content-type": "text/html; charset=ISO-8859-1"},
                )
            }
        )

        metadata = _enrich(router, PAGE_URL)

        assert metadata.description == "Résumé parsing with a café LLM"


class TestEnrichMetrics:
    """Tests for outcome counting."""

    def test_outcomes_counted(self) -> None:
        """Each story is counted under how its enrichment ended."""
        bare_url = "https://bare.test/"
        broken_url = "https://broken.test/"
        router = RecordingRouter(
            {
                PAGE_URL: html_response(PAGE),
                bare_url: html_response("<html><head></head></html>"),
                broken_url: httpx.ConnectError("refused"),
            }
        )

        _enrich_many(
            router,
            [
                _scored(1, PAGE_URL),
                _scored(2, bare_url),
                _scored(3, broken_url),
                _scored(4, None),
                _scored(5, "https://news.ycombinator.com/item?id=5"),
            ],
        )

        assert EnrichMetrics.get_instance().to_dict() == {
            "enriched": 1,
            "empty": 1,
            "skipped": 2,
            "failed": 1,
            "timed_out": 0,
        }
