"""End-to-end digest runs against a mocked Hacker News API and webhook."""

import asyncio
import json
from typing import Any

import httpx
import pytest

from hn_digest.enricher import EnrichMetrics, EnrichOutcome
from hn_digest.fetch import FetchMetrics
from hn_digest.fetch.constants import PURPOSE_ENRICH, PURPOSE_SOURCE
from hn_digest.pipeline import DigestRunResult, run_digest
from hn_digest.publisher import PublishError
from hn_digest.settings import DigestConfig
from hn_digest.source import SourceError
from hn_digest.source.constants import HN_API_BASE_URL
from tests.helpers.http import RecordingRouter, html_response, json_response
from tests.helpers.time import FIXED_NOW, FIXED_NOW_TS, ONE_DAY, ONE_HOUR


WEBHOOK = "https://hooks.slack.test/services/T1/B2/token"
TOP_URL = f"{HN_API_BASE_URL}/topstories.json"


def _item_url(item_id: int) -> str:
    return f"{HN_API_BASE_URL}/item/{item_id}.json"


def _story(item_id: int, title: str, **extra: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": item_id,
        "type": "story",
        "by": "someone",
        "title": title,
        "score": 100,
        "time": FIXED_NOW_TS - ONE_HOUR,
        "descendants": 0,
    }
    record.update(extra)
    return record


def _router(stories: list[dict[str, Any]], **routes: Any) -> RecordingRouter:
    router = RecordingRouter({TOP_URL: json_response([s["id"] for s in stories])})
    for story in stories:
        router.routes[_item_url(story["id"])] = json_response(story)
    router.routes[WEBHOOK] = httpx.Response(200, text="ok")
    router.routes.update(routes)
    return router


def _run(router: RecordingRouter, **overrides: Any) -> DigestRunResult:
    config = DigestConfig(webhook_url=WEBHOOK, **overrides)
    return asyncio.run(
        run_digest(config, "test-run", now=FIXED_NOW, transport=router.transport())
    )


def _posted_body(router: RecordingRouter) -> dict[str, Any]:
    posts = [r for r in router.requests if r.method == "POST"]
    assert len(posts) == 1
    return json.loads(posts[0].content)


class TestDigestRun:
    """Full runs that publish."""

    def test_relevant_story_beats_popular_irrelevant_one(self) -> None:
        """Only AI stories make the digest, whatever their popularity."""
        router = _router(
            [
                _story(1, "Local bakery wins award", score=900),
                _story(2, "Anthropic releases new Claude model", score=50),
            ]
        )
        result = _run(router)

        assert result.published
        assert [s.scored.item.id for s in result.stories] == [2]
        body = _posted_body(router)
        section = body["blocks"][2]["text"]["text"]
        assert section.startswith("*1. Anthropic releases new Claude model*")
        assert "bakery" not in body["text"]

    def test_ordering_and_cap(self) -> None:
        """Stories are ordered by relevance and capped."""
        stories = [
            _story(10 + i, f"OpenAI ships feature {i}", score=10 * i) for i in range(8)
        ]
        stories.append(_story(30, "A new LLM for chemistry", score=5000))
        router = _router(stories)

        result = _run(router, story_cap=5)

        ids = [s.scored.item.id for s in result.stories]
        assert ids == [17, 16, 15, 14, 13]
        assert result.ranker_result.stories_in == 9
        assert result.ranker_result.dropped_by_reason() == {"over_cap": 4}

    def test_stale_and_failed_items_dropped(self) -> None:
        """Old stories and unavailable records never reach the digest."""
        router = _router(
            [
                _story(1, "OpenAI news", time=FIXED_NOW_TS - 2 * ONE_DAY),
                _story(2, "ChatGPT update"),
                _story(3, "Gemini launch", deleted=True),
            ],
            **{_item_url(4): httpx.ReadTimeout("slow")},
        )
        router.routes[TOP_URL] = json_response([1, 2, 3, 4])

        result = _run(router)

        assert result.candidate_ids == 4
        assert result.candidates_fetched == 2
        assert [s.scored.item.id for s in result.stories] == [2]

    def test_enrichment_failure_does_not_abort(self) -> None:
        """A page that cannot be fetched leaves its story without metadata."""
        good = "https://good.test/post"
        bad = "https://bad.test/post"
        page = (
            '<html><head><meta property="og:description" content="Benchmarks inside">'
            '<meta property="og:image" content="https://good.test/card.png">'
            "</head></html>"
        )
        router = _router(
            [
                _story(1, "Claude 5 benchmarks", url=good, score=300),
                _story(2, "Claude in the terminal", url=bad, score=200),
            ],
            **{good: html_response(page), bad: httpx.ConnectError("refused")},
        )

        result = _run(router)

        assert result.published
        assert result.stories[0].metadata.description == "Benchmarks inside"
        assert result.stories[1].metadata.is_empty
        blocks = _posted_body(router)["blocks"]
        assert blocks[2]["accessory"]["image_url"] == "https://good.test/card.png"
        assert "accessory" not in blocks[4]

        fetch = FetchMetrics.get_instance()
        assert fetch.counters(PURPOSE_SOURCE).responses == 3
        assert fetch.counters(PURPOSE_ENRICH).failures == {"CONNECTION_ERROR": 1}
        assert EnrichMetrics.get_instance().count(EnrichOutcome.ENRICHED) == 1
        assert EnrichMetrics.get_instance().count(EnrichOutcome.FAILED) == 1

    def test_discussion_threads_not_scraped(self) -> None:
        """Stories without an external link are not enriched."""
        router = _router([_story(1, "Ask HN: Which LLM do you use?")])

        result = _run(router)

        assert result.stories[0].metadata.is_empty
        assert not any("news.ycombinator.com" in u for u in router.requested_urls)
        section = _posted_body(router)["blocks"][2]["text"]["text"]
        assert "<https://news.ycombinator.com/item?id=1|news.ycombinator.com>" in section

    def test_no_relevant_stories(self) -> None:
        """A day without AI stories still posts a notice."""
        router = _router([_story(1, "Local bakery wins award")])

        result = _run(router)

        assert result.stories == []
        assert result.published
        blocks = _posted_body(router)["blocks"]
        assert [b["type"] for b in blocks] == ["header", "divider", "section"]
        assert blocks[2]["text"]["text"] == "No AI-related stories found today."

    def test_header_uses_run_date(self) -> None:
        """The header is dated with the run date."""
        router = _router([])

        _run(router)

        header = _posted_body(router)["blocks"][0]["text"]["text"]
        assert header.endswith("17 Oct 2026")


class TestDigestRunFailures:
    """Runs that stop early or fail to publish."""

    def test_top_stories_failure_is_fatal(self) -> None:
        """Without candidate ids the run aborts before publishing."""
        router = _router([], **{TOP_URL: httpx.Response(503)})

        with pytest.raises(SourceError):
            _run(router)

        assert not any(r.method == "POST" for r in router.requests)

    def test_publish_failure_raises(self) -> None:
        """A rejected webhook call fails the run after one attempt."""
        router = _router(
            [_story(1, "OpenAI news")],
            **{WEBHOOK: httpx.Response(500, text="server_error")},
        )

        with pytest.raises(PublishError) as exc_info:
            _run(router)

        assert exc_info.value.status_code == 500
        assert sum(1 for r in router.requests if r.method == "POST") == 1


class TestDryRun:
    """Runs that compose without publishing."""

    def test_dry_run_does_not_post(self) -> None:
        """A dry run composes the message but sends nothing."""
        router = _router([_story(1, "OpenAI news")])
        config = DigestConfig(dry_run=True)

        result = asyncio.run(
            run_digest(config, "dry", now=FIXED_NOW, transport=router.transport())
        )

        assert not result.published
        assert result.payload.blocks[2]["text"]["text"].startswith("*1. OpenAI news*")
        assert not any(r.method == "POST" for r in router.requests)
