"""Digest run orchestration."""

import time
from datetime import UTC, datetime

import httpx
import structlog

from hn_digest.composer import compose_message
from hn_digest.enricher import MetadataEnricher
from hn_digest.fetch import AsyncHttpFetcher, FetchConfig
from hn_digest.fetch.constants import PURPOSE_ENRICH, PURPOSE_SOURCE
from hn_digest.pipeline.models import DigestRunResult
from hn_digest.publisher import WebhookPublisher
from hn_digest.ranker import StoryRanker
from hn_digest.settings.config import DigestConfig
from hn_digest.source import HackerNewsSource


logger = structlog.get_logger()


class DigestPipeline:
    """Runs one digest: fetch, rank, enrich, compose, publish.

    Stages:
        1. fetch trending ids (fatal on failure)
        2. fetch item records concurrently (failures dropped)
        3. score and rank
        4. enrich ranked stories concurrently (failures degrade to empty)
        5. compose the message
        6. publish once, unless this is a dry run (failure is raised)
    """

    def __init__(  # noqa: PLR0913
        self,
        run_id: str,
        source: HackerNewsSource,
        ranker: StoryRanker,
        enricher: MetadataEnricher,
        publisher: WebhookPublisher | None,
        candidate_limit: int,
    ) -> None:
        """Initialize the pipeline.

        Args:
            run_id: Run identifier.
            source: Content source.
            ranker: Story ranker.
            enricher: Metadata enricher.
            publisher: Webhook publisher; None composes without publishing.
            candidate_limit: Number of trending ids to inspect.
        """
        self._run_id = run_id
        self._source = source
        self._ranker = ranker
        self._enricher = enricher
        self._publisher = publisher
        self._candidate_limit = candidate_limit
        self._log = logger.bind(component="pipeline", run_id=run_id)

    @classmethod
    def from_config(
        cls,
        config: DigestConfig,
        client: httpx.AsyncClient,
        run_id: str,
    ) -> "DigestPipeline":
        """Build a pipeline with the default collaborators.

        Args:
            config: Run configuration.
            client: Shared async client.
            run_id: Run identifier.

        Returns:
            Configured pipeline.
        """
        fetch_config = FetchConfig(
            user_agent=config.user_agent,
            default_timeout_seconds=config.fetch_timeout_seconds,
        )
        source_fetcher = AsyncHttpFetcher(
            client, fetch_config, run_id=run_id, purpose=PURPOSE_SOURCE
        )
        page_fetcher = AsyncHttpFetcher(
            client, fetch_config, run_id=run_id, purpose=PURPOSE_ENRICH
        )
        publisher = None
        if not config.dry_run and config.webhook_url:
            publisher = WebhookPublisher(
                client,
                config.webhook_url,
                timeout_seconds=config.fetch_timeout_seconds,
                run_id=run_id,
            )

        return cls(
            run_id=run_id,
            source=HackerNewsSource(source_fetcher, run_id=run_id),
            ranker=StoryRanker(
                run_id=run_id,
                cap=config.story_cap,
                recency_window_seconds=config.recency_window_seconds,
            ),
            enricher=MetadataEnricher(
                page_fetcher,
                timeout_seconds=config.enrich_timeout_seconds,
                run_id=run_id,
            ),
            publisher=publisher,
            candidate_limit=config.candidate_limit,
        )

    async def run(self, now: datetime | None = None) -> DigestRunResult:
        """Execute the digest run.

        Args:
            now: Current time (defaults to now, UTC).

        Returns:
            DigestRunResult describing the run.

        Raises:
            SourceError: If the trending id list cannot be fetched.
            PublishError: If the webhook rejects the message.
        """
        started_at = now or datetime.now(UTC)
        start = time.perf_counter()
        self._log.info("digest_run_started", candidate_limit=self._candidate_limit)

        ids = await self._source.fetch_top_story_ids(self._candidate_limit)
        candidates = await self._source.fetch_items(ids)

        ranked = self._ranker.rank(candidates, int(started_at.timestamp()))
        stories = await self._enricher.enrich_many(ranked.stories)
        payload = compose_message(stories, today=started_at.date())

        result = DigestRunResult(
            run_id=self._run_id,
            started_at=started_at,
            candidate_ids=len(ids),
            candidates_fetched=len(candidates),
            ranker_result=ranked,
            stories=stories,
            payload=payload,
        )

        if self._publisher is None:
            self._log.info("publish_skipped", reason="dry_run")
        else:
            await self._publisher.publish(payload)
            result.published = True

        result.duration_ms = round((time.perf_counter() - start) * 1000, 2)
        self._log.info(
            "digest_run_complete",
            candidate_ids=result.candidate_ids,
            candidates_fetched=result.candidates_fetched,
            stories=len(stories),
            published=result.published,
            duration_ms=result.duration_ms,
        )
        return result


async def run_digest(
    config: DigestConfig,
    run_id: str,
    now: datetime | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> DigestRunResult:
    """Run a digest with a fresh HTTP client.

    Args:
        config: Run configuration.
        run_id: Run identifier.
        now: Current time (defaults to now, UTC).
        transport: Optional transport override.

    Returns:
        DigestRunResult describing the run.
    """
    async with httpx.AsyncClient(transport=transport) as client:
        pipeline = DigestPipeline.from_config(config, client, run_id)
        return await pipeline.run(now)
