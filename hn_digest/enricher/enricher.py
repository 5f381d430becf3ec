"""Best-effort page metadata enrichment for ranked stories."""

import asyncio
from collections.abc import Sequence
from urllib.parse import urlsplit

import structlog

from hn_digest.enricher.constants import (
    DEFAULT_ENRICH_TIMEOUT_SECONDS,
    HTML_CONTENT_TYPES,
    SKIPPED_HOSTS,
)
from hn_digest.enricher.extractor import extract_metadata
from hn_digest.enricher.metrics import EnrichMetrics, EnrichOutcome
from hn_digest.enricher.models import EnrichedStory, Metadata
from hn_digest.fetch import AsyncHttpFetcher
from hn_digest.ranker.models import ScoredItem


logger = structlog.get_logger()

# error_class logged when the per-story deadline elapses
ENRICH_DEADLINE_EXCEEDED = "ENRICH_DEADLINE_EXCEEDED"


def should_enrich(url: str | None) -> bool:
    """Check whether a link points at an external page worth scraping.

    Args:
        url: Story link.

    Returns:
        False for missing links, non-http(s) links and the platform's own
        discussion threads.
    """
    if not url:
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return False
    return parts.hostname.lower() not in SKIPPED_HOSTS


class MetadataEnricher:
    """Fetches page previews for story links.

    Each story gets a hard deadline of ``timeout_seconds`` covering the
    whole fetch, body included, so a host trickling bytes cannot hold up
    the batch. Never raises: any failure yields ``Metadata.empty()``.
    """

    def __init__(
        self,
        fetcher: AsyncHttpFetcher,
        timeout_seconds: float = DEFAULT_ENRICH_TIMEOUT_SECONDS,
        run_id: str = "",
    ) -> None:
        """Initialize the enricher.

        Args:
            fetcher: HTTP fetcher.
            timeout_seconds: Deadline for a single story's page fetch.
            run_id: Run identifier for logging.
        """
        self._fetcher = fetcher
        self._timeout_seconds = timeout_seconds
        self._metrics = EnrichMetrics.get_instance()
        self._log = logger.bind(component="enricher", run_id=run_id)

    async def enrich(self, url: str | None) -> Metadata:
        """Fetch and extract preview metadata for a link.

        Args:
            url: Story link, if any.

        Returns:
            Extracted metadata, empty on any failure.
        """
        if url is None or not should_enrich(url):
            self._metrics.record(EnrichOutcome.SKIPPED)
            return Metadata.empty()

        log = self._log.bind(url=url)
        try:
            async with asyncio.timeout(self._timeout_seconds):
                result = await self._fetcher.fetch(
                    url,
                    timeout=self._timeout_seconds,
                    accept="text/html,application/xhtml+xml",
                )
        except TimeoutError:
            log.warning(
                "enrich_fetch_failed",
                status_code=0,
                error_class=ENRICH_DEADLINE_EXCEEDED,
                timeout_seconds=self._timeout_seconds,
            )
            self._metrics.record(EnrichOutcome.TIMED_OUT)
            return Metadata.empty()

        if not result.is_success:
            log.warning(
                "enrich_fetch_failed",
                status_code=result.status_code,
                error_class=result.error.error_class.value if result.error else None,
            )
            self._metrics.record(EnrichOutcome.FAILED)
            return Metadata.empty()

        if result.content_type not in HTML_CONTENT_TYPES:
            log.debug("enrich_skipped_content_type", content_type=result.content_type)
            self._metrics.record(EnrichOutcome.FAILED)
            return Metadata.empty()

        try:
            metadata = extract_metadata(
                result.body_bytes,
                base_url=result.final_url,
                encoding=result.charset,
            )
        except Exception as e:  # noqa: BLE001
            log.warning("enrich_parse_failed", error=str(e))
            self._metrics.record(EnrichOutcome.FAILED)
            return Metadata.empty()

        self._metrics.record(
            EnrichOutcome.EMPTY if metadata.is_empty else EnrichOutcome.ENRICHED
        )
        log.debug(
            "enrich_complete",
            has_image=metadata.image is not None,
            has_description=metadata.description is not None,
        )
        return metadata

    async def enrich_many(self, stories: Sequence[ScoredItem]) -> list[EnrichedStory]:
        """Enrich ranked stories concurrently, keeping their order.

        Args:
            stories: Ranked stories.

        Returns:
            One EnrichedStory per input story, same order.
        """
        metadata = await asyncio.gather(*(self.enrich(s.item.url) for s in stories))
        enriched = [
            EnrichedStory(scored=story, metadata=meta)
            for story, meta in zip(stories, metadata, strict=True)
        ]

        self._log.info(
            "enrichment_complete",
            stories=len(enriched),
            with_metadata=sum(1 for e in enriched if not e.metadata.is_empty),
        )
        return enriched
