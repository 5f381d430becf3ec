"""Hacker News API client for trending story candidates."""

import asyncio
from collections.abc import Sequence

import structlog
from pydantic import ValidationError

from hn_digest.fetch import AsyncHttpFetcher
from hn_digest.ranker.models import CandidateItem
from hn_digest.source.constants import (
    DEFAULT_CANDIDATE_LIMIT,
    HN_API_BASE_URL,
    HN_ITEM_PATH,
    HN_TOP_STORIES_PATH,
)
from hn_digest.source.errors import SourceError


logger = structlog.get_logger()


class HackerNewsSource:
    """Fetches top story ids and item records from the Hacker News API."""

    def __init__(
        self,
        fetcher: AsyncHttpFetcher,
        base_url: str = HN_API_BASE_URL,
        run_id: str = "",
    ) -> None:
        """Initialize the source.

        Args:
            fetcher: HTTP fetcher.
            base_url: API base URL.
            run_id: Run identifier for logging.
        """
        self._fetcher = fetcher
        self._base_url = base_url.rstrip("/")
        self._log = logger.bind(component="source", run_id=run_id)

    async def fetch_top_story_ids(
        self, limit: int = DEFAULT_CANDIDATE_LIMIT
    ) -> list[int]:
        """Fetch the ordered list of trending story ids.

        Args:
            limit: Maximum number of ids to return.

        Returns:
            Story ids in ranking order.

        Raises:
            SourceError: If the list cannot be fetched or parsed.
        """
        url = self._base_url + HN_TOP_STORIES_PATH
        result = await self._fetcher.fetch(url, accept="application/json")

        if not result.is_success:
            message = result.error.message if result.error else "empty response"
            self._log.error(
                "top_stories_fetch_failed",
                status_code=result.status_code,
                error=message,
            )
            raise SourceError(f"Top stories fetch failed: {message}", result.status_code)

        try:
            payload = result.parse_json()
        except ValueError as e:
            raise SourceError(f"Top stories response is not JSON: {e}") from e

        if not isinstance(payload, list):
            raise SourceError(
                f"Top stories response is not a list: {type(payload).__name__}"
            )

        ids = [i for i in payload if isinstance(i, int) and not isinstance(i, bool)]
        self._log.info("top_stories_fetched", total=len(ids), limit=limit)
        return ids[:limit]

    async def fetch_item(self, item_id: int) -> CandidateItem | None:
        """Fetch a single item record.

        Args:
            item_id: Item identifier.

        Returns:
            The item, or None if it is unavailable, deleted or malformed.
        """
        url = self._base_url + HN_ITEM_PATH.format(item_id=item_id)
        result = await self._fetcher.fetch(url, accept="application/json")

        if not result.is_success:
            self._log.warning(
                "item_fetch_failed",
                item_id=item_id,
                status_code=result.status_code,
                error_class=result.error.error_class.value if result.error else None,
            )
            return None

        try:
            payload = result.parse_json()
        except ValueError:
            self._log.warning("item_not_json", item_id=item_id)
            return None

        # The API answers `null` for ids that do not exist
        if not isinstance(payload, dict):
            return None

        if payload.get("deleted") or payload.get("dead"):
            self._log.debug("item_unavailable", item_id=item_id)
            return None

        try:
            return CandidateItem.model_validate(payload)
        except ValidationError as e:
            self._log.warning("item_invalid", item_id=item_id, error=str(e))
            return None

    async def fetch_items(self, item_ids: Sequence[int]) -> list[CandidateItem]:
        """Fetch item records concurrently.

        Each id is fetched independently; unavailable items are dropped and
        the rest keep the input order.

        Args:
            item_ids: Ids to fetch.

        Returns:
            Available items in input order.
        """
        results = await asyncio.gather(*(self.fetch_item(i) for i in item_ids))
        items = [item for item in results if item is not None]

        self._log.info(
            "items_fetched",
            requested=len(item_ids),
            available=len(items),
            unavailable=len(item_ids) - len(items),
        )
        return items
