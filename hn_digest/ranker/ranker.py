"""Story ranker: filter candidates by relevance and recency, then order them."""

import time
from collections.abc import Sequence
from functools import cmp_to_key

import structlog

from hn_digest.ranker.constants import (
    DEFAULT_STORY_CAP,
    DROP_BELOW_THRESHOLD,
    DROP_MISSING_TITLE,
    DROP_OVER_CAP,
    DROP_STALE,
    RECENCY_WINDOW_SECONDS,
    RELEVANCE_TIE_BAND,
)
from hn_digest.ranker.metrics import RankerMetrics
from hn_digest.ranker.models import CandidateItem, DroppedEntry, RankerResult, ScoredItem
from hn_digest.relevance import RelevanceScorer


logger = structlog.get_logger()


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def compare_scored_items(a: ScoredItem, b: ScoredItem) -> int:
    """Compare two scored items by the composite ordering key.

    Tiers, each consulted only on a tie in the previous one:
        1. relevance score, differences within RELEVANCE_TIE_BAND are a tie
        2. popularity score
        3. creation time

    Args:
        a: First item.
        b: Second item.

    Returns:
        Negative if ``a`` ranks before ``b``, positive if after, 0 on a tie.
    """
    relevance_diff = b.relevance_score - a.relevance_score
    if abs(relevance_diff) > RELEVANCE_TIE_BAND:
        return _sign(relevance_diff)

    popularity_diff = b.popularity - a.popularity
    if popularity_diff:
        return _sign(popularity_diff)

    return _sign(b.created_at - a.created_at)


class StoryRanker:
    """Scores, filters, orders and caps candidate items.

    Flow:
        drop untitled -> score -> recency check -> threshold filter
        -> composite sort -> cap
    """

    def __init__(
        self,
        run_id: str,
        scorer: RelevanceScorer | None = None,
        cap: int = DEFAULT_STORY_CAP,
        recency_window_seconds: int = RECENCY_WINDOW_SECONDS,
        metrics: RankerMetrics | None = None,
    ) -> None:
        """Initialize the ranker.

        Args:
            run_id: Run identifier for logging.
            scorer: Relevance scorer (default signal table if omitted).
            cap: Maximum number of stories returned.
            recency_window_seconds: Age limit for stories with a known time.
            metrics: Optional metrics instance.
        """
        if cap < 1:
            msg = f"cap must be positive, got {cap}"
            raise ValueError(msg)

        self._run_id = run_id
        self._scorer = scorer or RelevanceScorer()
        self._cap = cap
        self._recency_window_seconds = recency_window_seconds
        self._metrics = metrics or RankerMetrics.get_instance()
        self._log = logger.bind(component="ranker", run_id=run_id)

    @property
    def cap(self) -> int:
        """Maximum number of stories returned."""
        return self._cap

    def score_item(self, item: CandidateItem, now: int) -> ScoredItem:
        """Score one titled candidate item.

        Args:
            item: Candidate with a title.
            now: Current time in unix seconds.

        Returns:
            ScoredItem with relevance and recency verdicts.
        """
        result = self._scorer.evaluate(item.title or "", item.url)
        is_recent = item.time is None or item.time >= now - self._recency_window_seconds
        return ScoredItem(
            item=item,
            relevance_score=result.score,
            is_recent=is_recent,
            matched_signals=result.matched,
        )

    def rank(self, items: Sequence[CandidateItem], now: int) -> RankerResult:
        """Rank candidate items.

        Args:
            items: Candidate items in any order.
            now: Current time in unix seconds.

        Returns:
            RankerResult with at most ``cap`` stories, best first.
        """
        start = time.perf_counter()
        self._metrics.record_stories_in(len(items))
        dropped: list[DroppedEntry] = []
        kept: list[ScoredItem] = []

        for item in items:
            if not item.title:
                dropped.append(DroppedEntry(item_id=item.id, drop_reason=DROP_MISSING_TITLE))
                continue

            scored = self.score_item(item, now)
            self._metrics.record_score(scored.relevance_score)

            if scored.relevance_score < self._scorer.threshold:
                reason = DROP_BELOW_THRESHOLD
            elif not scored.is_recent:
                reason = DROP_STALE
            else:
                kept.append(scored)
                continue

            dropped.append(
                DroppedEntry(
                    item_id=item.id,
                    drop_reason=reason,
                    relevance_score=scored.relevance_score,
                )
            )

        ordered = sorted(kept, key=cmp_to_key(compare_scored_items))
        stories = ordered[: self._cap]
        dropped.extend(
            DroppedEntry(
                item_id=s.item.id,
                drop_reason=DROP_OVER_CAP,
                relevance_score=s.relevance_score,
            )
            for s in ordered[self._cap :]
        )

        for entry in dropped:
            self._metrics.record_drop(entry.drop_reason)
        self._metrics.record_stories_out(len(stories))
        self._metrics.record_ranking_duration((time.perf_counter() - start) * 1000)

        result = RankerResult(
            stories=stories,
            stories_in=len(items),
            stories_out=len(stories),
            dropped_entries=dropped,
        )

        self._log.info(
            "ranker_complete",
            stories_in=result.stories_in,
            stories_out=result.stories_out,
            dropped_by_reason=result.dropped_by_reason(),
            top_ids=[s.item.id for s in stories],
        )

        return result


def rank_stories(
    items: Sequence[CandidateItem],
    now: int,
    cap: int = DEFAULT_STORY_CAP,
    run_id: str = "pure",
) -> RankerResult:
    """Pure function API for story ranking.

    Args:
        items: Candidate items.
        now: Current time in unix seconds.
        cap: Maximum number of stories returned.
        run_id: Run identifier.

    Returns:
        RankerResult with ranked stories.
    """
    ranker = StoryRanker(run_id=run_id, cap=cap)
    return ranker.rank(items, now)
