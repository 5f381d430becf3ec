"""Story ranker for the digest.

Drops untitled, irrelevant and stale candidates, orders the rest by
(relevance band, popularity, recency) and caps the list.
"""

from hn_digest.ranker.metrics import RankerMetrics
from hn_digest.ranker.models import (
    CandidateItem,
    DroppedEntry,
    RankerResult,
    ScoredItem,
)
from hn_digest.ranker.ranker import StoryRanker, compare_scored_items, rank_stories


__all__ = [
    "CandidateItem",
    "DroppedEntry",
    "RankerMetrics",
    "RankerResult",
    "ScoredItem",
    "StoryRanker",
    "compare_scored_items",
    "rank_stories",
]
