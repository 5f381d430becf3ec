"""Data models for the story ranker."""

from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from hn_digest.data_model import ApiRecordModel


class CandidateItem(ApiRecordModel):
    """A trending story record as returned by the content API.

    Attributes:
        id: Item identifier.
        title: Story title; missing for deleted or dead items.
        url: External link; absent for discussion-only posts.
        score: Popularity (points).
        time: Creation time in unix seconds.
        descendants: Comment count.
        by: Author handle.
        type: Item type ("story", "job", ...).
    """

    id: int
    title: str | None = None
    url: str | None = None
    score: int | None = None
    time: int | None = None
    descendants: int | None = None
    by: str | None = None
    type: str | None = None


@dataclass(frozen=True)
class ScoredItem:
    """A candidate item with its relevance and recency verdicts.

    Attributes:
        item: The candidate item.
        relevance_score: Relevance score in [0, 100].
        is_recent: Whether the item falls inside the recency window.
        matched_signals: Phrases that contributed to the score.
    """

    item: CandidateItem
    relevance_score: int
    is_recent: bool
    matched_signals: tuple[str, ...] = ()

    @property
    def popularity(self) -> int:
        """Popularity score, missing treated as 0."""
        return self.item.score or 0

    @property
    def created_at(self) -> int:
        """Creation time in unix seconds, missing treated as 0."""
        return self.item.time or 0


@dataclass(frozen=True)
class DroppedEntry:
    """Record of an item excluded by the ranker.

    Attributes:
        item_id: ID of the dropped item.
        drop_reason: Why the item was dropped.
        relevance_score: Score at time of drop, if computed.
    """

    item_id: int
    drop_reason: str
    relevance_score: int | None = None


class RankerResult(BaseModel):
    """Ranked, capped list of relevant stories.

    Attributes:
        stories: Ranked stories, best first.
        stories_in: Number of input items.
        stories_out: Number of ranked stories returned.
        dropped_entries: Details of excluded items.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    stories: list[ScoredItem] = Field(default_factory=list)
    stories_in: Annotated[int, Field(ge=0, description="Input item count")] = 0
    stories_out: Annotated[int, Field(ge=0, description="Output story count")] = 0
    dropped_entries: list[DroppedEntry] = Field(default_factory=list)

    @property
    def dropped_total(self) -> int:
        """Total number of dropped items."""
        return len(self.dropped_entries)

    def dropped_by_reason(self) -> dict[str, int]:
        """Count dropped items per reason.

        Returns:
            Dictionary of drop reason to count.
        """
        counts: dict[str, int] = {}
        for entry in self.dropped_entries:
            counts[entry.drop_reason] = counts.get(entry.drop_reason, 0) + 1
        return counts
