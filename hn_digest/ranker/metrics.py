"""Metrics collection for the ranker module."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class RankerMetrics:
    """Metrics for ranker operations.

    Attributes:
        stories_in: Number of input items.
        stories_out: Number of ranked stories.
        dropped_total: Total items dropped.
        dropped_by_reason: Dropped count per reason.
        score_values: Relevance scores of all titled items.
        ranking_duration_ms: Time spent ranking.
    """

    stories_in: int = 0
    stories_out: int = 0
    dropped_total: int = 0
    dropped_by_reason: dict[str, int] = field(default_factory=dict)
    score_values: list[int] = field(default_factory=list)
    ranking_duration_ms: float = 0.0

    _instance: ClassVar["RankerMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RankerMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_stories_in(self, count: int) -> None:
        """Record input item count."""
        self.stories_in = count

    def record_stories_out(self, count: int) -> None:
        """Record ranked story count."""
        self.stories_out = count

    def record_drop(self, reason: str) -> None:
        """Record a dropped item.

        Args:
            reason: Drop reason.
        """
        self.dropped_total += 1
        self.dropped_by_reason[reason] = self.dropped_by_reason.get(reason, 0) + 1

    def record_score(self, score: int) -> None:
        """Record a relevance score."""
        self.score_values.append(score)

    def record_ranking_duration(self, duration_ms: float) -> None:
        """Record ranking duration."""
        self.ranking_duration_ms = duration_ms

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "stories_in": self.stories_in,
            "stories_out": self.stories_out,
            "dropped_total": self.dropped_total,
            "dropped_by_reason": self.dropped_by_reason,
            "max_score": max(self.score_values, default=0),
            "ranking_duration_ms": self.ranking_duration_ms,
        }
