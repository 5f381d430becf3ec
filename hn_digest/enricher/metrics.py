"""Outcome counters for preview enrichment."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class EnrichOutcome(str, Enum):
    """How a single story's enrichment ended.

    - ENRICHED: an image or description was found
    - EMPTY: the page was read but carried no usable meta tags
    - SKIPPED: no external link, or a discussion thread
    - FAILED: fetch error, non-HTML content or unparsable markup
    - TIMED_OUT: the per-story deadline elapsed
    """

    ENRICHED = "enriched"
    EMPTY = "empty"
    SKIPPED = "skipped"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class EnrichMetrics:
    """Singleton tally of enrichment outcomes for a run."""

    outcomes: dict[str, int] = field(default_factory=dict)

    _instance: ClassVar["EnrichMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "EnrichMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record(self, outcome: EnrichOutcome) -> None:
        self.outcomes[outcome.value] = self.outcomes.get(outcome.value, 0) + 1

    def count(self, outcome: EnrichOutcome) -> int:
        return self.outcomes.get(outcome.value, 0)

    def to_dict(self) -> dict[str, int]:
        return {outcome.value: self.count(outcome) for outcome in EnrichOutcome}
