"""Data models for a digest run."""

from dataclasses import dataclass, field
from datetime import datetime

from hn_digest.composer.models import MessagePayload
from hn_digest.enricher.models import EnrichedStory
from hn_digest.ranker.models import RankerResult


@dataclass
class DigestRunResult:
    """Outcome of one digest run.

    Attributes:
        run_id: Run identifier.
        started_at: When the run started.
        candidate_ids: Number of trending ids inspected.
        candidates_fetched: Number of item records retrieved.
        ranker_result: Ranking output.
        stories: Ranked stories with metadata.
        payload: Composed message.
        published: Whether the message was delivered.
        duration_ms: Wall-clock duration.
    """

    run_id: str
    started_at: datetime
    candidate_ids: int
    candidates_fetched: int
    ranker_result: RankerResult
    stories: list[EnrichedStory] = field(default_factory=list)
    payload: MessagePayload = field(default_factory=MessagePayload)
    published: bool = False
    duration_ms: float = 0.0
