"""Data models for metadata enrichment."""

from dataclasses import dataclass

from hn_digest.data_model import StrictBaseModel
from hn_digest.ranker.models import ScoredItem


class Metadata(StrictBaseModel):
    """Page preview metadata for a story link.

    Both fields are optional; an empty instance is a valid final state.

    Attributes:
        image: Preview image URL.
        description: Page description, at most 200 characters.
    """

    image: str | None = None
    description: str | None = None

    @classmethod
    def empty(cls) -> "Metadata":
        """Metadata with nothing found."""
        return cls()

    @property
    def is_empty(self) -> bool:
        """Whether neither field is set."""
        return self.image is None and self.description is None


@dataclass(frozen=True)
class EnrichedStory:
    """A ranked story with its page metadata.

    Attributes:
        scored: The ranked story.
        metadata: Page metadata, possibly empty.
    """

    scored: ScoredItem
    metadata: Metadata
