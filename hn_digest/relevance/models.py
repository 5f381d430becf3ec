"""Data models for relevance scoring."""

from dataclasses import dataclass
from enum import Enum


class SignalTier(str, Enum):
    """Confidence tier of a keyword signal.

    - STRONG: named entities and product names, decisive on their own
    - MEDIUM: topical but ambiguous phrases
    - WEAK: generic abbreviations that need corroboration
    """

    STRONG = "STRONG"
    MEDIUM = "MEDIUM"
    WEAK = "WEAK"

    @property
    def weight(self) -> int:
        """Points contributed by one matching signal of this tier."""
        return _TIER_WEIGHTS[self]


_TIER_WEIGHTS: dict[SignalTier, int] = {
    SignalTier.STRONG: 30,
    SignalTier.MEDIUM: 15,
    SignalTier.WEAK: 5,
}


@dataclass(frozen=True)
class Signal:
    """A keyword phrase and the tier it belongs to.

    Attributes:
        phrase: Lower-case phrase to look for.
        tier: Confidence tier.
    """

    phrase: str
    tier: SignalTier


@dataclass(frozen=True)
class RelevanceResult:
    """Outcome of scoring one (title, url) pair.

    Attributes:
        score: Relevance score in [0, 100].
        matched: Phrases that contributed, in evaluation order.
        decisive: Whether a strong signal ended evaluation early.
    """

    score: int
    matched: tuple[str, ...] = ()
    decisive: bool = False
