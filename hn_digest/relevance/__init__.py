"""Tiered keyword relevance scoring for story titles and links.

A story is relevant when its score reaches the threshold. Strong signals
(unambiguous brands and entities) are decisive on their own; medium and weak
signals need to add up.
"""

from hn_digest.relevance.constants import (
    DEFAULT_SIGNALS,
    MAX_SCORE,
    RELEVANCE_THRESHOLD,
    STRONG_DECISIVE_SCORE,
)
from hn_digest.relevance.models import RelevanceResult, Signal, SignalTier
from hn_digest.relevance.scorer import RelevanceScorer, is_relevant, score


__all__ = [
    "DEFAULT_SIGNALS",
    "MAX_SCORE",
    "RELEVANCE_THRESHOLD",
    "STRONG_DECISIVE_SCORE",
    "RelevanceResult",
    "RelevanceScorer",
    "Signal",
    "SignalTier",
    "is_relevant",
    "score",
]
