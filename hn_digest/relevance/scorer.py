"""Tiered keyword scorer for story relevance."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from hn_digest.relevance.constants import (
    DEFAULT_SIGNALS,
    MAX_SCORE,
    RELEVANCE_THRESHOLD,
    SHORT_PHRASE_MAX_LENGTH,
    STRONG_DECISIVE_SCORE,
)
from hn_digest.relevance.models import RelevanceResult, Signal, SignalTier


logger = structlog.get_logger()

_WORD_CHARS_ONLY = re.compile(r"^\w+$")


@dataclass(frozen=True)
class CompiledSignal:
    """A signal with its pre-compiled pattern.

    Attributes:
        signal: Original signal definition.
        pattern: Compiled regex for the phrase.
    """

    signal: Signal
    pattern: re.Pattern[str]


def _compile_phrase_pattern(phrase: str) -> re.Pattern[str]:
    """Compile a signal phrase into a regex pattern.

    Short all-word-character phrases (<= SHORT_PHRASE_MAX_LENGTH chars) get
    word-boundary anchors so "ai" never matches inside "said" or "email".
    Their plural form ("LLMs", "AIs") still counts. Longer phrases and
    phrases with punctuation ("gpt-4", "dall-e") use substring matching.

    Args:
        phrase: Raw phrase from the signal table.

    Returns:
        Compiled regex pattern.
    """
    escaped = re.escape(phrase.lower())
    if len(phrase) <= SHORT_PHRASE_MAX_LENGTH and _WORD_CHARS_ONLY.match(phrase):
        return re.compile(rf"\b{escaped}s?\b")
    return re.compile(escaped)


class RelevanceScorer:
    """Scores a story title and link against a tiered signal table.

    Evaluation order:
        1. Strong signals, 30 points each. Once the total reaches 30 the
           score is returned immediately.
        2. Medium signals, 15 points each, all summed.
        3. Weak signals, 5 points each, all summed.

    The final score is capped at 100. Scoring is a pure function of the
    (title, url) pair and the signal table.
    """

    def __init__(
        self,
        signals: Iterable[Signal] = DEFAULT_SIGNALS,
        threshold: int = RELEVANCE_THRESHOLD,
    ) -> None:
        """Initialize the scorer.

        Args:
            signals: Signal table to evaluate.
            threshold: Minimum score for is_relevant.
        """
        self._threshold = threshold
        self._tiers: dict[SignalTier, list[CompiledSignal]] = {
            tier: [] for tier in SignalTier
        }
        for signal in signals:
            self._tiers[signal.tier].append(
                CompiledSignal(signal=signal, pattern=_compile_phrase_pattern(signal.phrase))
            )

    @property
    def threshold(self) -> int:
        """Minimum score for a story to be relevant."""
        return self._threshold

    @property
    def signal_count(self) -> int:
        """Number of configured signals across all tiers."""
        return sum(len(compiled) for compiled in self._tiers.values())

    def evaluate(self, title: str, url: str | None = None) -> RelevanceResult:
        """Score a title and optional URL.

        Args:
            title: Story title.
            url: Story link, if any.

        Returns:
            RelevanceResult with score and matched phrases.
        """
        text = f"{title} {url or ''}".lower()
        total = 0
        matched: list[str] = []

        for compiled in self._tiers[SignalTier.STRONG]:
            if compiled.pattern.search(text):
                total += SignalTier.STRONG.weight
                matched.append(compiled.signal.phrase)
                if total >= STRONG_DECISIVE_SCORE:
                    return RelevanceResult(
                        score=min(MAX_SCORE, total),
                        matched=tuple(matched),
                        decisive=True,
                    )

        for tier in (SignalTier.MEDIUM, SignalTier.WEAK):
            for compiled in self._tiers[tier]:
                if compiled.pattern.search(text):
                    total += tier.weight
                    matched.append(compiled.signal.phrase)

        return RelevanceResult(score=min(MAX_SCORE, total), matched=tuple(matched))

    def score(self, title: str, url: str | None = None) -> int:
        """Compute the relevance score.

        Args:
            title: Story title.
            url: Story link, if any.

        Returns:
            Integer score in [0, 100].
        """
        return self.evaluate(title, url).score

    def is_relevant(self, title: str, url: str | None = None) -> bool:
        """Check whether a story reaches the relevance threshold.

        Args:
            title: Story title.
            url: Story link, if any.

        Returns:
            True if the score is at least the threshold.
        """
        return self.score(title, url) >= self._threshold


_default_scorer: RelevanceScorer | None = None


def _get_default_scorer() -> RelevanceScorer:
    global _default_scorer  # noqa: PLW0603
    if _default_scorer is None:
        _default_scorer = RelevanceScorer()
        logger.debug(
            "relevance_scorer_initialized",
            component="relevance",
            signal_count=_default_scorer.signal_count,
        )
    return _default_scorer


def score(title: str, url: str | None = None) -> int:
    """Score a story with the default signal table.

    Args:
        title: Story title.
        url: Story link, if any.

    Returns:
        Integer score in [0, 100].
    """
    return _get_default_scorer().score(title, url)


def is_relevant(title: str, url: str | None = None) -> bool:
    """Check relevance with the default signal table.

    Args:
        title: Story title.
        url: Story link, if any.

    Returns:
        True if the score is at least RELEVANCE_THRESHOLD.
    """
    return _get_default_scorer().is_relevant(title, url)
