"""Shared pytest fixtures."""

from collections.abc import Iterator

import pytest
import structlog

from hn_digest.enricher import EnrichMetrics
from hn_digest.fetch import FetchMetrics
from hn_digest.ranker import RankerMetrics


@pytest.fixture(autouse=True)
def _reset_metrics() -> Iterator[None]:
    """Give every test fresh metrics singletons."""
    RankerMetrics.reset()
    FetchMetrics.reset()
    EnrichMetrics.reset()
    yield
    RankerMetrics.reset()
    FetchMetrics.reset()
    EnrichMetrics.reset()


@pytest.fixture(autouse=True)
def _clear_webhook_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of settings tests."""
    monkeypatch.delenv("SLACK_WEBHOOK_URL", raising=False)
    monkeypatch.delenv("HN_DIGEST_USER_AGENT", raising=False)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo logging set up by CLI invocations."""
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
