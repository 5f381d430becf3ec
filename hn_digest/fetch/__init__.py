"""Async HTTP fetch layer with size limits and failure isolation.

Every request is attempted once and bounded by a timeout. Failures are
returned as classified FetchError values instead of raised.
"""

from hn_digest.fetch.client import AsyncHttpFetcher
from hn_digest.fetch.config import FetchConfig
from hn_digest.fetch.metrics import FetchMetrics
from hn_digest.fetch.models import (
    FetchError,
    FetchErrorClass,
    FetchResult,
    ResponseSizeExceededError,
)
from hn_digest.fetch.redact import redact_url_credentials, redact_webhook_url


__all__ = [
    "AsyncHttpFetcher",
    "FetchConfig",
    "FetchError",
    "FetchErrorClass",
    "FetchMetrics",
    "FetchResult",
    "ResponseSizeExceededError",
    "redact_url_credentials",
    "redact_webhook_url",
]
