"""Per-run request counters, split by what each request was for."""

from dataclasses import dataclass, field
from typing import ClassVar

from hn_digest.fetch.models import FetchErrorClass


@dataclass
class PurposeCounters:
    """Counters for one request purpose ("source" or "enrich")."""

    responses: int = 0
    bytes_received: int = 0
    duration_ms: float = 0.0
    failures: dict[str, int] = field(default_factory=dict)

    @property
    def failed(self) -> int:
        return sum(self.failures.values())

    def as_dict(self) -> dict[str, object]:
        return {
            "responses": self.responses,
            "failed": self.failed,
            "failures": dict(self.failures),
            "bytes_received": self.bytes_received,
            "duration_ms": round(self.duration_ms, 2),
        }


@dataclass
class FetchMetrics:
    """Request counters for a digest run.

    Item lookups against the content API and page fetches for previews
    have very different failure rates, so each purpose is counted
    separately. A response with an error status counts both as a response
    and as a failure.
    """

    by_purpose: dict[str, PurposeCounters] = field(default_factory=dict)

    _instance: ClassVar["FetchMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def counters(self, purpose: str) -> PurposeCounters:
        """Counters for a purpose, created on first use."""
        return self.by_purpose.setdefault(purpose, PurposeCounters())

    def record_response(self, purpose: str, bytes_received: int) -> None:
        """Record a response that was read to completion."""
        counters = self.counters(purpose)
        counters.responses += 1
        counters.bytes_received += bytes_received

    def record_failure(self, purpose: str, error_class: FetchErrorClass) -> None:
        """Record a failed fetch under its error class."""
        failures = self.counters(purpose).failures
        failures[error_class.value] = failures.get(error_class.value, 0) + 1

    def record_duration(self, purpose: str, duration_ms: float) -> None:
        self.counters(purpose).duration_ms += duration_ms

    @property
    def responses_total(self) -> int:
        """Responses received across all purposes."""
        return sum(c.responses for c in self.by_purpose.values())

    def to_dict(self) -> dict[str, dict[str, object]]:
        """Counters keyed by purpose, for the end-of-run log line."""
        return {purpose: c.as_dict() for purpose, c in sorted(self.by_purpose.items())}
