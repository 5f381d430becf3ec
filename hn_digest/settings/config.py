"""Run configuration for the digest job."""

from typing import Annotated, Any

from pydantic import Field, field_validator, model_validator

from hn_digest.data_model import StrictBaseModel
from hn_digest.enricher.constants import DEFAULT_ENRICH_TIMEOUT_SECONDS
from hn_digest.fetch.constants import DEFAULT_USER_AGENT, VALID_URL_SCHEMES
from hn_digest.ranker.constants import DEFAULT_STORY_CAP, RECENCY_WINDOW_SECONDS
from hn_digest.settings.app import AppSettings
from hn_digest.source.constants import DEFAULT_CANDIDATE_LIMIT


class ConfigurationError(Exception):
    """Raised when the run configuration is missing or invalid.

    Always raised before any network call is made.
    """


class DigestConfig(StrictBaseModel):
    """Configuration for a single digest run.

    Built once at process entry and passed down explicitly.

    Attributes:
        webhook_url: Incoming webhook endpoint. Optional only for dry runs.
        dry_run: Compose the message without publishing it.
        story_cap: Maximum number of ranked stories.
        candidate_limit: Number of top story ids to inspect.
        recency_window_seconds: Stories older than this are excluded.
        enrich_timeout_seconds: Per-page ceiling for metadata fetches.
        fetch_timeout_seconds: Timeout for content source and webhook calls.
        user_agent: User-Agent header for outgoing requests.
    """

    webhook_url: str | None = None
    dry_run: bool = False
    story_cap: Annotated[int, Field(ge=1, le=50)] = DEFAULT_STORY_CAP
    candidate_limit: Annotated[int, Field(ge=1, le=500)] = DEFAULT_CANDIDATE_LIMIT
    recency_window_seconds: Annotated[int, Field(ge=60)] = RECENCY_WINDOW_SECONDS
    enrich_timeout_seconds: Annotated[float, Field(gt=0.0, le=30.0)] = (
        DEFAULT_ENRICH_TIMEOUT_SECONDS
    )
    fetch_timeout_seconds: Annotated[float, Field(gt=0.0, le=120.0)] = 10.0
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )

    @field_validator("webhook_url")
    @classmethod
    def validate_webhook_scheme(cls, v: str | None) -> str | None:
        """Ensure the webhook URL is an http(s) URL."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            return None
        if not v.startswith(VALID_URL_SCHEMES):
            msg = "webhook_url must start with http:// or https://"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def require_webhook_unless_dry_run(self) -> "DigestConfig":
        """A real run needs somewhere to publish."""
        if self.webhook_url is None and not self.dry_run:
            msg = "SLACK_WEBHOOK_URL is not set"
            raise ValueError(msg)
        return self

    @classmethod
    def from_settings(cls, settings: AppSettings, **overrides: Any) -> "DigestConfig":
        """Build the run configuration from environment settings.

        Args:
            settings: Loaded environment settings.
            **overrides: Explicit values (typically CLI options); ``None``
                values are ignored.

        Returns:
            Validated configuration.

        Raises:
            ConfigurationError: If the configuration is incomplete or invalid.
        """
        values: dict[str, Any] = {"webhook_url": settings.slack_webhook_url}
        if settings.user_agent:
            values["user_agent"] = settings.user_agent
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
