"""Unit tests for settings and run configuration."""

from pathlib import Path

import pytest

from hn_digest.fetch.constants import DEFAULT_USER_AGENT
from hn_digest.settings import AppSettings, ConfigurationError, DigestConfig


WEBHOOK = "https://hooks.slack.test/services/T1/B2/token"


def _settings(monkeypatch: pytest.MonkeyPatch, **env: str) -> AppSettings:
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return AppSettings(_env_file=None)  # type: ignore[call-arg]


class TestAppSettings:
    """Tests for environment loading."""

    def test_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nothing set means nothing configured."""
        settings = _settings(monkeypatch)

        assert settings.slack_webhook_url is None
        assert settings.user_agent is None

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Values are read from the environment."""
        settings = _settings(
            monkeypatch, SLACK_WEBHOOK_URL=WEBHOOK, HN_DIGEST_USER_AGENT="bot/2"
        )

        assert settings.slack_webhook_url == WEBHOOK
        assert settings.user_agent == "bot/2"

    def test_from_env_file(self, tmp_path: Path) -> None:
        """Values are read from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text(f"SLACK_WEBHOOK_URL={WEBHOOK}\n")

        settings = AppSettings(_env_file=env_file)  # type: ignore[call-arg]

        assert settings.slack_webhook_url == WEBHOOK


class TestDigestConfig:
    """Tests for run configuration validation."""

    def test_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A configured webhook gives a publishing config with defaults."""
        config = DigestConfig.from_settings(
            _settings(monkeypatch, SLACK_WEBHOOK_URL=WEBHOOK)
        )

        assert config.webhook_url == WEBHOOK
        assert not config.dry_run
        assert config.story_cap == 10
        assert config.candidate_limit == 100
        assert config.recency_window_seconds == 86400
        assert config.enrich_timeout_seconds == 5.0
        assert config.user_agent == DEFAULT_USER_AGENT

    def test_missing_webhook(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A real run without a webhook is a configuration error."""
        with pytest.raises(ConfigurationError, match="SLACK_WEBHOOK_URL is not set"):
            DigestConfig.from_settings(_settings(monkeypatch))

    def test_blank_webhook(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A blank webhook counts as missing."""
        with pytest.raises(ConfigurationError):
            DigestConfig.from_settings(_settings(monkeypatch, SLACK_WEBHOOK_URL="  "))

    def test_dry_run_without_webhook(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A dry run does not need a webhook."""
        config = DigestConfig.from_settings(_settings(monkeypatch), dry_run=True)

        assert config.dry_run
        assert config.webhook_url is None

    def test_invalid_scheme(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Webhooks must be http(s)."""
        with pytest.raises(ConfigurationError, match="http"):
            DigestConfig.from_settings(
                _settings(monkeypatch, SLACK_WEBHOOK_URL="ftp://hooks.test/x")
            )

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Explicit values win; None values are ignored."""
        config = DigestConfig.from_settings(
            _settings(monkeypatch, SLACK_WEBHOOK_URL=WEBHOOK),
            story_cap=5,
            candidate_limit=None,
        )

        assert config.story_cap == 5
        assert config.candidate_limit == 100

    def test_user_agent_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The User-Agent can be set from the environment."""
        config = DigestConfig.from_settings(
            _settings(
                monkeypatch, SLACK_WEBHOOK_URL=WEBHOOK, HN_DIGEST_USER_AGENT="bot/2"
            )
        )
        assert config.user_agent == "bot/2"

    @pytest.mark.parametrize(
        ("field", "value"),
        [("story_cap", 0), ("story_cap", 51), ("candidate_limit", 0)],
    )
    def test_out_of_range(
        self, monkeypatch: pytest.MonkeyPatch, field: str, value: int
    ) -> None:
        """Out-of-range values are configuration errors."""
        with pytest.raises(ConfigurationError):
            DigestConfig.from_settings(
                _settings(monkeypatch, SLACK_WEBHOOK_URL=WEBHOOK), **{field: value}
            )

    def test_unknown_field_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Typos in overrides are not silently ignored."""
        with pytest.raises(ConfigurationError):
            DigestConfig.from_settings(
                _settings(monkeypatch, SLACK_WEBHOOK_URL=WEBHOOK), storycap=3
            )

    def test_frozen(self) -> None:
        """Configuration cannot change after construction."""
        config = DigestConfig(dry_run=True)
        with pytest.raises(ValueError):
            config.story_cap = 3  # type: ignore[misc]
