"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Read once at process entry; nothing else in the package touches the
    environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    slack_webhook_url: str | None = Field(
        default=None, validation_alias="SLACK_WEBHOOK_URL"
    )
    user_agent: str | None = Field(default=None, validation_alias="HN_DIGEST_USER_AGENT")


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
