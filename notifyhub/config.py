"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    remote_api_url: str = Field(
        description="Base URL of the remote notification store API",
        min_length=1,
    )
    remote_api_token: str | None = Field(
        default=None,
        description="Bearer token sent to the remote notification store",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to every request against the remote store",
        gt=0,
    )
    poll_interval_seconds: float = Field(
        default=30.0,
        description="Seconds between two background refreshes of the first page",
        gt=0,
    )
    polling_enabled: bool = Field(
        default=True,
        description="Start the background refresh loop together with the application",
    )
    page_limit: int = Field(
        default=20,
        description="Default number of notifications requested per page",
        gt=0,
    )
    max_page_limit: int = Field(
        default=100,
        description="Upper bound accepted for the page size",
        gt=0,
    )
    dropdown_limit: int = Field(
        default=10,
        description="Number of notifications displayed by the header dropdown",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to normalize notification timestamps",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    @model_validator(mode="after")
    def _validate_page_limits(self) -> "Settings":
        if self.page_limit > self.max_page_limit:
            raise ValueError("PAGE_LIMIT must not exceed MAX_PAGE_LIMIT")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
