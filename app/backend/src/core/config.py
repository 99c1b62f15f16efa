"""Application configuration utilities."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings derived from environment variables."""

    database_url: str = Field(
        default="sqlite:///./farm_reports.db", alias="DATABASE_URL"
    )
    service_name: str = Field(
        default="sproutify-ai-smart-search", alias="SERVICE_NAME"
    )
    service_version: str = Field(default="3.0.0-modular", alias="SERVICE_VERSION")
    environment: str = Field(default="production", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    request_timeout_seconds: float | None = Field(
        default=None, alias="REQUEST_TIMEOUT_SECONDS"
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def database_configured(self) -> bool:
        """Return ``True`` when a database URL has been supplied."""

        return bool(self.database_url)


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
