"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the analysis service and
the command-line scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

import os

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class OpenRouterSettings(BaseSettings):
    """Configuration for the OpenRouter chat-completion endpoint and caching."""

    model_config = SettingsConfigDict(env_prefix="OPENROUTER_", extra="ignore")

    api_key: str = Field(..., description="Bearer token for the completion API.")
    base_url: str = Field("https://openrouter.ai/api/v1")
    default_model: str = Field("anthropic/claude-3.5-sonnet")
    max_tokens: int = Field(4000, gt=0)
    temperature: float = Field(
        0.7,
        ge=0.0,
        le=2.0,
        description="Lower values are more focused, higher values more creative.",
    )
    top_p: float = Field(1.0, ge=0.0, le=1.0)
    frequency_penalty: float = Field(0.0)
    presence_penalty: float = Field(0.0)
    timeout: float = Field(120.0, gt=0, description="Whole-request timeout in seconds.")
    cache_ttl: int = Field(3600, ge=0, description="Cache entry lifetime in seconds.")
    cache_enabled: bool = Field(True)
    cache_backend: Literal["memory", "sqlite"] = Field("memory")
    cache_db_path: str = Field("data/analysis_cache.db")
    rate_limit: int = Field(
        60,
        gt=0,
        description="Requests per minute. Advisory; not enforced by the service.",
    )
    retry_enabled: bool = Field(
        False,
        description="Retry transient upstream failures from the analysis service.",
    )
    retry_max_attempts: int = Field(3, ge=1)
    retry_delay: int = Field(1000, ge=0, description="Delay between attempts in ms.")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Allow base URLs configured with or without a trailing slash."""
        return value.rstrip("/")


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field(
        "development", validation_alias=AliasChoices("APP_ENV", "environment")
    )
    log_level: str = Field(
        "INFO", validation_alias=AliasChoices("APP_LOG_LEVEL", "log_level")
    )
    app_name: str = Field(
        "Farm Insights", validation_alias=AliasChoices("APP_NAME", "app_name")
    )
    app_url: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("APP_URL", "app_url"),
        description="Sent as HTTP-Referer so the provider can attribute requests.",
    )
    openrouter: OpenRouterSettings = Field(default_factory=OpenRouterSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "OpenRouterSettings",
    "get_settings",
]
