"""
Configuration management using Pydantic settings.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from techmock_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from techmock_app.constants.test_constants import DEFAULT_GEMINI_MODEL


class Settings(BaseSettings):
    """Application settings, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_prefix="TECHMOCK_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    # Generation service
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )
    gemini_model: str = Field(
        default=DEFAULT_GEMINI_MODEL,
        validation_alias=AliasChoices("GEMINI_MODEL", "TECHMOCK_GEMINI_MODEL"),
    )

    # Storage
    data_dir: Path = Path.home() / ".techmock"

    # Server
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    log_level: str = "INFO"

    @property
    def has_generation_credential(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded on first use."""
    return Settings()
