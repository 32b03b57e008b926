"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Registry settings
    owner_principal: str = "0xowner"  # Only principal allowed to authorize verifiers
    clock: Literal["logical", "wall"] = "logical"  # Source of logical timestamps

    # Audit archive (disabled when database_url is unset)
    database_url: str | None = None
    pool_min_size: int = 1  # Minimum connections in pool
    pool_max_size: int = 4  # Maximum connections in pool

    # API settings
    audit_page_limit: int = 500  # Max entries per GET /v1/audit page


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
