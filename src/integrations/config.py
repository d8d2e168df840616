"""
Application configuration with environment-driven settings.

Provider credentials live in the per-client configs
(integrations.messaging.config, integrations.generation.config).
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "provider-integrations"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def _get_settings_cached() -> Settings:
    return Settings()


def get_settings() -> Settings:
    # Under pytest env vars change between tests: never hand out a frozen copy.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return Settings()
    return _get_settings_cached()
