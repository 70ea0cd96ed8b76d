"""Application configuration via Pydantic BaseSettings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    development = "development"
    staging = "staging"
    production = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment
    ENVIRONMENT: Environment = Environment.development

    # Logging
    LOG_LEVEL: str = "INFO"

    # Notion Integration
    NOTION_TOKEN: str = ""  # Internal integration secret (secret_xxx / ntn_xxx)
    NOTION_API_VERSION: str = "2022-06-28"
    NOTION_USER_CACHE_TTL_SECONDS: int = 300
    NOTION_RATE_LIMIT_RETRIES: int = 3  # Attempts on HTTP 429 only; 1 disables retry

    # Slack Integration (users.info for Slack -> Notion user mapping)
    SLACK_BOT_TOKEN: str = ""
    SLACK_API_BASE_URL: str = "https://slack.com/api"
    SLACK_TIMEOUT: float = 10.0

    # What to do when several Notion users share one email: "first" or "reject"
    USER_MAPPING_DUPLICATE_POLICY: Literal["first", "reject"] = "first"

    # Shared secret for the HTTP function endpoints (X-API-Key); empty disables the check
    FUNCTION_API_KEY: str = ""

    # Monitoring
    SENTRY_DSN: str = ""


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
