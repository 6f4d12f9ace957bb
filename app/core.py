"""Application configuration and settings management.

This module defines the application settings loaded from environment
variables and provides a helper for accessing the cached settings.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Attributes:
        DATABASE_URL: Database connection string.
        ALLOWED_ORIGINS: Allowed origins for CORS.
        REDIS_URL: Redis connection URL for rate limiting.
        LOGIN_RATE_LIMIT_TIMES: Login attempts allowed per window.
        LOGIN_RATE_LIMIT_SECONDS: Length of the login rate limit window.
        DEFAULT_PAGE_SIZE: Page size used by contact search when none is given.
        MAX_PAGE_SIZE: Largest page size a client may request.
        LOG_LEVEL: Root logging level.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="allow")

    DATABASE_URL: str = "sqlite:///./contacts.db"
    ALLOWED_ORIGINS: List[str] = ["*"]
    REDIS_URL: str = "redis://localhost:6379"
    LOGIN_RATE_LIMIT_TIMES: int = 10
    LOGIN_RATE_LIMIT_SECONDS: int = 60
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    LOG_LEVEL: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    The settings object is cached to prevent reloading environment
    variables multiple times during application lifetime.
    """

    return Settings()
