"""
Configuration for transit-http.

Settings reads environment variables (and an optional .env file). The
request layer never reads it implicitly: call request_defaults() or
retry_policy() and pass the resulting immutable values where requests and
services are built.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from transit_core.request.request import DEFAULT_TIMEOUT, RequestDefaults
from transit_core.request.vocabulary import CachePolicy
from transit_core.runtime.retry import RetryPolicy

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Settings for request execution.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    # Request defaults
    REQUEST_DEFAULT_TIMEOUT: float = Field(default=DEFAULT_TIMEOUT, ge=0)
    REQUEST_DEFAULT_CACHE_POLICY: CachePolicy = CachePolicy.USE_PROTOCOL_CACHE_POLICY
    REQUEST_MAX_RECOVERY_ATTEMPTS: int | None = Field(default=None, ge=0)

    # Retry backoff
    RETRY_BASE_DELAY: float = 1.0
    RETRY_MAX_DELAY: float = 60.0
    RETRY_JITTER: bool = True

    # httpx connection pool
    HTTP_MAX_CONNECTIONS: int = 100
    HTTP_MAX_KEEPALIVE: int = 20

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore"
    )

    def request_defaults(self) -> RequestDefaults:
        """Build the RequestDefaults described by these settings."""
        return RequestDefaults(
            cache_policy=self.REQUEST_DEFAULT_CACHE_POLICY,
            timeout=self.REQUEST_DEFAULT_TIMEOUT,
            max_recovery_attempts=self.REQUEST_MAX_RECOVERY_ATTEMPTS,
        )

    def retry_policy(self) -> RetryPolicy:
        """Build the backoff RetryPolicy described by these settings."""
        return RetryPolicy(
            base_delay=self.RETRY_BASE_DELAY,
            max_delay=self.RETRY_MAX_DELAY,
            jitter=self.RETRY_JITTER,
        )


# Global settings instance
settings = Settings()  # type: ignore
