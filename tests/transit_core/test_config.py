"""Unit tests for Settings and logging setup."""

import logging

from loguru import logger

from transit_core.config import Settings
from transit_core.logging import InterceptHandler, setup_logging
from transit_core.request.request import DEFAULT_TIMEOUT
from transit_core.request.vocabulary import CachePolicy


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Should fall back to library defaults."""
        monkeypatch.delenv("REQUEST_DEFAULT_TIMEOUT", raising=False)
        settings = Settings(_env_file=None)

        defaults = settings.request_defaults()

        assert defaults.timeout == DEFAULT_TIMEOUT
        assert defaults.cache_policy is CachePolicy.USE_PROTOCOL_CACHE_POLICY
        assert defaults.max_recovery_attempts is None

    def test_reads_environment(self, monkeypatch):
        """Environment variables should override defaults."""
        monkeypatch.setenv("REQUEST_DEFAULT_TIMEOUT", "12.5")
        monkeypatch.setenv("REQUEST_DEFAULT_CACHE_POLICY", "reload_ignoring_local_cache")
        monkeypatch.setenv("REQUEST_MAX_RECOVERY_ATTEMPTS", "4")
        monkeypatch.setenv("RETRY_BASE_DELAY", "0.25")
        monkeypatch.setenv("RETRY_JITTER", "false")

        settings = Settings(_env_file=None)
        defaults = settings.request_defaults()
        policy = settings.retry_policy()

        assert defaults.timeout == 12.5
        assert defaults.cache_policy is CachePolicy.RELOAD_IGNORING_LOCAL_CACHE
        assert defaults.max_recovery_attempts == 4
        assert policy.delay_for(0) == 0.25

    def test_values_are_independent(self, monkeypatch):
        """Derived defaults should not change when settings are rebuilt."""
        monkeypatch.setenv("REQUEST_DEFAULT_TIMEOUT", "1")
        first = Settings(_env_file=None).request_defaults()
        monkeypatch.setenv("REQUEST_DEFAULT_TIMEOUT", "2")
        second = Settings(_env_file=None).request_defaults()

        assert first.timeout == 1.0
        assert second.timeout == 2.0


class TestSetupLogging:
    """Tests for loguru setup."""

    def test_routes_to_new_sink(self):
        """setup_logging should leave loguru usable for new sinks."""
        setup_logging("DEBUG")
        messages = []
        sink_id = logger.add(messages.append, level="INFO")
        try:
            logger.info("hello")
        finally:
            logger.remove(sink_id)

        assert any("hello" in str(m) for m in messages)

    def test_intercepts_httpx_logger(self):
        """httpx records should be forwarded into loguru."""
        setup_logging("DEBUG", serialize=True)
        httpx_logger = logging.getLogger("httpx")
        messages = []
        sink_id = logger.add(messages.append, level="INFO")
        try:
            httpx_logger.warning("pool exhausted")
        finally:
            logger.remove(sink_id)

        assert any(isinstance(h, InterceptHandler) for h in httpx_logger.handlers)
        assert httpx_logger.propagate is False
        assert any("pool exhausted" in str(m) for m in messages)
