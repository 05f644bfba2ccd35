"""Tests for burnout_scheduler/config.py"""

import logging

from burnout_scheduler import config


class TestConfig:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        """Should expose sane fan-out and session defaults."""
        assert config.CALENDAR_FETCH_CONCURRENCY >= 1
        assert config.CALENDAR_FETCH_TIMEOUT_SECONDS > 0
        assert config.SESSION_TTL_MINUTES > 0
        assert config.TIMEZONE.zone == config.TIMEZONE_NAME

    def test_configure_logging(self, monkeypatch):
        """Should pass the requested level to logging.basicConfig."""
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        config.configure_logging("DEBUG")

        assert calls[0]["level"] == "DEBUG"
