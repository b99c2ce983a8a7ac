"""Tests for settings and logging setup."""

import structlog

from py_mapgen.config import Settings
from py_mapgen.utils.logging import configure_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        s = Settings()
        assert s.log_level == "INFO"
        assert s.default_map_width == 800
        assert s.default_map_height == 600
        assert s.max_map_width == 2000

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("MAX_MAP_WIDTH", "512")
        s = Settings()
        assert s.log_level == "DEBUG"
        assert s.max_map_width == 512


class TestLogging:
    """Test structlog configuration."""

    def test_configure_console(self):
        configure_logging(Settings(log_format="console"))
        assert structlog.is_configured()
        structlog.get_logger("test").info("Configured", renderer="console")

    def test_configure_json(self):
        configure_logging(Settings(log_format="json", log_level="WARNING"))
        assert structlog.is_configured()
