"""
Tests for logging configuration.
"""

import pytest

from http_request.core.logging.config import LogFormat, LoggingConfig, LogLevel


class TestLoggingConfig:
    """Tests for LoggingConfig dataclass."""

    def test_default_config(self):
        config = LoggingConfig()
        assert config.level == LogLevel.INFO
        assert config.format == LogFormat.TEXT
        assert config.enable_console is True
        assert config.enable_file is False
        assert config.enable_request_tag is True

    def test_create_from_strings(self):
        config = LoggingConfig.create(level="debug", format="JSON")
        assert config.level == LogLevel.DEBUG
        assert config.format == LogFormat.JSON

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            LoggingConfig.create(level="LOUD")

    def test_file_requires_path(self):
        with pytest.raises(ValueError):
            LoggingConfig(enable_file=True)

    def test_enums_are_strings(self):
        assert isinstance(LogLevel.INFO, str)
        assert isinstance(LogFormat.JSON, str)
