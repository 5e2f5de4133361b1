"""
Structured logging of request events.

Example:
    >>> from http_request.core.logging import HttpLogger, LoggingConfig
    >>> logger = HttpLogger(LoggingConfig.create(level="DEBUG", format="json"))
    >>> logger.info("Request started", method="GET", url="https://api.example.com")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .filters import (
    ExtraFieldsFilter,
    RequestTagFilter,
    clear_request_tag,
    get_request_tag,
    set_request_tag,
)
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .handlers import create_console_handler, create_file_handler
from .logger import HttpLogger

__all__ = [
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "HttpLogger",
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    "RequestTagFilter",
    "ExtraFieldsFilter",
    "set_request_tag",
    "get_request_tag",
    "clear_request_tag",
    "create_console_handler",
    "create_file_handler",
]
