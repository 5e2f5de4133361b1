"""
Request logger.

HttpLogger wraps a stdlib logger configured from LoggingConfig. Keyword
fields are masked with mask_sensitive_data() before they reach handlers.
"""

import copy
import logging
from typing import Any, Optional

from ...utils.sanitizer import mask_sensitive_data
from .config import LoggingConfig, LogLevel
from .filters import ExtraFieldsFilter, RequestTagFilter
from .formatters import get_formatter
from .handlers import create_console_handler, create_file_handler

DEFAULT_LOGGER_NAME = "http_request"


class HttpLogger:
    """
    Logger for request events.

    Args:
        config: Logging configuration (defaults if None)
        name: stdlib logger name
        tag: Optional tag added to every record as `tag`

    Example:
        >>> logger = HttpLogger(LoggingConfig.create(level="DEBUG"))
        >>> logger.info("Request started", method="GET", url="https://api.example.com")
        >>> timeline_logger = logger.tagged("timeline")
    """

    def __init__(
        self,
        config: Optional[LoggingConfig] = None,
        name: str = DEFAULT_LOGGER_NAME,
        tag: Optional[str] = None,
    ):
        self.config = config or LoggingConfig()
        self.name = name
        self.tag = tag
        self._closed = False

        level = self._get_level(self.config.level)
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False
        self._logger.handlers.clear()

        filters = []
        if self.config.enable_request_tag:
            filters.append(RequestTagFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter, filters))
        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=self.config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters,
            ))

    @staticmethod
    def _get_level(level: LogLevel) -> int:
        return getattr(logging, level.value)

    def tagged(self, tag: str) -> 'HttpLogger':
        """Logger sharing the same handlers whose records carry `tag`."""
        child = copy.copy(self)
        child.tag = tag
        return child

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields = mask_sensitive_data(kwargs)
        if self.tag is not None:
            fields.setdefault("tag", self.tag)
        self._logger.log(level, message, exc_info=exc_info, extra=fields)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """
        Log info message.

        Example:
            >>> logger.info("Request completed", status_code=200, duration_ms=150)
        """
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log error with traceback; call from an exception handler."""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)

    def close(self) -> None:
        """
        Flush and close handlers. Idempotent.

        Tagged copies share handlers, closing any of them closes all.
        """
        if self._closed:
            return
        for handler in self._logger.handlers[:]:
            try:
                handler.flush()
                handler.close()
            except (OSError, ValueError):
                pass
            self._logger.removeHandler(handler)
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
