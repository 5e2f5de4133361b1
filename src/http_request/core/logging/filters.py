"""
Log filters: per-thread request tag and static extra fields.
"""

import logging
import threading
from typing import Any, Dict, Optional

_request_tag_storage = threading.local()


def set_request_tag(tag: str) -> None:
    """
    Tag log records of the current thread (usually with the request id).

    Example:
        >>> set_request_tag("HttpRequestGet{7f3a https://api.example.com/me}")
    """
    _request_tag_storage.value = tag


def get_request_tag() -> Optional[str]:
    """Request tag of the current thread or None."""
    return getattr(_request_tag_storage, 'value', None)


def clear_request_tag() -> None:
    if hasattr(_request_tag_storage, 'value'):
        delattr(_request_tag_storage, 'value')


class RequestTagFilter(logging.Filter):
    """Adds `request_tag` to records logged while a tag is set."""

    def filter(self, record: logging.LogRecord) -> bool:
        tag = get_request_tag()
        if tag and not hasattr(record, 'request_tag'):
            record.request_tag = tag
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields to every record.

    Example:
        >>> handler.addFilter(ExtraFieldsFilter({"service": "timeline"}))
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = dict(extra_fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
