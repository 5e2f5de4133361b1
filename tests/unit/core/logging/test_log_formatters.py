"""
Tests for log formatters and filters.
"""

import json
import logging

import pytest

from http_request.core.logging.filters import (
    ExtraFieldsFilter,
    RequestTagFilter,
    clear_request_tag,
    get_request_tag,
    set_request_tag,
)
from http_request.core.logging.formatters import JSONFormatter, TextFormatter, get_formatter


def make_record(**extra):
    record = logging.LogRecord("http_request", logging.INFO, __file__, 1, "Request completed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:

    def test_json_formatter(self):
        data = json.loads(JSONFormatter().format(make_record(status_code=200, method="GET")))
        assert data["message"] == "Request completed"
        assert data["level"] == "INFO"
        assert data["logger"] == "http_request"
        assert data["status_code"] == 200
        assert data["method"] == "GET"
        assert "timestamp" in data

    def test_json_formatter_non_serializable(self):
        data = json.loads(JSONFormatter().format(make_record(obj=object())))
        assert data["obj"].startswith("<object")

    def test_text_formatter(self):
        text = TextFormatter().format(make_record(status_code=404))
        assert "[INFO] [http_request] Request completed" in text
        assert text.endswith("status_code=404")

    def test_get_formatter(self):
        assert isinstance(get_formatter("json"), JSONFormatter)
        assert isinstance(get_formatter("TEXT"), TextFormatter)
        with pytest.raises(ValueError):
            get_formatter("colored")


class TestFilters:

    def teardown_method(self):
        clear_request_tag()

    def test_request_tag_roundtrip(self):
        assert get_request_tag() is None
        set_request_tag("req-1")
        assert get_request_tag() == "req-1"
        clear_request_tag()
        assert get_request_tag() is None

    def test_request_tag_filter(self):
        set_request_tag("req-1")
        record = make_record()
        assert RequestTagFilter().filter(record) is True
        assert record.request_tag == "req-1"

    def test_request_tag_filter_without_tag(self):
        record = make_record()
        RequestTagFilter().filter(record)
        assert not hasattr(record, "request_tag")

    def test_extra_fields_do_not_override(self):
        record = make_record(service="explicit")
        ExtraFieldsFilter({"service": "default", "env": "test"}).filter(record)
        assert record.service == "explicit"
        assert record.env == "test"
