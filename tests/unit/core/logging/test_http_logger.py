"""
Tests for HttpLogger and request event logging.
"""

import logging

import pytest
import responses

from http_request.core.client import HttpClient
from http_request.core.config import ClientConfig
from http_request.core.exceptions import ServerError
from http_request.core.logging import HttpLogger, LoggingConfig
from http_request.core.logging.filters import clear_request_tag, get_request_tag, set_request_tag
from http_request.core.request import HttpRequestGet
from http_request.parser import BODY_TO_STRING

URL = "https://api.example.com/me"


class TestHttpLogger:

    def test_writes_json_lines(self, logging_config_with_file, log_records):
        with HttpLogger(logging_config_with_file, name="http_request.test.json") as logger:
            logger.info("Request started", method="GET", url=URL)
        records = log_records()
        assert records[0]["message"] == "Request started"
        assert records[0]["method"] == "GET"

    def test_masks_sensitive_fields(self, logging_config_with_file, log_records):
        with HttpLogger(logging_config_with_file, name="http_request.test.mask") as logger:
            logger.info(
                "Signed",
                authorization='OAuth oauth_signature="abc"',
                url=URL + "?oauth_token=secret-token&page=2",
            )
        record = log_records()[0]
        assert record["authorization"] == "***REDACTED***"
        assert "secret-token" not in record["url"]
        assert "page=2" in record["url"]

    def test_tagged_logger(self, logging_config_with_file, log_records):
        with HttpLogger(logging_config_with_file, name="http_request.test.tag") as logger:
            logger.tagged("timeline").debug("Polling")
            logger.debug("Untagged")
        records = log_records()
        assert records[0]["tag"] == "timeline"
        assert "tag" not in records[1]

    def test_level_filtering(self, log_file, log_records):
        config = LoggingConfig.create(
            level="WARNING", format="json", enable_console=False, enable_file=True, file_path=str(log_file)
        )
        with HttpLogger(config, name="http_request.test.level") as logger:
            logger.info("hidden")
            logger.warning("shown")
            assert logger.is_enabled_for(logging.WARNING)
        assert [r["message"] for r in log_records()] == ["shown"]

    def test_exception_includes_traceback(self, logging_config_with_file, log_records):
        with HttpLogger(logging_config_with_file, name="http_request.test.exc") as logger:
            try:
                raise ValueError("boom")
            except ValueError:
                logger.exception("Failed")
        assert "ValueError: boom" in log_records()[0]["exception"]

    def test_close_is_idempotent(self, logging_config_with_file):
        logger = HttpLogger(logging_config_with_file, name="http_request.test.close")
        logger.close()
        logger.close()


class TestClientLogging:

    def test_success_events(self, logging_config_with_file, log_records, mock_responses):
        mock_responses.add(responses.GET, URL, body="ok")
        with HttpClient(ClientConfig.create(logging=logging_config_with_file)) as client:
            client.parse_request(HttpRequestGet(URL, parser=BODY_TO_STRING))
        records = log_records()
        messages = [r["message"] for r in records]
        assert messages == ["Request started", "Request completed"]
        assert records[1]["status_code"] == 200
        assert "duration_ms" in records[1]

    def test_records_tagged_with_request(self, logging_config_with_file, log_records, mock_responses):
        mock_responses.add(responses.GET, URL, body="ok")
        request = HttpRequestGet(URL, parser=BODY_TO_STRING)
        with HttpClient(ClientConfig.create(logging=logging_config_with_file)) as client:
            client.parse_request(request)
        started, completed = log_records()
        assert started["request_tag"] == repr(request)
        assert completed["request_tag"] == repr(request)
        assert get_request_tag() is None

    def test_request_tag_restored_after_dispatch(self, logging_config_with_file, mock_responses):
        mock_responses.add(responses.GET, URL, body="ok")
        set_request_tag("outer")
        try:
            with HttpClient(ClientConfig.create(logging=logging_config_with_file)) as client:
                client.parse_request(HttpRequestGet(URL, parser=BODY_TO_STRING))
            assert get_request_tag() == "outer"
        finally:
            clear_request_tag()

    def test_failure_event(self, logging_config_with_file, log_records, mock_responses):
        mock_responses.add(responses.GET, URL, body="nope", status=404, content_type="text/plain")
        with HttpClient(ClientConfig.create(logging=logging_config_with_file)) as client:
            with pytest.raises(ServerError):
                client.parse_request(HttpRequestGet(URL, parser=BODY_TO_STRING))
        failed = log_records()[-1]
        assert failed["message"] == "Request failed"
        assert failed["level"] == "ERROR"
        assert failed["error_code"] == "server"

    def test_request_logger_overrides_client_logger(self, logging_config_with_file, log_records, mock_responses):
        mock_responses.add(responses.GET, URL, body="ok")
        request = HttpRequestGet(URL, parser=BODY_TO_STRING)
        with HttpLogger(logging_config_with_file, name="http_request.test.request") as logger:
            request.set_logger(logger.tagged("profile"))
            with HttpClient() as client:
                client.parse_request(request)
        assert all(r["tag"] == "profile" for r in log_records())
        assert len(log_records()) == 2
