"""
Pytest configuration and fixtures for http-request-core tests.
"""

import gzip
import io
import json

import pytest
import requests
import responses as responses_lib
import urllib3
from requests.structures import CaseInsensitiveDict

from http_request.core.client import HttpClient
from http_request.core.config import ClientConfig
from http_request.core.logging.config import LoggingConfig
from http_request.core.response import HttpResponse


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    """HttpClient without logging."""
    client = HttpClient(ClientConfig.create(timeout=10))
    yield client
    client.close()


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "logs" / "requests.log"


@pytest.fixture
def logging_config_with_file(log_file):
    """
    LoggingConfig writing JSON lines to a temporary file.

    Use read_log_records(log_file) to inspect what was logged.
    """
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file),
    )


def read_log_records(path):
    """Parse a JSON log file into a list of dicts."""
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


@pytest.fixture
def log_records(log_file):
    return lambda: read_log_records(log_file)


@pytest.fixture
def make_response():
    """
    Build an HttpResponse without the network.

    The body stays unread in `raw`, exactly as after a streamed send.

    Example:
        def test_x(make_response):
            response = make_response(404, b"missing", {"Content-Type": "text/plain"})
    """
    def _make(status, body=b"", headers=None, url="https://api.example.com/resource", gzip_body=False):
        headers = dict(headers or {})
        if gzip_body:
            body = gzip.compress(body)
            headers["Content-Encoding"] = "gzip"
        raw = urllib3.HTTPResponse(
            body=io.BytesIO(body),
            headers=headers,
            status=status,
            preload_content=False,
            decode_content=False,
        )
        response = requests.Response()
        response.status_code = status
        response.headers = CaseInsensitiveDict(headers)
        response.raw = raw
        response.url = url
        response.reason = "Test"
        return HttpResponse(response)

    return _make
