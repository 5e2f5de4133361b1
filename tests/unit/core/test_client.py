"""Тесты HttpClient.parse_request с замоканным транспортом."""

import threading

import pytest
import requests
import responses

from http_request.core.body import HttpBodyMultiPart, UploadProgressListener
from http_request.core.client import HttpClient, JarCookieManager, to_transport_headers
from http_request.core.config import ClientConfig, HttpConfig, TimeoutConfig
from http_request.core.exceptions import (
    ConfigurationError,
    ConnectionError,
    ParserError,
    ServerError,
    TimeoutError,
)
from http_request.core.headers import Header
from http_request.core.request import BaseHttpRequest, HttpRequestGet, HttpRequestPost
from http_request.parser import BODY_TO_BYTES, BODY_TO_JSON, BODY_TO_STRING, XferTransform, body_to_model
from pydantic import BaseModel

URL = "https://api.example.com/me"


class User(BaseModel):
    id: int
    name: str


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Успешные ответы
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_get_json(client, mock_responses):
    mock_responses.add(responses.GET, URL, json={"id": 1, "name": "ada"})
    assert client.parse_request(HttpRequestGet(URL, parser=BODY_TO_JSON)) == {"id": 1, "name": "ada"}


def test_get_model(client, mock_responses):
    mock_responses.add(responses.GET, URL, json={"id": 1, "name": "ada"})
    user = client.parse_request(HttpRequestGet(URL, parser=body_to_model(User)))
    assert user == User(id=1, name="ada")


def test_get_string_and_bytes(client, mock_responses):
    mock_responses.add(responses.GET, URL, body="héllo", content_type="text/plain; charset=utf-8")
    mock_responses.add(responses.GET, URL + "/raw", body=b"\x00\x01")
    assert client.parse_request(HttpRequestGet(URL, parser=BODY_TO_STRING)) == "héllo"
    assert client.parse_request(HttpRequestGet(URL + "/raw", parser=BODY_TO_BYTES)) == b"\x00\x01"


def test_post_form_body(client, mock_responses):
    mock_responses.add(responses.POST, URL, json={"ok": True})
    result = client.parse_request(HttpRequestPost(URL, {"status": "hi *"}, parser=BODY_TO_JSON))
    assert result == {"ok": True}
    sent = mock_responses.calls[0].request
    assert sent.body == b"status=hi+%2A"
    assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded; charset=utf-8"
    assert sent.headers["Content-Length"] == "13"


def test_default_and_request_headers(mock_responses):
    config = ClientConfig.create(headers={"Accept-Language": "fr"}, user_agent="test-agent/1.0")
    with HttpClient(config) as client:
        client.set_default_header("X-Client", "1")
        mock_responses.add(responses.GET, URL, body="ok")
        request = HttpRequestGet(URL, parser=BODY_TO_STRING)
        request.set_header("Accept-Language", "de")
        request.add_header("X-Tag", "a")
        client.parse_request(request)

    sent = mock_responses.calls[0].request.headers
    assert sent["User-Agent"] == "test-agent/1.0"
    assert sent["Accept-Language"] == "de"
    assert sent["X-Client"] == "1"
    assert sent["X-Tag"] == "a"
    assert sent["Content-Length"] == "0"


def test_default_header_removal(client):
    client.set_default_header("X-Client", "1")
    client.set_default_header("X-Client", None)
    assert "X-Client" not in [h.name for h in client.default_headers]


def test_to_transport_headers_joins_added_values():
    headers = to_transport_headers(
        [Header("Accept", "*/*")],
        [Header("Accept", "text/html"), Header("Accept", "text/plain")],
    )
    assert headers == {"Accept": "text/html, text/plain"}


def test_upload_progress_reported(client, mock_responses):
    events = []

    class Listener(UploadProgressListener):
        def on_param_upload_progress(self, request, param, progress):
            events.append(progress)

    mock_responses.add(responses.POST, URL, body="ok")
    body = HttpBodyMultiPart(chunk_size=16)
    body.add_file("media", "a.bin", b"z" * 200)
    request = BaseHttpRequest.Builder().set_url(URL).set_body(body).set_parser(BODY_TO_STRING).build()
    request.set_progress_listener(Listener())

    client.parse_request(request)
    assert events[0] == 0
    assert events[-1] == 100
    assert events == sorted(events)
    assert mock_responses.calls[0].request.body == body.get_encoded_params()


def test_upload_progress_reported_before_send(client, mock_responses):
    calls_seen = []

    class Listener(UploadProgressListener):
        def on_param_upload_progress(self, request, param, progress):
            calls_seen.append(len(mock_responses.calls))

    mock_responses.add(responses.POST, URL, body="ok")
    request = HttpRequestPost(URL, {"status": "hello"}, parser=BODY_TO_STRING)
    request.set_progress_listener(Listener())

    client.parse_request(request)
    assert calls_seen == [0, 0]
    assert len(mock_responses.calls) == 1


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Ошибки
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_server_error_json(client, mock_responses):
    mock_responses.add(responses.GET, URL, json={"error": "bad token"}, status=401)
    with pytest.raises(ServerError) as exc_info:
        client.parse_request(HttpRequestGet(URL, parser=BODY_TO_JSON))
    error = exc_info.value
    assert error.status_code == 401
    assert error.message == '{"error":"bad token"}'
    assert error.is_temporary_failure() is False
    assert error.request is not None


def test_server_error_503_temporary(client, mock_responses):
    mock_responses.add(responses.GET, URL, body="busy", status=503, content_type="text/plain")
    with pytest.raises(ServerError) as exc_info:
        client.parse_request(HttpRequestGet(URL, parser=BODY_TO_JSON))
    assert exc_info.value.message == "busy"
    assert exc_info.value.is_temporary_failure() is True


def test_parser_error_on_bad_body(client, mock_responses):
    mock_responses.add(responses.GET, URL, body="<html>", content_type="text/html")
    request = HttpRequestGet(URL, parser=BODY_TO_JSON)
    with pytest.raises(ParserError) as exc_info:
        client.parse_request(request)
    assert exc_info.value.source_data == "<html>"
    assert exc_info.value.request is request


class FailingTransform(XferTransform):
    def transform_data(self, data, request):
        raise ValueError("unexpected payload")


def test_single_transform_failure_becomes_parser_error(client, mock_responses):
    mock_responses.add(responses.GET, URL, body="ok")
    request = BaseHttpRequest.Builder().set_url(URL).set_response_parser(FailingTransform()).build()
    with pytest.raises(ParserError) as exc_info:
        client.parse_request(request)
    assert exc_info.value.stage == "1:FailingTransform"
    assert exc_info.value.request is request
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_timeout(client, mock_responses):
    mock_responses.add(responses.GET, URL, body=requests.exceptions.ReadTimeout("slow"))
    with pytest.raises(TimeoutError) as exc_info:
        client.parse_request(HttpRequestGet(URL, parser=BODY_TO_JSON))
    assert exc_info.value.is_temporary_failure() is True


def test_connection_error(client, mock_responses):
    mock_responses.add(responses.GET, URL, body=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(ConnectionError):
        client.parse_request(HttpRequestGet(URL, parser=BODY_TO_JSON))


def test_request_without_parser_rejected(client):
    with pytest.raises(ConfigurationError):
        client.parse_request(HttpRequestGet(URL))


def test_request_cannot_be_dispatched_twice(client, mock_responses):
    mock_responses.add(responses.GET, URL, body="ok")
    request = HttpRequestGet(URL, parser=BODY_TO_STRING)
    client.parse_request(request)
    with pytest.raises(ConfigurationError):
        client.parse_request(request)
    assert len(mock_responses.calls) == 1


def test_redirects_not_followed_when_disabled(mock_responses):
    mock_responses.add(responses.GET, URL, status=302, headers={"Location": "https://api.example.com/other"})
    request = HttpRequestGet(URL, parser=BODY_TO_STRING)
    request.set_http_config(HttpConfig(follow_redirects=False))
    with HttpClient() as client:
        assert client.parse_request(request) == ""
    assert len(mock_responses.calls) == 1


def test_timeout_config_passed_to_transport(mock_responses):
    mock_responses.add(responses.GET, URL, body="ok")
    config = ClientConfig(http=HttpConfig(timeout=TimeoutConfig(connect=2, read=7)))
    with HttpClient(config) as client:
        client.parse_request(HttpRequestGet(URL, parser=BODY_TO_STRING))
    assert mock_responses.calls[0].request.req_kwargs["timeout"] == (2, 7)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Cookies
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_cookies_persisted_and_replayed(mock_responses):
    mock_responses.add(
        responses.POST,
        "https://api.example.com/login",
        body="ok",
        headers={"Set-Cookie": "session_id=abc123; Path=/"},
    )
    mock_responses.add(responses.GET, URL, body="me")

    cookies = JarCookieManager()
    with HttpClient(cookie_manager=cookies) as client:
        client.parse_request(HttpRequestPost("https://api.example.com/login", {"u": "x"}, parser=BODY_TO_STRING))
        client.parse_request(HttpRequestGet(URL, parser=BODY_TO_STRING))

    assert cookies.jar.get("session_id") == "abc123"
    assert "Cookie" not in mock_responses.calls[0].request.headers
    assert mock_responses.calls[1].request.headers["Cookie"] == "session_id=abc123"


def test_cookies_not_sent_to_other_host(mock_responses):
    cookies = JarCookieManager()
    cookies.jar.set("session_id", "abc123", domain="api.example.com", path="/")
    mock_responses.add(responses.GET, "https://other.example.org/", body="ok")
    with HttpClient(cookie_manager=cookies) as client:
        client.parse_request(HttpRequestGet("https://other.example.org/", parser=BODY_TO_STRING))
    assert "Cookie" not in mock_responses.calls[0].request.headers


def test_cookies_not_kept_without_cookie_manager(client, mock_responses):
    mock_responses.add(
        responses.GET,
        "https://api.example.com/login",
        body="ok",
        headers={"Set-Cookie": "sid=secret; Path=/"},
    )
    mock_responses.add(
        responses.GET,
        "https://api.example.com/redir",
        status=302,
        headers={"Location": "https://api.example.com/echo"},
    )
    mock_responses.add(responses.GET, "https://api.example.com/echo", body="echo")

    client.parse_request(HttpRequestGet("https://api.example.com/login", parser=BODY_TO_STRING))
    assert client.parse_request(HttpRequestGet("https://api.example.com/redir", parser=BODY_TO_STRING)) == "echo"

    assert mock_responses.calls[2].request.url == "https://api.example.com/echo"
    assert mock_responses.calls[2].request.headers.get("Cookie") is None
    assert len(client.session.cookies) == 0


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Потоки
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_each_thread_gets_own_session(client):
    sessions = []

    def worker():
        sessions.append(client.session)

    threads = [threading.Thread(target=worker) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len({id(s) for s in sessions}) == 3
    assert client.session is client.session
