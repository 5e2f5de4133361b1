"""Core HTTP Request модули."""

from .exceptions import (
    ErrorCode,
    HttpException,
    ConfigurationError,
    TransportError,
    TimeoutError,
    ConnectionError,
    ParserError,
    ServerError,
    ServerErrorBuilder,
    classify_requests_exception,
)
from .headers import Header, HeaderStore
from .params import UriParams
from .body import (
    UploadProgressListener,
    HttpBodyParameters,
    HttpBodyUrlEncoded,
    HttpBodyJSON,
    HttpBodyMultiPart,
)
from .response import HttpResponse
from .config import TimeoutConfig, HttpConfig, ClientConfig, BASIC_HTTP_CONFIG
from .classifier import new_exception_from_response, get_parseable_error_stream
from .request import BaseHttpRequest, HttpRequestGet, HttpRequestPost
from .client import HttpClient, CookieManager, JarCookieManager
from .settings import HttpRequestSettings, load_from_env

__all__ = [
    # Exceptions
    "ErrorCode",
    "HttpException",
    "ConfigurationError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "ParserError",
    "ServerError",
    "ServerErrorBuilder",
    "classify_requests_exception",
    # Request
    "Header",
    "HeaderStore",
    "UriParams",
    "UploadProgressListener",
    "HttpBodyParameters",
    "HttpBodyUrlEncoded",
    "HttpBodyJSON",
    "HttpBodyMultiPart",
    "BaseHttpRequest",
    "HttpRequestGet",
    "HttpRequestPost",
    # Response
    "HttpResponse",
    "new_exception_from_response",
    "get_parseable_error_stream",
    # Client
    "HttpClient",
    "CookieManager",
    "JarCookieManager",
    # Config
    "TimeoutConfig",
    "HttpConfig",
    "ClientConfig",
    "BASIC_HTTP_CONFIG",
    "HttpRequestSettings",
    "load_from_env",
]
