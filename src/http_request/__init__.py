"""HTTP Request - builder-based HTTP requests with pluggable parsing and signing."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core import (
    ErrorCode,
    HttpException,
    ConfigurationError,
    TransportError,
    TimeoutError,
    ConnectionError,
    ParserError,
    ServerError,
    ServerErrorBuilder,
    Header,
    UriParams,
    UploadProgressListener,
    HttpBodyParameters,
    HttpBodyUrlEncoded,
    HttpBodyJSON,
    HttpBodyMultiPart,
    HttpResponse,
    BaseHttpRequest,
    HttpRequestGet,
    HttpRequestPost,
    HttpClient,
    CookieManager,
    JarCookieManager,
    TimeoutConfig,
    HttpConfig,
    ClientConfig,
    load_from_env,
)
from .core.logging import LoggingConfig, HttpLogger
from .parser import (
    XferTransform,
    InputStreamParser,
    InputStreamBytesParser,
    InputStreamStringParser,
    InputStreamJSONObjectParser,
    InputStreamModelParser,
    BODY_TO_STRING,
    BODY_TO_BYTES,
    BODY_TO_JSON,
    BODY_TO_JSON_OBJECT,
    body_to_model,
)
from .signed import (
    RequestSigner,
    RequestSignerNone,
    RequestSignerOAuth1,
    OAuthClientApp,
    OAuthUser,
)

# Users can configure logging themselves using logging.getLogger('http_request')
logging.getLogger('http_request').addHandler(logging.NullHandler())

try:
    __version__ = version("http-request-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Client
    "HttpClient",
    "CookieManager",
    "JarCookieManager",

    # Requests
    "BaseHttpRequest",
    "HttpRequestGet",
    "HttpRequestPost",
    "Header",
    "UriParams",
    "UploadProgressListener",
    "HttpBodyParameters",
    "HttpBodyUrlEncoded",
    "HttpBodyJSON",
    "HttpBodyMultiPart",
    "HttpResponse",

    # Parsers
    "XferTransform",
    "InputStreamParser",
    "InputStreamBytesParser",
    "InputStreamStringParser",
    "InputStreamJSONObjectParser",
    "InputStreamModelParser",
    "BODY_TO_STRING",
    "BODY_TO_BYTES",
    "BODY_TO_JSON",
    "BODY_TO_JSON_OBJECT",
    "body_to_model",

    # Signing
    "RequestSigner",
    "RequestSignerNone",
    "RequestSignerOAuth1",
    "OAuthClientApp",
    "OAuthUser",

    # Config
    "TimeoutConfig",
    "HttpConfig",
    "ClientConfig",
    "LoggingConfig",
    "HttpLogger",
    "load_from_env",

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
]
