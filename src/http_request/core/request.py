"""
HTTP запрос и его билдер.

Запрос собирается через BaseHttpRequest.Builder и после build() не меняет
URL, метод, парсер и signer. Заголовки остаются изменяемыми до отправки.
Один запрос отправляется ровно один раз.
"""

import logging
from typing import Any, BinaryIO, Callable, Dict, Generic, Iterable, List, Optional, TypeVar, Union, TYPE_CHECKING
from urllib.parse import urlsplit

from ..parser.base import InputStreamParser, XferTransform, XferTransformResponseInputStream
from .body import HttpBodyParameters, UploadProgressListener, body_from_mapping, CONTENT_LENGTH
from .classifier import new_exception_from_response
from .config import BASIC_HTTP_CONFIG, HttpConfig
from .exceptions import ConfigurationError, ServerErrorBuilder
from .headers import Header, HeaderStore
from .params import UriParams
from .response import HttpResponse

if TYPE_CHECKING:
    from ..signed.signer import RequestSigner
    from .client import CookieManager
    from .logging import HttpLogger

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_HTTP_METHOD = "GET"
DEFAULT_POST_METHOD = "POST"
METHODS_WITHOUT_BODY = frozenset({"GET", "HEAD"})

JSONErrorHandler = Callable[[ServerErrorBuilder, Any], Optional[ServerErrorBuilder]]


def is_method_with_body(http_method: str) -> bool:
    """Может ли метод иметь тело (все кроме GET и HEAD)."""
    return http_method not in METHODS_WITHOUT_BODY


def validate_url(url: str) -> str:
    """
    Проверить, что URL абсолютный (scheme://host/...).

    Raises:
        ConfigurationError: URL пустой или не абсолютный
    """
    if not url or not isinstance(url, str):
        raise ConfigurationError(f"invalid URL: {url!r}")
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ConfigurationError(f"invalid URL: {url!r}")
    return url


class BaseHttpRequest(Generic[T]):
    """
    HTTP запрос, передаваемый в HttpClient.

    Attributes:
        url: Полный URL (с query параметрами)
        http_method: HTTP метод
        parser: Парсер ответа (HttpResponse -> T)
        signer: Signer или None
        body: Тело запроса или None

    Examples:
        >>> request = (BaseHttpRequest.Builder()
        ...            .set_url("https://api.example.com/items", UriParams().add("page", 2))
        ...            .set_stream_parser(InputStreamStringParser.INSTANCE)
        ...            .build())
        >>> request.url
        'https://api.example.com/items?page=2'
    """

    class Builder(Generic[T]):
        """
        Билдер BaseHttpRequest, по умолчанию метод GET.

        Example:
            >>> body = HttpBodyUrlEncoded()
            >>> body.add("status", "hello")
            >>> request = (BaseHttpRequest.Builder()
            ...            .set_url("https://api.example.com/statuses")
            ...            .set_body(body)
            ...            .set_signer(signer)
            ...            .set_response_parser(BODY_TO_JSON)
            ...            .build())
            >>> request.http_method
            'POST'
        """

        def __init__(self):
            self.url: Optional[str] = None
            self.http_method: str = DEFAULT_HTTP_METHOD
            self.body: Optional[HttpBodyParameters] = None
            self.parser: Optional[XferTransform] = None
            self.error_parser: Optional[XferTransform] = None
            self.signer: Optional['RequestSigner'] = None
            self.json_error_handler: Optional[JSONErrorHandler] = None

        def set_url(self, url: str, uri_params: Optional[UriParams] = None) -> 'BaseHttpRequest.Builder[T]':
            """
            URL запроса.

            Args:
                url: Абсолютный URL
                uri_params: Параметры, добавляемые в query string

            Raises:
                ConfigurationError: URL не абсолютный
            """
            validate_url(url)
            self.url = uri_params.add_to_url(url) if uri_params is not None else url
            return self

        def set_http_method(self, http_method: str) -> 'BaseHttpRequest.Builder[T]':
            """
            HTTP метод (GET, POST, PUT, DELETE, PATCH, HEAD...).

            Raises:
                ConfigurationError: метод пустой или не допускает уже заданное тело
            """
            if not http_method:
                raise ConfigurationError("invalid empty HTTP method")
            http_method = http_method.upper()
            if self.body is not None and not is_method_with_body(http_method):
                raise ConfigurationError(f"invalid HTTP method with body: {http_method}")
            self.http_method = http_method
            return self

        def set_body(
            self,
            body: Optional[HttpBodyParameters],
            http_method: str = DEFAULT_POST_METHOD,
        ) -> 'BaseHttpRequest.Builder[T]':
            """
            Тело запроса; метод по умолчанию POST.

            Raises:
                ConfigurationError: метод не допускает тело (GET, HEAD)
            """
            self.set_http_method(http_method)
            if body is not None and not is_method_with_body(self.http_method):
                raise ConfigurationError(f"invalid body for HTTP method: {self.http_method}")
            self.body = body
            return self

        def set_stream_parser(self, parser: InputStreamParser[T]) -> 'BaseHttpRequest.Builder[T]':
            """Парсер потока тела ответа."""
            self.parser = XferTransformResponseInputStream.INSTANCE.then(parser)
            return self

        def set_response_parser(self, parser: XferTransform) -> 'BaseHttpRequest.Builder[T]':
            """Парсер всего ответа (HttpResponse -> T)."""
            self.parser = parser
            return self

        def set_parser(self, parser: Union[InputStreamParser[T], XferTransform]) -> 'BaseHttpRequest.Builder[T]':
            """set_stream_parser() или set_response_parser() в зависимости от типа."""
            if isinstance(parser, InputStreamParser):
                return self.set_stream_parser(parser)
            return self.set_response_parser(parser)

        def set_error_parser(self, parser: XferTransform) -> 'BaseHttpRequest.Builder[T]':
            """Парсер тела ответа с HTTP ошибкой (результат в ServerError.server_error)."""
            self.error_parser = parser
            return self

        def set_signer(self, signer: 'RequestSigner') -> 'BaseHttpRequest.Builder[T]':
            """
            Signer запроса.

            Raises:
                ConfigurationError: signer is None
            """
            if signer is None:
                raise ConfigurationError("invalid null signer")
            self.signer = signer
            return self

        def set_json_error_handler(self, handler: JSONErrorHandler) -> 'BaseHttpRequest.Builder[T]':
            """Функция, дополняющая ошибку данными из JSON тела ответа."""
            self.json_error_handler = handler
            return self

        def build(self) -> 'BaseHttpRequest[T]':
            """Собрать запрос."""
            return BaseHttpRequest(self)

    def __init__(self, builder: 'BaseHttpRequest.Builder[T]'):
        if builder.url is None:
            raise ConfigurationError("request URL is not set")
        self._url = builder.url
        self._http_method = builder.http_method
        self._body = builder.body
        self._parser = builder.parser
        self._error_parser = builder.error_parser
        self._signer = builder.signer
        self._json_error_handler = builder.json_error_handler

        self._headers = HeaderStore()
        self._http_config: HttpConfig = BASIC_HTTP_CONFIG
        self._logger: Optional['HttpLogger'] = None
        self._progress_listener: Optional[UploadProgressListener] = None
        self._response: Optional[HttpResponse] = None
        self._headers_settled = False
        self._dispatched = False

    # ==================== Свойства ====================

    @property
    def url(self) -> str:
        return self._url

    @property
    def http_method(self) -> str:
        return self._http_method

    @property
    def body(self) -> Optional[HttpBodyParameters]:
        return self._body

    @property
    def parser(self) -> Optional[XferTransform]:
        return self._parser

    @property
    def error_parser(self) -> Optional[XferTransform]:
        return self._error_parser

    @property
    def signer(self) -> Optional['RequestSigner']:
        return self._signer

    @property
    def http_config(self) -> HttpConfig:
        return self._http_config

    def set_http_config(self, config: HttpConfig) -> None:
        """HttpConfig для этого запроса (по умолчанию BASIC_HTTP_CONFIG)."""
        self._http_config = config

    @property
    def logger(self) -> Optional['HttpLogger']:
        return self._logger

    def set_logger(self, logger: Optional['HttpLogger']) -> None:
        """Логгер для событий этого запроса, None - без логов."""
        self._logger = logger

    @property
    def progress_listener(self) -> Optional[UploadProgressListener]:
        return self._progress_listener

    def set_progress_listener(self, listener: Optional[UploadProgressListener]) -> None:
        self._progress_listener = listener

    @property
    def is_dispatched(self) -> bool:
        return self._dispatched

    # ==================== Заголовки ====================

    def set_header(self, key: str, value: Optional[str]) -> None:
        """Установить заголовок (None - удалить)."""
        self._headers.set_header(key, value)

    def add_header(self, key: str, value: str) -> None:
        """Добавить значение заголовка."""
        self._headers.add_header(key, value)

    def get_header(self, name: str) -> Optional[str]:
        return self._headers.get_header(name)

    def get_all_headers(self, default_headers: Iterable[Header] = ()) -> List[Header]:
        """Все заголовки: сначала default_headers, затем заголовки запроса."""
        return self._headers.get_all_headers(default_headers)

    # ==================== Жизненный цикл ====================

    def mark_dispatched(self) -> None:
        """
        Отметить запрос как отправленный.

        Raises:
            ConfigurationError: запрос уже отправлялся
        """
        if self._dispatched:
            raise ConfigurationError(f"{self!r} was already dispatched", self)
        self._dispatched = True

    def settle_http_headers(self) -> None:
        """
        Выставить заголовки тела и подписать запрос.

        Signer вызывается один раз, после заголовков тела.
        """
        if self._headers_settled:
            return
        self._headers_settled = True
        if self._body is not None:
            self._body.settle_http_headers(self)
        elif not is_method_with_body(self._http_method):
            self.set_header(CONTENT_LENGTH, "0")
        if self._signer is not None:
            self._signer.sign(self)

    def replace_signed_url(self, url: str) -> None:
        """Заменить URL подписанным (только для signer'ов с подписью в query)."""
        if self._response is not None:
            raise ConfigurationError("cannot change the URL of a completed request", self)
        self._url = validate_url(url)

    def output_body(self, output: BinaryIO) -> None:
        """Записать тело в output, сообщая прогресс 0% и 100%."""
        listener = self._progress_listener
        if listener is not None:
            listener.on_param_upload_progress(self, None, 0)
        if self._body is not None:
            self._body.write_body_to(output, self, listener)
        if listener is not None:
            listener.on_param_upload_progress(self, None, 100)

    def set_response(self, response: HttpResponse, cookie_manager: Optional['CookieManager'] = None) -> None:
        """Сохранить ответ и передать его cookie manager'у (ошибки кук игнорируются)."""
        self._response = response
        if cookie_manager is not None:
            try:
                cookie_manager.set_cookie_response(self, response)
            except (OSError, ValueError) as e:
                logger.debug("Ignoring cookie store failure for %r: %s", self, e)

    def get_response(self) -> Optional[HttpResponse]:
        return self._response

    # ==================== Ошибки ====================

    def new_exception_from_response(self, cause: Optional[BaseException] = None) -> ServerErrorBuilder:
        """Собрать ServerErrorBuilder по ответу с ошибкой (никогда не бросает)."""
        return new_exception_from_response(self, self._response, cause)

    def handle_json_error(self, builder: ServerErrorBuilder, json_data: Any) -> ServerErrorBuilder:
        """
        Дополнить ошибку данными из JSON тела.

        По умолчанию вызывает json_error_handler из билдера; подклассы могут
        переопределить.
        """
        if self._json_error_handler is None:
            return builder
        return self._json_error_handler(builder, json_data) or builder

    # ==================== Представление ====================

    def _to_string_extra(self) -> str:
        result = self._url
        user = getattr(self._signer, "oauth_user", None)
        if user is not None:
            result += f" for {user}"
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}{{{id(self):x} {self._to_string_extra()}}}"


class HttpRequestGet(BaseHttpRequest[T]):
    """
    GET запрос.

    Example:
        >>> request = HttpRequestGet("https://api.example.com/me", parser=BODY_TO_JSON)
    """

    def __init__(
        self,
        url: str,
        uri_params: Optional[UriParams] = None,
        parser: Optional[Union[InputStreamParser[T], XferTransform]] = None,
    ):
        builder = BaseHttpRequest.Builder().set_url(url, uri_params)
        if parser is not None:
            builder.set_parser(parser)
        super().__init__(builder)


class HttpRequestPost(BaseHttpRequest[T]):
    """
    POST запрос.

    Args:
        url: URL
        body: HttpBodyParameters или dict (кодируется как form-urlencoded)
        parser: Парсер ответа

    Example:
        >>> request = HttpRequestPost(
        ...     "https://api.example.com/statuses",
        ...     {"status": "hello"},
        ...     parser=BODY_TO_JSON,
        ... )
    """

    def __init__(
        self,
        url: str,
        body: Optional[Union[HttpBodyParameters, Dict[str, Any]]] = None,
        parser: Optional[Union[InputStreamParser[T], XferTransform]] = None,
    ):
        if isinstance(body, dict):
            body = body_from_mapping(body)
        builder = BaseHttpRequest.Builder().set_url(url)
        builder.set_body(body, DEFAULT_POST_METHOD)
        if parser is not None:
            builder.set_parser(parser)
        super().__init__(builder)
