# src/http_request/core/client.py
"""
HttpClient: отправка BaseHttpRequest через requests.

Отправка одного запроса:
    1. проверка (парсер задан, запрос еще не отправлялся)
    2. заголовки тела, подпись, куки
    3. отправка заголовков по умолчанию + заголовков запроса и тела
    4. обертка ответа, передача его cookie manager'у
    5. статус < 400 -> request.parser, иначе -> ServerError
"""

import io
import threading
import time
from abc import ABC, abstractmethod
from http.cookiejar import DefaultCookiePolicy
from typing import Any, Dict, List, Optional, TypeVar, TYPE_CHECKING

import requests
from requests.cookies import RequestsCookieJar, get_cookie_header

from .config import BASIC_HTTP_CONFIG, ClientConfig, HttpConfig
from .exceptions import (
    ConfigurationError,
    HttpException,
    ParserError,
    TransportError,
    classify_requests_exception,
)
from .headers import Header
from .logging.filters import clear_request_tag, get_request_tag, set_request_tag
from .request import BaseHttpRequest
from .response import HttpResponse
from .session_manager import ThreadSafeSessionManager
from ..parser.base import STAGE_ERRORS
from ..utils.sanitizer import mask_url

if TYPE_CHECKING:
    from .logging import HttpLogger

T = TypeVar("T")

USER_AGENT = "User-Agent"
COOKIE = "Cookie"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# КУКИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class CookieManager(ABC):
    """Хранилище кук, которое вызывается вокруг каждой отправки."""

    @abstractmethod
    def apply_cookies(self, request: BaseHttpRequest) -> None:
        """Выставить заголовок Cookie запроса перед отправкой."""
        pass

    @abstractmethod
    def set_cookie_response(self, request: BaseHttpRequest, response: HttpResponse) -> None:
        """Сохранить Set-Cookie из ответа."""
        pass


class JarCookieManager(CookieManager):
    """
    CookieManager поверх cookie jar из requests.

    Example:
        >>> cookies = JarCookieManager()
        >>> client = HttpClient(cookie_manager=cookies)
        >>> client.parse_request(login_request)
        >>> cookies.jar.get("session_id")
        'abc123'
    """

    def __init__(self, jar: Optional[RequestsCookieJar] = None):
        self.jar = jar if jar is not None else RequestsCookieJar()
        self._lock = threading.Lock()

    def apply_cookies(self, request: BaseHttpRequest) -> None:
        with self._lock:
            header = get_cookie_header(self.jar, requests.Request(request.http_method, request.url))
        if header:
            request.set_header(COOKIE, header)

    def set_cookie_response(self, request: BaseHttpRequest, response: HttpResponse) -> None:
        with self._lock:
            self.jar.update(response.response.cookies)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# КЛИЕНТ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def to_transport_headers(defaults: List[Header], request_headers: List[Header]) -> Dict[str, str]:
    """
    Итоговые заголовки в виде dict для requests.

    Заголовки запроса заменяют одноименные заголовки по умолчанию. Несколько
    значений одного заголовка запроса (из add_header) склеиваются через ", ".

    Example:
        >>> to_transport_headers(
        ...     [Header("Accept", "*/*")],
        ...     [Header("Accept", "application/json")],
        ... )
        {'Accept': 'application/json'}
    """
    headers = {name: value for name, value in defaults}
    seen = set()
    for name, value in request_headers:
        if name in seen:
            headers[name] = f"{headers[name]}, {value}"
        else:
            headers[name] = value
            seen.add(name)
    return headers


class HttpClient:
    """
    Синхронный клиент для отправки BaseHttpRequest.

    Потокобезопасен: каждый поток отправляет через свою requests.Session.
    Один и тот же объект запроса нельзя отправить дважды. Куки между
    запросами переносит только cookie_manager.

    Example:
        >>> with HttpClient(ClientConfig.create(timeout=10)) as client:
        ...     me = client.parse_request(HttpRequestGet("https://api.example.com/me", parser=BODY_TO_JSON))
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        cookie_manager: Optional[CookieManager] = None,
    ):
        self._config = config or ClientConfig()
        self.cookie_manager = cookie_manager

        self._default_headers: Dict[str, str] = {}
        if self._config.user_agent:
            self._default_headers[USER_AGENT] = self._config.user_agent
        self._default_headers.update(self._config.headers)
        self._headers_lock = threading.Lock()

        self._logger: Optional['HttpLogger'] = None
        if self._config.logging is not None:
            from .logging import HttpLogger
            self._logger = HttpLogger(config=self._config.logging, name="http_request.client")

        self._session_manager = ThreadSafeSessionManager(session_factory=self._create_session)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        # netrc не должен подменять подписанный Authorization при редиректах
        session.trust_env = False
        # jar сессии не принимает куки: их хранит только cookie_manager
        session.cookies = RequestsCookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))
        return session

    def close(self) -> None:
        """Закрыть сессии всех потоков и обработчики логгера."""
        if self._logger is not None:
            self._logger.close()
        self._session_manager.close_all()

    # ==================== Свойства ====================

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def logger(self) -> Optional['HttpLogger']:
        return self._logger

    @property
    def session(self) -> requests.Session:
        """Сессия текущего потока."""
        return self._session_manager.get_session()

    @property
    def default_headers(self) -> List[Header]:
        """Заголовки для каждого запроса (идут перед заголовками самого запроса)."""
        with self._headers_lock:
            return [Header(name, value) for name, value in self._default_headers.items()]

    def set_default_header(self, name: str, value: Optional[str]) -> None:
        """Установить заголовок по умолчанию (None удаляет его)."""
        with self._headers_lock:
            if value is None:
                self._default_headers.pop(name, None)
            else:
                self._default_headers[name] = value

    # ==================== Отправка ====================

    def _http_config(self, request: BaseHttpRequest) -> HttpConfig:
        # запрос без собственного HttpConfig получает конфиг клиента
        if request.http_config is BASIC_HTTP_CONFIG:
            return self._config.http
        return request.http_config

    def _send(self, request: BaseHttpRequest, http_config: HttpConfig) -> requests.Response:
        # тело и весь прогресс отправки пишутся в память до session.send
        body = io.BytesIO()
        request.output_body(body)
        prepared = requests.Request(
            method=request.http_method,
            url=request.url,
            headers=to_transport_headers(self.default_headers, request.get_all_headers()),
            data=body.getvalue() if request.body is not None else None,
        ).prepare()

        session = self.session
        session.max_redirects = http_config.max_redirects
        try:
            return session.send(
                prepared,
                timeout=http_config.timeout.as_tuple(),
                allow_redirects=http_config.follow_redirects,
                verify=http_config.verify_ssl,
                stream=True,
            )
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, request.url, request) from e

    def parse_request(self, request: BaseHttpRequest[T]) -> T:
        """
        Отправить запрос и разобрать ответ его парсером.

        Пока идет отправка, записи логгера помечаются тегом запроса
        (request_tag).

        Returns:
            Результат request.parser

        Raises:
            ConfigurationError: нет парсера, запрос уже отправлен, плохой URL
            TransportError: ошибка соединения, таймаут, ошибка чтения
            ParserError: тело успешного ответа не удалось разобрать
            ServerError: сервер ответил статусом >= 400
        """
        if request.parser is None:
            raise ConfigurationError(f"{request!r} has no response parser", request)
        request.mark_dispatched()

        logger = request.logger or self._logger
        previous_tag = get_request_tag()
        if logger:
            set_request_tag(mask_url(repr(request)))
        try:
            return self._dispatch(request, logger)
        finally:
            if logger:
                if previous_tag is not None:
                    set_request_tag(previous_tag)
                else:
                    clear_request_tag()

    def _dispatch(self, request: BaseHttpRequest[T], logger: Optional['HttpLogger']) -> T:
        http_config = self._http_config(request)
        start_time = time.time()

        request.settle_http_headers()
        if self.cookie_manager is not None:
            try:
                self.cookie_manager.apply_cookies(request)
            except (OSError, ValueError) as e:
                if logger:
                    logger.debug("Cookie lookup failed", url=request.url, error=str(e))

        if logger:
            logger.info("Request started", method=request.http_method, url=request.url)

        response: Optional[HttpResponse] = None
        try:
            response = HttpResponse(self._send(request, http_config))
            request.set_response(response, self.cookie_manager)

            if response.status_code < 400:
                result = self._parse(request, response)
            else:
                raise request.new_exception_from_response().build()

            if logger:
                logger.info(
                    "Request completed",
                    method=request.http_method,
                    url=request.url,
                    status_code=response.status_code,
                    duration_ms=round((time.time() - start_time) * 1000, 2),
                )
            return result

        except HttpException as e:
            if logger:
                logger.error(
                    "Request failed",
                    method=request.http_method,
                    url=request.url,
                    error_code=e.error_code.value,
                    error=str(e),
                    duration_ms=round((time.time() - start_time) * 1000, 2),
                )
            raise
        finally:
            if response is not None:
                response.disconnect()

    def _parse(self, request: BaseHttpRequest[T], response: HttpResponse) -> Any:
        parser = request.parser
        try:
            return parser.transform_data(response, request)
        except ParserError as e:
            if e.request is None:
                e.request = request
            raise
        except HttpException:
            raise
        except requests.exceptions.RequestException as e:
            # соединение оборвалось при чтении тела
            raise classify_requests_exception(e, request.url, request) from e
        except OSError as e:
            raise TransportError(f"Failed to read response body: {e}", request.url, request) from e
        except STAGE_ERRORS as e:
            # одиночный XferTransform, не цепочка
            raise ParserError(
                f"{parser.name} failed: {e}",
                stage=f"1:{parser.name}",
                request=request,
            ) from e
