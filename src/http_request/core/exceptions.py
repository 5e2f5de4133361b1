"""
Иерархия исключений HTTP Request.

Классификация (ErrorCode):
- CONFIGURATION - неверная сборка запроса, никогда не ретраить
- TRANSPORT - соединение не установлено или I/O упал до получения статуса
- PARSER - тело ответа не удалось превратить в ожидаемый тип
- SERVER - сервер вернул статус ошибки

Флаг retryable только рекомендательный: сама библиотека ничего не ретраит.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, TYPE_CHECKING

import requests

from .headers import Header

if TYPE_CHECKING:
    from .request import BaseHttpRequest

# Сколько символов/байт исходных данных хранить в ParserError
MAX_SOURCE_DATA = 64 * 1024


class ErrorCode(str, Enum):
    """Тип ошибки."""
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    PARSER = "parser"
    SERVER = "server"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HttpException(Exception):
    """Базовое исключение HTTP Request."""

    error_code: ErrorCode = ErrorCode.TRANSPORT
    retryable: bool = False

    def __init__(self, message: str, request: Optional['BaseHttpRequest'] = None, **kwargs):
        self.message = message
        self.request = request
        super().__init__(message)

    def is_temporary_failure(self) -> bool:
        """Можно ли повторить запрос позже (рекомендация вызывающему коду)."""
        return self.retryable


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONFIGURATION
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(HttpException, ValueError):
    """
    Ошибка сборки запроса.

    Примеры:
    - тело для GET/HEAD
    - отсутствует парсер ответа
    - signer=None
    - повторная отправка того же запроса
    """
    error_code = ErrorCode.CONFIGURATION


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TRANSPORT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(HttpException):
    """
    Ошибка до получения HTTP статуса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        request: Запрос
        retryable: Рекомендация о повторе (зависит от исходной ошибки)
    """
    error_code = ErrorCode.TRANSPORT

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        request: Optional['BaseHttpRequest'] = None,
        retryable: bool = False,
    ):
        self.url = url
        self.retryable = retryable
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message, request)


class TimeoutError(TransportError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        request: Запрос
        timeout_type: Тип таймаута ('connect' или 'read')
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        request: Optional['BaseHttpRequest'] = None,
        timeout_type: Optional[str] = None,
    ):
        self.timeout_type = timeout_type
        msg = message
        if timeout_type:
            msg += f" ({timeout_type} timeout)"
        super().__init__(msg, url, request, retryable=True)


class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - DNS resolution failed
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        request: Optional['BaseHttpRequest'] = None,
    ):
        super().__init__(message, url, request, retryable=True)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PARSER
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def bound_source_data(data: Any, limit: int = MAX_SOURCE_DATA) -> Any:
    """Обрезать bytes/str до limit, остальное вернуть как есть."""
    if isinstance(data, (bytes, bytearray, str)) and len(data) > limit:
        return data[:limit]
    return data


class ParserError(HttpException):
    """
    Не удалось разобрать тело ответа.

    Args:
        message: Сообщение
        source_data: Данные, на которых упал парсер (обрезаются до MAX_SOURCE_DATA)
        stage: Имя стадии, на которой произошла ошибка
        raw_data: Первые текстовые данные, увиденные цепочкой
        request: Запрос
    """
    error_code = ErrorCode.PARSER

    def __init__(
        self,
        message: str,
        source_data: Any = None,
        stage: Optional[str] = None,
        raw_data: Any = None,
        request: Optional['BaseHttpRequest'] = None,
    ):
        self.source_data = bound_source_data(source_data)
        self.raw_data = bound_source_data(raw_data)
        self.stage = stage
        super().__init__(message, request)

    def __str__(self) -> str:
        if self.stage:
            return f"{self.message} (stage: {self.stage})"
        return self.message


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SERVER
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ServerError(HttpException):
    """
    Сервер вернул HTTP ошибку.

    Args:
        status_code: HTTP статус
        url: URL
        message: Сообщение сервера (текст или JSON в строковом виде)
        headers: Заголовки ответа
        server_error: Разобранное тело ошибки (может быть None)
        request: Запрос
        cause: Исходное исключение

    Examples:
        >>> err = ServerError(503, "https://api.example.com", "busy")
        >>> err.is_temporary_failure()
        True
    """
    error_code = ErrorCode.SERVER

    def __init__(
        self,
        status_code: int,
        url: str,
        message: str = "",
        headers: Optional[Mapping[str, str]] = None,
        server_error: Any = None,
        request: Optional['BaseHttpRequest'] = None,
        cause: Optional[BaseException] = None,
    ):
        self.status_code = status_code
        self.url = url
        self.headers = headers
        self.server_error = server_error
        self.cause = cause
        self.retryable = status_code >= 500

        msg = f"HTTP {status_code} error for {url}"
        if message:
            msg += f": {message}"

        super().__init__(msg, request)
        # .message - только то, что прислал сервер
        self.message = message

    def get_received_headers(self) -> List[Header]:
        """Заголовки ответа в виде списка Header."""
        if not self.headers:
            return []
        return [Header(name, value) for name, value in self.headers.items()]


class ServerErrorBuilder:
    """
    Пошаговая сборка ServerError.

    Классификатор заполняет билдер по мере того, как удается разобрать
    ответ; то, что разобрать не удалось, просто остается пустым.
    """

    def __init__(self, request: Optional['BaseHttpRequest'] = None):
        self.request = request
        self.status_code: int = 0
        self.url: str = request.url if request is not None else ""
        self.headers: Dict[str, str] = {}
        self.error_message: str = ""
        self.server_error: Any = None
        self.cause: Optional[BaseException] = None

    def set_http_response(self, response) -> 'ServerErrorBuilder':
        self.status_code = response.status_code
        self.headers = dict(response.headers)
        if response.url:
            self.url = response.url
        return self

    def set_error_message(self, message: str) -> 'ServerErrorBuilder':
        self.error_message = message
        return self

    def set_server_error(self, server_error: Any) -> 'ServerErrorBuilder':
        self.server_error = server_error
        return self

    def set_cause(self, cause: Optional[BaseException]) -> 'ServerErrorBuilder':
        self.cause = cause
        return self

    def build(self) -> ServerError:
        error = ServerError(
            self.status_code,
            self.url,
            self.error_message,
            headers=self.headers,
            server_error=self.server_error,
            request=self.request,
            cause=self.cause,
        )
        if self.cause is not None:
            error.__cause__ = self.cause
        return error


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_requests_exception(
    exc: Exception,
    url: str,
    request: Optional['BaseHttpRequest'] = None,
) -> HttpException:
    """
    Конвертировать requests.exceptions в наши исключения.

    Args:
        exc: Исключение из requests
        url: URL запроса
        request: Запрос

    Returns:
        TransportError с правильной классификацией

    Examples:
        >>> exc = requests.exceptions.ConnectTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.is_temporary_failure()
    """
    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return TimeoutError("Request timeout", url, request, timeout_type="connect")

    elif isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url, request, timeout_type="read")

    elif isinstance(exc, requests.exceptions.SSLError):
        # сертификат сам не исправится
        return TransportError(f"SSL error: {exc}", url, request, retryable=False)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError(f"Connection error: {exc}", url, request)

    elif isinstance(exc, (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema)):
        return ConfigurationError(f"Invalid URL: {url}", request)

    elif isinstance(exc, requests.exceptions.TooManyRedirects):
        return TransportError("Too many redirects", url, request, retryable=False)

    else:
        return TransportError(f"Request failed: {exc}", url, request, retryable=False)
