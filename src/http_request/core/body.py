"""
Тела HTTP запросов.

Каждый класс копит параметры через add(), кодирует их один раз при первом
обращении (длина нужна до открытия соединения) и после этого замораживается.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, List, Optional, Tuple, Union, TYPE_CHECKING
from urllib.parse import urlencode

from urllib3 import encode_multipart_formdata

from .exceptions import ConfigurationError
from .params import param_to_str

if TYPE_CHECKING:
    from .request import BaseHttpRequest

CONTENT_TYPE = "Content-Type"
CONTENT_LENGTH = "Content-Length"

ParamValue = Union[str, bool, int]


class UploadProgressListener(ABC):
    """
    Наблюдатель за отправкой тела запроса.

    HttpClient кодирует тело в память до открытия соединения, поэтому
    прогресс (включая 0% и 100%) отражает запись тела в этот буфер, а не
    передачу байтов по сети: все вызовы приходят до отправки запроса.

    Example:
        >>> class PrintProgress(UploadProgressListener):
        ...     def on_param_upload_progress(self, request, param, progress):
        ...         print(f"{param}: {progress}%")
    """

    @abstractmethod
    def on_param_upload_progress(
        self,
        request: 'BaseHttpRequest',
        param: Optional[str],
        progress: int,
    ) -> None:
        """
        Вызывается по ходу отправки.

        Args:
            request: Отправляемый запрос
            param: Имя отправляемого параметра (None - тело целиком)
            progress: Прогресс в процентах 0..100
        """
        pass


class HttpBodyParameters(ABC):
    """Базовый класс для всех тел запросов."""

    def __init__(self):
        self._encoded: Optional[bytes] = None

    @property
    @abstractmethod
    def content_type(self) -> str:
        """Значение заголовка Content-Type."""
        pass

    @abstractmethod
    def _encode(self) -> bytes:
        """Закодировать накопленные параметры."""
        pass

    @abstractmethod
    def add(self, name: str, value: ParamValue) -> None:
        """Добавить параметр тела."""
        pass

    @property
    def is_encoded(self) -> bool:
        return self._encoded is not None

    def _check_not_encoded(self) -> None:
        if self._encoded is not None:
            raise ConfigurationError(
                f"{self.__class__.__name__} is already encoded, parameters are frozen"
            )

    def get_encoded_params(self) -> bytes:
        """
        Закодированное тело.

        Кодирование происходит один раз, повторные вызовы возвращают те же байты.
        """
        if self._encoded is None:
            self._encoded = self._encode()
        return self._encoded

    def get_content_length(self) -> int:
        return len(self.get_encoded_params())

    def settle_http_headers(self, request: 'BaseHttpRequest') -> None:
        """Выставить Content-Type и Content-Length в запросе."""
        request.set_header(CONTENT_TYPE, self.content_type)
        request.set_header(CONTENT_LENGTH, str(self.get_content_length()))

    def write_body_to(
        self,
        output: BinaryIO,
        request: 'BaseHttpRequest',
        progress_listener: Optional[UploadProgressListener] = None,
    ) -> None:
        """Записать тело в output."""
        output.write(self.get_encoded_params())


class HttpBodyUrlEncoded(HttpBodyParameters):
    """
    Тело в формате application/x-www-form-urlencoded.

    Example:
        >>> body = HttpBodyUrlEncoded()
        >>> body.add("status", "hello *world*")
        >>> body.add("trim_user", True)
        >>> body.get_encoded_params()
        b'status=hello+%2Aworld%2A&trim_user=true'
    """

    CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"

    def __init__(self):
        super().__init__()
        self._params: List[Tuple[str, str]] = []

    @property
    def content_type(self) -> str:
        return self.CONTENT_TYPE

    def add(self, name: str, value: ParamValue) -> None:
        self._check_not_encoded()
        self._params.append((name, param_to_str(value)))

    def _encode(self) -> bytes:
        encoded = urlencode(self._params, encoding="utf-8").replace("*", "%2A")
        self._params.clear()
        return encoded.encode("ascii")


class HttpBodyJSON(HttpBodyParameters):
    """
    Тело в формате JSON.

    Args:
        data: Начальный JSON объект (dict) или любое JSON-значение

    Example:
        >>> body = HttpBodyJSON({"name": "test"})
        >>> body.add("count", 3)
        >>> body.get_encoded_params()
        b'{"name":"test","count":3}'
    """

    CONTENT_TYPE = "application/json; charset=utf-8"

    def __init__(self, data: Any = None):
        super().__init__()
        self._data: Any = {} if data is None else data

    @property
    def content_type(self) -> str:
        return self.CONTENT_TYPE

    def add(self, name: str, value: Any) -> None:
        self._check_not_encoded()
        if not isinstance(self._data, dict):
            raise ConfigurationError("cannot add named values to a non-object JSON body")
        self._data[name] = value

    def _encode(self) -> bytes:
        return json.dumps(self._data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class HttpBodyMultiPart(HttpBodyParameters):
    """
    Тело multipart/form-data с полями и файлами.

    Прогресс отправки сообщается по мере записи блоков.

    Example:
        >>> body = HttpBodyMultiPart()
        >>> body.add("title", "photo")
        >>> body.add_file("media", "cat.jpg", b"...", "image/jpeg")
    """

    CHUNK_SIZE = 8192

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        super().__init__()
        if chunk_size <= 0:
            raise ConfigurationError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self._fields: List[Tuple[str, Any]] = []
        self._content_type: Optional[str] = None

    @property
    def content_type(self) -> str:
        # boundary известен только после кодирования
        self.get_encoded_params()
        return self._content_type

    def add(self, name: str, value: ParamValue) -> None:
        self._check_not_encoded()
        self._fields.append((name, param_to_str(value)))

    def add_file(
        self,
        name: str,
        filename: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        """Добавить файл."""
        self._check_not_encoded()
        self._fields.append((name, (filename, data, content_type)))

    def _encode(self) -> bytes:
        body, content_type = encode_multipart_formdata(self._fields)
        self._content_type = content_type
        self._fields.clear()
        return body

    def write_body_to(
        self,
        output: BinaryIO,
        request: 'BaseHttpRequest',
        progress_listener: Optional[UploadProgressListener] = None,
    ) -> None:
        data = self.get_encoded_params()
        total = len(data)
        written = 0
        while written < total:
            chunk = data[written:written + self.chunk_size]
            output.write(chunk)
            written += len(chunk)
            progress = written * 100 // total
            # 100% сообщает сам запрос после записи
            if progress_listener is not None and progress < 100:
                progress_listener.on_param_upload_progress(request, None, progress)


def body_from_mapping(params: Dict[str, ParamValue]) -> HttpBodyUrlEncoded:
    """Собрать form-urlencoded тело из словаря."""
    body = HttpBodyUrlEncoded()
    for name, value in params.items():
        body.add(name, value)
    return body
