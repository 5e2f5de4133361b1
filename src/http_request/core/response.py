"""
Ответ сервера.

Тонкая обертка над requests.Response: запросу и парсерам нужны только
статус, заголовки и поток тела.
"""

import io
from typing import BinaryIO, Dict, List, Optional

import requests


def parse_content_type(value: Optional[str]) -> Dict[str, str]:
    """
    Разобрать Content-Type.

    Returns:
        {'type': 'text', 'subtype': 'plain', 'charset': ...} или {} если заголовка нет

    Example:
        >>> parse_content_type("application/json; charset=UTF-8")
        {'type': 'application', 'subtype': 'json', 'charset': 'UTF-8'}
    """
    if not value:
        return {}
    media, _, params = value.partition(";")
    main_type, _, subtype = media.strip().lower().partition("/")
    result = {"type": main_type, "subtype": subtype}
    for param in params.split(";"):
        key, _, param_value = param.partition("=")
        if key.strip().lower() == "charset" and param_value:
            result["charset"] = param_value.strip().strip('"')
    return result


class UndecodedRawStream(io.RawIOBase):
    """Поток над urllib3 HTTPResponse, отдающий байты без распаковки."""

    def __init__(self, raw):
        self._raw = raw

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        data = self._raw.read(len(buffer), decode_content=False)
        size = len(data)
        buffer[:size] = data
        return size


class HttpResponse:
    """Ответ сервера для одного запроса."""

    def __init__(self, response: requests.Response):
        self._response = response
        self._content_type = parse_content_type(response.headers.get("Content-Type"))

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def reason(self) -> str:
        return self._response.reason or ""

    @property
    def url(self) -> str:
        return self._response.url

    @property
    def headers(self):
        """Заголовки (case-insensitive)."""
        return self._response.headers

    @property
    def content_type(self) -> Optional[str]:
        return self._response.headers.get("Content-Type")

    @property
    def media_type(self) -> Optional[str]:
        """'type/subtype' без параметров."""
        if not self._content_type:
            return None
        return f"{self._content_type['type']}/{self._content_type['subtype']}"

    @property
    def charset(self) -> Optional[str]:
        return self._content_type.get("charset")

    @property
    def content_encoding(self) -> Optional[str]:
        encoding = self._response.headers.get("Content-Encoding")
        return encoding.strip().lower() if encoding else None

    @property
    def content_length(self) -> int:
        """Content-Length или -1."""
        try:
            return int(self._response.headers.get("Content-Length", -1))
        except ValueError:
            return -1

    def get_header_field(self, name: str) -> Optional[str]:
        return self._response.headers.get(name)

    def get_header_fields(self) -> Dict[str, List[str]]:
        """Заголовки ответа: имя -> список значений."""
        raw = getattr(self._response.raw, "headers", None)
        if raw is not None and hasattr(raw, "getlist"):
            return {name: raw.getlist(name) for name in raw.keys()}
        return {name: [value] for name, value in self._response.headers.items()}

    def get_content_stream(self) -> BinaryIO:
        """Тело ответа, распакованное по Content-Encoding."""
        return io.BytesIO(self._response.content)

    def get_raw_stream(self) -> BinaryIO:
        """
        Тело ответа как пришло по сети (без распаковки).

        Читается из соединения по мере чтения потока, поэтому при разборе
        ошибок считывается не больше, чем запрошено.
        """
        raw = self._response.raw
        if raw is not None and not self._response._content_consumed:
            return UndecodedRawStream(raw)
        # тело уже прочитано и распаковано requests
        return io.BytesIO(self._response.content)

    @property
    def is_raw_consumed(self) -> bool:
        return bool(self._response._content_consumed)

    def disconnect(self) -> None:
        """Закрыть соединение."""
        self._response.close()

    @property
    def response(self) -> requests.Response:
        """Исходный requests.Response."""
        return self._response

    def __repr__(self) -> str:
        return f"<HttpResponse [{self.status_code}] {self.url}>"
