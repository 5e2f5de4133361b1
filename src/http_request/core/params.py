"""Параметры query string."""

from typing import List, Tuple, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def param_to_str(value: Union[str, bool, int]) -> str:
    """Строковое представление параметра (bool -> 'true'/'false')."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class UriParams:
    """
    Параметры, добавляемые в query string URL.

    Example:
        >>> params = UriParams()
        >>> params.add("q", "python")
        >>> params.add("page", 2)
        >>> params.add_to_url("https://api.example.com/search?lang=en")
        'https://api.example.com/search?lang=en&q=python&page=2'
    """

    def __init__(self):
        self._params: List[Tuple[str, str]] = []

    def add(self, name: str, value: Union[str, bool, int]) -> 'UriParams':
        self._params.append((name, param_to_str(value)))
        return self

    def add_to_url(self, url: str) -> str:
        """Вернуть url с добавленными параметрами (существующие сохраняются)."""
        if not self._params:
            return url
        parts = urlsplit(url)
        query = parse_qsl(parts.query, keep_blank_values=True)
        query.extend(self._params)
        return urlunsplit(parts._replace(query=urlencode(query)))

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self):
        return iter(self._params)
