"""
Two-tier request header storage.

"Set" headers hold a single value per name (last write wins), "add" headers
accumulate a set of values per name. Set headers take precedence when a
single value is requested.
"""

from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Set


class Header(NamedTuple):
    """HTTP header name/value pair."""
    name: str
    value: str


def merge_headers(
    defaults: Iterable[Header],
    set_headers: Mapping[str, str],
    add_headers: Mapping[str, Iterable[str]],
) -> List[Header]:
    """
    Flatten header sources into the effective header list.

    Order: defaults, then set headers, then add headers. The order of values
    accumulated for the same add header is unspecified.

    Example:
        >>> merge_headers(
        ...     [Header("User-Agent", "ua")],
        ...     {"Accept": "*/*"},
        ...     {"X-Tag": {"a"}},
        ... )
        [Header(name='User-Agent', value='ua'), Header(name='Accept', value='*/*'), Header(name='X-Tag', value='a')]
    """
    headers = [Header(*header) for header in defaults]
    for name, value in set_headers.items():
        headers.append(Header(name, value))
    for name, values in add_headers.items():
        for value in values:
            headers.append(Header(name, value))
    return headers


class HeaderStore:
    """
    Per-request header state.

    Names are case-sensitive keys.

    Example:
        >>> store = HeaderStore()
        >>> store.add_header("Accept", "text/html")
        >>> store.set_header("Accept", "application/json")
        >>> store.get_header("Accept")
        'application/json'
    """

    def __init__(self):
        self._set_headers: Dict[str, str] = {}
        self._add_headers: Dict[str, Set[str]] = {}

    def set_header(self, key: str, value: Optional[str]) -> None:
        """
        Replace every value of `key` with `value`.

        Args:
            key: Header name
            value: Header value, None removes the header
        """
        self._add_headers.pop(key, None)
        if value is None:
            self._set_headers.pop(key, None)
        else:
            self._set_headers[key] = value

    def add_header(self, key: str, value: str) -> None:
        """Add a value to `key` without touching the existing ones."""
        self._add_headers.setdefault(key, set()).add(value)

    def get_header(self, name: str) -> Optional[str]:
        """
        Get a single value for `name`.

        When only add headers exist for `name` an arbitrary one of them is
        returned; callers must not rely on which.
        """
        if name in self._set_headers:
            return self._set_headers[name]
        values = self._add_headers.get(name)
        if values:
            return next(iter(values))
        return None

    def get_all_headers(self, default_headers: Iterable[Header] = ()) -> List[Header]:
        """All effective headers with `default_headers` merged first."""
        return merge_headers(default_headers, self._set_headers, self._add_headers)

    def __contains__(self, name: str) -> bool:
        return name in self._set_headers or bool(self._add_headers.get(name))

    def __len__(self) -> int:
        return len(self._set_headers) + sum(len(v) for v in self._add_headers.values())
