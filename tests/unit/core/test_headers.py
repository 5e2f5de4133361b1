"""Тесты двухуровневого хранилища заголовков."""

from http_request.core.headers import Header, HeaderStore, merge_headers


def test_set_header_replaces_value():
    store = HeaderStore()
    store.set_header("Accept", "text/html")
    store.set_header("Accept", "application/json")
    assert store.get_header("Accept") == "application/json"
    assert store.get_all_headers() == [Header("Accept", "application/json")]


def test_set_header_none_removes_header():
    store = HeaderStore()
    store.set_header("X-Trace", "1")
    store.add_header("X-Trace", "2")
    store.set_header("X-Trace", None)
    assert store.get_header("X-Trace") is None
    assert "X-Trace" not in store
    assert store.get_all_headers() == []


def test_set_header_clears_added_values():
    store = HeaderStore()
    store.add_header("Accept", "text/html")
    store.add_header("Accept", "text/plain")
    store.set_header("Accept", "application/json")
    assert store.get_all_headers() == [Header("Accept", "application/json")]


def test_add_header_accumulates_distinct_values():
    store = HeaderStore()
    store.add_header("Accept-Language", "fr")
    store.add_header("Accept-Language", "en")
    store.add_header("Accept-Language", "fr")
    values = sorted(h.value for h in store.get_all_headers())
    assert values == ["en", "fr"]
    assert store.get_header("Accept-Language") in {"en", "fr"}
    assert len(store) == 2


def test_set_header_wins_over_added_header():
    store = HeaderStore()
    store.set_header("Accept", "application/json")
    store.add_header("Accept", "text/html")
    assert store.get_header("Accept") == "application/json"


def test_names_are_case_sensitive():
    store = HeaderStore()
    store.set_header("accept", "a")
    assert store.get_header("Accept") is None


def test_defaults_come_first():
    store = HeaderStore()
    store.set_header("Accept", "application/json")
    store.add_header("X-Tag", "a")
    headers = store.get_all_headers([Header("User-Agent", "ua")])
    assert headers == [
        Header("User-Agent", "ua"),
        Header("Accept", "application/json"),
        Header("X-Tag", "a"),
    ]


def test_merge_headers_accepts_tuples():
    headers = merge_headers([("User-Agent", "ua")], {}, {})
    assert headers == [Header("User-Agent", "ua")]
    assert isinstance(headers[0], Header)
