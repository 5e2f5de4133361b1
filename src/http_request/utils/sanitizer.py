# src/http_request/utils/sanitizer.py
"""
Маскирование учетных данных в логах.

OAuth подписи, токены и заголовок Authorization не должны попадать в логи
ни в виде полей, ни внутри URL.
"""

import re
from typing import Any, Dict

REDACTED = "***REDACTED***"

# Чувствительные ключи (case-insensitive, совпадение по подстроке)
SENSITIVE_KEYS = frozenset({
    'password', 'passwd',
    'token', 'secret',
    'authorization', 'cookie',
    'oauth_signature', 'oauth_token', 'oauth_consumer_key', 'oauth_nonce',
    'api_key', 'apikey',
})

SENSITIVE_PATTERNS = [
    # OAuth параметры в заголовке: oauth_signature="..."
    (re.compile(r'(oauth_(?:signature|token|consumer_key|nonce)=")([^"]*)(")', re.IGNORECASE), r'\1***REDACTED***\3'),
    # OAuth параметры в query string
    (re.compile(r'(oauth_(?:signature|token|consumer_key|nonce)=)([^&"\s]+)', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'((?:access_)?token=|api[_-]?key=|password=)([^\s&,;]+)', re.IGNORECASE), r'\1***REDACTED***'),
]


def _is_sensitive_key(key: str) -> bool:
    key = key.lower()
    return any(sensitive in key for sensitive in SENSITIVE_KEYS)


def mask_url(url: str, mask: str = REDACTED) -> str:
    """
    Замаскировать пароль в userinfo и чувствительные query параметры.

    Example:
        >>> mask_url("https://api.example.com/me?oauth_token=abc&page=1")
        'https://api.example.com/me?oauth_token=***REDACTED***&page=1'
    """
    url = re.sub(r'://([^:/@]+):([^@/]+)@', r'://\1:' + mask + '@', url)
    for pattern, replacement in SENSITIVE_PATTERNS:
        url = pattern.sub(replacement.replace(REDACTED, mask), url)
    return url


def mask_headers(headers: Dict[str, str], mask: str = REDACTED) -> Dict[str, str]:
    """Копия заголовков с замаскированными значениями чувствительных заголовков."""
    return {
        name: mask if _is_sensitive_key(name) else value
        for name, value in headers.items()
    }


def mask_sensitive_data(data: Any, mask: str = REDACTED) -> Any:
    """
    Рекурсивно замаскировать чувствительные данные (dict, list, tuple, str).

    Остальные типы возвращаются как есть.

    Examples:
        >>> mask_sensitive_data({"Authorization": "OAuth oauth_signature=\\"x\\"", "page": 1})
        {'Authorization': '***REDACTED***', 'page': 1}
    """
    if isinstance(data, str):
        return mask_url(data, mask)
    if isinstance(data, dict):
        return {
            key: mask if _is_sensitive_key(str(key)) else mask_sensitive_data(value, mask)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)
    return data
