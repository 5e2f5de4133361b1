"""
Система конфигурации для HTTP Request.

Все конфиги immutable (frozen dataclasses): один и тот же объект можно
раздавать многим запросам и потокам.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig

DEFAULT_USER_AGENT = "http-request-core"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
    """
    connect: float = 10
    read: float = 30

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP CONFIG (per request)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class HttpConfig:
    """
    Параметры транспорта, читаемые в момент отправки запроса.

    Args:
        timeout: Конфигурация таймаутов
        follow_redirects: Следовать редиректам
        max_redirects: Максимум редиректов
        verify_ssl: Проверять SSL сертификаты
        max_error_body_size: Сколько байт тела ошибки читать для диагностики

    Examples:
        >>> HttpConfig(timeout=TimeoutConfig(read=60))
        >>> HttpConfig(follow_redirects=False)
    """
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    follow_redirects: bool = True
    max_redirects: int = 30
    verify_ssl: bool = True
    max_error_body_size: int = 1024 * 1024  # 1MB

    def __post_init__(self):
        """Валидация."""
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")
        if self.max_error_body_size <= 0:
            raise ValueError("max_error_body_size must be positive")


BASIC_HTTP_CONFIG = HttpConfig()

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLIENT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Dict[str, str]]) -> Mapping[str, str]:
    """
    Превратить dict в неизменяемый MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация HttpClient.

    Args:
        headers: Заголовки по умолчанию для каждого запроса
        http: HttpConfig для запросов, у которых нет собственного
        user_agent: User-Agent (None - не выставлять)
        logging: Конфигурация логирования (None - без логирования)

    Examples:
        >>> config = ClientConfig(headers={"Accept": "application/json"})
        >>> config = ClientConfig.create(timeout=60, follow_redirects=False)
    """
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    http: HttpConfig = BASIC_HTTP_CONFIG
    user_agent: Optional[str] = DEFAULT_USER_AGENT
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Заморозить изменяемые dict."""
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))

    @classmethod
    def create(
        cls,
        timeout: Union[float, Tuple[float, float], TimeoutConfig] = 30,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        follow_redirects: bool = True,
        max_redirects: int = 30,
        verify_ssl: bool = True,
        headers: Optional[Dict[str, str]] = None,
        user_agent: Optional[str] = DEFAULT_USER_AGENT,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'ClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            timeout: Таймаут (число, (connect, read) или TimeoutConfig)
            connect_timeout: Таймаут подключения (переопределяет timeout)
            read_timeout: Таймаут чтения (переопределяет timeout)
            follow_redirects: Следовать редиректам
            max_redirects: Максимум редиректов
            verify_ssl: Проверять SSL
            headers: Заголовки по умолчанию
            user_agent: User-Agent
            logging: Конфигурация логирования

        Examples:
            >>> ClientConfig.create(timeout=(3, 60))
            >>> ClientConfig.create(headers={"Accept-Language": "fr"})
        """
        if isinstance(timeout, TimeoutConfig):
            timeout_config = timeout
        elif isinstance(timeout, tuple):
            timeout_config = TimeoutConfig(connect=timeout[0], read=timeout[1])
        else:
            timeout_config = TimeoutConfig(connect=timeout, read=timeout)

        if connect_timeout is not None or read_timeout is not None:
            timeout_config = TimeoutConfig(
                connect=connect_timeout if connect_timeout is not None else timeout_config.connect,
                read=read_timeout if read_timeout is not None else timeout_config.read,
            )

        return cls(
            headers=_freeze_dict(headers),
            http=HttpConfig(
                timeout=timeout_config,
                follow_redirects=follow_redirects,
                max_redirects=max_redirects,
                verify_ssl=verify_ssl,
            ),
            user_agent=user_agent,
            logging=logging,
        )
