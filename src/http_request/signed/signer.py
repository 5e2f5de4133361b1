"""Подпись запросов."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from ..core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..core.request import BaseHttpRequest


@dataclass(frozen=True)
class OAuthClientApp:
    """
    Учетные данные приложения (consumer).

    Example:
        >>> OAuthClientApp("consumer-key", "secret")
    """
    consumer_key: str
    consumer_secret: str = field(repr=False)

    def __post_init__(self):
        """Валидация."""
        if not self.consumer_key:
            raise ConfigurationError("consumer_key must not be empty")
        if self.consumer_secret is None:
            raise ConfigurationError("consumer_secret must not be None")


@dataclass(frozen=True)
class OAuthUser:
    """
    Токен пользователя. Оба поля могут быть None (подпись только приложением).
    """
    token: Optional[str] = None
    token_secret: Optional[str] = field(default=None, repr=False)


class RequestSigner(ABC):
    """Подписывает запрос перед отправкой."""

    @abstractmethod
    def sign(self, request: 'BaseHttpRequest') -> None:
        """
        Подписать запрос.

        Вызывается один раз на отправку, после заголовков тела. Может менять
        заголовки запроса (и URL для подписи в query string).
        """
        pass


class RequestSignerNone(RequestSigner):
    """Signer, который ничего не делает."""

    INSTANCE: 'RequestSignerNone'

    def sign(self, request: 'BaseHttpRequest') -> None:
        pass


RequestSignerNone.INSTANCE = RequestSignerNone()


class AbstractRequestSigner(RequestSigner):
    """
    Signer с идентичностью приложения и (опционально) пользователя.

    Args:
        client_app: Учетные данные приложения
        user: Токен пользователя или None
    """

    def __init__(self, client_app: OAuthClientApp, user: Optional[OAuthUser] = None):
        if client_app is None:
            raise ConfigurationError("client_app must not be None")
        self.client_app = client_app
        self.user = user

    @property
    def oauth_user(self) -> Optional[OAuthUser]:
        return self.user
