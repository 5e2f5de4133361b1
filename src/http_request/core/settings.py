"""
Configuration from environment variables and .env files.

Priority (highest to lowest):
    1. **overrides passed to load_from_env()
    2. Environment variables (HTTP_REQUEST_*)
    3. .env file (only when env_file is given)
    4. Defaults
"""

from typing import Any, Dict, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import DEFAULT_USER_AGENT, ClientConfig, HttpConfig, TimeoutConfig
from .logging.config import LoggingConfig


class HttpRequestSettings(BaseSettings):
    """
    Client settings read from the environment.

    Example .env file:
        HTTP_REQUEST_TIMEOUT_CONNECT=5
        HTTP_REQUEST_TIMEOUT_READ=60
        HTTP_REQUEST_FOLLOW_REDIRECTS=false
        HTTP_REQUEST_DEFAULT_HEADERS={"Accept-Language": "fr"}
        HTTP_REQUEST_LOG_ENABLED=true
        HTTP_REQUEST_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTP_REQUEST_',
        env_file=None,
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Transport
    timeout_connect: float = Field(default=10.0, gt=0)
    timeout_read: float = Field(default=30.0, gt=0)
    follow_redirects: bool = True
    max_redirects: int = Field(default=30, ge=0)
    verify_ssl: bool = True
    max_error_body_size: int = Field(default=1024 * 1024, gt=0)

    # Headers
    user_agent: Optional[str] = DEFAULT_USER_AGENT
    default_headers: Dict[str, str] = Field(default_factory=dict)

    # Logging
    log_enabled: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_enable_console: bool = True
    log_enable_file: bool = False
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode='after')
    def validate_file_path(self) -> 'HttpRequestSettings':
        """log_file_path is required when log_enable_file=True."""
        if self.log_enable_file and not self.log_file_path:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return self

    def to_logging_config(self) -> Optional[LoggingConfig]:
        """LoggingConfig, or None when logging is disabled."""
        if not self.log_enabled:
            return None
        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_enable_file,
            file_path=self.log_file_path,
            max_bytes=self.log_max_bytes,
            backup_count=self.log_backup_count,
        )

    def to_client_config(self) -> ClientConfig:
        return ClientConfig(
            headers=dict(self.default_headers),
            http=HttpConfig(
                timeout=TimeoutConfig(connect=self.timeout_connect, read=self.timeout_read),
                follow_redirects=self.follow_redirects,
                max_redirects=self.max_redirects,
                verify_ssl=self.verify_ssl,
                max_error_body_size=self.max_error_body_size,
            ),
            user_agent=self.user_agent or None,
            logging=self.to_logging_config(),
        )


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> ClientConfig:
    """
    Build a ClientConfig from HTTP_REQUEST_* variables.

    Args:
        env_file: Optional .env file to read
        **overrides: Field values of HttpRequestSettings that win over the environment

    Raises:
        pydantic.ValidationError: invalid values

    Example:
        >>> config = load_from_env(timeout_read=60)
        >>> client = HttpClient(config)
    """
    settings = HttpRequestSettings(_env_file=env_file, **overrides)
    return settings.to_client_config()
