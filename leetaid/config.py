"""
Application Configuration

Pydantic-based settings management using environment variables.
Supports nested configuration, validation, and caching.

Usage:
    from leetaid.config import get_settings

    settings = get_settings()
    print(settings.endpoint.url)
    print(settings.storage.path)
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORAGE_PATH = Path.home() / ".leetaid" / "storage.json"
DEFAULT_HISTORY_KEY = "conversationHistory"


class EndpointSettings(BaseSettings):
    """Remote inference endpoint configuration."""

    url: str | None = Field(
        None,
        description="URL the conversation is POSTed to",
    )
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Request timeout in seconds (None = wait for the transport)",
    )

    model_config = SettingsConfigDict(
        env_prefix="ENDPOINT_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, v: str | None) -> str | None:
        """Treat empty strings as missing."""
        if isinstance(v, str):
            v = v.strip()
        if v == "":
            return None
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Validate supported endpoint URL schemes."""
        if v is None:
            return v
        parsed = urlparse(v)
        if parsed.scheme.lower() not in {"http", "https"}:
            raise ValueError("ENDPOINT_URL must use http or https scheme.")
        if not parsed.hostname:
            raise ValueError("ENDPOINT_URL must include a host.")
        try:
            parsed.port
        except ValueError:
            raise ValueError("ENDPOINT_URL must use a valid port.") from None
        return v


class StorageSettings(BaseSettings):
    """Local conversation storage configuration."""

    path: Path = Field(
        default=DEFAULT_STORAGE_PATH,
        description="JSON file holding persisted entries",
    )
    key: str = Field(
        default=DEFAULT_HISTORY_KEY,
        min_length=1,
        description="Entry name the conversation history is stored under",
    )

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: Path) -> Path:
        return v.expanduser()


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Log timestamp format",
    )
    file: Path | None = Field(
        default=None,
        description="Optional log file path (None = stderr only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
    )

    def configure(self) -> None:
        """Configure Python logging with these settings."""
        handlers: list[logging.Handler] = [logging.StreamHandler()]

        if self.file:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=getattr(logging, self.level),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,  # Override any existing configuration
        )


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    Settings are nested by domain (endpoint, storage, logging).

    Environment Variables:
        ENDPOINT_*: Inference endpoint configuration (see EndpointSettings)
        STORAGE_*: Conversation storage configuration (see StorageSettings)
        LOG_*: Logging configuration (see LoggingSettings)

    Example:
        >>> settings = get_settings()
        >>> settings.storage.key
        'conversationHistory'
    """

    endpoint: EndpointSettings = Field(default_factory=EndpointSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def model_post_init(self, __context) -> None:
        """Log configuration on initialization."""
        logger = logging.getLogger(__name__)
        logger.debug(
            "Settings loaded",
            extra={
                "endpoint_configured": self.endpoint.url is not None,
                "storage_path": str(self.storage.path),
            },
        )


_DOTENV_PATH = Path(__file__).resolve().parents[1] / ".env"


def _apply_dotenv_precedence() -> None:
    env_source = os.getenv("LEETAID_ENV_SOURCE", "dotenv").lower()
    if env_source not in {"dotenv", "envfile", "file"}:
        return
    if _DOTENV_PATH.exists():
        load_dotenv(_DOTENV_PATH, override=True)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses functools.lru_cache to ensure settings are loaded only once.

    Returns:
        Settings: Singleton settings instance
    """
    _apply_dotenv_precedence()
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
