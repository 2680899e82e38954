"""Configuration module using Pydantic Settings v2.

Provides connection and logging settings for the management client from
environment variables, with .env file support for local development.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Management client configuration with validation.

    Sensitive values use SecretStr to prevent accidental logging.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Management API endpoint
    rabbitmq_management_url: HttpUrl = Field(
        default=HttpUrl("http://localhost:15672/"),
        description="Base URL of the management plugin (e.g., http://host:15672/)",
    )
    rabbitmq_username: str = Field(
        default="guest",
        min_length=1,
        description="Management API user",
    )
    rabbitmq_password: SecretStr = Field(
        default=SecretStr("guest"),
        description="Management API password",
    )

    # Timeout Configuration
    request_timeout: float = Field(
        default=20.0,
        ge=1.0,
        le=600.0,
        description="Timeout in seconds for a single management API request",
    )

    # Resource names
    max_name_length: int = Field(
        default=255,
        ge=1,
        le=65535,
        description="Maximum length in bytes of vhost, queue, exchange and user names",
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format (json for production, text for development)",
    )
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs only to stdout.",
    )
    log_rotation: str = Field(
        default="500 MB",
        description="Log rotation condition (size, time, etc.)",
    )
    log_retention: str = Field(
        default="10 days",
        description="Log retention duration",
    )

    # Monitoring Configuration
    disable_prometheus: bool = Field(
        default=False,
        description="Disable Prometheus request instrumentation",
    )

    @property
    def management_url_str(self) -> str:
        """Return the management URL as a string with a trailing slash."""
        url = str(self.rabbitmq_management_url)
        return url if url.endswith("/") else url + "/"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
