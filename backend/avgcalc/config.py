"""Pydantic Settings configuration models.

Config hierarchy (lowest to highest priority):
1. Pydantic defaults (in code below)
2. .env file (loaded by Pydantic Settings)
3. Environment variables (e.g., AVG_WINDOW__CAPACITY=20)
4. CLI flags passed to ``avgcalc serve``
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
VALID_LOG_FORMATS = frozenset({"console", "json"})

DEFAULT_WINDOW_CAPACITY = 10
DEFAULT_PORT = 9876


class WindowConfig(BaseModel):
    """Number window parameters. Fixed for the life of the process."""

    capacity: int = Field(default=DEFAULT_WINDOW_CAPACITY, ge=1, le=1000)


class ProviderConfig(BaseModel):
    """Upstream number generator connection settings."""

    base_url: str = "http://20.244.56.144/evaluation-service"
    timeout_seconds: float = Field(default=0.5, ge=0.05, le=30.0)
    bearer_token: str = ""

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {v!r}")
        return v


class WebConfig(BaseModel):
    """Web server configuration."""

    host: str = "0.0.0.0"  # noqa: S104
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Env var examples:
        AVG_LOG_LEVEL=DEBUG
        AVG_WEB__PORT=9000
        AVG_WINDOW__CAPACITY=20
        AVG_PROVIDER__TIMEOUT_SECONDS=1.0
    """

    model_config = SettingsConfigDict(
        env_prefix="AVG_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: str = "console"
    window: WindowConfig = WindowConfig()
    provider: ProviderConfig = ProviderConfig()
    web: WebConfig = WebConfig()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {v}"
            )
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in VALID_LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {sorted(VALID_LOG_FORMATS)}, got {v}"
            )
        return v
