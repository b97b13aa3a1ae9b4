# pastebox/config.py
"""
Centralized service configuration using pydantic-settings.

All settings are read from environment variables or .env file.
Paste lifetime, rate limit window and content bound are tuned here,
no code changes needed.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings loaded from environment variables.

    Priority: environment variables > .env file > defaults
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )

    # --- Store ---
    REDIS_URL: Optional[str] = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL"
    )
    REDIS_TOKEN: Optional[str] = Field(
        default=None,
        description="Redis password, overrides the one embedded in REDIS_URL"
    )
    STORE_BACKEND: str = Field(
        default="redis",
        description="Key-value backend: redis or memory"
    )
    STORE_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        gt=0,
        description="Per-call timeout for store operations"
    )

    # --- Pastes ---
    PASTE_TTL_SECONDS: int = Field(
        default=7200,
        gt=0,
        description="Lifetime of a paste and of every index that references it"
    )
    MAX_CONTENT_BYTES: int = Field(
        default=100 * 1024,
        gt=0,
        description="Maximum UTF-8 size of paste content"
    )
    PASTE_EVENT_TTL_SECONDS: int = Field(
        default=10,
        gt=0,
        description="How long a create/delete event marker stays readable"
    )
    DEFAULT_LIST_LIMIT: int = Field(default=50, gt=0)
    MAX_LIST_LIMIT: int = Field(default=100, gt=0)

    # --- Rate limiting ---
    RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=3600,
        gt=0,
        description="Fixed window length for paste creation quota"
    )
    RATE_LIMIT_MAX_REQUESTS: int = Field(
        default=30,
        gt=0,
        description="Pastes a user may create per window"
    )

    # --- Server ---
    HOST: str = Field(
        default="127.0.0.1",
        description="Server bind host"
    )
    PORT: int = Field(
        default=8888,
        description="Server bind port"
    )
    SERVICE_NAME: str = Field(
        default="pastebox",
        description="service.name reported to tracing"
    )
    TRACING_ENABLED: bool = Field(
        default=True,
        description="Export OpenTelemetry spans to the console"
    )

    # --- Debug / Logging ---
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    LOGS_PATH: Optional[str] = Field(
        default=None,
        description="Directory for access/error log files; stdout only when unset"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v_upper

    @field_validator("STORE_BACKEND")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        allowed = {"redis", "memory"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"STORE_BACKEND must be one of {allowed}")
        return v_lower


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance (singleton pattern)."""
    return Settings()
