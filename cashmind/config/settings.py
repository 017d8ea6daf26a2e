"""
Configuration Management for CashMind

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Each concern (local store, remote API, application) gets its own
settings class and env prefix, so a misconfigured API never prevents
the local store from starting.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Local store (SQLite via SQLAlchemy) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CASHMIND_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///cashmind.db",
        description="SQLAlchemy URL of the on-device database ('sqlite://' for in-memory)"
    )
    seed_examples: bool = Field(
        default=True,
        description="Seed example expenses at startup when the store is empty"
    )
    echo_sql: bool = Field(
        default=False,
        description="Echo emitted SQL (debugging only)"
    )

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Only SQLite is supported as an on-device store."""
        if not v.startswith("sqlite"):
            raise ValueError(f"Unsupported database URL: {v}. Use a sqlite:// URL")
        return v


class ApiSettings(BaseSettings):
    """Remote API (auth and expense sync) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CASHMIND_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = Field(
        default="https://your-api-endpoint.com",
        description="Base URL of the remote API"
    )
    # None means wait indefinitely, matching the no-timeout contract
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request timeout in seconds"
    )

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"API base URL must start with http:// or https://, got {v}")
        return v.rstrip("/")


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level for the structured logger"
    )

    # Budget defaults
    default_monthly_income: Decimal = Field(
        default=Decimal("5000"),
        description="Monthly income used until the user enters their own"
    )
    preferred_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Currency code shown next to amounts"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in allowed:
            raise ValueError(f"Unknown log level: {v}. Allowed: {sorted(allowed)}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()

    @property
    def api(self) -> ApiSettings:
        return ApiSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry carrying the message for each failure.
    """
    results = {}

    settings = get_settings()

    for name in ("store", "api", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
