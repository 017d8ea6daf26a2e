"""Configuration package."""

from cashmind.config.settings import (
    ApiSettings,
    AppSettings,
    Settings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "Settings",
    "StoreSettings",
    "get_settings",
    "validate_all_settings",
]
