"""Configuration package."""

from expense_tracker.config.settings import (
    SORT_MODES,
    AppSettings,
    ProviderSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "SORT_MODES",
    "AppSettings",
    "ProviderSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
