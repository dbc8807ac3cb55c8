"""
Configuration Management for the Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable (provider timing, retry policy, render limits, display
defaults) is declared and validated in one place at startup.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SORT_MODES = ("date-asc", "date-desc", "amount-asc", "amount-desc")


class ProviderSettings(BaseSettings):
    """Initial-data provider configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_PROVIDER_",
        extra="ignore"
    )

    mock_delay_seconds: float = Field(
        default=1.5,
        ge=0.0,
        le=60.0,
        description="Simulated latency of the mock provider"
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        description="Give up on a single fetch attempt after this long"
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Fetch attempts before entering the loading-failed state"
    )
    retry_wait_min: float = Field(
        default=0.5,
        ge=0.0,
        description="Minimum wait between fetch attempts (seconds)"
    )
    retry_wait_max: float = Field(
        default=4.0,
        ge=0.0,
        description="Maximum wait between fetch attempts (seconds)"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG level (render queueing, ignored deletes)"
    )

    # Display defaults
    default_sort: str = Field(
        default="date-desc",
        description="Sort mode applied when the app starts"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Prefix shown in front of amounts"
    )

    # Render loop guard
    max_render_passes: int = Field(
        default=16,
        ge=1,
        le=1000,
        description="Consecutive render passes allowed before aborting as a loop"
    )

    # Validation thresholds
    max_expense_amount: float = Field(
        default=100000.0,
        gt=0.0,
        description="Amounts above this are accepted but flagged with a warning"
    )
    max_name_length: int = Field(
        default=100,
        ge=1,
        le=200,
        description="Longest accepted expense name"
    )

    # Audit
    audit_history_size: int = Field(
        default=200,
        ge=0,
        description="How many audit events are kept in memory for display"
    )

    @field_validator('default_sort')
    @classmethod
    def validate_default_sort(cls, v: str) -> str:
        """Only allow known sort modes."""
        v = v.strip().lower()
        if v not in SORT_MODES:
            raise ValueError(f"Unknown sort mode: {v}. Allowed: {SORT_MODES}")
        return v


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

    @property
    def provider(self) -> ProviderSettings:
        return ProviderSettings()

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

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for failures. Useful for startup checks.
    """
    results = {}
    settings = get_settings()

    for name in ("provider", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
