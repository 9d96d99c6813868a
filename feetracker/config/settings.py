"""
Configuration Management for Fee Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger itself needs nothing external; only the insight assistant
talks to a third-party service, so it is the only section with a
required secret.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration for the insight assistant."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=1024,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Model temperature (drafted reminders benefit from a little variety)"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Calendar used for today/month/trend buckets
    timezone: str = Field(
        default="UTC",
        description="IANA timezone name used to decide 'today' and 'this month'"
    )

    # Display
    currency_label: str = Field(
        default="Rs.",
        min_length=1,
        max_length=10,
        description="Currency prefix used in prompts and summaries"
    )
    recent_transactions_limit: int = Field(
        default=10,
        ge=1,
        le=500,
        description="How many transactions the recent activity list shows"
    )

    # Validation thresholds
    max_transaction_amount: float = Field(
        default=1000000.0,
        gt=0,
        description="Amounts above this are flagged for a second look"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a transaction date can be"
    )

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject unknown timezone names at startup rather than on first use."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        """Get the configured timezone as a tzinfo object."""
        return ZoneInfo(self.timezone)


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

    # Loaded lazily so the ledger works without a Gemini key

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

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

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for each section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.gemini
        results["gemini"] = True
    except Exception as e:
        results["gemini"] = False
        results["gemini_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
