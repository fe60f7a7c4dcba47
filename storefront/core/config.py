"""
Application configuration models and helpers.

Centralizes settings so the session service, the renewal worker and the HTTP
surface share one configuration surface.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AnyHttpUrl, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PlatformSettings(BaseSettings):
    """Connection settings for the e-commerce platform REST API."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    base_url: AnyHttpUrl = Field(
        "https://api.salla.dev/admin/v2",
        validation_alias="PLATFORM_API_BASE_URL",
    )
    timeout_seconds: float = Field(10.0, validation_alias="PLATFORM_TIMEOUT_SECONDS")


class SessionSettings(BaseSettings):
    """Persistence and expiry policy for the authenticated session."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    db_path: str = Field("data/session.db", validation_alias="SESSION_DB_PATH")
    tokens_key: str = Field("storefront_auth_tokens", validation_alias="SESSION_TOKENS_KEY")
    profile_key: str = Field(
        "storefront_user_profile", validation_alias="SESSION_PROFILE_KEY"
    )
    expiry_margin_seconds: int = Field(
        300,
        validation_alias="SESSION_EXPIRY_MARGIN_SECONDS",
        description="Tokens expiring within this window are treated as invalid.",
    )
    renew_interval_seconds: float = Field(
        300.0, validation_alias="SESSION_RENEW_INTERVAL_SECONDS"
    )
    renew_ahead_seconds: int = Field(
        600,
        validation_alias="SESSION_RENEW_AHEAD_SECONDS",
        description="Proactively refresh when the token expires within this window.",
    )
    encryption_secret: Optional[str] = Field(
        None,
        validation_alias="SESSION_ENCRYPTION_SECRET",
        description="When set, persisted session values are encrypted at rest.",
    )

    @field_validator("expiry_margin_seconds", "renew_ahead_seconds")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Session windows must not be negative.")
        return value

    @model_validator(mode="after")
    def _renew_before_margin(self) -> "SessionSettings":
        # Renewal must start before a token drops into the invalid margin.
        if self.renew_ahead_seconds < self.expiry_margin_seconds:
            raise ValueError(
                "SESSION_RENEW_AHEAD_SECONDS must be at least SESSION_EXPIRY_MARGIN_SECONDS."
            )
        return self


class AppSettings(BaseSettings):
    """Root settings object for the storefront session bridge."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    platform: PlatformSettings = Field(default_factory=PlatformSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "PlatformSettings",
    "SessionSettings",
    "get_settings",
]
