"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

Captcha settings use the CAPTCHA_ prefix. Nested maps are given either as
JSON (CAPTCHA_CAPTCHAS='{"hcaptcha": {"key": "...", "secret": "..."}}') or
with the double-underscore delimiter (CAPTCHA_CAPTCHAS__HCAPTCHA__KEY=...).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DriverSettings(BaseModel):
    """Static per-driver settings, keyed by driver name in CaptchaSettings."""

    model_config = ConfigDict(extra="allow")

    key: str = ""
    secret: str = ""
    url: Optional[str] = None


def _default_captchas() -> dict[str, DriverSettings]:
    # Null captcha works offline and needs no real keys
    return {
        "null-captcha": DriverSettings(key="NOT-REQUIRED", secret="NOT-REQUIRED"),
    }


class CaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CAPTCHA_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Driver used whenever no name is given
    default: str = "null-captcha"

    # Global on/off switch consulted by the null driver
    status: bool = True

    # Alias table: configured name -> registered driver identifier
    drivers: dict[str, str] = Field(default_factory=dict)

    captchas: dict[str, DriverSettings] = Field(default_factory=_default_captchas)

    http_timeout: float = 5.0

    def driver_settings(self, name: str) -> dict:
        """Return the explicitly configured values for *name* (empty if unknown)."""
        entry = self.captchas.get(name)
        if entry is None:
            return {}
        return entry.model_dump(exclude_unset=True)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "captcha"

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    captcha: Optional[CaptchaSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.captcha is None:
            self.captcha = CaptchaSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
