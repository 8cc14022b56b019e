"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the dashboard services and
the operational scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class GoogleSettings(BaseSettings):
    """Configuration required for reading the invoice and payslip spreadsheets."""

    service_account_key: str = Field(
        ...,
        validation_alias="GOOGLE_SERVICE_ACCOUNT_KEY",
        description="Service account credentials as a JSON document.",
    )
    invoice_sheet_id: str = Field(..., validation_alias="INVOICE_SHEET_ID")
    payslip_sheet_id: str = Field(..., validation_alias="PAYSLIP_SHEET_ID")
    tickets_sheet_name: str = Field("Tickets", validation_alias="TICKETS_SHEET_NAME")


class SecuritySettings(BaseSettings):
    """Dashboard login configuration."""

    dashboard_password: str = Field("admin", validation_alias="DASHBOARD_PASSWORD")
    session_secret: Optional[str] = Field(
        None,
        validation_alias="SESSION_SECRET",
        description=(
            "Secret used to derive the session encryption key. "
            "Falls back to the dashboard password when omitted."
        ),
    )
    session_max_age_seconds: int = Field(
        60 * 60 * 24 * 7, validation_alias="SESSION_MAX_AGE"
    )
    cookie_name: str = Field("ops_dashboard_auth", validation_alias="SESSION_COOKIE_NAME")


class CacheSettings(BaseSettings):
    """Dashboard snapshot cache configuration."""

    ttl_seconds: float = Field(300.0, validation_alias="DASHBOARD_CACHE_TTL")

    @field_validator("ttl_seconds")
    @classmethod
    def _positive_ttl(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Cache TTL must be positive.")
        return value


class MaterialSearchSettings(BaseSettings):
    """Settings for the supplier search automation webhook."""

    webhook_url: Optional[AnyHttpUrl] = Field(
        None,
        validation_alias="N8N_WEBHOOK_URL",
        description="Material search is disabled when omitted.",
    )
    timeout_seconds: float = Field(60.0, validation_alias="MATERIAL_SEARCH_TIMEOUT")
    attempts: int = Field(1, validation_alias="MATERIAL_SEARCH_ATTEMPTS", ge=1)


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    name_match_mode: Literal["heuristic", "exact"] = Field(
        "heuristic",
        validation_alias="NAME_MATCH_MODE",
        description="How fine records are associated with engineer sheets.",
    )
    timezone: str = Field(
        "Europe/London",
        validation_alias="DASHBOARD_TIMEZONE",
        description="IANA zone whose calendar decides where the pay period starts.",
    )
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    material_search: MaterialSearchSettings = Field(
        default_factory=MaterialSearchSettings
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {value!r}.") from exc
        return value

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "CacheSettings",
    "GoogleSettings",
    "MaterialSearchSettings",
    "SecuritySettings",
    "get_settings",
]
