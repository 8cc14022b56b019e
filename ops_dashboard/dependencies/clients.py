"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from ops_dashboard.clients import GoogleSheetsClient, MaterialSearchClient
from ops_dashboard.core.config import get_settings
from ops_dashboard.services import DashboardCache, DashboardService, SessionTokenService
from ops_dashboard.utils.http import RetryConfig


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_sheets_client() -> GoogleSheetsClient:
    """Provide Google Sheets client instance."""
    settings = _settings()
    return GoogleSheetsClient(settings.google.service_account_key)


@lru_cache()
def get_dashboard_cache() -> DashboardCache:
    """Provide the process-wide dashboard snapshot cache."""
    settings = _settings()
    return DashboardCache(ttl_seconds=settings.cache.ttl_seconds)


@lru_cache()
def get_session_token_service() -> SessionTokenService:
    """Provide the login session issuer."""
    security = _settings().security
    return SessionTokenService(
        password=security.dashboard_password,
        secret=security.session_secret,
        max_age_seconds=security.session_max_age_seconds,
    )


@lru_cache()
def get_material_search_client() -> MaterialSearchClient | None:
    """Provide the supplier search client when the webhook is configured."""
    search = _settings().material_search
    if not search.webhook_url:
        return None
    return MaterialSearchClient(
        webhook_url=str(search.webhook_url),
        timeout=search.timeout_seconds,
        retry_config=RetryConfig(attempts=search.attempts),
    )


def get_dashboard_service() -> DashboardService:
    """Build a dashboard service using configured clients."""
    settings = _settings()
    return DashboardService(
        sheets_client=get_sheets_client(),
        google_settings=settings.google,
        name_match_mode=settings.name_match_mode,
        zone=settings.zone,
    )


__all__ = [
    "get_dashboard_cache",
    "get_dashboard_service",
    "get_material_search_client",
    "get_session_token_service",
    "get_sheets_client",
]
