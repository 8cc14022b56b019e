"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_dashboard_cache,
    get_dashboard_service,
    get_material_search_client,
    get_session_token_service,
    get_sheets_client,
)
from .config import SettingsDependency, get_app_settings

__all__ = [
    "SettingsDependency",
    "get_app_settings",
    "get_dashboard_cache",
    "get_dashboard_service",
    "get_material_search_client",
    "get_session_token_service",
    "get_sheets_client",
]
