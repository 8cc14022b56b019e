"""Expose constructed client wrappers."""

from .google_sheets import GoogleSheetsClient, SheetsConfigurationError
from .material_search import MaterialSearchClient, MaterialSearchError

__all__ = [
    "GoogleSheetsClient",
    "MaterialSearchClient",
    "MaterialSearchError",
    "SheetsConfigurationError",
]
