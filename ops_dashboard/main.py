"""
FastAPI application entrypoint for the operations dashboard.
"""

from __future__ import annotations

from fastapi import FastAPI

from ops_dashboard import __version__
from ops_dashboard.api.routes import (
    SessionRequiredError,
    router as api_router,
    session_required_handler,
)
from ops_dashboard.core.config import get_settings
from ops_dashboard.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Operations Dashboard",
        version=__version__,
        description="Invoice, payroll and fines summaries backed by Google Sheets.",
    )
    app.include_router(api_router, prefix="/api")
    app.add_exception_handler(SessionRequiredError, session_required_handler)
    return app


app = create_app()

__all__ = ["app", "create_app"]
