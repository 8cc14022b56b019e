"""
FastAPI routes for the operations dashboard.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse

from ops_dashboard.clients import MaterialSearchError
from ops_dashboard.dependencies import (
    get_app_settings,
    get_dashboard_cache,
    get_dashboard_service,
    get_material_search_client,
    get_session_token_service,
)
from ops_dashboard.schemas import (
    DashboardResponse,
    LoginPayload,
    MaterialSearchRequest,
    MaterialSearchResponse,
    UpdateJobRequest,
)

router = APIRouter()
logger = logging.getLogger(__name__)

STALE_CACHE_WARNING = "Using cached data due to API error"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


class SessionRequiredError(Exception):
    """Raised by ``require_session`` when the request carries no valid session."""


async def session_required_handler(
    request: Request, exc: SessionRequiredError
) -> JSONResponse:
    return _error(HTTPStatus.UNAUTHORIZED, "Unauthorized")


def require_session(
    request: Request,
    settings: Annotated[Any, Depends(get_app_settings)],
    session_tokens: Annotated[Any, Depends(get_session_token_service)],
) -> None:
    """Reject requests without a valid session cookie."""
    token = request.cookies.get(settings.security.cookie_name)
    if not session_tokens.verify(token):
        raise SessionRequiredError()


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.post("/auth/login", status_code=HTTPStatus.OK)
async def login(
    payload: LoginPayload,
    settings: Annotated[Any, Depends(get_app_settings)],
    session_tokens: Annotated[Any, Depends(get_session_token_service)],
) -> Response:
    """Exchange the dashboard password for a session cookie."""
    if not payload.password:
        return _error(HTTPStatus.BAD_REQUEST, "Password is required")
    if not session_tokens.check_password(payload.password):
        logger.warning("Rejected dashboard login attempt")
        return _error(HTTPStatus.UNAUTHORIZED, "Invalid password")

    response = JSONResponse(content={"success": True})
    response.set_cookie(
        settings.security.cookie_name,
        session_tokens.issue(),
        max_age=session_tokens.max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
    return response


@router.post("/auth/logout", status_code=HTTPStatus.OK)
async def logout(settings: Annotated[Any, Depends(get_app_settings)]) -> Response:
    response = JSONResponse(content={"success": True})
    response.delete_cookie(
        settings.security.cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
    return response


@router.get(
    "/data",
    response_model=DashboardResponse,
    dependencies=[Depends(require_session)],
)
async def get_dashboard_data(
    service: Annotated[Any, Depends(get_dashboard_service)],
    cache: Annotated[Any, Depends(get_dashboard_cache)],
    refresh: bool = Query(
        default=False,
        description="When true, bypass the cache and read the spreadsheets again.",
    ),
) -> Any:
    """Return the dashboard snapshot, serving the cache when it is fresh.

    If the spreadsheets cannot be read, the last snapshot still within its
    time-to-live is returned with a warning instead of an error.
    """
    if not refresh:
        cached = cache.get()
        if cached is not None:
            return DashboardResponse(data=cached, cached=True)

    try:
        data = await service.fetch_dashboard_data()
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Dashboard data fetch failed")
        cached = cache.get()
        if cached is not None:
            return DashboardResponse(
                data=cached, cached=True, warning=STALE_CACHE_WARNING
            )
        return _error(
            HTTPStatus.INTERNAL_SERVER_ERROR, str(exc) or "Failed to fetch data"
        )

    cache.set(data)
    return DashboardResponse(data=data, cached=False)


@router.post("/update-job", dependencies=[Depends(require_session)])
async def update_job(
    payload: UpdateJobRequest,
    service: Annotated[Any, Depends(get_dashboard_service)],
    cache: Annotated[Any, Depends(get_dashboard_cache)],
) -> Response:
    """Overwrite a job's cost on the engineer's payslip tab."""
    try:
        updated = await service.update_job_cost(
            engineer_name=payload.engineer_name,
            job_id=payload.job_id,
            new_cost=payload.new_cost,
        )
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Update job failed for %s", payload.job_id)
        return _error(
            HTTPStatus.INTERNAL_SERVER_ERROR, str(exc) or "Failed to update job"
        )

    if not updated:
        return _error(HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to update sheet")

    cache.clear()
    return JSONResponse(
        content={
            "success": True,
            "message": f"Updated job {payload.job_id} cost to £{payload.new_cost:g}",
        }
    )


@router.post("/material-search", response_model=MaterialSearchResponse)
async def material_search(
    payload: MaterialSearchRequest,
    search_client: Annotated[Any, Depends(get_material_search_client)],
) -> Any:
    """Forward a material query to the supplier search workflow."""
    if not payload.query.strip():
        return _error(HTTPStatus.BAD_REQUEST, "A search query is required")
    if search_client is None:
        return _error(
            HTTPStatus.INTERNAL_SERVER_ERROR, "Material search is not configured"
        )

    try:
        return await search_client.search(payload.query)
    except MaterialSearchError:
        return _error(HTTPStatus.BAD_GATEWAY, "Supplier search failed. Please try again.")


__all__ = [
    "SessionRequiredError",
    "require_session",
    "router",
    "session_required_handler",
]
