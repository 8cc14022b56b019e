"""Public schema exports."""

from .auth import LoginPayload
from .dashboard import (
    ClientBreakdown,
    DashboardData,
    DashboardResponse,
    DateBreakdown,
    DirectorBreakdown,
    EngineerJob,
    EngineerSummary,
    Invoice,
    InvoiceSummary,
    PaymentStatus,
    PayrollSummary,
    ProjectManagerBreakdown,
    Ticket,
    UpdateJobRequest,
)
from .material_search import (
    MaterialSearchRequest,
    MaterialSearchResponse,
    MaterialSearchResult,
)
from .sheets import SheetData

__all__ = [
    "ClientBreakdown",
    "DashboardData",
    "DashboardResponse",
    "DateBreakdown",
    "DirectorBreakdown",
    "EngineerJob",
    "EngineerSummary",
    "Invoice",
    "InvoiceSummary",
    "LoginPayload",
    "MaterialSearchRequest",
    "MaterialSearchResponse",
    "MaterialSearchResult",
    "PaymentStatus",
    "PayrollSummary",
    "ProjectManagerBreakdown",
    "SheetData",
    "Ticket",
    "UpdateJobRequest",
]
