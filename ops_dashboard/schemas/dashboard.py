"""
Pydantic models for parsed sheet records and the dashboard snapshot.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentStatus(str, Enum):
    PAID = "PAID"
    NOT_PAID = "NOT PAID"


class Invoice(BaseModel):
    """One invoice row from a client tab of the invoice spreadsheet."""

    model_config = ConfigDict(frozen=True)

    po: str = Field(..., description="Purchase order identifier.")
    wo: str = Field("", description="Work order identifier.")
    address: str = ""
    amount: float = Field(0.0, ge=0)
    email: str = Field("", description="Recipient email address.")
    name: str = Field("", description="Recipient name.")
    paid: PaymentStatus = PaymentStatus.NOT_PAID
    director: str = ""
    client: str = Field(..., description="Sheet/tab name the row was read from.")


class EngineerJob(BaseModel):
    """One job row from an engineer's payslip tab."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    date: str = Field("", description="Raw date cell; several formats occur.")
    hours: str = Field("0:00:00", description="Raw hours cell.")
    hours_decimal: float = Field(0.0, ge=0)
    cost: float = Field(0.0, ge=0)
    overtime: float = Field(0.0, ge=0)
    hourly_rate: Optional[float] = None
    engineer_name: str = Field(..., description="Sheet/tab name owning the job.")
    row_index: int = Field(..., ge=1, description="1-based sheet row, used for updates.")


class Ticket(BaseModel):
    """A traffic or parking fine from the tickets tab."""

    model_config = ConfigDict(frozen=True)

    vehicle_reg: str
    fine_amount: float = Field(0.0, ge=0)
    fine_issued_date: str = ""
    engineer_name: str = Field("", description="Free text; matched heuristically.")
    admin_fee: float = Field(0.0, ge=0)
    date_paid: str = ""
    ref_number: str = ""
    total_amount: float = Field(0.0, ge=0)


class ClientBreakdown(BaseModel):
    client: str
    outstanding: float = 0.0
    paid: float = 0.0
    count: int = 0


class DirectorBreakdown(BaseModel):
    director: str
    outstanding: float = 0.0
    count: int = 0


class ProjectManagerBreakdown(BaseModel):
    email: str
    pm_name: str
    outstanding: float = 0.0
    paid: float = 0.0
    count: int = 0


class InvoiceSummary(BaseModel):
    total_outstanding: float = 0.0
    total_paid: float = 0.0
    count_outstanding: int = 0
    count_paid: int = 0
    by_client: list[ClientBreakdown] = Field(default_factory=list)
    by_director: list[DirectorBreakdown] = Field(default_factory=list)
    by_pm: list[ProjectManagerBreakdown] = Field(default_factory=list)


class EngineerSummary(BaseModel):
    name: str = Field(..., description="Sheet/tab name identifying the engineer.")
    display_name: str
    total_jobs: int = 0
    total_hours: float = 0.0
    total_cost: float = 0.0
    total_overtime: float = 0.0
    average_cost_per_job: float = 0.0
    jobs: list[EngineerJob] = Field(default_factory=list)
    recent_jobs: list[EngineerJob] = Field(
        default_factory=list, description="Jobs inside the current pay period."
    )
    tickets: list[Ticket] = Field(default_factory=list)
    total_fines: float = 0.0


class DateBreakdown(BaseModel):
    date: str
    cost: float = 0.0
    jobs: int = 0


class PayrollSummary(BaseModel):
    total_cost: float = 0.0
    total_jobs: int = 0
    total_hours: float = 0.0
    total_overtime: float = 0.0
    engineer_count: int = 0
    engineers: list[EngineerSummary] = Field(default_factory=list)
    by_date: list[DateBreakdown] = Field(default_factory=list)
    pay_period_start: str
    pay_period_end: str
    total_fines: float = 0.0
    total_tickets: int = 0
    tickets: list[Ticket] = Field(default_factory=list)


class DashboardData(BaseModel):
    invoices: InvoiceSummary
    payroll: PayrollSummary
    last_updated: str = Field(..., description="ISO-8601 timestamp of the snapshot.")


class DashboardResponse(BaseModel):
    """Envelope returned by the data endpoint."""

    success: bool = True
    data: DashboardData
    cached: bool = False
    warning: Optional[str] = None


class UpdateJobRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    engineer_name: str = Field(..., min_length=1, description="Engineer sheet/tab name.")
    job_id: str = Field(..., min_length=1)
    new_cost: float = Field(..., ge=0)


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
    "PaymentStatus",
    "PayrollSummary",
    "ProjectManagerBreakdown",
    "Ticket",
    "UpdateJobRequest",
]
