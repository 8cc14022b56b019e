"""
Business logic assembling the dashboard snapshot from the spreadsheets.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone, tzinfo
from typing import Callable, List, Protocol, Sequence

from ops_dashboard.core.config import GoogleSettings
from ops_dashboard.schemas import (
    DashboardData,
    InvoiceSummary,
    PayrollSummary,
    SheetData,
    Ticket,
)
from ops_dashboard.services.aggregation import (
    aggregate_invoices,
    aggregate_payroll,
    parse_invoices,
    parse_tickets,
)
from ops_dashboard.services.name_matching import MatchMode
from ops_dashboard.services.pay_period import current_pay_period

logger = logging.getLogger(__name__)


class SheetsSource(Protocol):
    async def get_rows(self, spreadsheet_id: str, sheet_name: str) -> List[List[str]]:
        ...

    async def get_all_sheets_data(self, spreadsheet_id: str) -> Sequence[SheetData]:
        ...

    async def update_job_cost(
        self, spreadsheet_id: str, sheet_name: str, job_id: str, new_cost: float
    ) -> bool:
        ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DashboardService:
    """Read the invoice and payslip spreadsheets and summarize them."""

    def __init__(
        self,
        *,
        sheets_client: SheetsSource,
        google_settings: GoogleSettings,
        name_match_mode: MatchMode | str = MatchMode.HEURISTIC,
        clock: Callable[[], datetime] = _utc_now,
        zone: tzinfo = timezone.utc,
    ) -> None:
        self._sheets = sheets_client
        self._invoice_sheet_id = google_settings.invoice_sheet_id
        self._payslip_sheet_id = google_settings.payslip_sheet_id
        self._tickets_sheet = google_settings.tickets_sheet_name
        self._mode = MatchMode(name_match_mode)
        self._clock = clock
        self._zone = zone

    async def fetch_invoice_data(self) -> InvoiceSummary:
        sheets = await self._sheets.get_all_sheets_data(self._invoice_sheet_id)
        invoices = parse_invoices(sheets)
        logger.info("Parsed %s invoices from %s tabs", len(invoices), len(sheets))
        return aggregate_invoices(invoices)

    async def fetch_tickets(self) -> List[Ticket]:
        """Tickets are optional; a failed read is logged and treated as none."""
        try:
            rows = await self._sheets.get_rows(self._payslip_sheet_id, self._tickets_sheet)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to fetch tickets from %r", self._tickets_sheet)
            return []
        return parse_tickets(rows)

    async def fetch_payroll_data(self) -> PayrollSummary:
        sheets, tickets = await asyncio.gather(
            self._sheets.get_all_sheets_data(self._payslip_sheet_id),
            self.fetch_tickets(),
        )
        # Pay periods turn over at Monday 00:00 in the business timezone.
        period = current_pay_period(self._clock().astimezone(self._zone))
        return aggregate_payroll(
            sheets,
            tickets,
            period,
            mode=self._mode,
            tickets_sheet=self._tickets_sheet,
        )

    async def fetch_dashboard_data(self) -> DashboardData:
        invoices, payroll = await asyncio.gather(
            self.fetch_invoice_data(),
            self.fetch_payroll_data(),
        )
        return DashboardData(
            invoices=invoices,
            payroll=payroll,
            last_updated=self._clock().isoformat(),
        )

    async def update_job_cost(
        self, *, engineer_name: str, job_id: str, new_cost: float
    ) -> bool:
        """Rewrite a job's cost on the engineer's tab; ``False`` if not applied."""
        return await self._sheets.update_job_cost(
            self._payslip_sheet_id, engineer_name, job_id, new_cost
        )


__all__ = ["DashboardService", "SheetsSource"]
