"""Google Sheets client wrapper for the invoice and payslip spreadsheets."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, List

from google.oauth2 import service_account
from googleapiclient.discovery import build

from ops_dashboard.schemas import SheetData

logger = logging.getLogger(__name__)

SCOPES = ("https://www.googleapis.com/auth/spreadsheets",)

JOB_ID_COLUMN_INDEX = 0
COST_COLUMN = "D"


class SheetsConfigurationError(Exception):
    """Raised when the service account credentials cannot be loaded."""


def _quote_sheet(sheet_name: str) -> str:
    return "'" + sheet_name.replace("'", "''") + "'"


class GoogleSheetsClient:
    """Read tabs and write single cells using a service account."""

    def __init__(self, service_account_key: str) -> None:
        self._service_account_key = service_account_key
        self._credentials: service_account.Credentials | None = None

    def _get_credentials(self) -> service_account.Credentials:
        if self._credentials is None:
            try:
                info = json.loads(self._service_account_key)
                self._credentials = service_account.Credentials.from_service_account_info(
                    info, scopes=list(SCOPES)
                )
            except (ValueError, KeyError) as exc:
                raise SheetsConfigurationError(
                    "Failed to load Google service account credentials."
                ) from exc
        return self._credentials

    def _service(self):
        return build(
            "sheets", "v4", credentials=self._get_credentials(), cache_discovery=False
        )

    async def list_sheet_names(self, spreadsheet_id: str) -> List[str]:
        """Return the tab titles of a spreadsheet in display order."""

        def _execute() -> List[str]:
            response = (
                self._service()
                .spreadsheets()
                .get(spreadsheetId=spreadsheet_id, fields="sheets.properties.title")
                .execute()
            )
            return [
                sheet.get("properties", {}).get("title", "")
                for sheet in response.get("sheets", [])
            ]

        return await asyncio.to_thread(_execute)

    async def get_rows(self, spreadsheet_id: str, sheet_name: str) -> List[List[str]]:
        """Fetch every populated row of a tab as strings."""

        def _execute() -> List[List[str]]:
            response = (
                self._service()
                .spreadsheets()
                .values()
                .get(spreadsheetId=spreadsheet_id, range=_quote_sheet(sheet_name))
                .execute()
            )
            values = response.get("values", [])
            return [
                ["" if cell is None else str(cell) for cell in row] for row in values
            ]

        return await asyncio.to_thread(_execute)

    async def update_cell(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        row: int,
        column: str,
        value: Any,
    ) -> bool:
        """Write one cell; failures are logged and reported as ``False``."""
        cell_range = f"{_quote_sheet(sheet_name)}!{column}{row}"

        def _execute() -> None:
            (
                self._service()
                .spreadsheets()
                .values()
                .update(
                    spreadsheetId=spreadsheet_id,
                    range=cell_range,
                    valueInputOption="USER_ENTERED",
                    body={"values": [[value]]},
                )
                .execute()
            )

        try:
            await asyncio.to_thread(_execute)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to update cell %s", cell_range)
            return False
        return True

    async def get_all_sheets_data(self, spreadsheet_id: str) -> List[SheetData]:
        """Fetch every tab concurrently; a failing tab contributes no rows."""
        sheet_names = await self.list_sheet_names(spreadsheet_id)

        async def _fetch(sheet_name: str) -> SheetData:
            try:
                rows = await self.get_rows(spreadsheet_id, sheet_name)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Failed to fetch sheet %r", sheet_name)
                rows = []
            return SheetData(sheet_name=sheet_name, rows=rows)

        return list(await asyncio.gather(*(_fetch(name) for name in sheet_names)))

    async def update_job_cost(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        job_id: str,
        new_cost: float,
    ) -> bool:
        """Overwrite the cost cell of the row whose job id matches."""
        rows = await self.get_rows(spreadsheet_id, sheet_name)
        for index, row in enumerate(rows):
            if row and row[JOB_ID_COLUMN_INDEX].strip() == str(job_id).strip():
                return await self.update_cell(
                    spreadsheet_id, sheet_name, index + 1, COST_COLUMN, new_cost
                )
        logger.warning("Job %s not found in sheet %r", job_id, sheet_name)
        return False


__all__ = ["GoogleSheetsClient", "SheetsConfigurationError"]
