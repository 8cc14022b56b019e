"""
Raw spreadsheet payloads passed from the Sheets client to the aggregators.
"""

from pydantic import BaseModel, Field


class SheetData(BaseModel):
    """All rows of one tab; row 0 is conventionally the header."""

    sheet_name: str
    rows: list[list[str]] = Field(default_factory=list)


__all__ = ["SheetData"]
