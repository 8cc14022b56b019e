"""
Row and cell parsers for the invoice, payslip and tickets spreadsheets.

Sheet cells are loosely typed strings typed in by hand, so every cell parser
here recovers locally: a malformed value becomes a default, never an exception.
Row parsers return ``None`` for header rows and rows too short to describe a
record, which callers treat as "skip", not as an error.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ops_dashboard.schemas import EngineerJob, Invoice, PaymentStatus, Ticket

INVOICE_MIN_COLUMNS = 7
PAYSLIP_MIN_COLUMNS = 4
TICKET_MIN_COLUMNS = 4

DEFAULT_HOURS = "0:00:00"

_CURRENCY_NOISE = re.compile(r"[£$€,\s]")
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def _leading_float(text: str) -> Optional[float]:
    match = _LEADING_FLOAT.match(text)
    if not match:
        return None
    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return value


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(0)) if match else 0


def parse_currency(value: Any) -> float:
    """Parse a currency cell such as ``"£1,234.56"`` into a non-negative float.

    Currency symbols, thousands separators and whitespace are stripped before
    parsing. Anything that still is not a number, or is negative, yields 0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = _CURRENCY_NOISE.sub("", str(value))
        parsed = _leading_float(cleaned)
        if parsed is None:
            return 0.0
        number = parsed
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def parse_time_to_hours(value: Any) -> float:
    """Convert ``"HH:MM:SS"`` (or ``"HH:MM"``) into decimal hours.

    Missing or non-numeric fields count as zero; a value without a colon is 0.
    """
    if not value:
        return 0.0
    parts = str(value).split(":")
    if len(parts) < 2:
        return 0.0
    hours = _leading_int(parts[0])
    minutes = _leading_int(parts[1])
    seconds = _leading_int(parts[2]) if len(parts) > 2 else 0
    total = hours + minutes / 60 + seconds / 3600
    return max(total, 0.0)


def parse_hours_flexible(value: Any) -> float:
    """Parse hours written as ``"60 mins"``, ``"1:30:00"`` or ``"2.5"``."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) and value > 0 else 0.0
    text = str(value).strip().lower()
    if not text:
        return 0.0
    if "min" in text:
        minutes = _leading_float(re.sub(r"[^0-9.]", "", text))
        return minutes / 60 if minutes is not None else 0.0
    if ":" in text:
        return parse_time_to_hours(text)
    number = _leading_float(text)
    if number is None or number < 0:
        return 0.0
    return number


def parse_sheet_date(value: Any) -> Optional[date]:
    """Parse ``"YYYY-MM-DD[ time]"`` or ``"DD/MM/YYYY"``; anything else is ``None``."""
    if not value:
        return None
    text = str(value).strip()
    if "-" in text:
        iso_text = text.split(" ")[0]
    elif "/" in text:
        parts = text.split("/")
        if len(parts) != 3:
            return None
        day, month, year = (part.strip() for part in parts)
        iso_text = f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    else:
        return None
    try:
        return datetime.strptime(iso_text, "%Y-%m-%d").date()
    except ValueError:
        return None


def date_key(value: str) -> str:
    """Return the date portion of a cell, dropping any trailing time."""
    return value.split(" ")[0]


def _cell(row: Sequence[Any], index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    return str(row[index]).strip()


def parse_invoice_row(row: Sequence[Any], client_name: str) -> Optional[Invoice]:
    """Columns: PO, WO, Address, Amount, Email, Name, Paid, Director."""
    if len(row) < INVOICE_MIN_COLUMNS:
        return None
    po = _cell(row, 0)
    if not po or po.lower() == "po":
        return None

    paid = (
        PaymentStatus.PAID
        if _cell(row, 6).upper() == PaymentStatus.PAID.value
        else PaymentStatus.NOT_PAID
    )
    return Invoice(
        po=po,
        wo=_cell(row, 1),
        address=_cell(row, 2),
        amount=parse_currency(_cell(row, 3)),
        email=_cell(row, 4),
        name=_cell(row, 5),
        paid=paid,
        director=_cell(row, 7),
        client=client_name,
    )


def parse_payslip_row(
    row: Sequence[Any], engineer_name: str, row_index: int
) -> Optional[EngineerJob]:
    """Columns: Job Id, Date, Hours, Cost, Overtime, Hourly Rate.

    ``row_index`` is the 1-based sheet row the values were read from.
    """
    if len(row) < PAYSLIP_MIN_COLUMNS:
        return None
    job_id = _cell(row, 0)
    if not job_id or job_id.lower() == "job id":
        return None

    hours = _cell(row, 2) or DEFAULT_HOURS
    hourly_rate_cell = _cell(row, 5)
    return EngineerJob(
        job_id=job_id,
        date=_cell(row, 1),
        hours=hours,
        hours_decimal=parse_time_to_hours(hours),
        cost=parse_currency(_cell(row, 3)),
        overtime=parse_currency(_cell(row, 4)),
        hourly_rate=parse_currency(hourly_rate_cell) if hourly_rate_cell else None,
        engineer_name=engineer_name,
        row_index=row_index,
    )


def parse_ticket_row(row: Sequence[Any]) -> Optional[Ticket]:
    """Columns: Vehicle reg, Fine amount, Issued date, Name, Admin fee, Date paid, Ref, Total."""
    if len(row) < TICKET_MIN_COLUMNS:
        return None
    vehicle_reg = _cell(row, 0)
    if not vehicle_reg or vehicle_reg.lower() == "vehicle reg":
        return None

    fine_amount = parse_currency(_cell(row, 1))
    admin_fee = parse_currency(_cell(row, 4))
    total_cell = _cell(row, 7)
    return Ticket(
        vehicle_reg=vehicle_reg,
        fine_amount=fine_amount,
        fine_issued_date=_cell(row, 2),
        engineer_name=_cell(row, 3),
        admin_fee=admin_fee,
        date_paid=_cell(row, 5),
        ref_number=_cell(row, 6),
        total_amount=parse_currency(total_cell) if total_cell else fine_amount + admin_fee,
    )


__all__ = [
    "DEFAULT_HOURS",
    "date_key",
    "parse_currency",
    "parse_hours_flexible",
    "parse_invoice_row",
    "parse_payslip_row",
    "parse_sheet_date",
    "parse_ticket_row",
    "parse_time_to_hours",
]
