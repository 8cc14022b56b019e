"""
Fold parsed sheet records into the invoice and payroll summaries.

Everything here is pure: the same rows and the same pay period always give the
same summary, so the functions can be exercised without the Sheets API.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Sequence

from ops_dashboard.schemas import (
    ClientBreakdown,
    DateBreakdown,
    DirectorBreakdown,
    EngineerJob,
    EngineerSummary,
    Invoice,
    InvoiceSummary,
    PaymentStatus,
    PayrollSummary,
    ProjectManagerBreakdown,
    SheetData,
    Ticket,
)
from ops_dashboard.services.name_matching import (
    MatchMode,
    display_name,
    index_tickets_by_engineer,
    match_tickets,
)
from ops_dashboard.services.parsers import (
    date_key,
    parse_invoice_row,
    parse_payslip_row,
    parse_sheet_date,
    parse_ticket_row,
)
from ops_dashboard.services.pay_period import PayPeriod, is_within_pay_period

DEFAULT_TICKETS_SHEET = "Tickets"


def parse_invoices(sheets: Iterable[SheetData]) -> list[Invoice]:
    invoices: list[Invoice] = []
    for sheet in sheets:
        for row in sheet.rows[1:]:
            invoice = parse_invoice_row(row, sheet.sheet_name)
            if invoice is not None:
                invoices.append(invoice)
    return invoices


def parse_tickets(rows: Sequence[Sequence[str]]) -> list[Ticket]:
    tickets: list[Ticket] = []
    for row in rows[1:]:
        ticket = parse_ticket_row(row)
        if ticket is not None:
            tickets.append(ticket)
    return tickets


def parse_jobs(sheet: SheetData) -> list[EngineerJob]:
    jobs: list[EngineerJob] = []
    # Row 0 is the header; sheet rows are numbered from 1.
    for offset, row in enumerate(sheet.rows[1:], start=2):
        job = parse_payslip_row(row, sheet.sheet_name, offset)
        if job is not None:
            jobs.append(job)
    return jobs


def _pm_name(invoice: Invoice) -> str:
    if invoice.name:
        return invoice.name
    local_part = invoice.email.split("@", 1)[0]
    return " ".join(
        word.capitalize() for word in local_part.replace("_", ".").split(".") if word
    )


def aggregate_invoices(invoices: Sequence[Invoice]) -> InvoiceSummary:
    """Totals by payment status, plus breakdowns by client, director and PM."""
    outstanding = [inv for inv in invoices if inv.paid is PaymentStatus.NOT_PAID]
    paid = [inv for inv in invoices if inv.paid is PaymentStatus.PAID]

    clients: dict[str, ClientBreakdown] = {}
    managers: dict[str, ProjectManagerBreakdown] = {}
    for inv in invoices:
        client = clients.setdefault(inv.client, ClientBreakdown(client=inv.client))
        client.count += 1
        if inv.paid is PaymentStatus.PAID:
            client.paid += inv.amount
        else:
            client.outstanding += inv.amount

        pm_key = (inv.email or inv.name).lower()
        if not pm_key:
            continue
        manager = managers.setdefault(
            pm_key, ProjectManagerBreakdown(email=inv.email, pm_name=_pm_name(inv))
        )
        manager.count += 1
        if inv.paid is PaymentStatus.PAID:
            manager.paid += inv.amount
        else:
            manager.outstanding += inv.amount

    directors: dict[str, DirectorBreakdown] = {}
    for inv in outstanding:
        if not inv.director:
            continue
        director = directors.setdefault(
            inv.director, DirectorBreakdown(director=inv.director)
        )
        director.outstanding += inv.amount
        director.count += 1

    def by_outstanding(item) -> float:
        return -item.outstanding

    return InvoiceSummary(
        total_outstanding=sum(inv.amount for inv in outstanding),
        total_paid=sum(inv.amount for inv in paid),
        count_outstanding=len(outstanding),
        count_paid=len(paid),
        by_client=sorted(clients.values(), key=by_outstanding),
        by_director=sorted(directors.values(), key=by_outstanding),
        by_pm=sorted(managers.values(), key=by_outstanding),
    )


def ticket_fine_total(tickets: Iterable[Ticket]) -> float:
    return sum(ticket.fine_amount + ticket.admin_fee for ticket in tickets)


def is_payroll_sheet(sheet: SheetData, tickets_sheet: str = DEFAULT_TICKETS_SHEET) -> bool:
    """Engineer tabs only: skip the tickets tab, "no checkout" tabs and empty tabs."""
    name = sheet.sheet_name.lower()
    if name in ("tickets", tickets_sheet.lower()) or "no checkout" in name:
        return False
    return len(sheet.rows) >= 2


def summarize_engineer(
    sheet_name: str,
    jobs: Sequence[EngineerJob],
    period: PayPeriod,
    ticket_index: Mapping[str, list[Ticket]],
    mode: MatchMode | str = MatchMode.HEURISTIC,
) -> EngineerSummary:
    total_cost = sum(job.cost for job in jobs)
    recent = [job for job in jobs if is_within_pay_period(job.date, period)]
    recent.sort(key=lambda job: parse_sheet_date(job.date) or date.min, reverse=True)
    tickets = match_tickets(sheet_name, ticket_index, mode)

    return EngineerSummary(
        name=sheet_name,
        display_name=display_name(sheet_name),
        total_jobs=len(jobs),
        total_hours=round(sum(job.hours_decimal for job in jobs), 2),
        total_cost=total_cost,
        total_overtime=sum(job.overtime for job in jobs),
        average_cost_per_job=round(total_cost / len(jobs), 2) if jobs else 0.0,
        jobs=list(jobs),
        recent_jobs=recent,
        tickets=tickets,
        total_fines=ticket_fine_total(tickets),
    )


def aggregate_by_date(jobs: Iterable[EngineerJob]) -> list[DateBreakdown]:
    """Cost and job count per calendar day, oldest first.

    Days that do not parse sort after every real date, in key order.
    """
    days: dict[str, DateBreakdown] = {}
    for job in jobs:
        key = date_key(job.date)
        bucket = days.setdefault(key, DateBreakdown(date=key))
        bucket.cost += job.cost
        bucket.jobs += 1

    def sort_key(bucket: DateBreakdown) -> tuple[bool, date, str]:
        parsed = parse_sheet_date(bucket.date)
        return (parsed is None, parsed or date.min, bucket.date)

    return sorted(days.values(), key=sort_key)


def aggregate_payroll(
    sheets: Iterable[SheetData],
    tickets: Sequence[Ticket],
    period: PayPeriod,
    *,
    mode: MatchMode | str = MatchMode.HEURISTIC,
    tickets_sheet: str = DEFAULT_TICKETS_SHEET,
) -> PayrollSummary:
    """Per-engineer summaries, a per-day breakdown and fine totals."""
    ticket_index = index_tickets_by_engineer(tickets)
    engineers: list[EngineerSummary] = []
    all_jobs: list[EngineerJob] = []

    for sheet in sheets:
        if not is_payroll_sheet(sheet, tickets_sheet):
            continue
        jobs = parse_jobs(sheet)
        if not jobs:
            continue
        all_jobs.extend(jobs)
        engineers.append(
            summarize_engineer(sheet.sheet_name, jobs, period, ticket_index, mode)
        )

    engineers.sort(key=lambda eng: eng.total_cost, reverse=True)

    return PayrollSummary(
        total_cost=sum(eng.total_cost for eng in engineers),
        total_jobs=len(all_jobs),
        total_hours=round(sum(eng.total_hours for eng in engineers), 2),
        total_overtime=sum(eng.total_overtime for eng in engineers),
        engineer_count=len(engineers),
        engineers=engineers,
        by_date=aggregate_by_date(all_jobs),
        pay_period_start=period.start.isoformat(),
        pay_period_end=period.end.isoformat(),
        total_fines=ticket_fine_total(tickets),
        total_tickets=len(tickets),
        tickets=list(tickets),
    )


__all__ = [
    "DEFAULT_TICKETS_SHEET",
    "aggregate_by_date",
    "aggregate_invoices",
    "aggregate_payroll",
    "is_payroll_sheet",
    "parse_invoices",
    "parse_jobs",
    "parse_tickets",
    "summarize_engineer",
    "ticket_fine_total",
]
