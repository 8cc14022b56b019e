try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from datetime import date

import pytest

from ops_dashboard.schemas import SheetData
from ops_dashboard.services.aggregation import (
    aggregate_by_date,
    aggregate_invoices,
    aggregate_payroll,
    is_payroll_sheet,
    parse_invoices,
    parse_jobs,
    parse_tickets,
)
from ops_dashboard.services.pay_period import PayPeriod

PERIOD = PayPeriod(start=date(2025, 12, 29), end=date(2026, 1, 12))

INVOICE_HEADER = ["PO", "WO", "Address", "Amount", "Email", "Name", "Paid", "Director"]
PAYSLIP_HEADER = ["Job Id", "Date", "Hours", "Cost", "Overtime", "Hourly Rate"]
TICKET_HEADER = [
    "Vehicle reg",
    "Fine amount",
    "Fine-Issued Date",
    "Name",
    "Admin Fee",
    "Date paid",
    "Ref Number",
]


def _invoice_sheets() -> list[SheetData]:
    return [
        SheetData(
            sheet_name="ClientX",
            rows=[
                INVOICE_HEADER,
                ["PO1", "WO1", "Addr", "£100.00", "a@b.com", "Name", "PAID", "Dir1"],
                ["PO2", "WO2", "Addr", "£250.00", "a@b.com", "Name", "NOT PAID", "Dir1"],
            ],
        ),
        SheetData(
            sheet_name="ClientY",
            rows=[
                INVOICE_HEADER,
                ["PO3", "WO3", "Addr", "£1,000", "jane.doe@c.com", "", "NOT PAID", ""],
                ["PO4", "WO4", "Addr", "£40", "", "", "NOT PAID", "Dir2"],
                ["", "", "", "", "", "", ""],
            ],
        ),
    ]


def test_invoice_scenario_single_paid_row() -> None:
    sheets = [
        SheetData(
            sheet_name="ClientX",
            rows=[
                INVOICE_HEADER,
                ["PO1", "WO1", "Addr", "£100.00", "a@b.com", "Name", "PAID", "Dir1"],
            ],
        )
    ]

    summary = aggregate_invoices(parse_invoices(sheets))

    assert summary.total_paid == 100.0
    assert summary.count_paid == 1
    assert summary.total_outstanding == 0.0
    assert [entry.model_dump() for entry in summary.by_client] == [
        {"client": "ClientX", "outstanding": 0.0, "paid": 100.0, "count": 1}
    ]
    assert summary.by_director == []


def test_invoice_breakdowns_partition_totals() -> None:
    summary = aggregate_invoices(parse_invoices(_invoice_sheets()))

    assert summary.count_outstanding == 3
    assert summary.count_paid == 1
    assert summary.total_outstanding == pytest.approx(1290.0)
    assert sum(c.outstanding for c in summary.by_client) == pytest.approx(
        summary.total_outstanding
    )
    assert sum(c.paid for c in summary.by_client) == pytest.approx(summary.total_paid)
    assert [c.client for c in summary.by_client] == ["ClientY", "ClientX"]


def test_director_breakdown_uses_outstanding_only_and_drops_blank() -> None:
    summary = aggregate_invoices(parse_invoices(_invoice_sheets()))

    assert [(d.director, d.outstanding, d.count) for d in summary.by_director] == [
        ("Dir1", 250.0, 1),
        ("Dir2", 40.0, 1),
    ]


def test_project_manager_breakdown() -> None:
    summary = aggregate_invoices(parse_invoices(_invoice_sheets()))

    by_email = {pm.email: pm for pm in summary.by_pm}
    assert set(by_email) == {"a@b.com", "jane.doe@c.com"}
    assert by_email["jane.doe@c.com"].pm_name == "Jane Doe"
    assert by_email["a@b.com"].pm_name == "Name"
    assert by_email["a@b.com"].paid == 100.0
    assert by_email["a@b.com"].outstanding == 250.0
    assert summary.by_pm[0].email == "jane.doe@c.com"


def test_payroll_scenario_single_engineer() -> None:
    sheets = [
        SheetData(
            sheet_name="John Smith",
            rows=[PAYSLIP_HEADER, ["J1", "2026-01-05", "02:00:00", "£50.00", "£0.00", ""]],
        )
    ]

    payroll = aggregate_payroll(sheets, [], PERIOD)

    assert payroll.engineer_count == 1
    engineer = payroll.engineers[0]
    assert engineer.display_name == "Smith"
    assert engineer.total_jobs == 1
    assert engineer.total_hours == 2.0
    assert engineer.total_cost == 50.0
    assert engineer.average_cost_per_job == 50.0
    assert [job.job_id for job in engineer.recent_jobs] == ["J1"]
    assert payroll.pay_period_start == "2025-12-29"
    assert payroll.pay_period_end == "2026-01-12"


def test_payroll_hours_ignore_cells_not_in_clock_format() -> None:
    sheets = [
        SheetData(
            sheet_name="John Smith",
            rows=[
                PAYSLIP_HEADER,
                ["J1", "2026-01-05", "2.5", "£50.00", "£0.00"],
                ["J2", "2026-01-06", "60 mins", "£30.00", "£0.00"],
                ["J3", "2026-01-07", "0:45:00", "£10.00", "£0.00"],
            ],
        )
    ]

    payroll = aggregate_payroll(sheets, [], PERIOD)

    assert payroll.engineers[0].total_hours == 0.75
    assert payroll.total_hours == 0.75
    assert payroll.total_jobs == 3


def test_payroll_fines_match_by_normalized_name() -> None:
    tickets = parse_tickets(
        [
            TICKET_HEADER,
            ["AB12 CDE", "£65.00", "2026-01-02", "john smith", "£25.00", "", "REF1"],
        ]
    )
    sheets = [
        SheetData(
            sheet_name="John Smith",
            rows=[PAYSLIP_HEADER, ["J1", "2026-01-05", "02:00:00", "£50.00", "£0.00"]],
        )
    ]

    payroll = aggregate_payroll(sheets, tickets, PERIOD)

    engineer = payroll.engineers[0]
    assert engineer.tickets == tickets
    assert engineer.total_fines == pytest.approx(90.0)
    assert payroll.total_fines == pytest.approx(90.0)
    assert payroll.total_tickets == 1


def _payroll_sheets() -> list[SheetData]:
    return [
        SheetData(
            sheet_name="John Smith",
            rows=[
                PAYSLIP_HEADER,
                ["J1", "2026-01-05", "02:00:00", "£50.00", "£0.00"],
                ["J2", "2026-01-12 09:00", "01:30:00", "£30.00", "£10.00"],
                ["J3", "2025-11-01", "1:00:00", "£20.00", "£0.00"],
                ["J4", "not a date", "0:30:00", "£5.00", "£0.00"],
            ],
        ),
        SheetData(
            sheet_name="Ali Harry Khan",
            rows=[
                PAYSLIP_HEADER,
                ["K1", "30/12/2025", "3:00:00", "£200.00", "£20.00", "£40"],
                ["K2", "2026-01-05", "1:00:00", "£100.00", "£0.00", "£40"],
            ],
        ),
        SheetData(sheet_name="Tickets", rows=[TICKET_HEADER, ["AB12", "£1", "", "x"]]),
        SheetData(
            sheet_name="Jobs with No Checkout",
            rows=[PAYSLIP_HEADER, ["Z1", "2026-01-05", "1:00:00", "£999"]],
        ),
        SheetData(sheet_name="Empty Tab", rows=[PAYSLIP_HEADER]),
        SheetData(sheet_name="Broken Tab", rows=[]),
    ]


def test_utility_and_empty_sheets_are_skipped() -> None:
    sheets = _payroll_sheets()

    assert [is_payroll_sheet(sheet) for sheet in sheets] == [
        True,
        True,
        False,
        False,
        False,
        False,
    ]

    payroll = aggregate_payroll(sheets, [], PERIOD)
    assert [eng.name for eng in payroll.engineers] == ["Ali Harry Khan", "John Smith"]
    assert payroll.total_jobs == 6


def test_payroll_totals_roll_up_engineers() -> None:
    payroll = aggregate_payroll(_payroll_sheets(), [], PERIOD)

    assert payroll.total_cost == pytest.approx(405.0)
    assert payroll.total_overtime == pytest.approx(30.0)
    assert payroll.total_hours == pytest.approx(9.0)
    john = next(eng for eng in payroll.engineers if eng.name == "John Smith")
    assert john.average_cost_per_job == pytest.approx(26.25)
    assert john.total_hours == pytest.approx(5.0)


def test_recent_jobs_are_in_period_and_most_recent_first() -> None:
    payroll = aggregate_payroll(_payroll_sheets(), [], PERIOD)

    for engineer in payroll.engineers:
        job_ids = {job.job_id for job in engineer.jobs}
        assert {job.job_id for job in engineer.recent_jobs} <= job_ids

    john = next(eng for eng in payroll.engineers if eng.name == "John Smith")
    assert [job.job_id for job in john.recent_jobs] == ["J2", "J1"]
    ali = next(eng for eng in payroll.engineers if eng.name == "Ali Harry Khan")
    assert [job.job_id for job in ali.recent_jobs] == ["K2", "K1"]


def test_jobs_keep_their_sheet_row_numbers() -> None:
    jobs = parse_jobs(_payroll_sheets()[0])

    assert [(job.job_id, job.row_index) for job in jobs] == [
        ("J1", 2),
        ("J2", 3),
        ("J3", 4),
        ("J4", 5),
    ]


def test_by_date_groups_on_date_portion_sorted_ascending() -> None:
    jobs = [job for sheet in _payroll_sheets()[:2] for job in parse_jobs(sheet)]

    by_date = aggregate_by_date(jobs)

    assert [(row.date, row.jobs) for row in by_date] == [
        ("2025-11-01", 1),
        ("30/12/2025", 1),
        ("2026-01-05", 2),
        ("2026-01-12", 1),
        ("not", 1),
    ]
    assert by_date[2].cost == pytest.approx(150.0)


def test_aggregation_is_idempotent() -> None:
    tickets = parse_tickets(
        [TICKET_HEADER, ["AB12 CDE", "£65.00", "", "harry", "£25.00", "", "REF1"]]
    )

    first = aggregate_payroll(_payroll_sheets(), tickets, PERIOD)
    second = aggregate_payroll(_payroll_sheets(), tickets, PERIOD)
    invoices_first = aggregate_invoices(parse_invoices(_invoice_sheets()))
    invoices_second = aggregate_invoices(parse_invoices(_invoice_sheets()))

    assert first.model_dump_json() == second.model_dump_json()
    assert invoices_first.model_dump_json() == invoices_second.model_dump_json()
