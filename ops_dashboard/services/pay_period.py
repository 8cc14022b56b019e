"""Two-week pay period window used to pick each engineer's recent jobs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ops_dashboard.services.parsers import parse_sheet_date

PAY_PERIOD_LENGTH = timedelta(days=14)


@dataclass(frozen=True, slots=True)
class PayPeriod:
    """Inclusive window from ``start`` to ``end``; both are Mondays."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def week_start(day: date) -> date:
    """Return the Monday (ISO week start) on or before ``day``."""
    return day - timedelta(days=day.weekday())


def current_pay_period(today: date | datetime) -> PayPeriod:
    """The two weeks ending at the most recent Monday 00:00."""
    if isinstance(today, datetime):
        today = today.date()
    end = week_start(today)
    return PayPeriod(start=end - PAY_PERIOD_LENGTH, end=end)


def is_within_pay_period(date_str: str, period: PayPeriod) -> bool:
    parsed = parse_sheet_date(date_str)
    if parsed is None:
        return False
    return period.contains(parsed)


__all__ = [
    "PAY_PERIOD_LENGTH",
    "PayPeriod",
    "current_pay_period",
    "is_within_pay_period",
    "week_start",
]
