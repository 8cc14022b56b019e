"""Operations dashboard: invoice, payroll and fines summaries from Google Sheets."""

__version__ = "0.1.0"
