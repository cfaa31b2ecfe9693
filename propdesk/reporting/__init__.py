from .aggregation import (
    FinancialSummary,
    PropertyFinancialData,
    ProviderFinancialData,
    TimeSeriesPoint,
    compute_by_property,
    compute_by_provider,
    compute_invoice_stats,
    compute_property_stats,
    compute_summary,
    compute_time_series,
    filter_invoices,
)
from .expenses import ExpenseModel, FixedRatioExpenseModel, LedgerExpenseModel, build_expense_model
from .periods import PeriodGranularity, ReportRange, default_range, parse_date_bound, period_key

__all__ = [
    "ExpenseModel",
    "FinancialSummary",
    "FixedRatioExpenseModel",
    "LedgerExpenseModel",
    "PeriodGranularity",
    "PropertyFinancialData",
    "ProviderFinancialData",
    "ReportRange",
    "TimeSeriesPoint",
    "build_expense_model",
    "compute_by_property",
    "compute_by_provider",
    "compute_invoice_stats",
    "compute_property_stats",
    "compute_summary",
    "compute_time_series",
    "default_range",
    "filter_invoices",
    "parse_date_bound",
    "period_key",
]
