import logging

from ..reporting.aggregation import (
    compute_by_property,
    compute_by_provider,
    compute_summary,
    compute_time_series,
    filter_invoices,
)
from ..reporting.export import all_reports_filename, by_property_csv, financial_report_filename
from ..reporting.formatting import format_currency, format_percentage
from ..reporting.periods import PeriodGranularity, ReportRange
from .validation import check_duplicate_invoice_numbers, validate_relationships

logger = logging.getLogger(__name__)


class ReportService:
    """Financial reports for a resolved date range; recomputed on every call."""

    def __init__(self, store, expense_model, currency="USD"):
        self.store = store
        self.expense_model = expense_model
        self.currency = currency

    def _invoices(self, report_range: ReportRange, property_id=None, provider_id=None, status=None):
        invoices = self.store.list_invoices(
            property_id=property_id,
            date_from=report_range.date_from,
            date_to=report_range.date_to,
        )
        return filter_invoices(
            invoices,
            property_id=property_id,
            provider_id=provider_id,
            status=status,
            date_from=report_range.date_from,
            date_to=report_range.date_to,
        )

    def financial_report(self, report_range: ReportRange, property_id=None, provider_id=None, status=None) -> dict:
        invoices = self._invoices(report_range, property_id, provider_id, status)
        properties = self.store.list_properties()
        summary = compute_summary(invoices, self.expense_model)
        by_property = compute_by_property(invoices, properties, self.expense_model)
        series = compute_time_series(
            invoices,
            report_range.date_from,
            report_range.date_to,
            report_range.granularity,
            self.expense_model,
        )
        logger.debug("Financial report %s: %d invoices", report_range.to_dict(), len(invoices))
        return {
            "range": report_range.to_dict(),
            "filters": {"property_id": property_id, "provider_id": provider_id, "status": status},
            "currency": self.currency,
            "summary": summary.to_dict(),
            "display": {
                "revenue": format_currency(summary.revenue, self.currency),
                "expenses": format_currency(summary.expenses, self.currency),
                "profit": format_currency(summary.profit, self.currency),
                "margin_pct": format_percentage(summary.margin_pct),
                "invoices_paid_pct": format_percentage(summary.invoices_paid_pct),
            },
            "by_property": [row.to_dict() for row in by_property],
            "series": [point.to_dict() for point in series],
            "granularity_ranges": {
                g.value: report_range.with_granularity(g).to_dict() for g in PeriodGranularity
            },
        }

    def provider_report(self, report_range: ReportRange, property_id=None, status=None) -> dict:
        invoices = self._invoices(report_range, property_id=property_id, status=status)
        providers = self.store.list_providers()
        rows = compute_by_provider(invoices, providers, self.expense_model)
        return {
            "range": report_range.to_dict(),
            "currency": self.currency,
            "by_provider": [row.to_dict() for row in rows],
        }

    def export_financial_csv(self, report_range: ReportRange, property_id=None, provider_id=None, status=None):
        """Return ``(filename, csv_text)`` for the by-property table."""
        invoices = self._invoices(report_range, property_id, provider_id, status)
        rows = compute_by_property(invoices, self.store.list_properties(), self.expense_model)
        filename = financial_report_filename(report_range.date_from, report_range.date_to)
        return filename, by_property_csv(rows)

    def export_all_reports_csv(self, report_range: ReportRange):
        invoices = self._invoices(report_range)
        rows = compute_by_property(invoices, self.store.list_properties(), self.expense_model)
        filename = all_reports_filename(report_range.granularity, report_range.date_from, report_range.date_to)
        return filename, by_property_csv(rows)

    def data_integrity(self) -> dict:
        """Dangling references and duplicate invoice numbers across the whole store."""
        invoices = self.store.list_invoices()
        errors = validate_relationships(self.store.list_properties(), self.store.list_providers(), invoices)
        duplicates = check_duplicate_invoice_numbers(invoices)
        if errors or duplicates:
            logger.warning("Data integrity: %d reference problems, %d duplicate invoice numbers",
                           len(errors), len(duplicates))
        return {
            "is_valid": not errors and not duplicates,
            "errors": errors,
            "has_duplicates": bool(duplicates),
            "duplicate_invoice_numbers": duplicates,
        }
