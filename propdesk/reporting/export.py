import csv
import io
from collections.abc import Mapping

CSV_HEADER = ("Property", "Revenue", "Profit", "Margin%", "Invoices Paid%")


def _value(row, name):
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def by_property_csv(rows) -> str:
    """One CSV line per property row, header first."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in rows or ():
        writer.writerow([
            _value(row, "property_name") or "N/A",
            f"{float(_value(row, 'revenue') or 0):.2f}",
            f"{float(_value(row, 'profit') or 0):.2f}",
            f"{float(_value(row, 'margin_pct') or 0):.1f}",
            f"{float(_value(row, 'invoices_paid_pct') or 0):.1f}",
        ])
    return output.getvalue()


def financial_report_filename(date_from, date_to) -> str:
    return f"financial-report-{date_from}-to-{date_to}.csv"


def all_reports_filename(granularity, date_from, date_to) -> str:
    granularity = getattr(granularity, "value", granularity)
    return f"all-reports-{str(granularity).lower()}-{date_from}-to-{date_to}.csv"
