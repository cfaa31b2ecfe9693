import logging
from datetime import date

from ..errors import NotFoundError, ValidationError
from ..models import Invoice
from ..models.invoice import INVOICE_STATUSES
from ..reporting.aggregation import compute_invoice_stats, filter_invoices
from ..reporting.formatting import format_currency, format_date, status_style
from ..store import INVOICES, PROPERTIES, SERVICE_PROVIDERS
from .validation import ensure_valid, parse_iso_date, validate_invoice

logger = logging.getLogger(__name__)


class InvoiceService:
    def __init__(self, store, currency="USD"):
        self.store = store
        self.currency = currency

    def list_invoices(self, property_id=None, provider_id=None, status=None, date_from=None, date_to=None):
        invoices = self.store.list_invoices(property_id=property_id, date_from=date_from, date_to=date_to)
        return filter_invoices(invoices, provider_id=provider_id, status=status)

    def get(self, invoice_id):
        invoice = self.store.get(INVOICES, invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        return invoice

    def next_invoice_number(self, issue_date: date) -> str:
        prefix = f"INV-{issue_date.year}-"
        taken = {
            inv.invoice_number for inv in self.store.list(INVOICES)
            if (inv.invoice_number or "").startswith(prefix)
        }
        n = len(taken) + 1
        while f"{prefix}{n:03d}" in taken:
            n += 1
        return f"{prefix}{n:03d}"

    def create(self, data: dict):
        ensure_valid(validate_invoice(data))
        errors = []
        issue_date = parse_iso_date(data.get("issue_date"), "Issue date", errors)
        due_date = parse_iso_date(data.get("due_date"), "Due date", errors)
        paid_date = parse_iso_date(data.get("paid_date"), "Paid date", errors)
        ensure_valid(errors)

        number = (data.get("invoice_number") or "").strip() or self.next_invoice_number(issue_date)
        if self.store.list(INVOICES, invoice_number=number):
            raise ValidationError(f"Invoice number {number} already exists")

        status = data.get("status") or "draft"
        if status == "paid" and paid_date is None:
            paid_date = date.today()
        invoice = Invoice(
            invoice_number=number,
            property_id=data["property_id"],
            provider_id=data["provider_id"],
            description=data.get("description"),
            issue_date=issue_date,
            due_date=due_date,
            paid_date=paid_date,
            status=status,
            line_items=data.get("line_items") or [],
            tax=data.get("tax") or 0,
            currency=(data.get("currency") or self.currency).upper(),
            notes=data.get("notes"),
        ).recalculate()
        self.store.add(INVOICES, invoice)
        logger.info("Created invoice %s (%s)", invoice.id, invoice.invoice_number)
        return invoice

    def set_status(self, invoice_id, status, paid_date=None):
        if status not in INVOICE_STATUSES:
            raise ValidationError(f"Invoice status must be one of: {', '.join(INVOICE_STATUSES)}")
        errors = []
        paid_date = parse_iso_date(paid_date, "Paid date", errors)
        ensure_valid(errors)
        fields = {"status": status}
        if status == "paid":
            fields["paid_date"] = paid_date or date.today()
        else:
            fields["paid_date"] = None
        invoice = self.store.update(INVOICES, invoice_id, **fields)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        logger.info("Invoice %s -> %s", invoice_id, status)
        return invoice

    def delete(self, invoice_id) -> None:
        if not self.store.delete(INVOICES, invoice_id):
            raise NotFoundError("Invoice not found")
        logger.info("Deleted invoice %s", invoice_id)

    def detail(self, invoice_id) -> dict:
        """Invoice plus resolved property/provider names and display strings."""
        invoice = self.get(invoice_id)
        prop = self.store.get(PROPERTIES, invoice.property_id) if invoice.property_id else None
        provider = self.store.get(SERVICE_PROVIDERS, invoice.provider_id) if invoice.provider_id else None
        currency = invoice.currency or self.currency

        data = invoice.serialize()
        data["property_name"] = prop.name if prop else "N/A"
        data["provider_name"] = provider.display_name if provider else "N/A"
        data["status_style"] = status_style(invoice.status)
        data["display"] = {
            "issue_date": format_date(invoice.issue_date),
            "due_date": format_date(invoice.due_date),
            "paid_date": format_date(invoice.paid_date),
            "subtotal": format_currency(invoice.subtotal, currency),
            "tax": format_currency(invoice.tax, currency),
            "total": format_currency(invoice.total, currency),
            "line_items": [
                {
                    "unit_price": format_currency(item.get("unit_price"), currency),
                    "total": format_currency(item.get("total"), currency),
                }
                for item in invoice.line_items or []
            ],
        }
        return data

    def stats(self) -> dict:
        return compute_invoice_stats(self.store.list(INVOICES))
