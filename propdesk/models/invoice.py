from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from ..extensions import db
from .base import iso, money, new_id, utcnow

INVOICE_STATUSES = ("draft", "sent", "paid", "overdue")
PENDING_STATUSES = ("draft", "sent", "overdue")

CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Lenient Decimal conversion; anything unparseable or non-finite counts as zero."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def is_finite_number(value) -> bool:
    """True when value parses as a finite number (NaN and Infinity do not)."""
    if isinstance(value, bool):
        return False
    try:
        return Decimal(str(value)).is_finite()
    except (InvalidOperation, ValueError):
        return False


def normalize_line_item(item: dict) -> dict:
    """Return a line item dict whose total is quantity * unit_price."""
    quantity = to_decimal(item.get("quantity", 1))
    unit_price = to_decimal(item.get("unit_price"))
    total = (quantity * unit_price).quantize(CENTS, rounding=ROUND_HALF_UP)
    return {
        "description": (item.get("description") or "").strip(),
        "quantity": float(quantity),
        "unit_price": float(unit_price),
        "total": float(total),
    }


class Invoice(db.Model):
    __tablename__ = 'invoices'

    id = db.Column(db.String(64), primary_key=True, default=new_id)
    invoice_number = db.Column(db.String(64), nullable=True, index=True)

    # Weak references, no foreign keys
    property_id = db.Column(db.String(64), nullable=True, index=True)
    provider_id = db.Column(db.String(64), nullable=True, index=True)

    description = db.Column(db.String(512), nullable=True)
    issue_date = db.Column(db.Date, nullable=True, index=True)
    due_date = db.Column(db.Date, nullable=True)
    paid_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), default='draft', index=True)  # draft, sent, paid, overdue

    # Ordered list of {description, quantity, unit_price, total}
    line_items = db.Column(db.JSON, nullable=True)
    subtotal = db.Column(db.Numeric(12, 2), default=0)
    tax = db.Column(db.Numeric(12, 2), default=0)
    total = db.Column(db.Numeric(12, 2), default=0)
    currency = db.Column(db.String(3), default='USD')

    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<Invoice {self.id}: {self.invoice_number} {self.total} - {self.status}>'

    def recalculate(self):
        """Normalize line items and derive subtotal and total from them."""
        items = [normalize_line_item(item) for item in (self.line_items or [])]
        self.line_items = items
        subtotal = sum((to_decimal(item["total"]) for item in items), Decimal("0"))
        self.subtotal = subtotal.quantize(CENTS)
        self.tax = to_decimal(self.tax).quantize(CENTS)
        self.total = (self.subtotal + self.tax).quantize(CENTS)
        return self

    def serialize(self):
        return {
            'id': self.id,
            'invoice_number': self.invoice_number,
            'property_id': self.property_id,
            'provider_id': self.provider_id,
            'description': self.description,
            'issue_date': iso(self.issue_date),
            'due_date': iso(self.due_date),
            'paid_date': iso(self.paid_date),
            'status': self.status,
            'line_items': list(self.line_items or []),
            'subtotal': money(self.subtotal),
            'tax': money(self.tax),
            'total': money(self.total),
            'currency': self.currency or 'USD',
            'notes': self.notes,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
