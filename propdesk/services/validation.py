"""
Entity validation.

Each ``validate_*`` function returns a list of human-readable problems (empty
when the payload is valid). ``ensure_valid`` turns a non-empty list into a
ValidationError so callers can fail before touching the store.
"""
import re
from collections import Counter
from datetime import date

from ..errors import ValidationError
from ..identity.base import EMAIL_RE, MIN_PASSWORD_LENGTH
from ..models.invoice import INVOICE_STATUSES, is_finite_number, to_decimal
from ..models.property import PROPERTY_STATUSES
from ..models.service_provider import PROVIDER_STATUSES

PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")
PROPERTY_TYPES = ("residential", "commercial", "mixed")

SIGNUP_REQUIRED = (
    ("first_name", "First name"),
    ("last_name", "Last name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("business_name", "Business name"),
    ("service", "Service"),
    ("city", "City"),
    ("state", "State"),
)


def clean_text(value, max_length: int = 255) -> str:
    """Strip markup characters and trim to max_length."""
    if not isinstance(value, str):
        return ""
    value = re.sub(r"[<>\"']", "", value)
    return value.strip()[:max_length]


def is_valid_email(email) -> bool:
    return bool(email) and bool(EMAIL_RE.match(str(email)))


def is_valid_phone(phone) -> bool:
    if not phone:
        return False
    return bool(PHONE_RE.match(re.sub(r"[\s\-()]", "", str(phone))))


def ensure_valid(errors) -> None:
    if errors:
        raise ValidationError(errors)


def parse_iso_date(value, label: str, errors: list):
    """Parse YYYY-MM-DD (or pass a date through); record a problem otherwise."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        errors.append(f"{label} must be a date in YYYY-MM-DD format")
        return None


def validate_signup(data: dict) -> list:
    """Synchronous signup checks; no side effects."""
    data = data or {}
    errors = []
    missing = [label for key, label in SIGNUP_REQUIRED if not str(data.get(key) or "").strip()]
    if missing:
        errors.append(f"Please fill in all required fields: {', '.join(missing)}")
    password = data.get("password") or ""
    if password != (data.get("confirm_password") or ""):
        errors.append("Passwords do not match")
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if data.get("email") and not is_valid_email(str(data["email"]).strip()):
        errors.append("Please enter a valid email address")
    return errors


def validate_property(data: dict, partial: bool = False) -> list:
    data = data or {}
    errors = []
    if not partial or "name" in data:
        if not str(data.get("name") or "").strip():
            errors.append("Property name is required")
    if not partial or "address" in data:
        if not str(data.get("address") or "").strip():
            errors.append("Property address is required")
    if data.get("property_type") and data["property_type"] not in PROPERTY_TYPES:
        errors.append(f"Property type must be one of: {', '.join(PROPERTY_TYPES)}")
    if data.get("status") and data["status"] not in PROPERTY_STATUSES:
        errors.append(f"Property status must be one of: {', '.join(PROPERTY_STATUSES)}")
    financial = data.get("financial_info") or {}
    if not isinstance(financial, dict):
        errors.append("financial_info must be an object")
    else:
        for key, label in (
            ("purchase_price", "Purchase price"),
            ("current_value", "Current value"),
            ("monthly_rent", "Monthly rent"),
        ):
            value = financial.get(key)
            if value is None:
                continue
            if not is_finite_number(value):
                errors.append(f"{label} must be a number")
            elif to_decimal(value) < 0:
                errors.append(f"{label} cannot be negative")
    return errors


def validate_provider(data: dict, partial: bool = False) -> list:
    data = data or {}
    errors = []
    for key, label in (("name", "Provider name"), ("service", "Provider service")):
        if (not partial or key in data) and not str(data.get(key) or "").strip():
            errors.append(f"{label} is required")
    if data.get("email") and not is_valid_email(data["email"]):
        errors.append("Invalid email format")
    if data.get("phone") and not is_valid_phone(data["phone"]):
        errors.append("Invalid phone format")
    if data.get("status") and data["status"] not in PROVIDER_STATUSES:
        errors.append(f"Provider status must be one of: {', '.join(PROVIDER_STATUSES)}")
    if data.get("rating") is not None:
        rating = to_decimal(data["rating"])
        if not is_finite_number(data["rating"]) or rating < 0 or rating > 5:
            errors.append("Rating must be between 0 and 5")
    if data.get("property_ids") is not None and not isinstance(data["property_ids"], list):
        errors.append("property_ids must be a list")
    return errors


def validate_invoice(data: dict, partial: bool = False) -> list:
    data = data or {}
    errors = []
    for key, label in (
        ("property_id", "Property ID"),
        ("provider_id", "Provider ID"),
        ("issue_date", "Issue date"),
        ("due_date", "Due date"),
    ):
        if (not partial or key in data) and not data.get(key):
            errors.append(f"{label} is required")
    if data.get("status") and data["status"] not in INVOICE_STATUSES:
        errors.append(f"Invoice status must be one of: {', '.join(INVOICE_STATUSES)}")
    if data.get("tax") is not None:
        if not is_finite_number(data["tax"]):
            errors.append("Tax must be a number")
        elif to_decimal(data["tax"]) < 0:
            errors.append("Tax cannot be negative")

    issued = parse_iso_date(data.get("issue_date"), "Issue date", errors)
    due = parse_iso_date(data.get("due_date"), "Due date", errors)
    if issued and due and issued > due:
        errors.append("Issue date cannot be after due date")

    items = data.get("line_items")
    if items is not None and not isinstance(items, list):
        errors.append("line_items must be a list")
        items = []
    for index, item in enumerate(items or [], start=1):
        if not isinstance(item, dict):
            errors.append(f"Line item {index}: must be an object")
            continue
        if not str(item.get("description") or "").strip():
            errors.append(f"Line item {index}: description is required")
        quantity = item.get("quantity", 1)
        if not is_finite_number(quantity):
            errors.append(f"Line item {index}: quantity must be a number")
        elif to_decimal(quantity) <= 0:
            errors.append(f"Line item {index}: quantity must be greater than 0")
        unit_price = item.get("unit_price")
        if unit_price is not None and not is_finite_number(unit_price):
            errors.append(f"Line item {index}: unit price must be a number")
        elif to_decimal(unit_price) < 0:
            errors.append(f"Line item {index}: unit price cannot be negative")
    return errors


def validate_relationships(properties, providers, invoices) -> list:
    """Dangling property/provider references across the three collections."""
    errors = []
    property_ids = {p.id for p in properties}
    provider_ids = {p.id for p in providers}
    for invoice in invoices:
        if invoice.property_id not in property_ids:
            errors.append(f"Invoice {invoice.invoice_number}: Property ID {invoice.property_id} not found")
        if invoice.provider_id not in provider_ids:
            errors.append(f"Invoice {invoice.invoice_number}: Provider ID {invoice.provider_id} not found")
    for provider in providers:
        for property_id in provider.property_ids or []:
            if property_id not in property_ids:
                errors.append(f"Provider {provider.name}: Property ID {property_id} not found")
    return errors


def check_duplicate_invoice_numbers(invoices) -> list:
    counts = Counter(inv.invoice_number for inv in invoices if inv.invoice_number)
    return sorted(number for number, count in counts.items() if count > 1)
