"""Display helpers shared by the dashboard, invoice detail and report views."""
from datetime import date, datetime, timezone

from dateutil import parser as date_parser

from ..models.base import utcnow
from ..models.invoice import to_decimal
from .periods import format_period_label

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "CAD": "CA$", "AUD": "A$"}

STATUS_STYLES = {
    "paid": "success",
    "sent": "info",
    "overdue": "danger",
    "draft": "muted",
}


def format_currency(amount, currency: str = "USD") -> str:
    value = to_decimal(amount).quantize(to_decimal("0.01"))
    sign = "-" if value < 0 else ""
    symbol = CURRENCY_SYMBOLS.get((currency or "USD").upper())
    body = f"{abs(value):,.2f}"
    if symbol is None:
        return f"{sign}{currency.upper()} {body}"
    return f"{sign}{symbol}{body}"


def format_percentage(value, signed: bool = False) -> str:
    value = float(value or 0)
    prefix = "+" if signed and value > 0 else ""
    return f"{prefix}{value:.1f}%"


def format_date(value) -> str:
    """'March 5, 2024'; empty string for missing dates."""
    if not value:
        return ""
    if isinstance(value, str):
        value = date_parser.isoparse(value)
    return f"{value:%B} {value.day}, {value.year}"


def status_style(status: str) -> str:
    return STATUS_STYLES.get(status, "muted")


def time_ago(timestamp, now=None) -> str:
    if not timestamp:
        return "Unknown"
    try:
        if isinstance(timestamp, str):
            timestamp = date_parser.isoparse(timestamp)
    except (ValueError, OverflowError):
        return "Unknown"
    if isinstance(timestamp, date) and not isinstance(timestamp, datetime):
        timestamp = datetime(timestamp.year, timestamp.month, timestamp.day)
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc).replace(tzinfo=None)
    now = now or utcnow()
    seconds = int((now - timestamp).total_seconds())
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60} minutes ago"
    if seconds < 86400:
        return f"{seconds // 3600} hours ago"
    if seconds < 2592000:
        return f"{seconds // 86400} days ago"
    if seconds < 31536000:
        return f"{seconds // 2592000} months ago"
    return f"{seconds // 31536000} years ago"


__all__ = [
    "format_currency",
    "format_date",
    "format_percentage",
    "format_period_label",
    "status_style",
    "time_ago",
]
