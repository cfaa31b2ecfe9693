"""
Financial aggregation over already-fetched invoices.

Every function here is pure: it takes invoices (model instances or plain
dicts exposing ``total``, ``status``, ``issue_date``, ``due_date``,
``property_id`` and ``provider_id``) and returns derived dataclasses. Missing
or malformed fields count as zero or are skipped; nothing raises on empty
input. Money is summed as Decimal, percentages are rounded to one decimal.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from ..models.invoice import CENTS, to_decimal
from .expenses import PERIOD, PROPERTY, PROVIDER, SUMMARY, ExpenseModel, FixedRatioExpenseModel
from .periods import format_period_label, iter_periods, period_key

UNKNOWN_NAME = "N/A"
ZERO = Decimal("0")
TENTH = Decimal("0.1")
ESTIMATED_FIELDS = ("expenses", "profit", "margin_pct")


def _field(record, name, default=None):
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _as_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _pct(part: Decimal, whole: Decimal) -> float:
    if not whole:
        return 0.0
    return float((part / whole * 100).quantize(TENTH, rounding=ROUND_HALF_UP))


def _share_pct(part: Decimal, whole: Decimal) -> float:
    """_pct held to [0, 100]."""
    return min(max(_pct(part, whole), 0.0), 100.0)


def _money(value: Decimal) -> float:
    return float(to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


class _Totals:
    """Running sums for one group of invoices."""

    def __init__(self):
        self.revenue = ZERO
        self.paid_amount = ZERO
        self.overdue_amount = ZERO
        self.pending_amount = ZERO
        self.total_invoices = 0
        self.paid_invoices = 0
        self.overdue_invoices = 0

    def add(self, invoice) -> None:
        amount = to_decimal(_field(invoice, "total"))
        status = _field(invoice, "status")
        self.revenue += amount
        self.total_invoices += 1
        if status == "paid":
            self.paid_amount += amount
            self.paid_invoices += 1
        if status == "overdue":
            self.overdue_amount += amount
            self.overdue_invoices += 1
        if status in ("draft", "sent"):
            self.pending_amount += amount

    def metrics(self, expense_model: ExpenseModel, scope: str, key=None) -> dict:
        expenses = expense_model.expenses_for(self.revenue, scope, key)
        profit = self.revenue - expenses
        breakdown = expense_model.breakdown_for(self.revenue, scope, key)
        return {
            "revenue": _money(self.revenue),
            "expenses": _money(expenses),
            "profit": _money(profit),
            "margin_pct": _pct(profit, self.revenue),
            "invoices_paid_pct": _share_pct(self.paid_amount, self.revenue),
            "total_invoices": self.total_invoices,
            "paid_invoices": self.paid_invoices,
            "overdue_invoices": self.overdue_invoices,
            "paid_amount": _money(self.paid_amount),
            "overdue_amount": _money(self.overdue_amount),
            "pending_amount": _money(self.pending_amount),
            "expenses_estimated": expense_model.estimated,
            "estimated_fields": list(ESTIMATED_FIELDS) if expense_model.estimated else [],
            "expense_breakdown": {k: _money(v) for k, v in breakdown.items()} if breakdown else None,
        }


@dataclass
class FinancialSummary:
    revenue: float = 0.0
    expenses: float = 0.0
    profit: float = 0.0
    margin_pct: float = 0.0
    invoices_paid_pct: float = 0.0
    total_invoices: int = 0
    paid_invoices: int = 0
    overdue_invoices: int = 0
    paid_amount: float = 0.0
    overdue_amount: float = 0.0
    pending_amount: float = 0.0
    expenses_estimated: bool = True
    estimated_fields: list = field(default_factory=list)
    expense_breakdown: Optional[dict] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PropertyFinancialData(FinancialSummary):
    property_id: Optional[str] = None
    property_name: str = UNKNOWN_NAME


@dataclass
class ProviderFinancialData(FinancialSummary):
    provider_id: Optional[str] = None
    provider_name: str = UNKNOWN_NAME


@dataclass
class TimeSeriesPoint:
    period: str
    label: str
    revenue: float = 0.0
    expenses: float = 0.0
    profit: float = 0.0
    invoice_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def _default_model(expense_model):
    return expense_model if expense_model is not None else FixedRatioExpenseModel()


def filter_invoices(
    invoices: Iterable,
    property_id: Optional[str] = None,
    provider_id: Optional[str] = None,
    status: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list:
    """Exact-match id/status filters plus an inclusive issue_date range."""
    result = []
    for invoice in invoices or ():
        if property_id and _field(invoice, "property_id") != property_id:
            continue
        if provider_id and _field(invoice, "provider_id") != provider_id:
            continue
        if status and _field(invoice, "status") != status:
            continue
        if date_from is not None or date_to is not None:
            issued = _as_date(_field(invoice, "issue_date"))
            if issued is None:
                continue
            if date_from is not None and issued < date_from:
                continue
            if date_to is not None and issued > date_to:
                continue
        result.append(invoice)
    return result


def compute_summary(invoices: Iterable, expense_model: Optional[ExpenseModel] = None) -> FinancialSummary:
    totals = _Totals()
    for invoice in invoices or ():
        totals.add(invoice)
    return FinancialSummary(**totals.metrics(_default_model(expense_model), SUMMARY))


def _names(records, name_of) -> dict:
    return {_field(r, "id"): name_of(r) for r in records or ()}


def _group(invoices, key_field: str) -> dict:
    groups: dict = {}
    for invoice in invoices or ():
        groups.setdefault(_field(invoice, key_field), _Totals()).add(invoice)
    return groups


def _by_revenue(rows: list, name_attr: str) -> list:
    return sorted(rows, key=lambda row: (-row.revenue, getattr(row, name_attr) or ""))


def compute_by_property(
    invoices: Iterable,
    properties: Iterable = (),
    expense_model: Optional[ExpenseModel] = None,
) -> list[PropertyFinancialData]:
    """
    One row per property that has at least one invoice, highest revenue first.

    Invoices pointing at an unknown property are still grouped under their id
    (named "N/A"), so per-property revenue always adds up to total revenue.
    """
    model = _default_model(expense_model)
    names = _names(properties, lambda p: _field(p, "name") or UNKNOWN_NAME)
    rows = [
        PropertyFinancialData(
            property_id=property_id,
            property_name=names.get(property_id, UNKNOWN_NAME),
            **totals.metrics(model, PROPERTY, property_id),
        )
        for property_id, totals in _group(invoices, "property_id").items()
    ]
    return _by_revenue(rows, "property_name")


def _provider_name(provider) -> str:
    return _field(provider, "business_name") or _field(provider, "name") or UNKNOWN_NAME


def compute_by_provider(
    invoices: Iterable,
    providers: Iterable = (),
    expense_model: Optional[ExpenseModel] = None,
) -> list[ProviderFinancialData]:
    model = _default_model(expense_model)
    names = _names(providers, _provider_name)
    rows = [
        ProviderFinancialData(
            provider_id=provider_id,
            provider_name=names.get(provider_id, UNKNOWN_NAME),
            **totals.metrics(model, PROVIDER, provider_id),
        )
        for provider_id, totals in _group(invoices, "provider_id").items()
    ]
    return _by_revenue(rows, "provider_name")


def compute_time_series(
    invoices: Iterable,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    granularity="MONTH",
    expense_model: Optional[ExpenseModel] = None,
) -> list[TimeSeriesPoint]:
    """
    Revenue, expenses and profit per period, zero-filled and in order.

    Buckets run from the period holding ``date_from`` to the one holding
    ``date_to``. A missing bound is taken from the earliest or latest dated
    invoice; with no bounds and no dated invoices the series is empty.
    """
    model = _default_model(expense_model)
    invoices = list(invoices or ())
    dated = []
    for invoice in invoices:
        issued = _as_date(_field(invoice, "issue_date"))
        if issued is not None:
            dated.append((issued, invoice))
    if date_from is None and date_to is None and not dated:
        return []
    issue_dates = [d for d, _ in dated]
    if date_from is None:
        date_from = min(issue_dates) if issue_dates else date_to
    if date_to is None:
        date_to = max(issue_dates) if issue_dates else date_from
    if date_from > date_to:
        date_from, date_to = date_to, date_from

    buckets = {key: _Totals() for key in iter_periods(date_from, date_to, granularity)}
    for issued, invoice in dated:
        if date_from <= issued <= date_to:
            buckets[period_key(issued, granularity)].add(invoice)

    points = []
    for key, totals in buckets.items():
        expenses = model.expenses_for(totals.revenue, PERIOD, key)
        points.append(TimeSeriesPoint(
            period=key,
            label=format_period_label(key),
            revenue=_money(totals.revenue),
            expenses=_money(expenses),
            profit=_money(totals.revenue - expenses),
            invoice_count=totals.total_invoices,
        ))
    return points


def compute_invoice_stats(invoices: Iterable) -> dict:
    """Counts and amounts per invoice status."""
    stats = {"total_invoices": 0, "total_amount": ZERO}
    for status in ("paid", "overdue", "sent", "draft"):
        stats[f"{status}_count"] = 0
        stats[f"{status}_amount"] = ZERO
    for invoice in invoices or ():
        amount = to_decimal(_field(invoice, "total"))
        status = _field(invoice, "status")
        stats["total_invoices"] += 1
        stats["total_amount"] += amount
        if f"{status}_count" in stats:
            stats[f"{status}_count"] += 1
            stats[f"{status}_amount"] += amount
    return {k: _money(v) if isinstance(v, Decimal) else v for k, v in stats.items()}


def compute_property_stats(properties: Iterable) -> dict:
    stats = {"total": 0, "active": 0, "inactive": 0, "maintenance": 0, "by_type": {}}
    for prop in properties or ():
        stats["total"] += 1
        status = _field(prop, "status")
        if status in ("active", "inactive", "maintenance"):
            stats[status] += 1
        kind = _field(prop, "property_type") or "Unknown"
        stats["by_type"][kind] = stats["by_type"].get(kind, 0) + 1
    return stats
