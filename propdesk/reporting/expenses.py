"""
Expense models.

Invoices only record revenue, so expenses either come from an estimate
(a fixed share of revenue) or from an external ledger. Every model reports
whether its figures are estimated so reports can flag them.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Callable, Mapping, Optional

from ..models.invoice import CENTS, to_decimal

SUMMARY = "summary"
PROPERTY = "property"
PROVIDER = "provider"
PERIOD = "period"


class ExpenseModel(ABC):
    estimated = True

    @abstractmethod
    def expenses_for(self, revenue: Decimal, scope: str, key=None) -> Decimal: ...

    def breakdown_for(self, revenue: Decimal, scope: str, key=None) -> Optional[dict]:
        return None


class FixedRatioExpenseModel(ExpenseModel):
    """Expenses as a fixed share of revenue, optionally split into named parts."""

    estimated = True

    def __init__(self, ratio=0.30, breakdown: Optional[Mapping[str, float]] = None):
        self.breakdown = {name: to_decimal(share) for name, share in (breakdown or {}).items()}
        if self.breakdown:
            self.ratio = sum(self.breakdown.values(), Decimal("0"))
        else:
            self.ratio = to_decimal(ratio)
        if self.ratio < 0 or self.ratio > 1:
            raise ValueError(f"Expense ratio must be between 0 and 1, got {self.ratio}")

    def __repr__(self):
        return f"<FixedRatioExpenseModel ratio={self.ratio}>"

    def expenses_for(self, revenue, scope, key=None):
        return (to_decimal(revenue) * self.ratio).quantize(CENTS)

    def breakdown_for(self, revenue, scope, key=None):
        if not self.breakdown:
            return None
        revenue = to_decimal(revenue)
        return {name: (revenue * share).quantize(CENTS) for name, share in self.breakdown.items()}


class LedgerExpenseModel(ExpenseModel):
    """
    Measured expenses supplied by ``lookup(scope, key)``.

    ``scope`` is one of ``summary``, ``property``, ``provider`` or ``period``
    and ``key`` is the property id, provider id or period key (None for the
    summary). A lookup returning None counts as zero.
    """

    estimated = False

    def __init__(self, lookup: Callable[[str, object], object]):
        self.lookup = lookup

    def expenses_for(self, revenue, scope, key=None):
        return to_decimal(self.lookup(scope, key)).quantize(CENTS)


def build_expense_model(config: Mapping) -> ExpenseModel:
    """Expense model selected by EXPENSE_MODEL (``fixed`` or ``breakdown``)."""
    kind = (config.get("EXPENSE_MODEL") or "fixed").lower()
    if kind == "fixed":
        return FixedRatioExpenseModel(config.get("EXPENSE_RATIO", 0.30))
    if kind == "breakdown":
        return FixedRatioExpenseModel(breakdown=config.get("EXPENSE_BREAKDOWN"))
    raise ValueError(f"Unknown EXPENSE_MODEL: {kind}")
