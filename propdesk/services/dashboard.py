"""
Dashboard KPIs.

Each tile is computed from a fresh read of the store. Calls run one after the
other and any store failure surfaces as StoreError rather than a zeroed tile.
"""
import logging
from datetime import date

from ..models.invoice import PENDING_STATUSES
from ..reporting.aggregation import compute_by_property, compute_by_provider, compute_summary
from ..reporting.formatting import time_ago
from ..reporting.periods import PeriodGranularity, period_end, period_key, period_start
from ..store import INVOICES

logger = logging.getLogger(__name__)

TOP_LIMIT = 5
ACTIVITY_LIMIT = 4


class DashboardService:
    def __init__(self, store, expense_model):
        self.store = store
        self.expense_model = expense_model

    def stats(self, today=None) -> dict:
        today = today or date.today()
        providers = self.store.list_providers()
        properties = self.store.list_properties()
        invoices = self.store.list(INVOICES)

        month = period_key(today, PeriodGranularity.MONTH)
        month_invoices = self.store.list_invoices(date_from=period_start(month), date_to=period_end(month))
        month_summary = compute_summary(month_invoices, self.expense_model)
        pending = [inv for inv in invoices if inv.status in PENDING_STATUSES]
        overdue = [inv for inv in invoices if inv.status == "overdue"]

        return {
            "total_providers": len(providers),
            "active_providers": sum(1 for p in providers if p.status == "active"),
            "pending_providers": sum(1 for p in providers if p.status == "pending"),
            "total_properties": len(properties),
            "active_properties": sum(1 for p in properties if p.status == "active"),
            "month": month,
            "monthly_revenue": month_summary.revenue,
            "monthly_profit": month_summary.profit,
            "expenses_estimated": month_summary.expenses_estimated,
            "pending_invoices": len(pending),
            "pending_amount": compute_summary(pending, self.expense_model).revenue,
            "upcoming_services": 0,
            "alerts": len(overdue),
        }

    def top_providers(self, limit=TOP_LIMIT, now=None) -> list:
        providers = self.store.list_providers(status="active")
        providers.sort(key=lambda p: (-(p.rating or 0), (p.display_name or "").lower()))
        providers = providers[:limit]
        financials = {
            row.provider_id: row
            for row in compute_by_provider(self.store.list(INVOICES), providers, self.expense_model)
        }
        result = []
        for provider in providers:
            row = financials.get(provider.id)
            result.append({
                "id": provider.id,
                "name": provider.name or "Unknown",
                "business_name": provider.display_name or "Unknown",
                "service": provider.service or "Unknown Service",
                "status": provider.status,
                "rating": float(provider.rating or 0),
                "last_active": time_ago(provider.last_active or provider.created_at, now),
                "revenue": row.revenue if row else 0.0,
                "profit": row.profit if row else 0.0,
            })
        return result

    def top_properties(self, limit=TOP_LIMIT, now=None) -> list:
        properties = self.store.list_properties(status="active")[:limit]
        financials = {
            row.property_id: row
            for row in compute_by_property(self.store.list(INVOICES), properties, self.expense_model)
        }
        return [
            {
                "id": prop.id,
                "name": prop.name or "Unknown Property",
                "address": prop.address or "Address not available",
                "status": prop.status,
                "monthly_rent": prop.monthly_rent,
                "revenue": financials[prop.id].revenue if prop.id in financials else 0.0,
                "last_updated": time_ago(prop.updated_at or prop.created_at, now),
            }
            for prop in properties
        ]

    def recent_activity(self, limit=ACTIVITY_LIMIT, now=None) -> list:
        events = []
        for provider in self.store.list_providers()[:limit]:
            events.append((provider.created_at, {
                "id": provider.id,
                "type": "provider",
                "title": f"New service provider registered: {provider.display_name}",
                "status": "new",
            }))
        for invoice in self.store.list(INVOICES)[:limit]:
            events.append((invoice.updated_at or invoice.created_at, {
                "id": invoice.id,
                "type": "invoice",
                "title": f"Invoice {invoice.invoice_number or invoice.id} is {invoice.status}",
                "status": "completed" if invoice.status == "paid" else invoice.status,
            }))
        events.sort(key=lambda e: (e[0] is not None, e[0] or 0), reverse=True)
        activity = []
        for when, event in events[:limit]:
            event["time"] = time_ago(when, now)
            activity.append(event)
        return activity
