import logging

from ..errors import NotFoundError
from ..models import ServiceProvider
from ..models.base import utcnow
from ..models.service_provider import PROVIDER_STATUSES, default_availability
from ..store import SERVICE_PROVIDERS
from .validation import clean_text, ensure_valid, validate_provider

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name", "business_name", "email", "phone", "service", "service_categories",
    "service_areas", "availability", "status", "rating", "property_ids",
    "business_address", "compliance_status", "tags", "notes",
)


def _matches(provider, term: str) -> bool:
    texts = [provider.name, provider.business_name, provider.service, provider.email]
    texts.extend(provider.service_categories or [])
    return any(term in (text or "").lower() for text in texts)


def _columns(data: dict) -> dict:
    fields = {key: data[key] for key in EDITABLE_FIELDS if key in data}
    for key in ("name", "business_name", "service"):
        if key in fields:
            fields[key] = clean_text(fields[key])
    if fields.get("email"):
        fields["email"] = fields["email"].strip().lower()
    return fields


class ProviderService:
    def __init__(self, store):
        self.store = store

    def list_providers(self, status=None, service=None, category=None, min_rating=None, search=None):
        filters = {}
        if status:
            filters["status"] = status
        if service:
            filters["service"] = service
        providers = self.store.list_providers(**filters)
        if category:
            providers = [p for p in providers if category in (p.service_categories or [])]
        if min_rating is not None:
            providers = [p for p in providers if (p.rating or 0) >= min_rating]
        if search:
            term = search.strip().lower()
            providers = [p for p in providers if _matches(p, term)]
        return sorted(providers, key=lambda p: (p.name or "").lower())

    def get(self, provider_id):
        provider = self.store.get(SERVICE_PROVIDERS, provider_id)
        if provider is None:
            raise NotFoundError("Service provider not found")
        return provider

    def create(self, data: dict, created_by=None):
        ensure_valid(validate_provider(data))
        fields = _columns(data)
        fields.setdefault("status", "pending")
        fields.setdefault("service_categories", [fields["service"]])
        fields.setdefault("availability", default_availability())
        fields.setdefault("property_ids", [])
        provider = self.store.add(SERVICE_PROVIDERS, ServiceProvider(created_by=created_by, **fields))
        logger.info("Created service provider %s", provider.id)
        return provider

    def update(self, provider_id, data: dict):
        ensure_valid(validate_provider(data, partial=True))
        fields = _columns(data)
        fields["last_active"] = utcnow()
        provider = self.store.update(SERVICE_PROVIDERS, provider_id, **fields)
        if provider is None:
            raise NotFoundError("Service provider not found")
        return provider

    def delete(self, provider_id) -> None:
        if not self.store.delete(SERVICE_PROVIDERS, provider_id):
            raise NotFoundError("Service provider not found")
        logger.info("Deleted service provider %s", provider_id)

    def stats(self) -> dict:
        stats = {"total": 0}
        stats.update({status: 0 for status in PROVIDER_STATUSES})
        for provider in self.store.list_providers():
            stats["total"] += 1
            if provider.status in stats:
                stats[provider.status] += 1
        return stats
