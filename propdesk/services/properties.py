import logging

from ..errors import NotFoundError
from ..models import Property
from ..reporting.aggregation import compute_property_stats
from ..store import PROPERTIES
from .validation import clean_text, ensure_valid, validate_property

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "address", "property_type", "description", "financial_info", "metadata", "status")


def _matches(prop, term: str) -> bool:
    haystack = (prop.name or "", prop.address or "", prop.description or "")
    return any(term in text.lower() for text in haystack)


def _columns(data: dict) -> dict:
    """Request payload -> model attributes."""
    fields = {}
    for key in EDITABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key in ("name", "address"):
            value = clean_text(value, 512)
        if key == "metadata":
            key = "details"
        fields[key] = value
    return fields


class PropertyService:
    def __init__(self, store):
        self.store = store

    def list_properties(self, status=None, property_type=None, search=None, limit=None):
        filters = {}
        if status:
            filters["status"] = status
        if property_type:
            filters["property_type"] = property_type
        properties = self.store.list_properties(**filters)
        if search:
            term = search.strip().lower()
            properties = [p for p in properties if _matches(p, term)]
        if limit:
            properties = properties[:limit]
        return properties

    def get(self, property_id):
        prop = self.store.get(PROPERTIES, property_id)
        if prop is None:
            raise NotFoundError("Property not found")
        return prop

    def create(self, data: dict, created_by=None):
        ensure_valid(validate_property(data))
        fields = _columns(data)
        fields.setdefault("status", "active")
        fields.setdefault("property_type", "residential")
        prop = self.store.add(PROPERTIES, Property(created_by=created_by, **fields))
        logger.info("Created property %s", prop.id)
        return prop

    def update(self, property_id, data: dict):
        ensure_valid(validate_property(data, partial=True))
        prop = self.store.update(PROPERTIES, property_id, **_columns(data))
        if prop is None:
            raise NotFoundError("Property not found")
        return prop

    def delete(self, property_id) -> None:
        if not self.store.delete(PROPERTIES, property_id):
            raise NotFoundError("Property not found")
        logger.info("Deleted property %s", property_id)

    def stats(self) -> dict:
        return compute_property_stats(self.store.list_properties())
