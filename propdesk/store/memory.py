from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import inspect

from ..models.base import new_id, utcnow
from .base import INVOICES, COLLECTIONS, DocumentStore, fetch, in_range, model_for, newest_first


def _apply_defaults(record) -> None:
    """Fill column defaults the way a flush would, for records never flushed."""
    for attr in inspect(type(record)).column_attrs:
        if getattr(record, attr.key) is not None:
            continue
        default = attr.columns[0].default
        if default is None:
            continue
        if default.is_callable:
            setattr(record, attr.key, default.arg(None))
        elif default.is_scalar:
            setattr(record, attr.key, default.arg)


def _primary_key(record) -> str:
    return inspect(type(record)).primary_key[0].key


class InMemoryDocumentStore(DocumentStore):
    """Process-local store holding model instances in dicts keyed by id."""

    def __init__(self):
        self._collections = {name: {} for name in COLLECTIONS}

    def _records(self, collection: str) -> dict:
        model_for(collection)
        return self._collections[collection]

    @fetch
    def get(self, collection: str, record_id: str):
        return self._records(collection).get(record_id)

    @fetch
    def add(self, collection: str, record):
        pk = _primary_key(record)
        if not getattr(record, pk):
            setattr(record, pk, new_id())
        _apply_defaults(record)
        self._records(collection)[getattr(record, pk)] = record
        return record

    @fetch
    def update(self, collection: str, record_id: str, **fields):
        record = self._records(collection).get(record_id)
        if record is None:
            return None
        for key, value in fields.items():
            setattr(record, key, value)
        if hasattr(record, "updated_at"):
            record.updated_at = utcnow()
        return record

    @fetch
    def delete(self, collection: str, record_id: str) -> bool:
        return self._records(collection).pop(record_id, None) is not None

    @fetch
    def list(self, collection: str, **filters):
        records = [
            r for r in self._records(collection).values()
            if all(getattr(r, key, None) == value for key, value in filters.items())
        ]
        return newest_first(records)

    @fetch
    def list_invoices(
        self,
        property_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ):
        invoices = [
            inv for inv in self._records(INVOICES).values()
            if (not property_id or inv.property_id == property_id) and in_range(inv, date_from, date_to)
        ]
        return sorted(invoices, key=lambda inv: inv.issue_date or date.min, reverse=True)


