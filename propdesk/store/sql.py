from __future__ import annotations

from datetime import date
from typing import Optional

from ..extensions import db
from .base import INVOICES, DocumentStore, fetch, model_for


class SqlDocumentStore(DocumentStore):
    """Store backed by the Flask-SQLAlchemy session."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def _on_failure(self) -> None:
        self.session.rollback()

    @fetch
    def get(self, collection: str, record_id: str):
        if not record_id:
            return None
        return self.session.get(model_for(collection), record_id)

    @fetch
    def add(self, collection: str, record):
        model_for(collection)
        self.session.add(record)
        self.session.commit()
        return record

    @fetch
    def update(self, collection: str, record_id: str, **fields):
        record = self.session.get(model_for(collection), record_id)
        if record is None:
            return None
        for key, value in fields.items():
            setattr(record, key, value)
        self.session.commit()
        return record

    @fetch
    def delete(self, collection: str, record_id: str) -> bool:
        record = self.session.get(model_for(collection), record_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.commit()
        return True

    @fetch
    def list(self, collection: str, **filters):
        model = model_for(collection)
        query = db.select(model).filter_by(**filters)
        if hasattr(model, "created_at"):
            query = query.order_by(model.created_at.desc())
        return list(self.session.execute(query).scalars())

    @fetch
    def list_invoices(
        self,
        property_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ):
        model = model_for(INVOICES)
        query = db.select(model)
        if property_id:
            query = query.where(model.property_id == property_id)
        if date_from is not None:
            query = query.where(model.issue_date >= date_from)
        if date_to is not None:
            query = query.where(model.issue_date <= date_to)
        query = query.order_by(model.issue_date.desc())
        return list(self.session.execute(query).scalars())
