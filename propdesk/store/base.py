"""
Document store interface.

Records live in four collections (``users``, ``serviceProviders``,
``properties``, ``invoices``); each collection holds instances of the matching
model. Services never talk to a backend directly: they receive a store
instance and go through the methods below, so tests can swap in the
in-memory implementation.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from functools import wraps
from typing import Any, Iterable, Optional

from ..errors import PropDeskError, StoreError
from ..models import Invoice, Property, ServiceProvider, UserProfile

logger = logging.getLogger(__name__)

USERS = "users"
SERVICE_PROVIDERS = "serviceProviders"
PROPERTIES = "properties"
INVOICES = "invoices"

COLLECTIONS = {
    USERS: UserProfile,
    SERVICE_PROVIDERS: ServiceProvider,
    PROPERTIES: Property,
    INVOICES: Invoice,
}


def fetch(fn):
    """Fetch boundary: backend failures surface as StoreError."""
    @wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except PropDeskError:
            raise
        except Exception as e:
            logger.exception("Store call %s failed", fn.__name__)
            self._on_failure()
            raise StoreError(f"Document store unavailable ({fn.__name__})") from e
    return wrapper


def model_for(collection: str):
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise StoreError(f"Unknown collection: {collection}", status_code=500)


class DocumentStore(ABC):
    """Collection-oriented CRUD plus the read queries the reports need."""

    @abstractmethod
    def get(self, collection: str, record_id: str) -> Optional[Any]: ...

    @abstractmethod
    def add(self, collection: str, record) -> Any: ...

    @abstractmethod
    def update(self, collection: str, record_id: str, **fields) -> Optional[Any]: ...

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> bool: ...

    @abstractmethod
    def list(self, collection: str, **filters) -> list: ...

    @abstractmethod
    def list_invoices(
        self,
        property_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list: ...

    def list_properties(self, **filters) -> list:
        return self.list(PROPERTIES, **filters)

    def list_providers(self, **filters) -> list:
        return self.list(SERVICE_PROVIDERS, **filters)

    def _on_failure(self) -> None:
        """Hook run after a failed call (e.g. rolling back a session)."""


def in_range(invoice, date_from: Optional[date], date_to: Optional[date]) -> bool:
    """Inclusive issue_date range check; undated invoices only pass an open range."""
    if date_from is None and date_to is None:
        return True
    issued = getattr(invoice, "issue_date", None)
    if issued is None:
        return False
    if date_from is not None and issued < date_from:
        return False
    if date_to is not None and issued > date_to:
        return False
    return True


def newest_first(records: Iterable) -> list:
    return sorted(
        records,
        key=lambda r: (getattr(r, "created_at", None) is not None, getattr(r, "created_at", None) or 0),
        reverse=True,
    )
