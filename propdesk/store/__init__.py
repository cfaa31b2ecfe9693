from .base import (
    COLLECTIONS,
    INVOICES,
    PROPERTIES,
    SERVICE_PROVIDERS,
    USERS,
    DocumentStore,
)
from .memory import InMemoryDocumentStore
from .sql import SqlDocumentStore

__all__ = [
    "COLLECTIONS",
    "INVOICES",
    "PROPERTIES",
    "SERVICE_PROVIDERS",
    "USERS",
    "DocumentStore",
    "InMemoryDocumentStore",
    "SqlDocumentStore",
]
