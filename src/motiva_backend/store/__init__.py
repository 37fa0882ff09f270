"""
Document store implementations.

- base: DocumentStore interface, chainable equality query and store errors
- memory: process local store for tests and development
- sql: SQLAlchemy backed store over the ``document`` table
"""

from .base import (
    DocumentQuery,
    DocumentStore,
    DuplicateItemError,
    ItemNotFoundError,
    QueryResult,
    StoreError,
    VersionConflictError,
)
from .memory import InMemoryDocumentStore
from .sql import SqlDocumentStore

__all__ = [
    "DocumentQuery",
    "DocumentStore",
    "DuplicateItemError",
    "ItemNotFoundError",
    "QueryResult",
    "StoreError",
    "VersionConflictError",
    "InMemoryDocumentStore",
    "SqlDocumentStore",
    "create_document_store",
]


def create_document_store(kind: str = None) -> DocumentStore:
    """Build the store selected by ``DOCUMENT_STORE``"""
    from motiva_backend.settings import settings

    kind = (kind or settings.DOCUMENT_STORE).lower()

    if kind == "memory":
        return InMemoryDocumentStore()

    if kind == "sql":
        from motiva_backend.database import get_session_factory
        return SqlDocumentStore(get_session_factory())

    raise ValueError(f"Unknown document store: {kind}")
