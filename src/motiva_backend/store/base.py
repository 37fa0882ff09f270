"""
Document store abstraction.

The gateway never talks to a database directly. It receives a
``DocumentStore`` implementation and only uses equality queries with
pagination plus id based get/insert/update/remove.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from motiva_backend.interface.base import utc_now_iso
from motiva_backend.interface.collections import CREATED_FIELD, ID_FIELD, UPDATED_FIELD, VERSION_FIELD


class StoreError(Exception):
    """Base exception for document store operations."""
    pass


class ItemNotFoundError(StoreError):
    """Exception raised when a record does not exist."""

    def __init__(self, collection: str, item_id: Any):
        super().__init__(f"{collection} item {item_id} not found")
        self.collection = collection
        self.item_id = item_id


class DuplicateItemError(StoreError):
    """Exception raised when inserting a record whose id is already taken."""

    def __init__(self, collection: str, item_id: Any):
        super().__init__(f"{collection} item {item_id} already exists")
        self.collection = collection
        self.item_id = item_id


class VersionConflictError(StoreError):
    """Exception raised when a record changed between read and write."""

    def __init__(self, collection: str, item_id: Any, expected: int, actual: int):
        super().__init__(
            f"{collection} item {item_id} is at version {actual}, expected {expected}"
        )
        self.collection = collection
        self.item_id = item_id
        self.expected = expected
        self.actual = actual


@dataclass
class QueryResult:
    items: List[Dict[str, Any]]
    total_count: int
    has_next: bool


@dataclass
class DocumentQuery:
    """Chainable equality query, executed with ``find()``"""

    store: "DocumentStore"
    collection: str
    filters: List[Tuple[str, Any]] = field(default_factory=list)
    limit_value: Optional[int] = None
    skip_value: int = 0

    def eq(self, field_name: str, value: Any) -> "DocumentQuery":
        self.filters.append((field_name, value))
        return self

    def limit(self, limit: int) -> "DocumentQuery":
        self.limit_value = limit
        return self

    def skip(self, skip: int) -> "DocumentQuery":
        self.skip_value = skip
        return self

    def find(self) -> QueryResult:
        return self.store.find(self.collection, self.filters, self.limit_value, self.skip_value)


class DocumentStore(ABC):
    """Collection oriented persistence used by the gateway and the services.

    Records are plain dicts carrying ``_id`` and ``_version``. Inserting sets
    ``_version`` to 1, every update increments it.
    """

    def query(self, collection: str) -> DocumentQuery:
        return DocumentQuery(store=self, collection=collection)

    @abstractmethod
    def find(self, collection: str, filters: List[Tuple[str, Any]],
             limit: Optional[int], skip: int) -> QueryResult:
        pass

    @abstractmethod
    def get(self, collection: str, item_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def insert(self, collection: str, item: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def update(self, collection: str, item: Dict[str, Any],
               expected_version: Optional[int] = None) -> Dict[str, Any]:
        """Replace the stored record with ``item``.

        Raises:
            ItemNotFoundError: if no record has ``item["_id"]``
            VersionConflictError: if ``expected_version`` is given and differs
                from the stored version
        """
        pass

    @abstractmethod
    def remove(self, collection: str, item_id: str) -> Optional[Dict[str, Any]]:
        pass

    @staticmethod
    def _require_id(item: Dict[str, Any]) -> str:
        item_id = item.get(ID_FIELD)
        if not item_id:
            raise StoreError(f"Record is missing {ID_FIELD}")
        return str(item_id)

    @staticmethod
    def _has_next(total: int, skip: int, returned: int) -> bool:
        return skip + returned < total


def strip_system_fields(item: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in item.items() if k not in (ID_FIELD, VERSION_FIELD)}


def new_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """Copy ``data`` with a fresh ``_id`` (unless given) and creation timestamps"""
    now = utc_now_iso()
    document = dict(data)
    document[ID_FIELD] = str(document.get(ID_FIELD) or uuid.uuid4())
    document[CREATED_FIELD] = now
    document[UPDATED_FIELD] = now
    return document


def touch_document(data: Dict[str, Any]) -> Dict[str, Any]:
    document = dict(data)
    document[UPDATED_FIELD] = utc_now_iso()
    return document
