import copy
import threading
from typing import Any, Dict, List, Optional, Tuple

from motiva_backend.interface.collections import ID_FIELD, VERSION_FIELD
from motiva_backend.store.base import (
    DocumentStore,
    DuplicateItemError,
    ItemNotFoundError,
    QueryResult,
    VersionConflictError,
)


class InMemoryDocumentStore(DocumentStore):
    """Process local store used by the test-suite and ``DOCUMENT_STORE=memory``"""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def _collection(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def find(self, collection: str, filters: List[Tuple[str, Any]],
             limit: Optional[int], skip: int) -> QueryResult:
        with self._lock:
            matches = [
                item for item in self._collection(collection).values()
                if all(item.get(name) == value for name, value in filters)
            ]
            total = len(matches)
            page = matches[skip:] if limit is None else matches[skip:skip + limit]
            return QueryResult(
                items=copy.deepcopy(page),
                total_count=total,
                has_next=self._has_next(total, skip, len(page)),
            )

    def get(self, collection: str, item_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            item = self._collection(collection).get(item_id)
            return copy.deepcopy(item) if item is not None else None

    def insert(self, collection: str, item: Dict[str, Any]) -> Dict[str, Any]:
        item_id = self._require_id(item)
        with self._lock:
            items = self._collection(collection)
            if item_id in items:
                raise DuplicateItemError(collection, item_id)
            stored = copy.deepcopy(item)
            stored[VERSION_FIELD] = 1
            items[item_id] = stored
            return copy.deepcopy(stored)

    def update(self, collection: str, item: Dict[str, Any],
               expected_version: Optional[int] = None) -> Dict[str, Any]:
        item_id = self._require_id(item)
        with self._lock:
            items = self._collection(collection)
            current = items.get(item_id)
            if current is None:
                raise ItemNotFoundError(collection, item_id)
            current_version = current.get(VERSION_FIELD, 1)
            if expected_version is not None and expected_version != current_version:
                raise VersionConflictError(collection, item_id, expected_version, current_version)
            stored = copy.deepcopy(item)
            stored[ID_FIELD] = item_id
            stored[VERSION_FIELD] = current_version + 1
            items[item_id] = stored
            return copy.deepcopy(stored)

    def remove(self, collection: str, item_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._collection(collection).pop(item_id, None))
