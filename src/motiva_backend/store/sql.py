import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from motiva_backend.interface.collections import ID_FIELD, VERSION_FIELD
from motiva_backend.model import Document
from motiva_backend.store.base import (
    DocumentStore,
    DuplicateItemError,
    ItemNotFoundError,
    QueryResult,
    StoreError,
    VersionConflictError,
    strip_system_fields,
)

logger = logging.getLogger(__name__)


def _json_field(field_name: str, value: Any):
    """Typed JSON extraction so equality compares like with like"""
    element = Document.data[field_name]
    if isinstance(value, bool):
        return element.as_boolean()
    if isinstance(value, int):
        return element.as_integer()
    if isinstance(value, float):
        return element.as_float()
    return element.as_string()


def _to_item(row: Document) -> Dict[str, Any]:
    item = dict(row.data or {})
    item[ID_FIELD] = row.id
    item[VERSION_FIELD] = row.version
    return item


class SqlDocumentStore(DocumentStore):
    """Document store on top of a single SQLAlchemy ``document`` table"""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _session(self) -> Session:
        return self._session_factory()

    def find(self, collection: str, filters: List[Tuple[str, Any]],
             limit: Optional[int], skip: int) -> QueryResult:
        try:
            with self._session() as db:
                query = db.query(Document).filter(Document.collection == collection)
                for field_name, value in filters:
                    if value is None:
                        query = query.filter(Document.data[field_name].as_string().is_(None))
                    else:
                        query = query.filter(_json_field(field_name, value) == value)

                total = query.order_by(None).count()

                query = query.order_by(Document.created_at, Document.id)
                if skip:
                    query = query.offset(skip)
                if limit is not None:
                    query = query.limit(limit)

                items = [_to_item(row) for row in query.all()]
        except SQLAlchemyError as e:
            logger.error(f"Query on {collection} failed: {e}")
            raise StoreError(f"Query on {collection} failed") from e

        return QueryResult(items=items, total_count=total, has_next=self._has_next(total, skip, len(items)))

    def get(self, collection: str, item_id: str) -> Optional[Dict[str, Any]]:
        try:
            with self._session() as db:
                row = db.get(Document, (collection, item_id))
                return _to_item(row) if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Get {collection}/{item_id} failed: {e}")
            raise StoreError(f"Get on {collection} failed") from e

    def insert(self, collection: str, item: Dict[str, Any]) -> Dict[str, Any]:
        item_id = self._require_id(item)
        with self._session() as db:
            try:
                row = Document(collection=collection, id=item_id, version=1, data=strip_system_fields(item))
                db.add(row)
                db.commit()
                return _to_item(row)
            except IntegrityError as e:
                db.rollback()
                raise DuplicateItemError(collection, item_id) from e
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Insert into {collection} failed: {e}")
                raise StoreError(f"Insert into {collection} failed") from e

    def update(self, collection: str, item: Dict[str, Any],
               expected_version: Optional[int] = None) -> Dict[str, Any]:
        item_id = self._require_id(item)
        with self._session() as db:
            try:
                row = db.get(Document, (collection, item_id))
                if row is None:
                    raise ItemNotFoundError(collection, item_id)

                current_version = row.version
                if expected_version is not None and expected_version != current_version:
                    raise VersionConflictError(collection, item_id, expected_version, current_version)

                # compare-and-swap on the version column
                updated = (
                    db.query(Document)
                    .filter(
                        Document.collection == collection,
                        Document.id == item_id,
                        Document.version == current_version,
                    )
                    .update(
                        {"data": strip_system_fields(item), "version": current_version + 1},
                        synchronize_session=False,
                    )
                )
                if updated == 0:
                    db.rollback()
                    fresh = db.get(Document, (collection, item_id), populate_existing=True)
                    if fresh is None:
                        raise ItemNotFoundError(collection, item_id)
                    raise VersionConflictError(collection, item_id, current_version, fresh.version)

                db.commit()
                row = db.get(Document, (collection, item_id), populate_existing=True)
                return _to_item(row)
            except StoreError:
                raise
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Update of {collection}/{item_id} failed: {e}")
                raise StoreError(f"Update of {collection} failed") from e

    def remove(self, collection: str, item_id: str) -> Optional[Dict[str, Any]]:
        with self._session() as db:
            try:
                row = db.get(Document, (collection, item_id))
                if row is None:
                    return None
                item = _to_item(row)
                db.delete(row)
                db.commit()
                return item
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Remove of {collection}/{item_id} failed: {e}")
                raise StoreError(f"Remove from {collection} failed") from e
