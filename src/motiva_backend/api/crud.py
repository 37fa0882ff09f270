import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

from motiva_backend.api.exceptions import (
    AuthorizationException,
    ConflictException,
    InternalServerException,
    NotFoundException,
)
from motiva_backend.interface.base import ListQuery, ListResult
from motiva_backend.interface.collections import (
    CLIENT_ID,
    CREATED_FIELD,
    ID_FIELD,
    TRAINER_ID,
    UPDATED_FIELD,
    VERSION_FIELD,
)
from motiva_backend.permissions import policy_registry
from motiva_backend.permissions.principal import Principal
from motiva_backend.permissions.query_builders import OwnershipScopeBuilder
from motiva_backend.settings import settings
from motiva_backend.store.base import (
    DocumentStore,
    DuplicateItemError,
    ItemNotFoundError,
    StoreError,
    VersionConflictError,
    new_document,
    touch_document,
)

logger = logging.getLogger(__name__)

SYSTEM_FIELDS = (VERSION_FIELD, CREATED_FIELD, UPDATED_FIELD)


@contextmanager
def store_errors(collection: str):
    """Translate store failures into gateway exceptions"""
    try:
        yield
    except VersionConflictError as e:
        logger.warning(str(e))
        raise ConflictException("Item was modified by another request, reload and retry")
    except DuplicateItemError as e:
        logger.warning(str(e))
        raise ConflictException("Item already exists")
    except ItemNotFoundError:
        raise NotFoundException("Item not found")
    except StoreError as e:
        logger.error(f"Store failure on {collection}: {e}")
        raise InternalServerException("Internal server error")


def page_window(params: Optional[ListQuery]) -> tuple[int, int]:
    limit = params.limit if params is not None and params.limit else settings.DEFAULT_PAGE_SIZE
    skip = params.skip if params is not None and params.skip else 0
    return max(min(limit, settings.MAX_PAGE_SIZE), 1), skip


def list_db(store: DocumentStore, collection: str, filters, params: Optional[ListQuery]) -> Dict[str, Any]:

    limit, skip = page_window(params)

    query = OwnershipScopeBuilder.apply(store.query(collection), filters)
    query = OwnershipScopeBuilder.paginate(query, limit, skip)

    with store_errors(collection):
        result = query.find()

    return ListResult(
        items=result.items,
        total_count=result.total_count,
        has_next=result.has_next,
        current_page=skip // limit if limit else 0,
        page_size=limit,
        next_skip=skip + limit if result.has_next else None,
    ).model_dump(by_alias=True)


def get_all_db(principal: Principal, store: DocumentStore, collection: str, params: Optional[ListQuery]):
    policy = policy_registry.get_policy(collection)
    return list_db(store, collection, policy.scope_filters(principal), params)


def get_for_client_db(principal: Principal, store: DocumentStore, collection: str, client_id: str,
                      params: Optional[ListQuery]):
    return list_db(store, collection, [(CLIENT_ID, client_id)], params)


def get_for_trainer_db(principal: Principal, store: DocumentStore, collection: str, trainer_id: str,
                       params: Optional[ListQuery]):
    if not principal.is_admin:
        raise AuthorizationException("Unauthorized: Only admins can query trainer-scoped data")
    return list_db(store, collection, [(TRAINER_ID, trainer_id)], params)


def _fetch_existing(store: DocumentStore, collection: str, item_id: str) -> Dict[str, Any]:
    with store_errors(collection):
        item = store.get(collection, item_id)

    if item is None:
        raise NotFoundException("Item not found")

    return item


def get_id_db(principal: Principal, store: DocumentStore, collection: str, item_id: str):

    item = _fetch_existing(store, collection, item_id)

    policy_registry.get_policy(collection).check_read(principal, item)

    return item


def create_db(principal: Principal, store: DocumentStore, collection: str, data: Dict[str, Any]):

    payload = {k: v for k, v in data.items() if k not in SYSTEM_FIELDS}
    payload = policy_registry.get_policy(collection).prepare_create(principal, payload)

    payload = new_document(payload)

    with store_errors(collection):
        created = store.insert(collection, payload)

    logger.info(f"{principal.member_id} created {collection}/{created[ID_FIELD]}")
    return created


def update_db(principal: Principal, store: DocumentStore, collection: str, item_id: str,
              data: Dict[str, Any], expected_version: Optional[int] = None):

    existing = _fetch_existing(store, collection, item_id)
    current_version = existing.get(VERSION_FIELD)

    if expected_version is not None and expected_version != current_version:
        raise ConflictException("Item was modified by another request, reload and retry")

    changes = {k: v for k, v in data.items() if k not in SYSTEM_FIELDS and k != ID_FIELD}
    changes = policy_registry.get_policy(collection).prepare_update(principal, existing, changes)

    merged = touch_document({**existing, **changes})
    merged[ID_FIELD] = item_id
    merged.pop(VERSION_FIELD, None)

    # the version read above guards the merge against concurrent writers
    with store_errors(collection):
        updated = store.update(collection, merged, expected_version=current_version)

    logger.info(f"{principal.member_id} updated {collection}/{item_id} to version {updated.get(VERSION_FIELD)}")
    return updated


def delete_db(principal: Principal, store: DocumentStore, collection: str, item_id: str):

    existing = _fetch_existing(store, collection, item_id)

    policy_registry.get_policy(collection).check_delete(principal, existing)

    with store_errors(collection):
        store.remove(collection, item_id)

    logger.info(f"{principal.member_id} deleted {collection}/{item_id}")
    return {"success": True}
