"""
Protected data gateway.

The single entry point for reads and writes on protected collections. Every
request goes through the same stages

    received -> parsed -> authenticated -> authorized -> executed -> responded

and any stage may exit early with the uniform error envelope.
"""

import json
import logging
from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from motiva_backend.api.crud import (
    create_db,
    delete_db,
    get_all_db,
    get_for_client_db,
    get_for_trainer_db,
    get_id_db,
    update_db,
)
from motiva_backend.api.exceptions import (
    AuthenticationException,
    AuthorizationException,
    GatewayException,
    ValidationException,
)
from motiva_backend.api.utils import get_document_store, reject_json_constant, CORS_HEADERS
from motiva_backend.interface.collections import PROTECTED_COLLECTIONS
from motiva_backend.interface.envelope import GatewayOperation, GatewayRequest, GatewayResponse
from motiva_backend.permissions.auth import (
    IdentityResolver,
    PrincipalBuilder,
    RoleResolver,
    SessionIdentityResolver,
    parse_bearer_token,
)
from motiva_backend.permissions.core import AccessEvaluator
from motiva_backend.permissions.principal import Principal
from motiva_backend.permissions.relationships import RelationshipValidator
from motiva_backend.store.base import DocumentStore

logger = logging.getLogger(__name__)

# envelope fields each operation cannot do without
REQUIRED_FIELDS = {
    GatewayOperation.GET_ALL: (),
    GatewayOperation.GET_BY_ID: ("item_id",),
    GatewayOperation.GET_FOR_CLIENT: ("client_id",),
    GatewayOperation.GET_FOR_TRAINER: ("trainer_id",),
    GatewayOperation.CREATE: ("data",),
    GatewayOperation.UPDATE: ("item_id", "data"),
    GatewayOperation.DELETE: ("item_id",),
}

FIELD_NAMES = {
    "item_id": "itemId",
    "client_id": "clientId",
    "trainer_id": "trainerId",
    "data": "data",
}


class GatewayDispatcher:
    """Per-request mediator between callers and the document store.

    Holds no state between requests; every collaborator is injected or built
    from the injected store.
    """

    def __init__(
        self,
        store: DocumentStore,
        identity_resolver: Optional[IdentityResolver] = None,
        role_resolver: Optional[RoleResolver] = None,
        relationships: Optional[RelationshipValidator] = None,
    ):
        self.store = store
        self.principals = PrincipalBuilder(
            identity_resolver or SessionIdentityResolver(store),
            role_resolver or RoleResolver(store),
        )
        self.evaluator = AccessEvaluator(relationships or RelationshipValidator(store))

    def dispatch(self, body: Union[bytes, str, None], credentials: Optional[str]) -> GatewayResponse:
        principal: Optional[Principal] = None
        request: Optional[GatewayRequest] = None

        try:
            request = self.parse(body)
            operation = self.validate(request)
            principal = self.authenticate(credentials)
            self.authorize(principal, operation, request)
            result = self.execute(principal, operation, request)

        except GatewayException as e:
            response = GatewayResponse.fail(e.status_code, e.message)
            if isinstance(e, AuthorizationException):
                logger.warning(f"Denied {_describe(principal, request)}: {e.message}")

        except Exception:
            logger.exception(f"Unexpected gateway failure for {_describe(principal, request)}")
            response = GatewayResponse.fail(500, "Internal server error")

        else:
            response = GatewayResponse.ok(result)

        logger.info(f"{_describe(principal, request)} -> {response.status_code}")
        return response

    def parse(self, body: Union[bytes, str, None]) -> GatewayRequest:
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError:
                raise ValidationException("Invalid JSON in request body")

        try:
            raw = json.loads(body, parse_constant=reject_json_constant) if body else {}
        except ValueError:
            raise ValidationException("Invalid JSON in request body")

        if not isinstance(raw, dict):
            raise ValidationException("Request body must be a JSON object")

        try:
            return GatewayRequest.model_validate(raw)
        except ValidationError as e:
            error = e.errors()[0]
            location = ".".join(str(part) for part in error.get("loc", ()))
            raise ValidationException(f"Invalid request envelope: {location} {error.get('msg', '')}".strip())

    def validate(self, request: GatewayRequest) -> GatewayOperation:
        if not request.operation or not request.collection:
            raise ValidationException("Missing required fields: operation, collection")

        if request.collection not in PROTECTED_COLLECTIONS:
            raise ValidationException(f"Invalid collection: {request.collection}")

        try:
            operation = GatewayOperation(request.operation)
        except ValueError:
            raise ValidationException(f"Unknown operation: {request.operation}")

        missing = [FIELD_NAMES[f] for f in REQUIRED_FIELDS[operation] if _is_missing(getattr(request, f))]
        if missing:
            raise ValidationException(f"Missing {' or '.join(missing)}")

        return operation

    def authenticate(self, credentials: Optional[str]) -> Principal:
        principal = self.principals.build(credentials)
        if principal is None:
            raise AuthenticationException("Authentication required")
        return principal

    def authorize(self, principal: Principal, operation: GatewayOperation, request: GatewayRequest) -> None:
        decision = self.evaluator.authorize(
            principal,
            operation,
            request.collection,
            client_id=request.client_id,
            trainer_id=request.trainer_id,
        )
        if not decision.authorized:
            raise AuthorizationException(decision.reason or "Forbidden")

    def execute(self, principal: Principal, operation: GatewayOperation, request: GatewayRequest) -> Any:
        collection = request.collection
        options = request.list_options

        if operation == GatewayOperation.GET_ALL:
            return get_all_db(principal, self.store, collection, options)

        if operation == GatewayOperation.GET_BY_ID:
            return get_id_db(principal, self.store, collection, request.item_id)

        if operation == GatewayOperation.GET_FOR_CLIENT:
            return get_for_client_db(principal, self.store, collection, request.client_id, options)

        if operation == GatewayOperation.GET_FOR_TRAINER:
            return get_for_trainer_db(principal, self.store, collection, request.trainer_id, options)

        if operation == GatewayOperation.CREATE:
            return create_db(principal, self.store, collection, request.data)

        if operation == GatewayOperation.UPDATE:
            return update_db(principal, self.store, collection, request.item_id, request.data,
                             expected_version=options.expected_version)

        if operation == GatewayOperation.DELETE:
            return delete_db(principal, self.store, collection, request.item_id)

        raise ValidationException(f"Unknown operation: {operation.value}")


def _is_missing(value: Any) -> bool:
    # ids must be non-empty; an empty data object is still data
    if isinstance(value, str):
        return not value
    return value is None


def _describe(principal: Optional[Principal], request: Optional[GatewayRequest]) -> str:
    who = f"{principal.member_id}({principal.role.value if principal.role else 'no-role'})" if principal else "anonymous"
    if request is None:
        return f"{who} <unparsed>"
    return f"{who} {request.operation}:{request.collection}"


def get_gateway_dispatcher(store: DocumentStore = Depends(get_document_store)) -> GatewayDispatcher:
    return GatewayDispatcher(store)


gateway_router = APIRouter()

@gateway_router.options("/protected-data-gateway")
async def options_protected_data_gateway():
    return JSONResponse({"success": True}, headers=CORS_HEADERS)

@gateway_router.post("/protected-data-gateway")
async def post_protected_data_gateway(
    request: Request,
    dispatcher: GatewayDispatcher = Depends(get_gateway_dispatcher),
):
    """Execute one request envelope and answer with the response envelope"""
    body = await request.body()
    credentials = parse_bearer_token(request)

    response = await run_in_threadpool(dispatcher.dispatch, body, credentials)

    return JSONResponse(response.to_body(), status_code=response.status_code, headers=CORS_HEADERS)
