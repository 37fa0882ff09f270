from .base import ListQuery, ListResult
from .collections import PROTECTED_COLLECTIONS, ProtectedCollection
from .envelope import GatewayOperation, GatewayOptions, GatewayRequest, GatewayResponse
from .parq import ParqSubmission

__all__ = [
    "ListQuery",
    "ListResult",
    "PROTECTED_COLLECTIONS",
    "ProtectedCollection",
    "GatewayOperation",
    "GatewayOptions",
    "GatewayRequest",
    "GatewayResponse",
    "ParqSubmission",
]
