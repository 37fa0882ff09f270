from fastapi import APIRouter, Depends

from motiva_backend.api.utils import get_document_store
from motiva_backend.interface.base import utc_now_iso
from motiva_backend.store.base import DocumentStore

system_router = APIRouter()

@system_router.get("/health")
def get_health(store: DocumentStore = Depends(get_document_store)):
    return {
        "success": True,
        "statusCode": 200,
        "status": "healthy",
        "store": type(store).__name__,
        "timestamp": utc_now_iso(),
    }
