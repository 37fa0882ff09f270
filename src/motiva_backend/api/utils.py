from fastapi import Request

from motiva_backend.store.base import DocumentStore

# headers sent with every gateway and intake response
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.store

def reject_json_constant(name: str):
    """``parse_constant`` hook refusing ``NaN`` and ``Infinity``, which JSON responses cannot carry"""
    raise ValueError(f"Unsupported JSON constant: {name}")
