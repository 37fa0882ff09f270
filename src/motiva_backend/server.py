from contextlib import asynccontextmanager
import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motiva_backend.api.gateway import gateway_router
from motiva_backend.api.parq import parq_router
from motiva_backend.api.system import system_router
from motiva_backend.logging_config import configure_logging
from motiva_backend.settings import settings
from motiva_backend.store import DocumentStore, create_document_store

logger = logging.getLogger(__name__)

def create_app(store: Optional[DocumentStore] = None) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()

        if getattr(app.state, "store", None) is None:
            app.state.store = create_document_store()

        logger.info(f"Motiva backend started with {type(app.state.store).__name__} ({settings.DEBUG_MODE})")
        yield

    app = FastAPI(title="Motiva protected data backend", lifespan=lifespan)
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(
        gateway_router,
        tags=["gateway"]
    )

    app.include_router(
        parq_router,
        tags=["parq"]
    )

    app.include_router(
        system_router,
        tags=["system"]
    )

    @app.head("/", status_code=204)
    def get_status_head():
        return

    return app

app = create_app()
