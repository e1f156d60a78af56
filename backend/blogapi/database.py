"""
Blog API Backend — Document Store Wiring
==========================================

What:  Builds the process-wide DocumentStore and exposes it to route handlers.
How:   The lifespan calls open_document_store() at startup and
       close_document_store() at shutdown. The instance lives on
       app.state.document_store; FastAPI dependencies hand it (wrapped in a
       PostService) to each request.
Who:   Used by blogapi.main (lifecycle) and route handlers (Depends()).

Lifecycle:
    startup:   build from settings (unless injected) → connect() within timeout
    requests:  get_document_store → get_post_service → handler
    shutdown:  close()
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request

from blogapi.config import Settings
from blogapi.exceptions import StoreFailureError
from blogapi.services.post_service import PostService
from blogapi.store.base import DocumentStore
from blogapi.store.mongo import MongoDocumentStore

logger = logging.getLogger(__name__)


def build_document_store(settings: Settings) -> DocumentStore:
    """Construct (but do not connect) the store described by settings."""
    return MongoDocumentStore.from_settings(settings)


async def open_document_store(app: FastAPI, settings: Settings) -> DocumentStore:
    """
    Ensure app.state.document_store exists and is connected.

    A store injected through create_app(document_store=...) is reused as-is;
    otherwise one is built from settings.

    Raises:
        StoreFailureError: the store could not be reached within the timeout
    """
    store: Optional[DocumentStore] = getattr(app.state, "document_store", None)
    if store is None:
        store = build_document_store(settings)
        app.state.document_store = store
    await store.connect()
    return store


async def close_document_store(app: FastAPI) -> None:
    store: Optional[DocumentStore] = getattr(app.state, "document_store", None)
    if store is not None:
        await store.close()


# ── Request Dependencies ──────────────────────────────────────────────────
def get_document_store(request: Request) -> DocumentStore:
    """
    FastAPI dependency returning the application's DocumentStore.

    Example usage in a route:
        @router.get("/posts")
        async def list_posts(store: DocumentStore = Depends(get_document_store)):
            ...
    """
    store: Optional[DocumentStore] = getattr(request.app.state, "document_store", None)
    if store is None:
        raise StoreFailureError(
            message="Document store is not configured",
            operation="dependency",
        )
    return store


def get_post_service(
    store: DocumentStore = Depends(get_document_store),
) -> PostService:
    return PostService(store)
