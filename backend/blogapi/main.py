"""
Blog API Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn blogapi.main:app) and
       by tests with an injected DocumentStore.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────────┐ ┌────────────────┐   │
    │  │  Req ID  │→│   Logging    │→│ CORS/preflight │   │
    │  └──────────┘ └──────────────┘ └────────────────┘   │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────┐ ┌─────────────────┐   │
    │  │ GET/POST/PUT/DELETE posts│ │ GET /health     │   │
    │  └──────────────────────────┘ └─────────────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Invalid ID/body→400 │ NotFound→404 │ Store→500│  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Build the DocumentStore (unless injected) and connect within
       MONGO_CONNECT_TIMEOUT; startup fails if the store is unreachable

    Shutdown:
    1. Close the DocumentStore (releases the connection pool)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from blogapi import __version__
from blogapi.config import Settings, settings
from blogapi.database import close_document_store, open_document_store
from blogapi.exceptions import (
    MalformedBodyError,
    MalformedIdentifierError,
    NotFoundError,
    StoreFailureError,
    describe_validation_errors,
)
from blogapi.middleware.cors import CORSMiddleware
from blogapi.middleware.logging import RequestLoggingMiddleware
from blogapi.middleware.request_id import RequestIDMiddleware, request_id_var
from blogapi.routes import health, posts
from blogapi.store.base import DocumentStore

logger = logging.getLogger(__name__)

GENERIC_STORE_ERROR = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    Called once during app startup, before the store is opened.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the document store on startup and close it on shutdown.

    Code before yield runs on startup, code after yield on shutdown.
    A StoreFailureError during connect aborts startup.
    """
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("Blog API %s starting up...", __version__)

    try:
        await open_document_store(app, app_settings)
    except StoreFailureError as e:
        logger.error("Document store unavailable at startup: %s", e.message)
        raise

    logger.info(
        "Server ready at http://%s:%d",
        app_settings.backend_host,
        app_settings.backend_port,
    )

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Blog API shutting down...")
    await close_document_store(app)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI, app_settings: Settings) -> None:
    """
    Map exception types to HTTP status codes.

    Handler hierarchy:
        MalformedIdentifierError → 400 {"error": "Invalid ID"}
        MalformedBodyError       → 400 {"error": <decode error>}
        RequestValidationError   → 400 {"error": <decode error>}
        NotFoundError            → 404 {"error": "Post not found"}
        StoreFailureError        → 500 {"error": <store error or generic>}
        Exception (fallback)     → 500 {"error": "Internal server error"}
    """

    @app.exception_handler(MalformedIdentifierError)
    async def handle_malformed_identifier(request: Request, exc: MalformedIdentifierError):
        logger.warning("[%s] Invalid ID: %r", request_id_var.get(""), exc.raw_id)
        return _error(400, exc.message)

    @app.exception_handler(MalformedBodyError)
    async def handle_malformed_body(request: Request, exc: MalformedBodyError):
        logger.warning("[%s] Malformed body: %s", request_id_var.get(""), exc.message)
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """FastAPI body decode failures answer 400 instead of the default 422."""
        return await handle_malformed_body(
            request, MalformedBodyError(message=describe_validation_errors(exc.errors()))
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(StoreFailureError)
    async def handle_store_failure(request: Request, exc: StoreFailureError):
        logger.error(
            "[%s] Document store error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        message = exc.message if app_settings.expose_store_errors else GENERIC_STORE_ERROR
        return _error(500, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Errors raised outside CORSMiddleware; stack trace goes to the log only."""
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error(500, "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    document_store: Optional[DocumentStore] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        document_store: Pre-built store to serve from. When omitted, the
                        lifespan builds a MongoDocumentStore from settings.
        app_settings:   Settings override; defaults to the module singleton.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Blog API",
        description="CRUD service for blog posts stored in MongoDB.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.document_store = document_store

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS → routes
    app.add_middleware(CORSMiddleware, allow_origin=app_settings.cors_allow_origin)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app, app_settings)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(posts.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `blogapi.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured address."""
    import uvicorn

    uvicorn.run(
        "blogapi.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
