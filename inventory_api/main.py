"""
Inventory API — FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes state construction, middleware registration, route
       mounting and error mapping in one place.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance with its own repository and photo store on app.state.
Who:   Called by the CLI (inventory_api.__main__) and by the tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  [Request ID] → [Logging]              │
    │                                                     │
    │  Routes (routes.inventory route table):             │
    │    POST /register      GET/PUT/DELETE /inventory/…  │
    │    POST /search        GET/PUT /inventory/{id}/photo│
    │                                                     │
    │  Static:  /<cache dir> → photo files                │
    │  Docs:    /swagger.json, /docs                      │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400  NotFound→404  Storage→500   │
    │    no matching route→405                            │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.staticfiles import StaticFiles

from inventory_api import __version__
from inventory_api.config import Settings
from inventory_api.exceptions import NotFoundError, StorageError, ValidationError
from inventory_api.middleware.logging import RequestLoggingMiddleware
from inventory_api.middleware.request_id import RequestIDMiddleware, request_id_var
from inventory_api.routes.inventory import routes
from inventory_api.services.inventory_repository import InventoryRepository
from inventory_api.services.photo_store import PhotoStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called by the CLI before the server starts, and again by the lifespan
    hook so apps started by other ASGI servers log the same way.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)
    logging.getLogger("python_multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup details; there is nothing to release on shutdown."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)

    logger.info("=" * 60)
    logger.info("Inventory API %s starting up...", __version__)
    logger.info("Photo cache: %s (served at %s)", app.state.photo_store.root, app.state.photo_store.url_prefix)
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/docs", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # In-memory inventory is gone from here on
    logger.info("Inventory API shutting down with %d item(s) in memory.", len(app.state.repository))


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        ValidationError            → 400 Bad Request
        RequestValidationError     → 400 Bad Request (malformed form/file fields)
        NotFoundError              → 404 Not Found
        StorageError               → 500 Internal Server Error
        HTTPException 404/405      → 405 Method Not Allowed (no route matched)
        Exception (fallback)       → 500 Internal Server Error

    Unmatched routes answer 405 even for paths nothing is registered under,
    not only for a wrong method on a known path. "Unknown item" is a 404,
    but that comes from the handlers (NotFoundError), never from routing.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed request: %s", rid, exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Malformed request",
                "details": {
                    "errors": [
                        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                        for err in exc.errors()
                    ]
                },
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        """File system error: generic message to the client, details logged."""
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_unmatched_route(request: Request, exc: StarletteHTTPException):
        if exc.status_code not in (404, 405):
            return await http_exception_handler(request, exc)

        headers = {}
        allowed = app.state.route_table.allowed_methods(request.url.path)
        if allowed:
            headers["Allow"] = ", ".join(allowed)
        return PlainTextResponse("Method Not Allowed", status_code=405, headers=headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: stack trace to the log, generic 500 to the client."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Every call builds a fresh, empty InventoryRepository and a PhotoStore
    rooted at settings.cache_dir (created if missing), so tests can create
    isolated apps side by side.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Inventory API",
        description=(
            "Register inventory items with an optional photo, then list, fetch, "
            "update, search or delete them."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/swagger.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.repository = InventoryRepository()
    app.state.photo_store = PhotoStore(settings.cache_dir, chunk_size=settings.upload_chunk_size)
    app.state.route_table = routes

    # Middleware executes in REVERSE order of addition: RequestID runs first
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(routes.build_router(tags=["Inventory"]))

    # Photos are reachable under the cache directory's own name
    app.mount(
        app.state.photo_store.url_prefix,
        StaticFiles(directory=str(app.state.photo_store.root)),
        name="photos",
    )

    return app
