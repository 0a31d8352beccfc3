"""
MapIt Backend: FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn mapit.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌───────────┐ ┌──────────────────────────┐ │
    │  │ Req ID   │→│ Logging   │→│ CORS envelope / OPTIONS  │ │
    │  └──────────┘ └───────────┘ └──────────────────────────┘ │
    │                                                          │
    │  Routes:                                                 │
    │  ┌──────────────┐ ┌──────────────┐ ┌───────────────────┐ │
    │  │ /maps        │ │ /zones       │ │ GET /test-db      │ │
    │  │ /customer/.. │ │ /zones/bulk  │ │                   │ │
    │  └──────────────┘ └──────────────┘ └───────────────────┘ │
    │  ┌──────────────┐ ┌──────────────────────────────────┐   │
    │  │ /orders      │ │ /admin/maps /admin/orders ...    │   │
    │  └──────────────┘ └──────────────────────────────────┘   │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ DB/Config→500      │  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create the connection pool (skipped, with an error log, when the
       database is not configured or DATABASE_URL is invalid; requests
       then answer 500)

    Shutdown:
    1. Dispose the pool (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mapit import __version__
from mapit.config import settings
from mapit.database import Database
from mapit.exceptions import (
    ConfigurationError,
    DatabaseError,
    MapItError,
    NotFoundError,
    ValidationError,
)
from mapit.middleware.cors import CORS_HEADERS, CORSEnvelopeMiddleware
from mapit.middleware.logging import RequestLoggingMiddleware
from mapit.middleware.request_id import RequestIDMiddleware, request_id_var
from mapit.routes import admin, health, maps, orders, zones
from mapit.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    What:    One format for every module, written to stdout.
    When:    Called once during app startup, before anything else logs.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # mapit.access already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Create the connection pool on startup and dispose it on shutdown.

    A missing or unparsable database configuration does not stop the server:
    GET /test-db still answers 500 with the reason, which is how operators
    find out.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("MapIt Backend %s starting up...", __version__)

    app.state.database_error = None
    try:
        app.state.database = Database.from_settings(settings)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e.message)
        logger.error("Set a valid DATABASE_URL (or DB_HOST) and restart the server.")
        app.state.database = None
        app.state.database_error = e.message

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("MapIt Backend shutting down...")
    database: Optional[Database] = getattr(app.state, "database", None)
    if database is not None:
        await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    error: str,
    message: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the `{success: false, error, message?}` envelope."""
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError         → 400 `error` names the missing input
        RequestValidationError  → 400 "Invalid request" (malformed body/params)
        NotFoundError           → 404 "<Resource> not found"
        HTTPException           → 404 "Not found" / 405 "Method not allowed"
        DatabaseError           → 500 "Server error" + driver message
        ConfigurationError      → 500 configuration problem as `error`
        MapItError (base)       → its own status_code
        Exception (fallback)    → 500 "Server error"
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s | Context: %s", rid, exc.error, exc.context)
        return error_response(400, exc.error)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body or parameters did not match the declared schema."""
        rid = request_id_var.get("")
        problems = [
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        ]
        logger.warning("[%s] Invalid request: %s", rid, problems)
        return error_response(400, "Invalid request", "; ".join(problems) or None)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, exc.error, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Routing failures raised by the framework itself."""
        if exc.status_code == 405:
            error = "Method not allowed"
        elif exc.status_code == 404:
            error = "Not found"
        else:
            error = str(exc.detail)
        return error_response(exc.status_code, error, headers=getattr(exc, "headers", None))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(500, exc.error, exc.message)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        rid = request_id_var.get("")
        logger.error("[%s] Configuration error: %s", rid, exc.message)
        return error_response(500, exc.error)

    @app.exception_handler(MapItError)
    async def handle_mapit_error(request: Request, exc: MapItError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return error_response(exc.status_code, exc.error, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        Runs outside the middleware stack, so the CORS headers are set here.
        The stack trace is logged server-side only.
        """
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(500, "Server error", headers=dict(CORS_HEADERS))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    Tests call this directly to get a fresh app per test.
    """
    app = FastAPI(
        title="MapIt API",
        description=(
            "Maps owned by customers and the named polygon zones drawn on them. "
            "Every response is a JSON envelope with a boolean `success`."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = None

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS → routes
    app.add_middleware(CORSEnvelopeMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(maps.router)
    app.include_router(zones.router)
    app.include_router(orders.router)
    app.include_router(admin.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
