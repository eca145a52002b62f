"""
Posts API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       error handling and lifecycle management in one place.
How:   create_app() returns a configured FastAPI instance. Settings and the
       database adapter can be passed in (tests do); otherwise they are
       built from the environment.
Who:   uvicorn (`uvicorn posts_api.main:app`) or the `posts-api` script.

Application Architecture:
    Middleware Chain (outermost first):
        Request ID → Logging → Origin allow-list → CORS → GZip

    Routes:
        GET /                         server info
        GET /api/health               liveness
        GET|POST /api/posts           list / create
        GET|PUT|DELETE /api/posts/{id}

    Exception Handlers (all answer with the {success, data, error} envelope):
        ValidationError         → 400
        DatabaseError           → 400 (driver message)
        NotFoundError           → 404
        Unmatched route         → 404 "Route METHOD PATH not found"
        InternalServerError     → 500
        Exception (fallback)    → 500 "Internal server error"

Lifecycle:
    Startup:  configure logging, log environment and listening address
    Shutdown: dispose the database engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from posts_api import __version__
from posts_api.config import Settings, get_settings
from posts_api.database import Database
from posts_api.exceptions import (
    DatabaseError,
    NotFoundError,
    PostsAPIError,
    ValidationError,
)
from posts_api.middleware.cors import OriginAllowListMiddleware
from posts_api.middleware.logging import RequestLoggingMiddleware
from posts_api.middleware.request_id import RequestIDMiddleware, request_id_var
from posts_api.routes import api_router
from posts_api.schemas.post import Envelope, ServerInfo
from posts_api.utils.responses import (
    BODY_NOT_OBJECT,
    INTERNAL_SERVER_ERROR,
    INVALID_JSON_BODY,
    SERVER_RUNNING,
    create_error_response,
    create_success_response,
    route_not_found_message,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # RequestLoggingMiddleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)

    logger.info("Posts API %s starting up...", __version__)
    logger.info("Environment: %s", settings.environment)
    logger.info("Allowed origins: %s", ", ".join(settings.cors_origins_list))
    logger.info("Server running on http://%s:%d", settings.host, settings.port)

    yield

    logger.info("Posts API shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=create_error_response(message))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes, always answering with the envelope.

    Exception details (tracebacks, SQL) are logged server-side only; the
    500 response carries nothing but "Internal server error".
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_json(400, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_json(404, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.warning(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return error_json(400, exc.message)

    @app.exception_handler(PostsAPIError)
    async def handle_api_error(request: Request, exc: PostsAPIError):
        # InternalServerError and any other subclass without its own handler
        if exc.status_code >= 500:
            return error_json(exc.status_code, INTERNAL_SERVER_ERROR)
        return error_json(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed JSON or a body that is not an object."""
        errors = exc.errors()
        if any(error.get("type") == "json_invalid" for error in errors):
            message = INVALID_JSON_BODY
        else:
            message = BODY_NOT_OBJECT
        logger.warning(
            "[%s] Request rejected: %s | %s",
            request_id_var.get(""), message, [error.get("loc") for error in errors],
        )
        return error_json(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # 405 means the path exists but not for this method: still no such route
        if exc.status_code in (404, 405):
            return error_json(404, route_not_found_message(request.method, request.url.path))
        return error_json(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Last-resort backstop; services normally convert errors themselves."""
        logger.error(
            "[%s] Unhandled error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=exc,
        )
        return error_json(500, INTERNAL_SERVER_ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; loaded from the environment when omitted
                  (raises ConfigurationError if DATABASE_URL/DATABASE_KEY
                  are missing).
        database: Database adapter shared by all requests; built from
                  settings when omitted.
    """
    settings = settings or get_settings()
    database = database or Database.from_settings(settings)

    app = FastAPI(
        title="Posts API",
        description="REST API for creating, listing, updating and deleting posts.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute.
    # The allow-list sits outside CORSMiddleware so it also sees preflights,
    # and inside RequestID/Logging so its 403s are correlated and logged.
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(OriginAllowListMiddleware, allowed_origins=settings.cors_origins_list)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(api_router)

    @app.get("/", response_model=Envelope[ServerInfo], tags=["Health"], summary="Server info")
    async def root():
        return create_success_response(
            {
                "message": SERVER_RUNNING,
                "version": __version__,
                "timestamp": datetime.now(timezone.utc),
            }
        )

    return app


def run() -> None:
    """Entry point for the `posts-api` console script."""
    settings = get_settings()
    uvicorn.run(
        "posts_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# uvicorn expects `posts_api.main:app` to be importable
app = create_app()


if __name__ == "__main__":
    run()
