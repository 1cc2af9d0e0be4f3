"""
AwardBoard Backend - FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn awardboard.main:app).

Application Architecture:
    ┌───────────────────────────────────────────────────────────┐
    │                      FastAPI App                          │
    │                                                           │
    │  Middleware Chain:                                        │
    │  ┌────────┐ ┌────────────┐ ┌──────┐ ┌──────────────────┐  │
    │  │ Req ID │→│ Access Log │→│ GZip │→│  Award Pipeline  │  │
    │  └────────┘ └────────────┘ └──────┘ └──────────────────┘  │
    │                                                           │
    │  Routes:                                                  │
    │  account (/login /signup /me ...)  comments  awards       │
    │  health  fallback (/{path}, registered last)              │
    │                                                           │
    │  Exception Handlers:                                      │
    │  AuthenticationError→401 │ NotAuthenticated→302 /         │
    │  AlreadyAuthenticated→302 /home │ DatabaseError→500       │
    └───────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, optional table creation
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from awardboard import __version__
from awardboard.config import settings
from awardboard.database import dispose_engine, init_models
from awardboard.exceptions import (
    AlreadyAuthenticatedError,
    AuthenticationError,
    AwardBoardError,
    DatabaseError,
    NotAuthenticatedError,
)
from awardboard.middleware.award_pipeline import AwardPipelineMiddleware
from awardboard.middleware.logging import RequestLoggingMiddleware
from awardboard.middleware.request_id import (
    RequestIDLogFilter,
    RequestIDMiddleware,
    request_id_var,
)
from awardboard.routes import account, awards, comments, health

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during startup, before any other initialization.

    Format: %(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s
    The request ID comes from RequestIDLogFilter, attached to every handler.
    With ACCESS_LOG_PATH set, the `awardboard.access` logger also appends to
    that file.
    """
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[stream_handler],
        force=True,
    )

    if settings.access_log_path:
        file_handler = logging.FileHandler(settings.access_log_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        file_handler.addFilter(RequestIDLogFilter())
        logging.getLogger("awardboard.access").addHandler(file_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("AwardBoard %s starting up (%s)", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    if settings.auto_create_tables:
        await init_models()
        logger.info("Database tables ensured")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("AwardBoard shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to responses.

    Handler hierarchy:
        AuthenticationError        → 401 {status: <message>}
        NotAuthenticatedError      → 302 to the login page
        AlreadyAuthenticatedError  → 302 to /home
        DatabaseError              → 500 generic JSON (details logged only)
        AwardBoardError (base)     → 500 generic JSON

    Anything else propagates to the award pipeline, which logs it and
    answers the 500 award page.
    """

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        logger.info("Login failed: %s", exc.message)
        return JSONResponse(status_code=401, content={"status": exc.message})

    @app.exception_handler(NotAuthenticatedError)
    async def handle_not_authenticated(request: Request, exc: NotAuthenticatedError):
        return RedirectResponse(url="/", status_code=302)

    @app.exception_handler(AlreadyAuthenticatedError)
    async def handle_already_authenticated(request: Request, exc: AlreadyAuthenticatedError):
        return RedirectResponse(url="/home", status_code=302)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get()
        logger.error("Database error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(AwardBoardError)
    async def handle_application_error(request: Request, exc: AwardBoardError):
        rid = request_id_var.get()
        logger.error("Unhandled application error %s: %s | Context: %s",
                     type(exc).__name__, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="AwardBoard API",
        description=(
            "Comment board where every HTTP status code you trigger is collected "
            "as an award."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = outermost).
    # Execution order: RequestID → Logging → GZip → AwardPipeline → routes
    app.add_middleware(AwardPipelineMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=500, compresslevel=6)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(account.router)
    app.include_router(comments.router)
    app.include_router(awards.router)
    app.include_router(health.router)
    # Catch-all: keep last
    app.include_router(awards.fallback_router)

    return app


app = create_app()
