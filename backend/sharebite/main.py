"""
ShareBite Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers, routers and the
       collaborators every request needs (stores, identity verifier,
       access policy) onto app.state.
Who:   uvicorn (`uvicorn sharebite.main:app`) and the test suite, which
       calls create_app() with in-memory stores and a fake verifier.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:      listings · food-requests · health     │
    │                                                     │
    │  app.state:   listing_store · request_store         │
    │               identity_verifier · access_policy     │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400 Unauthorized→401 Forbidden→403     │
    │   NotFound→404   Store→500        Exception→500     │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sharebite import __version__
from sharebite.config import settings
from sharebite.database import dispose_engine, get_session_factory
from sharebite.exceptions import (
    ForbiddenError,
    NotFoundError,
    ShareBiteError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)
from sharebite.middleware.logging import RequestLoggingMiddleware
from sharebite.middleware.request_id import RequestIDMiddleware, request_id_var
from sharebite.routes import health, listings, requests
from sharebite.services.access_policy import AccessPolicy
from sharebite.services.identity import IdentityVerifier
from sharebite.stores.base import ListingStore, RequestStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole process. Called once, first thing in the lifespan.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration check.
    Shutdown: dispose the database engine (no-op if it was never created).
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("ShareBite Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: public routes and /health still work without Firebase
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("ShareBite Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    """
    Correlation ID for an error body.

    The catch-all handler runs outside RequestIDMiddleware, where the
    ContextVar is unset; request.state shares the scope and still has it.
    """
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to structured JSON error responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        UnauthorizedError                        → 401
        ForbiddenError                           → 403
        NotFoundError                            → 404
        StoreError                               → 500 (generic message)
        ShareBiteError (base)                    → 500
        Exception (fallback)                     → 500

    Internal details (driver errors, stack traces) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = _request_id(request)
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
        """Body that is not JSON, or not a JSON object: same 400 as our own validation."""
        rid = _request_id(request)
        logger.warning("[%s] Request validation error: %s", rid, exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Request body must be a JSON object",
                "details": {"errors": [err.get("msg") for err in exc.errors()]},
                "request_id": rid,
            },
        )

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        rid = _request_id(request)
        return JSONResponse(
            status_code=401,
            content={
                "error": "unauthorized",
                "message": exc.message,
                "request_id": rid,
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        rid = _request_id(request)
        return JSONResponse(
            status_code=403,
            content={
                "error": "forbidden",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = _request_id(request)
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = _request_id(request)
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(ShareBiteError)
    async def handle_app_error(request: Request, exc: ShareBiteError):
        rid = _request_id(request)
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def _open_session() -> AsyncSession:
    """Session from the shared factory; the engine is built on first call."""
    return get_session_factory()()


def create_app(
    listing_store: Optional[ListingStore] = None,
    request_store: Optional[RequestStore] = None,
    identity_verifier: Optional[IdentityVerifier] = None,
    access_policy: Optional[AccessPolicy] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Any collaborator left as None gets its production implementation:
    SQLAlchemy stores opening sessions from the shared factory, and the
    Firebase verifier. The engine and the Firebase app are both created on
    first use, so building the app needs neither a database nor a key file.
    """
    app = FastAPI(
        title="ShareBite API",
        description="Food-donation marketplace: list food, request food, manage your listings.",
        version=__version__,
        lifespan=lifespan,
    )

    if listing_store is None or request_store is None:
        from sharebite.stores.sql import SQLListingStore, SQLRequestStore

        listing_store = listing_store or SQLListingStore(_open_session)
        request_store = request_store or SQLRequestStore(_open_session)
    if identity_verifier is None:
        from sharebite.services.firebase_identity import FirebaseIdentityVerifier

        identity_verifier = FirebaseIdentityVerifier()

    app.state.listing_store = listing_store
    app.state.request_store = request_store
    app.state.identity_verifier = identity_verifier
    app.state.access_policy = access_policy or AccessPolicy()

    # ── Middleware (last added = first to execute) ────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(listings.router)
    app.include_router(requests.router)

    return app


# uvicorn expects `sharebite.main:app` to be importable
app = create_app()
