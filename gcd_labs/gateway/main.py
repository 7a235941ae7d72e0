"""
GCD Labs — Gateway Application Factory
========================================

What:  Creates and configures the FastAPI gateway.
How:   Factory pattern: create_app() returns a configured FastAPI instance;
       the module-level `app` is what uvicorn serves.
Who:   `gcd-gateway` console script, or `uvicorn gcd_labs.gateway.main:app`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                 FastAPI Gateway                     │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:      GET /gcd/{a}/{b}     GET /health      │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Upstream→502 │ Unavail.→503  │  │
    │  └───────────────────────────────────────────────┘  │
    │                                                     │
    │  app.state.gcd_client ──gRPC──▶ compute service     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, open the GCDClient channel
    Shutdown: close the channel
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gcd_labs import __version__
from gcd_labs.config import settings
from gcd_labs.exceptions import (
    ComputeServiceError,
    ComputeUnavailableError,
    ValidationError,
)
from gcd_labs.gateway.middleware.logging import RequestLoggingMiddleware
from gcd_labs.gateway.middleware.request_id import RequestIDMiddleware, request_id_var
from gcd_labs.gateway.routes import gcd, health
from gcd_labs.logging_config import setup_logging
from gcd_labs.rpc.client import GCDClient

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the compute client on startup and close it on shutdown.

    The gRPC channel connects lazily, so the gateway starts even when the
    compute service is not up yet; /health reports it as unavailable.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("GCD gateway starting up...")

    app.state.gcd_client = GCDClient(settings.compute_target, settings.rpc_timeout)

    logger.info("Compute service target: %s", settings.compute_target)
    logger.info("Gateway ready at http://%s:%d", settings.gateway_host, settings.gateway_port)
    logger.info("=" * 60)

    yield

    logger.info("GCD gateway shutting down...")
    await app.state.gcd_client.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    # request.state outlives the ContextVar in the outermost error middleware
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and ErrorResponse bodies.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        ComputeServiceError     → 502 Bad Gateway
        ComputeUnavailableError → 503 Service Unavailable
        Exception (fallback)    → 500 Internal Server Error

    Upstream details (gRPC codes, target addresses) are logged server-side
    and never included in the response.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent an operand that is not a uint64."""
        rid = _request_id(request)
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": {k: v for k, v in exc.context.items() if k in ("field", "value")},
                "request_id": rid,
            },
        )

    @app.exception_handler(ComputeUnavailableError)
    async def handle_compute_unavailable(request: Request, exc: ComputeUnavailableError):
        """Compute service unreachable or past its deadline."""
        rid = _request_id(request)
        logger.warning("[%s] Compute unavailable: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=503,
            content={
                "error": "service_unavailable",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(ComputeServiceError)
    async def handle_compute_error(request: Request, exc: ComputeServiceError):
        """Compute service answered, but with a failure."""
        rid = _request_id(request)
        logger.error("[%s] Compute error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=502,
            content={
                "error": "upstream_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; the stack trace is logged, never returned."""
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
            # Answered outside RequestIDMiddleware, so the header is set here
            headers={"X-Request-ID": rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI gateway.

    Returns: Fully configured FastAPI instance. Tests build their own instance
    and replace get_gcd_client through app.dependency_overrides.
    """
    app = FastAPI(
        title="GCD Gateway",
        description=(
            "HTTP front door for the GCD compute service. "
            "GET /gcd/{a}/{b} returns the greatest common divisor of two unsigned "
            "64-bit integers."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(gcd.router)
    app.include_router(health.router)

    return app


app = create_app()


def main() -> None:
    """Console entry point: `gcd-gateway`."""
    setup_logging()
    uvicorn.run(
        "gcd_labs.gateway.main:app",
        host=settings.gateway_host,
        port=settings.gateway_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
