"""
FastAPI application for third-party login.

This module wires dependencies and configures the application.
Header parsing is in gatekeeper/http, the login handshake in
gatekeeper/oauth and gatekeeper/integrations.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

# Configure logging FIRST, before other local imports
from gatekeeper.logging_config import setup_global_logging

setup_global_logging()

# Now import other modules (they will use the configured logging)
from fastapi import FastAPI, Request  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from gatekeeper.api import auth  # noqa: E402
from gatekeeper.core.exceptions import ClientError, UpstreamFailure  # noqa: E402
from gatekeeper.oauth.config import (  # noqa: E402
    get_oauth_config,
    reset_identity_providers,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Application Lifecycle
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Providers are lazy-loaded on first request; shutdown drops them.
    """
    logger.info(
        "Application starting up...",
        extra={"providers": get_oauth_config().get_configured_providers()},
    )
    yield
    logger.info("Shutting down application...")
    reset_identity_providers()


app = FastAPI(
    title="Gatekeeper",
    description="Third-party login through OAuth2 identity providers",
    version="1.0.0",
    lifespan=lifespan,
)


# ============================================================================
# Centralized Exception Handlers
# ============================================================================


@app.exception_handler(ClientError)
async def client_error_handler(request: Request, exc: ClientError):
    """
    Handle client errors (malformed messages, missing headers, bad callbacks).

    Returns 400 Bad Request; retrying the same request will not help.
    """
    logger.warning(
        f"Client error: {exc}",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "error",
            "message": str(exc),
        },
    )


@app.exception_handler(UpstreamFailure)
async def upstream_failure_handler(request: Request, exc: UpstreamFailure):
    """
    Handle identity provider failures (token rejected, network down).

    Returns 502 Bad Gateway so the client knows the fault is upstream.
    """
    logger.error(f"Upstream failure: {exc}", exc_info=True)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "error",
            "message": str(exc),
        },
    )


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "gatekeeper",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run."""
    return {"status": "healthy"}


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(auth.router)


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)
