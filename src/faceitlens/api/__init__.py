"""
FaceitLens Web API

FastAPI application exposing the player lookup to browser front-ends.

This package exposes:
- app: The FastAPI application (used by uvicorn, wsgi.py, server.py)
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import Response

from faceitlens import __version__
from faceitlens.api.shared import health_payload
from faceitlens.core.config import get_config, setup_logging

setup_logging(get_config().logging)
logger = logging.getLogger(__name__)

# =============================================================================
# FastAPI App Creation
# =============================================================================

app = FastAPI(
    title="FaceitLens API",
    description=(
        "FACEIT CS2 player lookup by nickname, Steam ID or Steam profile URL, "
        "with recent-match K/D, HS%, ADR and win rate"
    ),
    version=__version__,
)

# =============================================================================
# CORS Configuration
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Security Middleware
# =============================================================================


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next) -> Response:
    """Add security headers; API responses are never cached."""
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if "/api/" in request.url.path:
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
        response.headers["Pragma"] = "no-cache"

    return response


# =============================================================================
# Global Exception Handler
# =============================================================================


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler to prevent information disclosure."""
    logger.exception(f"Unhandled exception for {request.method} {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "kind": "UPSTREAM_ERROR",
            "error": "An unexpected error occurred. Please try again later.",
        },
    )


@app.get("/health")
async def health() -> dict[str, Any]:
    """Health check."""
    return health_payload()


# =============================================================================
# Include Route Modules
# =============================================================================

from faceitlens.api.routes_lookup import router as lookup_router  # noqa: E402

app.include_router(lookup_router)
