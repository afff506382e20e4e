# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""FastAPI application factory for the verification service."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ticketscan import __version__
from ticketscan.api.routes import health, page, verify
from ticketscan.config import Settings, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings = app.state.settings
    logger.info("Ticket verification service starting...")
    if not settings.server.csrf_enabled:
        logger.warning("CSRF protection is disabled")
    logger.info(
        f"Ticket verification service ready on {settings.server.host}:{settings.server.port}"
    )

    yield

    logger.info("Ticket verification service stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use (uses global if not provided)

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Ticket Verification Service",
        description=(
            "Verifies scanned QR ticket codes. Demo rule: codes starting "
            "with VALID are valid. NOT FOR REAL EVENTS - proof of concept only."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(page.router, tags=["Scanner"])
    app.include_router(verify.router, prefix="/api", tags=["Verification"])

    return app


# Create default app instance for uvicorn
app = create_app()
