"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ticketgate.api.middleware import setup_middleware
from ticketgate.core.config import Settings
from ticketgate.core.logging import setup_logging
from ticketgate.ledger.base import BaseLedger
from ticketgate.ledger.factory import build_ledger

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, ledger: BaseLedger | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``ledger`` overrides the reader chosen from settings (tests pass an
    in-memory ledger here).
    """
    if settings is None:
        settings = Settings()

    if not settings.is_testing:
        setup_logging(level=settings.log_level, log_format=settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting ticket gate (env=%s, ledger=%s)", settings.app_env, app.state.ledger.name
        )
        yield
        logger.info("Shutting down ticket gate")

    application = FastAPI(
        title="CrossFi Ticket Gate API",
        description="Signed ticket access and QR verification over the EventManager contract",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.settings = settings
    application.state.ledger = ledger if ledger is not None else build_ledger(settings)

    setup_middleware(application)
    _register_routes(application)

    return application


def _register_routes(app: FastAPI) -> None:
    """Register all API route modules."""
    from ticketgate.api.routes.events import router as events_router
    from ticketgate.api.routes.health import router as health_router
    from ticketgate.api.routes.tickets import router as tickets_router

    app.include_router(health_router, tags=["health"])
    app.include_router(tickets_router)
    app.include_router(events_router)


# Module-level app instance for uvicorn (uvicorn ticketgate.main:app)
app = create_app()
