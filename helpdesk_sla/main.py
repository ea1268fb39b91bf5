"""
Helpdesk SLA - Main Application
===============================

SLA expectation service for the helpdesk ticketing system.

Given a ticket's priority and submission instant, returns when a response
and a resolution are due, honoring the configured business calendar.

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Calendar, advancer and calculator (pure functions)
- Infrastructure: YAML settings with hot reload
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from helpdesk_sla.config import Settings, get_settings
from helpdesk_sla.core import ApplicationException

# SLA Module
from helpdesk_sla.sla.application import ISLASettingsProvider
from helpdesk_sla.sla.infrastructure import SLASettingsManager
from helpdesk_sla.sla.interfaces import sla_router

# Shared
from helpdesk_sla.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler,
)
from helpdesk_sla.shared.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Load SLA settings (unless a provider was injected)
    3. Start watching the settings file

    SHUTDOWN:
    1. Stop the settings watcher
    """
    settings: Settings = app.state.settings

    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Helpdesk SLA service", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    manager: Optional[SLASettingsManager] = None
    if getattr(app.state, "settings_provider", None) is None:
        logger.info("Loading SLA settings", extra={"path": str(settings.sla_config_path)})
        manager = SLASettingsManager()
        manager.load(settings.sla_config_path)
        if settings.watch_sla_config:
            manager.start_watching()
        app.state.settings_provider = manager

    logger.info("Helpdesk SLA service started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Helpdesk SLA service")
    if manager is not None:
        manager.stop_watching()
    logger.info("Helpdesk SLA service shutdown complete")


def create_app(
    settings: Optional[Settings] = None,
    settings_provider: Optional[ISLASettingsProvider] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to environment-derived settings)
        settings_provider: Pre-built SLA settings provider; skips file loading
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Helpdesk SLA API",
        description="""
    ## SLA Expectations for Helpdesk Tickets

    **Endpoints:**
    - `POST /sla/expectations` - Response and resolution deadlines for a ticket
    - `POST /sla/expectations/text` - Expectation snippet for confirmation emails
    - `GET /sla/settings` - Current SLA settings snapshot

    **Features:**
    - Per-priority response/resolution targets (urgent, high, medium, low)
    - Business-hours clock: working weekdays, daily window, timezone
    - One-time and recurring holidays
    - 24/7 clock per priority
    - Settings hot-reload from YAML
    """,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.settings_provider = settings_provider

    # === CORS Middleware ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === Custom Middleware (from shared) ===
    # Added last runs first: correlation ID is set before request logging
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # === Include Module Routers ===
    app.include_router(sla_router)

    # === Health Check Endpoint ===

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint for load balancers and orchestrators."""
        provider = getattr(request.app.state, "settings_provider", None)
        checks = {
            "sla_settings": "loaded" if provider is not None else "not_loaded",
            "settings_watcher": (
                "running"
                if isinstance(provider, SLASettingsManager) and provider.is_watching
                else "stopped"
            ),
        }
        return {
            "status": "healthy" if provider is not None else "degraded",
            "version": settings.app_version,
            "environment": settings.environment,
            "checks": checks
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health",
            "modules": {
                "sla": {
                    "prefix": "/sla",
                    "endpoints": [
                        "POST /sla/expectations - Calculate SLA expectations",
                        "POST /sla/expectations/text - Render expectation snippet",
                        "GET /sla/settings - Current SLA settings"
                    ]
                }
            }
        }

    return app


app = create_app()


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "helpdesk_sla.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.environment == "development",
        log_level="info"
    )
