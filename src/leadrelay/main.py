"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from leadrelay.config import Settings, settings
from leadrelay.logging_config import configure_logging

# Configure logging at import time
configure_logging(log_level=settings.log_level, json_output=settings.json_logs)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown; the relay owns no other resources."""
    app_settings: Settings = app.state.settings
    if not app_settings.airtable_base_id or not app_settings.airtable_api_token:
        logger.warning("Airtable base id or API token not configured")
    if not app_settings.nango_secret_key:
        logger.warning("Nango secret key not configured")
    logger.info("Lead relay started (port=%d)", app_settings.port)
    yield
    logger.info("Lead relay shutdown complete")


def create_app(
    app_settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_settings: Configuration for every remote client; defaults to the
            environment-derived module settings.
        transport: Optional httpx transport shared by the remote clients.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Lead Relay",
        version="1.0.0",
        description="Relays Nango connection and sync webhooks into Airtable and n8n.",
        lifespan=lifespan,
    )

    from leadrelay.integrations import build_clients
    app.state.settings = app_settings
    app.state.clients = build_clients(app_settings, transport)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from leadrelay.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    from leadrelay.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from leadrelay.api.router import api_router
    app.include_router(api_router)

    # Test UI; mounted last so API routes take precedence
    static_dir = Path(app_settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.debug("Static directory %s not found, test UI disabled", static_dir)

    return app


app = create_app()
