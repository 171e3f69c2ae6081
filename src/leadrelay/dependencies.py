"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from leadrelay.config import Settings
from leadrelay.integrations import RelayClients
from leadrelay.integrations.nango import NangoClient
from leadrelay.services.connection_recorder import ConnectionRecorder
from leadrelay.services.sync_pipeline import SyncIngestionPipeline
from leadrelay.services.webhook_dispatcher import WebhookDispatcher


def get_settings(request: Request) -> Settings:
    """Return the configuration the app was built with."""
    return request.app.state.settings


def get_clients(request: Request) -> RelayClients:
    return request.app.state.clients


def get_proxy(request: Request) -> NangoClient:
    return request.app.state.clients.proxy


def get_trace_id(request: Request) -> str:
    """Extract trace_id from request state (set by middleware)."""
    return getattr(request.state, "trace_id", "unknown")


def get_dispatcher(
    settings: Settings = Depends(get_settings),
    clients: RelayClients = Depends(get_clients),
) -> WebhookDispatcher:
    """Wire the webhook handling paths from the app's clients."""
    pipeline = SyncIngestionPipeline(
        clients.store,
        clients.proxy,
        clients.forwarder,
        leads_table=settings.airtable_leads_table,
        connections_table=settings.airtable_connections_table,
        default_model=settings.sync_model or "Contact",
    )
    recorder = ConnectionRecorder(
        clients.store,
        connections_table=settings.airtable_connections_table,
        users_table=settings.airtable_users_table,
    )
    return WebhookDispatcher(pipeline, recorder, sync_model=settings.sync_model or None)


# Type aliases for dependency injection
Proxy = Annotated[NangoClient, Depends(get_proxy)]
TraceId = Annotated[str, Depends(get_trace_id)]
Dispatcher = Annotated[WebhookDispatcher, Depends(get_dispatcher)]
