"""Remote API clients and the container that wires them from settings."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from leadrelay.config import Settings
from leadrelay.integrations.airtable import AirtableStore
from leadrelay.integrations.forwarder import AutomationForwarder
from leadrelay.integrations.nango import NangoClient


@dataclass
class RelayClients:
    store: AirtableStore
    proxy: NangoClient
    forwarder: AutomationForwarder


def build_clients(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RelayClients:
    """Build every remote client from one configuration value.

    ``transport`` is shared by all clients; tests pass an
    ``httpx.MockTransport`` here.
    """
    return RelayClients(
        store=AirtableStore.from_settings(settings, transport),
        proxy=NangoClient.from_settings(settings, transport),
        forwarder=AutomationForwarder.from_settings(settings, transport),
    )
