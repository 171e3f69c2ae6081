"""Tests for the Nango API client."""

import pytest

from leadrelay.errors.exceptions import PreconditionError, ProxyError


@pytest.mark.asyncio
async def test_fetch_records_sends_connection_headers(clients, remote):
    remote.nango.records["conn-1"] = [{"id": "c-1", "email": "a@b.com"}]
    contacts = await clients.proxy.fetch_records("Contact", "conn-1", "hubspot", limit=5)

    assert [c.id for c in contacts] == ["c-1"]
    request = remote.nango.requests[0]
    assert request.headers["connection-id"] == "conn-1"
    assert request.headers["provider-config-key"] == "hubspot"
    assert request.headers["authorization"] == "Bearer nango_secret"
    assert request.url.params["model"] == "Contact"
    assert request.url.params["limit"] == "5"


@pytest.mark.parametrize(
    "connection_id, provider_config_key",
    [(None, "hubspot"), ("conn-1", None), ("", "hubspot"), (123, "hubspot"), ("conn-1", {"k": 1})],
)
@pytest.mark.asyncio
async def test_fetch_records_requires_identifiers(clients, remote, connection_id, provider_config_key):
    with pytest.raises(PreconditionError):
        await clients.proxy.fetch_records("Contact", connection_id, provider_config_key)
    assert remote.nango.requests == []


@pytest.mark.asyncio
async def test_fetch_records_error_carries_body(clients, remote):
    remote.nango.failures["/records"] = (404, '{"error":"unknown_connection"}')
    with pytest.raises(ProxyError) as excinfo:
        await clients.proxy.fetch_records("Contact", "conn-1", "hubspot")
    assert "unknown_connection" in excinfo.value.message


@pytest.mark.asyncio
async def test_list_integrations_reduces_catalog(clients, remote):
    remote.nango.integrations = [
        {"unique_key": "hubspot", "provider": "hubspot", "display_name": "HubSpot", "logo": "https://x/h.svg",
         "created_at": "2025-01-01"},
        {"unique_key": "pd", "provider": "pipedrive", "display_name": None, "logo": None},
    ]
    tools = await clients.proxy.list_integrations()
    assert [t.model_dump() for t in tools] == [
        {"key": "hubspot", "provider": "hubspot", "name": "HubSpot", "logo": "https://x/h.svg"},
        {"key": "pd", "provider": "pipedrive", "name": "pipedrive", "logo": None},
    ]


@pytest.mark.asyncio
async def test_create_connect_session_passes_response_through(clients, remote):
    remote.nango.session_response = (400, {"error": {"code": "invalid_body"}})
    status, body = await clients.proxy.create_connect_session({"id": "client-1"}, ["hubspot"])
    assert status == 400
    assert body == {"error": {"code": "invalid_body"}}
