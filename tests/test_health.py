"""Health check and static UI tests."""

import pytest


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "leadrelay"
    assert data["version"] == "1.0.0"


@pytest.mark.asyncio
async def test_static_ui_is_served(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert "Lead Relay" in response.text


@pytest.mark.asyncio
async def test_trace_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Trace-Id": "trc_fixed_value"})
    assert response.headers["X-Trace-Id"] == "trc_fixed_value"
