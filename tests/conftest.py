"""Shared test fixtures.

Airtable, Nango and the n8n webhook are replaced by small in-memory fakes
served through one ``httpx.MockTransport``.
"""

import json
import re
from collections import defaultdict

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from leadrelay.config import Settings
from leadrelay.integrations import build_clients

AIRTABLE_HOST = "api.airtable.com"
NANGO_HOST = "api.nango.dev"
AUTOMATION_URL = "https://hooks.example.test/webhook/leads"

_FORMULA = re.compile(r'\{([^}]*)\}="((?:[^"\\]|\\.)*)"')


class FakeAirtable:
    """One Airtable base: tables of rows, formula lookups and batched inserts."""

    def __init__(self, base_id: str):
        self.base_id = base_id
        self.tables: dict[str, list[dict]] = defaultdict(list)
        self.lookups: list[tuple[str, str]] = []
        self.writes: list[tuple[str, list[dict]]] = []
        self.lookup_failures: dict[str, tuple[int, str]] = {}
        self.write_failures: dict[str, tuple[int, str]] = {}
        self.fail_write_number: int | None = None
        self.short_response = False
        self._seq = 0

    def _next_id(self) -> str:
        self._seq += 1
        return f"rec{self._seq:05d}"

    def add(self, table: str, fields: dict) -> str:
        record_id = self._next_id()
        self.tables[table].append(
            {"id": record_id, "createdTime": "2026-01-01T00:00:00.000Z", "fields": dict(fields)}
        )
        return record_id

    def writes_to(self, table: str) -> list[list[dict]]:
        return [rows for name, rows in self.writes if name == table]

    def handle(self, request: httpx.Request) -> httpx.Response:
        table = request.url.path.rsplit("/", 1)[-1]

        if request.method == "GET":
            formula = request.url.params.get("filterByFormula", "")
            self.lookups.append((table, formula))
            if table in self.lookup_failures:
                status, body = self.lookup_failures[table]
                return httpx.Response(status, text=body)
            match = _FORMULA.fullmatch(formula)
            if not match:
                return httpx.Response(422, json={"error": {"type": "INVALID_FILTER_BY_FORMULA"}})
            field = match.group(1)
            value = re.sub(r"\\(.)", r"\1", match.group(2))
            rows = [r for r in self.tables[table] if str(r["fields"].get(field)) == value]
            max_records = request.url.params.get("maxRecords")
            if max_records:
                rows = rows[: int(max_records)]
            return httpx.Response(200, json={"records": rows})

        if request.method == "POST":
            payload = json.loads(request.content)
            rows = [r["fields"] for r in payload["records"]]
            self.writes.append((table, rows))
            if table in self.write_failures:
                status, body = self.write_failures[table]
                return httpx.Response(status, text=body)
            if self.fail_write_number is not None and len(self.writes) == self.fail_write_number:
                return httpx.Response(422, text='{"error":"INVALID_RECORDS"}')
            created = []
            for fields in rows:
                record_id = self.add(table, fields)
                created.append(self.tables[table][-1])
                assert created[-1]["id"] == record_id
            if self.short_response:
                created = created[:-1]
            return httpx.Response(200, json={"records": created})

        return httpx.Response(405)


class FakeNango:
    def __init__(self):
        self.records: dict[str, list[dict]] = {}
        self.integrations: list[dict] = []
        self.session_response: tuple[int, dict] = (201, {"data": {"token": "tok_123"}})
        self.failures: dict[str, tuple[int, str]] = {}
        self.requests: list[httpx.Request] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.failures:
            status, body = self.failures[path]
            return httpx.Response(status, text=body)
        if path == "/records":
            connection_id = request.headers.get("connection-id", "")
            return httpx.Response(200, json={"records": self.records.get(connection_id, []), "next_cursor": None})
        if path == "/integrations":
            return httpx.Response(200, json={"data": self.integrations})
        if path == "/connect/sessions":
            status, body = self.session_response
            return httpx.Response(status, json=body)
        return httpx.Response(404, json={"error": "not found"})


class FakeAutomation:
    """The n8n webhook; answers 500 or drops the connection for chosen lead ids."""

    def __init__(self):
        self.payloads: list[dict] = []
        self.reject_ids: set[str] = set()
        self.broken_ids: set[str] = set()

    def handle(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        lead_id = payload.get("Lead ID")
        if lead_id in self.broken_ids:
            raise httpx.ConnectError("connection reset", request=request)
        self.payloads.append(payload)
        if lead_id in self.reject_ids:
            return httpx.Response(500, text="workflow error")
        return httpx.Response(200, json={"message": "Workflow was started"})


class FakeRemote:
    """Dispatches outbound requests to the fake matching their host."""

    def __init__(self, base_id: str):
        self.airtable = FakeAirtable(base_id)
        self.nango = FakeNango()
        self.automation = FakeAutomation()

    def handle(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == AIRTABLE_HOST:
            return self.airtable.handle(request)
        if request.url.host == NANGO_HOST:
            return self.nango.handle(request)
        if str(request.url) == AUTOMATION_URL:
            return self.automation.handle(request)
        raise AssertionError(f"Unexpected request to {request.url}")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def relay_settings() -> Settings:
    return Settings(
        _env_file=None,
        airtable_base_id="appTEST",
        airtable_api_token="pat_test",
        nango_secret_key="nango_secret",
        forward_webhook_url=AUTOMATION_URL,
        json_logs=False,
    )


@pytest.fixture
def remote(relay_settings) -> FakeRemote:
    return FakeRemote(relay_settings.airtable_base_id)


@pytest.fixture
def clients(relay_settings, remote):
    return build_clients(relay_settings, remote.transport)


@pytest.fixture
def app(relay_settings, remote):
    """Create a test application wired to the fakes."""
    from leadrelay.main import create_app

    return create_app(relay_settings, remote.transport)


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
