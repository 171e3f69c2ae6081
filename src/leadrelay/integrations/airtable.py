"""Airtable REST client: formula lookups and record creation."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from leadrelay.config import Settings
from leadrelay.errors.exceptions import StoreError
from leadrelay.integrations.field_maps import BATCH_LIMIT
from leadrelay.models.records import StoredRecord

logger = logging.getLogger(__name__)


def quote_formula_string(value: str) -> str:
    """Render ``value`` as a double-quoted Airtable formula string literal."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def field_equals(field: str, value: str) -> str:
    """Build a ``{Field}="value"`` filter formula."""
    return "{" + field + "}=" + quote_formula_string(value)


class AirtableStore:
    """Thin async client over one Airtable base.

    Every call is a single request: no pagination, no retry. A non-2xx
    response raises :class:`StoreError` carrying the response body.
    """

    def __init__(
        self,
        base_id: str,
        api_token: str,
        *,
        api_url: str = "https://api.airtable.com/v0",
        timeout: float | None = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_id = base_id
        self._api_token = api_token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> AirtableStore:
        return cls(
            settings.airtable_base_id,
            settings.airtable_api_token,
            api_url=settings.airtable_api_url,
            timeout=settings.airtable_timeout_seconds,
            transport=transport,
        )

    def table_url(self, table: str) -> str:
        return f"{self._api_url}/{self._base_id}/{table}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_token}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        table: str,
        *,
        context: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = self.table_url(table)
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=body,
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            raise StoreError(f"Airtable {context} failed", body=str(exc)) from exc

        if not response.is_success:
            raise StoreError(
                f"Airtable {context} failed",
                status=response.status_code,
                body=response.text,
            )
        return response.json()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def select(
        self,
        table: str,
        formula: str,
        max_records: int | None = None,
    ) -> list[StoredRecord]:
        """Return the rows of ``table`` matching ``formula`` (first page only)."""
        params: dict[str, Any] = {"filterByFormula": formula}
        if max_records is not None:
            params["maxRecords"] = max_records
        data = await self._request("GET", table, context=f"lookup in {table}", params=params)
        return [StoredRecord.model_validate(r) for r in data.get("records") or []]

    async def find_first(self, table: str, formula: str) -> StoredRecord | None:
        records = await self.select(table, formula, max_records=1)
        return records[0] if records else None

    async def exists(self, table: str, formula: str) -> bool:
        return await self.find_first(table, formula) is not None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_records(
        self,
        table: str,
        rows: list[dict[str, Any]],
    ) -> list[StoredRecord]:
        """Insert up to ``BATCH_LIMIT`` rows in one request.

        Returns the created rows in request order.
        """
        if not rows:
            return []
        if len(rows) > BATCH_LIMIT:
            raise ValueError(f"Airtable accepts at most {BATCH_LIMIT} records per write, got {len(rows)}")

        data = await self._request(
            "POST",
            table,
            context=f"insert into {table}",
            body={"records": [{"fields": fields} for fields in rows]},
        )
        created = [StoredRecord.model_validate(r) for r in data.get("records") or []]
        logger.info("Created %d record(s) in %s", len(created), table)
        return created

    async def create_record(self, table: str, fields: dict[str, Any]) -> StoredRecord:
        """Insert a single row; used for connection records."""
        created = await self.create_records(table, [fields])
        if not created:
            raise StoreError(f"Airtable insert into {table} returned no record")
        return created[0]
