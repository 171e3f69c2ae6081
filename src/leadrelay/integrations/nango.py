"""Nango API client: synced records, integration catalog and connect sessions."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from leadrelay.config import Settings
from leadrelay.errors.exceptions import PreconditionError, ProxyError
from leadrelay.models.records import FetchedContact, Tool

logger = logging.getLogger(__name__)


def _require_identifier(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value
    raise PreconditionError("Missing connectionId or providerConfigKey")


class NangoClient:
    """Async client for the Nango REST API, authenticated by secret key."""

    def __init__(
        self,
        secret_key: str,
        *,
        api_url: str = "https://api.nango.dev",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> NangoClient:
        return cls(
            settings.nango_secret_key,
            api_url=settings.nango_api_url,
            timeout=settings.nango_timeout_seconds,
            transport=transport,
        )

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._secret_key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        context: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                return await client.request(
                    method,
                    f"{self._api_url}{path}",
                    params=params,
                    json=body,
                    headers=self._headers(headers),
                )
        except httpx.HTTPError as exc:
            raise ProxyError(f"Nango {context} failed", body=str(exc)) from exc

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    async def fetch_records(
        self,
        model: str,
        connection_id: Any,
        provider_config_key: Any,
        limit: int | None = None,
    ) -> list[FetchedContact]:
        """Fetch synced records of ``model`` for one connection.

        Raises:
            PreconditionError: connection id or provider config key missing.
            ProxyError: Nango answered with a non-2xx status.
        """
        connection_id = _require_identifier(connection_id)
        provider_config_key = _require_identifier(provider_config_key)

        params: dict[str, Any] = {"model": model}
        if limit:
            params["limit"] = limit

        response = await self._send(
            "GET",
            "/records",
            context="records fetch",
            params=params,
            headers={
                "Connection-Id": connection_id,
                "Provider-Config-Key": provider_config_key,
            },
        )
        if not response.is_success:
            raise ProxyError("Failed to fetch contacts", status=response.status_code, body=response.text)

        records = response.json().get("records")
        if not isinstance(records, list):
            return []
        return [FetchedContact.model_validate(r) for r in records]

    # ------------------------------------------------------------------
    # Integrations catalog
    # ------------------------------------------------------------------

    async def list_integrations(self) -> list[Tool]:
        """Return the configured integrations, reduced to what the UI shows."""
        response = await self._send("GET", "/integrations", context="integrations fetch")
        if not response.is_success:
            raise ProxyError("Failed to fetch integrations", status=response.status_code, body=response.text)

        tools = []
        for item in response.json().get("data") or []:
            tools.append(
                Tool(
                    key=item.get("unique_key", ""),
                    provider=item.get("provider"),
                    name=item.get("display_name") or item.get("provider"),
                    logo=item.get("logo"),
                )
            )
        return tools

    # ------------------------------------------------------------------
    # Connect sessions
    # ------------------------------------------------------------------

    async def create_connect_session(
        self,
        end_user: dict[str, Any],
        allowed_integrations: list[str],
    ) -> tuple[int, Any]:
        """Create a connect session and return Nango's status code and body as-is."""
        response = await self._send(
            "POST",
            "/connect/sessions",
            context="session creation",
            body={"end_user": end_user, "allowed_integrations": allowed_integrations},
        )
        try:
            payload = response.json()
        except ValueError:
            payload = {"error": response.text}
        if not response.is_success:
            logger.warning("Nango session creation returned %s: %s", response.status_code, response.text)
        return response.status_code, payload
