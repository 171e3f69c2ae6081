"""Records authorized connections in the Connecters table."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any

from leadrelay.integrations.airtable import AirtableStore, field_equals
from leadrelay.integrations.field_maps import CONNECTIONS, USERS
from leadrelay.models.enums import ConnectionStatus
from leadrelay.models.events import WebhookEvent
from leadrelay.models.records import StoredRecord

logger = logging.getLogger(__name__)


class ConnectionRecorder:
    """Turns an auth event into a new connection row.

    The user-directory lookup is best effort; the insert is not.
    """

    def __init__(self, store: AirtableStore, *, connections_table: str, users_table: str) -> None:
        self._store = store
        self._connections_table = connections_table
        self._users_table = users_table

    async def lookup_user(self, email: str | None) -> StoredRecord | None:
        """Resolve a directory user by email, or None on any failure."""
        if not email:
            return None
        try:
            return await self._store.find_first(self._users_table, field_equals(USERS.email, email))
        except Exception as exc:
            logger.warning("Error fetching user %s from directory: %s", email, exc)
            return None

    def build_fields(
        self,
        event: WebhookEvent,
        user: StoredRecord | None,
        today: date | None = None,
    ) -> dict[str, Any]:
        today = today or datetime.now(timezone.utc).date()
        end_user = event.end_user
        client_id = (end_user.id if end_user else None) or ""

        fields: dict[str, Any] = {
            CONNECTIONS.connection_id: event.connection_id or "",
            CONNECTIONS.provider: event.provider or "",
            CONNECTIONS.provider_config_key: event.provider_config_key or "",
            CONNECTIONS.client_id: client_id,
            CONNECTIONS.status: ConnectionStatus.CONNECTED if event.success is True else ConnectionStatus.FAILED,
            CONNECTIONS.environment: event.environment or "",
            CONNECTIONS.operation: event.operation or "",
            CONNECTIONS.created: today.isoformat(),
        }

        if user is not None:
            directory = user.fields
            name = directory.get(USERS.name)
            if name:
                fields[CONNECTIONS.name] = name
                fields[CONNECTIONS.user] = name
            fields[CONNECTIONS.user_id] = directory.get(USERS.user_id) or client_id
            # Linked-record columns; Airtable rejects empty strings for these
            for source, target in (
                (USERS.chaser, CONNECTIONS.chaser),
                (USERS.chaser_id, CONNECTIONS.chaser_id),
                (USERS.leads, CONNECTIONS.leads),
            ):
                if directory.get(source):
                    fields[target] = directory[source]
        elif end_user and end_user.display_name:
            fields[CONNECTIONS.name] = end_user.display_name

        return fields

    async def record(self, event: WebhookEvent) -> StoredRecord:
        email = event.end_user.email if event.end_user else None
        user = await self.lookup_user(email)
        fields = self.build_fields(event, user)
        record = await self._store.create_record(self._connections_table, fields)
        logger.info(
            "Recorded connection %s (%s) as %s",
            event.connection_id,
            event.provider_config_key,
            record.id,
        )
        return record
