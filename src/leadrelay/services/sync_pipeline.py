"""Sync ingestion: fetch new contacts, dedup, batch-insert, forward.

Stages run strictly in order and each one gates the next:

1. fetch up to ``added`` records from Nango for the event's connection
2. resolve the owning connection row in Airtable
3. existence-check every record by source id, one request at a time
4. insert fresh records in batches of ``BATCH_LIMIT``
5. forward every inserted record to the automation webhook concurrently

The existence check and the insert are separate requests, so two sync
events carrying the same source id and handled at the same time can both
insert it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from leadrelay.errors.exceptions import PreconditionError, StoreError
from leadrelay.integrations.airtable import AirtableStore, field_equals
from leadrelay.integrations.field_maps import BATCH_LIMIT, CONNECTIONS, LEADS
from leadrelay.integrations.forwarder import AutomationForwarder, ForwardReport
from leadrelay.integrations.nango import NangoClient
from leadrelay.models.events import WebhookEvent
from leadrelay.models.records import FetchedContact, StoredRecord
from leadrelay.services.lead_mapping import build_forwarded_lead, build_lead_fields

logger = logging.getLogger(__name__)


def chunked(items: list, size: int = BATCH_LIMIT) -> list[list]:
    """Split ``items`` into consecutive groups of at most ``size``."""
    if size < 1:
        raise ValueError("size must be positive")
    return [items[i:i + size] for i in range(0, len(items), size)]


@dataclass
class SyncOutcome:
    fetched: int = 0
    fresh: int = 0
    stored: list[StoredRecord] = field(default_factory=list)
    forwarded: ForwardReport = field(default_factory=ForwardReport)

    @property
    def stored_count(self) -> int:
        return len(self.stored)

    @property
    def message(self) -> str:
        if self.fetched == 0:
            return "No new contacts added"
        if self.fresh == 0:
            return "No new unique leads"
        return f"Stored & forwarded {self.stored_count} new leads"

    def to_response(self) -> dict:
        body = {"success": True, "message": self.message}
        if self.fetched:
            body["stored"] = self.stored_count
            body["forwarded"] = len(self.forwarded.delivered)
        return body


class SyncIngestionPipeline:
    def __init__(
        self,
        store: AirtableStore,
        proxy: NangoClient,
        forwarder: AutomationForwarder,
        *,
        leads_table: str,
        connections_table: str,
        default_model: str = "Contact",
    ) -> None:
        self._store = store
        self._proxy = proxy
        self._forwarder = forwarder
        self._leads_table = leads_table
        self._connections_table = connections_table
        self._default_model = default_model

    async def run(self, event: WebhookEvent) -> SyncOutcome:
        added = event.added_count
        if added <= 0:
            return SyncOutcome()

        model = event.model or self._default_model
        contacts = await self._proxy.fetch_records(
            model,
            event.connection_id,
            event.provider_config_key,
            limit=added,
        )
        contacts = contacts[:added]
        if not contacts:
            return SyncOutcome()

        outcome = SyncOutcome(fetched=len(contacts))
        connection = await self.resolve_connection(event.connection_id)

        fresh = await self.filter_fresh(contacts)
        outcome.fresh = len(fresh)
        if not fresh:
            logger.info("All %d fetched contacts already stored", len(contacts))
            return outcome

        pairs = await self.insert_leads(fresh, event.provider_config_key, connection.id)
        outcome.stored = [stored for _, stored in pairs]

        leads = [build_forwarded_lead(contact, stored, event.provider_config_key) for contact, stored in pairs]
        outcome.forwarded = await self._forwarder.forward_all(leads)
        if outcome.forwarded.failed:
            logger.warning(
                "%d of %d leads could not be forwarded: %s",
                len(outcome.forwarded.failed),
                outcome.forwarded.attempted,
                ", ".join(outcome.forwarded.failed),
            )
        return outcome

    async def resolve_connection(self, connection_id: str) -> StoredRecord:
        record = await self._store.find_first(
            self._connections_table,
            field_equals(CONNECTIONS.connection_id, connection_id),
        )
        if record is None:
            raise PreconditionError(
                f"No connection record found for connection {connection_id}",
                details={"connection_id": connection_id},
            )
        return record

    async def filter_fresh(self, contacts: list[FetchedContact]) -> list[FetchedContact]:
        """Keep contacts whose source id is not yet stored, in input order."""
        fresh: list[FetchedContact] = []
        seen: set[str] = set()
        for contact in contacts:
            if not contact.id:
                logger.warning("Skipping contact without a source id")
                continue
            if contact.id in seen:
                continue
            seen.add(contact.id)
            if await self._store.exists(self._leads_table, field_equals(LEADS.source_id, contact.id)):
                continue
            fresh.append(contact)
        return fresh

    async def insert_leads(
        self,
        contacts: list[FetchedContact],
        provider_config_key: str,
        connection_record_id: str,
    ) -> list[tuple[FetchedContact, StoredRecord]]:
        """Insert contacts batch by batch; the first failing batch aborts the rest."""
        pairs: list[tuple[FetchedContact, StoredRecord]] = []
        for batch in chunked(contacts):
            rows = [build_lead_fields(c, provider_config_key, connection_record_id) for c in batch]
            created = await self._store.create_records(self._leads_table, rows)
            if len(created) != len(batch):
                raise StoreError(
                    f"Airtable insert into {self._leads_table} returned {len(created)} of {len(batch)} records"
                )
            pairs.extend(zip(batch, created))
        return pairs
