"""Classifies inbound webhooks and runs the matching handling path."""

from __future__ import annotations

import logging
from typing import Any

from leadrelay.errors.exceptions import ValidationError
from leadrelay.models.enums import EventRoute, EventSource, EventType
from leadrelay.models.events import WebhookEnvelope, WebhookEvent
from leadrelay.services.connection_recorder import ConnectionRecorder
from leadrelay.services.sync_pipeline import SyncIngestionPipeline

logger = logging.getLogger(__name__)


def classify(event: WebhookEnvelope, sync_model: str | None = None) -> EventRoute:
    """Pick the handling path; rules are checked in order, first match wins."""
    if event.from_ == EventSource.NANGO and event.type == EventType.WEBHOOK:
        return EventRoute.PASSTHROUGH
    if event.type == EventType.SYNC and (not sync_model or event.model == sync_model):
        return EventRoute.SYNC
    if event.from_ == EventSource.NANGO and event.type == EventType.AUTH and event.success is True:
        return EventRoute.AUTH
    return EventRoute.REJECTED


class WebhookDispatcher:
    def __init__(
        self,
        pipeline: SyncIngestionPipeline,
        recorder: ConnectionRecorder,
        *,
        sync_model: str | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._recorder = recorder
        self._sync_model = sync_model

    async def handle(self, payload: dict[str, Any]) -> dict:
        """Route a decoded webhook body.

        Only the sync and auth paths validate the rest of the payload, so a
        passthrough or rejected notification never fails on unrelated keys.
        """
        route = classify(WebhookEnvelope.model_validate(payload), self._sync_model)

        if route == EventRoute.PASSTHROUGH:
            logger.info("Provider webhook received: %s", payload.get("data"))
            return {"success": True, "message": "Lead data logged"}

        if route == EventRoute.REJECTED:
            raise ValidationError("Invalid webhook type or source")

        event = WebhookEvent.model_validate(payload)

        if route == EventRoute.SYNC:
            logger.info(
                "Sync event for %s/%s: %d added",
                event.provider_config_key,
                event.connection_id,
                event.added_count,
            )
            outcome = await self._pipeline.run(event)
            return outcome.to_response()

        record = await self._recorder.record(event)
        return {"success": True, "data": {"records": [record.model_dump(by_alias=True)]}}
