"""Inbound Nango webhook endpoint."""

import json
import logging
from typing import Any

from fastapi import APIRouter, Request

from leadrelay.dependencies import Dispatcher, TraceId
from leadrelay.errors.exceptions import RelayError, UnhandledError, ValidationError
from leadrelay.logging_config import bind_request_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Webhook"])


async def _read_payload(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise ValidationError("Malformed JSON body") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Invalid webhook type or source")
    return payload


@router.post("/webhook")
async def receive_webhook(request: Request, dispatcher: Dispatcher, trace_id: TraceId) -> dict:
    """Classify a Nango notification and run its handling path.

    Every failure is answered with a JSON error body. A body that is not a
    JSON object, or a notification matching no route, gets a 400.
    """
    try:
        payload = await _read_payload(request)
        connection_id = payload.get("connectionId")
        if isinstance(connection_id, str):
            bind_request_context(trace_id, connection_id=connection_id)
        return await dispatcher.handle(payload)
    except RelayError:
        raise
    except Exception as exc:
        logger.exception("Error handling Nango webhook")
        raise UnhandledError(exc) from exc
