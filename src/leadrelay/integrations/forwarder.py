"""Automation webhook sink: pushes each stored lead to n8n."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from leadrelay.config import Settings
from leadrelay.models.records import ForwardedLead

logger = logging.getLogger(__name__)


@dataclass
class ForwardReport:
    """Outcome of one fan-out: source ids that were delivered or not."""

    delivered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.failed)


class AutomationForwarder:
    """Posts normalized leads to a fixed, unauthenticated webhook URL.

    Each lead is posted once; a failure is logged and reported but never
    raised, and never affects the other posts of the same fan-out.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> AutomationForwarder:
        return cls(
            settings.forward_webhook_url,
            timeout=settings.forward_timeout_seconds,
            transport=transport,
        )

    async def forward(self, lead: ForwardedLead) -> bool:
        """Post one lead.

        Returns:
            True if the webhook answered with a 2xx status.
        """
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(self._url, json=lead.to_payload())
        except Exception as exc:
            logger.error("Error sending lead %s to automation webhook: %s", lead.source_id, exc)
            return False

        if not response.is_success:
            logger.error(
                "Failed to send lead %s to automation webhook (%s): %s",
                lead.source_id,
                response.status_code,
                response.text,
            )
            return False

        logger.info("Lead %s sent to automation webhook", lead.source_id)
        return True

    async def forward_all(self, leads: list[ForwardedLead]) -> ForwardReport:
        """Post every lead concurrently and wait for all of them."""
        report = ForwardReport()
        if not leads:
            return report

        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(self.forward(lead)) for lead in leads]

        for lead, task in zip(leads, tasks):
            if task.result():
                report.delivered.append(lead.source_id)
            else:
                report.failed.append(lead.source_id)
        return report
