"""
Best-effort outbound notifications

Workflows emit ``OutboundEvent``s into a per-request ``NotificationOutbox``.
The outbox is flushed after the response has been sent (FastAPI background
task) and posts each event to the mail dispatch endpoint. Delivery failures are
reported through ``DeliveryReport`` and logged; they never reach the caller of
the operation that emitted the event.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx
from fastapi import BackgroundTasks

from ..config import MAIL_DISPATCH_KEY, MAIL_DISPATCH_URL, NOTIFY_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

# Event kinds understood by the mail dispatch endpoint (/notify/{kind})
EVENT_CONNECTION = "connection"
EVENT_PRODUCT_INTEREST = "product-interest"
EVENT_ENROLLMENT = "enrollment"
EVENT_APPOINTMENT = "appointment"
EVENT_MESSAGE = "message"
EVENT_BLOG_POST = "blog-post"


@dataclass
class OutboundEvent:
    kind: str
    recipient_id: str
    summary: str
    details: dict = field(default_factory=dict)

    def payload(self) -> dict:
        return {"recipient_id": self.recipient_id, "summary": self.summary, **self.details}


@dataclass
class DeliveryReport:
    event: OutboundEvent
    delivered: bool
    error: Optional[str] = None


class NotificationOutbox:
    """Collects events during a request and delivers them afterwards"""

    def __init__(
        self,
        endpoint: Optional[str] = MAIL_DISPATCH_URL,
        timeout: float = NOTIFY_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        dispatch_key: Optional[str] = MAIL_DISPATCH_KEY,
    ):
        self.endpoint = endpoint.rstrip("/") if endpoint else None
        self.timeout = timeout
        self._transport = transport
        self._headers = {"X-Dispatch-Key": dispatch_key} if dispatch_key else {}
        self.pending: list[OutboundEvent] = []

    def emit(self, event: OutboundEvent) -> None:
        logger.debug(f"📨 Queued {event.kind} notification for {event.recipient_id}")
        self.pending.append(event)

    async def flush(self) -> list[DeliveryReport]:
        """Deliver every queued event. Never raises."""
        events, self.pending = self.pending, []
        if not events:
            return []

        if not self.endpoint:
            logger.warning(
                f"⚠️ MAIL_DISPATCH_URL not set - dropping {len(events)} notification(s)"
            )
            return [DeliveryReport(event=e, delivered=False, error="dispatch disabled") for e in events]

        reports = []
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport, headers=self._headers
        ) as client:
            for event in events:
                reports.append(await self._deliver(client, event))
        return reports

    async def _deliver(self, client: httpx.AsyncClient, event: OutboundEvent) -> DeliveryReport:
        url = f"{self.endpoint}/{event.kind}"
        try:
            response = await client.post(url, json=event.payload())
            if response.status_code >= 400:
                logger.error(
                    f"❌ {event.kind} notification to {event.recipient_id} rejected: HTTP {response.status_code}"
                )
                return DeliveryReport(
                    event=event, delivered=False, error=f"HTTP {response.status_code}"
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Failed to send {event.kind} notification to {event.recipient_id}: {e}")
            return DeliveryReport(event=event, delivered=False, error=str(e))

        logger.info(f"✅ {event.kind} notification sent for {event.recipient_id}")
        return DeliveryReport(event=event, delivered=True)


def get_outbox(background_tasks: BackgroundTasks) -> NotificationOutbox:
    """Per-request outbox, flushed once the response is sent"""
    outbox = NotificationOutbox()
    background_tasks.add_task(outbox.flush)
    return outbox
