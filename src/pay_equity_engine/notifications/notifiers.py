"""Notifier implementations."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pay_equity_engine.models import EmailLog, utcnow
from pay_equity_engine.notifications.templates import render_body
from pay_equity_engine.ports.base import DeliveryResult, NotificationRequest, Notifier

logger = logging.getLogger(__name__)


class EmailLogNotifier:
    """Records each notification attempt in the ``email_log`` table.

    With a ``transport`` the request is handed to it first and the row
    records whether it went out; a transport error is stored on the row as
    a failed delivery instead of being raised. Without one the row itself
    is the delivery. Uses its own session so delivery bookkeeping is
    independent of the transaction that produced the request.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        transport: Notifier | None = None,
    ):
        self.session_factory = session_factory
        self.transport = transport

    async def send(self, request: NotificationRequest) -> DeliveryResult:
        result = await self._transmit(request)
        entry = EmailLog(
            email_type=request.notification_type.value,
            report_year=request.report_year,
            jurisdiction_id=request.jurisdiction_id,
            report_id=request.report_id,
            recipient_email=request.recipient_email,
            recipient_name=request.recipient_name,
            subject=request.subject,
            body=render_body(request),
            sent_at=result.delivered_at if result.ok else None,
            sent_by=request.requested_by,
            delivery_status="sent" if result.ok else "failed",
            error_message=None if result.ok else result.message,
        )
        async with self.session_factory() as session:
            session.add(entry)
            await session.commit()

        logger.debug("Logged %s email to %s (%s)", request.notification_type.value,
                     request.recipient_email, entry.delivery_status)
        return result

    async def _transmit(self, request: NotificationRequest) -> DeliveryResult:
        if self.transport is None:
            return DeliveryResult(request=request, ok=True, delivered_at=utcnow())
        try:
            return await self.transport.send(request)
        except Exception as e:
            logger.warning("Transport failed for %s to %s: %s",
                           request.notification_type.value, request.recipient_email, e)
            return DeliveryResult(request=request, ok=False, message=str(e))


class InMemoryNotifier:
    """Keeps sent requests in a list. Recipients in ``fail_for`` raise."""

    def __init__(self, fail_for: set[str] | None = None):
        self.sent: list[NotificationRequest] = []
        self.fail_for = fail_for or set()

    async def send(self, request: NotificationRequest) -> DeliveryResult:
        if request.recipient_email in self.fail_for:
            raise ConnectionError(f"Mailbox unavailable: {request.recipient_email}")
        self.sent.append(request)
        return DeliveryResult(request=request, ok=True, delivered_at=utcnow())
