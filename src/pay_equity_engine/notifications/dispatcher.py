"""Post-commit delivery of notification requests.

Delivery runs after the transition has been committed. A failure to deliver
one notification is logged and reported in the results; it never raises and
never affects other requests in the batch.
"""

from __future__ import annotations

import logging
from typing import Sequence

from pay_equity_engine.ports.base import DeliveryResult, NotificationRequest, Notifier

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Sends a batch of requests through a ``Notifier`` with failure isolation."""

    def __init__(self, notifier: Notifier):
        self.notifier = notifier

    async def deliver(self, requests: Sequence[NotificationRequest]) -> list[DeliveryResult]:
        results: list[DeliveryResult] = []
        for request in requests:
            try:
                result = await self.notifier.send(request)
            except Exception as e:
                logger.exception(
                    "Notifier %s failed for %s to %s",
                    type(self.notifier).__name__,
                    request.notification_type,
                    request.recipient_email,
                )
                result = DeliveryResult(request=request, ok=False, message=str(e))
            else:
                if not result.ok:
                    logger.warning(
                        "Delivery of %s to %s failed: %s",
                        request.notification_type,
                        request.recipient_email,
                        result.message,
                    )
            results.append(result)

        delivered = sum(1 for r in results if r.ok)
        logger.info("Delivered %d of %d notification(s)", delivered, len(results))
        return results
