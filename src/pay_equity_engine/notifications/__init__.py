"""Notification templates, notifiers and the post-commit dispatcher."""

from pay_equity_engine.notifications.dispatcher import NotificationDispatcher
from pay_equity_engine.notifications.notifiers import EmailLogNotifier, InMemoryNotifier
from pay_equity_engine.notifications.templates import (
    approval_notifications,
    render_body,
    staff_notification,
)

__all__ = [
    "EmailLogNotifier",
    "InMemoryNotifier",
    "NotificationDispatcher",
    "approval_notifications",
    "render_body",
    "staff_notification",
]
