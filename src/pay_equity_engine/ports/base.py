"""Protocols and types for the collaborators the approval workflow calls into.

Implementations live outside the core; the workflow only relies on these
signatures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from pay_equity_engine.models import Jurisdiction, Report


@dataclass(frozen=True)
class CertificateArtifact:
    """A durable reference to a rendered certificate."""

    data: str
    file_name: str
    content_type: str = "application/pdf"


class NotificationType(str, Enum):
    """Kinds of notifications the workflow requests."""

    STAFF_NOTIFICATION = "staff_notification"
    APPROVAL_NOTIFICATION = "approval_notification"


@dataclass(frozen=True)
class NotificationRequest:
    """A notification to deliver after the transition has been committed."""

    notification_type: NotificationType
    recipient_email: str
    recipient_name: str | None
    subject: str
    payload: dict[str, Any] = field(default_factory=dict)
    report_id: UUID | None = None
    jurisdiction_id: UUID | None = None
    report_year: int | None = None
    requested_by: str | None = None


@dataclass(frozen=True)
class DeliveryResult:
    """Result of one delivery attempt."""

    request: NotificationRequest
    ok: bool
    message: str = ""
    delivered_at: datetime | None = None


class CertificateRenderer(Protocol):
    """Produces a certificate artifact for a report.

    May be slow and may fail; it must not touch the report row, so the
    caller can cancel or retry it freely.
    """

    async def render(self, report: Report, jurisdiction: Jurisdiction) -> CertificateArtifact:
        ...


class Notifier(Protocol):
    """Delivers a typed notification to one recipient."""

    async def send(self, request: NotificationRequest) -> DeliveryResult:
        ...
