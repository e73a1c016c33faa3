"""Collaborator interfaces and their default implementations."""

from pay_equity_engine.ports.base import (
    CertificateArtifact,
    CertificateRenderer,
    DeliveryResult,
    NotificationRequest,
    NotificationType,
    Notifier,
)
from pay_equity_engine.ports.certificates import TextCertificateRenderer, certificate_file_name

__all__ = [
    "CertificateArtifact",
    "CertificateRenderer",
    "DeliveryResult",
    "NotificationRequest",
    "NotificationType",
    "Notifier",
    "TextCertificateRenderer",
    "certificate_file_name",
]
