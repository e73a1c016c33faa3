"""ORM models."""

from pay_equity_engine.models.base import Base, TimestampMixin, utcnow
from pay_equity_engine.models.jurisdiction import Contact, Jurisdiction
from pay_equity_engine.models.notification import EmailLog
from pay_equity_engine.models.report import (
    ApprovalHistoryEntry,
    ComplianceCertificate,
    JobClassification,
    Report,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "Jurisdiction",
    "Contact",
    "EmailLog",
    "Report",
    "JobClassification",
    "ComplianceCertificate",
    "ApprovalHistoryEntry",
]
