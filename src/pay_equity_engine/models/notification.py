"""Email delivery log model."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pay_equity_engine.models.base import Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin


class EmailLog(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """One notification delivery attempt."""

    __tablename__ = "email_log"

    email_type: Mapped[str] = mapped_column(String, nullable=False)
    report_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    jurisdiction_id: Mapped[UUID | None] = mapped_column(nullable=True)
    report_id: Mapped[UUID | None] = mapped_column(nullable=True)
    recipient_email: Mapped[str] = mapped_column(String, nullable=False)
    recipient_name: Mapped[str | None] = mapped_column(String, nullable=True)
    subject: Mapped[str] = mapped_column(String, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    sent_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    sent_by: Mapped[str | None] = mapped_column(String, nullable=True)
    delivery_status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "delivery_status IN ('sent', 'failed', 'pending')",
            name="email_log_delivery_status_check",
        ),
    )
