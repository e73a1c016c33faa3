"""Report, job classification, certificate and approval history models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pay_equity_engine.models.base import (
    Base,
    TimestampMixin,
    UTCDateTime,
    UUIDPrimaryKeyMixin,
    utcnow,
)

if TYPE_CHECKING:
    from pay_equity_engine.models.jurisdiction import Jurisdiction


class Report(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A jurisdiction's pay equity report for one reporting year.

    Field names and the approval_status values are read by the review UI and
    the reports list; treat them as a compatibility surface.
    """

    __tablename__ = "reports"

    jurisdiction_id: Mapped[UUID] = mapped_column(
        ForeignKey("jurisdictions.id", ondelete="RESTRICT"),
        nullable=False,
    )
    report_year: Mapped[int] = mapped_column(Integer, nullable=False)
    case_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    case_description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    case_status: Mapped[str] = mapped_column(String, nullable=False, default="Private")
    compliance_status: Mapped[str] = mapped_column(String, nullable=False, default="unknown")
    approval_status: Mapped[str] = mapped_column(String, nullable=False, default="draft")

    submitted_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    submission_deadline: Mapped[datetime | None] = mapped_column(
        UTCDateTime(), nullable=True
    )
    submitted_on_time: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    requires_manual_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    auto_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    approved_by: Mapped[str | None] = mapped_column(String, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    certificate_generated_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(), nullable=True
    )

    # Snapshot of the last compliance run
    test_results: Mapped[dict[str, Any] | None] = mapped_column(nullable=True)
    test_applicability: Mapped[dict[str, Any] | None] = mapped_column(nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "jurisdiction_id", "report_year", "case_number", name="reports_case_unique"
        ),
        CheckConstraint(
            "approval_status IN ('draft', 'pending', 'approved', 'auto_approved', 'rejected')",
            name="reports_approval_status_check",
        ),
        CheckConstraint(
            "(approved_by IS NULL) = (approved_at IS NULL)",
            name="reports_approved_pair_check",
        ),
    )

    # Relationships
    jurisdiction: Mapped[Jurisdiction] = relationship()
    job_classifications: Mapped[list[JobClassification]] = relationship(
        back_populates="report",
        order_by="JobClassification.job_number",
    )


class JobClassification(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """One job class row within a report."""

    __tablename__ = "job_classifications"

    report_id: Mapped[UUID] = mapped_column(
        ForeignKey("reports.id", ondelete="CASCADE"),
        nullable=False,
    )
    job_number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    male_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    female_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    max_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    years_to_max: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=0)
    years_service_pay: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    exceptional_service_code: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("report_id", "job_number", name="job_classifications_number_unique"),
        CheckConstraint("points > 0", name="job_classifications_points_check"),
        CheckConstraint(
            "male_count >= 0 AND female_count >= 0 AND male_count + female_count > 0",
            name="job_classifications_counts_check",
        ),
        CheckConstraint(
            "max_salary >= min_salary", name="job_classifications_salary_range_check"
        ),
        CheckConstraint("years_to_max >= 0", name="job_classifications_years_check"),
    )

    report: Mapped[Report] = relationship(back_populates="job_classifications")


class ComplianceCertificate(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Certificate issued once a report is found in compliance."""

    __tablename__ = "compliance_certificates"

    report_id: Mapped[UUID] = mapped_column(
        ForeignKey("reports.id", ondelete="RESTRICT"),
        nullable=False,
    )
    jurisdiction_id: Mapped[UUID] = mapped_column(
        ForeignKey("jurisdictions.id", ondelete="RESTRICT"),
        nullable=False,
    )
    report_year: Mapped[int] = mapped_column(Integer, nullable=False)
    certificate_data: Mapped[str] = mapped_column(Text, nullable=False)
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    generated_by: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("report_id", name="compliance_certificates_report_unique"),
    )


class ApprovalHistoryEntry(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Append-only record of one approval status transition."""

    __tablename__ = "approval_history"

    report_id: Mapped[UUID] = mapped_column(
        ForeignKey("reports.id", ondelete="RESTRICT"),
        nullable=False,
    )
    jurisdiction_id: Mapped[UUID] = mapped_column(
        ForeignKey("jurisdictions.id", ondelete="RESTRICT"),
        nullable=False,
    )
    action_type: Mapped[str] = mapped_column(String, nullable=False)
    previous_status: Mapped[str | None] = mapped_column(String, nullable=True)
    new_status: Mapped[str] = mapped_column(String, nullable=False)
    approved_by: Mapped[str | None] = mapped_column(String, nullable=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "action_type IN ('manual_review_required', 'auto_approved', 'failed_tests', "
            "'approved', 'rejected')",
            name="approval_history_action_type_check",
        ),
    )
