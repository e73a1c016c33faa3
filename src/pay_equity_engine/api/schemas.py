"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Report schemas
# ============================================================================


class JobClassificationResponse(BaseModel):
    """Schema for a job class within a report."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_number: int
    title: str
    points: int
    male_count: int
    female_count: int
    min_salary: Decimal
    max_salary: Decimal
    years_to_max: Decimal
    years_service_pay: Decimal | None = None
    exceptional_service_code: str | None = None


class ReportResponse(BaseModel):
    """Schema for report response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    jurisdiction_id: UUID
    report_year: int
    case_number: int
    case_description: str
    case_status: str
    compliance_status: str
    approval_status: str
    submitted_at: datetime | None = None
    submission_deadline: datetime | None = None
    submitted_on_time: bool | None = None
    requires_manual_review: bool
    auto_approved: bool
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    certificate_generated_at: datetime | None = None
    test_results: dict[str, Any] | None = None
    test_applicability: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime


class ReportDetailResponse(ReportResponse):
    """Report with its job classes."""

    job_classifications: list[JobClassificationResponse] = []


# ============================================================================
# Compliance schemas
# ============================================================================


class ComplianceResponse(BaseModel):
    """Analysis of a report's current job classes (no state change)."""

    report_id: UUID
    is_compliant: bool
    requires_manual_review: bool
    message: str
    failed_tests: list[str]
    summary: str
    test_results: dict[str, Any]
    test_applicability: dict[str, Any]


# ============================================================================
# Approval schemas
# ============================================================================


class ApprovalRequest(BaseModel):
    """Schema for a reviewer approval."""

    reason_code: str
    notes: str | None = None


class RejectionRequest(BaseModel):
    """Schema for a reviewer rejection."""

    reason_code: str
    notes: str = ""


class CertificateResponse(BaseModel):
    """Schema for certificate metadata (data omitted)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    report_id: UUID
    report_year: int
    file_name: str
    generated_by: str | None = None
    created_at: datetime


class HistoryEntryResponse(BaseModel):
    """Schema for an approval history entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    report_id: UUID
    action_type: str
    previous_status: str | None = None
    new_status: str
    approved_by: str | None = None
    reason: str | None = None
    notes: str | None = None
    created_at: datetime


class HistoryListResponse(BaseModel):
    """Schema for listing approval history."""

    items: list[HistoryEntryResponse]
    total: int


class TransitionResponse(BaseModel):
    """Schema for the result of an approval operation."""

    report: ReportResponse
    changed: bool
    auto_approved: bool = False
    history_entry: HistoryEntryResponse | None = None
    certificate: CertificateResponse | None = None
    notifications_queued: int = 0


class ReasonCodesResponse(BaseModel):
    """Standard reason codes offered to reviewers."""

    approval: list[str]
    rejection: list[str]


# ============================================================================
# Deadline schemas
# ============================================================================


class DeadlineResponse(BaseModel):
    """Schema for a reporting year's deadline position."""

    report_year: int
    as_of: date
    deadline: datetime
    formatted_deadline: str
    days_until_due: int
    days_overdue: int
    status: str
    overdue_severity: str
    next_reminder: str | None = None


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = Field(default=None)
