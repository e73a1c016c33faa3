"""Approval service - orchestrates automatic and human report dispositions."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterator
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

from pay_equity_engine.analysis.compliance import ComplianceAnalyzer
from pay_equity_engine.analysis.deadlines import on_time, submission_deadline
from pay_equity_engine.config import Settings, get_settings
from pay_equity_engine.errors import (
    ConcurrentModification,
    DependencyFailure,
    InvalidState,
    NotFoundError,
    ValidationError,
)
from pay_equity_engine.models import (
    ApprovalHistoryEntry,
    ComplianceCertificate,
    Jurisdiction,
    Report,
    utcnow,
)
from pay_equity_engine.notifications.templates import approval_notifications, staff_notification
from pay_equity_engine.ports.base import CertificateArtifact, CertificateRenderer
from pay_equity_engine.services.audit_service import AuditTrail, render_compliance_summary
from pay_equity_engine.services.state_machine import (
    ApprovalStateMachine,
    ApprovalStatus,
    CaseStatus,
    ComplianceStatus,
)

if TYPE_CHECKING:
    from pay_equity_engine.analysis.types import ComplianceResult
    from pay_equity_engine.ports.base import NotificationRequest

logger = logging.getLogger(__name__)

APPROVAL_REASONS = (
    "Passed All Tests",
    "Alternative Analysis Approved",
    "Manual Review Passed",
    "Corrective Action Completed",
)

REJECTION_REASONS = (
    "Failed Statistical Analysis Test",
    "Failed Salary Range Test",
    "Failed Exceptional Service Pay Test",
    "Incomplete Data",
    "Invalid Job Classifications",
    "Other",
)

LATE_SUBMISSION_REASON = "late submission"
MANUAL_REVIEW_REASON = "three or fewer male-dominated classes"


@dataclass
class TransitionOutcome:
    """What an operation did to a report.

    ``notifications`` are to be delivered only after the transaction that
    produced them has committed.
    """

    report: Report
    auto_approved: bool = False
    history_entry: ApprovalHistoryEntry | None = None
    certificate: ComplianceCertificate | None = None
    compliance: ComplianceResult | None = None
    notifications: list[NotificationRequest] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.history_entry is not None


class ApprovalService:
    """Service for report disposition.

    Operations:
    - auto_process: deadline check, compliance analysis, automatic disposition
    - human_approve: reviewer approval from draft or pending
    - human_reject: reviewer rejection from draft or pending

    Each operation commits its own transaction and rolls back on any error.
    Status changes are conditional on the status observed at load time, so a
    concurrent change surfaces as ConcurrentModification instead of a lost
    update.
    """

    def __init__(
        self,
        session: AsyncSession,
        renderer: CertificateRenderer,
        settings: Settings | None = None,
        analyzer: ComplianceAnalyzer | None = None,
    ):
        self.session = session
        self.renderer = renderer
        self.settings = settings or get_settings()
        self.analyzer = analyzer or ComplianceAnalyzer()
        self.audit = AuditTrail(session)

    async def get_report(self, report_id: UUID) -> Report:
        """Load a report with its jurisdiction, contacts and job classes."""
        result = await self.session.execute(
            select(Report)
            .where(Report.id == report_id)
            .options(
                selectinload(Report.jurisdiction).selectinload(Jurisdiction.contacts),
                selectinload(Report.job_classifications),
            )
        )
        report = result.scalar_one_or_none()
        if report is None:
            raise NotFoundError("Report", report_id)
        return report

    async def get_certificate(self, report_id: UUID) -> ComplianceCertificate | None:
        result = await self.session.execute(
            select(ComplianceCertificate).where(ComplianceCertificate.report_id == report_id)
        )
        return result.scalar_one_or_none()

    async def analyze_report(self, report_id: UUID) -> ComplianceResult:
        """Run the compliance analysis without changing the report."""
        report = await self.get_report(report_id)
        return self.analyzer.analyze(report.job_classifications)

    async def auto_process(self, report_id: UUID) -> TransitionOutcome:
        """Dispose of a submitted report without a human, where permitted.

        Late submissions and reports with three or fewer male-dominated
        classes go to a reviewer; compliant reports are auto-approved with a
        certificate; the rest are marked out of compliance and go to a
        reviewer. Terminal reports are left untouched.
        """
        async with self._transaction():
            report = await self.get_report(report_id)
            if ApprovalStateMachine.is_terminal(report.approval_status):
                logger.info(
                    "Report %s already %s; auto-process skipped",
                    report.id,
                    report.approval_status,
                )
                return TransitionOutcome(report=report)

            if not on_time(report, self.settings.deadline_tz):
                return await self._route_late_submission(report)

            compliance = self.analyzer.analyze(report.job_classifications)

            if compliance.requires_manual_review:
                outcome = await self._route_manual_review(report, compliance)
            elif compliance.is_compliant:
                outcome = await self._auto_approve(report, compliance)
            else:
                outcome = await self._route_failed_tests(report, compliance)
            return outcome

    async def human_approve(
        self,
        report_id: UUID,
        reason_code: str,
        notes: str | None,
        reviewer: str,
    ) -> TransitionOutcome:
        """Record a reviewer's approval and issue a certificate if none exists."""
        _require_text("reason_code", reason_code)
        _require_text("reviewer", reviewer)

        async with self._transaction():
            report = await self.get_report(report_id)
            self._require_reviewable(report, "approve")
            previous = report.approval_status

            existing = await self.get_certificate(report.id)
            artifact = None if existing else await self._render(report)

            now = utcnow()
            values: dict[str, Any] = {
                "approved_by": reviewer,
                "approved_at": now,
                "case_status": CaseStatus.IN_COMPLIANCE.value,
            }
            if artifact is not None:
                values["certificate_generated_at"] = now
            await self._apply_transition(
                report, previous, ApprovalStatus.APPROVED, "approve", values
            )

            certificate = existing or await self._issue_certificate(report, artifact, reviewer)
            entry = await self._record_history(
                report,
                previous,
                ApprovalStatus.APPROVED,
                approved_by=reviewer,
                reason=reason_code,
                notes=notes or None,
            )
            logger.info("Report %s approved by %s (%s)", report.id, reviewer, reason_code)
            return TransitionOutcome(report=report, history_entry=entry, certificate=certificate)

    async def human_reject(
        self,
        report_id: UUID,
        reason_code: str,
        notes: str,
        reviewer: str,
    ) -> TransitionOutcome:
        """Record a reviewer's rejection. Certificates are left as they are."""
        _require_text("reason_code", reason_code)
        _require_text("notes", notes)
        _require_text("reviewer", reviewer)

        async with self._transaction():
            report = await self.get_report(report_id)
            self._require_reviewable(report, "reject")
            previous = report.approval_status

            await self._apply_transition(
                report,
                previous,
                ApprovalStatus.REJECTED,
                "reject",
                {
                    "approved_by": reviewer,
                    "approved_at": utcnow(),
                    "rejection_reason": f"{reason_code}: {notes}",
                    "case_status": CaseStatus.OUT_OF_COMPLIANCE.value,
                },
            )
            entry = await self._record_history(
                report,
                previous,
                ApprovalStatus.REJECTED,
                approved_by=reviewer,
                reason=reason_code,
                notes=notes,
            )
            logger.info("Report %s rejected by %s (%s)", report.id, reviewer, reason_code)
            return TransitionOutcome(report=report, history_entry=entry)

    async def _route_late_submission(self, report: Report) -> TransitionOutcome:
        previous = report.approval_status
        await self._apply_transition(
            report,
            previous,
            ApprovalStatus.PENDING,
            "auto-process",
            {
                "requires_manual_review": True,
                "submitted_on_time": False,
                "submission_deadline": submission_deadline(
                    report.report_year, self.settings.deadline_tz
                ),
            },
        )
        entry = await self._record_history(
            report,
            previous,
            ApprovalStatus.PENDING,
            approved_by=self.settings.auto_approval_actor,
            reason=LATE_SUBMISSION_REASON,
        )
        logger.info("Report %s submitted late; routed to manual review", report.id)
        return TransitionOutcome(
            report=report,
            history_entry=entry,
            notifications=[self._staff_notice(report, "Late submission - manual review required")],
        )

    async def _route_manual_review(
        self, report: Report, compliance: ComplianceResult
    ) -> TransitionOutcome:
        previous = report.approval_status
        await self._apply_transition(
            report,
            previous,
            ApprovalStatus.PENDING,
            "auto-process",
            {"requires_manual_review": True, **self._analysis_values(report, compliance)},
        )
        entry = await self._record_history(
            report,
            previous,
            ApprovalStatus.PENDING,
            approved_by=self.settings.auto_approval_actor,
            reason=MANUAL_REVIEW_REASON,
        )
        logger.info(
            "Report %s has %d male-dominated classes; Alternative Analysis required",
            report.id,
            compliance.general_info.male_classes,
        )
        return TransitionOutcome(
            report=report,
            history_entry=entry,
            compliance=compliance,
            notifications=[self._staff_notice(report, "Manual review required")],
        )

    async def _auto_approve(
        self, report: Report, compliance: ComplianceResult
    ) -> TransitionOutcome:
        previous = report.approval_status
        actor = self.settings.auto_approval_actor

        existing = await self.get_certificate(report.id)
        artifact = None if existing else await self._render(report)

        now = utcnow()
        values: dict[str, Any] = {
            "approved_by": actor,
            "approved_at": now,
            "auto_approved": True,
            "requires_manual_review": False,
            "case_status": CaseStatus.IN_COMPLIANCE.value,
            "compliance_status": ComplianceStatus.IN_COMPLIANCE.value,
            **self._analysis_values(report, compliance),
        }
        if artifact is not None:
            values["certificate_generated_at"] = now
        await self._apply_transition(
            report, previous, ApprovalStatus.AUTO_APPROVED, "auto-process", values
        )

        certificate = existing or await self._issue_certificate(report, artifact, actor)
        entry = await self._record_history(
            report,
            previous,
            ApprovalStatus.AUTO_APPROVED,
            approved_by=actor,
            reason=render_compliance_summary(report.test_results, report.test_applicability),
        )
        logger.info("Report %s auto-approved; certificate %s", report.id, certificate.file_name)
        return TransitionOutcome(
            report=report,
            auto_approved=True,
            history_entry=entry,
            certificate=certificate,
            compliance=compliance,
            notifications=approval_notifications(
                report,
                report.jurisdiction,
                report.jurisdiction.contacts,
                certificate.file_name,
                requested_by=actor,
            ),
        )

    async def _route_failed_tests(
        self, report: Report, compliance: ComplianceResult
    ) -> TransitionOutcome:
        previous = report.approval_status
        await self._apply_transition(
            report,
            previous,
            ApprovalStatus.PENDING,
            "auto-process",
            {
                "case_status": CaseStatus.OUT_OF_COMPLIANCE.value,
                "compliance_status": ComplianceStatus.OUT_OF_COMPLIANCE.value,
                **self._analysis_values(report, compliance),
            },
        )
        entry = await self._record_history(
            report,
            previous,
            ApprovalStatus.PENDING,
            compliance_failed=True,
            approved_by=self.settings.auto_approval_actor,
            reason=render_compliance_summary(report.test_results, report.test_applicability),
        )
        logger.info(
            "Report %s failed %s; routed to manual review",
            report.id,
            ", ".join(compliance.failed_tests()),
        )
        return TransitionOutcome(
            report=report,
            history_entry=entry,
            compliance=compliance,
            notifications=[
                self._staff_notice(report, "Failed compliance tests - manual review needed")
            ],
        )

    def _analysis_values(self, report: Report, compliance: ComplianceResult) -> dict[str, Any]:
        """Columns that record an on-time submission and its analysis snapshot."""
        return {
            "submitted_on_time": True,
            "submission_deadline": submission_deadline(
                report.report_year, self.settings.deadline_tz
            ),
            "test_results": compliance.test_results_snapshot(),
            "test_applicability": compliance.test_applicability_snapshot(),
        }

    def _staff_notice(self, report: Report, reason: str) -> NotificationRequest:
        return staff_notification(
            report,
            report.jurisdiction,
            reason,
            self.settings.staff_notification_email,
            requested_by=self.settings.auto_approval_actor,
        )

    def _require_reviewable(self, report: Report, operation: str) -> None:
        if not ApprovalStateMachine.is_reviewable(report.approval_status):
            raise InvalidState(
                report.approval_status, operation, "report has already been decided"
            )

    async def _render(self, report: Report) -> CertificateArtifact:
        """Render a certificate. Runs before any write to the report row."""
        try:
            return await self.renderer.render(report, report.jurisdiction)
        except Exception as e:
            logger.exception("Certificate rendering failed for report %s", report.id)
            raise DependencyFailure("certificate renderer", e) from e

    async def _apply_transition(
        self,
        report: Report,
        expected_status: str,
        to_status: ApprovalStatus,
        operation: str,
        values: dict[str, Any],
    ) -> None:
        """Conditionally move ``report`` from ``expected_status`` to ``to_status``.

        Raises:
            InvalidState: If the transition is not allowed.
            ConcurrentModification: If the stored status is no longer
                ``expected_status``.
        """
        ApprovalStateMachine.validate_transition(expected_status, to_status, operation)

        values = {**values, "approval_status": to_status.value, "updated_at": utcnow()}
        result = await self.session.execute(
            update(Report)
            .where(Report.id == report.id, Report.approval_status == expected_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.warning(
                "Report %s changed during %s (expected status %s)",
                report.id,
                operation,
                expected_status,
            )
            raise ConcurrentModification(report.id, expected_status)

        for key, value in values.items():
            set_committed_value(report, key, value)

    async def _record_history(
        self,
        report: Report,
        previous: str,
        to_status: ApprovalStatus,
        compliance_failed: bool = False,
        **fields: Any,
    ) -> ApprovalHistoryEntry:
        """Append the history entry for a transition into ``to_status``."""
        action = ApprovalStateMachine.history_action_for(to_status, compliance_failed)
        return await self.audit.append(
            report,
            action.value,
            previous_status=previous,
            new_status=to_status.value,
            **fields,
        )

    async def _issue_certificate(
        self,
        report: Report,
        artifact: CertificateArtifact | None,
        generated_by: str,
    ) -> ComplianceCertificate:
        """Persist the rendered certificate unless one appeared meanwhile."""
        existing = await self.get_certificate(report.id)
        if existing is not None:
            return existing
        if artifact is None:
            raise DependencyFailure("certificate renderer")

        certificate = ComplianceCertificate(
            report_id=report.id,
            jurisdiction_id=report.jurisdiction_id,
            report_year=report.report_year,
            certificate_data=artifact.data,
            file_name=artifact.file_name,
            generated_by=generated_by,
        )
        self.session.add(certificate)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConcurrentModification(report.id, report.approval_status) from e
        return certificate

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[None]:
        try:
            yield
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise


def _require_text(field_name: str, value: str | None) -> None:
    if value is None or not value.strip():
        raise ValidationError(field_name, "must not be empty")
