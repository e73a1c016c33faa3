"""Report review and approval endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Path, status

from pay_equity_engine.api.dependencies import Approvals, DbSession, Dispatcher, Reviewer
from pay_equity_engine.api.schemas import (
    ApprovalRequest,
    CertificateResponse,
    ComplianceResponse,
    ErrorResponse,
    HistoryEntryResponse,
    HistoryListResponse,
    ReasonCodesResponse,
    RejectionRequest,
    ReportDetailResponse,
    ReportResponse,
    TransitionResponse,
)
from pay_equity_engine.services import (
    APPROVAL_REASONS,
    REJECTION_REASONS,
    AuditTrail,
    TransitionOutcome,
    render_compliance_summary,
)

router = APIRouter(prefix="/reports", tags=["reports"])


def _transition_response(
    outcome: TransitionOutcome,
    dispatcher: Dispatcher,
    background_tasks: BackgroundTasks,
) -> TransitionResponse:
    """Build the response and queue notifications to run after it is sent."""
    if outcome.notifications:
        background_tasks.add_task(dispatcher.deliver, outcome.notifications)

    return TransitionResponse(
        report=ReportResponse.model_validate(outcome.report),
        changed=outcome.changed,
        auto_approved=outcome.auto_approved,
        history_entry=(
            HistoryEntryResponse.model_validate(outcome.history_entry)
            if outcome.history_entry
            else None
        ),
        certificate=(
            CertificateResponse.model_validate(outcome.certificate)
            if outcome.certificate
            else None
        ),
        notifications_queued=len(outcome.notifications),
    )


@router.get("/reason-codes", response_model=ReasonCodesResponse)
async def list_reason_codes() -> ReasonCodesResponse:
    """Standard reason codes for reviewer decisions."""
    return ReasonCodesResponse(
        approval=list(APPROVAL_REASONS),
        rejection=list(REJECTION_REASONS),
    )


@router.get(
    "/{report_id}",
    response_model=ReportDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_report(
    service: Approvals,
    report_id: Annotated[UUID, Path()],
) -> ReportDetailResponse:
    """Get a report with its job classes."""
    report = await service.get_report(report_id)
    return ReportDetailResponse.model_validate(report)


@router.get(
    "/{report_id}/compliance",
    response_model=ComplianceResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def get_compliance(
    service: Approvals,
    report_id: Annotated[UUID, Path()],
) -> ComplianceResponse:
    """Analyze a report's job classes without changing its status."""
    result = await service.analyze_report(report_id)
    test_results = result.test_results_snapshot()
    test_applicability = result.test_applicability_snapshot()
    return ComplianceResponse(
        report_id=report_id,
        is_compliant=result.is_compliant,
        requires_manual_review=result.requires_manual_review,
        message=result.message,
        failed_tests=result.failed_tests(),
        summary=render_compliance_summary(test_results, test_applicability),
        test_results=test_results,
        test_applicability=test_applicability,
    )


@router.get(
    "/{report_id}/history",
    response_model=HistoryListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_history(
    db: DbSession,
    service: Approvals,
    report_id: Annotated[UUID, Path()],
) -> HistoryListResponse:
    """Approval history of a report, oldest first."""
    await service.get_report(report_id)
    entries = await AuditTrail(db).list_for_report(report_id)
    return HistoryListResponse(
        items=[HistoryEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )


@router.post(
    "/{report_id}/auto-process",
    response_model=TransitionResponse,
    status_code=status.HTTP_200_OK,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def auto_process(
    service: Approvals,
    dispatcher: Dispatcher,
    background_tasks: BackgroundTasks,
    report_id: Annotated[UUID, Path()],
) -> TransitionResponse:
    """Run deadline and compliance checks and dispose of the report."""
    outcome = await service.auto_process(report_id)
    return _transition_response(outcome, dispatcher, background_tasks)


@router.post(
    "/{report_id}/approve",
    response_model=TransitionResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def approve_report(
    service: Approvals,
    dispatcher: Dispatcher,
    background_tasks: BackgroundTasks,
    reviewer: Reviewer,
    payload: ApprovalRequest,
    report_id: Annotated[UUID, Path()],
) -> TransitionResponse:
    """Approve a draft or pending report."""
    outcome = await service.human_approve(
        report_id, payload.reason_code, payload.notes, reviewer
    )
    return _transition_response(outcome, dispatcher, background_tasks)


@router.post(
    "/{report_id}/reject",
    response_model=TransitionResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def reject_report(
    service: Approvals,
    dispatcher: Dispatcher,
    background_tasks: BackgroundTasks,
    reviewer: Reviewer,
    payload: RejectionRequest,
    report_id: Annotated[UUID, Path()],
) -> TransitionResponse:
    """Reject a draft or pending report."""
    outcome = await service.human_reject(
        report_id, payload.reason_code, payload.notes, reviewer
    )
    return _transition_response(outcome, dispatcher, background_tasks)
