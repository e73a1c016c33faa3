"""Pay equity engine services."""

from pay_equity_engine.services.state_machine import (
    ApprovalStateMachine,
    ApprovalStatus,
    CaseStatus,
    ComplianceStatus,
    HistoryAction,
)
from pay_equity_engine.services.audit_service import AuditTrail, render_compliance_summary
from pay_equity_engine.services.approval_service import (
    APPROVAL_REASONS,
    REJECTION_REASONS,
    ApprovalService,
    TransitionOutcome,
)

__all__ = [
    "APPROVAL_REASONS",
    "REJECTION_REASONS",
    "ApprovalService",
    "ApprovalStateMachine",
    "ApprovalStatus",
    "AuditTrail",
    "CaseStatus",
    "ComplianceStatus",
    "HistoryAction",
    "TransitionOutcome",
    "render_compliance_summary",
]
