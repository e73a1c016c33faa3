"""Report approval state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from pay_equity_engine.errors import InvalidState


class ApprovalStatus(str, Enum):
    """Report approval status values."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    AUTO_APPROVED = "auto_approved"
    REJECTED = "rejected"


class ComplianceStatus(str, Enum):
    UNKNOWN = "unknown"
    IN_COMPLIANCE = "In Compliance"
    OUT_OF_COMPLIANCE = "Out of Compliance"


class CaseStatus(str, Enum):
    """Case status shown to jurisdictions: submission lifecycle plus verdict."""

    PRIVATE = "Private"
    SHARED = "Shared"
    SUBMITTED = "Submitted"
    IN_COMPLIANCE = "In Compliance"
    OUT_OF_COMPLIANCE = "Out of Compliance"


class HistoryAction(str, Enum):
    """Approval history action types."""

    MANUAL_REVIEW_REQUIRED = "manual_review_required"
    AUTO_APPROVED = "auto_approved"
    FAILED_TESTS = "failed_tests"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalStateMachine:
    """State machine for report approval transitions.

    Allowed transitions:
    - draft → pending (routed to a reviewer)
    - draft → auto_approved / approved / rejected
    - pending → pending (re-evaluated, still awaiting a reviewer)
    - pending → auto_approved / approved / rejected

    approved, auto_approved and rejected are terminal.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        ApprovalStatus.DRAFT: [
            ApprovalStatus.PENDING,
            ApprovalStatus.AUTO_APPROVED,
            ApprovalStatus.APPROVED,
            ApprovalStatus.REJECTED,
        ],
        ApprovalStatus.PENDING: [
            ApprovalStatus.PENDING,
            ApprovalStatus.AUTO_APPROVED,
            ApprovalStatus.APPROVED,
            ApprovalStatus.REJECTED,
        ],
        ApprovalStatus.APPROVED: [],
        ApprovalStatus.AUTO_APPROVED: [],
        ApprovalStatus.REJECTED: [],
    }

    TERMINAL = {
        ApprovalStatus.APPROVED,
        ApprovalStatus.AUTO_APPROVED,
        ApprovalStatus.REJECTED,
    }

    # Statuses in which a reviewer may act on the report
    REVIEWABLE = {
        ApprovalStatus.DRAFT,
        ApprovalStatus.PENDING,
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str, operation: str) -> None:
        """Validate a transition, raising InvalidState if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidState(
                from_status, operation, f"transition to '{to_status}' is not allowed"
            )

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return status in cls.TERMINAL

    @classmethod
    def is_reviewable(cls, status: str) -> bool:
        """Check if a human decision may be recorded in this status."""
        return status in cls.REVIEWABLE

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])

    @classmethod
    def history_action_for(cls, to_status: str, compliance_failed: bool = False) -> HistoryAction:
        """History action recorded for a transition into ``to_status``."""
        if to_status == ApprovalStatus.AUTO_APPROVED:
            return HistoryAction.AUTO_APPROVED
        if to_status == ApprovalStatus.APPROVED:
            return HistoryAction.APPROVED
        if to_status == ApprovalStatus.REJECTED:
            return HistoryAction.REJECTED
        if compliance_failed:
            return HistoryAction.FAILED_TESTS
        return HistoryAction.MANUAL_REVIEW_REQUIRED
