"""Error taxonomy shared by the analyzer, the approval workflow and the API.

Every error carries a stable ``kind`` string so callers (the review UI, the
HTTP layer) can render an actionable message without matching on classes.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID


class PayEquityError(Exception):
    """Base class for all domain errors."""

    kind = "pay_equity_error"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "detail": str(self)}


class InvalidClassification(PayEquityError):
    """Raised when job classification data is malformed."""

    kind = "invalid_classification"

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("; ".join(problems))

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "problems": self.problems}


class InsufficientData(PayEquityError):
    """Raised when there is nothing to analyze."""

    kind = "insufficient_data"


class InvalidState(PayEquityError):
    """Raised when an operation is attempted from a disallowed report status."""

    kind = "invalid_state"

    def __init__(self, current_status: str, operation: str, reason: str | None = None):
        self.current_status = current_status
        self.operation = operation
        self.reason = reason
        msg = f"Cannot {operation} a report in status '{current_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ConcurrentModification(PayEquityError):
    """Raised when the report changed between read and conditional write."""

    kind = "concurrent_modification"

    def __init__(self, report_id: UUID, expected_status: str):
        self.report_id = report_id
        self.expected_status = expected_status
        super().__init__(
            f"Report {report_id} is no longer in status '{expected_status}'"
        )


class DependencyFailure(PayEquityError):
    """Raised when an external collaborator (renderer, store) fails."""

    kind = "dependency_failure"

    def __init__(self, dependency: str, cause: BaseException | None = None):
        self.dependency = dependency
        self.cause = cause
        msg = f"{dependency} failed"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class ValidationError(PayEquityError):
    """Raised when operation input is missing or malformed."""

    kind = "validation_error"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class NotFoundError(PayEquityError):
    """Raised when a referenced entity does not exist."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")
