"""Approval history: append-only audit trail and reason rendering."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pay_equity_engine.models import ApprovalHistoryEntry, Report

_TEST_LABELS = {
    "statistical": "Statistical analysis",
    "salary_range": "Salary range",
    "exceptional_service_pay": "Exceptional service pay",
}


class AuditTrail:
    """Writes and reads ``approval_history`` entries.

    Entries are only ever inserted; nothing here updates or deletes them.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(
        self,
        report: Report,
        action_type: str,
        previous_status: str | None,
        new_status: str,
        approved_by: str | None = None,
        reason: str | None = None,
        notes: str | None = None,
    ) -> ApprovalHistoryEntry:
        """Add a history entry for a transition of ``report``."""
        entry = ApprovalHistoryEntry(
            report_id=report.id,
            jurisdiction_id=report.jurisdiction_id,
            action_type=action_type,
            previous_status=previous_status,
            new_status=new_status,
            approved_by=approved_by,
            reason=reason,
            notes=notes,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_for_report(self, report_id: UUID) -> list[ApprovalHistoryEntry]:
        """History of one report, oldest first."""
        result = await self.session.execute(
            select(ApprovalHistoryEntry)
            .where(ApprovalHistoryEntry.report_id == report_id)
            .order_by(ApprovalHistoryEntry.created_at)
        )
        return list(result.scalars().all())


def _format_ratio(value: Any) -> str:
    return f"{value}%" if value is not None else "n/a"


def _describe_test(
    name: str,
    results: dict[str, Any] | None,
    applicability: dict[str, Any] | None,
) -> str:
    label = _TEST_LABELS[name]
    if applicability and not applicability.get("applicable", True):
        return f"{label}: not applicable ({applicability.get('reason')})"
    if results is None:
        return f"{label}: not evaluated"

    verdict = "passed" if results.get("passed") else "failed"
    text = (
        f"{label}: {verdict} with ratio {_format_ratio(results.get('ratio'))} "
        f"(threshold {_format_ratio(results.get('threshold'))})"
    )
    if name == "statistical" and results.get("t_value") is not None:
        significance = "significant" if results.get("significant") else "not significant"
        text += (
            f", t = {results['t_value']} with {results.get('degrees_of_freedom')} df, "
            f"{significance}"
        )
    return text


def render_compliance_summary(
    test_results: dict[str, Any] | None,
    test_applicability: dict[str, Any] | None,
) -> str:
    """Human-readable pass/fail reason built from a stored analysis snapshot."""
    if not test_results:
        return "No compliance analysis on record"

    applicability = test_applicability or {}
    lines = [
        _describe_test(name, test_results.get(name), applicability.get(name))
        for name in _TEST_LABELS
    ]

    if test_results.get("requires_manual_review"):
        headline = "Alternative Analysis required: three or fewer male-dominated classes"
    elif test_results.get("is_compliant"):
        headline = "Passed all compliance tests"
    else:
        headline = "Failed one or more compliance tests"

    return f"{headline}. " + "; ".join(lines) + "."


def summarize_report(report: Report) -> str:
    """Compliance summary for the snapshot stored on a report."""
    return render_compliance_summary(report.test_results, report.test_applicability)
