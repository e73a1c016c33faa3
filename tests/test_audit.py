"""Tests for the audit trail and compliance summary rendering."""

from sqlalchemy import select

from factories import female_jobs, male_jobs
from pay_equity_engine.analysis.compliance import analyze_compliance
from pay_equity_engine.models import ApprovalHistoryEntry, Report
from pay_equity_engine.services.audit_service import (
    AuditTrail,
    render_compliance_summary,
    summarize_report,
)


class TestRenderComplianceSummary:
    """Test audit prose rendered from the stored snapshot."""

    def test_compliant_summary(self, compliant_jobs):
        result = analyze_compliance(compliant_jobs)
        summary = render_compliance_summary(
            result.test_results_snapshot(), result.test_applicability_snapshot()
        )

        assert summary.startswith("Passed all compliance tests.")
        assert "Statistical analysis: passed with ratio 100.00%" in summary
        assert "Salary range: passed" in summary
        assert "Exceptional service pay: not applicable (No exceptional service pay reported)" in summary

    def test_failed_summary_includes_t_test(self, failing_jobs):
        result = analyze_compliance(failing_jobs)
        summary = render_compliance_summary(
            result.test_results_snapshot(), result.test_applicability_snapshot()
        )

        assert summary.startswith("Failed one or more compliance tests.")
        assert "Statistical analysis: failed with ratio 50.00% (threshold 80%)" in summary
        assert "t = 6.9282 with 5 df, significant" in summary

    def test_manual_review_headline(self):
        jobs = male_jobs([(100, 3000), (200, 4000)]) + female_jobs([(100, 3000)])
        result = analyze_compliance(jobs)
        summary = render_compliance_summary(
            result.test_results_snapshot(), result.test_applicability_snapshot()
        )
        assert summary.startswith("Alternative Analysis required")

    def test_no_snapshot(self):
        assert render_compliance_summary(None, None) == "No compliance analysis on record"


class TestAuditTrail:
    """Test history persistence."""

    async def test_append_and_list_in_order(self, session, make_report, compliant_jobs):
        report_id = await make_report(compliant_jobs)
        report = await session.get(Report, report_id)
        trail = AuditTrail(session)

        first = await trail.append(report, "manual_review_required", "draft", "pending",
                                   approved_by="Auto-Approval System", reason="late submission")
        second = await trail.append(report, "approved", "pending", "approved",
                                    approved_by="reviewer@example.org", reason="Manual Review Passed",
                                    notes="Reviewed corrective plan")
        await session.commit()

        entries = await trail.list_for_report(report_id)
        assert [e.id for e in entries] == [first.id, second.id]
        assert entries[0].jurisdiction_id == report.jurisdiction_id
        assert entries[1].notes == "Reviewed corrective plan"

    async def test_entries_scoped_to_report(self, session, make_report, compliant_jobs):
        first_id = await make_report(compliant_jobs)
        second_id = await make_report(compliant_jobs)
        trail = AuditTrail(session)
        await trail.append(await session.get(Report, first_id), "rejected", "draft", "rejected")
        await session.commit()

        assert await trail.list_for_report(second_id) == []
        count = (await session.execute(select(ApprovalHistoryEntry))).scalars().all()
        assert len(count) == 1

    async def test_summarize_report_without_analysis(self, session, make_report, compliant_jobs):
        report = await session.get(Report, await make_report(compliant_jobs))
        assert summarize_report(report) == "No compliance analysis on record"
