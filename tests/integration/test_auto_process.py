"""Automatic disposition of submitted reports."""

from datetime import datetime, timezone

import pytest

from factories import CENTRAL, female_jobs, make_job, male_jobs
from pay_equity_engine.errors import DependencyFailure, InsufficientData, InvalidClassification
from pay_equity_engine.ports import NotificationType


class TestAutoApproval:
    """Compliant, on-time reports are approved without a reviewer."""

    async def test_compliant_report_auto_approved(self, run, stored, make_report, compliant_jobs, renderer):
        report_id = await make_report(compliant_jobs)

        outcome = await run("auto_process", report_id)

        assert outcome.auto_approved is True
        assert outcome.certificate.file_name == "Lake_Haven_Certificate_2024.pdf"
        assert renderer.calls == 1

        state = await stored(report_id)
        report = state.report
        assert report.approval_status == "auto_approved"
        assert report.auto_approved is True
        assert report.approved_by == "Auto-Approval System"
        assert report.approved_at is not None
        assert report.case_status == "In Compliance"
        assert report.compliance_status == "In Compliance"
        assert report.certificate_generated_at is not None
        assert report.submitted_on_time is True
        assert report.requires_manual_review is False
        assert report.test_results["statistical"]["ratio"] == "100.00"

        assert len(state.certificates) == 1
        assert [h.action_type for h in state.history] == ["auto_approved"]
        entry = state.history[0]
        assert entry.previous_status == "draft"
        assert entry.new_status == "auto_approved"
        assert entry.reason.startswith("Passed all compliance tests")

    async def test_identical_points_and_pay_scenario(self, run, stored, make_report):
        """Four male and one female class at the same points and pay."""
        jobs = male_jobs([(200, 5000)] * 4) + female_jobs([(200, 5000)])
        report_id = await make_report(jobs)

        outcome = await run("auto_process", report_id)

        assert outcome.auto_approved is True
        assert outcome.compliance.statistical_test.ratio == 100
        state = await stored(report_id)
        assert state.report.approval_status == "auto_approved"
        assert len(state.certificates) == 1
        assert len(state.history) == 1

    async def test_approval_notifications_for_each_contact(self, run, make_report, compliant_jobs):
        report_id = await make_report(compliant_jobs)

        outcome = await run("auto_process", report_id)

        assert {n.recipient_email for n in outcome.notifications} == {
            "clerk@lakehaven.example",
            "hr@lakehaven.example",
        }
        assert all(
            n.notification_type == NotificationType.APPROVAL_NOTIFICATION
            for n in outcome.notifications
        )

    async def test_second_run_is_noop(self, run, stored, make_report, compliant_jobs, renderer):
        report_id = await make_report(compliant_jobs)
        await run("auto_process", report_id)

        again = await run("auto_process", report_id)

        assert again.auto_approved is False
        assert again.changed is False
        assert again.notifications == []
        assert renderer.calls == 1
        state = await stored(report_id)
        assert len(state.certificates) == 1
        assert len(state.history) == 1


class TestRoutedToReviewer:
    """Reports that need a human end up pending."""

    @pytest.mark.parametrize(
        "submitted_at",
        [datetime(2024, 2, 1, 0, 0, 0, tzinfo=CENTRAL), None],
        ids=["late", "never-submitted"],
    )
    async def test_late_submission(self, run, stored, make_report, compliant_jobs, renderer, submitted_at):
        report_id = await make_report(compliant_jobs, submitted_at=submitted_at)

        outcome = await run("auto_process", report_id)

        assert outcome.auto_approved is False
        assert outcome.compliance is None
        assert renderer.calls == 0
        [notice] = outcome.notifications
        assert notice.notification_type == NotificationType.STAFF_NOTIFICATION
        assert notice.recipient_email == "staff@example.org"

        state = await stored(report_id)
        assert state.report.approval_status == "pending"
        assert state.report.requires_manual_review is True
        assert state.report.submitted_on_time is False
        assert state.report.test_results is None
        assert state.certificates == []
        assert [(h.action_type, h.reason) for h in state.history] == [
            ("manual_review_required", "late submission")
        ]

    async def test_last_second_submission_is_on_time(self, run, stored, make_report, compliant_jobs):
        report_id = await make_report(
            compliant_jobs, submitted_at=datetime(2024, 1, 31, 23, 59, 59, tzinfo=CENTRAL)
        )

        outcome = await run("auto_process", report_id)

        assert outcome.auto_approved is True

    async def test_utc_submission_judged_in_local_time(self, run, stored, make_report, compliant_jobs):
        """05:30 UTC on February 1 is still January 31 in Chicago."""
        report_id = await make_report(
            compliant_jobs, submitted_at=datetime(2024, 2, 1, 5, 30, tzinfo=timezone.utc)
        )

        outcome = await run("auto_process", report_id)

        assert outcome.auto_approved is True
        state = await stored(report_id)
        assert state.report.submitted_at == datetime(2024, 2, 1, 5, 30, tzinfo=timezone.utc)
        assert state.report.submitted_at.tzinfo is not None
        assert state.report.submitted_on_time is True

    async def test_utc_submission_after_local_midnight_is_late(self, run, stored, make_report, compliant_jobs):
        report_id = await make_report(
            compliant_jobs, submitted_at=datetime(2024, 2, 1, 6, 0, tzinfo=timezone.utc)
        )

        outcome = await run("auto_process", report_id)

        assert outcome.auto_approved is False
        assert (await stored(report_id)).report.submitted_on_time is False

    async def test_few_male_classes_pending_despite_passing(self, run, stored, make_report):
        jobs = male_jobs([(100, 3000), (300, 5000)]) + female_jobs(
            [(100, 3000), (150, 3500), (200, 4000), (250, 4500), (300, 5000)]
        )
        report_id = await make_report(jobs)

        outcome = await run("auto_process", report_id)

        assert outcome.auto_approved is False
        assert outcome.compliance.statistical_test.passed is True
        state = await stored(report_id)
        assert state.report.approval_status == "pending"
        assert state.report.requires_manual_review is True
        assert state.report.test_results is not None
        assert state.certificates == []
        assert state.history[0].action_type == "manual_review_required"
        assert state.history[0].reason == "three or fewer male-dominated classes"

    async def test_failed_tests(self, run, stored, make_report, failing_jobs, renderer):
        report_id = await make_report(failing_jobs)

        outcome = await run("auto_process", report_id)

        assert outcome.auto_approved is False
        assert "Failed compliance tests" in outcome.notifications[0].payload["reason"]
        assert renderer.calls == 0
        state = await stored(report_id)
        assert state.report.approval_status == "pending"
        assert state.report.case_status == "Out of Compliance"
        assert state.report.compliance_status == "Out of Compliance"
        assert state.report.test_results["statistical"]["passed"] is False
        assert state.history[0].action_type == "failed_tests"
        assert "Statistical analysis: failed" in state.history[0].reason

    async def test_pending_report_can_be_reprocessed(self, run, stored, make_report, failing_jobs):
        report_id = await make_report(failing_jobs)
        await run("auto_process", report_id)

        await run("auto_process", report_id)

        state = await stored(report_id)
        assert state.report.approval_status == "pending"
        assert [(h.previous_status, h.new_status) for h in state.history] == [
            ("draft", "pending"),
            ("pending", "pending"),
        ]


class TestAnalysisErrors:
    """Errors abort before anything is written."""

    async def test_invalid_classification(self, run, stored, make_report, compliant_jobs):
        jobs = compliant_jobs + [make_job(50, 100, 3000, male_count=1, esp="hazard")]
        report_id = await make_report(jobs)

        with pytest.raises(InvalidClassification):
            await run("auto_process", report_id)

        state = await stored(report_id)
        assert state.report.approval_status == "draft"
        assert state.history == []

    async def test_no_job_classes(self, run, stored, make_report):
        report_id = await make_report([])

        with pytest.raises(InsufficientData):
            await run("auto_process", report_id)

        assert (await stored(report_id)).report.approval_status == "draft"

    async def test_renderer_failure_leaves_report_untouched(
        self, run, stored, make_report, compliant_jobs, failing_renderer
    ):
        report_id = await make_report(compliant_jobs)

        with pytest.raises(DependencyFailure) as exc_info:
            await run("auto_process", report_id, renderer_override=failing_renderer)

        assert exc_info.value.kind == "dependency_failure"
        state = await stored(report_id)
        assert state.report.approval_status == "draft"
        assert state.report.test_results is None
        assert state.certificates == []
        assert state.history == []

    async def test_retry_after_renderer_failure(
        self, run, stored, make_report, compliant_jobs, failing_renderer
    ):
        report_id = await make_report(compliant_jobs)
        with pytest.raises(DependencyFailure):
            await run("auto_process", report_id, renderer_override=failing_renderer)

        outcome = await run("auto_process", report_id)

        assert outcome.auto_approved is True
        assert len((await stored(report_id)).certificates) == 1
