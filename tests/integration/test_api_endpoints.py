"""HTTP API tests."""

from uuid import uuid4

from factories import FailingRenderer, make_job
from pay_equity_engine.api.app import ERROR_STATUS
from pay_equity_engine.api.dependencies import get_certificate_renderer

REVIEWER = {"X-Reviewer": "reviewer@mmb.example"}


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "healthy"
        assert body["version"] == "test"
        assert body["deadline_timezone"] == "America/Chicago"

    async def test_ready(self, client, make_report, compliant_jobs):
        await make_report(compliant_jobs)

        response = await client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready", "reports": 1}

    async def test_live(self, client):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}


class TestReportEndpoints:
    """Tests for report read endpoints."""

    async def test_get_report(self, client, make_report, compliant_jobs):
        report_id = await make_report(compliant_jobs)

        response = await client.get(f"/api/v1/reports/{report_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == str(report_id)
        assert body["approval_status"] == "draft"
        assert len(body["job_classifications"]) == 7

    async def test_get_missing_report(self, client):
        response = await client.get(f"/api/v1/reports/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    async def test_compliance_does_not_change_status(self, client, make_report, failing_jobs):
        report_id = await make_report(failing_jobs)

        response = await client.get(f"/api/v1/reports/{report_id}/compliance")

        assert response.status_code == 200
        body = response.json()
        assert body["is_compliant"] is False
        assert body["failed_tests"] == ["statistical"]
        assert body["summary"].startswith("Failed one or more compliance tests.")

        report = (await client.get(f"/api/v1/reports/{report_id}")).json()
        assert report["approval_status"] == "draft"

    async def test_invalid_classification(self, client, make_report):
        report_id = await make_report([make_job(1, 100, 3000, male_count=5, esp="hazard")])

        response = await client.get(f"/api/v1/reports/{report_id}/compliance")

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "invalid_classification"
        assert body["context"]["problems"]

    async def test_reason_codes(self, client):
        response = await client.get("/api/v1/reports/reason-codes")

        assert response.status_code == 200
        body = response.json()
        assert "Passed All Tests" in body["approval"]
        assert len(body["approval"]) == 4
        assert "Other" in body["rejection"]
        assert len(body["rejection"]) == 6


class TestApprovalEndpoints:
    """Tests for approval operations over HTTP."""

    async def test_auto_process(self, client, notifier, make_report, compliant_jobs):
        report_id = await make_report(compliant_jobs)

        response = await client.post(f"/api/v1/reports/{report_id}/auto-process")

        assert response.status_code == 200
        body = response.json()
        assert body["changed"] is True
        assert body["auto_approved"] is True
        assert body["report"]["approval_status"] == "auto_approved"
        assert body["certificate"]["file_name"] == "Lake_Haven_Certificate_2024.pdf"
        assert body["notifications_queued"] == 2
        assert sorted(r.recipient_email for r in notifier.sent) == [
            "clerk@lakehaven.example",
            "hr@lakehaven.example",
        ]

        history = (await client.get(f"/api/v1/reports/{report_id}/history")).json()
        assert history["total"] == 1
        assert history["items"][0]["action_type"] == "auto_approved"

    async def test_auto_process_terminal_is_noop(self, client, notifier, make_report, compliant_jobs):
        report_id = await make_report(compliant_jobs)
        await client.post(f"/api/v1/reports/{report_id}/auto-process")
        notifier.sent.clear()

        response = await client.post(f"/api/v1/reports/{report_id}/auto-process")

        assert response.status_code == 200
        assert response.json()["changed"] is False
        assert notifier.sent == []

    async def test_approve(self, client, notifier, make_report, failing_jobs):
        report_id = await make_report(failing_jobs)
        await client.post(f"/api/v1/reports/{report_id}/auto-process")
        notifier.sent.clear()

        response = await client.post(
            f"/api/v1/reports/{report_id}/approve",
            json={"reason_code": "Corrective Action Completed"},
            headers=REVIEWER,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["report"]["approval_status"] == "approved"
        assert body["report"]["approved_by"] == "reviewer@mmb.example"
        assert body["certificate"] is not None
        assert body["notifications_queued"] == 0
        assert notifier.sent == []

    async def test_approve_requires_reviewer(self, client, make_report, compliant_jobs):
        report_id = await make_report(compliant_jobs)

        response = await client.post(
            f"/api/v1/reports/{report_id}/approve",
            json={"reason_code": "Passed All Tests"},
        )

        assert response.status_code == 400

    async def test_approve_empty_reason(self, client, make_report, compliant_jobs):
        report_id = await make_report(compliant_jobs)

        response = await client.post(
            f"/api/v1/reports/{report_id}/approve",
            json={"reason_code": ""},
            headers=REVIEWER,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"
        assert response.json()["context"]["field"] == "reason_code"

    async def test_reject(self, client, make_report, compliant_jobs):
        report_id = await make_report(compliant_jobs)

        response = await client.post(
            f"/api/v1/reports/{report_id}/reject",
            json={"reason_code": "Incomplete Data", "notes": "Benefits missing"},
            headers=REVIEWER,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["report"]["approval_status"] == "rejected"
        assert body["report"]["rejection_reason"] == "Incomplete Data: Benefits missing"
        assert body["certificate"] is None

    async def test_reject_decided_report(self, client, make_report, compliant_jobs):
        report_id = await make_report(compliant_jobs)
        await client.post(f"/api/v1/reports/{report_id}/auto-process")

        response = await client.post(
            f"/api/v1/reports/{report_id}/reject",
            json={"reason_code": "Other", "notes": "Too late"},
            headers=REVIEWER,
        )

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "invalid_state"
        assert "auto_approved" in body["detail"]

    async def test_renderer_failure(self, app, client, make_report, compliant_jobs):
        app.dependency_overrides[get_certificate_renderer] = FailingRenderer
        report_id = await make_report(compliant_jobs)

        response = await client.post(f"/api/v1/reports/{report_id}/auto-process")

        assert response.status_code == 502
        assert response.json()["code"] == "dependency_failure"
        report = (await client.get(f"/api/v1/reports/{report_id}")).json()
        assert report["approval_status"] == "draft"


class TestDeadlineEndpoints:
    """Tests for the deadline endpoint."""

    async def test_overdue(self, client):
        response = await client.get("/api/v1/deadlines/2024", params={"as_of": "2024-02-05"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "overdue"
        assert body["days_overdue"] == 5
        assert body["overdue_severity"] == "medium"
        assert body["next_reminder"] is None
        assert body["formatted_deadline"] == "January 31, 2024"

    async def test_due_soon(self, client):
        response = await client.get("/api/v1/deadlines/2024", params={"as_of": "2024-01-25"})

        body = response.json()
        assert body["status"] == "due_soon"
        assert body["days_until_due"] == 6
        assert body["next_reminder"] == "approaching_7d"

    async def test_submitted_has_no_reminder(self, client):
        response = await client.get(
            "/api/v1/deadlines/2024",
            params={"as_of": "2024-01-25", "submitted": "true"},
        )

        body = response.json()
        assert body["status"] == "submitted_compliant"
        assert body["next_reminder"] is None


def test_error_kinds_map_to_status_codes():
    assert ERROR_STATUS == {
        "not_found": 404,
        "invalid_state": 409,
        "concurrent_modification": 409,
        "validation_error": 422,
        "insufficient_data": 422,
        "invalid_classification": 422,
        "dependency_failure": 502,
    }
