"""Subject and body wording for workflow notifications."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from pay_equity_engine.ports.base import NotificationRequest, NotificationType

if TYPE_CHECKING:
    from pay_equity_engine.models import Contact, Jurisdiction, Report

STAFF_RECIPIENT_NAME = "Pay Equity Staff"

UNIT_CONTACT = "(651) 259-3824 or payequity.mmb@state.mn.us"

_STAFF_BODY = """\
A new case has been submitted for approval:

Jurisdiction: {jurisdiction_name}
Jurisdiction ID: {jurisdiction_code}
Report Year: {report_year}
Case Number: {case_number}
Submission Date: {submitted_at}

Status: {reason}

Please review this case in the approval dashboard."""

_APPROVAL_BODY = """\
Dear {contact_name},

Congratulations! Your pay equity report for {report_year} has been automatically approved.

Jurisdiction: {jurisdiction_name}
Report Year: {report_year}
Case Number: {case_number}
Status: In Compliance

Your compliance certificate ({file_name}) is available for download. Please post it in a \
prominent location accessible to all employees for at least 90 days as required by \
Minnesota law.

If you have any questions, please contact the Pay Equity Unit at {unit_contact}.

Thank you for your compliance with the Minnesota Local Government Pay Equity Act.

Sincerely,
Minnesota Management and Budget
Pay Equity Unit"""

_BODIES = {
    NotificationType.STAFF_NOTIFICATION: _STAFF_BODY,
    NotificationType.APPROVAL_NOTIFICATION: _APPROVAL_BODY,
}


def staff_notification(
    report: Report,
    jurisdiction: Jurisdiction,
    reason: str,
    staff_email: str,
    requested_by: str | None = None,
) -> NotificationRequest:
    """Tell pay equity staff a case is waiting in the review queue."""
    submitted = report.submitted_at.isoformat() if report.submitted_at else "not submitted"
    return NotificationRequest(
        notification_type=NotificationType.STAFF_NOTIFICATION,
        recipient_email=staff_email,
        recipient_name=STAFF_RECIPIENT_NAME,
        subject=f"Case Submitted for Approval - {jurisdiction.name}",
        payload={
            "jurisdiction_name": jurisdiction.name,
            "jurisdiction_code": jurisdiction.jurisdiction_id,
            "report_year": report.report_year,
            "case_number": report.case_number,
            "submitted_at": submitted,
            "reason": reason,
        },
        report_id=report.id,
        jurisdiction_id=jurisdiction.id,
        report_year=report.report_year,
        requested_by=requested_by,
    )


def approval_notifications(
    report: Report,
    jurisdiction: Jurisdiction,
    contacts: Iterable[Contact],
    file_name: str,
    requested_by: str | None = None,
) -> list[NotificationRequest]:
    """One approval notice per jurisdiction contact."""
    subject = f"Pay Equity Report Approved - {jurisdiction.name} - {report.report_year}"
    return [
        NotificationRequest(
            notification_type=NotificationType.APPROVAL_NOTIFICATION,
            recipient_email=contact.email,
            recipient_name=contact.name,
            subject=subject,
            payload={
                "contact_name": contact.name,
                "jurisdiction_name": jurisdiction.name,
                "report_year": report.report_year,
                "case_number": report.case_number,
                "file_name": file_name,
            },
            report_id=report.id,
            jurisdiction_id=jurisdiction.id,
            report_year=report.report_year,
            requested_by=requested_by,
        )
        for contact in contacts
    ]


def render_body(request: NotificationRequest) -> str:
    """Plain-text body for a request."""
    template = _BODIES[NotificationType(request.notification_type)]
    return template.format(unit_contact=UNIT_CONTACT, **request.payload)
