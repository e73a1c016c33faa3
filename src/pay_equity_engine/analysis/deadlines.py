"""Statutory submission deadline evaluation.

Reports for a reporting year are due January 31 of that year, 23:59:59 local
time. Naive timestamps are read as local wall time in the configured zone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import TYPE_CHECKING

from pay_equity_engine.config import get_settings

if TYPE_CHECKING:
    from pay_equity_engine.models import Report


class SubmissionStatus(str, Enum):
    """Reporting status of a jurisdiction for one reporting year."""

    SUBMITTED_COMPLIANT = "submitted_compliant"
    SUBMITTED_NON_COMPLIANT = "submitted_non_compliant"
    DUE_SOON = "due_soon"
    PENDING = "pending"
    OVERDUE = "overdue"


class OverdueSeverity(str, Enum):
    NONE = "none"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ReminderType(str, Enum):
    APPROACHING_90D = "approaching_90d"
    APPROACHING_60D = "approaching_60d"
    APPROACHING_30D = "approaching_30d"
    APPROACHING_7D = "approaching_7d"
    OVERDUE_1D = "overdue_1d"
    OVERDUE_30D = "overdue_30d"


DUE_SOON_DAYS = 60
OVERDUE_REMINDER_INTERVAL_DAYS = 30

# (lower bound exclusive, upper bound inclusive, reminder) for days until due
_APPROACHING_WINDOWS = [
    (0, 7, ReminderType.APPROACHING_7D),
    (7, 30, ReminderType.APPROACHING_30D),
    (30, 60, ReminderType.APPROACHING_60D),
    (60, 90, ReminderType.APPROACHING_90D),
]


@dataclass(frozen=True)
class DeadlineInfo:
    """Deadline position of a reporting year relative to a given day."""

    report_year: int
    deadline: datetime
    days_until_due: int
    days_overdue: int
    status: SubmissionStatus
    overdue_severity: OverdueSeverity

    @property
    def is_overdue(self) -> bool:
        return self.days_overdue > 0

    @property
    def is_due_soon(self) -> bool:
        return 0 < self.days_until_due <= DUE_SOON_DAYS

    @property
    def formatted_deadline(self) -> str:
        return f"{self.deadline:%B} {self.deadline.day}, {self.deadline.year}"


def _resolve_tz(tz: tzinfo | None) -> tzinfo:
    return tz if tz is not None else get_settings().deadline_tz


def submission_deadline(report_year: int, tz: tzinfo | None = None) -> datetime:
    """January 31 of the reporting year, 23:59:59 local time."""
    return datetime(report_year, 1, 31, 23, 59, 59, tzinfo=_resolve_tz(tz))


def to_local(moment: datetime, tz: tzinfo | None = None) -> datetime:
    """Express a timestamp in the deadline zone; naive values are local wall time."""
    zone = _resolve_tz(tz)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def is_on_time(
    submitted_at: datetime | None,
    report_year: int,
    tz: tzinfo | None = None,
) -> bool:
    """Whether a submission met its deadline. Fails closed when never submitted."""
    if submitted_at is None:
        return False
    return to_local(submitted_at, tz) <= submission_deadline(report_year, tz)


def on_time(report: Report, tz: tzinfo | None = None) -> bool:
    """Whether a report was submitted by its reporting year's deadline."""
    return is_on_time(report.submitted_at, report.report_year, tz)


def days_until_deadline(report_year: int, today: date) -> int:
    """Calendar days from ``today`` until the deadline day (negative once past)."""
    return (date(report_year, 1, 31) - today).days


def days_overdue(report_year: int, today: date) -> int:
    remaining = days_until_deadline(report_year, today)
    return -remaining if remaining < 0 else 0


def overdue_severity(overdue_days: int) -> OverdueSeverity:
    if overdue_days <= 0:
        return OverdueSeverity.NONE
    if overdue_days >= 90:
        return OverdueSeverity.CRITICAL
    if overdue_days >= 31:
        return OverdueSeverity.HIGH
    return OverdueSeverity.MEDIUM


def submission_status(
    has_submitted: bool,
    is_compliant: bool | None,
    report_year: int,
    today: date,
) -> SubmissionStatus:
    if has_submitted:
        if is_compliant is False:
            return SubmissionStatus.SUBMITTED_NON_COMPLIANT
        return SubmissionStatus.SUBMITTED_COMPLIANT

    remaining = days_until_deadline(report_year, today)
    if remaining < 0:
        return SubmissionStatus.OVERDUE
    if remaining <= DUE_SOON_DAYS:
        return SubmissionStatus.DUE_SOON
    return SubmissionStatus.PENDING


def deadline_info(
    report_year: int,
    today: date,
    has_submitted: bool = False,
    is_compliant: bool | None = None,
    tz: tzinfo | None = None,
) -> DeadlineInfo:
    overdue = days_overdue(report_year, today)
    return DeadlineInfo(
        report_year=report_year,
        deadline=submission_deadline(report_year, tz),
        days_until_due=days_until_deadline(report_year, today),
        days_overdue=overdue,
        status=submission_status(has_submitted, is_compliant, report_year, today),
        overdue_severity=overdue_severity(overdue),
    )


def next_reminder(
    report_year: int,
    today: date,
    last_reminder_type: str | None = None,
    last_reminder_date: date | None = None,
) -> ReminderType | None:
    """Reminder to send today for an unsubmitted report, if any."""
    overdue = days_overdue(report_year, today)
    if overdue > 0:
        if overdue == 1 and last_reminder_type != ReminderType.OVERDUE_1D.value:
            return ReminderType.OVERDUE_1D
        if overdue >= OVERDUE_REMINDER_INTERVAL_DAYS and (
            last_reminder_date is None
            or (today - last_reminder_date).days >= OVERDUE_REMINDER_INTERVAL_DAYS
        ):
            return ReminderType.OVERDUE_30D
        return None

    remaining = days_until_deadline(report_year, today)
    for lower, upper, reminder in _APPROACHING_WINDOWS:
        if lower < remaining <= upper and last_reminder_type != reminder.value:
            return reminder
    return None
