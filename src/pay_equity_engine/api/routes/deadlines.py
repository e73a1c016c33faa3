"""Submission deadline endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query

from pay_equity_engine.analysis.deadlines import deadline_info, next_reminder
from pay_equity_engine.api.dependencies import AppSettings
from pay_equity_engine.api.schemas import DeadlineResponse

router = APIRouter(prefix="/deadlines", tags=["deadlines"])


@router.get("/{report_year}", response_model=DeadlineResponse)
async def get_deadline(
    settings: AppSettings,
    report_year: Annotated[int, Path(ge=1900, le=9999)],
    as_of: Annotated[date | None, Query()] = None,
    submitted: bool = False,
    last_reminder: str | None = None,
    last_reminder_date: date | None = None,
) -> DeadlineResponse:
    """Deadline position of a reporting year, as of today unless ``as_of`` is given."""
    tz = settings.deadline_tz
    today = as_of or date.today()
    info = deadline_info(report_year, today, has_submitted=submitted, tz=tz)
    reminder = None
    if not submitted:
        reminder = next_reminder(report_year, today, last_reminder, last_reminder_date)

    return DeadlineResponse(
        report_year=report_year,
        as_of=today,
        deadline=info.deadline,
        formatted_deadline=info.formatted_deadline,
        days_until_due=info.days_until_due,
        days_overdue=info.days_overdue,
        status=info.status.value,
        overdue_severity=info.overdue_severity.value,
        next_reminder=reminder.value if reminder else None,
    )
