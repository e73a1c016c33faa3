"""Pytest fixtures for pay equity engine tests."""

from __future__ import annotations

from datetime import datetime
from typing import AsyncGenerator, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from factories import CENTRAL, FailingRenderer, RecordingRenderer, female_jobs, male_jobs
from pay_equity_engine.analysis.types import JobRecord
from pay_equity_engine.config import Settings
from pay_equity_engine.database import create_schema, get_engine, make_session_factory
from pay_equity_engine.models import Contact, JobClassification, Jurisdiction, Report


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests, independent of the process environment."""
    return Settings(
        database_url="sqlite+aiosqlite://",
        engine_version="test",
        host="127.0.0.1",
        port=8000,
        debug=False,
        deadline_timezone="America/Chicago",
        staff_notification_email="staff@example.org",
        auto_approval_actor="Auto-Approval System",
        log_level="DEBUG",
    )


# ============================================================================
# Database fixtures
# ============================================================================


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite so separate sessions see each other's commits."""
    engine = get_engine(f"sqlite+aiosqlite:///{tmp_path / 'pay_equity.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def jurisdiction(session_factory: async_sessionmaker[AsyncSession]) -> Jurisdiction:
    """A city with a primary and a secondary contact."""
    async with session_factory() as session:
        city = Jurisdiction(
            jurisdiction_id="CITY-0042",
            name="Lake Haven",
            jurisdiction_type="City",
            city="Lake Haven",
            state="MN",
        )
        session.add(city)
        await session.flush()
        session.add_all([
            Contact(
                jurisdiction_id=city.id,
                name="Dana Clerk",
                title="City Clerk",
                email="clerk@lakehaven.example",
                is_primary=True,
            ),
            Contact(
                jurisdiction_id=city.id,
                name="Robin Payroll",
                title="HR Director",
                email="hr@lakehaven.example",
            ),
        ])
        await session.commit()
        return city


@pytest.fixture
def make_report(
    session_factory: async_sessionmaker[AsyncSession],
    jurisdiction: Jurisdiction,
) -> Callable:
    """Factory persisting a report with its job classes; returns the report id."""
    case_numbers = iter(range(1, 1000))

    async def _make_report(
        jobs: list[JobRecord],
        submitted_at: datetime | None = datetime(2024, 1, 15, 10, 0, tzinfo=CENTRAL),
        report_year: int = 2024,
        approval_status: str = "draft",
    ):
        async with session_factory() as session:
            report = Report(
                jurisdiction_id=jurisdiction.id,
                report_year=report_year,
                case_number=next(case_numbers),
                case_description="Annual report",
                approval_status=approval_status,
                submitted_at=submitted_at,
            )
            session.add(report)
            await session.flush()
            session.add_all([
                JobClassification(
                    report_id=report.id,
                    job_number=j.job_number,
                    title=j.title,
                    points=j.points,
                    male_count=j.male_count,
                    female_count=j.female_count,
                    min_salary=j.min_salary,
                    max_salary=j.max_salary,
                    years_to_max=j.years_to_max,
                    years_service_pay=j.years_service_pay,
                    exceptional_service_code=j.exceptional_service_code,
                )
                for j in jobs
            ])
            await session.commit()
            return report.id

    return _make_report


# ============================================================================
# Collaborator doubles and job sets
# ============================================================================


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def failing_renderer() -> FailingRenderer:
    return FailingRenderer()


@pytest.fixture
def compliant_jobs() -> list[JobRecord]:
    """Four male and three female classes on the same pay line."""
    return male_jobs() + female_jobs([(100, 3000), (200, 4000), (300, 5000)])


@pytest.fixture
def failing_jobs() -> list[JobRecord]:
    """Female classes paid half of predicted pay."""
    return male_jobs() + female_jobs([(100, 1500), (200, 2000), (300, 2500)])
