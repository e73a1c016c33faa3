"""Integration fixtures: service runner, state inspection and API client."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from pay_equity_engine.api.app import create_app
from pay_equity_engine.api.dependencies import (
    get_app_settings,
    get_certificate_renderer,
    get_db_session,
    get_notification_dispatcher,
)
from pay_equity_engine.models import ApprovalHistoryEntry, ComplianceCertificate, Report
from pay_equity_engine.notifications import InMemoryNotifier, NotificationDispatcher
from pay_equity_engine.services import ApprovalService


@dataclass
class StoredState:
    """Committed state of one report."""

    report: Report
    certificates: list[ComplianceCertificate]
    history: list[ApprovalHistoryEntry]


@pytest.fixture
def run(session_factory, renderer, test_settings):
    """Run one service operation in its own session, like one request would."""

    async def _run(operation: str, *args, renderer_override=None, **kwargs):
        async with session_factory() as session:
            service = ApprovalService(session, renderer_override or renderer, test_settings)
            return await getattr(service, operation)(*args, **kwargs)

    return _run


@pytest.fixture
def stored(session_factory):
    """Read a report's committed state in a fresh session."""

    async def _stored(report_id: UUID) -> StoredState:
        async with session_factory() as session:
            report = await session.get(Report, report_id)
            certificates = (
                await session.execute(
                    select(ComplianceCertificate).where(ComplianceCertificate.report_id == report_id)
                )
            ).scalars().all()
            history = (
                await session.execute(
                    select(ApprovalHistoryEntry)
                    .where(ApprovalHistoryEntry.report_id == report_id)
                    .order_by(ApprovalHistoryEntry.created_at)
                )
            ).scalars().all()
            return StoredState(report=report, certificates=list(certificates), history=list(history))

    return _stored


@pytest.fixture
def notifier() -> InMemoryNotifier:
    return InMemoryNotifier()


@pytest.fixture
def app(session_factory, renderer, notifier, test_settings):
    """Application wired to the test database and in-memory collaborators."""
    application = create_app()

    async def _db_session() -> AsyncGenerator:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = _db_session
    application.dependency_overrides[get_certificate_renderer] = lambda: renderer
    application.dependency_overrides[get_notification_dispatcher] = (
        lambda: NotificationDispatcher(notifier)
    )
    application.dependency_overrides[get_app_settings] = lambda: test_settings
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
