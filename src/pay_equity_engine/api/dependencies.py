"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from pay_equity_engine.config import Settings, get_settings
from pay_equity_engine.database import get_session_factory
from pay_equity_engine.notifications import EmailLogNotifier, NotificationDispatcher
from pay_equity_engine.ports import CertificateRenderer, TextCertificateRenderer
from pay_equity_engine.services import ApprovalService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with get_session_factory()() as session:
        yield session


async def get_reviewer(
    x_reviewer: Annotated[str | None, Header()] = None
) -> str:
    """Extract the acting reviewer from header."""
    if not x_reviewer or not x_reviewer.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Reviewer header is required",
        )
    return x_reviewer.strip()


def get_app_settings() -> Settings:
    return get_settings()


def get_certificate_renderer() -> CertificateRenderer:
    return TextCertificateRenderer()


def get_notification_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(EmailLogNotifier(get_session_factory()))


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Reviewer = Annotated[str, Depends(get_reviewer)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Renderer = Annotated[CertificateRenderer, Depends(get_certificate_renderer)]
Dispatcher = Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)]


async def get_approval_service(
    db: DbSession,
    renderer: Renderer,
    settings: AppSettings,
) -> ApprovalService:
    return ApprovalService(db, renderer, settings)


Approvals = Annotated[ApprovalService, Depends(get_approval_service)]
