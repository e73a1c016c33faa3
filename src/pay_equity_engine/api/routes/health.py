"""Liveness, readiness and health probes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import func, select, text

from pay_equity_engine.api.dependencies import AppSettings, DbSession
from pay_equity_engine.models import Report

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service health with its database status."""

    status: str
    timestamp: datetime
    database: str
    version: str
    deadline_timezone: str


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession, settings: AppSettings) -> HealthResponse:
    """Report degraded rather than failing when the database is down."""
    database = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        database = "unhealthy"

    return HealthResponse(
        status="healthy" if database == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        database=database,
        version=settings.engine_version,
        deadline_timezone=settings.deadline_timezone,
    )


@router.get("/ready")
async def readiness_check(db: DbSession) -> JSONResponse:
    """Ready once the report tables can be queried."""
    try:
        reports = (await db.execute(select(func.count()).select_from(Report))).scalar_one()
    except Exception:
        logger.exception("Readiness probe could not query reports")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready"},
        )
    return JSONResponse(content={"status": "ready", "reports": reports})


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
