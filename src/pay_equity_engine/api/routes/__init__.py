"""API routes."""

from pay_equity_engine.api.routes.deadlines import router as deadlines_router
from pay_equity_engine.api.routes.health import router as health_router
from pay_equity_engine.api.routes.reports import router as reports_router

__all__ = ["deadlines_router", "health_router", "reports_router"]
