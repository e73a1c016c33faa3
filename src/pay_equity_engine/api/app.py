"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pay_equity_engine.api.routes import deadlines_router, health_router, reports_router
from pay_equity_engine.config import configure_logging, get_settings
from pay_equity_engine.database import dispose_db, init_db
from pay_equity_engine.errors import PayEquityError

logger = logging.getLogger(__name__)

# HTTP status per error kind; unknown kinds map to 400
ERROR_STATUS = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "invalid_state": status.HTTP_409_CONFLICT,
    "concurrent_modification": status.HTTP_409_CONFLICT,
    "validation_error": status.HTTP_422_UNPROCESSABLE_CONTENT,
    "insufficient_data": status.HTTP_422_UNPROCESSABLE_CONTENT,
    "invalid_classification": status.HTTP_422_UNPROCESSABLE_CONTENT,
    "dependency_failure": status.HTTP_502_BAD_GATEWAY,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    configure_logging()
    init_db()
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title="Pay Equity Engine API",
        description="Pay equity compliance determination and approval workflow",
        version=settings.engine_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayEquityError)
    async def pay_equity_exception_handler(
        request: Request, exc: PayEquityError
    ) -> JSONResponse:
        """Render domain errors with their stable kind."""
        status_code = ERROR_STATUS.get(exc.kind, status.HTTP_400_BAD_REQUEST)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={
                "detail": str(exc),
                "code": exc.kind,
                "context": exc.to_dict(),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(reports_router, prefix="/api/v1")
    app.include_router(deadlines_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
